"""
Soroban Contract Client

This package drives a single smart-contract invocation through its whole
lifecycle: build, simulate, restore archived state, collect authorization
signatures from other parties, sign and submit.
"""

# Lifecycle core
from .contract import (
    AssembledCall, CallRequest, ErrorMessage, SimulationData,
    SignAuthEntriesOptions, SignOptions, SimulateOptions,
    SentTransaction, Watcher, Ok, Err, DEFAULT_TIMEOUT,
    build, populate, simulate, sign, send, sign_and_send,
    needs_non_invoker_signing_by, sign_auth_entries, restore_footprint,
    to_json, from_json, to_xdr, from_xdr,
)

# Errors
from .runtime.errors import *
from .runtime.address import Address, AddressKind
from .runtime.network import Networks

# RPC
from .rpc import Server, ServerConfig

# Ledger model and signing
from .tx import ScVal, Transaction, AuthorizationEntry, SorobanTransactionData
from .signers import Keypair, BasicNodeSigner

__version__ = "0.1.0"
__all__ = [
    "AssembledCall",
    "CallRequest",
    "ErrorMessage",
    "SimulationData",
    "SignAuthEntriesOptions",
    "SignOptions",
    "SimulateOptions",
    "SentTransaction",
    "Watcher",
    "Ok",
    "Err",
    "DEFAULT_TIMEOUT",
    "build",
    "populate",
    "simulate",
    "sign",
    "send",
    "sign_and_send",
    "needs_non_invoker_signing_by",
    "sign_auth_entries",
    "restore_footprint",
    "to_json",
    "from_json",
    "to_xdr",
    "from_xdr",
    "Address",
    "AddressKind",
    "Networks",
    "Server",
    "ServerConfig",
    "ScVal",
    "Transaction",
    "AuthorizationEntry",
    "SorobanTransactionData",
    "Keypair",
    "BasicNodeSigner",
    "__version__",
]
