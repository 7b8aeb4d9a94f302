"""Ledger data model, transaction building and authorization signing"""

from .types import (
    ScVal, ScValType, SorobanTransactionData, AuthorizationEntry,
    SorobanCredentials, SorobanCredentialsType, Transaction,
)
from .builder import Account, TransactionBuilder, BASE_FEE, TIMEOUT_INFINITE
from .assemble import assemble_transaction
from .authorize import authorize_entry, build_authorization_preimage

__all__ = [
    "ScVal",
    "ScValType",
    "SorobanTransactionData",
    "AuthorizationEntry",
    "SorobanCredentials",
    "SorobanCredentialsType",
    "Transaction",
    "Account",
    "TransactionBuilder",
    "BASE_FEE",
    "TIMEOUT_INFINITE",
    "assemble_transaction",
    "authorize_entry",
    "build_authorization_preimage",
]
