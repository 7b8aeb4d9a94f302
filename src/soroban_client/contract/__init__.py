"""Contract call lifecycle: build, simulate, restore, authorize, sign and send"""

from .options import (
    DEFAULT_TIMEOUT,
    CallRequest,
    ErrorMessage,
    SignAuthEntriesOptions,
    SignOptions,
    SimulateOptions,
)
from .assembled_call import AssembledCall, SimulationData, build, populate, simulate
from .auth import needs_non_invoker_signing_by, sign_auth_entries
from .restore import restore_footprint
from .signing import sign, send, sign_and_send
from .sent_transaction import SentTransaction, Watcher
from .serialization import to_json, from_json, to_xdr, from_xdr
from .result import Ok, Err, CONTRACT_ERROR_PATTERN, parse_contract_error

__all__ = [
    "DEFAULT_TIMEOUT",
    "CallRequest",
    "ErrorMessage",
    "SignAuthEntriesOptions",
    "SignOptions",
    "SimulateOptions",
    "AssembledCall",
    "SimulationData",
    "build",
    "populate",
    "simulate",
    "needs_non_invoker_signing_by",
    "sign_auth_entries",
    "restore_footprint",
    "sign",
    "send",
    "sign_and_send",
    "SentTransaction",
    "Watcher",
    "to_json",
    "from_json",
    "to_xdr",
    "from_xdr",
    "Ok",
    "Err",
    "CONTRACT_ERROR_PATTERN",
    "parse_contract_error",
]
