from .fakes import FakeServer
from .factories import (
    CONTRACT_ID,
    NETWORK,
    OTHER_CONTRACT_ID,
    RPC_URL,
    mk_address_auth_entry,
    mk_keypair,
    mk_ledger_key,
    mk_request,
    mk_source_auth_entry,
    mk_transaction_data,
    raw_simulation_error,
    raw_simulation_restore,
    raw_simulation_success,
)

__all__ = [
    "FakeServer",
    "CONTRACT_ID",
    "NETWORK",
    "OTHER_CONTRACT_ID",
    "RPC_URL",
    "mk_address_auth_entry",
    "mk_keypair",
    "mk_ledger_key",
    "mk_request",
    "mk_source_auth_entry",
    "mk_transaction_data",
    "raw_simulation_error",
    "raw_simulation_restore",
    "raw_simulation_success",
]
