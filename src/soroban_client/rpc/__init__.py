"""Soroban RPC client and response models"""

from .api import (
    GetLatestLedgerResponse,
    GetTransactionResponse,
    GetTransactionStatus,
    SendTransactionResponse,
    SendTransactionStatus,
    SimulateTransactionErrorResponse,
    SimulateTransactionRestoreResponse,
    SimulateTransactionSuccessResponse,
    is_simulation_error,
    is_simulation_restore,
    is_simulation_success,
    parse_raw_simulation,
)
from .server import Server, ServerConfig

__all__ = [
    "Server",
    "ServerConfig",
    "GetLatestLedgerResponse",
    "GetTransactionResponse",
    "GetTransactionStatus",
    "SendTransactionResponse",
    "SendTransactionStatus",
    "SimulateTransactionErrorResponse",
    "SimulateTransactionRestoreResponse",
    "SimulateTransactionSuccessResponse",
    "is_simulation_error",
    "is_simulation_restore",
    "is_simulation_success",
    "parse_raw_simulation",
]
