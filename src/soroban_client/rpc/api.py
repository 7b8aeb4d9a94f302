"""
RPC response models.

Typed views of the JSON-RPC results the contract client consumes, and the
classifier that turns a raw simulation result into exactly one of the
error, restore-required or success shapes.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..tx.types import AuthorizationEntry, ScVal, SorobanTransactionData


_MODEL_CONFIG = {"populate_by_name": True}


class GetTransactionStatus(str, Enum):
    """Final status reported by ``getTransaction``."""
    SUCCESS = "SUCCESS"
    NOT_FOUND = "NOT_FOUND"
    FAILED = "FAILED"


class SendTransactionStatus(str, Enum):
    """Admission status reported by ``sendTransaction``."""
    PENDING = "PENDING"
    DUPLICATE = "DUPLICATE"
    TRY_AGAIN_LATER = "TRY_AGAIN_LATER"
    ERROR = "ERROR"


# =============================================================================
# Ledger and transaction queries
# =============================================================================

class GetLatestLedgerResponse(BaseModel):
    """Result of ``getLatestLedger``."""
    id: str = ""
    sequence: int
    protocol_version: int = Field(default=0, alias="protocolVersion")

    model_config = _MODEL_CONFIG


class SendTransactionResponse(BaseModel):
    """Result of ``sendTransaction``."""
    status: SendTransactionStatus
    hash: str
    latest_ledger: int = Field(default=0, alias="latestLedger")
    latest_ledger_close_time: Optional[int] = Field(default=None, alias="latestLedgerCloseTime")
    error_result: Optional[str] = Field(default=None, alias="errorResultXdr")

    model_config = _MODEL_CONFIG


class GetTransactionResponse(BaseModel):
    """Result of ``getTransaction``."""
    status: GetTransactionStatus
    latest_ledger: int = Field(default=0, alias="latestLedger")
    ledger: Optional[int] = None
    created_at: Optional[int] = Field(default=None, alias="createdAt")
    application_order: Optional[int] = Field(default=None, alias="applicationOrder")
    envelope_xdr: Optional[str] = Field(default=None, alias="envelopeXdr")
    result_xdr: Optional[str] = Field(default=None, alias="resultXdr")
    return_value: Optional[ScVal] = Field(default=None, alias="returnValue")

    model_config = _MODEL_CONFIG

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> GetTransactionResponse:
        data = dict(raw)
        if isinstance(data.get("returnValue"), str):
            data["returnValue"] = ScVal.from_wire(data["returnValue"])
        return cls.model_validate(data)


# =============================================================================
# Simulation
# =============================================================================

class SimulateHostFunctionResult(BaseModel):
    """Authorization requirements and return value of a simulated call."""
    auth: List[AuthorizationEntry] = Field(default_factory=list)
    retval: ScVal = Field(default_factory=ScVal.void)

    model_config = _MODEL_CONFIG


class RestorePreamble(BaseModel):
    """What a footprint restore needs: its fee and resource data."""
    min_resource_fee: int = Field(..., alias="minResourceFee")
    transaction_data: SorobanTransactionData = Field(..., alias="transactionData")

    model_config = _MODEL_CONFIG


class SimulateTransactionErrorResponse(BaseModel):
    """Simulation failed; ``error`` carries the host diagnostic."""
    error: str
    latest_ledger: int = Field(default=0, alias="latestLedger")
    events: List[Any] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class SimulateTransactionSuccessResponse(BaseModel):
    """Simulation succeeded."""
    transaction_data: SorobanTransactionData = Field(..., alias="transactionData")
    min_resource_fee: int = Field(default=0, alias="minResourceFee")
    result: Optional[SimulateHostFunctionResult] = None
    cost: Dict[str, Any] = Field(default_factory=dict)
    latest_ledger: int = Field(default=0, alias="latestLedger")
    events: List[Any] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class SimulateTransactionRestoreResponse(SimulateTransactionSuccessResponse):
    """Simulation succeeded, but archived entries must be restored first."""
    restore_preamble: RestorePreamble = Field(..., alias="restorePreamble")


SimulateTransactionResponse = Union[
    SimulateTransactionErrorResponse,
    SimulateTransactionRestoreResponse,
    SimulateTransactionSuccessResponse,
]


def is_simulation_error(sim: Any) -> bool:
    return isinstance(sim, SimulateTransactionErrorResponse)


def is_simulation_restore(sim: Any) -> bool:
    return isinstance(sim, SimulateTransactionRestoreResponse)


def is_simulation_success(sim: Any) -> bool:
    """True for a plain success; restore-required responses are excluded."""
    return isinstance(sim, SimulateTransactionSuccessResponse) and not is_simulation_restore(sim)


def parse_raw_simulation(raw: Dict[str, Any]) -> SimulateTransactionResponse:
    """
    Classify and decode a raw ``simulateTransaction`` result.

    Args:
        raw: JSON-RPC result with wire-encoded ``transactionData``,
            ``results[].auth[]``, ``results[].xdr`` and ``restorePreamble``

    Returns:
        Exactly one of the error, restore or success response models
    """
    base: Dict[str, Any] = {
        "latestLedger": int(raw.get("latestLedger", 0)),
        "events": list(raw.get("events") or []),
    }

    if raw.get("error"):
        return SimulateTransactionErrorResponse(error=str(raw["error"]), **base)

    success: Dict[str, Any] = dict(
        base,
        transactionData=SorobanTransactionData.from_wire(raw["transactionData"]),
        minResourceFee=int(raw.get("minResourceFee", 0)),
        cost=dict(raw.get("cost") or {}),
    )

    results = raw.get("results") or []
    if results:
        row = results[0]
        success["result"] = SimulateHostFunctionResult(
            auth=[AuthorizationEntry.from_wire(a) for a in row.get("auth") or []],
            retval=ScVal.from_wire(row["xdr"]) if row.get("xdr") else ScVal.void(),
        )

    preamble = raw.get("restorePreamble")
    if preamble:
        return SimulateTransactionRestoreResponse(
            restorePreamble=RestorePreamble(
                minResourceFee=int(preamble["minResourceFee"]),
                transactionData=SorobanTransactionData.from_wire(preamble["transactionData"]),
            ),
            **success,
        )

    return SimulateTransactionSuccessResponse(**success)


__all__ = [
    "GetTransactionStatus",
    "SendTransactionStatus",
    "GetLatestLedgerResponse",
    "SendTransactionResponse",
    "GetTransactionResponse",
    "SimulateHostFunctionResult",
    "RestorePreamble",
    "SimulateTransactionErrorResponse",
    "SimulateTransactionSuccessResponse",
    "SimulateTransactionRestoreResponse",
    "SimulateTransactionResponse",
    "is_simulation_error",
    "is_simulation_restore",
    "is_simulation_success",
    "parse_raw_simulation",
]
