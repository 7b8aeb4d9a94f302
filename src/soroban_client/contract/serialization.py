"""
Call serialization.

``to_json``/``from_json`` carry a finalized call together with its
simulation data, so a call can be handed to another party, signed there
and handed back:

    {
      "method": "...",
      "tx": "<envelope wire>",
      "simulationResult": {"auth": ["<entry wire>", ...], "retval": "<value wire>"},
      "simulationTransactionData": "<resource data wire>"
    }

``to_xdr``/``from_xdr`` carry the envelope alone.
"""

from __future__ import annotations
import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from ..rpc.api import SimulateHostFunctionResult
from ..runtime.errors import NotYetBuiltError, UnmarshalError
from ..tx.types import (
    AuthorizationEntry,
    InvokeHostFunctionOperation,
    ScVal,
    SorobanTransactionData,
    Transaction,
)
from .options import CallRequest

if TYPE_CHECKING:
    from ..rpc.server import Server
    from .assembled_call import AssembledCall

logger = logging.getLogger(__name__)

Options = Union[CallRequest, Dict[str, Any]]


def _request_with(options: Options, **fields: Any) -> CallRequest:
    if isinstance(options, CallRequest):
        return options.with_overrides(**fields)
    values = dict(options)
    for name, value in fields.items():
        values.pop(name, None)
        values[CallRequest.model_fields[name].alias or name] = value
    return CallRequest.model_validate(values)


def to_json(call: AssembledCall) -> str:
    """
    Serialize a finalized call with its simulation data.

    Raises:
        NotYetBuiltError: If the call has no finalized transaction
    """
    if call.built is None:
        raise NotYetBuiltError("Transaction has not yet been simulated; call `simulate` first")
    data = call.simulation_data
    return json.dumps({
        "method": call.request.method,
        "tx": call.built.to_envelope_wire(),
        "simulationResult": {
            "auth": [entry.to_wire() for entry in data.result.auth],
            "retval": data.result.retval.to_wire(),
        },
        "simulationTransactionData": data.transaction_data.to_wire(),
    })


def from_json(options: Options, blob: str, server: Optional[Server] = None) -> AssembledCall:
    """
    Reconstruct a call serialized with ``to_json``.

    The simulation data is restored directly; the raw simulation response
    is not.

    Args:
        options: Request for the call; ``method`` is taken from the blob
        blob: Output of ``to_json``
        server: Optional RPC client for the reconstructed call

    Raises:
        UnmarshalError: If the blob is malformed
    """
    from .assembled_call import AssembledCall, SimulationData

    try:
        payload = json.loads(blob)
        method = payload["method"]
        tx = payload["tx"]
        simulation_result = payload["simulationResult"]
        auth = simulation_result["auth"]
        retval = simulation_result["retval"]
        transaction_data = payload["simulationTransactionData"]
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise UnmarshalError(f"Malformed serialized call: {e}", cause=e)

    call = AssembledCall(_request_with(options, method=method), server)
    call.built = Transaction.from_envelope_wire(tx)
    call.simulation_cache = SimulationData(
        result=SimulateHostFunctionResult(
            auth=[AuthorizationEntry.from_wire(entry) for entry in auth],
            retval=ScVal.from_wire(retval),
        ),
        transaction_data=SorobanTransactionData.from_wire(transaction_data),
    )
    logger.debug(f"Deserialized {method} at sequence {call.built.sequence}")
    return call


def to_xdr(call: AssembledCall) -> str:
    """
    Wire form of the finalized envelope alone.

    Raises:
        NotYetBuiltError: If the call has no finalized transaction
    """
    if call.built is None:
        raise NotYetBuiltError("Transaction has not yet been simulated; call `simulate` first")
    return call.built.to_envelope_wire()


def from_xdr(options: Options, encoded: str, spec: Any = None,
             server: Optional[Server] = None) -> AssembledCall:
    """
    Reconstruct a call from an envelope produced by ``to_xdr``.

    Method name and contract are read from the envelope's invoke
    operation. With a ``spec`` providing ``func_res_to_native(method, value)``
    results are decoded through it.

    Raises:
        UnmarshalError: If the envelope holds no contract invocation
    """
    from .assembled_call import AssembledCall

    built = Transaction.from_envelope_wire(encoded)
    operation = built.operations[0] if built.operations else None
    if not isinstance(operation, InvokeHostFunctionOperation):
        raise UnmarshalError("Could not extract the method from the transaction envelope")

    method = operation.function.function_name
    fields: Dict[str, Any] = {
        "method": method,
        "contract_id": str(operation.function.contract_address),
    }
    if spec is not None:
        fields["parse_result_xdr"] = lambda value: spec.func_res_to_native(method, value)

    call = AssembledCall(_request_with(options, **fields), server)
    call.built = built
    return call


__all__ = ["to_json", "from_json", "to_xdr", "from_xdr"]
