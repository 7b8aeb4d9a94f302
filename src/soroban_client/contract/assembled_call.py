"""
Assembled contract call.

``AssembledCall`` holds the state of one contract invocation as it moves
from an unsigned draft, through simulation, to a signed envelope:

    async with await build(CallRequest(...)) as call:   # draft + simulate
        if call.is_read_call:
            print(call.result)
        else:
            sent = await call.sign_and_send()
            print(sent.result)

A call that created its own ``Server`` closes it on ``close()`` or on
leaving the ``async with`` block; an injected server is left open.

The lifecycle steps are module-level coroutines taking the call and an
options object; the methods on ``AssembledCall`` forward to them.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from ..rpc.api import (
    SimulateHostFunctionResult,
    SimulateTransactionResponse,
    is_simulation_error,
    is_simulation_restore,
    is_simulation_success,
)
from ..rpc.server import Server
from ..runtime.errors import (
    ExpiredStateError,
    MissingIdentityError,
    NotYetBuiltError,
    NotYetSimulatedError,
    SimulationFailedError,
)
from ..tx.assemble import assemble_transaction
from ..tx.builder import Account, TransactionBuilder, invoke_contract_operation
from ..tx.types import ScVal, SorobanTransactionData, Transaction
from .options import CallRequest, SignAuthEntriesOptions, SignOptions, SimulateOptions, coerce_request
from .result import Err, Ok, parse_contract_error

logger = logging.getLogger(__name__)


@dataclass
class SimulationData:
    """Simulation outcome kept for signing and serialization."""

    result: SimulateHostFunctionResult
    transaction_data: SorobanTransactionData


class AssembledCall:
    """
    One in-flight contract invocation.

    Attributes:
        request: Immutable call configuration
        server: RPC client used for every network round trip
        draft: Unsigned transaction builder, before finalization
        built: Finalized transaction; replaced on every simulation
        simulation: Most recent raw simulation response
        simulation_cache: Simulation data derived from ``simulation``, or
            decoded from a transport string
        signed: Signed envelope, once ``sign`` succeeds
    """

    def __init__(self, request: CallRequest, server: Optional[Server] = None):
        """
        Validate the request and create the call in its draft state.

        No network access happens here; use ``populate`` or ``build``.

        Args:
            request: Call configuration
            server: RPC client; created from ``request.rpc_url`` if omitted

        Raises:
            MissingIdentityError: If ``request.public_key`` is empty
        """
        if not request.public_key:
            raise MissingIdentityError()

        self.request = request
        self.server = server if server is not None else Server(request.rpc_url, allow_http=request.allow_http)
        self._owns_server = server is None
        self.draft: Optional[TransactionBuilder] = None
        self.built: Optional[Transaction] = None
        self.simulation: Optional[SimulateTransactionResponse] = None
        self.simulation_cache: Optional[SimulationData] = None
        self.signed: Optional[Transaction] = None

    @property
    def method(self) -> str:
        return self.request.method

    # =========================================================================
    # Simulation state
    # =========================================================================

    def invalidate_simulation_cache(self) -> None:
        self.simulation_cache = None

    @property
    def simulation_data(self) -> SimulationData:
        """
        Simulation result and resource data, derived once and reused.

        Raises:
            NotYetSimulatedError: If the call was never simulated
            SimulationFailedError: If the last simulation was an error
            ExpiredStateError: If the last simulation requires a restore
        """
        if self.simulation_cache is not None:
            return self.simulation_cache

        simulation = self.simulation
        if simulation is None:
            raise NotYetSimulatedError()
        if is_simulation_error(simulation):
            raise SimulationFailedError(f'Transaction simulation failed: "{simulation.error}"')
        if is_simulation_restore(simulation):
            raise ExpiredStateError()

        self.simulation_cache = SimulationData(
            result=simulation.result if simulation.result is not None else SimulateHostFunctionResult(),
            transaction_data=simulation.transaction_data,
        )
        logger.debug(f"Cached simulation data for {self.method}")
        return self.simulation_cache

    def parse_result(self, value: ScVal) -> Any:
        if self.request.parse_result_xdr is None:
            return value
        return self.request.parse_result_xdr(value)

    @property
    def result(self) -> Any:
        """
        Decoded return value of the simulated call.

        With ``request.error_types`` set, a success is returned as ``Ok``
        and failures whose message contains ``Error(Contract, #n)`` with
        ``n`` listed in the table as ``Err``. Without a table the decoded
        value is returned as-is and every failure is raised.
        """
        try:
            value = self.parse_result(self.simulation_data.result.retval)
        except Exception as e:
            err = parse_contract_error(str(e), self.request.error_types)
            if err is None:
                raise
            return err
        if self.request.error_types is None or isinstance(value, (Ok, Err)):
            return value
        return Ok(value)

    @property
    def is_read_call(self) -> bool:
        """True when simulation reports no authorizations and no writes."""
        data = self.simulation_data
        auths = data.result.auth
        writes = data.transaction_data.resources.footprint.read_write
        return len(auths) == 0 and len(writes) == 0

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def simulate(self, *, restore: Optional[bool] = None) -> AssembledCall:
        return await simulate(self, SimulateOptions(restore=restore))

    def needs_non_invoker_signing_by(self, *, include_already_signed: bool = False) -> List[str]:
        from .auth import needs_non_invoker_signing_by
        return needs_non_invoker_signing_by(self, include_already_signed=include_already_signed)

    async def sign_auth_entries(self, **kwargs: Any) -> None:
        from .auth import sign_auth_entries
        await sign_auth_entries(self, SignAuthEntriesOptions(**kwargs))

    async def sign(self, **kwargs: Any) -> None:
        from .signing import sign
        await sign(self, SignOptions(**kwargs))

    async def send(self, watcher: Any = None) -> Any:
        from .signing import send
        return await send(self, watcher)

    async def sign_and_send(self, *, watcher: Any = None, **kwargs: Any) -> Any:
        from .signing import sign_and_send
        return await sign_and_send(self, SignOptions(**kwargs), watcher)

    def to_json(self) -> str:
        from .serialization import to_json
        return to_json(self)

    def to_xdr(self) -> str:
        from .serialization import to_xdr
        return to_xdr(self)

    async def close(self) -> None:
        """Close the RPC client if this call created it."""
        if self._owns_server:
            await self.server.close()

    async def __aenter__(self) -> AssembledCall:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        state = "signed" if self.signed else "built" if self.built else "draft"
        return f"AssembledCall(method='{self.method}', contract_id='{self.request.contract_id}', state={state})"


def draft_call(request: CallRequest, account: Account) -> TransactionBuilder:
    """Draft holding the single invoke operation for ``request``."""
    return (
        TransactionBuilder(account, fee=request.fee)
        .add_operation(invoke_contract_operation(request.contract_id, request.method, request.args))
        .set_timeout(request.timeout_in_seconds)
    )


async def populate(call: AssembledCall) -> AssembledCall:
    """
    Fetch the submitter's account, draft the call and simulate if requested.

    Args:
        call: Call in its draft state

    Returns:
        The same call
    """
    account = await call.server.get_account(call.request.public_key)
    call.draft = draft_call(call.request, account)
    logger.debug(f"Drafted {call.method} from {account}")
    if call.request.simulate:
        await simulate(call)
    return call


async def build(options: Union[CallRequest, Dict[str, Any]], server: Optional[Server] = None) -> AssembledCall:
    """
    Construct and populate a call.

    Args:
        options: ``CallRequest`` or a mapping of its fields
        server: Optional RPC client to use

    Returns:
        Drafted call, simulated unless ``simulate`` is off

    Raises:
        MissingIdentityError: If no public key is configured
    """
    return await populate(AssembledCall(coerce_request(options), server))


async def simulate(call: AssembledCall, options: Optional[SimulateOptions] = None) -> AssembledCall:
    """
    Simulate the call and fold the outcome into ``call.built``.

    An error response is kept as-is and surfaces on ``simulation_data``
    access. A restore-required response triggers one footprint restore
    when ``restore`` is on, after which the call is redrafted and
    simulated again with restore disabled.

    Args:
        call: Call with a draft or a finalized transaction
        options: ``restore`` overrides ``call.request.restore``

    Returns:
        The same call

    Raises:
        NotYetBuiltError: If the call has neither a draft nor a transaction
        RestorationFailureError: If the automatic restore did not succeed
    """
    options = options or SimulateOptions()
    restore = call.request.restore if options.restore is None else options.restore

    if call.built is None:
        if call.draft is None:
            raise NotYetBuiltError("Transaction has not yet been assembled; call `populate` first")
        call.built = call.draft.build()

    call.invalidate_simulation_cache()
    call.simulation = await call.server.simulate_transaction(call.built)

    if restore and is_simulation_restore(call.simulation):
        from .restore import restore_footprint

        account = await call.server.get_account(call.request.public_key)
        await restore_footprint(call, call.simulation.restore_preamble, account)
        call.draft = draft_call(call.request, account)
        call.built = None
        logger.info(f"Restored footprint for {call.method}; simulating again")
        return await simulate(call, SimulateOptions(restore=False))

    if is_simulation_restore(call.simulation):
        logger.warning(f"Simulation of {call.method} requires a footprint restore")
    elif is_simulation_success(call.simulation):
        call.built = assemble_transaction(call.built, call.simulation)
    else:
        logger.debug(f"Simulation of {call.method} failed: {call.simulation.error}")
    return call


__all__ = [
    "AssembledCall",
    "SimulationData",
    "build",
    "draft_call",
    "populate",
    "simulate",
]
