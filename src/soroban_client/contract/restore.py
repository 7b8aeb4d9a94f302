"""
Footprint restoration.

When simulation reports archived ledger entries, a dedicated restore
transaction built from the simulation's restore preamble is signed and
submitted before the original call is simulated again.
"""

from __future__ import annotations
import json
import logging
from typing import TYPE_CHECKING, Optional

from ..rpc.api import GetTransactionResponse, GetTransactionStatus, RestorePreamble
from ..runtime.errors import (
    NoSignerError,
    RestorationFailureError,
    SendFailedError,
    TransactionStillPendingError,
)
from ..tx.builder import Account, TransactionBuilder, restore_footprint_operation
from ..tx.types import SorobanTransactionData
from .options import SignOptions, SimulateOptions

if TYPE_CHECKING:
    from .assembled_call import AssembledCall

logger = logging.getLogger(__name__)


async def build_footprint_restore_call(call: AssembledCall, transaction_data: SorobanTransactionData,
                                       account: Account, fee: int) -> AssembledCall:
    """
    Simulated call holding a single restore-footprint operation.

    Args:
        call: Call whose request and server the restore reuses
        transaction_data: Resource data naming the entries to restore
        account: Source account; its sequence is consumed
        fee: Classic fee of the restore transaction; the resource fee of
            ``transaction_data`` is added on build

    Returns:
        Restore call, simulated with automatic restore disabled
    """
    from .assembled_call import AssembledCall, simulate

    restore_call = AssembledCall(call.request, call.server)
    restore_call.draft = (
        TransactionBuilder(account, fee=fee)
        .set_soroban_data(transaction_data)
        .add_operation(restore_footprint_operation())
        .set_timeout(call.request.timeout_in_seconds)
    )
    await simulate(restore_call, SimulateOptions(restore=False))
    return restore_call


async def restore_footprint(call: AssembledCall, preamble: RestorePreamble,
                            account: Optional[Account] = None) -> GetTransactionResponse:
    """
    Restore the archived entries named by ``preamble``.

    Args:
        call: Call whose simulation required the restore
        preamble: Fee and resource data of the restore
        account: Source account; fetched fresh if omitted

    Returns:
        Final status of the restore transaction

    Raises:
        NoSignerError: If the request has no ``sign_transaction`` callback
        RestorationFailureError: If the restore did not succeed on ledger
    """
    from .signing import sign_and_send

    if call.request.sign_transaction is None:
        raise NoSignerError(
            "For automatic restore to work you must provide a sign_transaction "
            "function when constructing the call request"
        )
    if account is None:
        account = await call.server.get_account(call.request.public_key)

    restore_call = await build_footprint_restore_call(
        call, preamble.transaction_data, account, preamble.min_resource_fee
    )

    try:
        # A restore only writes, so it is signed even when it looks like a read call
        sent = await sign_and_send(restore_call, SignOptions(force=True))
    except (SendFailedError, TransactionStillPendingError) as e:
        raise RestorationFailureError(f"The attempt at automatic restore failed: {e.message}", cause=e)

    final = sent.get_transaction_response
    if final is None or final.status is not GetTransactionStatus.SUCCESS:
        raise RestorationFailureError(
            "Automatic restore failed! You set `restore` but the attempted restore did not work. "
            f"Result:\n{json.dumps(sent.to_dict())}",
            result=final,
        )

    logger.info(f"Restored footprint for {call.method} with transaction {sent.send_transaction_response.hash}")
    return final


__all__ = ["build_footprint_restore_call", "restore_footprint"]
