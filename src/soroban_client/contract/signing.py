"""
Envelope signing and submission.
"""

from __future__ import annotations
import inspect
import logging
from typing import TYPE_CHECKING, Optional

from ..runtime.address import is_contract_address
from ..runtime.errors import (
    NeedsMoreSignaturesError,
    NoSignatureNeededError,
    NoSignerError,
    NotSignedError,
    NotYetBuiltError,
)
from ..tx.builder import TransactionBuilder
from ..tx.types import Transaction
from .auth import needs_non_invoker_signing_by
from .options import SignOptions
from .sent_transaction import SentTransaction, Watcher

if TYPE_CHECKING:
    from .assembled_call import AssembledCall

logger = logging.getLogger(__name__)


async def sign(call: AssembledCall, options: Optional[SignOptions] = None) -> None:
    """
    Sign the call's transaction envelope.

    The transaction is rebuilt first with a fresh timeout and the
    simulated resource data, then handed to ``sign_transaction``.

    Args:
        call: Simulated call
        options: ``force`` signs read calls too; ``sign_transaction``
            overrides the request's callback

    Raises:
        NotYetBuiltError: If the call has no finalized transaction
        NoSignatureNeededError: If this is a read call and ``force`` is off
        NeedsMoreSignaturesError: If other accounts still need to sign
            authorization entries
        NoSignerError: If no ``sign_transaction`` callback is available
    """
    options = options or SignOptions()
    if call.built is None:
        raise NotYetBuiltError("Transaction has not yet been simulated")

    if not options.force and call.is_read_call:
        raise NoSignatureNeededError()

    # Contract addresses authorize through the invocation itself
    pending = [a for a in needs_non_invoker_signing_by(call) if not is_contract_address(a)]
    if pending:
        raise NeedsMoreSignaturesError(pending)

    sign_transaction = options.sign_transaction or call.request.sign_transaction
    if sign_transaction is None:
        raise NoSignerError(
            "You must provide a sign_transaction function, either when calling `sign` "
            "or when constructing the call request"
        )

    call.built = (
        TransactionBuilder.clone_from(
            call.built,
            fee=call.built.fee,
            soroban_data=call.simulation_data.transaction_data,
        )
        .set_timeout(call.request.timeout_in_seconds)
        .build()
    )

    signed = sign_transaction(call.built.to_envelope_wire(), network_passphrase=call.request.network_passphrase)
    if inspect.isawaitable(signed):
        signed = await signed
    call.signed = Transaction.from_envelope_wire(signed)
    logger.debug(f"Signed {call.method} at sequence {call.signed.sequence}")


async def send(call: AssembledCall, watcher: Optional[Watcher] = None) -> SentTransaction:
    """
    Submit the signed envelope and wait for its final status.

    Raises:
        NotSignedError: If ``sign`` has not succeeded yet
    """
    if call.signed is None:
        raise NotSignedError()
    return await SentTransaction.init(call, watcher)


async def sign_and_send(call: AssembledCall, options: Optional[SignOptions] = None,
                        watcher: Optional[Watcher] = None) -> SentTransaction:
    """Sign unless already signed, then send."""
    if call.signed is None:
        await sign(call, options)
    return await send(call, watcher)


__all__ = ["sign", "send", "sign_and_send"]
