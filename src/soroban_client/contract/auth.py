"""
Authorization entry coordination.

Finds which parties besides the submitter still owe a signature on the
call's authorization entries, and fills in one party's signatures at a
time. Collecting signatures is a sequential hand-off: one party signs,
serializes the call and passes it on.
"""

from __future__ import annotations
import inspect
import logging
from typing import TYPE_CHECKING, List, Optional

from ..runtime.errors import (
    NoSignatureNeededError,
    NoSignerError,
    NoUnsignedEntriesError,
    NotYetBuiltError,
)
from ..tx.authorize import authorize_entry as default_authorize_entry
from ..tx.types import AuthorizationEntry, HashIdPreimageSorobanAuthorization, InvokeHostFunctionOperation
from .options import SignAuthEntriesOptions

if TYPE_CHECKING:
    from .assembled_call import AssembledCall

logger = logging.getLogger(__name__)

EXPIRATION_LEDGERS = 100
"""Default validity of an entry signature, in ledgers past the latest one."""


def _auth_entries(call: AssembledCall) -> List[AuthorizationEntry]:
    if call.built is None:
        raise NotYetBuiltError("Transaction has not yet been simulated")
    op = call.built.operations[0]
    if not isinstance(op, InvokeHostFunctionOperation):
        return []
    return op.auth


def needs_non_invoker_signing_by(call: AssembledCall, include_already_signed: bool = False) -> List[str]:
    """
    Addresses that still need to sign an authorization entry.

    Only address-credentialed entries count; source-account entries are
    covered by the submitter's envelope signature.

    Args:
        call: Finalized call
        include_already_signed: Also list parties whose entries are signed

    Returns:
        Distinct addresses in entry order

    Raises:
        NotYetBuiltError: If the call has no finalized transaction
    """
    addresses: List[str] = []
    for entry in _auth_entries(call):
        if not entry.is_address_credentialed:
            continue
        credentials = entry.credentials.address
        if not include_already_signed and not credentials.signature.is_void:
            continue
        address = str(credentials.address)
        if address not in addresses:
            addresses.append(address)
    return addresses


async def _resolve_expiration(call: AssembledCall, options: SignAuthEntriesOptions) -> int:
    expiration = options.expiration
    if expiration is None:
        latest = await call.server.get_latest_ledger()
        return latest.sequence + EXPIRATION_LEDGERS
    if inspect.isawaitable(expiration):
        expiration = await expiration
    return int(expiration)


async def sign_auth_entries(call: AssembledCall, options: Optional[SignAuthEntriesOptions] = None) -> None:
    """
    Sign every authorization entry that belongs to one address.

    Signed entries replace the originals in ``call.built``; entries of
    other parties and source-account entries are left untouched.

    Args:
        call: Finalized call
        options: ``address`` defaults to the submitter, ``sign_auth_entry``
            to the request's callback, ``expiration`` to the latest ledger
            plus 100, ``authorize_entry`` to the built-in strategy

    Raises:
        NotYetBuiltError: If the call has no finalized transaction
        NoUnsignedEntriesError: If no party still needs to sign
        NoSignatureNeededError: If ``address`` is not among those parties
        NoSignerError: If no ``sign_auth_entry`` callback is available
    """
    options = options or SignAuthEntriesOptions()
    sign_auth_entry = options.sign_auth_entry or call.request.sign_auth_entry
    address = options.address or call.request.public_key
    authorize = options.authorize_entry or default_authorize_entry

    entries = _auth_entries(call)

    if options.authorize_entry is None:
        pending = needs_non_invoker_signing_by(call)
        if not pending:
            raise NoUnsignedEntriesError()
        if address not in pending:
            raise NoSignatureNeededError(f'No auth entries for public key "{address}"')
        if sign_auth_entry is None:
            raise NoSignerError("You must provide `sign_auth_entry` or a custom `authorize_entry`")

    async def signer(preimage: HashIdPreimageSorobanAuthorization) -> bytes:
        if sign_auth_entry is None:
            raise NoSignerError("You must provide `sign_auth_entry` to sign authorization entries")
        signature = sign_auth_entry(preimage.to_wire(), account_to_sign=address)
        if inspect.isawaitable(signature):
            signature = await signature
        return signature

    expiration = await _resolve_expiration(call, options)

    signed_count = 0
    for i, entry in enumerate(entries):
        if not entry.is_address_credentialed or str(entry.credentials.address.address) != address:
            continue
        signed = authorize(entry, signer, expiration, call.request.network_passphrase)
        if inspect.isawaitable(signed):
            signed = await signed
        entries[i] = signed
        signed_count += 1

    logger.debug(f"Signed {signed_count} auth entries for {address} until ledger {expiration}")


__all__ = ["EXPIRATION_LEDGERS", "needs_non_invoker_signing_by", "sign_auth_entries"]
