"""
Authorization entry signing.

The default strategy for turning an unsigned address-credentialed
authorization entry into a signed one.
"""

from __future__ import annotations
import inspect
import logging
from typing import Awaitable, Callable, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from ..runtime.address import Address
from ..runtime.errors import InvalidSignatureError
from ..runtime.network import network_id
from .types import AuthorizationEntry, HashIdPreimageSorobanAuthorization, ScVal

logger = logging.getLogger(__name__)

EntrySigner = Callable[
    [HashIdPreimageSorobanAuthorization],
    Union[bytes, Awaitable[bytes]],
]


def build_authorization_preimage(entry: AuthorizationEntry, valid_until_ledger: int,
                                 network_passphrase: str) -> HashIdPreimageSorobanAuthorization:
    """
    Build the preimage a party signs to authorize ``entry``.

    Args:
        entry: Address-credentialed authorization entry
        valid_until_ledger: Last ledger at which the signature is valid
        network_passphrase: Passphrase of the target network

    Returns:
        Authorization preimage for the entry
    """
    if not entry.is_address_credentialed:
        raise ValueError("only address-credentialed entries have an authorization preimage")
    return HashIdPreimageSorobanAuthorization(
        network_id=network_id(network_passphrase).hex(),
        nonce=entry.credentials.address.nonce,
        signature_expiration_ledger=valid_until_ledger,
        invocation=entry.root_invocation.model_copy(deep=True),
    )


def _verify(address: Address, payload: bytes, signature: bytes) -> None:
    if address.is_contract:
        raise InvalidSignatureError(f"cannot verify an ed25519 signature for contract {address}")
    try:
        Ed25519PublicKey.from_public_bytes(address.payload).verify(signature, payload)
    except InvalidSignature as e:
        raise InvalidSignatureError(
            f"signature does not match payload for {address}",
            details={"payload": payload.hex()},
            cause=e,
        )


async def authorize_entry(entry: AuthorizationEntry, signer: EntrySigner, valid_until_ledger: int,
                          network_passphrase: str) -> AuthorizationEntry:
    """
    Sign an authorization entry.

    Source-account entries are returned as-is; they are covered by the
    envelope signature. For address entries a copy is stamped with the
    expiration ledger, its preimage is passed to ``signer``, and the
    verified signature is stored in the copy.

    Args:
        entry: Entry to authorize; never mutated
        signer: Callable returning the ed25519 signature of the preimage
            payload; may be a coroutine function
        valid_until_ledger: Last ledger at which the signature is valid
        network_passphrase: Passphrase of the target network

    Returns:
        Signed copy of the entry

    Raises:
        InvalidSignatureError: If the returned signature does not verify
    """
    if not entry.is_address_credentialed:
        return entry

    signed = entry.model_copy(deep=True)
    credentials = signed.credentials.address
    credentials.signature_expiration_ledger = valid_until_ledger

    preimage = build_authorization_preimage(signed, valid_until_ledger, network_passphrase)
    signature = signer(preimage)
    if inspect.isawaitable(signature):
        signature = await signature
    signature = bytes(signature)

    address = credentials.address
    _verify(address, preimage.payload(), signature)

    credentials.signature = ScVal.vector([
        ScVal.mapping([
            (ScVal.symbol("public_key"), ScVal.from_bytes(address.payload)),
            (ScVal.symbol("signature"), ScVal.from_bytes(signature)),
        ])
    ])
    logger.debug(f"Authorized entry for {address} until ledger {valid_until_ledger}")
    return signed


__all__ = [
    "EntrySigner",
    "authorize_entry",
    "build_authorization_preimage",
]
