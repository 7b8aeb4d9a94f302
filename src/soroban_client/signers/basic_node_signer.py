"""
Signing callbacks backed by a local keypair.
"""

from __future__ import annotations
import logging
from typing import Any, Optional

from ..tx.types import DecoratedSignature, HashIdPreimageSorobanAuthorization, Transaction
from .keypair import Keypair

logger = logging.getLogger(__name__)


class BasicNodeSigner:
    """
    Provides ``sign_transaction`` and ``sign_auth_entry`` callbacks for a
    call request, signing with a keypair held in process.

    Example:
        ```python
        signer = BasicNodeSigner(keypair, Networks.TESTNET)
        request = CallRequest(
            ...,
            public_key=keypair.public_key,
            sign_transaction=signer.sign_transaction,
            sign_auth_entry=signer.sign_auth_entry,
        )
        ```
    """

    def __init__(self, keypair: Keypair, network_passphrase: str):
        self.keypair = keypair
        self.network_passphrase = network_passphrase

    async def sign_transaction(self, envelope_wire: str, network_passphrase: Optional[str] = None,
                               **kwargs: Any) -> str:
        """
        Add this keypair's signature to a transaction envelope.

        Args:
            envelope_wire: Wire form of the envelope
            network_passphrase: Network to sign for; defaults to the signer's

        Returns:
            Wire form of the envelope with the signature appended
        """
        passphrase = network_passphrase or self.network_passphrase
        tx = Transaction.from_envelope_wire(envelope_wire)
        signature = self.keypair.sign(tx.hash(passphrase))
        tx.signatures.append(DecoratedSignature(
            hint=self.keypair.signature_hint().hex(),
            signature=signature.hex(),
        ))
        logger.debug(f"Signed transaction {tx.hash_hex(passphrase)} as {self.keypair.public_key}")
        return tx.to_envelope_wire()

    async def sign_auth_entry(self, preimage_wire: str, account_to_sign: Optional[str] = None,
                              **kwargs: Any) -> bytes:
        """
        Sign an authorization entry preimage.

        Args:
            preimage_wire: Wire form of the authorization preimage
            account_to_sign: Address the entry belongs to

        Returns:
            64-byte signature over the preimage payload
        """
        preimage = HashIdPreimageSorobanAuthorization.from_wire(preimage_wire)
        return self.keypair.sign(preimage.payload())


__all__ = ["BasicNodeSigner"]
