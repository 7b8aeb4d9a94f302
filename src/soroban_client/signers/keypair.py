"""
Ed25519 keypairs.

Provides key generation, strkey import/export, signing and verification
for accounts.
"""

from __future__ import annotations
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from ..runtime.address import Address, VersionByte, decode_check, encode_check


class Keypair:
    """
    Ed25519 keypair for an account.

    A keypair created from a public key alone can verify but not sign.
    """

    def __init__(self, public_key: Ed25519PublicKey, private_key: Optional[Ed25519PrivateKey] = None):
        self._public_key = public_key
        self._private_key = private_key

    @classmethod
    def random(cls) -> Keypair:
        """Generate a new random keypair."""
        private_key = Ed25519PrivateKey.generate()
        return cls(private_key.public_key(), private_key)

    @classmethod
    def from_raw_ed25519_seed(cls, seed: bytes) -> Keypair:
        """
        Create a keypair from a 32-byte ed25519 seed.

        Raises:
            ValueError: If the seed is not 32 bytes
        """
        if len(seed) != 32:
            raise ValueError(f"Ed25519 seed must be 32 bytes, got {len(seed)}")
        private_key = Ed25519PrivateKey.from_private_bytes(seed)
        return cls(private_key.public_key(), private_key)

    @classmethod
    def from_secret(cls, secret: str) -> Keypair:
        """
        Create a keypair from a secret seed strkey (``S...``).

        Raises:
            InvalidAddressError: If the strkey is malformed
        """
        return cls.from_raw_ed25519_seed(decode_check(VersionByte.ED25519_SECRET_SEED, secret))

    @classmethod
    def from_public_key(cls, public_key: str) -> Keypair:
        """Create a verify-only keypair from an account strkey (``G...``)."""
        raw = decode_check(VersionByte.ED25519_PUBLIC_KEY, public_key)
        return cls(Ed25519PublicKey.from_public_bytes(raw))

    @property
    def raw_public_key(self) -> bytes:
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @property
    def public_key(self) -> str:
        """Account strkey (``G...``)."""
        return encode_check(VersionByte.ED25519_PUBLIC_KEY, self.raw_public_key)

    @property
    def address(self) -> Address:
        return Address.from_public_key(self.raw_public_key)

    @property
    def secret(self) -> str:
        """
        Secret seed strkey (``S...``).

        Raises:
            ValueError: If this keypair cannot sign
        """
        seed = self._private_key_or_raise().private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return encode_check(VersionByte.ED25519_SECRET_SEED, seed)

    def can_sign(self) -> bool:
        return self._private_key is not None

    def _private_key_or_raise(self) -> Ed25519PrivateKey:
        if self._private_key is None:
            raise ValueError("Keypair has no secret key and cannot sign")
        return self._private_key

    def sign(self, data: bytes) -> bytes:
        """
        Sign data.

        Args:
            data: Message to sign

        Returns:
            64-byte Ed25519 signature
        """
        return self._private_key_or_raise().sign(data)

    def verify(self, data: bytes, signature: bytes) -> bool:
        """True if ``signature`` is a valid signature of ``data``."""
        try:
            self._public_key.verify(signature, data)
            return True
        except InvalidSignature:
            return False

    def signature_hint(self) -> bytes:
        """Last four bytes of the public key, used to match envelope signatures."""
        return self.raw_public_key[-4:]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Keypair) and other.raw_public_key == self.raw_public_key

    def __hash__(self) -> int:
        return hash(self.raw_public_key)

    def __repr__(self) -> str:
        return f"Keypair(public_key='{self.public_key}')"


__all__ = ["Keypair"]
