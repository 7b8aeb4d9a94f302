"""
Address Pydantic custom type for Stellar strkey addresses.

Accounts encode as ``G...`` and contracts as ``C...``: base32 over a version
byte, the 32-byte payload and a little-endian CRC16-XModem checksum.
"""

from __future__ import annotations
import base64
import binascii
from enum import Enum, IntEnum
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from .errors import InvalidAddressError


class VersionByte(IntEnum):
    """Strkey version bytes."""
    ED25519_PUBLIC_KEY = 6 << 3
    ED25519_SECRET_SEED = 18 << 3
    CONTRACT = 2 << 3


class AddressKind(str, Enum):
    """Kind of ledger party an address identifies."""
    ACCOUNT = "account"
    CONTRACT = "contract"


def _crc16_xmodem(data: bytes) -> bytes:
    crc = 0x0000
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc.to_bytes(2, "little")


def encode_check(version: VersionByte, payload: bytes) -> str:
    """Encode a payload as a strkey string."""
    if len(payload) != 32:
        raise InvalidAddressError(f"strkey payload must be 32 bytes, got {len(payload)}")
    body = bytes([version]) + payload
    return base64.b32encode(body + _crc16_xmodem(body)).decode("ascii")


def decode_check(version: VersionByte, encoded: str) -> bytes:
    """
    Decode a strkey string, verifying version byte and checksum.

    Raises:
        InvalidAddressError: If the string is not a valid strkey of that version
    """
    if not isinstance(encoded, str) or len(encoded) != 56:
        raise InvalidAddressError(f"Invalid strkey length: {encoded!r}")
    try:
        raw = base64.b32decode(encoded.encode("ascii"))
    except (binascii.Error, ValueError, UnicodeEncodeError) as e:
        raise InvalidAddressError(f"Invalid strkey encoding: {encoded!r}", cause=e)

    body, checksum = raw[:-2], raw[-2:]
    if body[0] != version:
        raise InvalidAddressError(f"Invalid strkey version byte for {version.name}: {encoded!r}")
    if _crc16_xmodem(body) != checksum:
        raise InvalidAddressError(f"Invalid strkey checksum: {encoded!r}")
    return body[1:]


class Address:
    """Custom Pydantic type for account and contract addresses."""

    def __init__(self, address: str):
        if not isinstance(address, str) or not address:
            raise InvalidAddressError("Address must be a non-empty string")

        if address.startswith("G"):
            self.kind = AddressKind.ACCOUNT
            self._payload = decode_check(VersionByte.ED25519_PUBLIC_KEY, address)
        elif address.startswith("C"):
            self.kind = AddressKind.CONTRACT
            self._payload = decode_check(VersionByte.CONTRACT, address)
        else:
            raise InvalidAddressError(f"Unsupported address type: {address!r}")

        self.address = address

    @classmethod
    def from_string(cls, address: str) -> Address:
        return cls(address)

    @classmethod
    def from_public_key(cls, public_key: bytes) -> Address:
        """Create an account address from a raw ed25519 public key."""
        return cls(encode_check(VersionByte.ED25519_PUBLIC_KEY, public_key))

    @classmethod
    def from_contract_id(cls, contract_id: bytes) -> Address:
        """Create a contract address from a raw 32-byte contract hash."""
        return cls(encode_check(VersionByte.CONTRACT, contract_id))

    @property
    def is_contract(self) -> bool:
        return self.kind is AddressKind.CONTRACT

    @property
    def payload(self) -> bytes:
        """Raw 32-byte public key or contract hash."""
        return self._payload

    def __str__(self) -> str:
        return self.address

    def __repr__(self) -> str:
        return f"Address('{self.address}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Address):
            return self.address == other.address
        elif isinstance(other, str):
            return self.address == other
        return False

    def __hash__(self) -> int:
        return hash(self.address)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that validates the Address."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any) -> Address:
        """Validate and convert the input to an Address."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except InvalidAddressError as e:
                raise ValueError(e.message) from e
        raise ValueError(f"Invalid Address: {value}")


def is_contract_address(address: str) -> bool:
    """True if the strkey names a contract rather than an account."""
    return address.startswith("C")


__all__ = [
    "Address",
    "AddressKind",
    "VersionByte",
    "encode_check",
    "decode_check",
    "is_contract_address",
]
