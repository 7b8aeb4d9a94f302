"""
Wire Encoding/Decoding and Hashing

Ledger structures travel as base64 over canonical JSON: object keys sorted,
no insignificant whitespace, UTF-8. The same canonical bytes feed every
hash, so two parties that decode and re-encode a structure agree on its
signature payload.

This is not Stellar XDR; only peers that use this encoding can read it.
"""

from __future__ import annotations
import base64
import binascii
import hashlib
import json
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import MarshalError, UnmarshalError

M = TypeVar("M", bound=BaseModel)


def dumps_canonical(obj: Any) -> str:
    """
    Encode object as canonical JSON string.

    Deterministic key order and no extra whitespace so hashes are stable
    across parties.

    Args:
        obj: Object to encode (dict, list, str, int, bool, None)

    Returns:
        Canonical JSON string
    """
    return json.dumps(obj, separators=(',', ':'), ensure_ascii=False, sort_keys=True)


def model_to_plain(model: BaseModel) -> Any:
    """Dump a model to JSON-compatible primitives, omitting unset optionals."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def canonical_bytes(model: BaseModel) -> bytes:
    """Canonical UTF-8 bytes of a model."""
    try:
        return dumps_canonical(model_to_plain(model)).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise MarshalError(f"Cannot encode {type(model).__name__}: {e}", cause=e)


def to_wire(model: BaseModel) -> str:
    """
    Encode a model to its base64 wire form.

    Args:
        model: Ledger structure to encode

    Returns:
        Base64 string
    """
    return base64.b64encode(canonical_bytes(model)).decode("ascii")


def from_wire(model_cls: Type[M], data: str) -> M:
    """
    Decode a base64 wire string into a model.

    Args:
        model_cls: Target model class
        data: Base64 string produced by to_wire

    Returns:
        Decoded model instance

    Raises:
        UnmarshalError: If the data is not valid base64, JSON or does not
            match the model schema
    """
    try:
        raw = base64.b64decode(data, validate=True)
        plain = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError, TypeError) as e:
        raise UnmarshalError(f"Invalid wire data for {model_cls.__name__}: {e}", cause=e)

    try:
        return model_cls.model_validate(plain)
    except ValidationError as e:
        raise UnmarshalError(f"Wire data does not match {model_cls.__name__}", cause=e)


def wire_payload(data: str) -> bytes:
    """Raw canonical bytes carried by a wire string."""
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UnmarshalError(f"Invalid wire data: {e}", cause=e)


def hash_sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash.

    Args:
        data: Data to hash

    Returns:
        32-byte hash
    """
    return hashlib.sha256(data).digest()


__all__ = [
    "dumps_canonical",
    "model_to_plain",
    "canonical_bytes",
    "to_wire",
    "from_wire",
    "wire_payload",
    "hash_sha256",
]
