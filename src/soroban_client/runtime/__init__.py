"""Runtime helpers for the Soroban contract client"""

from .address import Address, AddressKind, is_contract_address
from .errors import SorobanClientError, ErrorCode
from .codec import to_wire, from_wire, canonical_bytes, hash_sha256
from .network import Networks, network_id

__all__ = [
    "Address",
    "AddressKind",
    "is_contract_address",
    "SorobanClientError",
    "ErrorCode",
    "to_wire",
    "from_wire",
    "canonical_bytes",
    "hash_sha256",
    "Networks",
    "network_id",
]
