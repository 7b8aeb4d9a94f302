"""
Ledger data model for contract invocations.

Provides the pydantic models for contract values, resource footprints,
authorization entries, operations and transactions. Binary values are held
as lowercase hex strings; the wire form of every model is produced by
``runtime.codec``.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union, Annotated, Literal

from pydantic import BaseModel, Field

from ..runtime.address import Address
from ..runtime.codec import dumps_canonical, from_wire, hash_sha256, to_wire, model_to_plain
from ..runtime.network import network_id


_MODEL_CONFIG = {"populate_by_name": True}


# =============================================================================
# Contract values
# =============================================================================

class ScValType(str, Enum):
    """Contract value types."""
    VOID = "void"
    BOOL = "bool"
    U32 = "u32"
    I32 = "i32"
    U64 = "u64"
    I64 = "i64"
    U128 = "u128"
    I128 = "i128"
    SYMBOL = "symbol"
    STRING = "string"
    BYTES = "bytes"
    ADDRESS = "address"
    VEC = "vec"
    MAP = "map"


class ScVal(BaseModel):
    """
    A typed contract value.

    Scalars live in ``value``; ``bytes`` values are hex; containers use
    ``vec`` or ``map``.
    """
    type: ScValType
    value: Optional[Union[bool, int, str]] = None
    vec: Optional[List[ScVal]] = None
    map: Optional[List[ScMapEntry]] = None

    model_config = _MODEL_CONFIG

    @classmethod
    def void(cls) -> ScVal:
        return cls(type=ScValType.VOID)

    @classmethod
    def boolean(cls, value: bool) -> ScVal:
        return cls(type=ScValType.BOOL, value=value)

    @classmethod
    def u32(cls, value: int) -> ScVal:
        if not 0 <= value < 2 ** 32:
            raise ValueError(f"u32 out of range: {value}")
        return cls(type=ScValType.U32, value=value)

    @classmethod
    def i128(cls, value: int) -> ScVal:
        if not -(2 ** 127) <= value < 2 ** 127:
            raise ValueError(f"i128 out of range: {value}")
        return cls(type=ScValType.I128, value=value)

    @classmethod
    def symbol(cls, value: str) -> ScVal:
        return cls(type=ScValType.SYMBOL, value=value)

    @classmethod
    def string(cls, value: str) -> ScVal:
        return cls(type=ScValType.STRING, value=value)

    @classmethod
    def from_bytes(cls, value: bytes) -> ScVal:
        return cls(type=ScValType.BYTES, value=value.hex())

    @classmethod
    def address(cls, value: Union[str, Address]) -> ScVal:
        return cls(type=ScValType.ADDRESS, value=str(Address._validate(value)))

    @classmethod
    def vector(cls, items: List[ScVal]) -> ScVal:
        return cls(type=ScValType.VEC, vec=list(items))

    @classmethod
    def mapping(cls, entries: List[Tuple[ScVal, ScVal]]) -> ScVal:
        return cls(type=ScValType.MAP, map=[ScMapEntry(key=k, val=v) for k, v in entries])

    @property
    def is_void(self) -> bool:
        return self.type is ScValType.VOID

    def to_bytes(self) -> bytes:
        """Raw bytes of a ``bytes`` value."""
        if self.type is not ScValType.BYTES or not isinstance(self.value, str):
            raise ValueError(f"ScVal of type {self.type.value} is not bytes")
        return bytes.fromhex(self.value)

    def to_wire(self) -> str:
        return to_wire(self)

    @classmethod
    def from_wire(cls, data: str) -> ScVal:
        return from_wire(cls, data)


class ScMapEntry(BaseModel):
    """One key/value pair of a contract map."""
    key: ScVal
    val: ScVal

    model_config = _MODEL_CONFIG


ScVal.model_rebuild()


# =============================================================================
# Resource footprint
# =============================================================================

class LedgerKey(BaseModel):
    """Identifies one ledger entry in a footprint."""
    type: str = Field(..., description="contract_data, contract_code or account")
    contract: Optional[str] = None
    key: Optional[ScVal] = None
    durability: Optional[str] = None
    hash: Optional[str] = None
    account_id: Optional[str] = Field(default=None, alias="accountId")

    model_config = _MODEL_CONFIG


class LedgerFootprint(BaseModel):
    """Ledger entries a transaction reads and writes."""
    read_only: List[LedgerKey] = Field(default_factory=list, alias="readOnly")
    read_write: List[LedgerKey] = Field(default_factory=list, alias="readWrite")

    model_config = _MODEL_CONFIG


class SorobanResources(BaseModel):
    """Declared resource usage of a contract transaction."""
    footprint: LedgerFootprint = Field(default_factory=LedgerFootprint)
    instructions: int = 0
    read_bytes: int = Field(default=0, alias="readBytes")
    write_bytes: int = Field(default=0, alias="writeBytes")

    model_config = _MODEL_CONFIG


class SorobanTransactionData(BaseModel):
    """Resource data attached to a contract transaction."""
    resources: SorobanResources = Field(default_factory=SorobanResources)
    resource_fee: int = Field(default=0, alias="resourceFee")

    model_config = _MODEL_CONFIG

    def to_wire(self) -> str:
        return to_wire(self)

    @classmethod
    def from_wire(cls, data: str) -> SorobanTransactionData:
        return from_wire(cls, data)


# =============================================================================
# Authorization
# =============================================================================

class InvokeContractArgs(BaseModel):
    """A contract function invocation."""
    contract_address: Address = Field(..., alias="contractAddress")
    function_name: str = Field(..., alias="functionName")
    args: List[ScVal] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class AuthorizedInvocation(BaseModel):
    """An invocation tree a party authorizes."""
    function: InvokeContractArgs
    sub_invocations: List[AuthorizedInvocation] = Field(default_factory=list, alias="subInvocations")

    model_config = _MODEL_CONFIG


class SorobanCredentialsType(str, Enum):
    """How an authorization entry is authenticated."""
    SOURCE_ACCOUNT = "source_account"
    ADDRESS = "address"


class AddressCredentials(BaseModel):
    """Credentials of a party that signs its entry independently."""
    address: Address
    nonce: int = 0
    signature_expiration_ledger: int = Field(default=0, alias="signatureExpirationLedger")
    signature: ScVal = Field(default_factory=ScVal.void)

    model_config = _MODEL_CONFIG


class SorobanCredentials(BaseModel):
    """Credentials of an authorization entry."""
    type: SorobanCredentialsType
    address: Optional[AddressCredentials] = None

    model_config = _MODEL_CONFIG

    @classmethod
    def source_account(cls) -> SorobanCredentials:
        return cls(type=SorobanCredentialsType.SOURCE_ACCOUNT)

    @classmethod
    def for_address(cls, address: Union[str, Address], nonce: int = 0,
                    signature_expiration_ledger: int = 0) -> SorobanCredentials:
        return cls(
            type=SorobanCredentialsType.ADDRESS,
            address=AddressCredentials(
                address=address,
                nonce=nonce,
                signature_expiration_ledger=signature_expiration_ledger,
            ),
        )


class AuthorizationEntry(BaseModel):
    """A party's authorization of part of the call."""
    credentials: SorobanCredentials
    root_invocation: AuthorizedInvocation = Field(..., alias="rootInvocation")

    model_config = _MODEL_CONFIG

    @property
    def is_address_credentialed(self) -> bool:
        return self.credentials.type is SorobanCredentialsType.ADDRESS and self.credentials.address is not None

    def to_wire(self) -> str:
        return to_wire(self)

    @classmethod
    def from_wire(cls, data: str) -> AuthorizationEntry:
        return from_wire(cls, data)


class HashIdPreimageSorobanAuthorization(BaseModel):
    """The structure a party signs to authorize an entry."""
    network_id: str = Field(..., alias="networkId")
    nonce: int
    signature_expiration_ledger: int = Field(..., alias="signatureExpirationLedger")
    invocation: AuthorizedInvocation

    model_config = _MODEL_CONFIG

    def payload(self) -> bytes:
        """32-byte hash that is actually signed."""
        return hash_sha256(dumps_canonical(model_to_plain(self)).encode("utf-8"))

    def to_wire(self) -> str:
        return to_wire(self)

    @classmethod
    def from_wire(cls, data: str) -> HashIdPreimageSorobanAuthorization:
        return from_wire(cls, data)


# =============================================================================
# Operations and transactions
# =============================================================================

class InvokeHostFunctionOperation(BaseModel):
    """Invoke a contract function."""
    type: Literal["invoke_host_function"] = "invoke_host_function"
    function: InvokeContractArgs
    auth: List[AuthorizationEntry] = Field(default_factory=list)
    source: Optional[str] = None

    model_config = _MODEL_CONFIG


class RestoreFootprintOperation(BaseModel):
    """Restore archived entries listed in the read-write footprint."""
    type: Literal["restore_footprint"] = "restore_footprint"
    source: Optional[str] = None

    model_config = _MODEL_CONFIG


Operation = Annotated[
    Union[InvokeHostFunctionOperation, RestoreFootprintOperation],
    Field(discriminator="type"),
]


class TimeBounds(BaseModel):
    """Validity window in unix seconds; ``max_time`` 0 means unbounded."""
    min_time: int = Field(default=0, alias="minTime")
    max_time: int = Field(default=0, alias="maxTime")

    model_config = _MODEL_CONFIG


class DecoratedSignature(BaseModel):
    """An envelope signature with the signer's key hint."""
    hint: str
    signature: str

    model_config = _MODEL_CONFIG


class Transaction(BaseModel):
    """
    A transaction together with its envelope signatures.

    ``signatures`` are excluded from the hash so signing never changes what
    is being signed.
    """
    source_account: str = Field(..., alias="sourceAccount")
    fee: int
    sequence: int
    time_bounds: Optional[TimeBounds] = Field(default=None, alias="timeBounds")
    memo: Optional[str] = None
    operations: List[Operation]
    soroban_data: Optional[SorobanTransactionData] = Field(default=None, alias="sorobanData")
    signatures: List[DecoratedSignature] = Field(default_factory=list)

    model_config = _MODEL_CONFIG

    def signature_base(self, network_passphrase: str) -> bytes:
        """Bytes whose hash the envelope signers sign."""
        body = self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"signatures"})
        return network_id(network_passphrase) + dumps_canonical(body).encode("utf-8")

    def hash(self, network_passphrase: str) -> bytes:
        """
        Compute the transaction hash.

        Args:
            network_passphrase: Passphrase of the target network

        Returns:
            32-byte transaction hash
        """
        return hash_sha256(self.signature_base(network_passphrase))

    def hash_hex(self, network_passphrase: str) -> str:
        return self.hash(network_passphrase).hex()

    def to_envelope_wire(self) -> str:
        """Wire form of the full envelope, signatures included."""
        return to_wire(self)

    @classmethod
    def from_envelope_wire(cls, data: str) -> Transaction:
        return from_wire(cls, data)

    def to_dict(self) -> Dict[str, Any]:
        return model_to_plain(self)


__all__ = [
    "ScValType",
    "ScVal",
    "ScMapEntry",
    "LedgerKey",
    "LedgerFootprint",
    "SorobanResources",
    "SorobanTransactionData",
    "InvokeContractArgs",
    "AuthorizedInvocation",
    "SorobanCredentialsType",
    "AddressCredentials",
    "SorobanCredentials",
    "AuthorizationEntry",
    "HashIdPreimageSorobanAuthorization",
    "InvokeHostFunctionOperation",
    "RestoreFootprintOperation",
    "Operation",
    "TimeBounds",
    "DecoratedSignature",
    "Transaction",
]
