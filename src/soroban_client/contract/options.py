"""
Contract call options.

``CallRequest`` is the immutable per-call configuration; the dataclasses
below carry the per-operation options of the lifecycle functions.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..tx.builder import BASE_FEE
from ..tx.types import ScVal

DEFAULT_TIMEOUT = 300
"""Default validity window of a contract transaction, in seconds."""

SignTransaction = Callable[..., Union[str, Awaitable[str]]]
"""``sign_transaction(envelope_wire, network_passphrase=...) -> envelope_wire``"""

SignAuthEntry = Callable[..., Union[bytes, Awaitable[bytes]]]
"""``sign_auth_entry(preimage_wire, account_to_sign=...) -> signature bytes``"""

ResultParser = Callable[[ScVal], Any]


class ErrorMessage(BaseModel):
    """A contract-defined error, as listed in the caller's error table."""
    message: str


class CallRequest(BaseModel):
    """
    Configuration of a single contract invocation.

    Field aliases follow the camelCase option names, so a plain options
    mapping such as ``{"contractId": ..., "publicKey": ...}`` validates
    directly.
    """
    contract_id: str = Field(..., alias="contractId")
    method: str
    args: List[ScVal] = Field(default_factory=list)
    public_key: Optional[str] = Field(default=None, alias="publicKey")
    network_passphrase: str = Field(..., alias="networkPassphrase")
    rpc_url: str = Field(..., alias="rpcUrl")
    fee: int = BASE_FEE
    timeout_in_seconds: int = Field(default=DEFAULT_TIMEOUT, alias="timeoutInSeconds")
    simulate: bool = True
    restore: bool = False
    allow_http: bool = Field(default=False, alias="allowHttp")
    sign_transaction: Optional[SignTransaction] = Field(default=None, alias="signTransaction")
    sign_auth_entry: Optional[SignAuthEntry] = Field(default=None, alias="signAuthEntry")
    error_types: Optional[Dict[int, ErrorMessage]] = Field(default=None, alias="errorTypes")
    parse_result_xdr: Optional[ResultParser] = Field(default=None, alias="parseResultXdr")

    model_config = {"populate_by_name": True, "frozen": True, "arbitrary_types_allowed": True}

    def with_overrides(self, **changes: Any) -> CallRequest:
        """Copy of this request with some fields replaced."""
        return self.model_copy(update=changes)

    @classmethod
    def from_env(cls, **overrides: Any) -> CallRequest:
        """
        Create a request with connection settings taken from the environment.

        Reads ``SOROBAN_RPC_URL``, ``SOROBAN_NETWORK_PASSPHRASE`` and
        ``SOROBAN_PUBLIC_KEY``; keyword arguments take precedence.

        Example:
            ```python
            request = CallRequest.from_env(contract_id=cid, method="hello")
            ```
        """
        values: Dict[str, Any] = {}
        env = {
            "rpc_url": "SOROBAN_RPC_URL",
            "network_passphrase": "SOROBAN_NETWORK_PASSPHRASE",
            "public_key": "SOROBAN_PUBLIC_KEY",
        }
        for name, var in env.items():
            if os.environ.get(var):
                values[name] = os.environ[var]
        values.update(overrides)
        return cls.model_validate(values)


def coerce_request(options: Union[CallRequest, Dict[str, Any]]) -> CallRequest:
    """Accept either a ``CallRequest`` or a mapping of its fields."""
    if isinstance(options, CallRequest):
        return options
    return CallRequest.model_validate(dict(options))


# =============================================================================
# Per-operation options
# =============================================================================

@dataclass
class SimulateOptions:
    """Options for ``simulate``."""

    restore: Optional[bool] = None


@dataclass
class SignOptions:
    """Options for ``sign`` and ``sign_and_send``."""

    force: bool = False
    sign_transaction: Optional[SignTransaction] = None


@dataclass
class SignAuthEntriesOptions:
    """Options for ``sign_auth_entries``."""

    expiration: Optional[Union[int, Awaitable[int]]] = None
    sign_auth_entry: Optional[SignAuthEntry] = None
    address: Optional[str] = None
    authorize_entry: Optional[Callable[..., Any]] = None


__all__ = [
    "DEFAULT_TIMEOUT",
    "SignTransaction",
    "SignAuthEntry",
    "ResultParser",
    "ErrorMessage",
    "CallRequest",
    "coerce_request",
    "SimulateOptions",
    "SignOptions",
    "SignAuthEntriesOptions",
]
