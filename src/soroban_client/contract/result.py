"""
Typed call results and contract error decoding.

A contract that fails with one of its own error codes surfaces in
simulation diagnostics and decoder failures as ``Error(Contract, #<n>)``.
When the caller supplies an error table, such failures are returned as
``Err`` values instead of being raised, and successes as ``Ok``.
"""

from __future__ import annotations
import re
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

from ..runtime.errors import ContractError
from .options import ErrorMessage

T = TypeVar("T")

CONTRACT_ERROR_PATTERN = re.compile(r"Error\(Contract, #(\d+)\)")
"""Grammar of a contract-level error: ``Error(Contract, #`` decimal code ``)``."""


class Ok(Generic[T]):
    """Successful result wrapping ``value``."""

    def __init__(self, value: T):
        self.value = value

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Any:
        raise ValueError("No error")

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Ok) and other.value == self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


class Err:
    """Failed result carrying a contract-defined error."""

    def __init__(self, error: ErrorMessage, code: Optional[int] = None):
        self.error = error
        self.code = code

    def unwrap(self) -> Any:
        """
        Raises:
            ContractError: Always, with the contract error code and message
        """
        raise ContractError(self.code, self.error.message)

    def unwrap_err(self) -> ErrorMessage:
        return self.error

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Err) and other.code == self.code and other.error == self.error

    def __repr__(self) -> str:
        return f"Err(code={self.code}, message={self.error.message!r})"


def parse_contract_error_code(message: str) -> Optional[int]:
    """Decimal code of the first ``Error(Contract, #n)`` in ``message``."""
    match = CONTRACT_ERROR_PATTERN.search(message)
    if match is None:
        return None
    return int(match.group(1))


def parse_contract_error(message: str, error_types: Optional[Mapping[int, Any]]) -> Optional[Err]:
    """
    Translate a failure message into a typed contract error.

    Args:
        message: Rendered failure message
        error_types: Caller's table from contract error code to error

    Returns:
        ``Err`` for a matching code listed in the table, otherwise None
    """
    if not error_types:
        return None
    code = parse_contract_error_code(message)
    if code is None or code not in error_types:
        return None
    error = error_types[code]
    if not isinstance(error, ErrorMessage):
        error = ErrorMessage.model_validate(error)
    return Err(error, code)


def error_table(entries: Dict[int, str]) -> Dict[int, ErrorMessage]:
    """Build an error table from plain code-to-message pairs."""
    return {code: ErrorMessage(message=message) for code, message in entries.items()}


__all__ = [
    "CONTRACT_ERROR_PATTERN",
    "Ok",
    "Err",
    "parse_contract_error_code",
    "parse_contract_error",
    "error_table",
]
