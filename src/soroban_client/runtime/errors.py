"""
Soroban Client Error Model

This module provides the error handling framework for the contract call
lifecycle. Every failure the client raises derives from SorobanClientError
and carries a stable ErrorCode, optional structured details and the
underlying cause.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List
from enum import IntEnum


class ErrorCode(IntEnum):
    """Client error codes, grouped by lifecycle stage."""

    # Success
    OK = 0

    # General errors
    UNKNOWN = 1
    INTERNAL = 2

    # Lifecycle errors (100-199)
    MISSING_IDENTITY = 100
    NOT_YET_BUILT = 101
    NOT_YET_SIMULATED = 102
    SIMULATION_FAILED = 103
    EXPIRED_STATE = 104
    TRANSACTION_BUILDER = 105

    # Signing errors (200-299)
    NEEDS_MORE_SIGNATURES = 200
    NO_SIGNATURE_NEEDED = 201
    NO_UNSIGNED_ENTRIES = 202
    NO_SIGNER = 203
    NOT_SIGNED = 204
    INVALID_SIGNATURE = 205

    # Restore and submission errors (300-399)
    RESTORATION_FAILURE = 300
    SEND_FAILED = 301
    SEND_RESULT_ONLY = 302
    TRANSACTION_STILL_PENDING = 303

    # Encoding errors (400-499)
    ENCODING_ERROR = 400
    MARSHAL_ERROR = 401
    UNMARSHAL_ERROR = 402
    INVALID_ADDRESS = 403

    # Network errors (500-599)
    NETWORK_ERROR = 500
    ACCOUNT_NOT_FOUND = 501

    # Contract errors (600-699)
    CONTRACT_ERROR = 600


class SorobanClientError(Exception):
    """
    Base class for all client errors.

    Provides structured error information shared by every failure kind.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a client error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SorobanClientError':
        """
        Create error from dictionary representation.

        Always returns a plain ``SorobanClientError``; subclasses take
        different constructor arguments and the code carries the kind.
        """
        try:
            code = ErrorCode(data.get("code", ErrorCode.UNKNOWN))
        except ValueError:
            code = ErrorCode.UNKNOWN
        message = data.get("message", "Unknown error")
        details = data.get("details")
        return SorobanClientError(message, code, details)


# =============================================================================
# Lifecycle errors
# =============================================================================

class MissingIdentityError(SorobanClientError):
    """No submitter public key was configured."""

    def __init__(self, message: str = "Public key not provided. Have you forgotten to set `public_key` on the call request?",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.MISSING_IDENTITY, details, cause)


class NotYetBuiltError(SorobanClientError):
    """The call has no finalized transaction yet."""

    def __init__(self, message: str = "Transaction has not yet been assembled or simulated",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NOT_YET_BUILT, details, cause)


class NotYetSimulatedError(SorobanClientError):
    """Derived simulation data was requested before any simulation ran."""

    def __init__(self, message: str = "Transaction has not yet been simulated",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NOT_YET_SIMULATED, details, cause)


class SimulationFailedError(SorobanClientError):
    """The RPC reported an error for the simulation."""

    def __init__(self, message: str = "Transaction simulation failed",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.SIMULATION_FAILED, details, cause)


class ExpiredStateError(SorobanClientError):
    """Simulation requires archived ledger entries to be restored first."""

    def __init__(self, message: str = (
                     "You need to restore some contract state before you can invoke this method. "
                     "You can set `restore` to true in the call options in order to automatically "
                     "restore the contract state when needed."),
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.EXPIRED_STATE, details, cause)


class TransactionBuilderError(SorobanClientError):
    """A draft transaction could not be finalized."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.TRANSACTION_BUILDER, details, cause)


# =============================================================================
# Signing errors
# =============================================================================

class NeedsMoreSignaturesError(SorobanClientError):
    """Non-invoker authorization entries are still unsigned."""

    def __init__(self, addresses: List[str], message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        if message is None:
            message = (f"Transaction requires signatures from {', '.join(addresses)}. "
                       "See `needs_non_invoker_signing_by` for details.")
        super().__init__(message, ErrorCode.NEEDS_MORE_SIGNATURES, details, cause)
        self.addresses = list(addresses)


class NoSignatureNeededError(SorobanClientError):
    """Signing was requested where none is required."""

    def __init__(self, message: str = (
                     "This is a read call. It requires no signature or sending. "
                     "Use `force=True` to sign and send anyway."),
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NO_SIGNATURE_NEEDED, details, cause)


class NoUnsignedEntriesError(SorobanClientError):
    """No unsigned non-invoker authorization entries remain."""

    def __init__(self, message: str = "No unsigned non-invoker auth entries; maybe you already signed?",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NO_UNSIGNED_ENTRIES, details, cause)


class NoSignerError(SorobanClientError):
    """A signing callback was required but none was configured."""

    def __init__(self, message: str = "No signing callback configured",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NO_SIGNER, details, cause)


class NotSignedError(SorobanClientError):
    """Send was requested before the envelope was signed."""

    def __init__(self, message: str = (
                     "The transaction has not yet been signed. "
                     "Run `sign` first, or use `sign_and_send` instead."),
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NOT_SIGNED, details, cause)


class InvalidSignatureError(SorobanClientError):
    """A signature does not verify against the expected key."""

    def __init__(self, message: str = "Invalid signature",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_SIGNATURE, details, cause)


# =============================================================================
# Restore and submission errors
# =============================================================================

class RestorationFailureError(SorobanClientError):
    """Automatic footprint restoration did not reach a successful state."""

    def __init__(self, message: str = "Automatic restore failed",
                 result: Any = None, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.RESTORATION_FAILURE, details, cause)
        self.result = result


class SendFailedError(SorobanClientError):
    """The RPC did not accept the transaction, or it failed on ledger."""

    def __init__(self, message: str = "Sending the transaction to the network failed",
                 response: Any = None, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.SEND_FAILED, details, cause)
        self.response = response


class SendResultOnlyError(SorobanClientError):
    """Only the send response is available; no final result was observed."""

    def __init__(self, message: str = "Transaction was sent but its final result is unknown",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.SEND_RESULT_ONLY, details, cause)


class TransactionStillPendingError(SorobanClientError):
    """The transaction was not found on ledger before the timeout."""

    def __init__(self, message: str = "Transaction is still pending",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.TRANSACTION_STILL_PENDING, details, cause)


# =============================================================================
# Encoding errors
# =============================================================================

class EncodingError(SorobanClientError):
    """Data encoding/decoding errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class MarshalError(EncodingError):
    """Data marshaling error."""

    def __init__(self, message: str = "Marshal error",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.MARSHAL_ERROR, details, cause)


class UnmarshalError(EncodingError):
    """Data unmarshaling error."""

    def __init__(self, message: str = "Unmarshal error",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.UNMARSHAL_ERROR, details, cause)


class InvalidAddressError(EncodingError):
    """Malformed strkey address."""

    def __init__(self, message: str = "Invalid address",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_ADDRESS, details, cause)


# =============================================================================
# Network errors
# =============================================================================

class RpcError(SorobanClientError):
    """JSON-RPC or transport failure."""

    def __init__(self, message: str, rpc_code: Optional[int] = None, data: Any = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NETWORK_ERROR, details, cause)
        self.rpc_code = rpc_code
        self.data = data


class AccountNotFoundError(RpcError):
    """Account does not exist on ledger."""

    def __init__(self, message: str = "Account not found", rpc_code: Optional[int] = None,
                 data: Any = None, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, rpc_code, data, details, cause)
        self.code = ErrorCode.ACCOUNT_NOT_FOUND


# =============================================================================
# Contract errors
# =============================================================================

class ContractError(SorobanClientError):
    """An application-level error returned by the contract itself."""

    def __init__(self, contract_code: int, message: str = "",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message or f"Contract error #{contract_code}",
                         ErrorCode.CONTRACT_ERROR, details, cause)
        self.contract_code = contract_code


def error_from_response(response: Dict[str, Any]) -> Optional[SorobanClientError]:
    """
    Create an appropriate error from a JSON-RPC response.

    Args:
        response: RPC response containing error information

    Returns:
        Appropriate error instance or None if no error
    """
    if "error" not in response:
        return None

    error_data = response["error"]
    if isinstance(error_data, str):
        return RpcError(error_data)

    if not isinstance(error_data, dict):
        return RpcError(str(error_data))

    message = error_data.get("message", "Unknown error")
    rpc_code = error_data.get("code")
    data = error_data.get("data")

    if "not found" in message.lower() and "account" in message.lower():
        return AccountNotFoundError(message, rpc_code, data)
    return RpcError(message, rpc_code, data)


__all__ = [
    "ErrorCode",
    "SorobanClientError",
    "MissingIdentityError",
    "NotYetBuiltError",
    "NotYetSimulatedError",
    "SimulationFailedError",
    "ExpiredStateError",
    "TransactionBuilderError",
    "NeedsMoreSignaturesError",
    "NoSignatureNeededError",
    "NoUnsignedEntriesError",
    "NoSignerError",
    "NotSignedError",
    "InvalidSignatureError",
    "RestorationFailureError",
    "SendFailedError",
    "SendResultOnlyError",
    "TransactionStillPendingError",
    "EncodingError",
    "MarshalError",
    "UnmarshalError",
    "InvalidAddressError",
    "RpcError",
    "AccountNotFoundError",
    "ContractError",
    "error_from_response",
]
