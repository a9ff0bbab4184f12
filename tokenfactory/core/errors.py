"""Error kinds raised by the token factory core.

Every failure path raises a distinct ContractError subclass. Each carries a
machine-readable code and category so callers (the CLI, a transaction
submitter) can switch on the kind and decide whether to resubmit.

Usage:
    from tokenfactory.core.errors import UnauthorizedError

    try:
        core.execute(info, msg)
    except ContractError as e:
        print(e.to_response())
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided bad input
    - PERMISSION: Caller not authorized
    - PERSISTENCE: Store read/write problems
    """

    VALIDATION = "validation"
    PERMISSION = "permission"
    PERSISTENCE = "persistence"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Validation errors
    INVALID_DENOM = "invalid_denom"
    INVALID_FUNDS = "invalid_funds"
    INVALID_ADDRESS = "invalid_address"
    INVALID_MESSAGE = "invalid_message"

    # Permission errors
    UNAUTHORIZED = "unauthorized"

    # Persistence errors
    PERSISTENCE_ERROR = "persistence_error"
    NOT_INITIALIZED = "not_initialized"
    ALREADY_INITIALIZED = "already_initialized"
    CONCURRENT_MODIFICATION = "concurrent_modification"


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Machine-readable error code
    - category: Error category (validation, permission, persistence)
    - retriable: Whether the operation should be resubmitted
    - details: Optional additional context
    """

    success: bool = False
    error: str = ""
    code: str = ""
    category: str = ""
    retriable: bool = False
    details: dict[str, object] | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


class ContractError(Exception):
    """Base class for every error the core raises."""

    code: ErrorCode = ErrorCode.PERSISTENCE_ERROR
    category: ErrorCategory = ErrorCategory.PERSISTENCE
    retriable: bool = False

    def __init__(self, message: str, **details: object) -> None:
        self.message = message
        self.details: dict[str, object] = dict(details)
        super().__init__(message)

    def to_response(self) -> dict[str, object]:
        """Build the standardized error dict for this failure."""
        return ErrorResponse(
            error=self.message,
            code=self.code.value,
            category=self.category.value,
            retriable=self.retriable,
            details=self.details or None,
        ).to_dict()


class InvalidDenomError(ContractError):
    """A denom violates the factory namespacing rule."""

    code = ErrorCode.INVALID_DENOM
    category = ErrorCategory.VALIDATION

    def __init__(self, denom: str, message: str) -> None:
        self.denom = denom
        super().__init__(f"Invalid denom {denom!r}: {message}", denom=denom)


class UnauthorizedError(ContractError):
    """The caller failed a manager or whitelist check."""

    code = ErrorCode.UNAUTHORIZED
    category = ErrorCategory.PERMISSION

    def __init__(self, caller: str, reason: str) -> None:
        self.caller = caller
        super().__init__(f"Unauthorized: {reason}", caller=caller)


class InvalidFundsError(ContractError):
    """Burn was invoked without attached funds."""

    code = ErrorCode.INVALID_FUNDS
    category = ErrorCategory.VALIDATION

    def __init__(self, message: str = "Burn requires attached funds") -> None:
        super().__init__(message)


class InvalidAddressError(ContractError):
    """A principal identifier is empty or contains whitespace."""

    code = ErrorCode.INVALID_ADDRESS
    category = ErrorCategory.VALIDATION

    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        super().__init__(f"Invalid address {address!r}: {reason}", address=address)


class InvalidMessageError(ContractError):
    """A request envelope could not be parsed into a known message."""

    code = ErrorCode.INVALID_MESSAGE
    category = ErrorCategory.VALIDATION


class PersistenceError(ContractError):
    """The underlying store failed to read or write."""

    code = ErrorCode.PERSISTENCE_ERROR
    category = ErrorCategory.PERSISTENCE
    retriable = True


class NotInitializedError(PersistenceError):
    """The configuration record has not been created yet."""

    code = ErrorCode.NOT_INITIALIZED
    retriable = False


class AlreadyInitializedError(PersistenceError):
    """Instantiation ran against a store that already holds a record."""

    code = ErrorCode.ALREADY_INITIALIZED
    retriable = False


class ConcurrentModificationError(PersistenceError):
    """Another writer committed between this operation's load and commit."""

    code = ErrorCode.CONCURRENT_MODIFICATION

    def __init__(self, expected_version: int, actual_version: int) -> None:
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Configuration changed concurrently: expected version "
            f"{expected_version}, found {actual_version}",
            expected_version=expected_version,
            actual_version=actual_version,
        )
