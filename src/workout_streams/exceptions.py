"""
Custom exceptions for workout-streams.

This module defines the error hierarchy surfaced by the store adapters and
services. Each exception includes:
- A descriptive message
- An error code for callers that branch on failure kinds
- Optional details for debugging

Absence of data (no routes, no heart-rate samples, no distance samples) is
never an error. Only store-level failures end up here.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Store errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    NO_PERMISSION = "NO_PERMISSION"
    UPSTREAM_QUERY_FAILED = "UPSTREAM_QUERY_FAILED"

    # Lookup errors
    NO_WORKOUTS_FOUND = "NO_WORKOUTS_FOUND"


class WorkoutStreamsError(Exception):
    """
    Base exception for all workout-streams errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON output."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Store Errors
# ============================================================================

class StoreUnavailableError(WorkoutStreamsError):
    """Raised when the backing activity store cannot be reached at all."""

    def __init__(
        self,
        message: str = "Activity store is not available",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.STORE_UNAVAILABLE,
            details=details,
        )


class NoPermissionError(WorkoutStreamsError):
    """Raised when the caller is not authorized to read a sample kind."""

    def __init__(
        self,
        kind: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = dict(details or {})
        if kind:
            error_details["kind"] = kind
            message = f"Not authorized to read '{kind}' samples"
        else:
            message = "Not authorized to read from the activity store"
        self.kind = kind
        super().__init__(
            message=message,
            code=ErrorCode.NO_PERMISSION,
            details=error_details,
        )


class UpstreamQueryFailedError(WorkoutStreamsError):
    """
    Raised when an individual store query fails.

    The original exception is kept in ``cause`` and chained as ``__cause__``
    by the code that raises this error.
    """

    def __init__(
        self,
        query: str,
        cause: BaseException,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = dict(details or {})
        error_details["query"] = query
        error_details["cause"] = repr(cause)
        self.query = query
        self.cause = cause
        super().__init__(
            message=f"Query '{query}' failed: {cause}",
            code=ErrorCode.UPSTREAM_QUERY_FAILED,
            details=error_details,
        )


# ============================================================================
# Lookup Errors
# ============================================================================

class NoWorkoutsFoundError(WorkoutStreamsError):
    """Raised when a workout lookup by filter matches nothing."""

    def __init__(
        self,
        message: str = "No workouts matched the query",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.NO_WORKOUTS_FOUND,
            details=details,
        )
