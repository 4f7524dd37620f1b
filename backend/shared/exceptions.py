"""
Base exception classes for the HRDC assistant.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class HRDCError(Exception):
    """
    Base exception for all HRDC errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(HRDCError):
    """Resource not found."""

    pass


class ValidationError(HRDCError):
    """Input validation failed."""

    pass


class AuthenticationError(HRDCError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(HRDCError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(HRDCError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class StoreError(ExternalServiceError):
    """A query against the remote relational store failed."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Store operation failed ({operation}): {reason}",
            service="store",
            code="STORE_ERROR",
            details={"operation": operation, "reason": reason},
        )


class OperationTimeoutError(ExternalServiceError):
    """
    A remote call did not settle before its deadline.

    Treated as the same failure class as any other remote error.
    """

    def __init__(self, operation: str, seconds: float, service: str = "store"):
        super().__init__(
            f"Operation timed out after {seconds}s: {operation}",
            service=service,
            code="TIMEOUT",
            details={"operation": operation, "timeout_seconds": seconds},
        )
