"""API models package."""

from .user import AuthenticatedUser, TokenPayload
from .errors import ErrorResponse
from .payments import VerifyPaymentRequest

__all__ = [
    "AuthenticatedUser",
    "TokenPayload",
    "ErrorResponse",
    "VerifyPaymentRequest",
]
