"""
Authentication module.

Handles the session lifecycle, identity publication and profile management.

Public API:
- ISessionManager: Interface for session operations
- Identity: The authenticated actor as seen by the client
- ProfileRecord / ProfileUpdate / RegistrationRequest: Profile data
- Auth exceptions: LoginFailedError, NotAuthenticatedError, etc.
"""

from .interfaces import ISessionManager
from .models import (
    AuthEvent,
    Identity,
    ProfileRecord,
    ProfileUpdate,
    RegistrationRequest,
)
from .exceptions import (
    LoginFailedError,
    RegistrationFailedError,
    NotAuthenticatedError,
    SignOutFailedError,
    PasswordUpdateError,
    ProfileNotFoundError,
)

__all__ = [
    # Interface
    "ISessionManager",
    # Models
    "AuthEvent",
    "Identity",
    "ProfileRecord",
    "ProfileUpdate",
    "RegistrationRequest",
    # Exceptions
    "LoginFailedError",
    "RegistrationFailedError",
    "NotAuthenticatedError",
    "SignOutFailedError",
    "PasswordUpdateError",
    "ProfileNotFoundError",
]
