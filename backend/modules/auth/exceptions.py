"""
Authentication module exceptions.

These exceptions are raised by the auth module and carry user-presentable
messages; raw provider errors never reach the caller's display.
"""

from shared.exceptions import AuthenticationError, NotFoundError, ValidationError


class LoginFailedError(AuthenticationError):
    """Raised when the provider rejects the supplied credentials."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="LOGIN_FAILED")


class RegistrationFailedError(AuthenticationError):
    """Raised when the provider refuses to create the account."""

    def __init__(self, message: str = "Registration failed"):
        super().__init__(message, code="REGISTRATION_FAILED")


class NotAuthenticatedError(AuthenticationError):
    """Raised when an operation needs an identity and none is published."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message, code="NOT_AUTHENTICATED")


class SignOutFailedError(AuthenticationError):
    """Raised when the provider sign-out call fails."""

    def __init__(self, message: str = "Sign out failed"):
        super().__init__(message, code="SIGN_OUT_FAILED")


class PasswordUpdateError(ValidationError):
    """Raised when a password change or reset request is rejected."""

    def __init__(self, message: str):
        super().__init__(message, code="PASSWORD_UPDATE_FAILED")


class ProfileNotFoundError(NotFoundError):
    """Raised when the identity has no profile row to update."""

    def __init__(self, user_id: str):
        super().__init__(
            f"Profile not found: {user_id}",
            code="PROFILE_NOT_FOUND",
            details={"user_id": user_id},
        )
