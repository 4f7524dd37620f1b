"""
Authentication module interface.

Other modules should depend on ISessionManager, not the concrete implementation.
This enables testing with mocks and swapping the identity provider.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from shared.cleanup import CleanupReport
from shared.observable import Observable

from .models import Identity, ProfileUpdate, RegistrationRequest


@runtime_checkable
class ISessionManager(Protocol):
    """
    Interface for session and identity operations.

    The session manager is the sole writer of the current identity.
    Consumers read ``identity`` and ``loading`` and subscribe to changes.
    """

    identity: Observable[Optional[Identity]]
    loading: Observable[bool]

    async def bootstrap(self) -> Optional[Identity]:
        """
        Restore the identity from a persisted session.

        Always clears ``loading`` exactly once, whatever path is taken.

        Returns:
            The published identity, or None when signed out
        """
        ...

    async def enrich(self, session_user: Any) -> Identity:
        """
        Publish a minimal identity, then upgrade it with the profile record.

        Args:
            session_user: Raw user record from the identity provider

        Returns:
            The last identity published for this user
        """
        ...

    async def login(self, email: str, password: str) -> Any:
        """
        Verify credentials with the identity provider.

        Raises:
            LoginFailedError: If the provider rejects the credentials
        """
        ...

    async def register(self, request: RegistrationRequest) -> Any:
        """
        Create an account and (best-effort) its profile row.

        Raises:
            RegistrationFailedError: If the provider refuses the sign-up
        """
        ...

    async def logout(self) -> None:
        """
        Sign out and clear the identity.

        Raises:
            SignOutFailedError: If the provider call fails
        """
        ...

    async def update_profile(self, update: ProfileUpdate) -> Identity:
        """Apply owner-editable profile changes and republish the identity."""
        ...

    async def delete_account(self) -> CleanupReport:
        """Remove the caller's data and account, best-effort per step."""
        ...
