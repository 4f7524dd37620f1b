"""
Session manager implementation.

Owns the current identity: restores it from a persisted session, follows
provider session-change notifications, and upgrades the minimal identity
with the profile record.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import httpx
from supabase import AsyncClient, AuthError

from shared.cleanup import CleanupReport, CleanupStep, run_cleanup
from shared.config import Settings, get_settings
from shared.exceptions import HRDCError
from shared.observable import Observable

from .exceptions import (
    LoginFailedError,
    NotAuthenticatedError,
    PasswordUpdateError,
    ProfileNotFoundError,
    RegistrationFailedError,
    SignOutFailedError,
)
from .interfaces import ISessionManager
from .models import AuthEvent, Identity, ProfileUpdate, RegistrationRequest
from .repository import ProfileRepository
from .storage import MemorySessionStorage, purge_session_artifacts

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

# Provider failures that callers see as a normalized auth error
_PROVIDER_ERRORS = (AuthError, httpx.HTTPError)


class SessionManager(ISessionManager):
    """
    Session manager backed by Supabase Auth.

    Publishes ``identity`` (None when signed out) and ``loading`` (True until
    bootstrap settles). The profile repository should be built with the
    profile fetch deadline so that a slow profile store never blocks the
    minimal identity.
    """

    def __init__(
        self,
        client: AsyncClient,
        profiles: ProfileRepository,
        storage: MemorySessionStorage,
        settings: Optional[Settings] = None,
        conversations: Any = None,  # ConversationRepository - injected
    ):
        self._client = client
        self._profiles = profiles
        self._storage = storage
        self._settings = settings or get_settings()
        self._conversations = conversations
        self._subscription: Any = None
        self._tasks: set[asyncio.Task] = set()

        self.identity: Observable[Optional[Identity]] = Observable(None)
        self.loading: Observable[bool] = Observable(True)

    @property
    def current(self) -> Optional[Identity]:
        return self.identity.value

    # -------------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------------

    async def bootstrap(self) -> Optional[Identity]:
        """
        Restore the identity from the persisted session.

        The session is cross-checked against an independent user lookup; a
        missing or mismatched user means the local session is corrupt, so
        it is purged and the identity stays absent. Unexpected failures are
        handled the same way.
        """
        try:
            session = await self._client.auth.get_session()
            if session is None:
                self.identity.publish(None)
                return None

            response = await self._client.auth.get_user()
            user = response.user if response is not None else None
            if user is None or user.id != session.user.id:
                logger.warning("Persisted session failed verification, purging it")
                await self._purge_session()
                self.identity.publish(None)
                return None

            return await self.enrich(user)
        except Exception as e:
            logger.error(f"Session bootstrap failed, treating as signed out: {e}")
            await self._purge_session()
            self.identity.publish(None)
            return None
        finally:
            self.loading.publish(False)

    def subscribe_to_auth_events(self) -> Callable[[], None]:
        """
        Follow provider session-change notifications.

        Returns:
            A callable that stops following them
        """
        self._subscription = self._client.auth.on_auth_state_change(self._on_auth_state_change)
        return self._subscription.unsubscribe

    def _on_auth_state_change(self, event: str, session: Any) -> None:
        # Provider callbacks are synchronous; hand off to the running loop
        task = asyncio.get_running_loop().create_task(self.handle_auth_event(event, session))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def handle_auth_event(self, event: str, session: Any) -> None:
        """
        Apply one session-change notification.

        A present session (sign-in, token refresh, user update, ...) re-runs
        enrichment. An absent session clears the identity; an explicit
        sign-out also purges the persisted session.
        """
        logger.debug(f"Auth event {event} (session present: {session is not None})")
        if session is not None and session.user is not None:
            await self.enrich(session.user)
            return

        self.identity.publish(None)
        if event == AuthEvent.SIGNED_OUT.value:
            await self._purge_session()

    async def enrich(self, session_user: Any) -> Identity:
        """
        Publish the minimal identity at once, then the profile-enriched one.

        A profile fetch that fails or overruns its deadline leaves the
        minimal identity in place. No retry is attempted.
        """
        minimal = Identity.from_session_user(session_user)
        self.identity.publish(minimal)

        try:
            profile = await self._profiles.get_by_id(minimal.id)
        except HRDCError as e:
            logger.warning(f"Profile fetch failed for {minimal.id}, keeping minimal identity: {e}")
            return minimal

        if profile is None:
            return minimal

        current = self.identity.value
        if current is None or current.id != minimal.id:
            # Signed out or switched user while the profile was loading
            return minimal

        enriched = current.merge_profile(profile)
        self.identity.publish(enriched)
        return enriched

    async def wait_idle(self) -> None:
        """Wait for auth-event handlers scheduled by the provider callback."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def close(self) -> None:
        """Stop following auth events and wait for pending handlers."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        await self.wait_idle()

    # -------------------------------------------------------------------------
    # User-initiated operations
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> Any:
        """
        Verify credentials with the provider.

        The identity is published by the resulting SIGNED_IN notification,
        not by this call.
        """
        try:
            response = await self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except _PROVIDER_ERRORS as e:
            logger.info(f"Login rejected for {email}: {e}")
            raise LoginFailedError()

        if response.user is None:
            raise LoginFailedError()
        return response.user

    async def register(self, request: RegistrationRequest) -> Any:
        """
        Create the account, then insert its profile row best-effort.

        A failed profile insert is logged only; enrichment falls back to
        empty profile fields for such accounts.
        """
        try:
            response = await self._client.auth.sign_up(
                {
                    "email": request.email,
                    "password": request.password,
                    "options": {
                        "email_redirect_to": f"{self._settings.frontend_url}/login",
                        "data": {
                            "first_name": request.first_name,
                            "last_name": request.last_name,
                        },
                    },
                }
            )
        except _PROVIDER_ERRORS as e:
            logger.info(f"Registration rejected for {request.email}: {e}")
            raise RegistrationFailedError()

        user = response.user
        if user is None:
            raise RegistrationFailedError()

        try:
            await self._profiles.insert(request.profile_row(str(user.id)))
        except HRDCError as e:
            logger.error(f"Profile insert failed for new account {user.id}: {e}")

        return user

    async def logout(self) -> None:
        """Sign out with the provider, then clear the identity."""
        try:
            await self._client.auth.sign_out()
        except _PROVIDER_ERRORS as e:
            logger.error(f"Sign out failed: {e}")
            raise SignOutFailedError()
        self.identity.publish(None)

    async def update_profile(self, update: ProfileUpdate) -> Identity:
        """Write the changed fields and republish the merged identity."""
        identity = self._require_identity()
        fields = update.model_dump(exclude_none=True)
        if not fields:
            return identity

        record = await self._profiles.update(identity.id, fields)
        if record is None:
            raise ProfileNotFoundError(identity.id)

        updated = identity.merge_profile(record)
        self.identity.publish(updated)
        return updated

    async def delete_account(self) -> CleanupReport:
        """
        Remove the caller's conversations, profile and auth record.

        Each step is attempted even if an earlier one failed. The identity
        is cleared and the persisted session purged regardless.
        """
        identity = self._require_identity()

        steps: list[CleanupStep] = []
        if self._conversations is not None:
            steps.append(
                CleanupStep("conversations", lambda: self._conversations.delete_all_for_user(identity.id))
            )
        steps.extend(
            [
                CleanupStep("profile", lambda: self._profiles.delete(identity.id)),
                CleanupStep("auth user", self._profiles.delete_auth_user),
                CleanupStep("sign out", self._client.auth.sign_out),
            ]
        )

        report = await run_cleanup(steps)
        self.identity.publish(None)
        await self._purge_session()
        return report

    async def request_password_reset(self, email: str) -> None:
        """Ask the provider to email a password reset link."""
        if not email or "@" not in email:
            raise PasswordUpdateError("Please enter a valid email address")
        try:
            await self._client.auth.reset_password_for_email(
                email,
                {"redirect_to": f"{self._settings.frontend_url}/reset-password"},
            )
        except _PROVIDER_ERRORS as e:
            logger.error(f"Password reset request failed: {e}")
            raise PasswordUpdateError("Failed to send password reset email")

    async def update_password(self, new_password: str) -> None:
        """Set a new password for the signed-in user."""
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise PasswordUpdateError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        try:
            await self._client.auth.update_user({"password": new_password})
        except _PROVIDER_ERRORS as e:
            logger.error(f"Password update failed: {e}")
            raise PasswordUpdateError("Failed to update password")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_identity(self) -> Identity:
        identity = self.identity.value
        if identity is None:
            raise NotAuthenticatedError()
        return identity

    async def _purge_session(self) -> None:
        await purge_session_artifacts(
            self._storage,
            prefix=self._settings.session_key_prefix,
            suffix=self._settings.session_key_suffix,
        )
