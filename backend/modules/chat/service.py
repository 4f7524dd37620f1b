"""
Conversation synchronizer implementation.

Keeps the current identity's threads in memory, mirrors every change to the
store, and drives the per-message exchange with the AI responder:

    resolve thread -> save user message -> maybe derive title
    -> publish -> ask responder -> save reply (or error reply) -> publish
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from shared.exceptions import HRDCError
from shared.observable import Observable

from modules.auth.exceptions import NotAuthenticatedError
from modules.auth.models import Identity

from .exceptions import ThreadNotFoundError
from .interfaces import IConversationSynchronizer, IResponder
from .models import (
    DEFAULT_THREAD_TITLE,
    ERROR_REPLY,
    ConversationState,
    Message,
    ResponderProfile,
    ResponderRequest,
    Sender,
    Thread,
    derive_title,
    find_thread,
)
from .repository import ConversationRepository

logger = logging.getLogger(__name__)


class ConversationSynchronizer(IConversationSynchronizer):
    """
    Conversation state owner for the current identity.

    State is only ever replaced wholesale through ``state.publish``.
    Threads of a previous identity are discarded on every identity change.
    """

    def __init__(self, repository: ConversationRepository, responder: IResponder):
        self._repository = repository
        self._responder = responder
        self._identity: Optional[Identity] = None
        self._tasks: set[asyncio.Task] = set()

        self.state: Observable[ConversationState] = Observable(ConversationState())

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def threads(self) -> tuple[Thread, ...]:
        return self.state.value.threads

    @property
    def current_thread(self) -> Optional[Thread]:
        return self.state.value.current_thread

    # -------------------------------------------------------------------------
    # Identity binding
    # -------------------------------------------------------------------------

    def bind(self, identity: Observable[Optional[Identity]]) -> Callable[[], None]:
        """
        Follow a published identity, reloading or resetting on change.

        Returns:
            A callable that stops following it
        """

        def on_identity(value: Optional[Identity]) -> None:
            task = asyncio.get_running_loop().create_task(self.set_identity(value))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        return identity.subscribe(on_identity)

    async def set_identity(self, identity: Optional[Identity]) -> None:
        """
        Switch to a new identity.

        Absence resets state at once. A different user triggers a reload;
        a republished identity for the same user (e.g. after profile
        enrichment) only refreshes the profile details sent to the responder.
        """
        previous = self._identity
        self._identity = identity

        if identity is None:
            logger.debug("No identity, resetting conversation state")
            self.state.publish(ConversationState())
            return

        if previous is not None and previous.id == identity.id:
            return

        self.state.publish(ConversationState())
        await self.load()

    async def wait_idle(self) -> None:
        """Wait for identity-change reloads scheduled by ``bind``."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def load(self) -> None:
        """
        Reload all threads for the current identity.

        Failures and timeouts leave an empty thread set, never stale data.
        A result that arrives after the identity changed is dropped; two
        overlapping loads for the same identity resolve last-write-wins.
        """
        identity = self._identity
        if identity is None:
            return

        logger.debug(f"Loading conversations for {identity.id}")
        try:
            threads = await self._repository.list_threads(identity.id)
        except HRDCError as e:
            logger.error(f"Failed to load conversations for {identity.id}: {e}")
            threads = []

        if self._identity is None or self._identity.id != identity.id:
            logger.debug(f"Discarding conversations loaded for previous user {identity.id}")
            return

        current = self.state.value
        current_id = current.current_thread_id
        if find_thread(threads, current_id) is None:
            current_id = None
        self.state.publish(
            current.model_copy(update={"threads": tuple(threads), "current_thread_id": current_id})
        )
        logger.info(f"Loaded {len(threads)} conversation(s)")

    async def create_thread(self, title: str = DEFAULT_THREAD_TITLE) -> Thread:
        """Create a thread, put it first and select it."""
        identity = self._require_identity()
        thread = await self._repository.create_thread(identity.id, title)

        current = self.state.value
        self.state.publish(
            current.model_copy(
                update={"threads": (thread,) + current.threads, "current_thread_id": thread.id}
            )
        )
        logger.info(f"Created conversation {thread.id}")
        return thread

    async def send_message(self, text: str, thread_id: Optional[str] = None) -> Message:
        """
        Send a user message and record the responder's reply.

        If the exchange with the responder fails, a flagged apology reply is
        recorded instead (best-effort) and the original error is re-raised.
        """
        identity = self._require_identity()
        thread = await self._resolve_thread(thread_id)

        self._set_sending(True)
        try:
            user_message = await self._repository.insert_message(thread.id, text, Sender.USER)

            title = None
            if not thread.messages:
                title = derive_title(text)
                if title != thread.title:
                    await self._repository.update_thread(thread.id, title=title)

            thread = thread.append(user_message, _now(), title=title)
            self._put_thread(thread)

            try:
                reply = await self._responder.reply(self._build_request(identity, thread, text))
                ai_message = await self._repository.insert_message(thread.id, reply, Sender.AI)
            except HRDCError as e:
                logger.error(f"Message exchange failed for conversation {thread.id}: {e}")
                await self._record_error_reply(thread)
                raise

            self._put_thread(thread.append(ai_message, _now()))
            return ai_message
        finally:
            self._set_sending(False)

    async def delete_thread(self, thread_id: str) -> None:
        """Delete a thread remotely, then drop it from memory."""
        await self._repository.delete_thread(thread_id)

        current = self.state.value
        current_id = None if current.current_thread_id == thread_id else current.current_thread_id
        self.state.publish(
            current.model_copy(
                update={
                    "threads": tuple(t for t in current.threads if t.id != thread_id),
                    "current_thread_id": current_id,
                }
            )
        )

    def select_thread(self, thread_id: Optional[str]) -> Optional[Thread]:
        """Select a thread by ID; an unknown ID selects nothing."""
        current = self.state.value
        thread = find_thread(current.threads, thread_id)
        self.state.publish(
            current.model_copy(update={"current_thread_id": thread.id if thread else None})
        )
        return thread

    async def clear_all(self) -> None:
        """Delete every thread of the current identity, then empty memory."""
        identity = self._identity
        if identity is None:
            return

        await self._repository.delete_all_for_user(identity.id)
        self.state.publish(
            self.state.value.model_copy(update={"threads": (), "current_thread_id": None})
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_identity(self) -> Identity:
        if self._identity is None:
            raise NotAuthenticatedError()
        return self._identity

    async def _resolve_thread(self, thread_id: Optional[str]) -> Thread:
        """
        Pick the target thread: explicit ID, then the selection, then a new one.

        An explicit ID that is not in memory is an error.
        """
        if thread_id is not None:
            thread = find_thread(self.threads, thread_id)
            if thread is None:
                raise ThreadNotFoundError(thread_id)
            return thread

        thread = self.current_thread
        if thread is None:
            logger.debug("No active conversation, creating one")
            thread = await self.create_thread()
        return thread

    def _build_request(self, identity: Identity, thread: Thread, text: str) -> ResponderRequest:
        return ResponderRequest(
            message=text,
            user_id=identity.id,
            conversation_id=thread.id,
            user_profile=ResponderProfile(
                name=identity.full_name,
                email=identity.email,
                company=identity.company,
                role=identity.role,
            ),
        )

    async def _record_error_reply(self, thread: Thread) -> None:
        """Persist and show the apology reply. Failure here is logged only."""
        try:
            error_message = await self._repository.insert_message(
                thread.id, ERROR_REPLY, Sender.AI, is_error=True
            )
        except HRDCError as e:
            logger.error(f"Failed to save error reply for conversation {thread.id}: {e}")
            return
        self._put_thread(thread.append(error_message, _now()))

    def _put_thread(self, thread: Thread) -> None:
        """Publish state with ``thread`` replaced (or prepended) and selected."""
        current = self.state.value
        if find_thread(current.threads, thread.id) is None:
            threads = (thread,) + current.threads
        else:
            threads = tuple(thread if t.id == thread.id else t for t in current.threads)
        self.state.publish(
            current.model_copy(update={"threads": threads, "current_thread_id": thread.id})
        )

    def _set_sending(self, sending: bool) -> None:
        self.state.publish(self.state.value.model_copy(update={"is_sending": sending}))


def _now() -> datetime:
    return datetime.now(timezone.utc)
