"""
Chat module interfaces.

The synchronizer depends on IResponder rather than the webhook client, so
tests and alternative responders can be swapped in.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.observable import Observable

from .models import ConversationState, Message, ResponderRequest, Thread


@runtime_checkable
class IResponder(Protocol):
    """An external service that answers one user message at a time."""

    async def reply(self, request: ResponderRequest) -> str:
        """
        Send a message and return the reply text.

        Raises:
            ResponderError: If the exchange fails for any reason
        """
        ...


@runtime_checkable
class IConversationSynchronizer(Protocol):
    """
    Interface for conversation state and the send pipeline.

    Callers must await one send before issuing the next; no queueing
    is performed.
    """

    state: Observable[ConversationState]

    async def load(self) -> None:
        """Reload all threads for the current identity (empty on failure)."""
        ...

    async def create_thread(self, title: str = ...) -> Thread:
        """Create, prepend and select a new thread."""
        ...

    async def send_message(self, text: str, thread_id: Optional[str] = None) -> Message:
        """
        Run the send pipeline and return the stored reply.

        Raises:
            NotAuthenticatedError: If no identity is set
            ThreadNotFoundError: If thread resolution yields nothing
            ResponderError: After the substitute error reply was recorded
        """
        ...

    async def delete_thread(self, thread_id: str) -> None:
        """Delete a thread and drop it from memory."""
        ...

    def select_thread(self, thread_id: Optional[str]) -> Optional[Thread]:
        """Point the selection at a thread (or none). No remote call."""
        ...

    async def clear_all(self) -> None:
        """Delete every thread of the current identity."""
        ...
