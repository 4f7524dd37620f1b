"""
Chat module data models.

Threads and messages are frozen; every change produces a new value so a
published state is never mutated under a reader.
"""

from datetime import datetime
from enum import Enum
from typing import Iterable, Optional
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_THREAD_TITLE = "New Conversation"
TITLE_MAX_LENGTH = 50
TITLE_ELLIPSIS = "..."

# Shown in place of a reply when the exchange with the responder fails
ERROR_REPLY = (
    "I apologize, but I encountered an issue processing your request. Please try again."
)


class Sender(str, Enum):
    """Author of a message."""

    USER = "user"
    AI = "ai"


class Message(BaseModel):
    """One turn within a thread."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Message ID (store-issued)")
    content: str = Field(..., description="Message text")
    sender: Sender = Field(..., description="Who wrote the message")
    created_at: datetime = Field(..., description="Creation timestamp")
    is_error: bool = Field(
        default=False,
        description="True only for the substitute reply after a failed exchange",
    )


class Thread(BaseModel):
    """A titled, ordered container of messages."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Thread ID (store-issued)")
    title: str = Field(default=DEFAULT_THREAD_TITLE, description="Display title")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last activity timestamp")
    messages: tuple[Message, ...] = Field(default=(), description="Messages, oldest first")

    def append(self, message: Message, updated_at: datetime, title: Optional[str] = None) -> "Thread":
        """Return a copy with ``message`` appended and the activity time bumped."""
        update = {"messages": self.messages + (message,), "updated_at": updated_at}
        if title is not None:
            update["title"] = title
        return self.model_copy(update=update)


class ConversationState(BaseModel):
    """Everything the synchronizer publishes in one snapshot."""

    model_config = ConfigDict(frozen=True)

    threads: tuple[Thread, ...] = Field(default=(), description="Threads, most recent first")
    current_thread_id: Optional[str] = Field(None, description="Selected thread")
    is_sending: bool = Field(default=False, description="A send pipeline is in flight")

    @property
    def current_thread(self) -> Optional[Thread]:
        return find_thread(self.threads, self.current_thread_id)


class ResponderProfile(BaseModel):
    """Denormalized identity details sent along with each message."""

    name: str = ""
    email: str = ""
    company: str = ""
    role: str = ""


class ResponderRequest(BaseModel):
    """Request body for the AI responder webhook."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    user_id: str = Field(..., alias="userId")
    conversation_id: str = Field(..., alias="conversationId")
    user_profile: ResponderProfile = Field(..., alias="userProfile")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


def derive_title(text: str) -> str:
    """Title derived from a thread's first message."""
    if len(text) > TITLE_MAX_LENGTH:
        return text[:TITLE_MAX_LENGTH] + TITLE_ELLIPSIS
    return text


def sort_messages(messages: Iterable[Message]) -> tuple[Message, ...]:
    """Order messages by creation time, oldest first."""
    return tuple(sorted(messages, key=lambda m: m.created_at))


def find_thread(threads: Iterable[Thread], thread_id: Optional[str]) -> Optional[Thread]:
    if thread_id is None:
        return None
    return next((t for t in threads if t.id == thread_id), None)
