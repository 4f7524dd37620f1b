"""
Chat module.

Conversation threads, messages and the exchange with the AI responder.

Public API:
- IConversationSynchronizer: Interface for conversation operations
- IResponder: Interface for the AI responder
- Thread / Message / ConversationState: Conversation data
- Chat exceptions: ThreadNotFoundError, ResponderError, etc.
"""

from .interfaces import IConversationSynchronizer, IResponder
from .models import (
    ConversationState,
    Message,
    ResponderRequest,
    Sender,
    Thread,
    DEFAULT_THREAD_TITLE,
    ERROR_REPLY,
    derive_title,
)
from .exceptions import (
    ThreadNotFoundError,
    ResponderError,
    ResponderTimeoutError,
    EmptyResponseError,
)

__all__ = [
    # Interfaces
    "IConversationSynchronizer",
    "IResponder",
    # Models
    "ConversationState",
    "Message",
    "ResponderRequest",
    "Sender",
    "Thread",
    "DEFAULT_THREAD_TITLE",
    "ERROR_REPLY",
    "derive_title",
    # Exceptions
    "ThreadNotFoundError",
    "ResponderError",
    "ResponderTimeoutError",
    "EmptyResponseError",
]
