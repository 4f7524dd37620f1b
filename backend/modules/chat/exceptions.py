"""
Chat module exceptions.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, NotFoundError


class ThreadNotFoundError(NotFoundError):
    """Raised when no thread can be resolved for an operation."""

    def __init__(self, thread_id: Optional[str] = None):
        super().__init__(
            "No conversation found" if thread_id is None else f"No conversation found: {thread_id}",
            code="THREAD_NOT_FOUND",
            details={"thread_id": thread_id},
        )


class ResponderError(ExternalServiceError):
    """Raised when the AI responder exchange fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            message,
            service="responder",
            code="RESPONDER_ERROR",
            details={"status_code": status_code} if status_code is not None else {},
        )


class ResponderTimeoutError(ResponderError):
    """Raised when the responder does not answer before its deadline."""

    def __init__(self, seconds: float):
        super().__init__(f"AI agent did not respond within {seconds}s")
        self.code = "RESPONDER_TIMEOUT"


class EmptyResponseError(ResponderError):
    """Raised when the responder answered with nothing usable."""

    def __init__(self):
        super().__init__("No message content received from AI agent")
        self.code = "EMPTY_RESPONSE"
