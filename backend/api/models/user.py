"""
Caller identity for the payments API, read from the Supabase access token.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class TokenPayload(BaseModel):
    """The access token claims the API reads."""
    model_config = ConfigDict(extra="ignore")

    sub: str  # User ID
    email: str = ""
    role: str = "authenticated"
    session_id: Optional[str] = None


class AuthenticatedUser(BaseModel):
    """The caller a request acts for; injected into route handlers."""

    id: str
    email: str = ""
    role: str = "authenticated"
    session_id: Optional[str] = None

    @classmethod
    def from_token(cls, payload: TokenPayload) -> "AuthenticatedUser":
        return cls(
            id=payload.sub,
            email=payload.email,
            role=payload.role,
            session_id=payload.session_id,
        )
