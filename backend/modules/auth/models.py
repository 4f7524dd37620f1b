"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AuthEvent(str, Enum):
    """Session-change notifications emitted by the identity provider."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"


class ProfileRecord(BaseModel):
    """
    A row of the ``profiles`` table.

    The admin flag is written by trusted server-side tooling only.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="User ID (UUID from Supabase Auth)")
    email: Optional[str] = Field(None, description="Email address")
    first_name: Optional[str] = Field(None, description="Given name")
    last_name: Optional[str] = Field(None, description="Family name")
    company: Optional[str] = Field(None, description="Company name")
    role: Optional[str] = Field(None, description="Job title / role label")
    is_admin: bool = Field(default=False, description="Admin flag (server-authoritative)")
    created_at: Optional[datetime] = Field(None, description="Row creation time")
    updated_at: Optional[datetime] = Field(None, description="Last update time")


class Identity(BaseModel):
    """
    The authenticated actor as seen by the client.

    Published in two stages: a minimal identity built from the session user
    as soon as a session is detected, then an enriched one once the profile
    record has been fetched.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="User ID (provider-issued)")
    email: str = Field(default="", description="User's email address")
    email_confirmed: bool = Field(default=False, description="Whether email is confirmed")
    first_name: str = Field(default="", description="Given name")
    last_name: str = Field(default="", description="Family name")
    company: str = Field(default="", description="Company name")
    role: str = Field(default="", description="Role label")
    is_admin: bool = Field(default=False, description="Admin flag from the profile record")
    created_at: Optional[datetime] = Field(None, description="Account creation time")
    last_login: Optional[datetime] = Field(None, description="Last sign-in time")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_session_user(cls, user: Any) -> "Identity":
        """Build the minimal identity from a provider user record."""
        return cls(
            id=str(user.id),
            email=user.email or "",
            email_confirmed=getattr(user, "email_confirmed_at", None) is not None,
            created_at=getattr(user, "created_at", None),
            last_login=getattr(user, "last_sign_in_at", None),
        )

    def merge_profile(self, profile: ProfileRecord) -> "Identity":
        """Overlay profile fields that are present; keep minimal defaults otherwise."""
        return self.model_copy(
            update={
                "email": profile.email or self.email,
                "first_name": profile.first_name or self.first_name,
                "last_name": profile.last_name or self.last_name,
                "company": profile.company or self.company,
                "role": profile.role or self.role,
                "is_admin": profile.is_admin,
                "created_at": profile.created_at or self.created_at,
            }
        )


class RegistrationRequest(BaseModel):
    """Fields collected when a new account is created."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    role: str = ""

    def profile_row(self, user_id: str) -> dict[str, Any]:
        """Profile insert payload. Never carries the admin flag."""
        return {
            "id": user_id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "company": self.company,
            "role": self.role,
        }


class ProfileUpdate(BaseModel):
    """
    Owner-editable profile fields.

    Unknown fields are rejected, so privilege fields cannot be smuggled in.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    role: Optional[str] = None
