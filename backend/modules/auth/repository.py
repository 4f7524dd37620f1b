"""
Profile repository for database access.

Encapsulates all Supabase queries for the ``profiles`` table plus the
server-side procedure that removes the caller's auth record.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from shared.repository import BaseRepository
from .models import ProfileRecord


class ProfileRepository(BaseRepository[ProfileRecord]):
    """
    Repository for profile rows.

    Note: This repository does NOT perform authorization checks.
    Row Level Security restricts the anon client to the caller's own row.
    """

    async def get_by_id(self, user_id: str) -> Optional[ProfileRecord]:
        """
        Fetch a profile by user ID.

        Returns:
            ProfileRecord, or None if no row exists.
        """
        query = self._db.table("profiles").select("*").eq("id", user_id).limit(1)
        result = await self._execute(query, "get profile")
        if not result.data:
            return None
        return self._map_row(ProfileRecord.model_validate, result.data[0], "get profile")

    async def insert(self, data: dict[str, Any]) -> ProfileRecord:
        """Insert a new profile row and return it."""
        result = await self._execute(self._db.table("profiles").insert(data), "insert profile")
        row = self._first_row(result, "insert profile")
        return self._map_row(ProfileRecord.model_validate, row, "insert profile")

    async def update(self, user_id: str, fields: dict[str, Any]) -> Optional[ProfileRecord]:
        """
        Update a profile row.

        Returns:
            The updated row, or None if no row matched.
        """
        data = {**fields, "updated_at": datetime.now(timezone.utc).isoformat()}
        query = self._db.table("profiles").update(data).eq("id", user_id)
        result = await self._execute(query, "update profile")
        if not result.data:
            return None
        return self._map_row(ProfileRecord.model_validate, result.data[0], "update profile")

    async def delete(self, user_id: str) -> None:
        """Delete a profile row."""
        await self._execute(self._db.table("profiles").delete().eq("id", user_id), "delete profile")

    async def delete_auth_user(self) -> None:
        """Remove the caller's auth record via the ``delete_user`` procedure."""
        await self._execute(self._db.rpc("delete_user", {}), "delete auth user")

    async def list_recent(self, limit: int = 10) -> list[ProfileRecord]:
        """Most recently created profiles (admin view)."""
        query = self._db.table("profiles").select("*").order("created_at", desc=True).limit(limit)
        result = await self._execute(query, "list profiles")
        return [
            self._map_row(ProfileRecord.model_validate, row, "list profiles") for row in result.data or []
        ]
