"""
Conversation repository for database access.

Encapsulates all Supabase queries and data mapping for chat tables:
- conversations
- messages (deleted via CASCADE with their conversation)
"""

from datetime import datetime, timezone
from typing import Any

from shared.repository import BaseRepository
from .models import Message, Sender, Thread, sort_messages


class ConversationRepository(BaseRepository[Thread]):
    """
    Repository for conversation threads and their messages.

    Every query runs under the repository deadline (3s by default).
    """

    # -------------------------------------------------------------------------
    # Thread operations
    # -------------------------------------------------------------------------

    async def list_threads(self, user_id: str) -> list[Thread]:
        """
        Load every thread owned by a user, with messages, in one request.

        Threads come back most recently updated first. Nested messages are
        re-sorted by creation time since the store does not order them.
        """
        query = (
            self._db.table("conversations")
            .select("*, messages(*)")
            .eq("user_id", user_id)
            .order("updated_at", desc=True)
        )
        result = await self._execute(query, "list conversations")
        return [
            self._map_row(self._map_to_thread, row, "list conversations")
            for row in result.data or []
        ]

    async def create_thread(self, user_id: str, title: str) -> Thread:
        """Insert a new, empty thread."""
        now = datetime.now(timezone.utc).isoformat()
        data = {
            "user_id": user_id,
            "title": title,
            "created_at": now,
            "updated_at": now,
        }
        result = await self._execute(
            self._db.table("conversations").insert(data), "create conversation"
        )
        row = self._first_row(result, "create conversation")
        return self._map_row(self._map_to_thread, row, "create conversation")

    async def update_thread(self, thread_id: str, **fields: Any) -> None:
        """Update thread columns and bump its ``updated_at``."""
        data = {**fields, "updated_at": datetime.now(timezone.utc).isoformat()}
        query = self._db.table("conversations").update(data).eq("id", thread_id)
        await self._execute(query, "update conversation")

    async def delete_thread(self, thread_id: str) -> None:
        """Delete a thread; its messages go with it via CASCADE."""
        query = self._db.table("conversations").delete().eq("id", thread_id)
        await self._execute(query, "delete conversation")

    async def delete_all_for_user(self, user_id: str) -> None:
        """Delete every thread owned by a user in one call."""
        query = self._db.table("conversations").delete().eq("user_id", user_id)
        await self._execute(query, "delete all conversations")

    # -------------------------------------------------------------------------
    # Message operations
    # -------------------------------------------------------------------------

    async def insert_message(
        self,
        thread_id: str,
        content: str,
        sender: Sender,
        is_error: bool = False,
    ) -> Message:
        """Persist one message and return it as stored."""
        data = {
            "conversation_id": thread_id,
            "content": content,
            "sender": sender.value,
            "is_error": is_error,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        result = await self._execute(self._db.table("messages").insert(data), "save message")
        row = self._first_row(result, "save message")
        return self._map_row(self._map_to_message, row, "save message")

    # -------------------------------------------------------------------------
    # Private mapping methods
    # -------------------------------------------------------------------------

    def _map_to_thread(self, data: dict[str, Any]) -> Thread:
        """Map a conversations row (optionally with nested messages) to a Thread."""
        messages = [self._map_to_message(m) for m in data.get("messages") or []]
        return Thread(
            id=str(data["id"]),
            title=data.get("title") or "",
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            messages=sort_messages(messages),
        )

    def _map_to_message(self, data: dict[str, Any]) -> Message:
        """Map a messages row to a Message."""
        return Message(
            id=str(data["id"]),
            content=data["content"],
            sender=Sender(data["sender"]),
            created_at=data["created_at"],
            is_error=bool(data.get("is_error") or False),
        )
