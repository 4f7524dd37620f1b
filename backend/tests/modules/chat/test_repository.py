"""Tests for the conversation repository."""

import pytest

from shared.exceptions import StoreError

from modules.chat.models import Sender
from modules.chat.repository import ConversationRepository


def thread_row(id: str, messages=None) -> dict:
    return {
        "id": id,
        "title": "Leave policy",
        "created_at": "2024-05-01T12:00:00+00:00",
        "updated_at": "2024-05-01T12:05:00+00:00",
        "messages": messages or [],
    }


def message_row(id: str, created_at: str, sender: str = "user") -> dict:
    return {
        "id": id,
        "conversation_id": "t1",
        "content": f"content {id}",
        "sender": sender,
        "created_at": created_at,
        "is_error": None,
    }


class TestConversationRepository:
    @pytest.mark.asyncio
    async def test_list_threads_nested_and_sorted(self, fake_db, fake_query):
        conversations = fake_query(
            [
                thread_row(
                    "t1",
                    [
                        message_row("m2", "2024-05-01T12:02:00+00:00", "ai"),
                        message_row("m1", "2024-05-01T12:01:00+00:00"),
                    ],
                )
            ]
        )
        repo = ConversationRepository(fake_db({"conversations": conversations}))

        threads = await repo.list_threads("user-1")

        assert conversations.called("select") == [(("*, messages(*)",), {})]
        assert conversations.called("eq") == [(("user_id", "user-1"), {})]
        assert conversations.called("order") == [(("updated_at",), {"desc": True})]
        assert [m.id for m in threads[0].messages] == ["m1", "m2"]
        assert threads[0].messages[1].sender == Sender.AI
        assert threads[0].messages[0].is_error is False

    @pytest.mark.asyncio
    async def test_create_thread(self, fake_db, fake_query):
        conversations = fake_query([thread_row("t9")])
        repo = ConversationRepository(fake_db({"conversations": conversations}))

        thread = await repo.create_thread("user-1", "New Conversation")

        (data,), _ = conversations.called("insert")[0]
        assert data["user_id"] == "user-1"
        assert data["title"] == "New Conversation"
        assert thread.id == "t9"
        assert thread.messages == ()

    @pytest.mark.asyncio
    async def test_insert_message(self, fake_db, fake_query):
        messages = fake_query([message_row("m1", "2024-05-01T12:01:00+00:00", "ai")])
        repo = ConversationRepository(fake_db({"messages": messages}))

        stored = await repo.insert_message("t1", "Sorry", Sender.AI, is_error=True)

        (data,), _ = messages.called("insert")[0]
        assert data["conversation_id"] == "t1"
        assert data["sender"] == "ai"
        assert data["is_error"] is True
        assert stored.id == "m1"

    @pytest.mark.asyncio
    async def test_update_thread_bumps_updated_at(self, fake_db, fake_query):
        conversations = fake_query([])
        repo = ConversationRepository(fake_db({"conversations": conversations}))

        await repo.update_thread("t1", title="Hello")

        (data,), _ = conversations.called("update")[0]
        assert data["title"] == "Hello"
        assert "updated_at" in data
        assert conversations.called("eq") == [(("id", "t1"), {})]

    @pytest.mark.asyncio
    async def test_delete_all_for_user(self, fake_db, fake_query):
        conversations = fake_query([])
        repo = ConversationRepository(fake_db({"conversations": conversations}))

        await repo.delete_all_for_user("user-1")

        assert conversations.called("delete") == [((), {})]
        assert conversations.called("eq") == [(("user_id", "user-1"), {})]

    @pytest.mark.asyncio
    async def test_insert_message_without_returned_row(self, fake_db, fake_query):
        repo = ConversationRepository(fake_db({"messages": fake_query([])}))

        with pytest.raises(StoreError) as exc_info:
            await repo.insert_message("t1", "Hi there", Sender.AI)

        assert exc_info.value.details["operation"] == "save message"

    @pytest.mark.asyncio
    async def test_create_thread_without_returned_row(self, fake_db, fake_query):
        repo = ConversationRepository(fake_db({"conversations": fake_query([])}))

        with pytest.raises(StoreError):
            await repo.create_thread("user-1", "New Conversation")

    @pytest.mark.asyncio
    async def test_malformed_message_row(self, fake_db, fake_query):
        row = message_row("m1", "2024-05-01T12:01:00+00:00", sender="robot")
        conversations = fake_query([thread_row("t1", [row])])
        repo = ConversationRepository(fake_db({"conversations": conversations}))

        with pytest.raises(StoreError):
            await repo.list_threads("user-1")
