"""Tests for chat module models."""

from datetime import datetime, timedelta, timezone

from modules.chat.models import (
    ConversationState,
    Message,
    ResponderProfile,
    ResponderRequest,
    Sender,
    Thread,
    derive_title,
    find_thread,
    sort_messages,
)

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def message(id: str, minutes: int, sender: Sender = Sender.USER) -> Message:
    return Message(id=id, content=id, sender=sender, created_at=T0 + timedelta(minutes=minutes))


class TestDeriveTitle:
    def test_short_text_is_kept(self):
        assert derive_title("Hello") == "Hello"

    def test_exactly_fifty_characters(self):
        text = "x" * 50
        assert derive_title(text) == text

    def test_long_text_is_truncated_with_ellipsis(self):
        text = "y" * 51
        assert derive_title(text) == "y" * 50 + "..."


class TestSortMessages:
    def test_orders_by_creation_time(self):
        shuffled = [message("c", 3), message("a", 1), message("b", 2)]
        assert [m.id for m in sort_messages(shuffled)] == ["a", "b", "c"]

    def test_equal_timestamps_keep_input_order(self):
        first, second = message("first", 1), message("second", 1)
        assert sort_messages([first, second]) == (first, second)


class TestThread:
    def test_append_returns_new_thread(self):
        thread = Thread(id="t1", created_at=T0, updated_at=T0)
        later = T0 + timedelta(minutes=5)

        updated = thread.append(message("m1", 1), later, title="Hello")

        assert thread.messages == ()
        assert updated.title == "Hello"
        assert updated.updated_at == later
        assert [m.id for m in updated.messages] == ["m1"]

    def test_append_keeps_title_when_none(self):
        thread = Thread(id="t1", title="Existing", created_at=T0, updated_at=T0)
        assert thread.append(message("m1", 1), T0).title == "Existing"


class TestConversationState:
    def test_current_thread(self):
        thread = Thread(id="t1", created_at=T0, updated_at=T0)
        state = ConversationState(threads=(thread,), current_thread_id="t1")
        assert state.current_thread is thread

    def test_no_selection(self):
        assert ConversationState().current_thread is None

    def test_find_thread_unknown(self):
        assert find_thread((), "missing") is None


class TestResponderRequest:
    def test_payload_uses_wire_names(self):
        request = ResponderRequest(
            message="Hello",
            user_id="user-1",
            conversation_id="t1",
            user_profile=ResponderProfile(name="Jane Doe", email="jane@example.com"),
        )

        assert request.to_payload() == {
            "message": "Hello",
            "userId": "user-1",
            "conversationId": "t1",
            "userProfile": {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "company": "",
                "role": "",
            },
        }
