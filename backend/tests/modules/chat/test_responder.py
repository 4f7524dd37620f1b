"""Tests for the AI responder webhook client."""

import asyncio
import json

import httpx
import pytest

from modules.chat.exceptions import EmptyResponseError, ResponderError, ResponderTimeoutError
from modules.chat.models import ResponderProfile, ResponderRequest
from modules.chat.responder import WebhookResponder, extract_reply

URL = "https://agents.example.com/webhook/HDRC"


def make_request() -> ResponderRequest:
    return ResponderRequest(
        message="Hello",
        user_id="user-1",
        conversation_id="t1",
        user_profile=ResponderProfile(name="Jane Doe", email="jane@example.com"),
    )


def make_responder(handler, timeout: float = 20.0) -> WebhookResponder:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WebhookResponder(URL, timeout=timeout, client=client)


class TestExtractReply:
    def test_raw_text(self):
        assert extract_reply("Hi there") == "Hi there"

    @pytest.mark.parametrize("field", ["message", "response", "text", "content", "output"])
    def test_recognized_fields(self, field):
        assert extract_reply(json.dumps({field: "Hi"})) == "Hi"

    def test_field_priority(self):
        body = json.dumps({"output": "second", "message": "first"})
        assert extract_reply(body) == "first"

    def test_empty_field_falls_through(self):
        body = json.dumps({"message": "", "text": "fallback"})
        assert extract_reply(body) == "fallback"

    def test_top_level_string(self):
        assert extract_reply(json.dumps("Plain answer")) == "Plain answer"

    def test_data_string(self):
        assert extract_reply(json.dumps({"data": "Nested"})) == "Nested"

    def test_structured_field_is_serialized(self):
        body = json.dumps({"output": {"steps": [1, 2]}})
        assert json.loads(extract_reply(body)) == {"steps": [1, 2]}

    def test_unrecognized_shape_is_serialized(self):
        body = json.dumps([{"answer": "x"}])
        assert json.loads(extract_reply(body)) == [{"answer": "x"}]

    @pytest.mark.parametrize("body", ["", "   ", "null", '""'])
    def test_empty_bodies_raise(self, body):
        with pytest.raises(EmptyResponseError):
            extract_reply(body)


class TestWebhookResponder:
    @pytest.mark.asyncio
    async def test_posts_payload_and_returns_reply(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, text="Hi there")

        responder = make_responder(handler)

        assert await responder.reply(make_request()) == "Hi there"
        assert seen["body"]["userId"] == "user-1"
        assert seen["body"]["conversationId"] == "t1"
        assert seen["body"]["userProfile"]["name"] == "Jane Doe"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        responder = make_responder(lambda request: httpx.Response(502, text="Bad gateway"))

        with pytest.raises(ResponderError) as exc_info:
            await responder.reply(make_request())

        assert exc_info.value.message == "HTTP 502: Bad gateway"
        assert exc_info.value.details["status_code"] == 502

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        with pytest.raises(ResponderError):
            await make_responder(handler).reply(make_request())

    @pytest.mark.asyncio
    async def test_deadline(self):
        async def handler(request):
            await asyncio.sleep(10)
            return httpx.Response(200, text="late")

        with pytest.raises(ResponderTimeoutError):
            await make_responder(handler, timeout=0.01).reply(make_request())

    @pytest.mark.asyncio
    async def test_request_uses_full_deadline(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["timeout"] = request.extensions["timeout"]
            return httpx.Response(200, text="Hi there")

        assert await make_responder(handler).reply(make_request()) == "Hi there"
        assert seen["timeout"]["read"] == 20.0
        assert seen["timeout"]["connect"] == 20.0

    @pytest.mark.asyncio
    async def test_own_client_uses_deadline(self):
        responder = WebhookResponder(URL, timeout=20.0)

        assert responder._client.timeout.read == 20.0
        await responder.aclose()

    @pytest.mark.asyncio
    async def test_empty_body(self):
        responder = make_responder(lambda request: httpx.Response(200, text=""))

        with pytest.raises(EmptyResponseError):
            await responder.reply(make_request())
