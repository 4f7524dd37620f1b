"""
AI responder webhook client.

The responder's response schema is not controlled by this system, so reply
extraction is deliberately tolerant: a small closed set of shapes is tried
in a fixed order, and any other structured value is rendered back to
readable JSON instead of being rejected.
"""

import asyncio
import json
import logging
from typing import Any, Optional

import httpx

from .exceptions import EmptyResponseError, ResponderError, ResponderTimeoutError
from .interfaces import IResponder
from .models import ResponderRequest

logger = logging.getLogger(__name__)

# Singular fields that may carry the reply, in priority order
REPLY_FIELDS = ("message", "response", "text", "content", "output")


def extract_reply(body: str) -> str:
    """
    Extract the reply text from a responder response body.

    Accepted shapes, first match wins:
    1. a body that is not JSON: the raw text
    2. an object with a non-empty ``message``/``response``/``text``/
       ``content``/``output`` field
    3. a top-level JSON string
    4. an object whose ``data`` field is a string
    5. any other JSON value, serialized back to indented JSON

    Raises:
        EmptyResponseError: If the body (or the JSON value) is empty
    """
    if not body or not body.strip():
        raise EmptyResponseError()

    try:
        data: Any = json.loads(body)
    except json.JSONDecodeError:
        return body

    if data is None:
        raise EmptyResponseError()

    if isinstance(data, dict):
        for field in REPLY_FIELDS:
            value = data.get(field)
            if value:
                return value if isinstance(value, str) else json.dumps(value, indent=2)

    if isinstance(data, str):
        if not data:
            raise EmptyResponseError()
        return data

    if isinstance(data, dict) and isinstance(data.get("data"), str) and data["data"]:
        return data["data"]

    return json.dumps(data, indent=2)


class WebhookResponder(IResponder):
    """
    Posts each user message to the responder webhook.

    The whole exchange is bounded by ``timeout`` seconds; on expiry the
    in-flight request is cancelled, not merely ignored. The httpx
    connect, read and write timeouts use the same budget.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 20.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._url = url
        self._timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def reply(self, request: ResponderRequest) -> str:
        """
        Send one message and return the extracted reply text.

        Raises:
            ResponderTimeoutError: If the deadline passes
            ResponderError: On network failure or a non-2xx status
            EmptyResponseError: If the response carries no content
        """
        logger.debug(f"Responder request for conversation {request.conversation_id}")
        try:
            response = await asyncio.wait_for(
                self._client.post(self._url, json=request.to_payload(), timeout=self._timeout),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            raise ResponderTimeoutError(self._timeout)
        except httpx.TimeoutException:
            raise ResponderTimeoutError(self._timeout)
        except httpx.HTTPError as e:
            raise ResponderError(f"Failed to reach AI agent: {e}")

        logger.debug(f"Responder status {response.status_code}")
        if response.is_error:
            detail = response.text or "Failed to send message to AI agent"
            raise ResponderError(
                f"HTTP {response.status_code}: {detail}",
                status_code=response.status_code,
            )

        return extract_reply(response.text)

    async def aclose(self) -> None:
        """Close the HTTP client if this responder created it."""
        if self._owns_client:
            await self._client.aclose()
