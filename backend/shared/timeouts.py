"""Deadline helper for remote calls."""

import asyncio
from typing import Awaitable, TypeVar

from .exceptions import OperationTimeoutError

T = TypeVar("T")


async def with_timeout(
    awaitable: Awaitable[T],
    seconds: float,
    operation: str,
    service: str = "store",
) -> T:
    """
    Await a remote call, giving up after ``seconds``.

    The pending call is cancelled on expiry and an OperationTimeoutError
    is raised in its place.

    Args:
        awaitable: The remote call to wait on
        seconds: Deadline in seconds
        operation: Short label used in the error message
        service: External service the call targets

    Raises:
        OperationTimeoutError: If the deadline passes first
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError:
        raise OperationTimeoutError(operation, seconds, service=service)
