"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access, per-query deadlines and error normalization.
"""

from typing import Any, Callable, TypeVar, Generic

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient

from .exceptions import StoreError
from .timeouts import with_timeout


T = TypeVar("T")
R = TypeVar("R")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Deadline-bounded query execution via self._execute
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class ProfileRepository(BaseRepository[ProfileRecord]):
            async def get_by_id(self, user_id: str) -> Optional[ProfileRecord]:
                query = self._db.table("profiles").select("*").eq("id", user_id)
                result = await self._execute(query, "get profile")
                if not result.data:
                    return None
                return ProfileRecord(**result.data[0])
    """

    def __init__(self, db: AsyncClient, timeout: float = 3.0) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase async client instance for database operations.
            timeout: Deadline in seconds applied to every query.
        """
        self._db = db
        self._timeout = timeout

    async def _execute(self, query: Any, operation: str) -> Any:
        """
        Execute a query builder under the repository deadline.

        Raises:
            StoreError: If the store rejects the query or is unreachable
            OperationTimeoutError: If the deadline passes first
        """
        try:
            return await with_timeout(query.execute(), self._timeout, operation)
        except APIError as e:
            raise StoreError(operation, e.message or str(e))
        except httpx.HTTPError as e:
            raise StoreError(operation, str(e))

    def _first_row(self, result: Any, operation: str) -> dict[str, Any]:
        """
        Return the single row a write is expected to hand back.

        An empty result (e.g. a row filtered out by RLS) is a store failure.
        """
        if not result.data:
            raise StoreError(operation, "no row returned")
        return result.data[0]

    def _map_row(self, mapper: Callable[[Any], R], row: Any, operation: str) -> R:
        """Apply ``mapper`` to a row, reporting a malformed row as a StoreError."""
        try:
            return mapper(row)
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(operation, f"unexpected row shape: {e}")
