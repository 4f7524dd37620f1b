"""
Usage repository.

Wraps the server-computed usage procedures; the limit itself is enforced
by the database, not here.
"""

from typing import Optional

from shared.repository import BaseRepository
from .models import UsageStatus


class UsageRepository(BaseRepository[UsageStatus]):
    """Repository for the usage RPC procedures."""

    async def check_usage_limit(self, user_id: str) -> Optional[UsageStatus]:
        """Run ``check_usage_limit``; None when the procedure returned no row."""
        result = await self._execute(
            self._db.rpc("check_usage_limit", {"user_id": user_id}), "check usage limit"
        )
        if not result.data:
            return None
        return self._map_row(UsageStatus.model_validate, result.data[0], "check usage limit")

    async def increment_usage_count(self, user_id: str) -> None:
        """Run ``increment_usage_count``."""
        await self._execute(
            self._db.rpc("increment_usage_count", {"user_id": user_id}), "increment usage"
        )
