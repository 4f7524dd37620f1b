"""
Admin repository for the aggregate statistics view.
"""

from shared.repository import BaseRepository
from .models import AdminStats


class AdminRepository(BaseRepository[AdminStats]):
    """Read-only access to ``admin_stats``. RLS restricts it to admins."""

    async def get_stats(self) -> AdminStats:
        query = self._db.table("admin_stats").select("*").limit(1)
        result = await self._execute(query, "get admin stats")
        if not result.data:
            return AdminStats()
        # The view may return NULL for empty aggregates
        row = {k: v for k, v in result.data[0].items() if v is not None}
        return self._map_row(AdminStats.model_validate, row, "get admin stats")
