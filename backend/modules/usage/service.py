"""
Usage tracking service implementation.

Reads and increments the server-side daily counters. Reads degrade to a
permissive default so a missing or unreachable usage table never blocks
chatting.
"""

import logging

from shared.exceptions import HRDCError

from .exceptions import UsageLimitReachedError
from .interfaces import IUsageService
from .models import FREE_DAILY_QUERY_LIMIT, UsageStatus
from .repository import UsageRepository

logger = logging.getLogger(__name__)


class UsageService(IUsageService):
    """Usage service backed by the Supabase usage procedures."""

    def __init__(self, repository: UsageRepository, daily_limit: int = FREE_DAILY_QUERY_LIMIT):
        self._repository = repository
        self._daily_limit = daily_limit

    @property
    def daily_limit(self) -> int:
        return self._daily_limit

    async def check_usage_limit(self, user_id: str) -> UsageStatus:
        """Get today's usage, or the permissive default on failure."""
        try:
            status = await self._repository.check_usage_limit(user_id)
        except HRDCError as e:
            logger.error(f"Error checking usage limit for {user_id}: {e}")
            return UsageStatus()
        return status or UsageStatus()

    async def increment_usage_count(self, user_id: str) -> bool:
        """Count one query; False if the store call failed."""
        try:
            await self._repository.increment_usage_count(user_id)
        except HRDCError as e:
            logger.error(f"Error incrementing usage count for {user_id}: {e}")
            return False
        return True

    async def consume_query(self, user_id: str) -> UsageStatus:
        """Refuse when the limit is reached, otherwise count the query."""
        status = await self.check_usage_limit(user_id)
        if not status.can_query:
            raise UsageLimitReachedError(user_id, status.queries_today, self._daily_limit)

        await self.increment_usage_count(user_id)
        return status
