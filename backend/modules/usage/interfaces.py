"""
Usage tracking module interface.

The chat client depends on IUsageService to gate sends on the free tier.
"""

from typing import Protocol, runtime_checkable

from .models import UsageStatus


@runtime_checkable
class IUsageService(Protocol):
    """Interface for daily usage checks."""

    async def check_usage_limit(self, user_id: str) -> UsageStatus:
        """
        Get today's usage for a user.

        Never raises; store failures yield the permissive default.
        """
        ...

    async def increment_usage_count(self, user_id: str) -> bool:
        """
        Count one query for a user.

        Returns:
            True if the increment was recorded
        """
        ...

    async def consume_query(self, user_id: str) -> UsageStatus:
        """
        Check the limit, then count one query.

        Raises:
            UsageLimitReachedError: If no query is allowed today
        """
        ...
