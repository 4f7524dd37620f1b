"""
Usage tracking module exceptions.
"""

from shared.exceptions import HRDCError


class UsageError(HRDCError):
    """Base exception for usage-related errors."""

    pass


class UsageLimitReachedError(UsageError):
    """
    Raised when the daily free-tier query limit is used up.

    The UI should handle this by offering the subscription upgrade.
    """

    def __init__(self, user_id: str, queries_today: int, limit: int):
        super().__init__(
            f"Daily query limit reached ({queries_today}/{limit})",
            code="USAGE_LIMIT_REACHED",
            details={"user_id": user_id, "queries_today": queries_today, "limit": limit},
        )
