"""
Usage tracking module.

Reads and increments the server-side daily query counters.

Public API:
- IUsageService: Interface for usage operations
- UsageStatus: Today's usage for one user
- UsageLimitReachedError: Raised when the free tier is used up
"""

from .interfaces import IUsageService
from .models import UsageStatus, FREE_DAILY_QUERY_LIMIT
from .exceptions import UsageError, UsageLimitReachedError

__all__ = [
    # Interface
    "IUsageService",
    # Models
    "UsageStatus",
    "FREE_DAILY_QUERY_LIMIT",
    # Exceptions
    "UsageError",
    "UsageLimitReachedError",
]
