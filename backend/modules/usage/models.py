"""
Usage tracking module data models.

Daily query counts are computed server-side; these models only carry the
results of the usage procedures.
"""

from pydantic import BaseModel, ConfigDict, Field


FREE_DAILY_QUERY_LIMIT = 2


class UsageStatus(BaseModel):
    """Result of the ``check_usage_limit`` procedure for one user."""

    model_config = ConfigDict(extra="ignore")

    queries_today: int = Field(default=0, ge=0, description="Queries issued today")
    limit_reached: bool = Field(default=False, description="Free-tier limit reached")
    can_query: bool = Field(default=True, description="Whether another query is allowed")

    def remaining(self, limit: int = FREE_DAILY_QUERY_LIMIT) -> int:
        """Queries left today under the free-tier limit."""
        return max(0, limit - self.queries_today)
