"""
Admin module data models.
"""

from pydantic import BaseModel, ConfigDict, Field

from modules.auth.models import ProfileRecord


class AdminStats(BaseModel):
    """Aggregates from the ``admin_stats`` view."""

    model_config = ConfigDict(extra="ignore")

    total_users: int = Field(default=0, ge=0)
    total_conversations: int = Field(default=0, ge=0)
    total_messages: int = Field(default=0, ge=0)
    users_this_month: int = Field(default=0, ge=0)


class AdminDashboard(BaseModel):
    """Everything the admin page shows."""

    stats: AdminStats = Field(default_factory=AdminStats)
    recent_users: list[ProfileRecord] = Field(default_factory=list)
