"""
Admin module.

Read-only dashboard for administrators.
"""

from .models import AdminDashboard, AdminStats

__all__ = ["AdminDashboard", "AdminStats"]
