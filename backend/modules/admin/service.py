"""
Admin dashboard service.

Both reads are independent and degrade on failure: the dashboard always
renders, with zeros or an empty user list where data could not be read.
"""

import logging

from shared.exceptions import AuthorizationError, HRDCError

from modules.auth.models import Identity
from modules.auth.repository import ProfileRepository

from .models import AdminDashboard, AdminStats
from .repository import AdminRepository

logger = logging.getLogger(__name__)

RECENT_USERS_LIMIT = 10


class AdminService:
    """Reads the admin dashboard for identities carrying the admin flag."""

    def __init__(self, repository: AdminRepository, profiles: ProfileRepository):
        self._repository = repository
        self._profiles = profiles

    async def get_dashboard(self, identity: Identity) -> AdminDashboard:
        """
        Load statistics and the most recent users.

        Raises:
            AuthorizationError: If the identity is not an admin
        """
        if not identity.is_admin:
            raise AuthorizationError(
                "Admin access required",
                code="ADMIN_REQUIRED",
                details={"user_id": identity.id},
            )

        try:
            stats = await self._repository.get_stats()
        except HRDCError as e:
            logger.error(f"Error fetching admin stats: {e}")
            stats = AdminStats()

        try:
            recent = await self._profiles.list_recent(RECENT_USERS_LIMIT)
        except HRDCError as e:
            logger.error(f"Error fetching recent users: {e}")
            recent = []

        return AdminDashboard(stats=stats, recent_users=recent)
