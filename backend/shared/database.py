"""
Database client factory for Supabase.

Provides the user-facing client (anon key, persisted session, subject to RLS)
used by the terminal client, and a service-role client for the trusted
backend's server-side writes.
"""

from typing import Any, Optional

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from .config import get_settings

# Module-level client cache
_user_client: Optional[AsyncClient] = None
_service_client: Optional[AsyncClient] = None


async def get_supabase_client(storage: Any = None) -> AsyncClient:
    """
    Get the Supabase client used on behalf of the signed-in user.

    The auth client persists its session through ``storage`` so that a
    later run can bootstrap from it.

    Args:
        storage: Session storage with async get_item/set_item/remove_item

    Returns:
        Supabase async client configured with the anon key
    """
    global _user_client

    if _user_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
            )
        options = AsyncClientOptions(persist_session=True, auto_refresh_token=True)
        if storage is not None:
            options.storage = storage
        _user_client = await acreate_client(
            settings.supabase_url,
            settings.supabase_anon_key,
            options=options,
        )

    return _user_client


async def get_supabase_service_client() -> AsyncClient:
    """
    Get Supabase client with service role (bypasses RLS).

    Only the trusted backend may use this, e.g. to activate a subscription
    after a verified payment.

    Returns:
        Supabase async client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = await acreate_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def reset_client_cache() -> None:
    """
    Reset the cached database clients.

    Useful for testing or when configuration changes.
    """
    global _user_client, _service_client
    _user_client = None
    _service_client = None
