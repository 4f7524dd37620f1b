"""
Client application wiring.

Builds the two stateful services (session manager and conversation
synchronizer) plus the auxiliary services around one Supabase client, and
runs the start-up sequence:

    bind synchronizer -> subscribe to auth events -> bootstrap
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx
from supabase import AsyncClient

from shared.config import Settings, get_settings
from shared.database import get_supabase_client

from modules.admin.repository import AdminRepository
from modules.admin.service import AdminService
from modules.auth.repository import ProfileRepository
from modules.auth.service import SessionManager
from modules.auth.storage import FileSessionStorage, MemorySessionStorage
from modules.billing.repository import BillingRepository
from modules.billing.service import BillingService
from modules.chat.repository import ConversationRepository
from modules.chat.responder import WebhookResponder
from modules.chat.service import ConversationSynchronizer
from modules.usage.repository import UsageRepository
from modules.usage.service import UsageService

logger = logging.getLogger(__name__)


@dataclass
class ClientApp:
    """All client-side services sharing one Supabase client."""

    settings: Settings
    client: AsyncClient
    storage: MemorySessionStorage
    sessions: SessionManager
    conversations: ConversationSynchronizer
    responder: WebhookResponder
    usage: UsageService
    billing: BillingService
    admin: AdminService
    _unsubscribers: list[Callable[[], None]] = field(default_factory=list)

    async def start(self) -> None:
        """Wire identity changes into the synchronizer, then bootstrap."""
        self._unsubscribers.append(self.conversations.bind(self.sessions.identity))
        self.sessions.subscribe_to_auth_events()
        await self.sessions.bootstrap()
        await self.settle()

    async def settle(self) -> None:
        """Wait until pending auth events and conversation reloads are applied."""
        await self.sessions.wait_idle()
        await self.conversations.wait_idle()

    async def access_token(self) -> Optional[str]:
        session = await self.client.auth.get_session()
        return session.access_token if session else None

    async def aclose(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        await self.sessions.close()
        await self.conversations.wait_idle()
        await self.responder.aclose()
        await self.billing.aclose()


async def build_app(
    settings: Optional[Settings] = None,
    storage: Optional[MemorySessionStorage] = None,
) -> ClientApp:
    """
    Create every client service.

    Args:
        settings: Overrides the cached environment settings
        storage: Session storage; defaults to the configured session file
    """
    settings = settings or get_settings()
    storage = storage or FileSessionStorage(settings.session_storage_path)
    client = await get_supabase_client(storage)

    profiles = ProfileRepository(client, timeout=settings.profile_fetch_timeout)
    conversations = ConversationRepository(client, timeout=settings.store_timeout)
    responder = WebhookResponder(settings.responder_url, timeout=settings.responder_timeout)

    sessions = SessionManager(
        client,
        profiles,
        storage,
        settings=settings,
        conversations=conversations,
    )

    logger.debug(f"Client wired against {settings.supabase_url}")
    return ClientApp(
        settings=settings,
        client=client,
        storage=storage,
        sessions=sessions,
        conversations=ConversationSynchronizer(conversations, responder),
        responder=responder,
        usage=UsageService(
            UsageRepository(client, timeout=settings.store_timeout),
            daily_limit=settings.free_daily_query_limit,
        ),
        billing=BillingService(
            BillingRepository(client, timeout=settings.store_timeout),
            settings=settings,
            http_client=httpx.AsyncClient(timeout=30.0),
        ),
        admin=AdminService(
            AdminRepository(client, timeout=settings.store_timeout),
            ProfileRepository(client, timeout=settings.store_timeout),
        ),
    )
