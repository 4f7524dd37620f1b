"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together the module
implementations the trusted backend needs. Services are created lazily
and cached for the lifetime of the process.
"""

from typing import TYPE_CHECKING

from shared.config import get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.billing.interfaces import IPaymentVerifier


class ServiceContainer:
    """
    Container for all service instances.

    The Supabase service-role client is created asynchronously, so services
    that need it are built by async accessors rather than properties.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._payment_verifier: "IPaymentVerifier | None" = None

    async def payment_verifier(self) -> "IPaymentVerifier":
        """Get the payment verifier instance."""
        if self._payment_verifier is None:
            from modules.billing.repository import BillingRepository
            from modules.billing.verification import PaymentVerifier
            from shared.database import get_supabase_service_client

            settings = get_settings()
            client = await get_supabase_service_client()
            self._payment_verifier = PaymentVerifier(
                repository=BillingRepository(client, timeout=settings.store_timeout),
                secret_key=settings.paystack_secret_key,
                api_url=settings.paystack_api_url,
            )
        return self._payment_verifier

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._payment_verifier = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions


async def get_payment_verifier() -> "IPaymentVerifier":
    """FastAPI dependency for the payment verifier."""
    return await get_container().payment_verifier()
