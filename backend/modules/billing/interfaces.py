"""
Billing module interfaces.

IBillingService is what the client uses; IPaymentVerifier only ever runs in
the trusted backend because it holds the gateway secret key.
"""

from typing import Protocol, runtime_checkable

from modules.auth.models import Identity

from .models import CheckoutConfig, PlanType, SubscriptionStatus, VerificationResult


@runtime_checkable
class IBillingService(Protocol):
    """Client-side billing operations."""

    async def initialize_payment(
        self,
        identity: Identity,
        plan: PlanType | str = PlanType.STANDARD,
    ) -> CheckoutConfig:
        """
        Record a pending transaction and build the checkout configuration.

        Raises:
            UnknownPlanError: If the plan does not exist or is free
            PaymentInitializationError: If the transaction could not be recorded
        """
        ...

    async def verify_payment(self, reference: str, access_token: str) -> VerificationResult:
        """
        Ask the trusted backend to verify a completed checkout.

        Raises:
            PaymentVerificationError: If the backend could not be reached
        """
        ...

    async def get_subscription(self, user_id: str) -> SubscriptionStatus:
        """Current subscription; the free plan on any failure."""
        ...


@runtime_checkable
class IPaymentVerifier(Protocol):
    """Server-side verification against the gateway."""

    async def verify(self, reference: str, user_id: str) -> VerificationResult:
        """
        Verify a reference with the gateway and activate the subscription.

        Raises:
            PaymentVerificationError: If the gateway could not be queried
            AuthorizationError: If the payment belongs to another user
        """
        ...
