"""
Billing service implementation.

Client-side half of the payment flow:

    initialize_payment -> (checkout widget) -> verify_payment

The client never talks to the gateway with the secret key; verification is
delegated to the trusted backend's ``/payments/verify`` endpoint.
"""

import logging
import time
from typing import Optional

import httpx

from shared.config import Settings, get_settings
from shared.exceptions import HRDCError

from modules.auth.models import Identity

from .exceptions import PaymentInitializationError, PaymentVerificationError, UnknownPlanError
from .interfaces import IBillingService
from .models import (
    SUBSCRIPTION_PLANS,
    CheckoutConfig,
    CustomField,
    PlanType,
    SubscriptionPlan,
    SubscriptionStatus,
    TransactionStatus,
    VerificationResult,
)
from .repository import BillingRepository

logger = logging.getLogger(__name__)


def get_plan(plan: PlanType | str) -> SubscriptionPlan:
    """Look up a plan by type or name."""
    try:
        return SUBSCRIPTION_PLANS[PlanType(plan)]
    except ValueError:
        raise UnknownPlanError(str(plan))


def make_reference(user_id: str, now_ms: Optional[int] = None) -> str:
    """Unique checkout reference: ``hrdc_<user id>_<epoch ms>``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"hrdc_{user_id}_{now_ms}"


class BillingService(IBillingService):
    """Billing service backed by Supabase and the trusted payments API."""

    def __init__(
        self,
        repository: BillingRepository,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._repository = repository
        self._settings = settings or get_settings()
        self._http = http_client or httpx.AsyncClient(timeout=30.0)

    async def initialize_payment(
        self,
        identity: Identity,
        plan: PlanType | str = PlanType.STANDARD,
    ) -> CheckoutConfig:
        """Record a pending transaction and build the checkout configuration."""
        details = get_plan(plan)
        if details.price <= 0:
            raise UnknownPlanError(details.plan_type.value)

        reference = make_reference(identity.id)
        try:
            await self._repository.insert_transaction(
                {
                    "user_id": identity.id,
                    "paystack_reference": reference,
                    "amount": details.price,
                    "currency": details.currency,
                    "status": TransactionStatus.PENDING.value,
                    "metadata": {
                        "plan_type": details.plan_type.value,
                        "user_email": identity.email,
                        "user_name": identity.full_name,
                    },
                }
            )
        except HRDCError as e:
            logger.error(f"Error initializing payment for {identity.id}: {e}")
            raise PaymentInitializationError(e.message)

        logger.info(f"Initialized {details.plan_type.value} payment {reference}")
        return CheckoutConfig(
            key=self._settings.paystack_public_key,
            email=identity.email,
            amount=details.amount_minor,
            currency=details.currency,
            reference=reference,
            metadata={
                "user_id": identity.id,
                "plan_type": details.plan_type.value,
                "custom_fields": [
                    CustomField(
                        display_name="Plan Type",
                        variable_name="plan_type",
                        value=details.plan_type.value,
                    ).model_dump(),
                    CustomField(
                        display_name="User ID",
                        variable_name="user_id",
                        value=identity.id,
                    ).model_dump(),
                ],
            },
        )

    async def verify_payment(self, reference: str, access_token: str) -> VerificationResult:
        """POST the reference to the trusted backend and return its verdict."""
        url = f"{self._settings.payments_api_url.rstrip('/')}/verify"
        try:
            response = await self._http.post(
                url,
                json={"reference": reference},
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            raise PaymentVerificationError(f"Payment verification failed: {e}", reference)

        body = _json_or_empty(response)
        if response.status_code == 400 and "success" in body:
            return VerificationResult(**body)
        if response.is_error:
            message = body.get("message") or f"HTTP {response.status_code}"
            raise PaymentVerificationError(message, reference)

        return VerificationResult(**body)

    async def get_subscription(self, user_id: str) -> SubscriptionStatus:
        """Current subscription, or the free plan on any failure."""
        try:
            status = await self._repository.get_subscription(user_id)
        except HRDCError as e:
            logger.error(f"Error getting subscription for {user_id}: {e}")
            return SubscriptionStatus()
        return status or SubscriptionStatus()

    async def aclose(self) -> None:
        await self._http.aclose()


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
