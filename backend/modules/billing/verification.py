"""
Server-side payment verification.

Runs only inside the trusted backend: it holds the gateway secret key and
writes subscriptions through the service-role client.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from dateutil.relativedelta import relativedelta

from shared.exceptions import AuthorizationError, HRDCError

from .exceptions import PaymentVerificationError
from .interfaces import IPaymentVerifier
from .models import PlanType, TransactionStatus, VerificationResult
from .repository import BillingRepository

logger = logging.getLogger(__name__)

SUBSCRIPTION_PERIOD = relativedelta(months=1)


def paying_user_id(metadata: Optional[dict[str, Any]]) -> Optional[str]:
    """
    Read the paying user's ID from gateway metadata.

    Looks at ``metadata.user_id`` first, then the ``user_id`` custom field.
    """
    if not metadata:
        return None
    if metadata.get("user_id"):
        return str(metadata["user_id"])
    for field in metadata.get("custom_fields") or []:
        if field.get("variable_name") == "user_id" and field.get("value"):
            return str(field["value"])
    return None


class PaymentVerifier(IPaymentVerifier):
    """Verifies references with Paystack and activates subscriptions."""

    def __init__(
        self,
        repository: BillingRepository,
        secret_key: str,
        api_url: str = "https://api.paystack.co",
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._repository = repository
        self._secret_key = secret_key
        self._api_url = api_url.rstrip("/")
        self._http = http_client or httpx.AsyncClient(timeout=30.0)

    async def verify(self, reference: str, user_id: str) -> VerificationResult:
        """Verify ``reference`` for ``user_id`` and activate the subscription."""
        if not self._secret_key:
            raise PaymentVerificationError("Paystack secret key not configured", reference)

        data = await self._fetch_transaction(reference)
        if data.get("status") != "success":
            logger.info(f"Payment {reference} not successful: {data.get('status')}")
            return VerificationResult(
                success=False,
                message="Payment verification failed",
                reference=reference,
            )

        payer = paying_user_id(data.get("metadata"))
        if payer != user_id:
            logger.warning(f"Payment {reference} belongs to {payer}, not caller {user_id}")
            raise AuthorizationError(
                "Payment does not belong to the authenticated user",
                code="PAYMENT_USER_MISMATCH",
                details={"reference": reference},
            )

        subscription = await self._repository.upsert_subscription(
            self._subscription_row(user_id, data)
        )

        try:
            await self._repository.mark_transaction(
                reference, TransactionStatus.SUCCESS, data.get("id")
            )
        except HRDCError as e:
            logger.error(f"Failed to update transaction status for {reference}: {e}")

        logger.info(f"Subscription activated for {user_id} via {reference}")
        return VerificationResult(
            success=True,
            message="Payment verified and subscription updated",
            reference=reference,
            subscription=subscription,
        )

    async def _fetch_transaction(self, reference: str) -> dict[str, Any]:
        """GET the transaction from the gateway; returns its ``data`` object."""
        try:
            response = await self._http.get(
                f"{self._api_url}/transaction/verify/{reference}",
                headers={
                    "Authorization": f"Bearer {self._secret_key}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as e:
            raise PaymentVerificationError(f"Payment verification failed: {e}", reference)

        if response.is_error:
            raise PaymentVerificationError("Payment verification failed", reference)

        body = response.json()
        if not body.get("status"):
            return {}
        return body.get("data") or {}

    def _subscription_row(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        customer = data.get("customer") or {}
        return {
            "user_id": user_id,
            "plan_type": PlanType.STANDARD.value,
            "status": "active",
            "paystack_subscription_id": data.get("id"),
            "paystack_customer_id": customer.get("id"),
            "amount_paid": (data.get("amount") or 0) / 100,
            "currency": data.get("currency"),
            "expires_at": (now + SUBSCRIPTION_PERIOD).isoformat(),
            "updated_at": now.isoformat(),
        }

    async def aclose(self) -> None:
        await self._http.aclose()
