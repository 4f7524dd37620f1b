"""
Billing repository for database access.

Encapsulates all Supabase queries for billing tables:
- payment_transactions
- subscriptions (written only by the trusted backend)
- get_user_subscription procedure
"""

from datetime import datetime, timezone
from typing import Any, Optional

from shared.repository import BaseRepository
from .models import SubscriptionStatus, TransactionStatus


class BillingRepository(BaseRepository[SubscriptionStatus]):
    """Repository for payment and subscription rows."""

    async def insert_transaction(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a payment_transactions row and return it as stored."""
        result = await self._execute(
            self._db.table("payment_transactions").insert(data), "create transaction"
        )
        return self._first_row(result, "create transaction")

    async def mark_transaction(
        self,
        reference: str,
        status: TransactionStatus,
        gateway_transaction_id: Optional[Any] = None,
    ) -> None:
        """Set the status of the transaction identified by its gateway reference."""
        data: dict[str, Any] = {
            "status": status.value,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        if gateway_transaction_id is not None:
            data["paystack_transaction_id"] = gateway_transaction_id
        query = (
            self._db.table("payment_transactions")
            .update(data)
            .eq("paystack_reference", reference)
        )
        await self._execute(query, "update transaction")

    async def upsert_subscription(self, data: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Create or replace the subscription row keyed by user_id."""
        query = self._db.table("subscriptions").upsert(data, on_conflict="user_id")
        result = await self._execute(query, "upsert subscription")
        return result.data[0] if result.data else None

    async def get_subscription(self, user_id: str) -> Optional[SubscriptionStatus]:
        """Run ``get_user_subscription``; None when it returned no row."""
        result = await self._execute(
            self._db.rpc("get_user_subscription", {"user_id": user_id}), "get subscription"
        )
        if not result.data:
            return None
        return self._map_row(SubscriptionStatus.model_validate, result.data[0], "get subscription")
