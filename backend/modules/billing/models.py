"""
Billing module data models.

Plans, the checkout configuration handed to the payment widget, and the
subscription/verification results read back from the store.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


CURRENCY = "KES"


class PlanType(str, Enum):
    """Subscription plan identifiers."""

    FREE = "free"
    STANDARD = "standard"


class TransactionStatus(str, Enum):
    """Lifecycle of a payment_transactions row."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class SubscriptionPlan(BaseModel):
    """A purchasable plan. ``query_limit`` of None means unlimited."""

    model_config = ConfigDict(frozen=True)

    plan_type: PlanType
    name: str
    price: int = Field(..., ge=0, description="Price in major currency units")
    currency: str = CURRENCY
    query_limit: Optional[int] = None
    features: tuple[str, ...] = ()

    @property
    def amount_minor(self) -> int:
        """Price in minor currency units, as the gateway expects it."""
        return self.price * 100


SUBSCRIPTION_PLANS: dict[PlanType, SubscriptionPlan] = {
    PlanType.FREE: SubscriptionPlan(
        plan_type=PlanType.FREE,
        name="Free Plan",
        price=0,
        query_limit=2,
        features=("2 queries per day", "Basic support"),
    ),
    PlanType.STANDARD: SubscriptionPlan(
        plan_type=PlanType.STANDARD,
        name="Standard Plan",
        price=3000,
        query_limit=None,
        features=("Unlimited queries", "Priority support", "Advanced features"),
    ),
}


class CustomField(BaseModel):
    """A labelled metadata value shown on the gateway's receipt."""

    display_name: str
    variable_name: str
    value: str


class CheckoutConfig(BaseModel):
    """Everything the client-side checkout widget needs to start a payment."""

    key: str = Field(..., description="Gateway public key")
    email: str
    amount: int = Field(..., description="Amount in minor currency units")
    currency: str = CURRENCY
    reference: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class SubscriptionStatus(BaseModel):
    """Result of the ``get_user_subscription`` procedure."""

    model_config = ConfigDict(extra="ignore")

    plan_type: PlanType = PlanType.FREE
    status: str = "active"
    is_active: bool = True
    expires_at: Optional[datetime] = None

    @property
    def is_paid(self) -> bool:
        return self.plan_type != PlanType.FREE and self.is_active


class VerificationResult(BaseModel):
    """Outcome of a server-side payment verification."""

    success: bool
    message: str
    reference: str
    subscription: Optional[dict[str, Any]] = None
