"""
Billing module.

Subscription plans, checkout initialization and payment verification.

Public API:
- IBillingService: Client-side billing operations
- IPaymentVerifier: Server-side gateway verification
- SubscriptionPlan / SUBSCRIPTION_PLANS: Plan catalogue
- Billing exceptions: UnknownPlanError, PaymentInitializationError, etc.
"""

from .interfaces import IBillingService, IPaymentVerifier
from .models import (
    SUBSCRIPTION_PLANS,
    CheckoutConfig,
    PlanType,
    SubscriptionPlan,
    SubscriptionStatus,
    VerificationResult,
)
from .exceptions import (
    BillingError,
    PaymentInitializationError,
    PaymentVerificationError,
    UnknownPlanError,
)

__all__ = [
    # Interfaces
    "IBillingService",
    "IPaymentVerifier",
    # Models
    "SUBSCRIPTION_PLANS",
    "CheckoutConfig",
    "PlanType",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "VerificationResult",
    # Exceptions
    "BillingError",
    "PaymentInitializationError",
    "PaymentVerificationError",
    "UnknownPlanError",
]
