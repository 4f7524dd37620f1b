"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, HRDCError, ValidationError


class BillingError(HRDCError):
    """Base exception for billing-related errors."""

    pass


class UnknownPlanError(ValidationError):
    """Raised when a checkout is requested for a plan that does not exist."""

    def __init__(self, plan: str):
        super().__init__(
            f"Unknown subscription plan: {plan}",
            code="UNKNOWN_PLAN",
            details={"plan": plan},
        )


class PaymentInitializationError(BillingError):
    """Raised when the pending transaction could not be recorded."""

    def __init__(self, reason: str):
        super().__init__(
            f"Failed to create transaction record: {reason}",
            code="PAYMENT_INIT_FAILED",
        )


class PaymentVerificationError(ExternalServiceError):
    """Raised when the gateway (or the verification endpoint) cannot be used."""

    def __init__(self, message: str, reference: Optional[str] = None):
        super().__init__(
            message,
            service="paystack",
            code="PAYMENT_VERIFICATION_FAILED",
            details={"reference": reference} if reference else None,
        )
