"""
Payment request models.
"""

from pydantic import BaseModel, Field


class VerifyPaymentRequest(BaseModel):
    """Body of ``POST /api/payments/verify``."""

    reference: str = Field(..., min_length=1, description="Gateway transaction reference")
