"""
Payment verification endpoint.

The client posts the gateway reference after checkout completes; the
subscription is activated here, with the secret key, never on the client.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from modules.billing.interfaces import IPaymentVerifier
from modules.billing.models import VerificationResult

from ..dependencies import get_payment_verifier
from ..middleware.auth import get_current_user
from ..models.errors import ErrorResponse
from ..models.payments import VerifyPaymentRequest
from ..models.user import AuthenticatedUser

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/verify",
    response_model=VerificationResult,
    responses={
        400: {"model": VerificationResult},
        403: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def verify_payment(
    request: VerifyPaymentRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    verifier: IPaymentVerifier = Depends(get_payment_verifier),
):
    """
    Verify a payment reference and activate the caller's subscription.

    Responds 400 with the result body when the gateway reports failure.
    """
    logger.info(f"Verifying payment {request.reference} for {user.id}")
    result = await verifier.verify(request.reference, user.id)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=result.model_dump(mode="json"),
        )
    return result
