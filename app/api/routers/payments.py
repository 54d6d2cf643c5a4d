from fastapi import APIRouter, Depends, Request

from app.api.auth import get_current_user
from app.api.dependencies import get_use_cases
from app.api.schemas.payments import (
    CheckoutSessionResponse,
    CreateCheckoutSessionRequest,
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
)
from app.application.interfaces.user_repo import UserRecord
from app.config import Settings, get_settings
from app.infrastructure.db.retry import retry_on_deadlock

router = APIRouter(prefix="/payments")


@router.post("/checkout-session", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    payload: CreateCheckoutSessionRequest,
    request: Request,
    user: UserRecord = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    use_cases=Depends(get_use_cases),
) -> CheckoutSessionResponse:
    origin = request.headers.get("origin") or settings.public_app_url
    started = await retry_on_deadlock(
        lambda: use_cases["create_checkout_session"].execute(
            reservation_id=payload.reservation_id,
            development_id=payload.development_id,
            user=user,
            origin=origin,
        )
    )
    return CheckoutSessionResponse.model_validate(started)


@router.post("/payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    payload: CreatePaymentIntentRequest,
    user: UserRecord = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> PaymentIntentResponse:
    started = await retry_on_deadlock(
        lambda: use_cases["create_payment_intent"].execute(reservation_id=payload.reservation_id, user=user)
    )
    return PaymentIntentResponse.model_validate(started)
