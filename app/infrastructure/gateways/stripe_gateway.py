import asyncio
import logging
from typing import Any

import stripe

from app.application.interfaces.payment_gateway import (
    CheckoutSessionResult,
    PaymentGateway,
    PaymentIntentResult,
    RefundResult,
)
from app.domain.errors import BadRequestError, GatewayError
from app.infrastructure.circuit_breaker import CircuitBreakerError, stripe_breaker

logger = logging.getLogger(__name__)

DEFAULT_WEBHOOK_TOLERANCE_SECONDS = 300


def verify_stripe_signature(
    payload: bytes,
    signature_header: str | None,
    webhook_secret: str | None,
    tolerance: int = DEFAULT_WEBHOOK_TOLERANCE_SECONDS,
) -> None:
    """Check a ``Stripe-Signature`` header against the raw request body."""
    if not webhook_secret:
        # Sin secreto no hay forma de autenticar el evento.
        raise BadRequestError("Webhook secret is not configured")
    if not signature_header:
        raise BadRequestError("Missing Stripe-Signature header")
    try:
        stripe.WebhookSignature.verify_header(
            payload.decode("utf-8"), signature_header, webhook_secret, tolerance
        )
    except stripe.SignatureVerificationError as exc:
        raise BadRequestError("Invalid Stripe signature") from exc
    except UnicodeDecodeError as exc:
        raise BadRequestError("Invalid webhook payload") from exc


def _as_dict(value: Any) -> dict[str, str]:
    if not value:
        return {}
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return dict(value)


class StripePaymentGateway(PaymentGateway):
    """Stripe adapter. The SDK is synchronous, so calls run in a worker thread."""

    def __init__(self, api_key: str, webhook_tolerance: int = DEFAULT_WEBHOOK_TOLERANCE_SECONDS) -> None:
        stripe.api_key = api_key
        stripe.max_network_retries = 2
        self._webhook_tolerance = webhook_tolerance

    async def _call(self, operation: str, func, **params):
        try:
            return await asyncio.to_thread(stripe_breaker.call, func, **params)
        except CircuitBreakerError as exc:
            logger.error("Stripe circuit breaker is open", extra={"operation": operation})
            raise GatewayError("stripe", "Payment provider temporarily unavailable") from exc
        except stripe.StripeError as exc:
            logger.error("Stripe API error", exc_info=exc, extra={"operation": operation})
            raise GatewayError("stripe", exc.user_message or "Payment provider error") from exc

    async def create_checkout_session(
        self,
        amount: int,
        currency: str,
        reservation_id: int,
        user_id: int,
        email: str | None,
        name: str | None,
        product_name: str,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSessionResult:
        metadata = {
            "reservation_id": str(reservation_id),
            "user_id": str(user_id),
            "customer_email": email or "",
            "customer_name": name or "",
        }
        params: dict[str, Any] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": currency,
                        "product_data": {
                            "name": product_name,
                            "description": "Vacation rental reservation",
                        },
                        "unit_amount": amount,
                    },
                    "quantity": 1,
                }
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "client_reference_id": str(user_id),
            "metadata": metadata,
            "payment_intent_data": {"metadata": metadata},
            "allow_promotion_codes": True,
        }
        if email:
            params["customer_email"] = email

        session = await self._call("create_checkout_session", stripe.checkout.Session.create, **params)
        logger.info(
            "Checkout session created",
            extra={"reservation_id": reservation_id, "session_id": session.id},
        )
        return CheckoutSessionResult(
            session_id=session.id,
            url=session.url,
            payment_intent_id=session.payment_intent,
            status=session.status,
        )

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        reservation_id: int,
        user_id: int,
        email: str | None,
    ) -> PaymentIntentResult:
        intent = await self._call(
            "create_payment_intent",
            stripe.PaymentIntent.create,
            amount=amount,
            currency=currency,
            metadata={
                "reservation_id": str(reservation_id),
                "user_id": str(user_id),
                "customer_email": email or "",
            },
        )
        return self._intent_result(intent)

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        intent = await self._call("retrieve_payment_intent", stripe.PaymentIntent.retrieve, id=payment_intent_id)
        return self._intent_result(intent)

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSessionResult:
        session = await self._call("retrieve_checkout_session", stripe.checkout.Session.retrieve, id=session_id)
        return CheckoutSessionResult(
            session_id=session.id,
            url=session.url,
            payment_intent_id=session.payment_intent,
            status=session.status,
        )

    async def create_refund(
        self, payment_intent_id: str, amount: int | None = None, idempotency_key: str | None = None
    ) -> RefundResult:
        params: dict[str, Any] = {"payment_intent": payment_intent_id}
        if amount is not None:
            params["amount"] = amount
        if idempotency_key:
            params["idempotency_key"] = idempotency_key
        refund = await self._call("create_refund", stripe.Refund.create, **params)
        return RefundResult(refund_id=refund.id, status=refund.status, amount=refund.amount)

    def verify_webhook(self, payload: bytes, signature_header: str | None, webhook_secret: str | None) -> None:
        verify_stripe_signature(payload, signature_header, webhook_secret, self._webhook_tolerance)

    @staticmethod
    def _intent_result(intent) -> PaymentIntentResult:
        return PaymentIntentResult(
            payment_intent_id=intent.id,
            client_secret=intent.client_secret,
            status=intent.status,
            amount=intent.amount,
            currency=intent.currency,
            metadata=_as_dict(intent.metadata),
        )
