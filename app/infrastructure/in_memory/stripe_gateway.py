from itertools import count

from app.application.interfaces.payment_gateway import (
    CheckoutSessionResult,
    PaymentGateway,
    PaymentIntentResult,
    RefundResult,
)
from app.domain.errors import GatewayError
from app.infrastructure.gateways.stripe_gateway import (
    DEFAULT_WEBHOOK_TOLERANCE_SECONDS,
    verify_stripe_signature,
)


class StubStripeGateway(PaymentGateway):
    """
    Gateway sin red para desarrollo y tests.

    Devuelve ids deterministas (``cs_test_1``, ``pi_test_1``...) y guarda
    las llamadas para inspección. La verificación de firma del webhook usa
    la misma rutina que el adaptador real.
    """

    def __init__(self, webhook_tolerance: int = DEFAULT_WEBHOOK_TOLERANCE_SECONDS) -> None:
        self._webhook_tolerance = webhook_tolerance
        self._seq = count(1)
        self.checkout_sessions: dict[str, dict] = {}
        self.payment_intents: dict[str, PaymentIntentResult] = {}
        self.refunds: list[RefundResult] = []
        self._refunds_by_key: dict[str, RefundResult] = {}
        self.unavailable = False

    def _ensure_available(self) -> None:
        if self.unavailable:
            raise GatewayError("stripe", "Payment provider temporarily unavailable")

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
        self._ensure_available()
        session_id = f"cs_test_{next(self._seq)}"
        self.checkout_sessions[session_id] = {
            "amount": amount,
            "currency": currency,
            "reservation_id": reservation_id,
            "user_id": user_id,
            "product_name": product_name,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        return CheckoutSessionResult(
            session_id=session_id,
            url=f"https://checkout.stripe.test/pay/{session_id}",
            status="open",
        )

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        reservation_id: int,
        user_id: int,
        email: str | None,
    ) -> PaymentIntentResult:
        self._ensure_available()
        intent_id = f"pi_test_{next(self._seq)}"
        intent = PaymentIntentResult(
            payment_intent_id=intent_id,
            client_secret=f"{intent_id}_secret",
            status="requires_payment_method",
            amount=amount,
            currency=currency,
            metadata={"reservation_id": str(reservation_id), "user_id": str(user_id)},
        )
        self.payment_intents[intent_id] = intent
        return intent

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        self._ensure_available()
        intent = self.payment_intents.get(payment_intent_id)
        if intent is None:
            raise GatewayError("stripe", f"No such payment_intent: {payment_intent_id}")
        return intent

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSessionResult:
        self._ensure_available()
        if session_id not in self.checkout_sessions:
            raise GatewayError("stripe", f"No such checkout session: {session_id}")
        return CheckoutSessionResult(session_id=session_id, url=None, status="open")

    async def create_refund(
        self, payment_intent_id: str, amount: int | None = None, idempotency_key: str | None = None
    ) -> RefundResult:
        self._ensure_available()
        if idempotency_key and idempotency_key in self._refunds_by_key:
            return self._refunds_by_key[idempotency_key]
        refund = RefundResult(
            refund_id=f"re_test_{next(self._seq)}",
            status="succeeded",
            amount=amount or 0,
        )
        self.refunds.append(refund)
        if idempotency_key:
            self._refunds_by_key[idempotency_key] = refund
        return refund

    def verify_webhook(self, payload: bytes, signature_header: str | None, webhook_secret: str | None) -> None:
        verify_stripe_signature(payload, signature_header, webhook_secret, self._webhook_tolerance)
