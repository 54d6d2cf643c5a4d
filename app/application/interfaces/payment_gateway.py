from dataclasses import dataclass, field


@dataclass
class CheckoutSessionResult:
    session_id: str
    url: str | None
    payment_intent_id: str | None = None
    status: str | None = None


@dataclass
class PaymentIntentResult:
    payment_intent_id: str
    client_secret: str | None
    status: str
    amount: int
    currency: str
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class RefundResult:
    refund_id: str
    status: str
    amount: int


class PaymentGateway:
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
        raise NotImplementedError

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        reservation_id: int,
        user_id: int,
        email: str | None,
    ) -> PaymentIntentResult:
        raise NotImplementedError

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        raise NotImplementedError

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSessionResult:
        raise NotImplementedError

    async def create_refund(
        self, payment_intent_id: str, amount: int | None = None, idempotency_key: str | None = None
    ) -> RefundResult:
        """Con la misma ``idempotency_key`` Stripe devuelve el reembolso ya creado."""
        raise NotImplementedError

    def verify_webhook(self, payload: bytes, signature_header: str | None, webhook_secret: str | None) -> None:
        """
        Valida la firma ``Stripe-Signature`` del cuerpo crudo.

        Raises:
            BadRequestError: encabezado o secreto ausente, firma inválida o
                timestamp fuera de tolerancia.
        """
        raise NotImplementedError
