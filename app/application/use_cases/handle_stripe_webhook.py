import json
import logging
from typing import Any

from app.application.interfaces.clock import Clock
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.webhook_event_repo import WebhookEventRepo
from app.application.lifecycle_manager import ReservationLifecycleManager
from app.domain.enums import LifecycleEvent, PaymentStatus
from app.domain.errors import BadRequestError, DuplicateWebhookEventError
from app.domain.lifecycle import can_apply
from app.domain.webhook_events import (
    CheckoutSessionCompleted,
    PaymentIntentPaymentFailed,
    PaymentIntentSucceeded,
    UnknownEvent,
    WebhookEvent,
    parse_webhook_event,
)


class HandleStripeWebhookUseCase:
    """
    Procesa un webhook de Stripe: verifica la firma, registra el id del
    evento para idempotencia y aplica el efecto del evento en una sola
    transacción.
    """

    def __init__(
        self,
        payment_gateway: PaymentGateway,
        webhook_event_repo: WebhookEventRepo,
        payment_repo: PaymentRepo,
        reservation_repo: ReservationRepo,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
        clock: Clock,
        stripe_webhook_secret: str | None,
    ) -> None:
        self._payment_gateway = payment_gateway
        self._webhook_event_repo = webhook_event_repo
        self._payment_repo = payment_repo
        self._reservation_repo = reservation_repo
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._stripe_webhook_secret = stripe_webhook_secret
        self._logger = logging.getLogger(__name__)

    async def execute(self, raw_body: bytes, signature: str | None) -> dict[str, Any]:
        if not raw_body:
            raise BadRequestError("Empty webhook body")

        self._payment_gateway.verify_webhook(raw_body, signature, self._stripe_webhook_secret)

        try:
            envelope = json.loads(raw_body)
        except ValueError as exc:
            raise BadRequestError("Invalid webhook payload") from exc
        event = parse_webhook_event(envelope)

        try:
            async with self._transaction_manager.start():
                await self._webhook_event_repo.record(event.event_id, event.type, self._clock.now())
                await self._dispatch(event)
        except DuplicateWebhookEventError:
            self._logger.info(
                "Stripe webhook already processed",
                extra={"stripe_event_id": event.event_id, "event_type": event.type},
            )
            return {"received": True, "duplicate": True}

        return {"received": True}

    async def _dispatch(self, event: WebhookEvent) -> None:
        if isinstance(event, CheckoutSessionCompleted):
            await self._on_checkout_completed(event)
        elif isinstance(event, PaymentIntentSucceeded):
            await self._on_intent_succeeded(event)
        elif isinstance(event, PaymentIntentPaymentFailed):
            await self._on_intent_failed(event)
        elif isinstance(event, UnknownEvent):
            self._logger.info(
                "Unhandled Stripe event type acknowledged",
                extra={"stripe_event_id": event.event_id, "event_type": event.type},
            )

    async def _on_checkout_completed(self, event: CheckoutSessionCompleted) -> None:
        external_id = event.payment_intent_id or event.session_id
        reservation = await self._reservation_repo.get(event.reservation_id)
        if reservation is None:
            self._logger.warning(
                "Checkout completed for unknown reservation",
                extra={"stripe_event_id": event.event_id, "reservation_id": event.reservation_id},
            )
            return

        existing = await self._payment_repo.find_by_external_id(external_id)
        if existing is not None and existing.status == PaymentStatus.COMPLETED.value:
            self._logger.info(
                "Checkout payment already recorded",
                extra={"stripe_event_id": event.event_id, "external_payment_id": external_id},
            )
            return

        if existing is None:
            await self._payment_repo.create(
                reservation_id=reservation.id,
                customer_id=event.user_id or reservation.customer_id,
                amount=event.amount_total,
                currency=event.currency,
                status=PaymentStatus.COMPLETED.value,
                external_payment_id=external_id,
                payment_method="card",
            )
        else:
            await self._payment_repo.mark_completed(existing.id)

        if not can_apply(reservation.status, LifecycleEvent.PAYMENT_SUCCEEDED):
            # El dinero ya se cobró; queda registrado para reembolso manual.
            self._logger.warning(
                "Payment received for reservation not awaiting payment",
                extra={
                    "stripe_event_id": event.event_id,
                    "reservation_id": reservation.id,
                    "status": reservation.status,
                },
            )
            return

        await self._lifecycle.transition(
            reservation.id,
            LifecycleEvent.PAYMENT_SUCCEEDED,
            reason="checkout.session.completed",
            external_payment_id=external_id,
        )
        self._logger.info(
            "Stripe webhook processed: checkout completed",
            extra={
                "stripe_event_id": event.event_id,
                "reservation_id": reservation.id,
                "amount": event.amount_total,
            },
        )

    async def _on_intent_succeeded(self, event: PaymentIntentSucceeded) -> None:
        payment = await self._payment_repo.find_by_external_id(event.payment_intent_id)
        if payment is None:
            self._logger.warning(
                "payment_intent.succeeded without matching payment",
                extra={"stripe_event_id": event.event_id, "payment_intent_id": event.payment_intent_id},
            )
            return

        moved = await self._payment_repo.mark_completed(payment.id)
        if not moved:
            return

        reservation = await self._reservation_repo.get(payment.reservation_id)
        if reservation and can_apply(reservation.status, LifecycleEvent.PAYMENT_SUCCEEDED):
            await self._lifecycle.transition(
                reservation.id,
                LifecycleEvent.PAYMENT_SUCCEEDED,
                reason="payment_intent.succeeded",
                external_payment_id=event.payment_intent_id,
            )
        self._logger.info(
            "Stripe webhook processed: payment succeeded",
            extra={
                "stripe_event_id": event.event_id,
                "payment_intent_id": event.payment_intent_id,
                "reservation_id": payment.reservation_id,
            },
        )

    async def _on_intent_failed(self, event: PaymentIntentPaymentFailed) -> None:
        payment = await self._payment_repo.find_by_external_id(event.payment_intent_id)
        if payment is None:
            self._logger.warning(
                "payment_intent.payment_failed without matching payment",
                extra={"stripe_event_id": event.event_id, "payment_intent_id": event.payment_intent_id},
            )
            return

        await self._payment_repo.mark_failed(payment.id, event.failure_message)

        reservation = await self._reservation_repo.get(payment.reservation_id)
        if reservation and can_apply(reservation.status, LifecycleEvent.PAYMENT_FAILED):
            await self._lifecycle.transition(
                reservation.id,
                LifecycleEvent.PAYMENT_FAILED,
                reason=event.failure_message or "payment_intent.payment_failed",
                external_payment_id=event.payment_intent_id,
            )
        self._logger.warning(
            "Stripe webhook processed: payment failed",
            extra={
                "stripe_event_id": event.event_id,
                "payment_intent_id": event.payment_intent_id,
                "reservation_id": payment.reservation_id,
            },
        )
