import logging

from app.application.interfaces.clock import Clock
from app.application.interfaces.cotista_repo import AvailabilityRepo
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.interfaces.payment_repo import PaymentRecord, PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRecord, ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.lifecycle_manager import ReservationLifecycleManager
from app.domain.enums import LifecycleEvent
from app.domain.errors import BadRequestError, ConflictError, GatewayError, InvalidTransitionError, NotFoundError
from app.domain.lifecycle import can_apply


class CompleteReservationUseCase:
    """Cierra la estadía de una reservación con voucher entregado."""

    def __init__(
        self,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
    ) -> None:
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager

    async def execute(self, reservation_id: int, admin_id: int, notes: str | None = None) -> ReservationRecord:
        async with self._transaction_manager.start():
            return await self._lifecycle.transition(
                reservation_id, LifecycleEvent.STAY_COMPLETED, actor_id=admin_id, reason=notes
            )


class CancelReservationUseCase:
    """Cancelación administrativa; libera el slot de disponibilidad."""

    def __init__(
        self,
        availability_repo: AvailabilityRepo,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
    ) -> None:
        self._availability_repo = availability_repo
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(self, reservation_id: int, admin_id: int, reason: str) -> ReservationRecord:
        if not reason:
            raise BadRequestError("A cancellation reason is required")
        async with self._transaction_manager.start():
            reservation = await self._lifecycle.transition(
                reservation_id,
                LifecycleEvent.ADMIN_CANCEL,
                actor_id=admin_id,
                reason=reason,
                fields={"cancellation_reason": reason},
            )
            await self._availability_repo.release(reservation.availability_id)

        self._logger.info("Reservation cancelled", extra={"reservation_id": reservation_id})
        return reservation


class RefundReservationUseCase:
    """
    Reembolso total o parcial.

    1. En una transacción confirmada se reclama el pago (``completed`` a
       ``refund_pending``). Solo una solicitud concurrente gana el reclamo;
       las demás reciben 409 sin llegar a Stripe.
    2. Se llama a Stripe con una llave de idempotencia por pago. Si Stripe
       rechaza el reembolso se libera el reclamo y no cambia nada más.
    3. En otra transacción la reservación pasa a ``refunded``, el pago se
       marca reembolsado y el slot se libera.
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        availability_repo: AvailabilityRepo,
        payment_gateway: PaymentGateway,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._availability_repo = availability_repo
        self._payment_gateway = payment_gateway
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        reservation_id: int,
        admin_id: int,
        reason: str,
        amount: int | None = None,
    ) -> ReservationRecord:
        async with self._transaction_manager.start():
            reservation, payment, refund_amount = await self._claim_payment(reservation_id, amount)

        try:
            refund = await self._payment_gateway.create_refund(
                payment.external_payment_id,
                refund_amount,
                idempotency_key=f"refund-{reservation.id}-{payment.id}",
            )
        except GatewayError:
            async with self._transaction_manager.start():
                await self._payment_repo.release_refund_claim(payment.id)
            raise

        async with self._transaction_manager.start():
            updated = await self._lifecycle.transition(
                reservation.id,
                LifecycleEvent.REFUND_ISSUED,
                actor_id=admin_id,
                reason=reason,
                fields={"refund_amount": refund_amount, "refunded_at": self._clock.now()},
            )
            await self._payment_repo.mark_refunded(payment.id)
            await self._availability_repo.release(reservation.availability_id)

        self._logger.info(
            "Reservation refunded",
            extra={"reservation_id": reservation.id, "refund_id": refund.refund_id, "amount": refund_amount},
        )
        return updated

    async def _claim_payment(
        self, reservation_id: int, amount: int | None
    ) -> tuple[ReservationRecord, PaymentRecord, int]:
        reservation = await self._reservation_repo.get(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation", reservation_id)
        if not can_apply(reservation.status, LifecycleEvent.REFUND_ISSUED):
            raise InvalidTransitionError(reservation.id, reservation.status, LifecycleEvent.REFUND_ISSUED.value)

        payment = await self._payment_repo.find_completed(reservation.id)
        if payment is None:
            if await self._payment_repo.has_refund_pending(reservation.id):
                raise ConflictError(f"A refund for reservation {reservation.id} is already in progress")
            raise InvalidTransitionError(
                reservation.id, reservation.status, LifecycleEvent.REFUND_ISSUED.value, "no completed payment"
            )
        if not payment.external_payment_id:
            raise BadRequestError(f"Payment {payment.id} has no processor reference to refund")
        refund_amount = payment.amount if amount is None else amount
        if refund_amount <= 0 or refund_amount > payment.amount:
            raise BadRequestError(f"Refund amount must be between 1 and {payment.amount}")

        if not await self._payment_repo.claim_refund(payment.id):
            raise ConflictError(f"A refund for reservation {reservation.id} is already in progress")
        return reservation, payment, refund_amount
