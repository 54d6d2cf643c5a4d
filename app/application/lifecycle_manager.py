"""
Gestor del ciclo de vida de reservaciones.

Único punto por el que cambia ``reservations.status``. Cada transición:

1. Lee la reservación (``NotFoundError`` si no existe).
2. Busca el par (estado, evento) en ``app.domain.lifecycle``.
3. Verifica los guards que dependen de otras filas (pago completado,
   documentos aprobados, voucher entregado).
4. Aplica el cambio con compare-and-swap sobre (status, lock_version); si
   otra escritura ganó la carrera, relee y revalida hasta
   ``MAX_CAS_ATTEMPTS`` veces antes de lanzar ``OptimisticLockError``.
5. Escribe una nota de auditoría.

Debe llamarse dentro de una transacción abierta por el caso de uso.
"""

import logging
from dataclasses import replace
from typing import Any, Sequence

from app.application.interfaces.audit_repo import AuditRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.document_repo import DocumentRepo
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRecord, ReservationRepo
from app.application.interfaces.voucher_repo import VoucherRepo
from app.domain.enums import (
    AuditEntityType,
    DocumentStatus,
    DocumentType,
    LifecycleEvent,
    ReservationStatus,
    VoucherStatus,
)
from app.domain.errors import InvalidTransitionError, NotFoundError, OptimisticLockError
from app.domain.lifecycle import PRE_PAYMENT_STATES, next_status

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_DOCUMENT_TYPES: tuple[str, ...] = (DocumentType.ID.value, DocumentType.ADDRESS_PROOF.value)


class ReservationLifecycleManager:
    MAX_CAS_ATTEMPTS = 3

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        document_repo: DocumentRepo,
        voucher_repo: VoucherRepo,
        audit_repo: AuditRepo,
        clock: Clock,
        required_document_types: Sequence[str] = DEFAULT_REQUIRED_DOCUMENT_TYPES,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._document_repo = document_repo
        self._voucher_repo = voucher_repo
        self._audit_repo = audit_repo
        self._clock = clock
        self.required_document_types = tuple(required_document_types)

    async def transition(
        self,
        reservation_id: int,
        event: LifecycleEvent | str,
        actor_id: int | None = None,
        reason: str | None = None,
        external_payment_id: str | None = None,
        fields: dict[str, Any] | None = None,
    ) -> ReservationRecord:
        """
        Aplica ``event`` sobre la reservación y devuelve el registro actualizado.

        Args:
            reservation_id: Reservación a mover.
            event: Evento del ciclo de vida.
            actor_id: Usuario que origina el cambio; None para el sistema (webhooks).
            reason: Texto libre guardado en la nota de auditoría.
            external_payment_id: Id del pago en Stripe, para idempotencia de
                ``payment_succeeded``.
            fields: Columnas adicionales escritas en el mismo UPDATE
                (ej: ``cancellation_reason``, ``refund_amount``).

        Raises:
            NotFoundError: La reservación no existe.
            InvalidTransitionError: Par no definido o guard incumplido.
            OptimisticLockError: Se agotaron los reintentos de compare-and-swap.
        """
        evt = LifecycleEvent(event)
        reservation: ReservationRecord | None = None

        for attempt in range(1, self.MAX_CAS_ATTEMPTS + 1):
            reservation = await self._reservation_repo.get(reservation_id)
            if reservation is None:
                raise NotFoundError("Reservation", reservation_id)

            if self._is_replayed_payment(reservation, evt, external_payment_id):
                logger.info(
                    "Payment already applied, skipping transition",
                    extra={"reservation_id": reservation_id, "external_payment_id": external_payment_id},
                )
                return reservation

            target = next_status(
                reservation.id, reservation.status, evt, resume_status=reservation.pre_dispute_status
            )
            await self._check_guards(reservation, evt, target)

            values = dict(fields or {})
            if evt == LifecycleEvent.DISPUTE_OPENED:
                values["pre_dispute_status"] = reservation.status
            elif evt == LifecycleEvent.DISPUTE_RESOLVED:
                values["pre_dispute_status"] = None
            if evt == LifecycleEvent.PAYMENT_SUCCEEDED and external_payment_id:
                values["payment_intent_id"] = external_payment_id

            swapped = await self._reservation_repo.compare_and_set_status(
                reservation.id,
                expected_status=reservation.status,
                expected_lock_version=reservation.lock_version,
                new_status=target.value,
                **values,
            )
            if swapped:
                await self._audit(reservation, evt, target, actor_id, reason, external_payment_id)
                logger.info(
                    "Reservation transitioned",
                    extra={
                        "reservation_id": reservation.id,
                        "event": evt.value,
                        "from_status": reservation.status,
                        "to_status": target.value,
                    },
                )
                return replace(
                    reservation,
                    status=target.value,
                    lock_version=reservation.lock_version + 1,
                    **values,
                )

            logger.warning(
                "Reservation changed concurrently, re-validating",
                extra={"reservation_id": reservation.id, "event": evt.value, "attempt": attempt},
            )

        raise OptimisticLockError("Reservation", reservation_id, reservation.status if reservation else "")

    @staticmethod
    def _is_replayed_payment(
        reservation: ReservationRecord, event: LifecycleEvent, external_payment_id: str | None
    ) -> bool:
        return (
            event == LifecycleEvent.PAYMENT_SUCCEEDED
            and external_payment_id is not None
            and reservation.payment_intent_id == external_payment_id
            and ReservationStatus(reservation.status) not in PRE_PAYMENT_STATES
        )

    async def _check_guards(
        self, reservation: ReservationRecord, event: LifecycleEvent, target: ReservationStatus
    ) -> None:
        def fail(reason: str) -> InvalidTransitionError:
            return InvalidTransitionError(reservation.id, reservation.status, event.value, reason)

        if event == LifecycleEvent.REFUND_ISSUED:
            # El caso de uso de reembolso reclama el pago antes de llamar a Stripe.
            if not (
                await self._payment_repo.has_refund_pending(reservation.id)
                or await self._payment_repo.has_completed(reservation.id)
            ):
                raise fail("no completed payment")
        elif (target == ReservationStatus.PAID or event == LifecycleEvent.STAY_COMPLETED) and not (
            await self._payment_repo.has_completed(reservation.id)
        ):
            raise fail("no completed payment")

        if event == LifecycleEvent.DOCUMENTS_SUBMITTED:
            missing = await self.missing_document_types(reservation.id, accept_under_review=True)
            if missing:
                raise fail(f"missing documents: {', '.join(missing)}")

        if target == ReservationStatus.APPROVED:
            missing = await self.missing_document_types(reservation.id)
            if missing:
                raise fail(f"documents not approved: {', '.join(missing)}")

        if target == ReservationStatus.VOUCHER_DELIVERED:
            voucher = await self._voucher_repo.get_by_reservation(reservation.id)
            if voucher is None or voucher.status != VoucherStatus.DELIVERED.value:
                raise fail("voucher not delivered")

    async def missing_document_types(self, reservation_id: int, accept_under_review: bool = False) -> list[str]:
        """
        Tipos obligatorios sin un documento aprobado (o en revisión si se acepta).

        Lee con bloqueo para ver aprobaciones confirmadas por revisiones
        concurrentes de la misma reservación.
        """
        accepted = {DocumentStatus.APPROVED.value}
        if accept_under_review:
            accepted.add(DocumentStatus.UNDER_REVIEW.value)
        documents = await self._document_repo.list_by_reservation(reservation_id, for_update=True)
        present = {doc.document_type for doc in documents if doc.status in accepted}
        return [doc_type for doc_type in self.required_document_types if doc_type not in present]

    async def _audit(
        self,
        reservation: ReservationRecord,
        event: LifecycleEvent,
        target: ReservationStatus,
        actor_id: int | None,
        reason: str | None,
        external_payment_id: str | None,
    ) -> None:
        metadata: dict[str, Any] = {
            "from": reservation.status,
            "to": target.value,
            "event": event.value,
        }
        if external_payment_id:
            metadata["external_payment_id"] = external_payment_id
        await self._audit_repo.add(
            entity_type=AuditEntityType.RESERVATION.value,
            entity_id=reservation.id,
            actor_id=actor_id,
            action=f"transition:{event.value}",
            notes=reason,
            metadata=metadata,
            created_at=self._clock.now(),
        )
