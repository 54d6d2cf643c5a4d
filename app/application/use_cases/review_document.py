import logging
from datetime import timedelta

from app.application.interfaces.audit_repo import AuditRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.document_repo import DocumentRecord, DocumentRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.voucher_repo import VoucherRepo
from app.application.lifecycle_manager import ReservationLifecycleManager
from app.domain.enums import (
    AuditEntityType,
    DocumentStatus,
    LifecycleEvent,
    ReservationStatus,
    ReviewDecision,
    VoucherStatus,
)
from app.domain.errors import BadRequestError, ConflictError, NotFoundError


class ReviewDocumentUseCase:
    """
    Revisión administrativa de un documento de cliente.

    Al aprobar el último documento obligatorio la reservación pasa a
    ``approved``, se crea el voucher pendiente del cotista con su plazo y
    la reservación avanza a ``voucher_pending``. Un rechazo mientras la
    reservación está en revisión la devuelve a ``documents_rejected``.
    """

    def __init__(
        self,
        document_repo: DocumentRepo,
        reservation_repo: ReservationRepo,
        voucher_repo: VoucherRepo,
        audit_repo: AuditRepo,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
        clock: Clock,
        voucher_deadline_hours: int = 72,
    ) -> None:
        self._document_repo = document_repo
        self._reservation_repo = reservation_repo
        self._voucher_repo = voucher_repo
        self._audit_repo = audit_repo
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._voucher_deadline_hours = voucher_deadline_hours
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        document_id: int,
        decision: ReviewDecision,
        admin_id: int,
        rejection_reason: str | None = None,
    ) -> DocumentRecord:
        decision = ReviewDecision(decision)
        if decision == ReviewDecision.REJECT and not rejection_reason:
            raise BadRequestError("rejection_reason is required to reject a document")

        new_status = DocumentStatus.APPROVED if decision == ReviewDecision.APPROVE else DocumentStatus.REJECTED
        now = self._clock.now()

        async with self._transaction_manager.start():
            document = await self._document_repo.get(document_id)
            if document is None:
                raise NotFoundError("Document", document_id)
            # Serializa revisiones de la misma reservación: la última aprobación
            # debe ver las anteriores al decidir si avanza.
            reservation = await self._reservation_repo.get(document.reservation_id, for_update=True)

            reviewed = await self._document_repo.review(
                document.id,
                expected_status=DocumentStatus.UNDER_REVIEW.value,
                new_status=new_status.value,
                reviewed_by=admin_id,
                reviewed_at=now,
                rejection_reason=rejection_reason if decision == ReviewDecision.REJECT else None,
            )
            if not reviewed:
                raise ConflictError(f"Document {document.id} is not under review")

            await self._audit_repo.add(
                entity_type=AuditEntityType.DOCUMENT.value,
                entity_id=document.id,
                actor_id=admin_id,
                action=f"document_{new_status.value}",
                notes=rejection_reason,
                metadata={"reservation_id": document.reservation_id, "document_type": document.document_type},
                created_at=now,
            )

            if reservation and reservation.status == ReservationStatus.DOCUMENTS_UNDER_REVIEW.value:
                if decision == ReviewDecision.REJECT:
                    await self._lifecycle.transition(
                        reservation.id,
                        LifecycleEvent.DOCUMENT_REJECTED,
                        actor_id=admin_id,
                        reason=rejection_reason,
                    )
                elif not await self._lifecycle.missing_document_types(reservation.id):
                    await self._approve_reservation(reservation.id, admin_id)

        self._logger.info(
            "Document reviewed",
            extra={"document_id": document.id, "reservation_id": document.reservation_id, "decision": decision.value},
        )
        return await self._document_repo.get(document.id)

    async def _approve_reservation(self, reservation_id: int, admin_id: int) -> None:
        reservation = await self._lifecycle.transition(
            reservation_id, LifecycleEvent.DOCUMENT_APPROVED, actor_id=admin_id, reason="all required documents approved"
        )
        if await self._voucher_repo.get_by_reservation(reservation.id) is None:
            await self._voucher_repo.create(
                reservation_id=reservation.id,
                cotista_id=reservation.cotista_id,
                deadline=self._clock.now() + timedelta(hours=self._voucher_deadline_hours),
                status=VoucherStatus.PENDING.value,
            )
        await self._lifecycle.transition(
            reservation.id, LifecycleEvent.VOUCHER_REQUESTED, actor_id=admin_id, reason="voucher requested from cotista"
        )
