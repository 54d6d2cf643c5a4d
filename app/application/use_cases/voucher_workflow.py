"""
Flujo del voucher de estadía.

Estados del voucher: pending -> sent -> under_review -> approved -> delivered,
con rejected -> sent cuando el cotista reenvía. Cada paso actualiza el
voucher con un UPDATE condicional sobre su estado actual y mueve la
reservación por el evento correspondiente en la misma transacción.
"""

import logging
from typing import Sequence

from app.application.file_validation import DOCUMENT_TYPES, MAX_DOCUMENT_SIZE_MB, validate_file
from app.application.interfaces.audit_repo import AuditRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.cotista_repo import CotistaRecord
from app.application.interfaces.object_storage import ObjectStorage
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.voucher_repo import VoucherRecord, VoucherRepo
from app.application.lifecycle_manager import ReservationLifecycleManager
from app.application.uploads import VOUCHERS, compensate_on_error, upload_file
from app.domain.enums import AuditEntityType, LifecycleEvent, ReviewDecision, VoucherStatus
from app.domain.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
)
from app.domain.lifecycle import can_apply


class _VoucherStep:
    def __init__(
        self,
        voucher_repo: VoucherRepo,
        audit_repo: AuditRepo,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._voucher_repo = voucher_repo
        self._audit_repo = audit_repo
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def _get_voucher(self, voucher_id: int) -> VoucherRecord:
        voucher = await self._voucher_repo.get(voucher_id)
        if voucher is None:
            raise NotFoundError("Voucher", voucher_id)
        return voucher

    async def _move(
        self,
        voucher: VoucherRecord,
        expected: Sequence[VoucherStatus],
        new_status: VoucherStatus,
        event: LifecycleEvent,
        actor_id: int,
        reason: str | None = None,
        **fields,
    ) -> None:
        updated = await self._voucher_repo.update_status(
            voucher.id, [status.value for status in expected], new_status.value, **fields
        )
        if not updated:
            raise ConflictError(f"Voucher {voucher.id} is not in status {', '.join(s.value for s in expected)}")
        await self._audit_repo.add(
            entity_type=AuditEntityType.VOUCHER.value,
            entity_id=voucher.id,
            actor_id=actor_id,
            action=f"voucher_{new_status.value}",
            notes=reason,
            metadata={"reservation_id": voucher.reservation_id, "from": voucher.status},
            created_at=self._clock.now(),
        )
        await self._lifecycle.transition(voucher.reservation_id, event, actor_id=actor_id, reason=reason)
        self._logger.info(
            "Voucher status changed",
            extra={"voucher_id": voucher.id, "reservation_id": voucher.reservation_id, "to_status": new_status.value},
        )


class UploadVoucherUseCase(_VoucherStep):
    """El cotista sube el archivo del voucher de una de sus reservaciones."""

    def __init__(
        self,
        voucher_repo: VoucherRepo,
        reservation_repo: ReservationRepo,
        storage: ObjectStorage,
        audit_repo: AuditRepo,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
        clock: Clock,
        allowed_types: Sequence[str] = DOCUMENT_TYPES,
        max_size_mb: int = MAX_DOCUMENT_SIZE_MB,
    ) -> None:
        super().__init__(voucher_repo, audit_repo, lifecycle, transaction_manager, clock)
        self._reservation_repo = reservation_repo
        self._storage = storage
        self._allowed_types = allowed_types
        self._max_size_mb = max_size_mb

    async def execute(
        self,
        cotista: CotistaRecord,
        reservation_id: int,
        file_bytes: bytes,
        file_name: str,
        content_type: str,
        notes: str | None = None,
    ) -> VoucherRecord:
        reservation = await self._reservation_repo.get(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation", reservation_id)
        if reservation.cotista_id != cotista.id:
            raise ForbiddenError()
        voucher = await self._voucher_repo.get_by_reservation(reservation.id)
        if voucher is None:
            raise NotFoundError("Voucher for reservation", reservation.id)

        validation = validate_file(content_type, len(file_bytes), self._allowed_types, self._max_size_mb)
        if not validation.valid:
            raise BadRequestError(validation.error or "Invalid file")
        if not can_apply(reservation.status, LifecycleEvent.VOUCHER_UPLOADED):
            raise InvalidTransitionError(reservation.id, reservation.status, LifecycleEvent.VOUCHER_UPLOADED.value)

        uploaded = await upload_file(
            self._storage, file_bytes, cotista.user_id, VOUCHERS, file_name, content_type, self._clock
        )
        async with compensate_on_error(self._storage, uploaded.file_key):
            async with self._transaction_manager.start():
                await self._move(
                    voucher,
                    (VoucherStatus.PENDING, VoucherStatus.REJECTED),
                    VoucherStatus.SENT,
                    LifecycleEvent.VOUCHER_UPLOADED,
                    actor_id=cotista.user_id,
                    reason=notes,
                    file_url=uploaded.file_url,
                    file_key=uploaded.file_key,
                    notes=notes,
                    rejection_reason=None,
                )
        return await self._voucher_repo.get(voucher.id)


class StartVoucherReviewUseCase(_VoucherStep):
    async def execute(self, voucher_id: int, admin_id: int) -> VoucherRecord:
        async with self._transaction_manager.start():
            voucher = await self._get_voucher(voucher_id)
            await self._move(
                voucher,
                (VoucherStatus.SENT,),
                VoucherStatus.UNDER_REVIEW,
                LifecycleEvent.VOUCHER_REVIEW_STARTED,
                actor_id=admin_id,
            )
        return await self._voucher_repo.get(voucher_id)


class ReviewVoucherUseCase(_VoucherStep):
    async def execute(
        self,
        voucher_id: int,
        decision: ReviewDecision,
        admin_id: int,
        rejection_reason: str | None = None,
    ) -> VoucherRecord:
        decision = ReviewDecision(decision)
        if decision == ReviewDecision.REJECT and not rejection_reason:
            raise BadRequestError("rejection_reason is required to reject a voucher")

        async with self._transaction_manager.start():
            voucher = await self._get_voucher(voucher_id)
            if decision == ReviewDecision.APPROVE:
                new_status, event = VoucherStatus.APPROVED, LifecycleEvent.VOUCHER_APPROVED
            else:
                new_status, event = VoucherStatus.REJECTED, LifecycleEvent.VOUCHER_REJECTED
            await self._move(
                voucher,
                (VoucherStatus.UNDER_REVIEW,),
                new_status,
                event,
                actor_id=admin_id,
                reason=rejection_reason,
                reviewed_by=admin_id,
                reviewed_at=self._clock.now(),
                rejection_reason=rejection_reason if decision == ReviewDecision.REJECT else None,
            )
        return await self._voucher_repo.get(voucher_id)


class DeliverVoucherUseCase(_VoucherStep):
    async def execute(self, voucher_id: int, admin_id: int) -> VoucherRecord:
        async with self._transaction_manager.start():
            voucher = await self._get_voucher(voucher_id)
            await self._move(
                voucher,
                (VoucherStatus.APPROVED,),
                VoucherStatus.DELIVERED,
                LifecycleEvent.VOUCHER_DELIVERED,
                actor_id=admin_id,
                delivered_at=self._clock.now(),
            )
        return await self._voucher_repo.get(voucher_id)
