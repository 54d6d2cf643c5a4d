import logging

from app.application.interfaces.audit_repo import AuditRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.cotista_repo import CotistaRepo
from app.application.interfaces.dispute_repo import DisputeRecord, DisputeRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.user_repo import UserRecord
from app.application.lifecycle_manager import ReservationLifecycleManager
from app.domain.enums import (
    OPEN_DISPUTE_STATUSES,
    AuditEntityType,
    DisputeStatus,
    LifecycleEvent,
    ReservationStatus,
)
from app.domain.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError

_OPEN = [status.value for status in OPEN_DISPUTE_STATUSES]


class OpenDisputeUseCase:
    """
    El cliente o el cotista de la reservación abre una disputa.

    La primera disputa abierta mueve la reservación a ``in_dispute`` y
    guarda su estado previo; disputas adicionales solo se registran.
    """

    def __init__(
        self,
        dispute_repo: DisputeRepo,
        reservation_repo: ReservationRepo,
        cotista_repo: CotistaRepo,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
    ) -> None:
        self._dispute_repo = dispute_repo
        self._reservation_repo = reservation_repo
        self._cotista_repo = cotista_repo
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(self, reservation_id: int, user: UserRecord, reason: str, description: str) -> DisputeRecord:
        async with self._transaction_manager.start():
            reservation = await self._reservation_repo.get(reservation_id)
            if reservation is None:
                raise NotFoundError("Reservation", reservation_id)
            cotista = await self._cotista_repo.get(reservation.cotista_id)
            cotista_user_id = cotista.user_id if cotista else None

            if user.id == reservation.customer_id:
                reported_against = cotista_user_id
            elif user.id == cotista_user_id:
                reported_against = reservation.customer_id
            else:
                raise ForbiddenError()

            dispute = await self._dispute_repo.create(
                reservation_id=reservation.id,
                reported_by=user.id,
                reported_against=reported_against,
                reason=reason,
                description=description,
            )
            if reservation.status != ReservationStatus.IN_DISPUTE.value:
                await self._lifecycle.transition(
                    reservation.id,
                    LifecycleEvent.DISPUTE_OPENED,
                    actor_id=user.id,
                    reason=f"dispute {dispute.id}: {reason}",
                )

        self._logger.info("Dispute opened", extra={"dispute_id": dispute.id, "reservation_id": reservation_id})
        return dispute


class ResolveDisputeUseCase:
    """Cierra una disputa; sin otras abiertas, la reservación vuelve a su estado previo."""

    def __init__(
        self,
        dispute_repo: DisputeRepo,
        reservation_repo: ReservationRepo,
        audit_repo: AuditRepo,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._dispute_repo = dispute_repo
        self._reservation_repo = reservation_repo
        self._audit_repo = audit_repo
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        dispute_id: int,
        admin_id: int,
        resolution: str,
        status: DisputeStatus = DisputeStatus.RESOLVED,
    ) -> DisputeRecord:
        status = DisputeStatus(status)
        if status not in (DisputeStatus.RESOLVED, DisputeStatus.CLOSED):
            raise BadRequestError("Disputes can only be resolved or closed")
        now = self._clock.now()

        async with self._transaction_manager.start():
            dispute = await self._dispute_repo.get(dispute_id)
            if dispute is None:
                raise NotFoundError("Dispute", dispute_id)
            resolved = await self._dispute_repo.resolve(
                dispute.id,
                expected_statuses=_OPEN,
                new_status=status.value,
                resolution=resolution,
                resolved_by=admin_id,
                resolved_at=now,
            )
            if not resolved:
                raise ConflictError(f"Dispute {dispute.id} is not open")
            await self._audit_repo.add(
                entity_type=AuditEntityType.DISPUTE.value,
                entity_id=dispute.id,
                actor_id=admin_id,
                action=f"dispute_{status.value}",
                notes=resolution,
                metadata={"reservation_id": dispute.reservation_id},
                created_at=now,
            )

            still_open = await self._dispute_repo.count_by_statuses(_OPEN, reservation_id=dispute.reservation_id)
            reservation = await self._reservation_repo.get(dispute.reservation_id)
            if not still_open and reservation and reservation.status == ReservationStatus.IN_DISPUTE.value:
                await self._lifecycle.transition(
                    reservation.id, LifecycleEvent.DISPUTE_RESOLVED, actor_id=admin_id, reason=resolution
                )

        self._logger.info("Dispute resolved", extra={"dispute_id": dispute_id, "status": status.value})
        return await self._dispute_repo.get(dispute_id)
