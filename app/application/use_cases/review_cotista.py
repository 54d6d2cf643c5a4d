import logging

from app.application.interfaces.audit_repo import AuditRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.cotista_repo import CotistaRecord, CotistaRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.enums import AuditEntityType, CotistaStatus, ReviewDecision
from app.domain.errors import BadRequestError, ConflictError, NotFoundError


class ReviewCotistaUseCase:
    """Aprobación o rechazo de un perfil de cotista en revisión."""

    def __init__(
        self,
        cotista_repo: CotistaRepo,
        audit_repo: AuditRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._cotista_repo = cotista_repo
        self._audit_repo = audit_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        cotista_id: int,
        decision: ReviewDecision,
        admin_id: int,
        rejection_reason: str | None = None,
    ) -> CotistaRecord:
        decision = ReviewDecision(decision)
        if decision == ReviewDecision.REJECT and not rejection_reason:
            raise BadRequestError("rejection_reason is required to reject a cotista")
        new_status = CotistaStatus.APPROVED if decision == ReviewDecision.APPROVE else CotistaStatus.REJECTED

        async with self._transaction_manager.start():
            cotista = await self._cotista_repo.get(cotista_id)
            if cotista is None:
                raise NotFoundError("Cotista", cotista_id)
            updated = await self._cotista_repo.update_status(
                cotista.id,
                expected_status=CotistaStatus.UNDER_REVIEW.value,
                new_status=new_status.value,
                rejection_reason=rejection_reason if decision == ReviewDecision.REJECT else None,
            )
            if not updated:
                raise ConflictError(f"Cotista {cotista.id} is not under review")
            await self._audit_repo.add(
                entity_type=AuditEntityType.COTISTA.value,
                entity_id=cotista.id,
                actor_id=admin_id,
                action=f"cotista_{new_status.value}",
                notes=rejection_reason,
                created_at=self._clock.now(),
            )

        self._logger.info("Cotista reviewed", extra={"cotista_id": cotista.id, "decision": decision.value})
        return await self._cotista_repo.get(cotista.id)
