import logging

from app.application.interfaces.audit_repo import AuditRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.dispute_repo import FraudFlagRecord, FraudFlagRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.user_repo import UserRepo
from app.domain.enums import ACTIVE_FRAUD_STATUSES, AuditEntityType, FraudFlagStatus, FraudSeverity
from app.domain.errors import BadRequestError, ConflictError, NotFoundError


class CreateFraudFlagUseCase:
    def __init__(
        self,
        fraud_flag_repo: FraudFlagRepo,
        user_repo: UserRepo,
        audit_repo: AuditRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._fraud_flag_repo = fraud_flag_repo
        self._user_repo = user_repo
        self._audit_repo = audit_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        admin_id: int,
        user_id: int,
        flag_type: str,
        severity: FraudSeverity = FraudSeverity.MEDIUM,
        reservation_id: int | None = None,
        description: str | None = None,
    ) -> FraudFlagRecord:
        async with self._transaction_manager.start():
            if await self._user_repo.get_by_id(user_id) is None:
                raise NotFoundError("User", user_id)
            flag = await self._fraud_flag_repo.create(
                user_id=user_id,
                reservation_id=reservation_id,
                flag_type=flag_type,
                severity=FraudSeverity(severity).value,
                description=description,
            )
            await self._audit_repo.add(
                entity_type=AuditEntityType.FRAUD_FLAG.value,
                entity_id=flag.id,
                actor_id=admin_id,
                action="fraud_flag_created",
                notes=description,
                metadata={"user_id": user_id, "severity": flag.severity, "flag_type": flag_type},
                created_at=self._clock.now(),
            )

        self._logger.warning(
            "Fraud flag raised",
            extra={"fraud_flag_id": flag.id, "user_id": user_id, "severity": flag.severity},
        )
        return flag


class ResolveFraudFlagUseCase:
    def __init__(
        self,
        fraud_flag_repo: FraudFlagRepo,
        audit_repo: AuditRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._fraud_flag_repo = fraud_flag_repo
        self._audit_repo = audit_repo
        self._transaction_manager = transaction_manager
        self._clock = clock

    async def execute(
        self,
        flag_id: int,
        admin_id: int,
        status: FraudFlagStatus = FraudFlagStatus.RESOLVED,
        notes: str | None = None,
    ) -> FraudFlagRecord:
        status = FraudFlagStatus(status)
        if status in ACTIVE_FRAUD_STATUSES and status != FraudFlagStatus.INVESTIGATING:
            raise BadRequestError("A fraud flag cannot be reopened")
        now = self._clock.now()

        async with self._transaction_manager.start():
            flag = await self._fraud_flag_repo.get(flag_id)
            if flag is None:
                raise NotFoundError("Fraud flag", flag_id)
            expected = (
                [FraudFlagStatus.OPEN.value]
                if status == FraudFlagStatus.INVESTIGATING
                else [s.value for s in ACTIVE_FRAUD_STATUSES]
            )
            closing = status != FraudFlagStatus.INVESTIGATING
            changed = await self._fraud_flag_repo.resolve(
                flag.id,
                expected_statuses=expected,
                new_status=status.value,
                resolved_by=admin_id if closing else None,
                resolved_at=now if closing else None,
            )
            if not changed:
                raise ConflictError(f"Fraud flag {flag.id} is not active")
            await self._audit_repo.add(
                entity_type=AuditEntityType.FRAUD_FLAG.value,
                entity_id=flag.id,
                actor_id=admin_id,
                action=f"fraud_flag_{status.value}",
                notes=notes,
                created_at=now,
            )
        return await self._fraud_flag_repo.get(flag_id)
