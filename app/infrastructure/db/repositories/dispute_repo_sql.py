from datetime import datetime
from typing import Sequence

from sqlalchemy import case, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.dispute_repo import (
    DisputeRecord,
    DisputeRepo,
    FraudFlagRecord,
    FraudFlagRepo,
)
from app.domain.enums import ACTIVE_FRAUD_STATUSES, FraudSeverity
from app.infrastructure.db.rows import to_record
from app.infrastructure.db.tables import disputes, fraud_flags

_ACTIVE_FLAGS = [status.value for status in ACTIVE_FRAUD_STATUSES]

# Orden de severidad: critical primero.
_SEVERITY_RANK = case(
    {
        FraudSeverity.CRITICAL.value: 4,
        FraudSeverity.HIGH.value: 3,
        FraudSeverity.MEDIUM.value: 2,
        FraudSeverity.LOW.value: 1,
    },
    value=fraud_flags.c.severity,
    else_=0,
)


class DisputeRepoSQL(DisputeRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        reservation_id: int,
        reported_by: int,
        reported_against: int | None,
        reason: str,
        description: str,
    ) -> DisputeRecord:
        stmt = insert(disputes).values(
            reservation_id=reservation_id,
            reported_by=reported_by,
            reported_against=reported_against,
            reason=reason,
            description=description,
            status="open",
        )
        result = await self._session.execute(stmt)
        return await self.get(result.inserted_primary_key[0])

    async def get(self, dispute_id: int) -> DisputeRecord | None:
        result = await self._session.execute(select(disputes).where(disputes.c.id == dispute_id).limit(1))
        row = result.mappings().first()
        return to_record(DisputeRecord, row) if row else None

    async def list_by_statuses(self, statuses: Sequence[str]) -> Sequence[DisputeRecord]:
        stmt = (
            select(disputes)
            .where(disputes.c.status.in_(list(statuses)))
            .order_by(disputes.c.created_at.desc(), disputes.c.id.desc())
        )
        result = await self._session.execute(stmt)
        return [to_record(DisputeRecord, row) for row in result.mappings().all()]

    async def count_by_statuses(self, statuses: Sequence[str], reservation_id: int | None = None) -> int:
        stmt = select(func.count()).select_from(disputes).where(disputes.c.status.in_(list(statuses)))
        if reservation_id is not None:
            stmt = stmt.where(disputes.c.reservation_id == reservation_id)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def resolve(
        self,
        dispute_id: int,
        expected_statuses: Sequence[str],
        new_status: str,
        resolution: str,
        resolved_by: int,
        resolved_at: datetime,
    ) -> bool:
        stmt = (
            update(disputes)
            .where(disputes.c.id == dispute_id, disputes.c.status.in_(list(expected_statuses)))
            .values(status=new_status, resolution=resolution, resolved_by=resolved_by, resolved_at=resolved_at)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1


class FraudFlagRepoSQL(FraudFlagRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        user_id: int,
        reservation_id: int | None,
        flag_type: str,
        severity: str,
        description: str | None,
    ) -> FraudFlagRecord:
        stmt = insert(fraud_flags).values(
            user_id=user_id,
            reservation_id=reservation_id,
            flag_type=flag_type,
            severity=severity,
            description=description,
            status="open",
        )
        result = await self._session.execute(stmt)
        return await self.get(result.inserted_primary_key[0])

    async def get(self, flag_id: int) -> FraudFlagRecord | None:
        result = await self._session.execute(select(fraud_flags).where(fraud_flags.c.id == flag_id).limit(1))
        row = result.mappings().first()
        return to_record(FraudFlagRecord, row) if row else None

    async def list_active(self) -> Sequence[FraudFlagRecord]:
        stmt = (
            select(fraud_flags)
            .where(fraud_flags.c.status.in_(_ACTIVE_FLAGS))
            .order_by(_SEVERITY_RANK.desc(), fraud_flags.c.created_at.desc(), fraud_flags.c.id.desc())
        )
        result = await self._session.execute(stmt)
        return [to_record(FraudFlagRecord, row) for row in result.mappings().all()]

    async def count_active(self) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(fraud_flags).where(fraud_flags.c.status.in_(_ACTIVE_FLAGS))
        )
        return result.scalar_one()

    async def resolve(
        self,
        flag_id: int,
        expected_statuses: Sequence[str],
        new_status: str,
        resolved_by: int | None,
        resolved_at: datetime | None,
    ) -> bool:
        stmt = (
            update(fraud_flags)
            .where(fraud_flags.c.id == flag_id, fraud_flags.c.status.in_(list(expected_statuses)))
            .values(status=new_status, resolved_by=resolved_by, resolved_at=resolved_at)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1
