from datetime import datetime
from typing import Any, Sequence

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.voucher_repo import VoucherRecord, VoucherRepo
from app.infrastructure.db.rows import to_record
from app.infrastructure.db.tables import vouchers


class VoucherRepoSQL(VoucherRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        reservation_id: int,
        cotista_id: int,
        deadline: datetime,
        status: str,
    ) -> VoucherRecord:
        stmt = insert(vouchers).values(
            reservation_id=reservation_id,
            cotista_id=cotista_id,
            deadline=deadline,
            status=status,
        )
        result = await self._session.execute(stmt)
        return await self.get(result.inserted_primary_key[0])

    async def get(self, voucher_id: int) -> VoucherRecord | None:
        result = await self._session.execute(select(vouchers).where(vouchers.c.id == voucher_id).limit(1))
        row = result.mappings().first()
        return to_record(VoucherRecord, row) if row else None

    async def get_by_reservation(self, reservation_id: int) -> VoucherRecord | None:
        result = await self._session.execute(
            select(vouchers).where(vouchers.c.reservation_id == reservation_id).limit(1)
        )
        row = result.mappings().first()
        return to_record(VoucherRecord, row) if row else None

    async def list_by_statuses(self, statuses: Sequence[str]) -> Sequence[VoucherRecord]:
        stmt = (
            select(vouchers)
            .where(vouchers.c.status.in_(list(statuses)))
            .order_by(vouchers.c.created_at.desc(), vouchers.c.id.desc())
        )
        result = await self._session.execute(stmt)
        return [to_record(VoucherRecord, row) for row in result.mappings().all()]

    async def count_by_statuses(self, statuses: Sequence[str]) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(vouchers).where(vouchers.c.status.in_(list(statuses)))
        )
        return result.scalar_one()

    async def update_status(
        self,
        voucher_id: int,
        expected_statuses: Sequence[str],
        new_status: str,
        **fields: Any,
    ) -> bool:
        stmt = (
            update(vouchers)
            .where(vouchers.c.id == voucher_id, vouchers.c.status.in_(list(expected_statuses)))
            .values(status=new_status, **fields)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1
