from datetime import date
from typing import Any, Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.reservation_repo import ReservationRecord, ReservationRepo
from app.infrastructure.db.rows import to_record
from app.infrastructure.db.tables import reservations


class ReservationRepoSQL(ReservationRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        customer_id: int,
        development_id: int,
        cotista_id: int,
        availability_id: int,
        start_date: date,
        end_date: date,
        total_price: int,
        currency: str,
        status: str,
    ) -> ReservationRecord:
        stmt = insert(reservations).values(
            customer_id=customer_id,
            development_id=development_id,
            cotista_id=cotista_id,
            availability_id=availability_id,
            start_date=start_date,
            end_date=end_date,
            total_price=total_price,
            currency=currency,
            status=status,
            lock_version=0,
        )
        result = await self._session.execute(stmt)
        return await self._fetch(result.inserted_primary_key[0])

    async def get(self, reservation_id: int, for_update: bool = False) -> ReservationRecord | None:
        stmt = select(reservations).where(reservations.c.id == reservation_id).limit(1)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return to_record(ReservationRecord, row) if row else None

    async def list_by_customer(self, customer_id: int) -> Sequence[ReservationRecord]:
        stmt = (
            select(reservations)
            .where(reservations.c.customer_id == customer_id)
            .order_by(reservations.c.created_at.desc(), reservations.c.id.desc())
        )
        result = await self._session.execute(stmt)
        return [to_record(ReservationRecord, row) for row in result.mappings().all()]

    async def list_by_cotista(self, cotista_id: int) -> Sequence[ReservationRecord]:
        stmt = (
            select(reservations)
            .where(reservations.c.cotista_id == cotista_id)
            .order_by(reservations.c.created_at.desc(), reservations.c.id.desc())
        )
        result = await self._session.execute(stmt)
        return [to_record(ReservationRecord, row) for row in result.mappings().all()]

    async def compare_and_set_status(
        self,
        reservation_id: int,
        expected_status: str,
        expected_lock_version: int,
        new_status: str,
        **fields: Any,
    ) -> bool:
        stmt = (
            update(reservations)
            .where(
                reservations.c.id == reservation_id,
                reservations.c.status == expected_status,
                reservations.c.lock_version == expected_lock_version,
            )
            .values(
                status=new_status,
                lock_version=reservations.c.lock_version + 1,
                **fields,
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def update_fields(self, reservation_id: int, **fields: Any) -> None:
        if "status" in fields:
            raise ValueError("status changes must go through compare_and_set_status")
        stmt = (
            update(reservations)
            .where(reservations.c.id == reservation_id)
            .values(lock_version=reservations.c.lock_version + 1, **fields)
        )
        await self._session.execute(stmt)

    async def _fetch(self, reservation_id: int) -> ReservationRecord:
        record = await self.get(reservation_id)
        if record is None:
            raise ValueError("Reservation not found")
        return record
