from datetime import date, datetime
from typing import Any, Sequence

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.cotista_repo import (
    AvailabilityRecord,
    AvailabilityRepo,
    CotistaRecord,
    CotistaRepo,
)
from app.infrastructure.db.rows import to_record
from app.infrastructure.db.tables import cotista_availability, cotistas

_DOCUMENT_COLUMNS = ("identity_document_key", "address_proof_key", "ownership_proof_key")


class CotistaRepoSQL(CotistaRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        user_id: int,
        development_id: int,
        personal_data: dict[str, Any] | None,
        bank_details: dict[str, Any] | None,
        document_keys: dict[str, str],
        terms_accepted_at: datetime,
        status: str,
    ) -> CotistaRecord:
        unknown = set(document_keys) - set(_DOCUMENT_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown document columns: {sorted(unknown)}")
        stmt = insert(cotistas).values(
            user_id=user_id,
            development_id=development_id,
            personal_data=personal_data,
            bank_details=bank_details,
            terms_accepted=True,
            terms_accepted_at=terms_accepted_at,
            status=status,
            **document_keys,
        )
        result = await self._session.execute(stmt)
        return await self.get(result.inserted_primary_key[0])

    async def get(self, cotista_id: int) -> CotistaRecord | None:
        result = await self._session.execute(select(cotistas).where(cotistas.c.id == cotista_id).limit(1))
        row = result.mappings().first()
        return to_record(CotistaRecord, row) if row else None

    async def get_by_user(self, user_id: int) -> CotistaRecord | None:
        result = await self._session.execute(select(cotistas).where(cotistas.c.user_id == user_id).limit(1))
        row = result.mappings().first()
        return to_record(CotistaRecord, row) if row else None

    async def set_document_key(self, cotista_id: int, column: str, file_key: str) -> None:
        if column not in _DOCUMENT_COLUMNS:
            raise ValueError(f"Unknown document column: {column}")
        await self._session.execute(update(cotistas).where(cotistas.c.id == cotista_id).values({column: file_key}))

    async def list_by_status(self, status: str) -> Sequence[CotistaRecord]:
        stmt = select(cotistas).where(cotistas.c.status == status).order_by(cotistas.c.created_at.desc())
        result = await self._session.execute(stmt)
        return [to_record(CotistaRecord, row) for row in result.mappings().all()]

    async def count_by_status(self, status: str) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(cotistas).where(cotistas.c.status == status)
        )
        return result.scalar_one()

    async def update_status(
        self,
        cotista_id: int,
        expected_status: str,
        new_status: str,
        rejection_reason: str | None = None,
    ) -> bool:
        stmt = (
            update(cotistas)
            .where(cotistas.c.id == cotista_id, cotistas.c.status == expected_status)
            .values(status=new_status, rejection_reason=rejection_reason)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1


class AvailabilityRepoSQL(AvailabilityRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        cotista_id: int,
        start_date: date,
        end_date: date,
        price_per_night: int,
    ) -> AvailabilityRecord:
        stmt = insert(cotista_availability).values(
            cotista_id=cotista_id,
            start_date=start_date,
            end_date=end_date,
            price_per_night=price_per_night,
            is_published=False,
            is_booked=False,
        )
        result = await self._session.execute(stmt)
        return await self.get(result.inserted_primary_key[0])

    async def get(self, availability_id: int) -> AvailabilityRecord | None:
        stmt = select(cotista_availability).where(cotista_availability.c.id == availability_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return to_record(AvailabilityRecord, row) if row else None

    async def list_by_cotista(self, cotista_id: int) -> Sequence[AvailabilityRecord]:
        stmt = (
            select(cotista_availability)
            .where(cotista_availability.c.cotista_id == cotista_id)
            .order_by(cotista_availability.c.start_date)
        )
        result = await self._session.execute(stmt)
        return [to_record(AvailabilityRecord, row) for row in result.mappings().all()]

    async def set_published(self, availability_id: int, published: bool) -> None:
        await self._session.execute(
            update(cotista_availability)
            .where(cotista_availability.c.id == availability_id)
            .values(is_published=published)
        )

    async def book(self, availability_id: int) -> bool:
        stmt = (
            update(cotista_availability)
            .where(
                cotista_availability.c.id == availability_id,
                cotista_availability.c.is_booked.is_(False),
                cotista_availability.c.is_published.is_(True),
            )
            .values(is_booked=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def release(self, availability_id: int) -> None:
        await self._session.execute(
            update(cotista_availability)
            .where(cotista_availability.c.id == availability_id)
            .values(is_booked=False)
        )
