from datetime import datetime
from typing import Sequence

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.document_repo import DocumentRecord, DocumentRepo
from app.infrastructure.db.rows import to_record
from app.infrastructure.db.tables import documents


class DocumentRepoSQL(DocumentRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        reservation_id: int,
        customer_id: int,
        document_type: str,
        file_url: str,
        file_key: str,
        status: str,
    ) -> DocumentRecord:
        stmt = insert(documents).values(
            reservation_id=reservation_id,
            customer_id=customer_id,
            document_type=document_type,
            file_url=file_url,
            file_key=file_key,
            status=status,
        )
        result = await self._session.execute(stmt)
        return await self.get(result.inserted_primary_key[0])

    async def get(self, document_id: int) -> DocumentRecord | None:
        result = await self._session.execute(select(documents).where(documents.c.id == document_id).limit(1))
        row = result.mappings().first()
        return to_record(DocumentRecord, row) if row else None

    async def list_by_reservation(self, reservation_id: int, for_update: bool = False) -> Sequence[DocumentRecord]:
        stmt = select(documents).where(documents.c.reservation_id == reservation_id).order_by(documents.c.id)
        if for_update:
            # Locking reads return the latest committed rows, not the transaction snapshot.
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return [to_record(DocumentRecord, row) for row in result.mappings().all()]

    async def list_by_status(self, status: str) -> Sequence[DocumentRecord]:
        stmt = (
            select(documents)
            .where(documents.c.status == status)
            .order_by(documents.c.created_at.desc(), documents.c.id.desc())
        )
        result = await self._session.execute(stmt)
        return [to_record(DocumentRecord, row) for row in result.mappings().all()]

    async def count_by_status(self, status: str) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(documents).where(documents.c.status == status)
        )
        return result.scalar_one()

    async def review(
        self,
        document_id: int,
        expected_status: str,
        new_status: str,
        reviewed_by: int,
        reviewed_at: datetime,
        rejection_reason: str | None = None,
    ) -> bool:
        stmt = (
            update(documents)
            .where(documents.c.id == document_id, documents.c.status == expected_status)
            .values(
                status=new_status,
                reviewed_by=reviewed_by,
                reviewed_at=reviewed_at,
                rejection_reason=rejection_reason,
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1
