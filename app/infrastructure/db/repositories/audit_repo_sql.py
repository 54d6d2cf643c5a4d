from datetime import datetime
from typing import Any, Sequence

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.audit_repo import AuditNoteRecord, AuditRepo
from app.infrastructure.db.rows import to_record
from app.infrastructure.db.tables import audit_notes


class AuditRepoSQL(AuditRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        entity_type: str,
        entity_id: int,
        actor_id: int | None,
        action: str,
        notes: str | None = None,
        metadata: dict[str, Any] | None = None,
        created_at: datetime | None = None,
    ) -> None:
        values: dict[str, Any] = {
            "entity_type": entity_type,
            "entity_id": entity_id,
            "actor_id": actor_id,
            "action": action,
            "notes": notes,
            "metadata": metadata,
        }
        if created_at is not None:
            values["created_at"] = created_at
        await self._session.execute(insert(audit_notes).values(values))

    async def list_for(self, entity_type: str, entity_id: int) -> Sequence[AuditNoteRecord]:
        stmt = (
            select(audit_notes)
            .where(audit_notes.c.entity_type == entity_type, audit_notes.c.entity_id == entity_id)
            .order_by(audit_notes.c.id)
        )
        result = await self._session.execute(stmt)
        return [to_record(AuditNoteRecord, row) for row in result.mappings().all()]
