from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence


@dataclass
class AuditNoteRecord:
    id: int
    entity_type: str
    entity_id: int
    action: str
    actor_id: int | None = None
    notes: str | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None


class AuditRepo:
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
        raise NotImplementedError

    async def list_for(self, entity_type: str, entity_id: int) -> Sequence[AuditNoteRecord]:
        raise NotImplementedError
