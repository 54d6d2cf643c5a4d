from datetime import datetime

from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.webhook_event_repo import WebhookEventRepo
from app.domain.errors import DuplicateWebhookEventError
from app.infrastructure.db.tables import processed_webhook_events


class WebhookEventRepoSQL(WebhookEventRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def record(self, event_id: str, event_type: str, received_at: datetime) -> None:
        # La restricción única resuelve también la entrega concurrente.
        stmt = insert(processed_webhook_events).values(
            event_id=event_id, event_type=event_type, received_at=received_at
        )
        try:
            await self._session.execute(stmt)
        except IntegrityError as exc:
            raise DuplicateWebhookEventError(event_id) from exc
