from datetime import datetime


class WebhookEventRepo:
    async def record(self, event_id: str, event_type: str, received_at: datetime) -> None:
        """
        Registra el id del evento antes de procesarlo.

        Raises:
            DuplicateWebhookEventError: si el id ya fue registrado.
        """
        raise NotImplementedError
