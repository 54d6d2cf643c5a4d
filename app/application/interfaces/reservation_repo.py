from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Sequence


@dataclass
class ReservationRecord:
    id: int
    customer_id: int
    development_id: int
    cotista_id: int
    availability_id: int
    start_date: date
    end_date: date
    total_price: int
    currency: str
    status: str
    lock_version: int = 0
    pre_dispute_status: str | None = None
    payment_intent_id: str | None = None
    cancellation_reason: str | None = None
    refund_amount: int | None = None
    refunded_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReservationRepo:
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
        raise NotImplementedError

    async def get(self, reservation_id: int, for_update: bool = False) -> ReservationRecord | None:
        """``for_update`` bloquea la fila hasta el fin de la transacción."""
        raise NotImplementedError

    async def list_by_customer(self, customer_id: int) -> Sequence[ReservationRecord]:
        raise NotImplementedError

    async def list_by_cotista(self, cotista_id: int) -> Sequence[ReservationRecord]:
        raise NotImplementedError

    async def compare_and_set_status(
        self,
        reservation_id: int,
        expected_status: str,
        expected_lock_version: int,
        new_status: str,
        **fields: Any,
    ) -> bool:
        """
        Cambia el estado si nadie más lo cambió desde la lectura.

        Devuelve False cuando la fila ya no coincide con
        (``expected_status``, ``expected_lock_version``).
        """
        raise NotImplementedError

    async def update_fields(self, reservation_id: int, **fields: Any) -> None:
        """Columnas que no participan del ciclo de vida (ej: ``payment_intent_id``)."""
        raise NotImplementedError
