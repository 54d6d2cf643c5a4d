from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence


@dataclass
class VoucherRecord:
    id: int
    reservation_id: int
    cotista_id: int
    status: str
    file_url: str | None = None
    file_key: str | None = None
    notes: str | None = None
    rejection_reason: str | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    delivered_at: datetime | None = None
    deadline: datetime | None = None
    created_at: datetime | None = None


class VoucherRepo:
    async def create(
        self,
        reservation_id: int,
        cotista_id: int,
        deadline: datetime,
        status: str,
    ) -> VoucherRecord:
        raise NotImplementedError

    async def get(self, voucher_id: int) -> VoucherRecord | None:
        raise NotImplementedError

    async def get_by_reservation(self, reservation_id: int) -> VoucherRecord | None:
        raise NotImplementedError

    async def list_by_statuses(self, statuses: Sequence[str]) -> Sequence[VoucherRecord]:
        raise NotImplementedError

    async def count_by_statuses(self, statuses: Sequence[str]) -> int:
        raise NotImplementedError

    async def update_status(
        self,
        voucher_id: int,
        expected_statuses: Sequence[str],
        new_status: str,
        **fields: Any,
    ) -> bool:
        """Actualiza solo si el estado actual está en ``expected_statuses``."""
        raise NotImplementedError
