from dataclasses import dataclass
from datetime import datetime
from typing import Sequence


@dataclass
class DocumentRecord:
    id: int
    reservation_id: int
    customer_id: int
    document_type: str
    file_url: str
    file_key: str
    status: str
    rejection_reason: str | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None


class DocumentRepo:
    async def create(
        self,
        reservation_id: int,
        customer_id: int,
        document_type: str,
        file_url: str,
        file_key: str,
        status: str,
    ) -> DocumentRecord:
        raise NotImplementedError

    async def get(self, document_id: int) -> DocumentRecord | None:
        raise NotImplementedError

    async def list_by_reservation(self, reservation_id: int, for_update: bool = False) -> Sequence[DocumentRecord]:
        raise NotImplementedError

    async def list_by_status(self, status: str) -> Sequence[DocumentRecord]:
        raise NotImplementedError

    async def count_by_status(self, status: str) -> int:
        raise NotImplementedError

    async def review(
        self,
        document_id: int,
        expected_status: str,
        new_status: str,
        reviewed_by: int,
        reviewed_at: datetime,
        rejection_reason: str | None = None,
    ) -> bool:
        raise NotImplementedError
