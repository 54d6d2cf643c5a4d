from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Sequence


@dataclass
class CotistaRecord:
    id: int
    user_id: int
    development_id: int
    status: str
    personal_data: dict[str, Any] | None = None
    bank_details: dict[str, Any] | None = None
    identity_document_key: str | None = None
    address_proof_key: str | None = None
    ownership_proof_key: str | None = None
    terms_accepted: bool = False
    terms_accepted_at: datetime | None = None
    rejection_reason: str | None = None
    created_at: datetime | None = None


@dataclass
class AvailabilityRecord:
    id: int
    cotista_id: int
    start_date: date
    end_date: date
    price_per_night: int
    is_published: bool
    is_booked: bool


class CotistaRepo:
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
        raise NotImplementedError

    async def get(self, cotista_id: int) -> CotistaRecord | None:
        raise NotImplementedError

    async def get_by_user(self, user_id: int) -> CotistaRecord | None:
        raise NotImplementedError

    async def set_document_key(self, cotista_id: int, column: str, file_key: str) -> None:
        raise NotImplementedError

    async def list_by_status(self, status: str) -> Sequence[CotistaRecord]:
        raise NotImplementedError

    async def count_by_status(self, status: str) -> int:
        raise NotImplementedError

    async def update_status(
        self,
        cotista_id: int,
        expected_status: str,
        new_status: str,
        rejection_reason: str | None = None,
    ) -> bool:
        """Actualiza solo si el estado sigue siendo ``expected_status``."""
        raise NotImplementedError


class AvailabilityRepo:
    async def create(
        self,
        cotista_id: int,
        start_date: date,
        end_date: date,
        price_per_night: int,
    ) -> AvailabilityRecord:
        raise NotImplementedError

    async def get(self, availability_id: int) -> AvailabilityRecord | None:
        raise NotImplementedError

    async def list_by_cotista(self, cotista_id: int) -> Sequence[AvailabilityRecord]:
        raise NotImplementedError

    async def set_published(self, availability_id: int, published: bool) -> None:
        raise NotImplementedError

    async def book(self, availability_id: int) -> bool:
        """Marca el slot reservado solo si está publicado y libre."""
        raise NotImplementedError

    async def release(self, availability_id: int) -> None:
        raise NotImplementedError
