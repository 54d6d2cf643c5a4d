from dataclasses import dataclass
from datetime import datetime
from typing import Sequence


@dataclass
class DisputeRecord:
    id: int
    reservation_id: int
    reported_by: int
    reason: str
    description: str
    status: str
    reported_against: int | None = None
    resolution: str | None = None
    resolved_by: int | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None


@dataclass
class FraudFlagRecord:
    id: int
    user_id: int
    flag_type: str
    severity: str
    status: str
    reservation_id: int | None = None
    description: str | None = None
    resolved_by: int | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None


class DisputeRepo:
    async def create(
        self,
        reservation_id: int,
        reported_by: int,
        reported_against: int | None,
        reason: str,
        description: str,
    ) -> DisputeRecord:
        raise NotImplementedError

    async def get(self, dispute_id: int) -> DisputeRecord | None:
        raise NotImplementedError

    async def list_by_statuses(self, statuses: Sequence[str]) -> Sequence[DisputeRecord]:
        raise NotImplementedError

    async def count_by_statuses(self, statuses: Sequence[str], reservation_id: int | None = None) -> int:
        raise NotImplementedError

    async def resolve(
        self,
        dispute_id: int,
        expected_statuses: Sequence[str],
        new_status: str,
        resolution: str,
        resolved_by: int,
        resolved_at: datetime,
    ) -> bool:
        raise NotImplementedError


class FraudFlagRepo:
    async def create(
        self,
        user_id: int,
        reservation_id: int | None,
        flag_type: str,
        severity: str,
        description: str | None,
    ) -> FraudFlagRecord:
        raise NotImplementedError

    async def get(self, flag_id: int) -> FraudFlagRecord | None:
        raise NotImplementedError

    async def list_active(self) -> Sequence[FraudFlagRecord]:
        """Banderas abiertas o en investigación, de mayor a menor severidad."""
        raise NotImplementedError

    async def count_active(self) -> int:
        raise NotImplementedError

    async def resolve(
        self,
        flag_id: int,
        expected_statuses: Sequence[str],
        new_status: str,
        resolved_by: int | None,
        resolved_at: datetime | None,
    ) -> bool:
        raise NotImplementedError
