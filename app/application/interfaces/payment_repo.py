from dataclasses import dataclass
from datetime import datetime
from typing import Sequence


@dataclass
class PaymentRecord:
    id: int
    reservation_id: int
    customer_id: int
    amount: int
    currency: str
    status: str
    payment_method: str | None = None
    external_payment_id: str | None = None
    failure_reason: str | None = None
    created_at: datetime | None = None


class PaymentRepo:
    async def create(
        self,
        reservation_id: int,
        customer_id: int,
        amount: int,
        currency: str,
        status: str,
        external_payment_id: str | None,
        payment_method: str | None = None,
    ) -> PaymentRecord:
        raise NotImplementedError

    async def find_by_external_id(self, external_payment_id: str) -> PaymentRecord | None:
        raise NotImplementedError

    async def list_by_reservation(self, reservation_id: int) -> Sequence[PaymentRecord]:
        raise NotImplementedError

    async def has_completed(self, reservation_id: int) -> bool:
        raise NotImplementedError

    async def find_completed(self, reservation_id: int) -> PaymentRecord | None:
        raise NotImplementedError

    async def mark_completed(self, payment_id: int) -> bool:
        """Pasa a completed; False si ya lo estaba."""
        raise NotImplementedError

    async def mark_failed(self, payment_id: int, failure_reason: str | None) -> bool:
        raise NotImplementedError

    async def claim_refund(self, payment_id: int) -> bool:
        """Pasa de completed a refund_pending; False si otro reembolso ya lo reclamó."""
        raise NotImplementedError

    async def release_refund_claim(self, payment_id: int) -> bool:
        raise NotImplementedError

    async def has_refund_pending(self, reservation_id: int) -> bool:
        raise NotImplementedError

    async def mark_refunded(self, payment_id: int) -> bool:
        raise NotImplementedError
