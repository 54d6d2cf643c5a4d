from typing import Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.payment_repo import PaymentRecord, PaymentRepo
from app.domain.enums import PaymentStatus
from app.infrastructure.db.rows import to_record
from app.infrastructure.db.tables import payments


class PaymentRepoSQL(PaymentRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

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
        stmt = insert(payments).values(
            reservation_id=reservation_id,
            customer_id=customer_id,
            amount=amount,
            currency=currency,
            status=status,
            external_payment_id=external_payment_id,
            payment_method=payment_method,
        )
        result = await self._session.execute(stmt)
        return await self._fetch_payment(result.inserted_primary_key[0])

    async def find_by_external_id(self, external_payment_id: str) -> PaymentRecord | None:
        stmt = (
            select(payments)
            .where(payments.c.external_payment_id == external_payment_id)
            .order_by(payments.c.id)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return to_record(PaymentRecord, row) if row else None

    async def list_by_reservation(self, reservation_id: int) -> Sequence[PaymentRecord]:
        stmt = (
            select(payments)
            .where(payments.c.reservation_id == reservation_id)
            .order_by(payments.c.created_at.desc(), payments.c.id.desc())
        )
        result = await self._session.execute(stmt)
        return [to_record(PaymentRecord, row) for row in result.mappings().all()]

    async def has_completed(self, reservation_id: int) -> bool:
        return await self.find_completed(reservation_id) is not None

    async def find_completed(self, reservation_id: int) -> PaymentRecord | None:
        stmt = (
            select(payments)
            .where(
                payments.c.reservation_id == reservation_id,
                payments.c.status == PaymentStatus.COMPLETED.value,
            )
            .order_by(payments.c.id.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return to_record(PaymentRecord, row) if row else None

    async def mark_completed(self, payment_id: int) -> bool:
        return await self._set_status(
            payment_id,
            PaymentStatus.COMPLETED.value,
            allowed_from=(PaymentStatus.PENDING.value, PaymentStatus.PROCESSING.value, PaymentStatus.FAILED.value),
        )

    async def mark_failed(self, payment_id: int, failure_reason: str | None) -> bool:
        return await self._set_status(
            payment_id,
            PaymentStatus.FAILED.value,
            allowed_from=(PaymentStatus.PENDING.value, PaymentStatus.PROCESSING.value),
            failure_reason=failure_reason,
        )

    async def claim_refund(self, payment_id: int) -> bool:
        return await self._set_status(
            payment_id,
            PaymentStatus.REFUND_PENDING.value,
            allowed_from=(PaymentStatus.COMPLETED.value,),
        )

    async def release_refund_claim(self, payment_id: int) -> bool:
        return await self._set_status(
            payment_id,
            PaymentStatus.COMPLETED.value,
            allowed_from=(PaymentStatus.REFUND_PENDING.value,),
        )

    async def has_refund_pending(self, reservation_id: int) -> bool:
        stmt = (
            select(payments.c.id)
            .where(
                payments.c.reservation_id == reservation_id,
                payments.c.status == PaymentStatus.REFUND_PENDING.value,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar() is not None

    async def mark_refunded(self, payment_id: int) -> bool:
        return await self._set_status(
            payment_id,
            PaymentStatus.REFUNDED.value,
            allowed_from=(PaymentStatus.COMPLETED.value, PaymentStatus.REFUND_PENDING.value),
        )

    async def _set_status(self, payment_id: int, status: str, allowed_from: tuple[str, ...], **values) -> bool:
        stmt = (
            update(payments)
            .where(payments.c.id == payment_id, payments.c.status.in_(allowed_from))
            .values(status=status, **values)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def _fetch_payment(self, payment_id: int) -> PaymentRecord:
        stmt = select(payments).where(payments.c.id == payment_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise ValueError("Payment not found")
        return to_record(PaymentRecord, row)
