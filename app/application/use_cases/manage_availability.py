import logging
from datetime import date

from app.application.interfaces.cotista_repo import AvailabilityRecord, AvailabilityRepo, CotistaRecord
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.domain.value_objects import StayRange


class AddAvailabilitySlotUseCase:
    def __init__(self, availability_repo: AvailabilityRepo, transaction_manager: TransactionManager) -> None:
        self._availability_repo = availability_repo
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        cotista: CotistaRecord,
        start_date: date,
        end_date: date,
        price_per_night: int,
    ) -> AvailabilityRecord:
        new_range = StayRange(start_date, end_date)
        if price_per_night <= 0:
            raise BadRequestError("price_per_night must be positive")

        async with self._transaction_manager.start():
            for slot in await self._availability_repo.list_by_cotista(cotista.id):
                if new_range.overlaps_with(StayRange(slot.start_date, slot.end_date)):
                    raise ConflictError(f"Slot overlaps existing availability {slot.id}")
            slot = await self._availability_repo.create(
                cotista_id=cotista.id,
                start_date=new_range.start,
                end_date=new_range.end,
                price_per_night=price_per_night,
            )

        self._logger.info("Availability slot added", extra={"cotista_id": cotista.id, "availability_id": slot.id})
        return slot


class PublishAvailabilitySlotUseCase:
    """Publica o retira un slot; un slot reservado no puede retirarse."""

    def __init__(self, availability_repo: AvailabilityRepo, transaction_manager: TransactionManager) -> None:
        self._availability_repo = availability_repo
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(self, cotista: CotistaRecord, availability_id: int, published: bool) -> AvailabilityRecord:
        async with self._transaction_manager.start():
            slot = await self._availability_repo.get(availability_id)
            if slot is None:
                raise NotFoundError("Availability slot", availability_id)
            if slot.cotista_id != cotista.id:
                raise ForbiddenError()
            if slot.is_booked and not published:
                raise ConflictError(f"Availability slot {slot.id} is already booked")
            await self._availability_repo.set_published(slot.id, published)

        self._logger.info(
            "Availability slot publish flag changed",
            extra={"availability_id": availability_id, "published": published},
        )
        return await self._availability_repo.get(availability_id)
