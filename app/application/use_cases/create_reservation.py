import logging
from datetime import date

from app.application.interfaces.audit_repo import AuditRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.cotista_repo import AvailabilityRepo, CotistaRepo
from app.application.interfaces.reservation_repo import ReservationRecord, ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.enums import AuditEntityType, CotistaStatus, ReservationStatus
from app.domain.errors import BadRequestError, ConflictError, NotFoundError
from app.domain.value_objects import StayRange


class CreateReservationUseCase:
    """
    Crea una reservación sobre un slot de disponibilidad.

    El slot se marca reservado con un UPDATE condicional
    (``is_booked = false AND is_published = true``) dentro de la misma
    transacción que inserta la reservación: dos clientes nunca obtienen el
    mismo slot.
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        availability_repo: AvailabilityRepo,
        cotista_repo: CotistaRepo,
        audit_repo: AuditRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
        currency: str = "usd",
    ) -> None:
        self._reservation_repo = reservation_repo
        self._availability_repo = availability_repo
        self._cotista_repo = cotista_repo
        self._audit_repo = audit_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._currency = currency
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        customer_id: int,
        availability_id: int,
        start_date: date,
        end_date: date,
    ) -> ReservationRecord:
        stay = StayRange(start_date, end_date)
        if stay.start < self._clock.today():
            raise BadRequestError("start_date is in the past")

        async with self._transaction_manager.start():
            slot = await self._availability_repo.get(availability_id)
            if slot is None:
                raise NotFoundError("Availability slot", availability_id)
            cotista = await self._cotista_repo.get(slot.cotista_id)
            if cotista is None or cotista.status != CotistaStatus.APPROVED.value:
                raise NotFoundError("Availability slot", availability_id)
            if cotista.user_id == customer_id:
                raise BadRequestError("Cotistas cannot book their own availability")
            if not StayRange(slot.start_date, slot.end_date).contains(stay):
                raise BadRequestError("Requested dates are outside the availability slot")

            if not await self._availability_repo.book(slot.id):
                raise ConflictError(f"Availability slot {slot.id} is not available")

            reservation = await self._reservation_repo.create(
                customer_id=customer_id,
                development_id=cotista.development_id,
                cotista_id=cotista.id,
                availability_id=slot.id,
                start_date=stay.start,
                end_date=stay.end,
                total_price=stay.total_price(slot.price_per_night),
                currency=self._currency,
                status=ReservationStatus.CREATED.value,
            )
            await self._audit_repo.add(
                entity_type=AuditEntityType.RESERVATION.value,
                entity_id=reservation.id,
                actor_id=customer_id,
                action="created",
                metadata={"availability_id": slot.id, "nights": stay.nights, "total_price": reservation.total_price},
                created_at=self._clock.now(),
            )

        self._logger.info(
            "Reservation created",
            extra={
                "reservation_id": reservation.id,
                "availability_id": slot.id,
                "total_price": reservation.total_price,
            },
        )
        return reservation
