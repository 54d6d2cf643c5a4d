from dataclasses import dataclass
from typing import Sequence

from app.application.interfaces.cotista_repo import CotistaRecord
from app.application.interfaces.document_repo import DocumentRecord, DocumentRepo
from app.application.interfaces.payment_repo import PaymentRecord, PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRecord, ReservationRepo
from app.application.interfaces.user_repo import UserRecord
from app.application.interfaces.voucher_repo import VoucherRecord, VoucherRepo
from app.domain.enums import ReservationStatus, UserRole
from app.domain.errors import ForbiddenError, NotFoundError
from app.domain.lifecycle import TERMINAL_STATES


@dataclass
class ReservationDetail:
    reservation: ReservationRecord
    documents: Sequence[DocumentRecord]
    voucher: VoucherRecord | None
    payments: Sequence[PaymentRecord]


@dataclass
class CotistaDashboard:
    total_reservations: int
    pending_vouchers: int
    active_reservations: int


async def _load_visible(reservation_repo: ReservationRepo, reservation_id: int, user: UserRecord) -> ReservationRecord:
    reservation = await reservation_repo.get(reservation_id)
    if reservation is None:
        raise NotFoundError("Reservation", reservation_id)
    if reservation.customer_id != user.id and user.role != UserRole.ADMIN.value:
        raise ForbiddenError()
    return reservation


class GetReservationDetailUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        document_repo: DocumentRepo,
        voucher_repo: VoucherRepo,
        payment_repo: PaymentRepo,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._document_repo = document_repo
        self._voucher_repo = voucher_repo
        self._payment_repo = payment_repo

    async def execute(self, reservation_id: int, user: UserRecord) -> ReservationDetail:
        reservation = await _load_visible(self._reservation_repo, reservation_id, user)
        return ReservationDetail(
            reservation=reservation,
            documents=await self._document_repo.list_by_reservation(reservation.id),
            voucher=await self._voucher_repo.get_by_reservation(reservation.id),
            payments=await self._payment_repo.list_by_reservation(reservation.id),
        )


class ListReservationDocumentsUseCase:
    def __init__(self, reservation_repo: ReservationRepo, document_repo: DocumentRepo) -> None:
        self._reservation_repo = reservation_repo
        self._document_repo = document_repo

    async def execute(self, reservation_id: int, user: UserRecord) -> Sequence[DocumentRecord]:
        reservation = await _load_visible(self._reservation_repo, reservation_id, user)
        return await self._document_repo.list_by_reservation(reservation.id)


class GetCotistaDashboardUseCase:
    """Totales del panel del cotista."""

    # Reservaciones esperando que el cotista entregue el voucher.
    AWAITING_VOUCHER = frozenset({ReservationStatus.APPROVED.value, ReservationStatus.VOUCHER_PENDING.value})

    def __init__(self, reservation_repo: ReservationRepo) -> None:
        self._reservation_repo = reservation_repo

    async def execute(self, cotista: CotistaRecord) -> CotistaDashboard:
        reservations = await self._reservation_repo.list_by_cotista(cotista.id)
        terminal = {status.value for status in TERMINAL_STATES}
        return CotistaDashboard(
            total_reservations=len(reservations),
            pending_vouchers=sum(1 for r in reservations if r.status in self.AWAITING_VOUCHER),
            active_reservations=sum(1 for r in reservations if r.status not in terminal),
        )
