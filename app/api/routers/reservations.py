from fastapi import APIRouter, Depends, status

from app.api.auth import get_current_user
from app.api.dependencies import get_reservation_repo, get_use_cases
from app.api.schemas.common import DisputeOut
from app.api.schemas.reservations import (
    CreateReservationRequest,
    OpenDisputeRequest,
    ReservationDetailOut,
    ReservationOut,
)
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.user_repo import UserRecord
from app.infrastructure.db.retry import retry_on_deadlock

router = APIRouter(prefix="/reservations")


@router.post("", response_model=ReservationOut, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: CreateReservationRequest,
    user: UserRecord = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> ReservationOut:
    reservation = await retry_on_deadlock(
        lambda: use_cases["create_reservation"].execute(
            customer_id=user.id,
            availability_id=payload.availability_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
        )
    )
    return ReservationOut.model_validate(reservation)


@router.get("/mine", response_model=list[ReservationOut])
async def my_reservations(
    user: UserRecord = Depends(get_current_user),
    reservation_repo: ReservationRepo = Depends(get_reservation_repo),
) -> list[ReservationOut]:
    reservations = await reservation_repo.list_by_customer(user.id)
    return [ReservationOut.model_validate(r) for r in reservations]


@router.get("/{reservation_id}", response_model=ReservationDetailOut)
async def get_reservation(
    reservation_id: int,
    user: UserRecord = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> ReservationDetailOut:
    detail = await use_cases["reservation_detail"].execute(reservation_id, user)
    return ReservationDetailOut.model_validate(detail)


@router.post("/{reservation_id}/disputes", response_model=DisputeOut, status_code=status.HTTP_201_CREATED)
async def open_dispute(
    reservation_id: int,
    payload: OpenDisputeRequest,
    user: UserRecord = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> DisputeOut:
    dispute = await retry_on_deadlock(
        lambda: use_cases["open_dispute"].execute(
            reservation_id=reservation_id,
            user=user,
            reason=payload.reason,
            description=payload.description,
        )
    )
    return DisputeOut.model_validate(dispute)
