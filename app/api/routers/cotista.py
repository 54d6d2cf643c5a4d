from fastapi import APIRouter, Depends, status

from app.api.auth import get_current_user, require_cotista
from app.api.dependencies import get_availability_repo, get_reservation_repo, get_use_cases
from app.api.schemas.common import AvailabilityOut, CotistaOut, VoucherOut
from app.api.schemas.cotista import (
    AddAvailabilityRequest,
    CotistaDashboardOut,
    PublishAvailabilityRequest,
    RegisterCotistaRequest,
)
from app.api.schemas.documents import UploadVoucherRequest
from app.api.schemas.reservations import ReservationOut
from app.application.interfaces.cotista_repo import AvailabilityRepo, CotistaRecord
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.user_repo import UserRecord
from app.infrastructure.db.retry import retry_on_deadlock

router = APIRouter(prefix="/cotista")


@router.post("/register", response_model=CotistaOut, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterCotistaRequest,
    user: UserRecord = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> CotistaOut:
    cotista = await retry_on_deadlock(
        lambda: use_cases["register_cotista"].execute(
            user=user,
            development_id=payload.development_id,
            terms_accepted=payload.terms_accepted,
            personal_data=payload.personal_data,
            bank_details=payload.bank_details,
            document_keys=payload.document_keys,
        )
    )
    return CotistaOut.model_validate(cotista)


@router.get("/profile", response_model=CotistaOut)
async def profile(cotista: CotistaRecord = Depends(require_cotista)) -> CotistaOut:
    return CotistaOut.model_validate(cotista)


@router.get("/reservations", response_model=list[ReservationOut])
async def my_reservations(
    cotista: CotistaRecord = Depends(require_cotista),
    reservation_repo: ReservationRepo = Depends(get_reservation_repo),
) -> list[ReservationOut]:
    reservations = await reservation_repo.list_by_cotista(cotista.id)
    return [ReservationOut.model_validate(r) for r in reservations]


@router.get("/dashboard", response_model=CotistaDashboardOut)
async def dashboard(
    cotista: CotistaRecord = Depends(require_cotista),
    use_cases=Depends(get_use_cases),
) -> CotistaDashboardOut:
    return CotistaDashboardOut.model_validate(await use_cases["cotista_dashboard"].execute(cotista))


@router.get("/availability", response_model=list[AvailabilityOut])
async def my_availability(
    cotista: CotistaRecord = Depends(require_cotista),
    availability_repo: AvailabilityRepo = Depends(get_availability_repo),
) -> list[AvailabilityOut]:
    slots = await availability_repo.list_by_cotista(cotista.id)
    return [AvailabilityOut.model_validate(s) for s in slots]


@router.post("/availability", response_model=AvailabilityOut, status_code=status.HTTP_201_CREATED)
async def add_availability(
    payload: AddAvailabilityRequest,
    cotista: CotistaRecord = Depends(require_cotista),
    use_cases=Depends(get_use_cases),
) -> AvailabilityOut:
    slot = await retry_on_deadlock(
        lambda: use_cases["add_availability"].execute(
            cotista=cotista,
            start_date=payload.start_date,
            end_date=payload.end_date,
            price_per_night=payload.price_per_night,
        )
    )
    return AvailabilityOut.model_validate(slot)


@router.post("/availability/{availability_id}/publish", response_model=AvailabilityOut)
async def publish_availability(
    availability_id: int,
    payload: PublishAvailabilityRequest,
    cotista: CotistaRecord = Depends(require_cotista),
    use_cases=Depends(get_use_cases),
) -> AvailabilityOut:
    slot = await retry_on_deadlock(
        lambda: use_cases["publish_availability"].execute(
            cotista=cotista, availability_id=availability_id, published=payload.published
        )
    )
    return AvailabilityOut.model_validate(slot)


@router.post("/reservations/{reservation_id}/voucher", response_model=VoucherOut)
async def upload_voucher(
    reservation_id: int,
    payload: UploadVoucherRequest,
    cotista: CotistaRecord = Depends(require_cotista),
    use_cases=Depends(get_use_cases),
) -> VoucherOut:
    voucher = await retry_on_deadlock(
        lambda: use_cases["upload_voucher"].execute(
            cotista=cotista,
            reservation_id=reservation_id,
            file_bytes=payload.file_data,
            file_name=payload.file_name,
            content_type=payload.content_type,
            notes=payload.notes,
        )
    )
    return VoucherOut.model_validate(voucher)
