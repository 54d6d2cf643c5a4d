from fastapi import APIRouter, Depends, status

from app.api.auth import require_admin
from app.api.dependencies import get_use_cases
from app.api.schemas.admin import (
    AdminDashboardOut,
    CancelReservationRequest,
    CompleteReservationRequest,
    CreateFraudFlagRequest,
    RefundReservationRequest,
    ResolveDisputeRequest,
    ResolveFraudFlagRequest,
    ReviewRequest,
)
from app.api.schemas.common import CotistaOut, DisputeOut, DocumentOut, FraudFlagOut, VoucherOut
from app.api.schemas.reservations import ReservationOut
from app.application.interfaces.user_repo import UserRecord
from app.infrastructure.db.retry import retry_on_deadlock

# Todas las rutas exigen rol admin.
router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


# === Backlog ===


@router.get("/dashboard", response_model=AdminDashboardOut)
async def dashboard(use_cases=Depends(get_use_cases)) -> AdminDashboardOut:
    return AdminDashboardOut.model_validate(await use_cases["admin_backlog"].dashboard())


@router.get("/documents/pending", response_model=list[DocumentOut])
async def pending_documents(use_cases=Depends(get_use_cases)) -> list[DocumentOut]:
    return [DocumentOut.model_validate(d) for d in await use_cases["admin_backlog"].pending_documents()]


@router.get("/cotistas/pending", response_model=list[CotistaOut])
async def pending_cotistas(use_cases=Depends(get_use_cases)) -> list[CotistaOut]:
    return [CotistaOut.model_validate(c) for c in await use_cases["admin_backlog"].pending_cotistas()]


@router.get("/vouchers/pending", response_model=list[VoucherOut])
async def pending_vouchers(use_cases=Depends(get_use_cases)) -> list[VoucherOut]:
    return [VoucherOut.model_validate(v) for v in await use_cases["admin_backlog"].pending_vouchers()]


@router.get("/disputes/open", response_model=list[DisputeOut])
async def open_disputes(use_cases=Depends(get_use_cases)) -> list[DisputeOut]:
    return [DisputeOut.model_validate(d) for d in await use_cases["admin_backlog"].open_disputes()]


@router.get("/fraud-flags", response_model=list[FraudFlagOut])
async def active_fraud_flags(use_cases=Depends(get_use_cases)) -> list[FraudFlagOut]:
    return [FraudFlagOut.model_validate(f) for f in await use_cases["admin_backlog"].active_fraud_flags()]


# === Reviews ===


@router.post("/documents/{document_id}/review", response_model=DocumentOut)
async def review_document(
    document_id: int,
    payload: ReviewRequest,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> DocumentOut:
    document = await retry_on_deadlock(
        lambda: use_cases["review_document"].execute(
            document_id=document_id,
            decision=payload.decision,
            admin_id=admin.id,
            rejection_reason=payload.rejection_reason,
        )
    )
    return DocumentOut.model_validate(document)


@router.post("/cotistas/{cotista_id}/review", response_model=CotistaOut)
async def review_cotista(
    cotista_id: int,
    payload: ReviewRequest,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> CotistaOut:
    cotista = await retry_on_deadlock(
        lambda: use_cases["review_cotista"].execute(
            cotista_id=cotista_id,
            decision=payload.decision,
            admin_id=admin.id,
            rejection_reason=payload.rejection_reason,
        )
    )
    return CotistaOut.model_validate(cotista)


@router.post("/vouchers/{voucher_id}/start-review", response_model=VoucherOut)
async def start_voucher_review(
    voucher_id: int,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> VoucherOut:
    voucher = await retry_on_deadlock(
        lambda: use_cases["start_voucher_review"].execute(voucher_id=voucher_id, admin_id=admin.id)
    )
    return VoucherOut.model_validate(voucher)


@router.post("/vouchers/{voucher_id}/review", response_model=VoucherOut)
async def review_voucher(
    voucher_id: int,
    payload: ReviewRequest,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> VoucherOut:
    voucher = await retry_on_deadlock(
        lambda: use_cases["review_voucher"].execute(
            voucher_id=voucher_id,
            decision=payload.decision,
            admin_id=admin.id,
            rejection_reason=payload.rejection_reason,
        )
    )
    return VoucherOut.model_validate(voucher)


@router.post("/vouchers/{voucher_id}/deliver", response_model=VoucherOut)
async def deliver_voucher(
    voucher_id: int,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> VoucherOut:
    voucher = await retry_on_deadlock(
        lambda: use_cases["deliver_voucher"].execute(voucher_id=voucher_id, admin_id=admin.id)
    )
    return VoucherOut.model_validate(voucher)


# === Reservations ===


@router.post("/reservations/{reservation_id}/complete", response_model=ReservationOut)
async def complete_reservation(
    reservation_id: int,
    payload: CompleteReservationRequest,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> ReservationOut:
    reservation = await retry_on_deadlock(
        lambda: use_cases["complete_reservation"].execute(
            reservation_id=reservation_id, admin_id=admin.id, notes=payload.notes
        )
    )
    return ReservationOut.model_validate(reservation)


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationOut)
async def cancel_reservation(
    reservation_id: int,
    payload: CancelReservationRequest,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> ReservationOut:
    reservation = await retry_on_deadlock(
        lambda: use_cases["cancel_reservation"].execute(
            reservation_id=reservation_id, admin_id=admin.id, reason=payload.reason
        )
    )
    return ReservationOut.model_validate(reservation)


@router.post("/reservations/{reservation_id}/refund", response_model=ReservationOut)
async def refund_reservation(
    reservation_id: int,
    payload: RefundReservationRequest,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> ReservationOut:
    # Sin retry: el reembolso en Stripe no debe repetirse.
    reservation = await use_cases["refund_reservation"].execute(
        reservation_id=reservation_id, admin_id=admin.id, reason=payload.reason, amount=payload.amount
    )
    return ReservationOut.model_validate(reservation)


# === Disputes and fraud ===


@router.post("/disputes/{dispute_id}/resolve", response_model=DisputeOut)
async def resolve_dispute(
    dispute_id: int,
    payload: ResolveDisputeRequest,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> DisputeOut:
    dispute = await retry_on_deadlock(
        lambda: use_cases["resolve_dispute"].execute(
            dispute_id=dispute_id, admin_id=admin.id, resolution=payload.resolution, status=payload.status
        )
    )
    return DisputeOut.model_validate(dispute)


@router.post("/fraud-flags", response_model=FraudFlagOut, status_code=status.HTTP_201_CREATED)
async def create_fraud_flag(
    payload: CreateFraudFlagRequest,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> FraudFlagOut:
    flag = await retry_on_deadlock(
        lambda: use_cases["create_fraud_flag"].execute(
            admin_id=admin.id,
            user_id=payload.user_id,
            flag_type=payload.flag_type,
            severity=payload.severity,
            reservation_id=payload.reservation_id,
            description=payload.description,
        )
    )
    return FraudFlagOut.model_validate(flag)


@router.post("/fraud-flags/{flag_id}/resolve", response_model=FraudFlagOut)
async def resolve_fraud_flag(
    flag_id: int,
    payload: ResolveFraudFlagRequest,
    admin: UserRecord = Depends(require_admin),
    use_cases=Depends(get_use_cases),
) -> FraudFlagOut:
    flag = await retry_on_deadlock(
        lambda: use_cases["resolve_fraud_flag"].execute(
            flag_id=flag_id, admin_id=admin.id, status=payload.status, notes=payload.notes
        )
    )
    return FraudFlagOut.model_validate(flag)
