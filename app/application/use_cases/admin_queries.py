from dataclasses import dataclass
from typing import Sequence

from app.application.interfaces.cotista_repo import CotistaRecord, CotistaRepo
from app.application.interfaces.dispute_repo import DisputeRecord, DisputeRepo, FraudFlagRecord, FraudFlagRepo
from app.application.interfaces.document_repo import DocumentRecord, DocumentRepo
from app.application.interfaces.voucher_repo import VoucherRecord, VoucherRepo
from app.domain.enums import OPEN_DISPUTE_STATUSES, CotistaStatus, DocumentStatus, VoucherStatus

PENDING_VOUCHER_STATUSES = (VoucherStatus.SENT.value, VoucherStatus.UNDER_REVIEW.value)


@dataclass
class AdminDashboard:
    pending_documents: int
    pending_cotistas: int
    pending_vouchers: int
    open_disputes: int
    fraud_flags: int


class AdminBacklogQuery:
    """Colas de trabajo del back-office."""

    def __init__(
        self,
        document_repo: DocumentRepo,
        cotista_repo: CotistaRepo,
        voucher_repo: VoucherRepo,
        dispute_repo: DisputeRepo,
        fraud_flag_repo: FraudFlagRepo,
    ) -> None:
        self._document_repo = document_repo
        self._cotista_repo = cotista_repo
        self._voucher_repo = voucher_repo
        self._dispute_repo = dispute_repo
        self._fraud_flag_repo = fraud_flag_repo

    async def dashboard(self) -> AdminDashboard:
        return AdminDashboard(
            pending_documents=await self._document_repo.count_by_status(DocumentStatus.UNDER_REVIEW.value),
            pending_cotistas=await self._cotista_repo.count_by_status(CotistaStatus.UNDER_REVIEW.value),
            pending_vouchers=await self._voucher_repo.count_by_statuses(PENDING_VOUCHER_STATUSES),
            open_disputes=await self._dispute_repo.count_by_statuses([s.value for s in OPEN_DISPUTE_STATUSES]),
            fraud_flags=await self._fraud_flag_repo.count_active(),
        )

    async def pending_documents(self) -> Sequence[DocumentRecord]:
        return await self._document_repo.list_by_status(DocumentStatus.UNDER_REVIEW.value)

    async def pending_cotistas(self) -> Sequence[CotistaRecord]:
        return await self._cotista_repo.list_by_status(CotistaStatus.UNDER_REVIEW.value)

    async def pending_vouchers(self) -> Sequence[VoucherRecord]:
        return await self._voucher_repo.list_by_statuses(PENDING_VOUCHER_STATUSES)

    async def open_disputes(self) -> Sequence[DisputeRecord]:
        return await self._dispute_repo.list_by_statuses([s.value for s in OPEN_DISPUTE_STATUSES])

    async def active_fraud_flags(self) -> Sequence[FraudFlagRecord]:
        return await self._fraud_flag_repo.list_active()
