from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.domain.enums import DisputeStatus, FraudFlagStatus, FraudSeverity, ReviewDecision


class ReviewRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    decision: ReviewDecision
    rejection_reason: str | None = None

    @model_validator(mode="after")
    def _reason_on_reject(self):
        if self.decision == ReviewDecision.REJECT and not (self.rejection_reason or "").strip():
            raise ValueError("rejection_reason is required when rejecting")
        return self


class CompleteReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    notes: str | None = None


class CancelReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: str = Field(min_length=1)


class RefundReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: str = Field(min_length=1)
    amount: int | None = Field(default=None, gt=0, description="Centavos; vacío = reembolso total")


class ResolveDisputeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    resolution: str = Field(min_length=1)
    status: DisputeStatus = DisputeStatus.RESOLVED


class CreateFraudFlagRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: int
    flag_type: str = Field(min_length=1, max_length=100)
    severity: FraudSeverity = FraudSeverity.MEDIUM
    reservation_id: int | None = None
    description: str | None = None


class ResolveFraudFlagRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: FraudFlagStatus = FraudFlagStatus.RESOLVED
    notes: str | None = None


class AdminDashboardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pending_documents: int
    pending_cotistas: int
    pending_vouchers: int
    open_disputes: int
    fraud_flags: int
