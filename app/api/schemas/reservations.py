from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.api.schemas.common import DocumentOut, PaymentOut, VoucherOut


class CreateReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    availability_id: int
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_range(self):
        if self.start_date >= self.end_date:
            raise ValueError("start_date must be before end_date")
        return self


class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    development_id: int
    cotista_id: int
    availability_id: int
    start_date: date
    end_date: date
    total_price: int
    currency: str
    status: str
    pre_dispute_status: str | None = None
    payment_intent_id: str | None = None
    cancellation_reason: str | None = None
    refund_amount: int | None = None
    refunded_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReservationDetailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reservation: ReservationOut
    documents: list[DocumentOut]
    voucher: VoucherOut | None = None
    payments: list[PaymentOut]


class OpenDisputeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: str = Field(min_length=1, max_length=500)
    description: str = Field(min_length=1)
