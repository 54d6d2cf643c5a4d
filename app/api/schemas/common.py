from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    open_id: str
    name: str | None = None
    email: str | None = None
    role: str
    status: str


class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reservation_id: int
    amount: int
    currency: str
    status: str
    payment_method: str | None = None
    external_payment_id: str | None = None
    failure_reason: str | None = None
    created_at: datetime | None = None


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reservation_id: int
    customer_id: int
    document_type: str
    file_url: str
    file_key: str
    status: str
    rejection_reason: str | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None


class VoucherOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reservation_id: int
    cotista_id: int
    status: str
    file_url: str | None = None
    notes: str | None = None
    rejection_reason: str | None = None
    reviewed_at: datetime | None = None
    delivered_at: datetime | None = None
    deadline: datetime | None = None


class CotistaOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    development_id: int
    status: str
    personal_data: dict[str, Any] | None = None
    identity_document_key: str | None = None
    address_proof_key: str | None = None
    ownership_proof_key: str | None = None
    terms_accepted: bool = False
    terms_accepted_at: datetime | None = None
    rejection_reason: str | None = None
    created_at: datetime | None = None


class AvailabilityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cotista_id: int
    start_date: date
    end_date: date
    price_per_night: int
    is_published: bool
    is_booked: bool


class DisputeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reservation_id: int
    reported_by: int
    reported_against: int | None = None
    reason: str
    description: str
    status: str
    resolution: str | None = None
    resolved_by: int | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None


class FraudFlagOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    reservation_id: int | None = None
    flag_type: str
    severity: str
    description: str | None = None
    status: str
    resolved_by: int | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None


class UploadedFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    file_key: str
    file_url: str
    file_name: str
    content_type: str
    size: int
