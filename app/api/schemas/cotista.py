from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import CotistaDocumentType


class RegisterCotistaRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    development_id: int
    terms_accepted: bool
    personal_data: dict[str, Any] | None = None
    bank_details: dict[str, Any] | None = None
    # Llaves devueltas por POST /documents/cotista
    document_keys: dict[CotistaDocumentType, str] | None = None


class AddAvailabilityRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start_date: date
    end_date: date
    price_per_night: int = Field(gt=0, description="Precio por noche en centavos")


class PublishAvailabilityRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    published: bool = True


class CotistaDashboardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_reservations: int
    pending_vouchers: int
    active_reservations: int
