from pydantic import BaseModel, ConfigDict


class CreateCheckoutSessionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reservation_id: int
    development_id: int


class CheckoutSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    session_id: str
    url: str | None = None


class CreatePaymentIntentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reservation_id: int


class PaymentIntentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_intent_id: str
    client_secret: str | None = None
