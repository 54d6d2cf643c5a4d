"""
Variantes tipadas de los eventos de webhook de Stripe.

El sobre ``{id, type, data.object}`` se convierte en una variante por tipo
conocido; cualquier otro tipo produce ``UnknownEvent``. Los campos que el
procesador necesita se extraen aquí, una sola vez, en lugar de acceder al
payload por nombre en cada handler.
"""

from dataclasses import dataclass, field
from typing import Any

from app.domain.errors import BadRequestError

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_INTENT_PAYMENT_FAILED = "payment_intent.payment_failed"


@dataclass(frozen=True)
class CheckoutSessionCompleted:
    event_id: str
    session_id: str
    reservation_id: int
    user_id: int | None
    amount_total: int
    currency: str
    payment_intent_id: str | None
    type: str = CHECKOUT_SESSION_COMPLETED


@dataclass(frozen=True)
class PaymentIntentSucceeded:
    event_id: str
    payment_intent_id: str
    reservation_id: int | None
    amount: int | None
    type: str = PAYMENT_INTENT_SUCCEEDED


@dataclass(frozen=True)
class PaymentIntentPaymentFailed:
    event_id: str
    payment_intent_id: str
    reservation_id: int | None
    failure_message: str | None
    type: str = PAYMENT_INTENT_PAYMENT_FAILED


@dataclass(frozen=True)
class UnknownEvent:
    event_id: str
    type: str
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


WebhookEvent = CheckoutSessionCompleted | PaymentIntentSucceeded | PaymentIntentPaymentFailed | UnknownEvent


def _as_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _metadata(obj: dict[str, Any]) -> dict[str, Any]:
    metadata = obj.get("metadata") or {}
    return metadata if isinstance(metadata, dict) else {}


def parse_webhook_event(envelope: dict[str, Any]) -> WebhookEvent:
    """
    Convierte el sobre JSON de Stripe en una variante tipada.

    Raises:
        BadRequestError: Si el sobre no tiene ``id``/``type`` o si un tipo
            conocido no trae los campos obligatorios.
    """
    if not isinstance(envelope, dict):
        raise BadRequestError("Invalid event payload")
    event_id = envelope.get("id")
    event_type = envelope.get("type")
    if not event_id or not event_type:
        raise BadRequestError("Invalid event payload: missing id or type")

    data = envelope.get("data") or {}
    obj = data.get("object") if isinstance(data, dict) else None
    if not isinstance(obj, dict):
        obj = {}
    metadata = _metadata(obj)

    if event_type == CHECKOUT_SESSION_COMPLETED:
        reservation_id = _as_int(metadata.get("reservation_id"))
        if reservation_id is None:
            raise BadRequestError("checkout.session.completed without metadata.reservation_id")
        return CheckoutSessionCompleted(
            event_id=event_id,
            session_id=obj.get("id") or "",
            reservation_id=reservation_id,
            user_id=_as_int(metadata.get("user_id")),
            amount_total=_as_int(obj.get("amount_total")) or 0,
            currency=(obj.get("currency") or "usd").lower(),
            payment_intent_id=obj.get("payment_intent"),
        )

    if event_type in (PAYMENT_INTENT_SUCCEEDED, PAYMENT_INTENT_PAYMENT_FAILED):
        intent_id = obj.get("id")
        if not intent_id:
            raise BadRequestError(f"{event_type} without payment intent id")
        reservation_id = _as_int(metadata.get("reservation_id"))
        if event_type == PAYMENT_INTENT_SUCCEEDED:
            return PaymentIntentSucceeded(
                event_id=event_id,
                payment_intent_id=intent_id,
                reservation_id=reservation_id,
                amount=_as_int(obj.get("amount_received") or obj.get("amount")),
            )
        last_error = obj.get("last_payment_error") or {}
        return PaymentIntentPaymentFailed(
            event_id=event_id,
            payment_intent_id=intent_id,
            reservation_id=reservation_id,
            failure_message=last_error.get("message") if isinstance(last_error, dict) else None,
        )

    return UnknownEvent(event_id=event_id, type=event_type, raw=envelope)
