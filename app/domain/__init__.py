"""
Capa de Dominio - Marketplace de cotistas.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.

Estructura:
- enums.py: Estados de reservaciones, pagos, documentos, vouchers, etc.
- lifecycle.py: Tabla de transiciones (estado, evento) -> estado
- webhook_events.py: Variantes tipadas de los eventos de Stripe
- value_objects/: Objetos de valor inmutables (StayRange)
- errors.py: Excepciones específicas del dominio
"""

from app.domain.enums import LifecycleEvent, ReservationStatus
from app.domain.errors import (
    BadRequestError,
    ConflictError,
    DomainError,
    DuplicateWebhookEventError,
    ForbiddenError,
    GatewayError,
    InvalidTransitionError,
    NotFoundError,
    OptimisticLockError,
    UnauthenticatedError,
)
from app.domain.value_objects import StayRange

__all__ = [
    "LifecycleEvent",
    "ReservationStatus",
    "StayRange",
    "DomainError",
    "NotFoundError",
    "ForbiddenError",
    "UnauthenticatedError",
    "BadRequestError",
    "InvalidTransitionError",
    "ConflictError",
    "OptimisticLockError",
    "GatewayError",
    "DuplicateWebhookEventError",
]
