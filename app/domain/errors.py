"""Excepciones de dominio para el marketplace de cotistas."""


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    status_code = 400

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Acceso ===


class UnauthenticatedError(DomainError):
    """No hay sesión válida."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message, code="UNAUTHENTICATED")


class ForbiddenError(DomainError):
    """Usuario autenticado sin permiso (dueño o rol incorrecto)."""

    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message=message, code="FORBIDDEN")


# === Entidades ===


class NotFoundError(DomainError):
    """La entidad referenciada no existe."""

    status_code = 404

    def __init__(self, entity: str, entity_id: int | str | None = None):
        suffix = f": {entity_id}" if entity_id is not None else ""
        super().__init__(message=f"{entity} not found{suffix}", code="NOT_FOUND")
        self.entity = entity
        self.entity_id = entity_id


class BadRequestError(DomainError):
    """Entrada mal formada o archivo rechazado por el validador."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message=message, code="BAD_REQUEST")


# === Ciclo de vida ===


class InvalidTransitionError(DomainError):
    """El evento no es válido desde el estado actual de la reservación."""

    status_code = 409

    def __init__(self, reservation_id: int, current_status: str, event: str, reason: str | None = None):
        message = f"Event '{event}' not allowed for reservation {reservation_id} in status '{current_status}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message=message, code="INVALID_TRANSITION")
        self.reservation_id = reservation_id
        self.current_status = current_status
        self.event = event


class ConflictError(DomainError):
    """Conflicto de concurrencia o recurso ya tomado (ej: slot reservado)."""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message=message, code="CONFLICT")


class OptimisticLockError(ConflictError):
    """Otra escritura cambió la fila entre la lectura y la actualización."""

    def __init__(self, entity: str, entity_id: int, expected_status: str):
        super().__init__(
            message=f"{entity} {entity_id} changed concurrently (expected status '{expected_status}')"
        )
        self.code = "OPTIMISTIC_LOCK_ERROR"
        self.entity = entity
        self.entity_id = entity_id
        self.expected_status = expected_status


# === Servicios externos ===


class GatewayError(DomainError):
    """Falló una llamada al procesador de pagos o al almacenamiento."""

    status_code = 502

    def __init__(self, service: str, message: str):
        super().__init__(message=f"{service} error: {message}", code="GATEWAY_ERROR")
        self.service = service


# === Webhooks ===


class DuplicateWebhookEventError(DomainError):
    """Evento de Stripe ya procesado (idempotencia)."""

    status_code = 200

    def __init__(self, event_id: str):
        super().__init__(message=f"Stripe event already processed: {event_id}", code="DUPLICATE_EVENT")
        self.event_id = event_id
