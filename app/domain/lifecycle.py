"""
Tabla de transiciones del ciclo de vida de una reservación.

Cada par (estado, evento) válido aparece exactamente una vez en
``TRANSITIONS``. Cualquier par ausente es una transición inválida. El
módulo es puro: no conoce repositorios ni sesiones; la persistencia y los
guards que dependen de otras filas (pagos, documentos, voucher) viven en
``app.application.lifecycle_manager``.
"""

from app.domain.enums import LifecycleEvent as E
from app.domain.enums import ReservationStatus as S
from app.domain.errors import InvalidTransitionError

TERMINAL_STATES: frozenset[S] = frozenset({S.COMPLETED, S.REFUNDED, S.CANCELLED})

PRE_PAYMENT_STATES: frozenset[S] = frozenset({S.CREATED, S.AWAITING_PAYMENT, S.PAYMENT_PENDING})

# Estados alcanzados después de un pago completado, antes de la estadía.
POST_PAYMENT_STATES: frozenset[S] = frozenset(
    {
        S.PAID,
        S.DOCUMENTS_PENDING,
        S.DOCUMENTS_UNDER_REVIEW,
        S.DOCUMENTS_REJECTED,
        S.APPROVED,
        S.VOUCHER_PENDING,
        S.VOUCHER_SENT,
        S.VOUCHER_UNDER_REVIEW,
        S.VOUCHER_REJECTED,
        S.VOUCHER_DELIVERED,
    }
)

# Destino especial: vuelve al estado guardado al abrir la disputa.
RESUME_PREVIOUS = "resume_previous"


def _build_table() -> dict[tuple[S, E], S | str]:
    table: dict[tuple[S, E], S | str] = {}

    def add(event: E, sources, target) -> None:
        for source in sources:
            table[(source, event)] = target

    add(E.CHECKOUT_STARTED, PRE_PAYMENT_STATES, S.PAYMENT_PENDING)
    add(E.PAYMENT_SUCCEEDED, PRE_PAYMENT_STATES, S.PAID)
    add(E.PAYMENT_FAILED, PRE_PAYMENT_STATES, S.AWAITING_PAYMENT)

    add(E.DOCUMENT_UPLOADED, (S.PAID, S.DOCUMENTS_PENDING, S.DOCUMENTS_REJECTED), S.DOCUMENTS_PENDING)
    add(E.DOCUMENT_UPLOADED, (S.DOCUMENTS_UNDER_REVIEW,), S.DOCUMENTS_UNDER_REVIEW)
    add(
        E.DOCUMENTS_SUBMITTED,
        (S.PAID, S.DOCUMENTS_PENDING, S.DOCUMENTS_REJECTED, S.DOCUMENTS_UNDER_REVIEW),
        S.DOCUMENTS_UNDER_REVIEW,
    )
    add(E.DOCUMENT_APPROVED, (S.DOCUMENTS_UNDER_REVIEW,), S.APPROVED)
    add(E.DOCUMENT_REJECTED, (S.DOCUMENTS_UNDER_REVIEW,), S.DOCUMENTS_REJECTED)

    add(E.VOUCHER_REQUESTED, (S.APPROVED,), S.VOUCHER_PENDING)
    add(E.VOUCHER_UPLOADED, (S.VOUCHER_PENDING, S.VOUCHER_REJECTED), S.VOUCHER_SENT)
    add(E.VOUCHER_REVIEW_STARTED, (S.VOUCHER_SENT,), S.VOUCHER_UNDER_REVIEW)
    add(E.VOUCHER_APPROVED, (S.VOUCHER_UNDER_REVIEW,), S.VOUCHER_UNDER_REVIEW)
    add(E.VOUCHER_REJECTED, (S.VOUCHER_UNDER_REVIEW,), S.VOUCHER_REJECTED)
    add(E.VOUCHER_DELIVERED, (S.VOUCHER_UNDER_REVIEW,), S.VOUCHER_DELIVERED)
    add(E.STAY_COMPLETED, (S.VOUCHER_DELIVERED,), S.COMPLETED)

    non_terminal = [status for status in S if status not in TERMINAL_STATES]
    add(E.DISPUTE_OPENED, [s for s in non_terminal if s != S.IN_DISPUTE], S.IN_DISPUTE)
    add(E.DISPUTE_RESOLVED, (S.IN_DISPUTE,), RESUME_PREVIOUS)
    add(E.ADMIN_CANCEL, non_terminal, S.CANCELLED)
    add(E.REFUND_ISSUED, [*POST_PAYMENT_STATES, S.IN_DISPUTE], S.REFUNDED)
    return table


TRANSITIONS: dict[tuple[S, E], S | str] = _build_table()


def can_apply(status: S | str, event: E | str) -> bool:
    """Indica si el evento está definido para el estado, sin lanzar."""
    return (S(status), E(event)) in TRANSITIONS


def next_status(
    reservation_id: int,
    status: S | str,
    event: E | str,
    resume_status: S | str | None = None,
) -> S:
    """
    Calcula el estado destino de aplicar ``event`` sobre ``status``.

    Args:
        reservation_id: Solo para el mensaje de error.
        status: Estado actual.
        event: Evento a aplicar.
        resume_status: Estado previo a la disputa (para ``dispute_resolved``).

    Raises:
        InvalidTransitionError: Si el par no existe en la tabla.
    """
    current = S(status)
    evt = E(event)
    target = TRANSITIONS.get((current, evt))
    if target is None:
        raise InvalidTransitionError(reservation_id, current.value, evt.value)
    if target == RESUME_PREVIOUS:
        if resume_status is None or S(resume_status) in TERMINAL_STATES or S(resume_status) == S.IN_DISPUTE:
            raise InvalidTransitionError(
                reservation_id, current.value, evt.value, "no status to resume"
            )
        return S(resume_status)
    return target


def allowed_events(status: S | str) -> list[E]:
    current = S(status)
    return [event for (source, event) in TRANSITIONS if source == current]
