"""
Unit tests de la tabla de transiciones de reservaciones.

Verifica:
- Cada par (estado, evento) aparece una sola vez
- Los estados terminales no tienen salida
- ``completed`` no es alcanzable sin pasar por ``paid``
- ``dispute_resolved`` vuelve al estado previo a la disputa
"""

from collections import deque

import pytest

from app.domain.enums import LifecycleEvent as E
from app.domain.enums import ReservationStatus as S
from app.domain.errors import InvalidTransitionError
from app.domain.lifecycle import (
    PRE_PAYMENT_STATES,
    RESUME_PREVIOUS,
    TERMINAL_STATES,
    TRANSITIONS,
    allowed_events,
    can_apply,
    next_status,
)


class TestTransitionTable:
    def test_terminal_states_have_no_outgoing_events(self):
        for status in TERMINAL_STATES:
            assert allowed_events(status) == [], f"{status} no debería tener eventos"

    def test_happy_path(self):
        path = [
            (S.CREATED, E.CHECKOUT_STARTED, S.PAYMENT_PENDING),
            (S.PAYMENT_PENDING, E.PAYMENT_SUCCEEDED, S.PAID),
            (S.PAID, E.DOCUMENT_UPLOADED, S.DOCUMENTS_PENDING),
            (S.DOCUMENTS_PENDING, E.DOCUMENTS_SUBMITTED, S.DOCUMENTS_UNDER_REVIEW),
            (S.DOCUMENTS_UNDER_REVIEW, E.DOCUMENT_APPROVED, S.APPROVED),
            (S.APPROVED, E.VOUCHER_REQUESTED, S.VOUCHER_PENDING),
            (S.VOUCHER_PENDING, E.VOUCHER_UPLOADED, S.VOUCHER_SENT),
            (S.VOUCHER_SENT, E.VOUCHER_REVIEW_STARTED, S.VOUCHER_UNDER_REVIEW),
            (S.VOUCHER_UNDER_REVIEW, E.VOUCHER_DELIVERED, S.VOUCHER_DELIVERED),
            (S.VOUCHER_DELIVERED, E.STAY_COMPLETED, S.COMPLETED),
        ]
        for source, event, target in path:
            assert next_status(1, source, event) == target

    def test_payment_failed_returns_to_awaiting_payment(self):
        for status in PRE_PAYMENT_STATES:
            assert next_status(1, status, E.PAYMENT_FAILED) == S.AWAITING_PAYMENT

    def test_rejected_documents_can_be_reuploaded(self):
        assert next_status(1, S.DOCUMENTS_REJECTED, E.DOCUMENT_UPLOADED) == S.DOCUMENTS_PENDING

    def test_rejected_voucher_can_be_resent(self):
        assert next_status(1, S.VOUCHER_REJECTED, E.VOUCHER_UPLOADED) == S.VOUCHER_SENT

    def test_undefined_pair_raises(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            next_status(7, S.CREATED, E.STAY_COMPLETED)
        assert exc_info.value.status_code == 409
        assert exc_info.value.reservation_id == 7
        assert not can_apply(S.CREATED, E.STAY_COMPLETED)

    def test_refund_requires_post_payment_state(self):
        for status in PRE_PAYMENT_STATES:
            assert not can_apply(status, E.REFUND_ISSUED)
        assert next_status(1, S.PAID, E.REFUND_ISSUED) == S.REFUNDED
        assert next_status(1, S.IN_DISPUTE, E.REFUND_ISSUED) == S.REFUNDED

    def test_admin_cancel_from_any_non_terminal_state(self):
        for status in S:
            if status in TERMINAL_STATES:
                assert not can_apply(status, E.ADMIN_CANCEL)
            else:
                assert next_status(1, status, E.ADMIN_CANCEL) == S.CANCELLED

    def test_completed_unreachable_without_paid(self):
        """Búsqueda en anchura desde ``created`` sin pasar por ``paid``."""
        seen = {S.CREATED}
        queue = deque([S.CREATED])
        while queue:
            status = queue.popleft()
            for (source, _event), target in TRANSITIONS.items():
                if source != status or target == RESUME_PREVIOUS:
                    continue
                if target == S.PAID or target in seen:
                    continue
                seen.add(target)
                queue.append(target)
        assert S.COMPLETED not in seen


class TestDisputeResume:
    def test_dispute_opens_from_non_terminal_states(self):
        assert next_status(1, S.VOUCHER_SENT, E.DISPUTE_OPENED) == S.IN_DISPUTE
        assert not can_apply(S.IN_DISPUTE, E.DISPUTE_OPENED)
        assert not can_apply(S.COMPLETED, E.DISPUTE_OPENED)

    def test_resolution_resumes_previous_status(self):
        resumed = next_status(1, S.IN_DISPUTE, E.DISPUTE_RESOLVED, resume_status=S.VOUCHER_SENT)
        assert resumed == S.VOUCHER_SENT

    def test_resolution_without_previous_status_raises(self):
        with pytest.raises(InvalidTransitionError):
            next_status(1, S.IN_DISPUTE, E.DISPUTE_RESOLVED)

    def test_resolution_never_resumes_into_terminal_state(self):
        with pytest.raises(InvalidTransitionError):
            next_status(1, S.IN_DISPUTE, E.DISPUTE_RESOLVED, resume_status=S.CANCELLED)
