"""
Circuit Breaker configuration for external service calls.

Pre-configured breakers for Stripe and the object store so that a failing
provider fails fast instead of piling up blocked requests.

Circuit Breaker Pattern:
- CLOSED: Normal operation, requests pass through
- OPEN: Too many failures, requests fail immediately
- HALF_OPEN: Testing if service recovered, limited requests allowed
"""

import logging

import pybreaker
from pybreaker import CircuitBreaker, CircuitBreakerError

logger = logging.getLogger(__name__)


class StateChangeLogger(pybreaker.CircuitBreakerListener):
    """Logs every state change of the breaker it is attached to."""

    def __init__(self, name: str) -> None:
        self.name = name

    def state_change(self, cb, old_state, new_state) -> None:
        old_name = old_state.name if old_state is not None else None
        level = logging.WARNING if new_state.name == pybreaker.STATE_OPEN else logging.INFO
        logger.log(
            level,
            "Circuit breaker state changed",
            extra={"breaker_name": self.name, "old_state": old_name, "new_state": new_state.name},
        )


stripe_breaker = CircuitBreaker(
    fail_max=5,
    reset_timeout=60,
    name="stripe_circuit_breaker",
    listeners=[StateChangeLogger("stripe")],
)

storage_breaker = CircuitBreaker(
    fail_max=5,
    reset_timeout=30,
    name="storage_circuit_breaker",
    listeners=[StateChangeLogger("storage")],
)


__all__ = [
    "stripe_breaker",
    "storage_breaker",
    "StateChangeLogger",
    "CircuitBreakerError",
]
