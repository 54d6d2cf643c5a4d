"""Adaptadores sin red para desarrollo local y tests."""

from app.infrastructure.in_memory.object_storage import InMemoryObjectStorage
from app.infrastructure.in_memory.stripe_gateway import StubStripeGateway

__all__ = [
    "InMemoryObjectStorage",
    "StubStripeGateway",
]
