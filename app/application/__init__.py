"""
Capa de Aplicación - Marketplace de cotistas.

Esta capa contiene los casos de uso e interfaces (puertos).
Orquesta la lógica de negocio y define los contratos con la infraestructura.

Estructura:
- use_cases/: Casos de uso del sistema
- interfaces/: Puertos (contratos para adaptadores)
- lifecycle_manager.py: Única puerta de escritura del estado de una reservación
- file_validation.py / uploads.py: Validación y subida de archivos
"""

from app.application.interfaces import (
    Clock,
    FakeClock,
    ObjectStorage,
    PaymentGateway,
    SystemClock,
    TransactionManager,
)
from app.application.lifecycle_manager import ReservationLifecycleManager

__all__ = [
    "ReservationLifecycleManager",
    # Interfaces - Gateways
    "PaymentGateway",
    "ObjectStorage",
    # Interfaces - Infrastructure
    "TransactionManager",
    # Interfaces - Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
]
