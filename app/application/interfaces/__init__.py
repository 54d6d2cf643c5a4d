"""Interfaces (Puertos) de la capa de aplicación."""

from app.application.interfaces.audit_repo import AuditNoteRecord, AuditRepo
from app.application.interfaces.catalog_query import CatalogQuery
from app.application.interfaces.clock import Clock, FakeClock, SystemClock
from app.application.interfaces.cotista_repo import (
    AvailabilityRecord,
    AvailabilityRepo,
    CotistaRecord,
    CotistaRepo,
)
from app.application.interfaces.dispute_repo import (
    DisputeRecord,
    DisputeRepo,
    FraudFlagRecord,
    FraudFlagRepo,
)
from app.application.interfaces.document_repo import DocumentRecord, DocumentRepo
from app.application.interfaces.object_storage import ObjectStorage, StoredObject
from app.application.interfaces.payment_gateway import (
    CheckoutSessionResult,
    PaymentGateway,
    PaymentIntentResult,
    RefundResult,
)
from app.application.interfaces.payment_repo import PaymentRecord, PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRecord, ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.user_repo import UserRecord, UserRepo
from app.application.interfaces.voucher_repo import VoucherRecord, VoucherRepo
from app.application.interfaces.webhook_event_repo import WebhookEventRepo

__all__ = [
    # Repositories
    "UserRepo",
    "UserRecord",
    "CatalogQuery",
    "CotistaRepo",
    "CotistaRecord",
    "AvailabilityRepo",
    "AvailabilityRecord",
    "ReservationRepo",
    "ReservationRecord",
    "PaymentRepo",
    "PaymentRecord",
    "DocumentRepo",
    "DocumentRecord",
    "VoucherRepo",
    "VoucherRecord",
    "DisputeRepo",
    "DisputeRecord",
    "FraudFlagRepo",
    "FraudFlagRecord",
    "AuditRepo",
    "AuditNoteRecord",
    "WebhookEventRepo",
    # Gateways
    "PaymentGateway",
    "CheckoutSessionResult",
    "PaymentIntentResult",
    "RefundResult",
    "ObjectStorage",
    "StoredObject",
    # Infrastructure
    "TransactionManager",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
]
