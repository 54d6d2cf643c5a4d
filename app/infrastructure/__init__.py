"""
Capa de Infraestructura - Marketplace de cotistas.

Esta capa contiene las implementaciones concretas de los puertos (interfaces).
Incluye adaptadores para bases de datos, gateways externos y almacenamiento.

Estructura:
- db/: Tablas, repositorios SQL, consultas del catálogo y transacciones
- gateways/: Adaptadores para servicios externos (Stripe, S3)
- in_memory/: Adaptadores sin red para desarrollo local y testing
- circuit_breaker.py: Breakers compartidos para Stripe y almacenamiento
"""

from app.infrastructure.db.queries.catalog_query_sql import CatalogQuerySQL
from app.infrastructure.db.repositories.audit_repo_sql import AuditRepoSQL
from app.infrastructure.db.repositories.cotista_repo_sql import AvailabilityRepoSQL, CotistaRepoSQL
from app.infrastructure.db.repositories.dispute_repo_sql import DisputeRepoSQL, FraudFlagRepoSQL
from app.infrastructure.db.repositories.document_repo_sql import DocumentRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from app.infrastructure.db.repositories.user_repo_sql import UserRepoSQL
from app.infrastructure.db.repositories.voucher_repo_sql import VoucherRepoSQL
from app.infrastructure.db.repositories.webhook_event_repo_sql import WebhookEventRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from app.infrastructure.gateways.s3_storage import S3ObjectStorage
from app.infrastructure.gateways.stripe_gateway import StripePaymentGateway
from app.infrastructure.in_memory import InMemoryObjectStorage, StubStripeGateway

__all__ = [
    # Database - Repositories SQL
    "UserRepoSQL",
    "CatalogQuerySQL",
    "CotistaRepoSQL",
    "AvailabilityRepoSQL",
    "ReservationRepoSQL",
    "PaymentRepoSQL",
    "DocumentRepoSQL",
    "VoucherRepoSQL",
    "DisputeRepoSQL",
    "FraudFlagRepoSQL",
    "AuditRepoSQL",
    "WebhookEventRepoSQL",
    "SQLAlchemyTransactionManager",
    # Gateways
    "StripePaymentGateway",
    "S3ObjectStorage",
    # In-Memory Implementations
    "StubStripeGateway",
    "InMemoryObjectStorage",
]
