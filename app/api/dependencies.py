from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_clock, get_db_session, get_object_storage, get_payment_gateway
from app.application.interfaces.clock import Clock
from app.application.interfaces.object_storage import ObjectStorage
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.file_validation import DOCUMENT_TYPES
from app.application.lifecycle_manager import ReservationLifecycleManager
from app.application.use_cases.admin_queries import AdminBacklogQuery
from app.application.use_cases.admin_reservations import (
    CancelReservationUseCase,
    CompleteReservationUseCase,
    RefundReservationUseCase,
)
from app.application.use_cases.create_reservation import CreateReservationUseCase
from app.application.use_cases.disputes import OpenDisputeUseCase, ResolveDisputeUseCase
from app.application.use_cases.fraud_flags import CreateFraudFlagUseCase, ResolveFraudFlagUseCase
from app.application.use_cases.get_development_detail import GetDevelopmentDetailUseCase
from app.application.use_cases.handle_stripe_webhook import HandleStripeWebhookUseCase
from app.application.use_cases.manage_availability import (
    AddAvailabilitySlotUseCase,
    PublishAvailabilitySlotUseCase,
)
from app.application.use_cases.register_cotista import RegisterCotistaUseCase
from app.application.use_cases.reservation_queries import (
    GetCotistaDashboardUseCase,
    GetReservationDetailUseCase,
    ListReservationDocumentsUseCase,
)
from app.application.use_cases.review_cotista import ReviewCotistaUseCase
from app.application.use_cases.review_document import ReviewDocumentUseCase
from app.application.use_cases.start_payment import (
    CreateCheckoutSessionUseCase,
    CreatePaymentIntentUseCase,
)
from app.application.use_cases.upload_cotista_document import UploadCotistaDocumentUseCase
from app.application.use_cases.upload_customer_document import UploadCustomerDocumentUseCase
from app.application.use_cases.voucher_workflow import (
    DeliverVoucherUseCase,
    ReviewVoucherUseCase,
    StartVoucherReviewUseCase,
    UploadVoucherUseCase,
)
from app.config import Settings, get_settings
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


def get_catalog_query(session: AsyncSession = Depends(get_db_session)) -> CatalogQuerySQL:
    return CatalogQuerySQL(session)


def get_reservation_repo(session: AsyncSession = Depends(get_db_session)) -> ReservationRepoSQL:
    return ReservationRepoSQL(session)


def get_availability_repo(session: AsyncSession = Depends(get_db_session)) -> AvailabilityRepoSQL:
    return AvailabilityRepoSQL(session)


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_db_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    storage: ObjectStorage = Depends(get_object_storage),
    clock: Clock = Depends(get_clock),
):
    user_repo = UserRepoSQL(session)
    catalog_query = CatalogQuerySQL(session)
    cotista_repo = CotistaRepoSQL(session)
    availability_repo = AvailabilityRepoSQL(session)
    reservation_repo = ReservationRepoSQL(session)
    payment_repo = PaymentRepoSQL(session)
    document_repo = DocumentRepoSQL(session)
    voucher_repo = VoucherRepoSQL(session)
    dispute_repo = DisputeRepoSQL(session)
    fraud_flag_repo = FraudFlagRepoSQL(session)
    audit_repo = AuditRepoSQL(session)
    webhook_event_repo = WebhookEventRepoSQL(session)
    tx_manager = SQLAlchemyTransactionManager(session)

    lifecycle = ReservationLifecycleManager(
        reservation_repo=reservation_repo,
        payment_repo=payment_repo,
        document_repo=document_repo,
        voucher_repo=voucher_repo,
        audit_repo=audit_repo,
        clock=clock,
        required_document_types=settings.required_document_type_list,
    )
    upload_limits = {"allowed_types": DOCUMENT_TYPES, "max_size_mb": settings.max_document_size_mb}
    voucher_step = {
        "voucher_repo": voucher_repo,
        "audit_repo": audit_repo,
        "lifecycle": lifecycle,
        "transaction_manager": tx_manager,
        "clock": clock,
    }

    return {
        "get_development": GetDevelopmentDetailUseCase(catalog_query=catalog_query),
        "create_reservation": CreateReservationUseCase(
            reservation_repo=reservation_repo,
            availability_repo=availability_repo,
            cotista_repo=cotista_repo,
            audit_repo=audit_repo,
            transaction_manager=tx_manager,
            clock=clock,
            currency=settings.payment_currency,
        ),
        "reservation_detail": GetReservationDetailUseCase(
            reservation_repo=reservation_repo,
            document_repo=document_repo,
            voucher_repo=voucher_repo,
            payment_repo=payment_repo,
        ),
        "list_documents": ListReservationDocumentsUseCase(
            reservation_repo=reservation_repo, document_repo=document_repo
        ),
        "open_dispute": OpenDisputeUseCase(
            dispute_repo=dispute_repo,
            reservation_repo=reservation_repo,
            cotista_repo=cotista_repo,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
        ),
        "create_checkout_session": CreateCheckoutSessionUseCase(
            reservation_repo=reservation_repo,
            catalog_query=catalog_query,
            payment_gateway=payment_gateway,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
            currency=settings.payment_currency,
        ),
        "create_payment_intent": CreatePaymentIntentUseCase(
            reservation_repo=reservation_repo,
            payment_repo=payment_repo,
            payment_gateway=payment_gateway,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
            currency=settings.payment_currency,
        ),
        "handle_webhook": HandleStripeWebhookUseCase(
            payment_gateway=payment_gateway,
            webhook_event_repo=webhook_event_repo,
            payment_repo=payment_repo,
            reservation_repo=reservation_repo,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
            clock=clock,
            stripe_webhook_secret=settings.stripe_webhook_secret,
        ),
        "upload_customer_document": UploadCustomerDocumentUseCase(
            reservation_repo=reservation_repo,
            document_repo=document_repo,
            storage=storage,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
            clock=clock,
            **upload_limits,
        ),
        "upload_cotista_document": UploadCotistaDocumentUseCase(
            cotista_repo=cotista_repo,
            storage=storage,
            transaction_manager=tx_manager,
            clock=clock,
            **upload_limits,
        ),
        "register_cotista": RegisterCotistaUseCase(
            cotista_repo=cotista_repo,
            user_repo=user_repo,
            catalog_query=catalog_query,
            audit_repo=audit_repo,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "cotista_dashboard": GetCotistaDashboardUseCase(reservation_repo=reservation_repo),
        "add_availability": AddAvailabilitySlotUseCase(
            availability_repo=availability_repo, transaction_manager=tx_manager
        ),
        "publish_availability": PublishAvailabilitySlotUseCase(
            availability_repo=availability_repo, transaction_manager=tx_manager
        ),
        "upload_voucher": UploadVoucherUseCase(
            voucher_repo=voucher_repo,
            reservation_repo=reservation_repo,
            storage=storage,
            audit_repo=audit_repo,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
            clock=clock,
            **upload_limits,
        ),
        "start_voucher_review": StartVoucherReviewUseCase(**voucher_step),
        "review_voucher": ReviewVoucherUseCase(**voucher_step),
        "deliver_voucher": DeliverVoucherUseCase(**voucher_step),
        "review_document": ReviewDocumentUseCase(
            document_repo=document_repo,
            reservation_repo=reservation_repo,
            voucher_repo=voucher_repo,
            audit_repo=audit_repo,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
            clock=clock,
            voucher_deadline_hours=settings.voucher_deadline_hours,
        ),
        "review_cotista": ReviewCotistaUseCase(
            cotista_repo=cotista_repo,
            audit_repo=audit_repo,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "admin_backlog": AdminBacklogQuery(
            document_repo=document_repo,
            cotista_repo=cotista_repo,
            voucher_repo=voucher_repo,
            dispute_repo=dispute_repo,
            fraud_flag_repo=fraud_flag_repo,
        ),
        "complete_reservation": CompleteReservationUseCase(lifecycle=lifecycle, transaction_manager=tx_manager),
        "cancel_reservation": CancelReservationUseCase(
            availability_repo=availability_repo, lifecycle=lifecycle, transaction_manager=tx_manager
        ),
        "refund_reservation": RefundReservationUseCase(
            reservation_repo=reservation_repo,
            payment_repo=payment_repo,
            availability_repo=availability_repo,
            payment_gateway=payment_gateway,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "resolve_dispute": ResolveDisputeUseCase(
            dispute_repo=dispute_repo,
            reservation_repo=reservation_repo,
            audit_repo=audit_repo,
            lifecycle=lifecycle,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "create_fraud_flag": CreateFraudFlagUseCase(
            fraud_flag_repo=fraud_flag_repo,
            user_repo=user_repo,
            audit_repo=audit_repo,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "resolve_fraud_flag": ResolveFraudFlagUseCase(
            fraud_flag_repo=fraud_flag_repo,
            audit_repo=audit_repo,
            transaction_manager=tx_manager,
            clock=clock,
        ),
    }
