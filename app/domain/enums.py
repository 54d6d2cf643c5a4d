"""Enumeraciones de estado del dominio."""

from enum import Enum


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
    COTISTA = "cotista"


class UserStatus(str, Enum):
    REGISTERED = "registered"
    VERIFIED = "verified"
    UNDER_REVIEW = "under_review"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class Language(str, Enum):
    PT = "pt"
    EN = "en"
    ES = "es"
    FR = "fr"
    IT = "it"
    JA = "ja"


class CotistaStatus(str, Enum):
    REGISTERED = "registered"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class ReservationStatus(str, Enum):
    """Estados posibles de una reservación."""

    CREATED = "created"
    AWAITING_PAYMENT = "awaiting_payment"
    PAYMENT_PENDING = "payment_pending"
    PAID = "paid"
    DOCUMENTS_PENDING = "documents_pending"
    DOCUMENTS_UNDER_REVIEW = "documents_under_review"
    DOCUMENTS_REJECTED = "documents_rejected"
    APPROVED = "approved"
    VOUCHER_PENDING = "voucher_pending"
    VOUCHER_SENT = "voucher_sent"
    VOUCHER_UNDER_REVIEW = "voucher_under_review"
    VOUCHER_REJECTED = "voucher_rejected"
    VOUCHER_DELIVERED = "voucher_delivered"
    COMPLETED = "completed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"
    IN_DISPUTE = "in_dispute"


class LifecycleEvent(str, Enum):
    """Eventos que mueven una reservación por su ciclo de vida."""

    CHECKOUT_STARTED = "checkout_started"
    PAYMENT_SUCCEEDED = "payment_succeeded"
    PAYMENT_FAILED = "payment_failed"
    DOCUMENT_UPLOADED = "document_uploaded"
    DOCUMENTS_SUBMITTED = "documents_submitted"
    DOCUMENT_APPROVED = "document_approved"
    DOCUMENT_REJECTED = "document_rejected"
    VOUCHER_REQUESTED = "voucher_requested"
    VOUCHER_UPLOADED = "voucher_uploaded"
    VOUCHER_REVIEW_STARTED = "voucher_review_started"
    VOUCHER_APPROVED = "voucher_approved"
    VOUCHER_REJECTED = "voucher_rejected"
    VOUCHER_DELIVERED = "voucher_delivered"
    STAY_COMPLETED = "stay_completed"
    DISPUTE_OPENED = "dispute_opened"
    DISPUTE_RESOLVED = "dispute_resolved"
    ADMIN_CANCEL = "admin_cancel"
    REFUND_ISSUED = "refund_issued"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUND_PENDING = "refund_pending"
    REFUNDED = "refunded"


class DocumentType(str, Enum):
    ID = "id"
    ADDRESS_PROOF = "address_proof"
    OTHER = "other"


class CotistaDocumentType(str, Enum):
    IDENTITY = "identity"
    ADDRESS_PROOF = "address_proof"
    OWNERSHIP_PROOF = "ownership_proof"


class DocumentStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class VoucherStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    DELIVERED = "delivered"


class DisputeStatus(str, Enum):
    OPEN = "open"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    CLOSED = "closed"
    ESCALATED = "escalated"


class FraudSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FraudFlagStatus(str, Enum):
    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    FALSE_POSITIVE = "false_positive"


class AuditEntityType(str, Enum):
    USER = "user"
    COTISTA = "cotista"
    RESERVATION = "reservation"
    DOCUMENT = "document"
    VOUCHER = "voucher"
    DISPUTE = "dispute"
    FRAUD_FLAG = "fraud_flag"


class ReviewDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


OPEN_DISPUTE_STATUSES = (DisputeStatus.OPEN, DisputeStatus.UNDER_REVIEW, DisputeStatus.ESCALATED)
ACTIVE_FRAUD_STATUSES = (FraudFlagStatus.OPEN, FraudFlagStatus.INVESTIGATING)
