from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)

metadata = MetaData()


def _timestamps() -> list[Column]:
    return [
        Column("created_at", DateTime, nullable=False, server_default=func.now()),
        Column("updated_at", DateTime, nullable=False, server_default=func.now(), onupdate=func.now()),
    ]


users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("open_id", String(64), nullable=False, unique=True),
    Column("name", Text),
    Column("email", String(320)),
    Column("login_method", String(64)),
    Column("role", String(16), nullable=False, default="user"),
    Column("status", String(16), nullable=False, default="registered"),
    Column("last_signed_in", DateTime, server_default=func.now()),
    *_timestamps(),
)

translations = Table(
    "translations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("key", String(255), nullable=False),
    Column("language", String(2), nullable=False),
    Column("value", Text, nullable=False),
    Column("category", String(100)),
    *_timestamps(),
    UniqueConstraint("key", "language", name="uq_translations_key_language"),
    Index("ix_translations_key", "key"),
)

countries = Table(
    "countries",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("code", String(3), nullable=False, unique=True),
    Column("name_key", String(255), nullable=False),
)

states = Table(
    "states",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("country_id", Integer, ForeignKey("countries.id"), nullable=False, index=True),
    Column("code", String(10), nullable=False),
    Column("name_key", String(255), nullable=False),
)

cities = Table(
    "cities",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("state_id", Integer, ForeignKey("states.id"), nullable=False, index=True),
    Column("slug", String(255), nullable=False, unique=True),
    Column("name_key", String(255), nullable=False),
    Column("latitude", Numeric(10, 7), nullable=False),
    Column("longitude", Numeric(10, 7), nullable=False),
)

developments = Table(
    "developments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("city_id", Integer, ForeignKey("cities.id"), nullable=False, index=True),
    Column("slug", String(255), nullable=False, unique=True),
    Column("name_key", String(255), nullable=False),
    Column("description_key", String(255), nullable=False),
    Column("short_description_key", String(255), nullable=False),
    Column("address", Text),
    Column("latitude", Numeric(10, 7), nullable=False),
    Column("longitude", Numeric(10, 7), nullable=False),
    Column("rating", Numeric(3, 2), nullable=False, default=0),
    Column("starting_price", Integer, nullable=False),
    Column("rules_key", String(255)),
    Column("is_active", Boolean, nullable=False, default=True, index=True),
    *_timestamps(),
)

development_photos = Table(
    "development_photos",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("development_id", Integer, ForeignKey("developments.id"), nullable=False, index=True),
    Column("url", Text, nullable=False),
    Column("file_key", String(500), nullable=False),
    Column("sort_order", Integer, nullable=False, default=0),
)

amenities = Table(
    "amenities",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name_key", String(255), nullable=False, unique=True),
    Column("icon", String(100)),
    Column("category", String(100)),
)

development_amenities = Table(
    "development_amenities",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("development_id", Integer, ForeignKey("developments.id"), nullable=False, index=True),
    Column("amenity_id", Integer, ForeignKey("amenities.id"), nullable=False, index=True),
    UniqueConstraint("development_id", "amenity_id", name="uq_development_amenity"),
)

sponsored_businesses = Table(
    "sponsored_businesses",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name_key", String(255), nullable=False),
    Column("description_key", String(255), nullable=False),
    Column("category", String(100), nullable=False),
    Column("photo_url", Text),
    Column("website_url", Text),
    Column("phone_number", String(50)),
    Column("address", Text),
    Column("is_active", Boolean, nullable=False, default=True),
)

business_developments = Table(
    "business_developments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("business_id", Integer, ForeignKey("sponsored_businesses.id"), nullable=False, index=True),
    Column("development_id", Integer, ForeignKey("developments.id"), nullable=False, index=True),
    Column("sort_order", Integer, nullable=False, default=0),
    UniqueConstraint("business_id", "development_id", name="uq_business_development"),
)

cotistas = Table(
    "cotistas",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False, unique=True),
    Column("development_id", Integer, ForeignKey("developments.id"), nullable=False, index=True),
    Column("personal_data", JSON),
    Column("bank_details", JSON),
    Column("identity_document_key", String(500)),
    Column("address_proof_key", String(500)),
    Column("ownership_proof_key", String(500)),
    Column("terms_accepted", Boolean, nullable=False, default=False),
    Column("terms_accepted_at", DateTime),
    Column("status", String(16), nullable=False, default="registered", index=True),
    Column("rejection_reason", Text),
    *_timestamps(),
)

cotista_availability = Table(
    "cotista_availability",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("cotista_id", Integer, ForeignKey("cotistas.id"), nullable=False, index=True),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("price_per_night", Integer, nullable=False),
    Column("is_published", Boolean, nullable=False, default=False, index=True),
    Column("is_booked", Boolean, nullable=False, default=False),
    *_timestamps(),
    Index("ix_cotista_availability_dates", "start_date", "end_date"),
)

reservations = Table(
    "reservations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("customer_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("development_id", Integer, ForeignKey("developments.id"), nullable=False, index=True),
    Column("cotista_id", Integer, ForeignKey("cotistas.id"), nullable=False, index=True),
    Column("availability_id", Integer, ForeignKey("cotista_availability.id"), nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("total_price", Integer, nullable=False),
    Column("currency", String(3), nullable=False, default="usd"),
    Column("status", String(32), nullable=False, default="created", index=True),
    Column("pre_dispute_status", String(32)),
    Column("payment_intent_id", String(255)),
    Column("cancellation_reason", Text),
    Column("refund_amount", Integer),
    Column("refunded_at", DateTime),
    Column("lock_version", Integer, nullable=False, default=0),
    *_timestamps(),
)

documents = Table(
    "documents",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("reservation_id", Integer, ForeignKey("reservations.id"), nullable=False, index=True),
    Column("customer_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("document_type", String(16), nullable=False),
    Column("file_url", Text, nullable=False),
    Column("file_key", String(500), nullable=False),
    Column("status", String(16), nullable=False, default="pending", index=True),
    Column("rejection_reason", Text),
    Column("reviewed_by", Integer),
    Column("reviewed_at", DateTime),
    *_timestamps(),
)

vouchers = Table(
    "vouchers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("reservation_id", Integer, ForeignKey("reservations.id"), nullable=False, unique=True),
    Column("cotista_id", Integer, ForeignKey("cotistas.id"), nullable=False, index=True),
    Column("file_url", Text),
    Column("file_key", String(500)),
    Column("notes", Text),
    Column("status", String(16), nullable=False, default="pending", index=True),
    Column("rejection_reason", Text),
    Column("reviewed_by", Integer),
    Column("reviewed_at", DateTime),
    Column("delivered_at", DateTime),
    Column("deadline", DateTime),
    *_timestamps(),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("reservation_id", Integer, ForeignKey("reservations.id"), nullable=False, index=True),
    Column("customer_id", Integer, nullable=False, index=True),
    Column("amount", Integer, nullable=False),
    Column("currency", String(3), nullable=False, default="usd"),
    Column("payment_method", String(100)),
    Column("external_payment_id", String(255), index=True),
    Column("status", String(16), nullable=False, default="pending", index=True),
    Column("failure_reason", Text),
    *_timestamps(),
)

disputes = Table(
    "disputes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("reservation_id", Integer, ForeignKey("reservations.id"), nullable=False, index=True),
    Column("reported_by", Integer, nullable=False, index=True),
    Column("reported_against", Integer),
    Column("reason", Text, nullable=False),
    Column("description", Text, nullable=False),
    Column("status", String(16), nullable=False, default="open", index=True),
    Column("resolution", Text),
    Column("resolved_by", Integer),
    Column("resolved_at", DateTime),
    *_timestamps(),
)

fraud_flags = Table(
    "fraud_flags",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("reservation_id", Integer, index=True),
    Column("flag_type", String(100), nullable=False),
    Column("severity", String(16), nullable=False, default="medium", index=True),
    Column("description", Text),
    Column("status", String(16), nullable=False, default="open", index=True),
    Column("resolved_by", Integer),
    Column("resolved_at", DateTime),
    *_timestamps(),
)

audit_notes = Table(
    "audit_notes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("entity_type", String(16), nullable=False),
    Column("entity_id", Integer, nullable=False),
    Column("actor_id", Integer),
    Column("action", String(255), nullable=False),
    Column("notes", Text),
    Column("metadata", JSON),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Index("ix_audit_notes_entity", "entity_type", "entity_id"),
)

processed_webhook_events = Table(
    "processed_webhook_events",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("event_id", String(255), nullable=False, unique=True),
    Column("event_type", String(100), nullable=False),
    Column("received_at", DateTime, nullable=False, server_default=func.now()),
)
