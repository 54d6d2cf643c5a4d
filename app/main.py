import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routers.admin import router as admin_router
from app.api.routers.auth import router as auth_router
from app.api.routers.cotista import router as cotista_router
from app.api.routers.developments import router as developments_router
from app.api.routers.documents import router as documents_router
from app.api.routers.geography import router as geography_router
from app.api.routers.health import router as health_router
from app.api.routers.i18n import router as i18n_router
from app.api.routers.payments import router as payments_router
from app.api.routers.reservations import router as reservations_router
from app.api.routers.webhooks import router as webhooks_router
from app.application.interfaces.object_storage import ObjectStorage
from app.application.interfaces.payment_gateway import PaymentGateway
from app.config import Settings, get_settings
from app.domain.errors import DomainError
from app.infrastructure.db.engine import build_engine, build_sessionmaker
from app.infrastructure.db.tables import metadata
from app.infrastructure.gateways.s3_storage import S3ObjectStorage
from app.infrastructure.gateways.stripe_gateway import StripePaymentGateway
from app.infrastructure.in_memory.object_storage import InMemoryObjectStorage
from app.infrastructure.in_memory.stripe_gateway import StubStripeGateway

settings = get_settings()

# Configure structured logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_payment_gateway(settings: Settings) -> PaymentGateway:
    if settings.stripe_api_key:
        return StripePaymentGateway(settings.stripe_api_key, settings.stripe_webhook_tolerance_seconds)
    logger.warning("STRIPE_SECRET_KEY not set, using the stub payment gateway")
    return StubStripeGateway(settings.stripe_webhook_tolerance_seconds)


def build_object_storage(settings: Settings) -> ObjectStorage:
    if settings.s3_bucket_name:
        return S3ObjectStorage(
            bucket_name=settings.s3_bucket_name,
            region=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            public_base_url=settings.s3_public_base_url,
        )
    logger.warning("S3_BUCKET_NAME not set, uploads are kept in memory")
    return InMemoryObjectStorage()


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = build_engine(settings)
    # Initialize DB tables (for dev/demo purposes)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)
    app.state.payment_gateway = build_payment_gateway(settings)
    app.state.object_storage = build_object_storage(settings)
    yield
    await engine.dispose()


app = FastAPI(
    title="Cotistas Marketplace API",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    if exc.status_code >= 500:
        logger.error(
            "Domain error",
            extra={"code": exc.code, "path": request.url.path, "detail": exc.message},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to prevent stack trace exposure to clients.
    All unhandled exceptions are logged internally and return a generic error message.
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "message": "An unexpected error occurred. Please contact support with the error_id if the issue persists.",
        },
    )


app.include_router(health_router, tags=["Health"])
app.include_router(auth_router, prefix="/api/v1", tags=["Auth"])
app.include_router(i18n_router, prefix="/api/v1", tags=["i18n"])
app.include_router(geography_router, prefix="/api/v1", tags=["Geography"])
app.include_router(developments_router, prefix="/api/v1", tags=["Developments"])
app.include_router(reservations_router, prefix="/api/v1", tags=["Reservations"])
app.include_router(cotista_router, prefix="/api/v1", tags=["Cotista"])
app.include_router(payments_router, prefix="/api/v1", tags=["Payments"])
app.include_router(documents_router, prefix="/api/v1", tags=["Documents"])
app.include_router(admin_router, prefix="/api/v1", tags=["Admin"])
app.include_router(webhooks_router, prefix="/api/v1", tags=["Webhooks"])
