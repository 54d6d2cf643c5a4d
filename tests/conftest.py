"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Base de datos SQLite temporal por test (esquema completo)
- Cliente HTTP async contra la app (httpx + ASGITransport)
- Gateways sin red (Stripe stub, almacenamiento en memoria)
- Datos de prueba: usuarios, desarrollo, cotista aprobado y slot publicado
"""

from datetime import date, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import Settings, get_settings
from app.core.security import create_access_token
from app.infrastructure.circuit_breaker import storage_breaker, stripe_breaker
from app.infrastructure.db import tables
from app.infrastructure.db.engine import build_engine, build_sessionmaker
from app.infrastructure.in_memory import InMemoryObjectStorage, StubStripeGateway
from app.main import app
from tests.helpers import (
    SLOT_NIGHTS,
    TEST_JWT_SECRET,
    TEST_WEBHOOK_SECRET,
    SeedData,
    insert_row,
    insert_slot,
    insert_user,
)

# ============================================================================
# CONFIGURACIÓN Y BASE DE DATOS
# ============================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        stripe_webhook_secret=TEST_WEBHOOK_SECRET,
        jwt_secret_key=TEST_JWT_SECRET,
        public_app_url="http://app.test",
    )


@pytest_asyncio.fixture
async def engine(settings):
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(tables.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine):
    return build_sessionmaker(engine)


@pytest_asyncio.fixture
async def db_session(sessionmaker):
    """Sesión para preparar datos o verificar filas directamente."""
    async with sessionmaker() as session:
        yield session


# ============================================================================
# GATEWAYS Y CLIENTE HTTP
# ============================================================================


@pytest.fixture
def stripe_stub() -> StubStripeGateway:
    return StubStripeGateway()


@pytest.fixture
def storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


@pytest_asyncio.fixture
async def client(settings, sessionmaker, stripe_stub, storage) -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP contra la app real.

    ASGITransport no ejecuta el lifespan, así que el estado que éste
    construiría se asigna aquí.
    """
    app.state.sessionmaker = sessionmaker
    app.state.payment_gateway = stripe_stub
    app.state.object_storage = storage
    app.dependency_overrides[get_settings] = lambda: settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """Evita que un breaker abierto en un test afecte al siguiente."""
    stripe_breaker.close()
    storage_breaker.close()
    yield
    stripe_breaker.close()
    storage_breaker.close()


@pytest.fixture
def auth_headers(settings):
    def _headers(open_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(open_id, settings)}"}

    return _headers


# ============================================================================
# DATOS DE PRUEBA
# ============================================================================


@pytest_asyncio.fixture
async def seed(db_session) -> SeedData:
    session = db_session
    admin_id = await insert_user(session, "admin-1", role="admin", status="verified")
    customer_id = await insert_user(session, "customer-1")
    other_customer_id = await insert_user(session, "customer-2")
    cotista_user_id = await insert_user(session, "cotista-1")

    country_id = await insert_row(session, tables.countries, code="BR", name_key="country.br")
    state_id = await insert_row(session, tables.states, country_id=country_id, code="BA", name_key="state.br.ba")
    city_id = await insert_row(
        session,
        tables.cities,
        state_id=state_id,
        slug="porto-seguro",
        name_key="city.porto-seguro",
        latitude=-16.4497,
        longitude=-39.0647,
    )
    development_id = await insert_row(
        session,
        tables.developments,
        city_id=city_id,
        slug="praia-azul",
        name_key="development.praia-azul.name",
        description_key="development.praia-azul.description",
        short_description_key="development.praia-azul.short",
        latitude=-16.43,
        longitude=-39.05,
        rating=4.5,
        starting_price=18000,
        is_active=True,
    )
    cotista_id = await insert_row(
        session,
        tables.cotistas,
        user_id=cotista_user_id,
        development_id=development_id,
        terms_accepted=True,
        status="approved",
    )
    slot_start = date.today() + timedelta(days=30)
    slot_end = slot_start + timedelta(days=SLOT_NIGHTS)
    slot_id = await insert_slot(session, cotista_id, slot_start, slot_end)
    await session.commit()

    return SeedData(
        admin_id=admin_id,
        customer_id=customer_id,
        other_customer_id=other_customer_id,
        cotista_user_id=cotista_user_id,
        development_id=development_id,
        cotista_id=cotista_id,
        slot_id=slot_id,
        slot_start=slot_start,
        slot_end=slot_end,
    )
