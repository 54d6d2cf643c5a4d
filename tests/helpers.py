"""Helpers compartidos por los tests (datos de prueba, firmas y flujos HTTP)."""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import date
from typing import Any

from httpx import AsyncClient
from sqlalchemy import insert, select

from app.infrastructure.db import tables

TEST_WEBHOOK_SECRET = "whsec_test_secret"
TEST_JWT_SECRET = "test-jwt-secret"

# Slot de 10 noches a 3500 centavos = 35000
SLOT_PRICE_PER_NIGHT = 3500
SLOT_NIGHTS = 10


@dataclass
class SeedData:
    admin_id: int
    customer_id: int
    other_customer_id: int
    cotista_user_id: int
    development_id: int
    cotista_id: int
    slot_id: int
    slot_start: date
    slot_end: date

    admin_open_id: str = "admin-1"
    customer_open_id: str = "customer-1"
    other_customer_open_id: str = "customer-2"
    cotista_open_id: str = "cotista-1"


# ============================================================================
# INSERCIÓN DIRECTA
# ============================================================================


async def insert_row(session, table, **values) -> int:
    result = await session.execute(insert(table).values(**values))
    return result.inserted_primary_key[0]


async def insert_user(session, open_id: str, role: str = "user", status: str = "registered") -> int:
    return await insert_row(
        session,
        tables.users,
        open_id=open_id,
        name=open_id.title(),
        email=f"{open_id}@example.com",
        login_method="test",
        role=role,
        status=status,
    )


async def insert_slot(session, cotista_id: int, start: date, end: date, price: int = SLOT_PRICE_PER_NIGHT) -> int:
    return await insert_row(
        session,
        tables.cotista_availability,
        cotista_id=cotista_id,
        start_date=start,
        end_date=end,
        price_per_night=price,
        is_published=True,
        is_booked=False,
    )


async def fetch_row(sessionmaker, table, row_id: int) -> dict[str, Any] | None:
    """Lee una fila en una sesión nueva (ve lo que la app ya confirmó)."""
    async with sessionmaker() as session:
        result = await session.execute(select(table).where(table.c.id == row_id))
        row = result.mappings().first()
        return dict(row) if row else None


async def fetch_rows(sessionmaker, table, **filters) -> list[dict[str, Any]]:
    async with sessionmaker() as session:
        stmt = select(table).order_by(table.c.id)
        for column, value in filters.items():
            stmt = stmt.where(table.c[column] == value)
        result = await session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]


# ============================================================================
# WEBHOOKS DE STRIPE
# ============================================================================


def sign_stripe_payload(payload: bytes, secret: str = TEST_WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Header ``Stripe-Signature`` tal como lo calcula Stripe (v1 = HMAC-SHA256)."""
    ts = timestamp if timestamp is not None else int(time.time())
    signed_payload = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={signature}"


def stripe_event(event_id: str, event_type: str, obj: dict[str, Any]) -> bytes:
    return json.dumps({"id": event_id, "object": "event", "type": event_type, "data": {"object": obj}}).encode()


async def post_webhook(client: AsyncClient, payload: bytes, signature: str | None = None):
    headers = {
        "Content-Type": "application/json",
        "Stripe-Signature": signature if signature is not None else sign_stripe_payload(payload),
    }
    return await client.post("/api/v1/webhooks/stripe", content=payload, headers=headers)


def checkout_completed_event(
    event_id: str, reservation: dict[str, Any], customer_id: int, amount: int | None = None
) -> bytes:
    return stripe_event(
        event_id,
        "checkout.session.completed",
        {
            "id": f"cs_{event_id}",
            "object": "checkout.session",
            "amount_total": reservation["total_price"] if amount is None else amount,
            "currency": "usd",
            "payment_intent": f"pi_{event_id}",
            "metadata": {"reservation_id": str(reservation["id"]), "user_id": str(customer_id)},
        },
    )


# ============================================================================
# FLUJOS HTTP
# ============================================================================


def file_payload(content: bytes = b"%PDF-1.4 test", content_type: str = "application/pdf", name: str = "doc.pdf"):
    return {
        "file_name": name,
        "content_type": content_type,
        "file_data": base64.b64encode(content).decode("ascii"),
    }


async def create_reservation(client: AsyncClient, seed: SeedData, auth_headers) -> dict[str, Any]:
    response = await client.post(
        "/api/v1/reservations",
        json={
            "availability_id": seed.slot_id,
            "start_date": seed.slot_start.isoformat(),
            "end_date": seed.slot_end.isoformat(),
        },
        headers=auth_headers(seed.customer_open_id),
    )
    assert response.status_code == 201, response.text
    return response.json()


async def pay_reservation(client: AsyncClient, seed: SeedData, auth_headers, reservation: dict[str, Any]) -> None:
    """Checkout + webhook ``checkout.session.completed`` firmado."""
    checkout = await client.post(
        "/api/v1/payments/checkout-session",
        json={"reservation_id": reservation["id"], "development_id": seed.development_id},
        headers=auth_headers(seed.customer_open_id),
    )
    assert checkout.status_code == 200, checkout.text

    payload = checkout_completed_event(f"evt_paid_{reservation['id']}", reservation, seed.customer_id)
    response = await post_webhook(client, payload)
    assert response.status_code == 200, response.text


async def upload_required_documents(client: AsyncClient, seed: SeedData, auth_headers, reservation_id: int) -> list[dict]:
    documents = []
    for document_type in ("id", "address_proof"):
        response = await client.post(
            "/api/v1/documents/customer",
            json={"reservation_id": reservation_id, "document_type": document_type, **file_payload()},
            headers=auth_headers(seed.customer_open_id),
        )
        assert response.status_code == 201, response.text
        documents.append(response.json())
    return documents


async def approve_documents(client: AsyncClient, seed: SeedData, auth_headers, documents: list[dict]) -> None:
    for document in documents:
        response = await client.post(
            f"/api/v1/admin/documents/{document['id']}/review",
            json={"decision": "approve"},
            headers=auth_headers(seed.admin_open_id),
        )
        assert response.status_code == 200, response.text
