"""
Integration tests de creación y consulta de reservaciones.

- El slot se reserva con un UPDATE condicional: un segundo cliente recibe 409
- Validaciones de fechas (rango, pasado, dentro del slot)
- Visibilidad: solo el cliente dueño o un admin ven el detalle
"""

from datetime import date, timedelta

from app.infrastructure.db import tables
from tests.helpers import SLOT_NIGHTS, SLOT_PRICE_PER_NIGHT, create_reservation, fetch_row, fetch_rows


def _body(seed, start=None, end=None) -> dict:
    return {
        "availability_id": seed.slot_id,
        "start_date": (start or seed.slot_start).isoformat(),
        "end_date": (end or seed.slot_end).isoformat(),
    }


class TestCreateReservation:
    async def test_create_books_slot(self, client, seed, auth_headers, sessionmaker):
        reservation = await create_reservation(client, seed, auth_headers)

        assert reservation["status"] == "created"
        assert reservation["customer_id"] == seed.customer_id
        assert reservation["cotista_id"] == seed.cotista_id
        assert reservation["development_id"] == seed.development_id
        assert reservation["total_price"] == SLOT_NIGHTS * SLOT_PRICE_PER_NIGHT
        assert reservation["currency"] == "usd"

        slot = await fetch_row(sessionmaker, tables.cotista_availability, seed.slot_id)
        assert slot["is_booked"] is True

        notes = await fetch_rows(sessionmaker, tables.audit_notes, entity_type="reservation")
        assert [n["action"] for n in notes] == ["created"]

    async def test_second_booking_of_same_slot_conflicts(self, client, seed, auth_headers, sessionmaker):
        await create_reservation(client, seed, auth_headers)

        response = await client.post(
            "/api/v1/reservations", json=_body(seed), headers=auth_headers(seed.other_customer_open_id)
        )

        assert response.status_code == 409
        assert len(await fetch_rows(sessionmaker, tables.reservations)) == 1

    async def test_cotista_cannot_book_own_slot(self, client, seed, auth_headers):
        response = await client.post("/api/v1/reservations", json=_body(seed), headers=auth_headers(seed.cotista_open_id))
        assert response.status_code == 400

    async def test_dates_outside_slot(self, client, seed, auth_headers, sessionmaker):
        response = await client.post(
            "/api/v1/reservations",
            json=_body(seed, end=seed.slot_end + timedelta(days=1)),
            headers=auth_headers(seed.customer_open_id),
        )
        assert response.status_code == 400
        slot = await fetch_row(sessionmaker, tables.cotista_availability, seed.slot_id)
        assert slot["is_booked"] is False

    async def test_start_must_precede_end(self, client, seed, auth_headers):
        response = await client.post(
            "/api/v1/reservations",
            json=_body(seed, start=seed.slot_end, end=seed.slot_start),
            headers=auth_headers(seed.customer_open_id),
        )
        assert response.status_code == 422

    async def test_past_start_date(self, client, seed, auth_headers):
        yesterday = date.today() - timedelta(days=1)
        response = await client.post(
            "/api/v1/reservations",
            json=_body(seed, start=yesterday, end=yesterday + timedelta(days=2)),
            headers=auth_headers(seed.customer_open_id),
        )
        assert response.status_code == 400

    async def test_unknown_slot(self, client, seed, auth_headers):
        body = _body(seed)
        body["availability_id"] = 999
        response = await client.post("/api/v1/reservations", json=body, headers=auth_headers(seed.customer_open_id))
        assert response.status_code == 404


class TestReservationQueries:
    async def test_mine_lists_only_own(self, client, seed, auth_headers):
        reservation = await create_reservation(client, seed, auth_headers)

        mine = (await client.get("/api/v1/reservations/mine", headers=auth_headers(seed.customer_open_id))).json()
        others = (
            await client.get("/api/v1/reservations/mine", headers=auth_headers(seed.other_customer_open_id))
        ).json()

        assert [r["id"] for r in mine] == [reservation["id"]]
        assert others == []

    async def test_detail_visibility(self, client, seed, auth_headers):
        reservation = await create_reservation(client, seed, auth_headers)
        path = f"/api/v1/reservations/{reservation['id']}"

        own = await client.get(path, headers=auth_headers(seed.customer_open_id))
        admin = await client.get(path, headers=auth_headers(seed.admin_open_id))
        stranger = await client.get(path, headers=auth_headers(seed.other_customer_open_id))

        assert own.status_code == 200
        assert own.json()["reservation"]["id"] == reservation["id"]
        assert own.json()["documents"] == []
        assert own.json()["voucher"] is None
        assert admin.status_code == 200
        assert stranger.status_code == 403

    async def test_cotista_sees_reservations_on_their_slots(self, client, seed, auth_headers):
        reservation = await create_reservation(client, seed, auth_headers)

        response = await client.get("/api/v1/cotista/reservations", headers=auth_headers(seed.cotista_open_id))
        dashboard = await client.get("/api/v1/cotista/dashboard", headers=auth_headers(seed.cotista_open_id))

        assert [r["id"] for r in response.json()] == [reservation["id"]]
        assert dashboard.json()["total_reservations"] == 1
