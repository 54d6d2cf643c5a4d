"""
Integration tests del portal del cotista.

- Registro (con y sin documentos previos) y cambio de rol
- Revisión administrativa del perfil
- Slots de disponibilidad: alta, solapamiento, publicación
- Panel del cotista
"""

from datetime import timedelta

from app.infrastructure.db import tables
from tests.helpers import create_reservation, fetch_row, file_payload

COTISTA_DOCUMENT_TYPES = ("identity", "address_proof", "ownership_proof")


async def _upload_cotista_documents(client, headers) -> dict[str, str]:
    keys = {}
    for document_type in COTISTA_DOCUMENT_TYPES:
        response = await client.post(
            "/api/v1/documents/cotista",
            json={"document_type": document_type, **file_payload(name=f"{document_type}.pdf")},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        keys[document_type] = response.json()["file_key"]
    return keys


async def _register(client, seed, headers, **extra):
    return await client.post(
        "/api/v1/cotista/register",
        json={"development_id": seed.development_id, "terms_accepted": True, **extra},
        headers=headers,
    )


class TestRegistration:
    async def test_register_with_documents_goes_to_review(self, client, seed, auth_headers, sessionmaker):
        headers = auth_headers(seed.other_customer_open_id)
        keys = await _upload_cotista_documents(client, headers)

        response = await _register(
            client, seed, headers, personal_data={"full_name": "Ana Souza"}, document_keys=keys
        )

        assert response.status_code == 201
        cotista = response.json()
        assert cotista["status"] == "under_review"
        assert cotista["identity_document_key"] == keys["identity"]
        assert cotista["terms_accepted_at"] is not None

        user = await fetch_row(sessionmaker, tables.users, seed.other_customer_id)
        assert user["role"] == "cotista"

        profile = await client.get("/api/v1/cotista/profile", headers=headers)
        assert profile.json()["id"] == cotista["id"]

    async def test_register_then_upload_documents(self, client, seed, auth_headers, sessionmaker):
        headers = auth_headers(seed.other_customer_open_id)

        registered = await _register(client, seed, headers)
        assert registered.json()["status"] == "registered"

        await _upload_cotista_documents(client, headers)

        stored = await fetch_row(sessionmaker, tables.cotistas, registered.json()["id"])
        assert stored["status"] == "under_review"
        assert stored["ownership_proof_key"].startswith(f"cotista-documents/{seed.other_customer_id}/")

    async def test_uploaded_file_name_is_sanitized(self, client, seed, auth_headers):
        response = await client.post(
            "/api/v1/documents/cotista",
            json={"document_type": "identity", **file_payload(name="my id (front).pdf")},
            headers=auth_headers(seed.other_customer_open_id),
        )

        assert response.status_code == 201
        uploaded = response.json()
        assert uploaded["file_name"] == "my_id__front_.pdf"
        assert uploaded["file_key"].endswith("-my_id__front_.pdf")

    async def test_duplicate_registration_conflicts(self, client, seed, auth_headers):
        response = await _register(client, seed, auth_headers(seed.cotista_open_id))
        assert response.status_code == 409

    async def test_terms_must_be_accepted(self, client, seed, auth_headers):
        response = await client.post(
            "/api/v1/cotista/register",
            json={"development_id": seed.development_id, "terms_accepted": False},
            headers=auth_headers(seed.other_customer_open_id),
        )
        assert response.status_code == 400

    async def test_foreign_document_key_is_rejected(self, client, seed, auth_headers):
        response = await _register(
            client,
            seed,
            auth_headers(seed.other_customer_open_id),
            document_keys={"identity": f"cotista-documents/{seed.customer_id}/1-abc-id.pdf"},
        )
        assert response.status_code == 400

    async def test_unknown_development(self, client, seed, auth_headers):
        response = await client.post(
            "/api/v1/cotista/register",
            json={"development_id": 999, "terms_accepted": True},
            headers=auth_headers(seed.other_customer_open_id),
        )
        assert response.status_code == 404


class TestProfileReview:
    async def test_admin_approves_profile(self, client, seed, auth_headers):
        headers = auth_headers(seed.other_customer_open_id)
        keys = await _upload_cotista_documents(client, headers)
        cotista = (await _register(client, seed, headers, document_keys=keys)).json()
        admin = auth_headers(seed.admin_open_id)

        pending = await client.get("/api/v1/admin/cotistas/pending", headers=admin)
        assert [c["id"] for c in pending.json()] == [cotista["id"]]

        response = await client.post(
            f"/api/v1/admin/cotistas/{cotista['id']}/review", json={"decision": "approve"}, headers=admin
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        assert (await client.get("/api/v1/admin/cotistas/pending", headers=admin)).json() == []

    async def test_review_outside_review_conflicts(self, client, seed, auth_headers):
        response = await client.post(
            f"/api/v1/admin/cotistas/{seed.cotista_id}/review",
            json={"decision": "reject", "rejection_reason": "late"},
            headers=auth_headers(seed.admin_open_id),
        )
        assert response.status_code == 409


class TestAvailability:
    async def test_add_and_publish_slot(self, client, seed, auth_headers):
        headers = auth_headers(seed.cotista_open_id)
        start = seed.slot_end + timedelta(days=5)

        created = await client.post(
            "/api/v1/cotista/availability",
            json={
                "start_date": start.isoformat(),
                "end_date": (start + timedelta(days=7)).isoformat(),
                "price_per_night": 4200,
            },
            headers=headers,
        )

        assert created.status_code == 201
        slot = created.json()
        assert slot["is_published"] is False
        assert slot["is_booked"] is False

        published = await client.post(
            f"/api/v1/cotista/availability/{slot['id']}/publish", json={"published": True}, headers=headers
        )
        assert published.json()["is_published"] is True

        listed = await client.get("/api/v1/cotista/availability", headers=headers)
        assert {s["id"] for s in listed.json()} == {seed.slot_id, slot["id"]}

    async def test_overlapping_slot_conflicts(self, client, seed, auth_headers):
        response = await client.post(
            "/api/v1/cotista/availability",
            json={
                "start_date": (seed.slot_start + timedelta(days=2)).isoformat(),
                "end_date": (seed.slot_end + timedelta(days=2)).isoformat(),
                "price_per_night": 4200,
            },
            headers=auth_headers(seed.cotista_open_id),
        )
        assert response.status_code == 409

    async def test_booked_slot_cannot_be_unpublished(self, client, seed, auth_headers):
        await create_reservation(client, seed, auth_headers)

        response = await client.post(
            f"/api/v1/cotista/availability/{seed.slot_id}/publish",
            json={"published": False},
            headers=auth_headers(seed.cotista_open_id),
        )
        assert response.status_code == 409

    async def test_customers_have_no_cotista_portal(self, client, seed, auth_headers):
        response = await client.get("/api/v1/cotista/availability", headers=auth_headers(seed.customer_open_id))
        assert response.status_code == 403


class TestDashboard:
    async def test_counts(self, client, seed, auth_headers):
        await create_reservation(client, seed, auth_headers)

        response = await client.get("/api/v1/cotista/dashboard", headers=auth_headers(seed.cotista_open_id))

        assert response.json() == {"total_reservations": 1, "pending_vouchers": 0, "active_reservations": 1}
