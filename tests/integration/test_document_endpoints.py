"""
Integration tests de documentos del cliente y su revisión administrativa.

- Validación del archivo antes de tocar almacenamiento o base de datos
- documents_pending -> documents_under_review al completar los tipos obligatorios
- Aprobación parcial no avanza; la última aprobación crea el voucher
- Un rechazo devuelve la reservación a documents_rejected
"""

import asyncio

from app.infrastructure.db import tables
from tests.helpers import (
    approve_documents,
    create_reservation,
    fetch_row,
    fetch_rows,
    file_payload,
    pay_reservation,
    upload_required_documents,
)


async def _paid_reservation(client, seed, auth_headers) -> dict:
    reservation = await create_reservation(client, seed, auth_headers)
    await pay_reservation(client, seed, auth_headers, reservation)
    return reservation


async def _upload(client, seed, auth_headers, reservation_id, document_type="id", **file_kwargs):
    return await client.post(
        "/api/v1/documents/customer",
        json={"reservation_id": reservation_id, "document_type": document_type, **file_payload(**file_kwargs)},
        headers=auth_headers(seed.customer_open_id),
    )


class TestUpload:
    async def test_first_document_moves_to_documents_pending(self, client, seed, auth_headers, storage, sessionmaker):
        reservation = await _paid_reservation(client, seed, auth_headers)

        response = await _upload(client, seed, auth_headers, reservation["id"], name="my id (front).pdf")

        assert response.status_code == 201
        document = response.json()
        assert document["status"] == "under_review"
        assert document["document_type"] == "id"
        assert document["file_key"].startswith(f"customer-documents/{seed.customer_id}/")
        assert document["file_key"].endswith("-my_id__front_.pdf")
        assert document["file_url"] == f"memory://uploads/{document['file_key']}"
        assert storage.objects[document["file_key"]].content_type == "application/pdf"

        stored = await fetch_row(sessionmaker, tables.reservations, reservation["id"])
        assert stored["status"] == "documents_pending"

    async def test_all_required_types_submit_for_review(self, client, seed, auth_headers, sessionmaker):
        reservation = await _paid_reservation(client, seed, auth_headers)

        await upload_required_documents(client, seed, auth_headers, reservation["id"])

        stored = await fetch_row(sessionmaker, tables.reservations, reservation["id"])
        assert stored["status"] == "documents_under_review"

    async def test_disallowed_type_writes_nothing(self, client, seed, auth_headers, storage, sessionmaker):
        reservation = await _paid_reservation(client, seed, auth_headers)

        response = await _upload(
            client,
            seed,
            auth_headers,
            reservation["id"],
            content=b"MZ\x90\x00",
            content_type="application/x-msdownload",
            name="setup.exe",
        )

        assert response.status_code == 400
        assert "File type not allowed" in response.json()["detail"]
        assert storage.objects == {}
        assert await fetch_rows(sessionmaker, tables.documents) == []

    async def test_oversized_file_is_rejected(self, client, seed, auth_headers, settings, storage):
        reservation = await _paid_reservation(client, seed, auth_headers)
        too_big = b"0" * (settings.max_document_size_mb * 1024 * 1024 + 1)

        response = await _upload(client, seed, auth_headers, reservation["id"], content=too_big)

        assert response.status_code == 400
        assert "File too large" in response.json()["detail"]
        assert storage.objects == {}

    async def test_upload_before_payment_conflicts(self, client, seed, auth_headers, storage):
        reservation = await create_reservation(client, seed, auth_headers)

        response = await _upload(client, seed, auth_headers, reservation["id"])

        assert response.status_code == 409
        assert storage.objects == {}

    async def test_other_customer_cannot_upload(self, client, seed, auth_headers):
        reservation = await _paid_reservation(client, seed, auth_headers)

        response = await client.post(
            "/api/v1/documents/customer",
            json={"reservation_id": reservation["id"], "document_type": "id", **file_payload()},
            headers=auth_headers(seed.other_customer_open_id),
        )

        assert response.status_code == 403

    async def test_invalid_base64_is_unprocessable(self, client, seed, auth_headers):
        reservation = await _paid_reservation(client, seed, auth_headers)
        body = {"reservation_id": reservation["id"], "document_type": "id", **file_payload()}
        body["file_data"] = "not base64!!"

        response = await client.post(
            "/api/v1/documents/customer", json=body, headers=auth_headers(seed.customer_open_id)
        )

        assert response.status_code == 422

    async def test_list_documents(self, client, seed, auth_headers):
        reservation = await _paid_reservation(client, seed, auth_headers)
        await upload_required_documents(client, seed, auth_headers, reservation["id"])
        path = f"/api/v1/documents/reservation/{reservation['id']}"

        own = await client.get(path, headers=auth_headers(seed.customer_open_id))
        stranger = await client.get(path, headers=auth_headers(seed.other_customer_open_id))

        assert sorted(d["document_type"] for d in own.json()) == ["address_proof", "id"]
        assert stranger.status_code == 403


class TestReview:
    async def test_partial_approval_keeps_review_open(self, client, seed, auth_headers, sessionmaker):
        reservation = await _paid_reservation(client, seed, auth_headers)
        documents = await upload_required_documents(client, seed, auth_headers, reservation["id"])

        await approve_documents(client, seed, auth_headers, documents[:1])

        stored = await fetch_row(sessionmaker, tables.reservations, reservation["id"])
        assert stored["status"] == "documents_under_review"
        assert await fetch_rows(sessionmaker, tables.vouchers) == []

    async def test_last_approval_requests_voucher(self, client, seed, auth_headers, sessionmaker):
        reservation = await _paid_reservation(client, seed, auth_headers)
        documents = await upload_required_documents(client, seed, auth_headers, reservation["id"])

        await approve_documents(client, seed, auth_headers, documents)

        stored = await fetch_row(sessionmaker, tables.reservations, reservation["id"])
        assert stored["status"] == "voucher_pending"
        vouchers = await fetch_rows(sessionmaker, tables.vouchers, reservation_id=reservation["id"])
        assert len(vouchers) == 1
        assert vouchers[0]["status"] == "pending"
        assert vouchers[0]["cotista_id"] == seed.cotista_id
        assert vouchers[0]["deadline"] is not None

        reviewed = await fetch_rows(sessionmaker, tables.documents, reservation_id=reservation["id"])
        assert {d["status"] for d in reviewed} == {"approved"}
        assert {d["reviewed_by"] for d in reviewed} == {seed.admin_id}

    async def test_concurrent_last_approvals_request_voucher(self, client, seed, auth_headers, sessionmaker):
        reservation = await _paid_reservation(client, seed, auth_headers)
        documents = await upload_required_documents(client, seed, auth_headers, reservation["id"])

        responses = await asyncio.gather(
            *(
                client.post(
                    f"/api/v1/admin/documents/{document['id']}/review",
                    json={"decision": "approve"},
                    headers=auth_headers(seed.admin_open_id),
                )
                for document in documents
            )
        )

        assert [r.status_code for r in responses] == [200, 200]
        stored = await fetch_row(sessionmaker, tables.reservations, reservation["id"])
        assert stored["status"] == "voucher_pending"
        assert len(await fetch_rows(sessionmaker, tables.vouchers, reservation_id=reservation["id"])) == 1

    async def test_rejection_and_resubmission(self, client, seed, auth_headers, sessionmaker):
        reservation = await _paid_reservation(client, seed, auth_headers)
        documents = await upload_required_documents(client, seed, auth_headers, reservation["id"])

        response = await client.post(
            f"/api/v1/admin/documents/{documents[0]['id']}/review",
            json={"decision": "reject", "rejection_reason": "Photo is blurry"},
            headers=auth_headers(seed.admin_open_id),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert response.json()["rejection_reason"] == "Photo is blurry"
        stored = await fetch_row(sessionmaker, tables.reservations, reservation["id"])
        assert stored["status"] == "documents_rejected"

        resubmitted = await _upload(client, seed, auth_headers, reservation["id"], document_type="id")
        assert resubmitted.status_code == 201
        stored = await fetch_row(sessionmaker, tables.reservations, reservation["id"])
        assert stored["status"] == "documents_under_review"

    async def test_reject_requires_reason(self, client, seed, auth_headers):
        reservation = await _paid_reservation(client, seed, auth_headers)
        documents = await upload_required_documents(client, seed, auth_headers, reservation["id"])

        response = await client.post(
            f"/api/v1/admin/documents/{documents[0]['id']}/review",
            json={"decision": "reject"},
            headers=auth_headers(seed.admin_open_id),
        )

        assert response.status_code == 422

    async def test_reviewing_twice_conflicts(self, client, seed, auth_headers):
        reservation = await _paid_reservation(client, seed, auth_headers)
        documents = await upload_required_documents(client, seed, auth_headers, reservation["id"])
        await approve_documents(client, seed, auth_headers, documents[:1])

        response = await client.post(
            f"/api/v1/admin/documents/{documents[0]['id']}/review",
            json={"decision": "approve"},
            headers=auth_headers(seed.admin_open_id),
        )

        assert response.status_code == 409

    async def test_pending_queue(self, client, seed, auth_headers):
        reservation = await _paid_reservation(client, seed, auth_headers)
        documents = await upload_required_documents(client, seed, auth_headers, reservation["id"])
        await approve_documents(client, seed, auth_headers, documents[:1])

        response = await client.get("/api/v1/admin/documents/pending", headers=auth_headers(seed.admin_open_id))

        assert [d["id"] for d in response.json()] == [documents[1]["id"]]
