"""
Integration tests del back-office: panel, disputas y alertas de fraude.
"""

from app.infrastructure.db import tables
from tests.helpers import (
    create_reservation,
    fetch_row,
    fetch_rows,
    pay_reservation,
    upload_required_documents,
)


async def _open_dispute(client, seed, auth_headers, reservation_id: int, open_id: str, reason: str = "Listing mismatch"):
    return await client.post(
        f"/api/v1/reservations/{reservation_id}/disputes",
        json={"reason": reason, "description": "The unit differs from the photos."},
        headers=auth_headers(open_id),
    )


class TestDashboard:
    async def test_empty_backlog(self, client, seed, auth_headers):
        response = await client.get("/api/v1/admin/dashboard", headers=auth_headers(seed.admin_open_id))

        assert response.status_code == 200
        assert response.json() == {
            "pending_documents": 0,
            "pending_cotistas": 0,
            "pending_vouchers": 0,
            "open_disputes": 0,
            "fraud_flags": 0,
        }

    async def test_counts_follow_activity(self, client, seed, auth_headers):
        admin = auth_headers(seed.admin_open_id)
        reservation = await create_reservation(client, seed, auth_headers)
        await pay_reservation(client, seed, auth_headers, reservation)
        await upload_required_documents(client, seed, auth_headers, reservation["id"])
        await _open_dispute(client, seed, auth_headers, reservation["id"], seed.customer_open_id)
        await client.post(
            "/api/v1/admin/fraud-flags",
            json={"user_id": seed.other_customer_id, "flag_type": "chargeback"},
            headers=admin,
        )

        response = await client.get("/api/v1/admin/dashboard", headers=admin)

        assert response.json() == {
            "pending_documents": 2,
            "pending_cotistas": 0,
            "pending_vouchers": 0,
            "open_disputes": 1,
            "fraud_flags": 1,
        }


class TestDisputes:
    async def test_open_and_resolve_resumes_previous_status(self, client, seed, auth_headers, sessionmaker):
        reservation = await create_reservation(client, seed, auth_headers)
        await pay_reservation(client, seed, auth_headers, reservation)

        opened = await _open_dispute(client, seed, auth_headers, reservation["id"], seed.customer_open_id)

        assert opened.status_code == 201
        dispute = opened.json()
        assert dispute["status"] == "open"
        assert dispute["reported_by"] == seed.customer_id
        assert dispute["reported_against"] == seed.cotista_user_id
        stored = await fetch_row(sessionmaker, tables.reservations, reservation["id"])
        assert stored["status"] == "in_dispute"
        assert stored["pre_dispute_status"] == "paid"

        listed = await client.get("/api/v1/admin/disputes/open", headers=auth_headers(seed.admin_open_id))
        assert [d["id"] for d in listed.json()] == [dispute["id"]]

        resolved = await client.post(
            f"/api/v1/admin/disputes/{dispute['id']}/resolve",
            json={"resolution": "Photos updated, guest agreed"},
            headers=auth_headers(seed.admin_open_id),
        )

        assert resolved.status_code == 200
        assert resolved.json()["status"] == "resolved"
        assert resolved.json()["resolved_by"] == seed.admin_id
        stored = await fetch_row(sessionmaker, tables.reservations, reservation["id"])
        assert stored["status"] == "paid"
        assert stored["pre_dispute_status"] is None

    async def test_reservation_stays_in_dispute_while_another_is_open(
        self, client, seed, auth_headers, sessionmaker
    ):
        reservation = await create_reservation(client, seed, auth_headers)
        first = (await _open_dispute(client, seed, auth_headers, reservation["id"], seed.customer_open_id)).json()
        second = await _open_dispute(
            client, seed, auth_headers, reservation["id"], seed.cotista_open_id, reason="Guest unreachable"
        )
        assert second.json()["reported_against"] == seed.customer_id

        await client.post(
            f"/api/v1/admin/disputes/{first['id']}/resolve",
            json={"resolution": "done", "status": "closed"},
            headers=auth_headers(seed.admin_open_id),
        )

        stored = await fetch_row(sessionmaker, tables.reservations, reservation["id"])
        assert stored["status"] == "in_dispute"

    async def test_strangers_cannot_open_disputes(self, client, seed, auth_headers):
        reservation = await create_reservation(client, seed, auth_headers)

        response = await _open_dispute(client, seed, auth_headers, reservation["id"], seed.other_customer_open_id)

        assert response.status_code == 403

    async def test_refund_from_dispute(self, client, seed, auth_headers, sessionmaker, stripe_stub):
        reservation = await create_reservation(client, seed, auth_headers)
        await pay_reservation(client, seed, auth_headers, reservation)
        await _open_dispute(client, seed, auth_headers, reservation["id"], seed.customer_open_id)

        response = await client.post(
            f"/api/v1/admin/reservations/{reservation['id']}/refund",
            json={"reason": "Dispute upheld"},
            headers=auth_headers(seed.admin_open_id),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "refunded"
        assert response.json()["refund_amount"] == reservation["total_price"]
        assert len(stripe_stub.refunds) == 1

    async def test_resolving_twice_conflicts(self, client, seed, auth_headers):
        reservation = await create_reservation(client, seed, auth_headers)
        dispute = (await _open_dispute(client, seed, auth_headers, reservation["id"], seed.customer_open_id)).json()
        path = f"/api/v1/admin/disputes/{dispute['id']}/resolve"

        await client.post(path, json={"resolution": "ok"}, headers=auth_headers(seed.admin_open_id))
        again = await client.post(path, json={"resolution": "ok"}, headers=auth_headers(seed.admin_open_id))

        assert again.status_code == 409


class TestFraudFlags:
    async def test_create_list_and_resolve(self, client, seed, auth_headers, sessionmaker):
        admin = auth_headers(seed.admin_open_id)

        created = await client.post(
            "/api/v1/admin/fraud-flags",
            json={
                "user_id": seed.other_customer_id,
                "flag_type": "stolen_card",
                "severity": "high",
                "description": "Issuer reported the card as stolen",
            },
            headers=admin,
        )

        assert created.status_code == 201
        flag = created.json()
        assert flag["status"] == "open"
        assert flag["severity"] == "high"

        investigating = await client.post(
            f"/api/v1/admin/fraud-flags/{flag['id']}/resolve", json={"status": "investigating"}, headers=admin
        )
        assert investigating.json()["status"] == "investigating"
        assert investigating.json()["resolved_by"] is None
        assert [f["id"] for f in (await client.get("/api/v1/admin/fraud-flags", headers=admin)).json()] == [
            flag["id"]
        ]

        resolved = await client.post(
            f"/api/v1/admin/fraud-flags/{flag['id']}/resolve",
            json={"status": "false_positive", "notes": "Card owner confirmed"},
            headers=admin,
        )
        assert resolved.json()["status"] == "false_positive"
        assert resolved.json()["resolved_by"] == seed.admin_id
        assert (await client.get("/api/v1/admin/fraud-flags", headers=admin)).json() == []

        notes = await fetch_rows(sessionmaker, tables.audit_notes, entity_type="fraud_flag")
        assert [n["action"] for n in notes] == [
            "fraud_flag_created",
            "fraud_flag_investigating",
            "fraud_flag_false_positive",
        ]

    async def test_unknown_user(self, client, seed, auth_headers):
        response = await client.post(
            "/api/v1/admin/fraud-flags",
            json={"user_id": 999, "flag_type": "chargeback"},
            headers=auth_headers(seed.admin_open_id),
        )
        assert response.status_code == 404

    async def test_cannot_reopen(self, client, seed, auth_headers):
        admin = auth_headers(seed.admin_open_id)
        flag = (
            await client.post(
                "/api/v1/admin/fraud-flags", json={"user_id": seed.customer_id, "flag_type": "x"}, headers=admin
            )
        ).json()

        response = await client.post(
            f"/api/v1/admin/fraud-flags/{flag['id']}/resolve", json={"status": "open"}, headers=admin
        )

        assert response.status_code == 400
