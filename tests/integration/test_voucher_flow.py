"""
Integration tests del recorrido completo hasta ``completed`` y de las
salidas administrativas (cancelación y reembolso).
"""

import asyncio

from app.infrastructure.db import tables
from tests.helpers import (
    approve_documents,
    create_reservation,
    fetch_row,
    fetch_rows,
    file_payload,
    insert_row,
    insert_user,
    pay_reservation,
    upload_required_documents,
)


async def _voucher_pending(client, seed, auth_headers) -> dict:
    reservation = await create_reservation(client, seed, auth_headers)
    await pay_reservation(client, seed, auth_headers, reservation)
    documents = await upload_required_documents(client, seed, auth_headers, reservation["id"])
    await approve_documents(client, seed, auth_headers, documents)
    return reservation


async def _upload_voucher(client, seed, auth_headers, reservation_id: int, open_id: str | None = None):
    return await client.post(
        f"/api/v1/cotista/reservations/{reservation_id}/voucher",
        json={**file_payload(name="voucher.pdf"), "notes": "Check-in from 14h"},
        headers=auth_headers(open_id or seed.cotista_open_id),
    )


async def _admin_post(client, seed, auth_headers, path: str, body: dict | None = None):
    return await client.post(f"/api/v1/admin{path}", json=body or {}, headers=auth_headers(seed.admin_open_id))


async def _status(sessionmaker, reservation_id: int) -> str:
    return (await fetch_row(sessionmaker, tables.reservations, reservation_id))["status"]


class TestVoucherFlow:
    async def test_full_flow_to_completed(self, client, seed, auth_headers, sessionmaker, storage):
        reservation = await _voucher_pending(client, seed, auth_headers)
        rid = reservation["id"]

        uploaded = await _upload_voucher(client, seed, auth_headers, rid)
        assert uploaded.status_code == 200, uploaded.text
        voucher = uploaded.json()
        assert voucher["status"] == "sent"
        assert voucher["notes"] == "Check-in from 14h"
        assert voucher["file_url"].startswith(f"memory://uploads/vouchers/{seed.cotista_user_id}/")
        assert await _status(sessionmaker, rid) == "voucher_sent"

        pending = await client.get("/api/v1/admin/vouchers/pending", headers=auth_headers(seed.admin_open_id))
        assert [v["id"] for v in pending.json()] == [voucher["id"]]

        started = await _admin_post(client, seed, auth_headers, f"/vouchers/{voucher['id']}/start-review")
        assert started.json()["status"] == "under_review"
        assert await _status(sessionmaker, rid) == "voucher_under_review"

        approved = await _admin_post(
            client, seed, auth_headers, f"/vouchers/{voucher['id']}/review", {"decision": "approve"}
        )
        assert approved.json()["status"] == "approved"
        assert await _status(sessionmaker, rid) == "voucher_under_review"

        delivered = await _admin_post(client, seed, auth_headers, f"/vouchers/{voucher['id']}/deliver")
        assert delivered.json()["status"] == "delivered"
        assert delivered.json()["delivered_at"] is not None
        assert await _status(sessionmaker, rid) == "voucher_delivered"

        completed = await _admin_post(
            client, seed, auth_headers, f"/reservations/{rid}/complete", {"notes": "Guest checked out"}
        )
        assert completed.status_code == 200
        assert completed.json()["status"] == "completed"

        actions = [n["action"] for n in await fetch_rows(sessionmaker, tables.audit_notes, entity_type="reservation")]
        assert actions[0] == "created"
        assert actions[-1] == "transition:stay_completed"

    async def test_rejected_voucher_can_be_resent(self, client, seed, auth_headers, sessionmaker):
        reservation = await _voucher_pending(client, seed, auth_headers)
        rid = reservation["id"]
        voucher = (await _upload_voucher(client, seed, auth_headers, rid)).json()
        await _admin_post(client, seed, auth_headers, f"/vouchers/{voucher['id']}/start-review")

        rejected = await _admin_post(
            client,
            seed,
            auth_headers,
            f"/vouchers/{voucher['id']}/review",
            {"decision": "reject", "rejection_reason": "Wrong dates"},
        )
        assert rejected.json()["status"] == "rejected"
        assert await _status(sessionmaker, rid) == "voucher_rejected"

        resent = await _upload_voucher(client, seed, auth_headers, rid)
        assert resent.json()["status"] == "sent"
        assert resent.json()["rejection_reason"] is None
        assert await _status(sessionmaker, rid) == "voucher_sent"

    async def test_deliver_before_approval_conflicts(self, client, seed, auth_headers, sessionmaker):
        reservation = await _voucher_pending(client, seed, auth_headers)
        voucher = (await _upload_voucher(client, seed, auth_headers, reservation["id"])).json()

        response = await _admin_post(client, seed, auth_headers, f"/vouchers/{voucher['id']}/deliver")

        assert response.status_code == 409
        assert await _status(sessionmaker, reservation["id"]) == "voucher_sent"

    async def test_complete_requires_delivered_voucher(self, client, seed, auth_headers):
        reservation = await _voucher_pending(client, seed, auth_headers)

        response = await _admin_post(client, seed, auth_headers, f"/reservations/{reservation['id']}/complete")

        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_TRANSITION"

    async def test_only_the_reservation_cotista_uploads(self, client, seed, auth_headers, db_session):
        reservation = await _voucher_pending(client, seed, auth_headers)
        intruder_id = await insert_user(db_session, "cotista-2", role="cotista")
        await insert_row(
            db_session,
            tables.cotistas,
            user_id=intruder_id,
            development_id=seed.development_id,
            terms_accepted=True,
            status="approved",
        )
        await db_session.commit()

        response = await _upload_voucher(client, seed, auth_headers, reservation["id"], open_id="cotista-2")

        assert response.status_code == 403


class TestAdminExits:
    async def test_cancel_releases_slot(self, client, seed, auth_headers, sessionmaker):
        reservation = await create_reservation(client, seed, auth_headers)

        response = await _admin_post(
            client, seed, auth_headers, f"/reservations/{reservation['id']}/cancel", {"reason": "Owner request"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["cancellation_reason"] == "Owner request"
        slot = await fetch_row(sessionmaker, tables.cotista_availability, seed.slot_id)
        assert slot["is_booked"] is False

        again = await _admin_post(
            client, seed, auth_headers, f"/reservations/{reservation['id']}/cancel", {"reason": "again"}
        )
        assert again.status_code == 409

    async def test_refund_calls_stripe_and_releases_slot(self, client, seed, auth_headers, sessionmaker, stripe_stub):
        reservation = await create_reservation(client, seed, auth_headers)
        await pay_reservation(client, seed, auth_headers, reservation)

        response = await _admin_post(
            client,
            seed,
            auth_headers,
            f"/reservations/{reservation['id']}/refund",
            {"reason": "Guest cancelled", "amount": 20000},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "refunded"
        assert body["refund_amount"] == 20000
        assert body["refunded_at"] is not None
        assert [r.amount for r in stripe_stub.refunds] == [20000]

        payments = await fetch_rows(sessionmaker, tables.payments, reservation_id=reservation["id"])
        assert [p["status"] for p in payments] == ["refunded"]
        slot = await fetch_row(sessionmaker, tables.cotista_availability, seed.slot_id)
        assert slot["is_booked"] is False

    async def test_refund_above_paid_amount(self, client, seed, auth_headers, stripe_stub):
        reservation = await create_reservation(client, seed, auth_headers)
        await pay_reservation(client, seed, auth_headers, reservation)

        response = await _admin_post(
            client,
            seed,
            auth_headers,
            f"/reservations/{reservation['id']}/refund",
            {"reason": "too much", "amount": reservation["total_price"] + 1},
        )

        assert response.status_code == 400
        assert stripe_stub.refunds == []

    async def test_refund_failure_leaves_reservation_untouched(
        self, client, seed, auth_headers, sessionmaker, stripe_stub
    ):
        reservation = await create_reservation(client, seed, auth_headers)
        await pay_reservation(client, seed, auth_headers, reservation)
        stripe_stub.unavailable = True

        response = await _admin_post(
            client, seed, auth_headers, f"/reservations/{reservation['id']}/refund", {"reason": "x"}
        )

        assert response.status_code == 502
        assert await _status(sessionmaker, reservation["id"]) == "paid"
        payments = await fetch_rows(sessionmaker, tables.payments, reservation_id=reservation["id"])
        assert [p["status"] for p in payments] == ["completed"]

        stripe_stub.unavailable = False
        retried = await _admin_post(
            client, seed, auth_headers, f"/reservations/{reservation['id']}/refund", {"reason": "x"}
        )
        assert retried.status_code == 200
        assert len(stripe_stub.refunds) == 1

    async def test_concurrent_refunds_pay_out_once(self, client, seed, auth_headers, sessionmaker, stripe_stub):
        reservation = await create_reservation(client, seed, auth_headers)
        await pay_reservation(client, seed, auth_headers, reservation)
        path = f"/reservations/{reservation['id']}/refund"

        responses = await asyncio.gather(
            _admin_post(client, seed, auth_headers, path, {"reason": "first", "amount": 10000}),
            _admin_post(client, seed, auth_headers, path, {"reason": "second", "amount": 10000}),
        )

        assert sorted(r.status_code for r in responses) == [200, 409]
        assert [r.amount for r in stripe_stub.refunds] == [10000]
        assert await _status(sessionmaker, reservation["id"]) == "refunded"
        payments = await fetch_rows(sessionmaker, tables.payments, reservation_id=reservation["id"])
        assert [p["status"] for p in payments] == ["refunded"]

    async def test_refund_without_payment(self, client, seed, auth_headers, stripe_stub):
        reservation = await create_reservation(client, seed, auth_headers)

        response = await _admin_post(
            client, seed, auth_headers, f"/reservations/{reservation['id']}/refund", {"reason": "x"}
        )

        assert response.status_code == 409
        assert stripe_stub.refunds == []
