from datetime import datetime, timedelta, timezone

import pytest

from voucher_pool.core.database import get_db
from voucher_pool.main import app
from voucher_pool.services import voucher_store


def _tomorrow():
    return (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()


def _generate(client, **overrides):
    payload = {
        "email": "a@x.com",
        "offer_name": "S1",
        "discount": 50,
        "expiry": _tomorrow(),
    }
    payload.update(overrides)
    return client.post("/api/v1/vouchers/generate", json=payload)


def test_healthcheck(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_id_is_echoed(client):
    response = client.get("/api/v1/health", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


def test_request_id_is_assigned(client):
    response = client.get("/api/v1/health")

    assert len(response.headers["X-Request-ID"]) == 32


def test_generate_validate_and_reject_second_redemption(client, customers):
    generated = _generate(client)
    assert generated.status_code == 201
    code = generated.json()["code"]
    assert len(code) == 8

    first = client.post("/api/v1/vouchers/validate", json={"code": code, "email": "a@x.com"})
    assert first.status_code == 201
    assert first.json() == {"discount": 50.0}

    second = client.post("/api/v1/vouchers/validate", json={"code": code, "email": "a@x.com"})
    assert second.status_code == 400
    assert second.json() == {"detail": "this voucher has been redeemed"}


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"discount": 0},
        {"discount": 100.5},
        {"expiry": (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()},
        {"offer_name": ""},
    ],
)
def test_generate_rejects_bad_input(client, customers, overrides):
    response = _generate(client, **overrides)

    assert response.status_code == 400


def test_generate_unknown_customer(client, customers):
    response = _generate(client, email="nobody@x.com")

    assert response.status_code == 404


def test_validate_rejects_invalid_email(client, customers):
    response = client.post("/api/v1/vouchers/validate", json={"code": "AAAAAAAA", "email": "nope"})

    assert response.status_code == 400


def test_validate_rejects_missing_fields(client, customers):
    response = client.post("/api/v1/vouchers/validate", json={"email": "a@x.com"})

    assert response.status_code == 400


def test_validate_unknown_code(client, customers):
    response = client.post("/api/v1/vouchers/validate", json={"code": "ZZZZZZZZ", "email": "a@x.com"})

    assert response.status_code == 404


def test_validate_someone_elses_voucher(client, customers):
    code = _generate(client, email="b@x.com").json()["code"]

    response = client.post("/api/v1/vouchers/validate", json={"code": code, "email": "a@x.com"})

    assert response.status_code == 404


def test_validate_expired_voucher(client, session, customers):
    voucher_store.upsert_offer_and_insert_voucher(
        session,
        customer_email="a@x.com",
        offer_name="S1",
        code="OldOldOl",
        expiry=datetime.now(timezone.utc) - timedelta(days=1),
        discount=10,
    )

    response = client.post("/api/v1/vouchers/validate", json={"code": "OldOldOl", "email": "a@x.com"})

    assert response.status_code == 500
    assert response.json() == {"detail": "voucher expired"}


def test_list_vouchers(client, customers):
    redeemed = _generate(client, offer_name="S1").json()["code"]
    active = _generate(client, offer_name="S2").json()["code"]
    _generate(client, email="b@x.com", offer_name="S3")
    client.post("/api/v1/vouchers/validate", json={"code": redeemed, "email": "a@x.com"})

    response = client.get("/api/v1/vouchers", params={"email": "a@x.com"})

    assert response.status_code == 200
    assert response.json() == [{"code": active, "offer_name": "S2"}]


def test_list_vouchers_invalid_email(client, customers):
    response = client.get("/api/v1/vouchers", params={"email": "nope"})

    assert response.status_code == 400


def test_list_vouchers_unknown_customer(client, customers):
    response = client.get("/api/v1/vouchers", params={"email": "nobody@x.com"})

    assert response.status_code == 404


def test_list_vouchers_rolls_back_on_failure(client, customers, session_factory):
    rollbacks = []

    def tracking_get_db():
        db = session_factory()
        original_rollback = db.rollback

        def rollback():
            rollbacks.append(True)
            original_rollback()

        db.rollback = rollback
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = tracking_get_db

    response = client.get("/api/v1/vouchers", params={"email": "nobody@x.com"})

    assert response.status_code == 404
    assert rollbacks == [True]
