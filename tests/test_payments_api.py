from datetime import datetime, timezone
from decimal import Decimal


def _rent(client, headers, tenant, prop):
    return client.post(
        "/tenant/rented-properties",
        json={"propertyId": prop.id, "startDate": "2025-01-01"},
        headers=headers(tenant),
    ).json()["rental"]["id"]


def test_record_payment_defaults_to_rent_amount(client, owner, tenant, make_property, headers):
    prop = make_property(owner, amount=Decimal("30000.00"))
    rental_id = _rent(client, headers, tenant, prop)

    resp = client.post(
        "/tenant/payments",
        json={"propertyId": prop.id, "paymentMethod": "jazzcash"},
        headers=headers(tenant),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["rental_id"] == rental_id
    assert body["method"] == "jazzcash"
    assert body["status"] == "paid"
    assert Decimal(str(body["amount"])) == Decimal("30000")
    assert body["period_start"].endswith("-01")
    assert body["period_start"][:7] == datetime.now(timezone.utc).strftime("%Y-%m")

    listed = client.get("/tenant/payments", headers=headers(tenant)).json()
    assert [p["id"] for p in listed] == [body["id"]]


def test_record_payment_with_explicit_amount(client, owner, tenant, make_property, headers):
    prop = make_property(owner)
    _rent(client, headers, tenant, prop)

    resp = client.post(
        "/tenant/payments",
        json={"propertyId": prop.id, "paymentMethod": "card", "amount": "12500.50"},
        headers=headers(tenant),
    )
    assert Decimal(str(resp.json()["amount"])) == Decimal("12500.50")


def test_payment_requires_active_rental(client, owner, tenant, make_property, headers):
    prop = make_property(owner)
    resp = client.post(
        "/tenant/payments",
        json={"propertyId": prop.id, "paymentMethod": "card"},
        headers=headers(tenant),
    )
    assert resp.status_code == 404
    assert resp.json() == {"message": "No active rental found for this property"}


def test_payment_rejects_unknown_method(client, owner, tenant, make_property, headers):
    prop = make_property(owner)
    _rent(client, headers, tenant, prop)
    resp = client.post(
        "/tenant/payments",
        json={"propertyId": prop.id, "paymentMethod": "cash"},
        headers=headers(tenant),
    )
    assert resp.status_code == 400


def test_payments_are_tenant_only(client, owner, headers):
    assert client.get("/tenant/payments", headers=headers(owner)).status_code == 401
