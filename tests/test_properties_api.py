from marketplace.models.favorite import Favorite
from marketplace.models.image import Image
from marketplace.models.message import Message
from marketplace.models.payment import Payment
from marketplace.models.property import Property
from marketplace.models.rental import Rental

LISTING = {
    "title": "Studio near campus",
    "description": "Furnished",
    "type": "room",
    "area": 300,
    "amount": "12000",
    "location": "Islamabad",
}


def test_owner_creates_and_lists_properties(client, owner, make_user, headers):
    other = make_user("OWNER")
    client.post("/owner/properties", json=LISTING, headers=headers(other))

    created = client.post("/owner/properties", json=LISTING, headers=headers(owner))
    assert created.status_code == 201
    body = created.json()
    assert body["owner_id"] == owner.id
    assert body["is_available"] is True
    assert body["images"] == []

    mine = client.get("/owner/properties", headers=headers(owner))
    assert [p["id"] for p in mine.json()] == [body["id"]]


def test_create_property_validates_payload(client, owner, headers):
    resp = client.post("/owner/properties", json={**LISTING, "area": -5}, headers=headers(owner))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid request"


def test_tenant_cannot_use_owner_routes(client, tenant, headers):
    assert client.post("/owner/properties", json=LISTING, headers=headers(tenant)).status_code == 401
    assert client.get("/owner/properties", headers=headers(tenant)).status_code == 401


def test_owner_updates_descriptive_fields_only(client, db, owner, make_property, headers):
    prop = make_property(owner)

    resp = client.patch(
        f"/owner/properties/{prop.id}",
        json={"title": "Renovated flat", "is_available": False},
        headers=headers(owner),
    )
    assert resp.status_code == 200
    assert resp.json()["title"] == "Renovated flat"
    assert resp.json()["is_available"] is True


def test_update_rejects_null_required_fields(client, owner, make_property, headers):
    prop = make_property(owner, title="Original")

    for field in ("title", "type", "area", "amount", "location"):
        resp = client.patch(f"/owner/properties/{prop.id}", json={field: None}, headers=headers(owner))
        assert resp.status_code == 400, field
        assert resp.json()["message"] == "Invalid request"

    blank = client.patch(f"/owner/properties/{prop.id}", json={"title": "   "}, headers=headers(owner))
    assert blank.status_code == 400

    cleared = client.patch(f"/owner/properties/{prop.id}", json={"description": None}, headers=headers(owner))
    assert cleared.status_code == 200
    assert cleared.json()["description"] is None

    trimmed = client.patch(f"/owner/properties/{prop.id}", json={"title": "  Loft  "}, headers=headers(owner))
    assert trimmed.json()["title"] == "Loft"


def test_other_owner_cannot_touch_property(client, owner, make_user, make_property, headers):
    prop = make_property(owner)
    intruder = make_user("OWNER")

    assert client.get(f"/owner/properties/{prop.id}", headers=headers(intruder)).status_code == 401
    assert client.patch(f"/owner/properties/{prop.id}", json={"title": "x"}, headers=headers(intruder)).status_code == 401
    assert client.delete(f"/owner/properties/{prop.id}", headers=headers(intruder)).status_code == 401


def test_public_listing_shows_available_with_owner_contact(client, owner, tenant, make_property, headers):
    open_prop = make_property(owner, title="Open flat", location="Lahore")
    rented = make_property(owner, title="Taken flat", location="Lahore")
    client.post(
        "/tenant/rented-properties",
        json={"propertyId": rented.id, "startDate": "2025-01-01"},
        headers=headers(tenant),
    )

    resp = client.get("/properties", headers=headers(tenant))
    assert resp.status_code == 200
    items = resp.json()
    assert [p["id"] for p in items] == [open_prop.id]
    assert items[0]["owner"]["email"] == owner.email
    assert items[0]["owner"]["phone_number"] == owner.phone_number


def test_public_listing_filters(client, owner, tenant, make_property, headers):
    make_property(owner, title="Cheap room", type="room", amount="8000", location="Multan")
    make_property(owner, title="Big house", type="house", amount="90000", location="Lahore")

    by_type = client.get("/properties", params={"type": "room"}, headers=headers(tenant)).json()
    assert [p["title"] for p in by_type] == ["Cheap room"]

    by_price = client.get("/properties", params={"max_amount": "10000"}, headers=headers(tenant)).json()
    assert [p["title"] for p in by_price] == ["Cheap room"]

    by_search = client.get("/properties", params={"search": "lahore"}, headers=headers(tenant)).json()
    assert [p["title"] for p in by_search] == ["Big house"]


def test_listing_requires_session(client):
    assert client.get("/properties").status_code == 401


def test_get_single_property(client, owner, make_property):
    prop = make_property(owner)
    assert client.get(f"/properties/{prop.id}").json()["title"] == prop.title
    assert client.get("/properties/nope").status_code == 404


def test_image_limit(client, owner, make_property, headers):
    prop = make_property(owner)
    for i in range(5):
        resp = client.post(
            f"/owner/properties/{prop.id}/images",
            json={"url": f"https://img.example.com/{i}.jpg"},
            headers=headers(owner),
        )
        assert resp.status_code == 201

    sixth = client.post(
        f"/owner/properties/{prop.id}/images",
        json={"url": "https://img.example.com/6.jpg"},
        headers=headers(owner),
    )
    assert sixth.status_code == 400
    assert sixth.json() == {"message": "Maximum 5 images allowed per property"}


def test_image_url_must_be_http(client, owner, make_property, headers):
    prop = make_property(owner)
    resp = client.post(
        f"/owner/properties/{prop.id}/images",
        json={"url": "ftp://img.example.com/a.jpg"},
        headers=headers(owner),
    )
    assert resp.status_code == 400


def test_delete_image(client, db, owner, make_user, make_property, headers):
    prop = make_property(owner)
    image_id = client.post(
        f"/owner/properties/{prop.id}/images",
        json={"url": "https://img.example.com/a.jpg"},
        headers=headers(owner),
    ).json()["id"]

    intruder = make_user("OWNER")
    assert client.delete(f"/owner/properties/images/{image_id}", headers=headers(intruder)).status_code == 401

    assert client.delete(f"/owner/properties/images/{image_id}", headers=headers(owner)).status_code == 204
    assert client.delete(f"/owner/properties/images/{image_id}", headers=headers(owner)).status_code == 404


def test_delete_property_guarded_by_active_rental(client, db, owner, tenant, make_property, headers):
    prop = make_property(owner)
    prop_id = prop.id
    db.add(Image(property_id=prop_id, url="https://img.example.com/a.jpg"))
    db.add(Favorite(user_id=tenant.id, property_id=prop_id))
    db.add(Message(property_id=prop_id, sender_id=tenant.id, receiver_id=owner.id, content="Is it free?"))
    db.commit()

    client.post(
        "/tenant/rented-properties",
        json={"propertyId": prop_id, "startDate": "2025-01-01"},
        headers=headers(tenant),
    )
    paid = client.post(
        "/tenant/payments",
        json={"propertyId": prop_id, "paymentMethod": "card"},
        headers=headers(tenant),
    )
    assert paid.status_code == 200

    blocked = client.delete(f"/owner/properties/{prop_id}", headers=headers(owner))
    assert blocked.status_code == 400
    assert blocked.json() == {
        "message": "Cannot delete property with active rentals. Please cancel all active rentals first."
    }

    client.delete(f"/tenant/rented-properties/{prop_id}", headers=headers(tenant))

    deleted = client.delete(f"/owner/properties/{prop_id}", headers=headers(owner))
    assert deleted.status_code == 200
    assert deleted.json()["message"] == "Property deleted successfully"

    db.expire_all()
    assert db.get(Property, prop_id) is None
    for model in (Image, Favorite, Message, Payment, Rental):
        assert db.query(model).filter(model.property_id == prop_id).count() == 0


def test_delete_missing_property_is_404(client, owner, headers):
    assert client.delete("/owner/properties/nope", headers=headers(owner)).status_code == 404
