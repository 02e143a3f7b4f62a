from datetime import date

import pytest

from marketplace.api.routes import reminders as reminder_routes
from marketplace.models.notification import Notification, RENT_REMINDER, RENT_REMINDER_SENT
from marketplace.services import rentals as rental_service
from marketplace.services import reminders as reminder_service


@pytest.mark.parametrize(
    "start, today, expected",
    [
        (date(2025, 1, 15), date(2025, 3, 2), date(2025, 4, 15)),
        (date(2025, 1, 31), date(2025, 1, 10), date(2025, 2, 28)),
        (date(2024, 1, 31), date(2024, 1, 10), date(2024, 2, 29)),
        (date(2025, 5, 31), date(2025, 3, 20), date(2025, 4, 30)),
        (date(2025, 6, 10), date(2025, 12, 5), date(2026, 1, 10)),
    ],
)
def test_next_payment_date(start, today, expected):
    assert reminder_service.next_payment_date(start, today) == expected


def test_reminder_date_is_a_week_before_due():
    assert reminder_service.reminder_date_for(date(2025, 4, 4)) == date(2025, 3, 28)


def _rent(db, prop, tenant, start):
    return rental_service.create_rental(db, property_id=prop.id, tenant_id=tenant.id, start_date=start)


def test_rentals_due_soon_for_tenant_and_owner(db, owner, tenant, make_user, make_property):
    soon = _rent(db, make_property(owner, title="Soon"), tenant, date(2025, 1, 4))
    _rent(db, make_property(owner, title="Later"), tenant, date(2025, 1, 20))
    other_tenant = make_user("TENANT")
    _rent(db, make_property(make_user("OWNER")), other_tenant, date(2025, 1, 4))

    today = date(2025, 3, 28)
    assert [r.id for r in reminder_service.rentals_due_soon(db, user_id=tenant.id, today=today)] == [soon.id]
    assert [r.id for r in reminder_service.rentals_due_soon(db, user_id=owner.id, today=today)] == [soon.id]


def test_cancelled_rentals_are_not_due(db, owner, tenant, make_property):
    prop = make_property(owner)
    _rent(db, prop, tenant, date(2025, 1, 4))
    rental_service.cancel_rental(db, property_id=prop.id, tenant_id=tenant.id)

    assert reminder_service.rentals_due_soon(db, user_id=tenant.id, today=date(2025, 3, 28)) == []


def test_send_reminder_notifies_both_sides(db, owner, tenant, make_property):
    rental = _rent(db, make_property(owner, title="Sea view"), tenant, date(2025, 1, 4))

    tenant_note, owner_note = reminder_service.send_reminder(db, rental, date(2025, 4, 4))

    assert tenant_note.user_id == tenant.id
    assert tenant_note.type == RENT_REMINDER
    assert "Sea view is due on 2025-04-04" in tenant_note.message
    assert owner_note.user_id == owner.id
    assert owner_note.type == RENT_REMINDER_SENT
    assert tenant.name in owner_note.message


def test_auto_reminders_send_once_per_tenant_per_day(db, owner, tenant, make_user, make_property):
    _rent(db, make_property(owner, title="First"), tenant, date(2025, 1, 4))
    _rent(db, make_property(owner, title="Second"), tenant, date(2025, 2, 4))
    other = make_user("TENANT")
    _rent(db, make_property(owner, title="Third"), other, date(2025, 1, 4))
    _rent(db, make_property(owner, title="Not yet"), make_user("TENANT"), date(2025, 1, 12))

    today = date(2025, 3, 28)
    sent = reminder_service.run_auto_reminders(db, today=today)

    assert len(sent) == 2
    assert sorted(d["tenant_name"] for d in sent) == sorted([tenant.name, other.name])
    assert all(d["due_date"] == date(2025, 4, 4) for d in sent)
    assert all(d["reminder_date"] == today for d in sent)

    again = reminder_service.run_auto_reminders(db, today=today)
    assert again == []
    assert db.query(Notification).filter(Notification.type == RENT_REMINDER).count() == 2


def test_auto_reminders_continue_after_a_failure(db, owner, make_user, make_property, monkeypatch):
    first_tenant, second_tenant = make_user("TENANT"), make_user("TENANT")
    _rent(db, make_property(owner, title="Broken"), first_tenant, date(2025, 1, 4))
    _rent(db, make_property(owner, title="Fine"), second_tenant, date(2025, 1, 4))

    real_send = reminder_service.send_reminder

    def flaky_send(db, rental, due=None):
        if rental.property.title == "Broken":
            raise RuntimeError("notification store down")
        return real_send(db, rental, due)

    monkeypatch.setattr(reminder_service, "send_reminder", flaky_send)

    sent = reminder_service.run_auto_reminders(db, today=date(2025, 3, 28))
    assert [d["property_title"] for d in sent] == ["Fine"]


def test_upcoming_reminders_preview(db, owner, tenant, make_user, make_property):
    _rent(db, make_property(owner, title="Today"), tenant, date(2025, 1, 1))
    _rent(db, make_property(owner, title="In three days"), make_user("TENANT"), date(2025, 1, 4))
    _rent(db, make_property(owner, title="Too far"), make_user("TENANT"), date(2025, 1, 20))

    upcoming = reminder_service.upcoming_reminders(db, today=date(2025, 3, 25))

    assert sorted(d["property_title"] for d in upcoming) == ["In three days", "Today"]
    assert db.query(Notification).filter(Notification.type == RENT_REMINDER).count() == 0


def test_manual_reminder_endpoint(client, db, owner, tenant, make_user, make_property, headers):
    rental = _rent(db, make_property(owner), tenant, date(2025, 1, 4))

    resp = client.post("/reminders", json={"rentalId": rental.id}, headers=headers(owner))
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Reminder notifications sent successfully"
    assert body["tenant_notification"]["user_id"] == tenant.id
    assert body["owner_notification"]["user_id"] == owner.id

    outsider = make_user("TENANT")
    assert client.post("/reminders", json={"rentalId": rental.id}, headers=headers(outsider)).status_code == 401
    assert client.post("/reminders", json={"rentalId": "missing"}, headers=headers(owner)).status_code == 404
    assert client.post("/reminders", json={"rentalId": rental.id}).status_code == 401


def test_reminder_endpoints_use_todays_date(client, db, owner, tenant, make_property, headers, monkeypatch):
    rental = _rent(db, make_property(owner), tenant, date(2025, 1, 4))
    monkeypatch.setattr(reminder_routes, "_today", lambda: date(2025, 3, 28))

    due = client.get("/reminders", headers=headers(tenant)).json()
    assert due["reminders_needed"] == 1
    assert due["rentals"][0]["id"] == rental.id

    preview = client.get("/reminders/auto", headers=headers(owner)).json()
    assert preview["upcoming_reminders"] == 1
    assert preview["details"][0]["due_date"] == "2025-04-04"

    swept = client.post("/reminders/auto", headers=headers(owner)).json()
    assert swept["message"] == "Automatic reminders processed successfully"
    assert swept["reminders_sent"] == 1
    assert client.post("/reminders/auto", headers=headers(owner)).json()["reminders_sent"] == 0
