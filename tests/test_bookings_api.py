from decimal import Decimal

import pytest

from tour_booking.models.booking import Booking


@pytest.fixture
def booking_payload(user, tour):
    return {
        "user_id": user.id,
        "tour_id": tour.id,
        "number_of_people": 2,
        "total_amount": "7000000",
        "notes": "Window seats please",
    }


def _create(client, payload):
    resp = client.post("/api/v1/bookings", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_booking_defaults(client, booking_payload):
    body = _create(client, booking_payload)

    assert body["status"] == "Pending"
    assert body["payment_status"] == "Pending"
    assert body["user_name"] == "Alice Nguyen"
    assert body["tour_name"] == "Ha Long Bay Cruise"
    assert body["booking_date"] is not None
    assert Decimal(body["discount_amount"]) == Decimal("0")


def test_create_booking_with_voucher_and_options(client, booking_payload, make_voucher, tour_option):
    voucher = make_voucher()
    booking_payload.update({
        "voucher_id": voucher.id,
        "discount_amount": "1400000",
        "booking_options": [
            {"option_id": tour_option.id, "quantity": 2, "unit_price": "200000", "total_price": "400000"},
        ],
    })

    body = _create(client, booking_payload)

    assert body["voucher_code"] == "SUMMER20"
    assert Decimal(body["discount_amount"]) == Decimal("1400000")
    assert len(body["booking_options"]) == 1
    assert body["booking_options"][0]["option_name"] == "Kayaking"

    options = client.get(f"/api/v1/bookings/{body['id']}/options").json()
    assert [o["quantity"] for o in options] == [2]


@pytest.mark.parametrize(
    "field, value, detail",
    [
        ("tour_id", 999, "Invalid Tour ID."),
        ("user_id", 999, "Invalid User ID."),
        ("voucher_id", 999, "Invalid Voucher ID."),
    ],
)
def test_create_booking_with_unknown_reference(client, booking_payload, field, value, detail):
    booking_payload[field] = value
    resp = client.post("/api/v1/bookings", json=booking_payload)
    assert resp.status_code == 400
    assert resp.json()["detail"] == detail


def test_create_booking_with_unknown_option(client, booking_payload):
    booking_payload["booking_options"] = [
        {"option_id": 42, "quantity": 1, "unit_price": "1", "total_price": "1"},
    ]
    resp = client.post("/api/v1/bookings", json=booking_payload)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid Option ID."


def test_get_missing_booking(client):
    resp = client.get("/api/v1/bookings/77")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Booking with ID 77 not found."


def test_list_bookings_filters_and_pages(client, booking_payload):
    for _ in range(3):
        _create(client, booking_payload)
    _create(client, {**booking_payload, "status": "Confirmed"})

    page = client.get("/api/v1/bookings", params={"page": 1, "page_size": 2}).json()
    assert page["total"] == 4
    assert len(page["bookings"]) == 2

    confirmed = client.get("/api/v1/bookings", params={"status": "Confirmed"}).json()
    assert confirmed["total"] == 1
    assert confirmed["bookings"][0]["status"] == "Confirmed"


def test_update_booking_only_changes_supplied_fields(client, booking_payload):
    booking = _create(client, booking_payload)

    resp = client.put(f"/api/v1/bookings/{booking['id']}", json={"number_of_people": 3})

    assert resp.status_code == 200
    body = resp.json()
    assert body["number_of_people"] == 3
    assert body["notes"] == "Window seats please"


def test_status_endpoints(client, booking_payload):
    booking = _create(client, booking_payload)

    resp = client.put(f"/api/v1/bookings/{booking['id']}/status", json={"status": "Confirmed"})
    assert resp.json()["status"] == "Confirmed"

    resp = client.put(f"/api/v1/bookings/{booking['id']}/payment-status", json={"payment_status": "Paid"})
    assert resp.json()["payment_status"] == "Paid"


def test_delete_booking(client, db, booking_payload):
    booking = _create(client, booking_payload)

    resp = client.delete(f"/api/v1/bookings/{booking['id']}")

    assert resp.status_code == 204
    db.expire_all()
    assert db.get(Booking, booking["id"]) is None


@pytest.mark.parametrize(
    "path, body",
    [
        ("status", {"status": "Completed"}),
        ("payment-status", {"payment_status": "Paid"}),
    ],
)
def test_cannot_delete_completed_or_paid(client, booking_payload, path, body):
    booking = _create(client, booking_payload)
    client.put(f"/api/v1/bookings/{booking['id']}/{path}", json=body)

    resp = client.delete(f"/api/v1/bookings/{booking['id']}")

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cannot delete completed or paid bookings."


def test_booking_statistics(client, booking_payload):
    _create(client, booking_payload)
    _create(client, {**booking_payload, "status": "Confirmed", "total_amount": "3000000"})
    _create(client, {**booking_payload, "status": "Cancelled", "total_amount": "1000000"})

    stats = client.get("/api/v1/bookings/statistics").json()

    assert stats["total_bookings"] == 3
    assert stats["pending_bookings"] == 1
    assert stats["confirmed_bookings"] == 1
    assert stats["cancelled_bookings"] == 1
    assert stats["completed_bookings"] == 0
    assert Decimal(stats["total_revenue"]) == Decimal("11000000")
