from decimal import Decimal

from tour_booking.models.tour import Tour


def _tour_payload(**overrides):
    payload = {
        "tour_name": "Sapa Trekking",
        "destination": "Sapa",
        "description": "Rice terraces and villages",
        "duration": 4,
        "price": "4200000",
        "max_participants": 12,
        "start_date": "2030-09-01T07:00:00",
        "end_date": "2030-09-04T18:00:00",
        "transport": "Sleeper train",
    }
    payload.update(overrides)
    return payload


def test_create_tour(client):
    resp = client.post("/api/v1/tours", json=_tour_payload())

    assert resp.status_code == 201
    body = resp.json()
    assert body["tour_name"] == "Sapa Trekking"
    assert body["is_active"] is True
    assert Decimal(body["price"]) == Decimal("4200000")


def test_create_tour_rejects_reversed_dates(client):
    resp = client.post(
        "/api/v1/tours",
        json=_tour_payload(start_date="2030-09-05T00:00:00", end_date="2030-09-01T00:00:00"),
    )
    assert resp.status_code == 400


def test_create_tour_validation(client):
    assert client.post("/api/v1/tours", json=_tour_payload(duration=0)).status_code == 422
    assert client.post("/api/v1/tours", json=_tour_payload(tour_name="")).status_code == 422


def test_list_and_filter_tours(client, tour):
    client.post("/api/v1/tours", json=_tour_payload(is_active=False))

    assert len(client.get("/api/v1/tours").json()) == 2
    active = client.get("/api/v1/tours", params={"active_only": True}).json()
    assert [t["tour_name"] for t in active] == ["Ha Long Bay Cruise"]


def test_get_tour_detail(client, tour, tour_option):
    attach = client.post(
        f"/api/v1/tours/{tour.id}/options",
        json={"option_id": tour_option.id, "is_default": True},
    )
    assert attach.status_code == 200

    body = client.get(f"/api/v1/tours/{tour.id}").json()

    assert body["images"] == []
    assert len(body["option_links"]) == 1
    assert body["option_links"][0]["option"]["option_name"] == "Kayaking"
    assert body["option_links"][0]["is_default"] is True


def test_attach_unknown_option(client, tour):
    resp = client.post(f"/api/v1/tours/{tour.id}/options", json={"option_id": 321})
    assert resp.status_code == 400


def test_update_tour_partial(client, tour):
    resp = client.put(f"/api/v1/tours/{tour.id}", json={"price": "3900000"})

    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["price"]) == Decimal("3900000")
    assert body["destination"] == "Ha Long"


def test_update_tour_rejects_end_before_start(client, tour):
    resp = client.put(f"/api/v1/tours/{tour.id}", json={"end_date": "2030-04-01T00:00:00"})
    assert resp.status_code == 400


def test_delete_tour_is_soft(client, db, tour):
    assert client.delete(f"/api/v1/tours/{tour.id}").status_code == 200
    assert client.get(f"/api/v1/tours/{tour.id}").status_code == 404
    assert client.get("/api/v1/tours").json() == []

    db.expire_all()
    assert db.get(Tour, tour.id).is_delete is True


def test_options_catalogue(client):
    resp = client.post(
        "/api/v1/tours/options",
        json={"option_name": "Travel insurance", "category": "Insurance", "price": "150000"},
    )
    assert resp.status_code == 201
    assert resp.json()["price_type"] == "PerPerson"

    names = [o["option_name"] for o in client.get("/api/v1/tours/options").json()]
    assert names == ["Travel insurance"]
