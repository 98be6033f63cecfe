"""End-to-end over the Flask adapter: discover -> book -> confirm -> complete -> rate."""

import pytest

from conftest import seed_rating, seed_supplier, seed_vehicle
from motorent import create_app
from motorent.models.store import MemoryStore
from motorent.utils.constants import Collections


@pytest.fixture
def store():
    s = MemoryStore()
    seed_supplier(s, "sup-1", "Lagoon Moto", coordinate={"latitude": 9.787, "longitude": 126.159})
    seed_vehicle(s, "veh-1", "Honda Click", "sup-1", price=500)
    seed_vehicle(s, "veh-2", "Toyota Wigo", "sup-1", price=1800, category="four-wheel", displacement=1000)
    seed_rating(s, Collections.VEHICLE_RATINGS, "veh-1", 4)
    return s


@pytest.fixture
def client(store):
    app = create_app({"TESTING": True, "APP_ENV": "test", "SECRET_KEY": "test", "DATA_PATH": ""}, store=store)
    with app.test_client() as c:
        yield c


def login(client, uid="renter-1"):
    with client.session_transaction() as sess:
        sess["uid"] = uid


def test_discover_with_filters_and_location(client):
    r = client.get("/vehicles?category=two-wheel&price=0-600&lat=9.78&lng=126.15&sort=nearest")
    assert r.status_code == 200
    body = r.get_json()
    assert body["count"] == 1
    v = body["vehicles"][0]
    assert v["vehicle_id"] == "veh-1"
    assert v["vehicle_rating"] == {"average": 4.0, "count": 1}
    assert v["supplier"]["business_name"] == "Lagoon Moto"
    assert v["distance_km"] is not None
    assert v["is_favorite"] is False


def test_vehicle_detail_not_found(client):
    r = client.get("/vehicles/nope")
    assert r.status_code == 404
    assert r.get_json()["error"] == "NotFound"


def test_bookings_require_sign_in(client):
    r = client.post("/bookings", json={})
    assert r.status_code == 401


def test_full_booking_flow(client):
    login(client)
    r = client.post("/bookings", json={
        "vehicle_id": "veh-1",
        "pickup_date": "2024-01-01",
        "return_date": "2024-01-03",
        "pickup_time": "10:00 AM",
        "return_time": "9:00 PM",
    })
    assert r.status_code == 201, r.get_json()
    booking = r.get_json()
    assert booking["days"] == 3
    assert booking["total_price"] == 1500
    assert booking["status"] == "Pending"
    assert booking["display"]["pickup"] == "01 Jan 2024, 10:00 AM"
    bid = booking["booking_id"]

    r = client.post(f"/bookings/{bid}/rating", json={"vehicle_score": 5, "supplier_score": 5})
    assert r.status_code == 409
    assert r.get_json()["error"] == "InvalidTransition"

    login(client, "sup-1")
    assert client.post(f"/bookings/{bid}/confirm").get_json()["status"] == "On-Going"
    assert client.post(f"/bookings/{bid}/complete").get_json()["status"] == "Complete"
    login(client)

    r = client.post(f"/bookings/{bid}/rating", json={"vehicle_score": 2, "supplier_score": 5,
                                                     "vehicle_comment": "Brakes were soft"})
    assert r.status_code == 200
    assert r.get_json()["rated"] is True

    r = client.post(f"/bookings/{bid}/rating", json={"vehicle_score": 2, "supplier_score": 5})
    assert r.get_json()["error"] == "AlreadyRated"

    v = client.get("/vehicles/veh-1").get_json()
    assert v["vehicle_rating"] == {"average": 3.0, "count": 2}

    r = client.post(f"/bookings/{bid}/cancel")
    assert r.status_code == 409

    tab = client.get("/bookings?tab=Complete").get_json()
    assert [b["booking_id"] for b in tab["bookings"]] == [bid]


def test_booking_validation_errors(client):
    login(client)
    r = client.post("/bookings", json={"vehicle_id": "veh-1"})
    assert r.status_code == 422
    r = client.post("/bookings", json={
        "vehicle_id": "veh-1",
        "pickup_date": "2024-01-03",
        "return_date": "2024-01-01",
        "pickup_time": "10:00 AM",
        "return_time": "9:00 PM",
    })
    assert r.status_code == 422
    assert r.get_json()["error"] == "ValidationError"


def test_other_renters_cannot_see_or_cancel(client):
    login(client, "renter-1")
    bid = client.post("/bookings", json={
        "vehicle_id": "veh-2",
        "pickup_date": "2024-02-01",
        "return_date": "2024-02-01",
        "pickup_time": "8:00 AM",
        "return_time": "5:00 PM",
    }).get_json()["booking_id"]

    login(client, "renter-2")
    assert client.get(f"/bookings/{bid}").status_code == 404
    assert client.post(f"/bookings/{bid}/cancel").status_code == 404


def test_favorite_toggle_and_listing(client):
    login(client)
    assert client.post("/favorites/veh-2/toggle").get_json() == {"is_favorite": True}
    favs = client.get("/favorites").get_json()
    assert [v["vehicle_id"] for v in favs["vehicles"]] == ["veh-2"]
    listing = {v["vehicle_id"]: v["is_favorite"] for v in client.get("/vehicles").get_json()["vehicles"]}
    assert listing == {"veh-1": False, "veh-2": True}
    assert client.post("/favorites/veh-2/toggle").get_json() == {"is_favorite": False}
    assert client.get("/favorites").get_json()["count"] == 0


def test_only_the_vehicle_supplier_confirms_and_completes(client):
    login(client, "renter-1")
    bid = client.post("/bookings", json={
        "vehicle_id": "veh-1",
        "pickup_date": "2024-03-01",
        "return_date": "2024-03-02",
        "pickup_time": "9:00 AM",
        "return_time": "9:00 AM",
    }).get_json()["booking_id"]

    assert client.post(f"/bookings/{bid}/confirm").status_code == 404
    login(client, "sup-2")
    assert client.post(f"/bookings/{bid}/confirm").status_code == 404

    login(client, "sup-1")
    assert client.post(f"/bookings/{bid}/confirm").get_json()["status"] == "On-Going"
    login(client, "renter-1")
    assert client.post(f"/bookings/{bid}/complete").status_code == 404
    assert client.get(f"/bookings/{bid}").get_json()["status"] == "On-Going"
