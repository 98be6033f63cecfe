import asyncio
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest

from motorent.models.store import MemoryStore
from motorent.utils.constants import BookingStatus, Collections


def run(coro):
    """Drive one coroutine to completion from a plain pytest test."""
    return asyncio.run(coro)


@pytest.fixture
def store():
    """A clean, memory-only store per test."""
    return MemoryStore()


def seed_supplier(store, sid="sup-1", name="Lagoon Moto", coordinate=None, **extra):
    doc = {
        "business_name": name,
        "business_address": "General Luna",
        "business_coordinate": coordinate,
        "verified": True,
        **extra,
    }
    return run(store.create(Collections.SUPPLIERS, doc, doc_id=sid))


def seed_vehicle(store, vid="veh-1", name="Honda Click", owner_id="sup-1", price=500,
                 category="two-wheel", displacement=125):
    return run(store.create(Collections.VEHICLES, {
        "name": name,
        "category": category,
        "displacement": displacement,
        "price_per_day": price,
        "owner_id": owner_id,
        "images": [],
    }, doc_id=vid))


def seed_rating(store, collection, target_id, score, booking_id="b-seed"):
    return run(store.create(collection, {
        "target_type": "Vehicle" if collection == Collections.VEHICLE_RATINGS else "Supplier",
        "target_id": target_id,
        "booking_id": booking_id,
        "score": score,
        "author_id": "someone",
        "created_at": "2024-01-01T00:00:00+00:00",
    }))


def seed_booking(store, bid="bk-1", status=BookingStatus.PENDING, rated=False,
                 renter_id="renter-1", vehicle_id="veh-1"):
    run(store.create(Collections.BOOKINGS, {
        "vehicle_id": vehicle_id,
        "renter_id": renter_id,
        "pickup_at": "2024-01-01T10:00:00+08:00",
        "return_at": "2024-01-03T21:00:00+08:00",
        "days": 3,
        "total_price": 1500.0,
        "status": status,
        "rated": rated,
        "created_at": "2023-12-20T00:00:00+00:00",
    }, doc_id=bid))
    run(store.create(Collections.RENTER_BOOKINGS, {"renter_id": renter_id, "booking_id": bid},
                     doc_id=f"{renter_id}:{bid}"))
    return bid
