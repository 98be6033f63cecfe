import asyncio

from motorent import create_app
from motorent.models.store import DocumentStore
from motorent.services.registry import services
from motorent.utils.constants import Collections, RatingTarget, VehicleCategory

SUPPLIERS = [
    {
        "id": "sup-lagoon",
        "business_name": "Lagoon Moto Rentals",
        "business_address": "General Luna, Siargao",
        "business_coordinate": {"latitude": 9.7870, "longitude": 126.1590},
        "verified": True,
        "email": "hello@lagoonmoto.example",
        "contact_number": "+63 917 000 0001",
    },
    {
        "id": "sup-cloud9",
        "business_name": "Cloud 9 Wheels",
        "business_address": "Catangnan, Siargao",
        "business_coordinate": {"latitude": 9.8046, "longitude": 126.1650},
        "verified": False,
        "email": "rent@cloud9wheels.example",
        "contact_number": "+63 917 000 0002",
    },
]

VEHICLES = [
    {"id": "veh-click", "name": "Honda Click 125i", "category": VehicleCategory.TWO_WHEEL,
     "displacement": 125, "price_per_day": 400, "owner_id": "sup-lagoon", "images": []},
    {"id": "veh-nmax", "name": "Yamaha NMAX", "category": VehicleCategory.TWO_WHEEL,
     "displacement": 155, "price_per_day": 650, "owner_id": "sup-lagoon", "images": []},
    {"id": "veh-adv", "name": "Honda ADV 160", "category": VehicleCategory.TWO_WHEEL,
     "displacement": 160, "price_per_day": 900, "owner_id": "sup-cloud9", "images": []},
    {"id": "veh-wigo", "name": "Toyota Wigo", "category": VehicleCategory.FOUR_WHEEL,
     "displacement": 1000, "price_per_day": 1800, "owner_id": "sup-cloud9", "images": []},
]

RATINGS = [
    (Collections.VEHICLE_RATINGS, RatingTarget.VEHICLE, "veh-click", 5),
    (Collections.VEHICLE_RATINGS, RatingTarget.VEHICLE, "veh-click", 4),
    (Collections.VEHICLE_RATINGS, RatingTarget.VEHICLE, "veh-adv", 2),
    (Collections.SUPPLIER_RATINGS, RatingTarget.SUPPLIER, "sup-lagoon", 5),
    (Collections.SUPPLIER_RATINGS, RatingTarget.SUPPLIER, "sup-cloud9", 3),
]


async def seed(store: DocumentStore):
    """Idempotent: fixed ids are overwritten, ratings only added to an empty set."""
    for s in SUPPLIERS:
        await store.create(Collections.SUPPLIERS, s, doc_id=s["id"])
    for v in VEHICLES:
        await store.create(Collections.VEHICLES, v, doc_id=v["id"])

    if not await store.list_all(Collections.VEHICLE_RATINGS):
        for i, (collection, target_type, target_id, score) in enumerate(RATINGS):
            await store.create(collection, {
                "target_type": target_type,
                "target_id": target_id,
                "booking_id": f"seed-{i}",
                "score": score,
                "comment": None,
                "author_id": "seed",
                "created_at": "2024-01-01T00:00:00+00:00",
            })


def main():
    app = create_app()
    with app.app_context():
        store = services().store
        asyncio.run(seed(store))

        print("✅ Seed complete.")
        print(f"🏍️  {len(VEHICLES)} vehicles from {len(SUPPLIERS)} suppliers")


if __name__ == "__main__":
    main()
