"""One set of services per app, all sharing the injected store."""

from dataclasses import dataclass

from flask import current_app

from motorent.models.store import DocumentStore
from motorent.services.booking_service import BookingService
from motorent.services.favorite_service import FavoriteService
from motorent.services.rating_service import RatingService
from motorent.services.vehicle_service import VehicleService

EXTENSION_KEY = "motorent"


@dataclass
class Services:
    store: DocumentStore
    vehicles: VehicleService
    bookings: BookingService
    favorites: FavoriteService


def build_services(store: DocumentStore, identity=None, tz=None) -> Services:
    """Wire every service around one store."""
    return Services(
        store=store,
        vehicles=VehicleService(store, RatingService(store)),
        bookings=BookingService(store, identity=identity, tz=tz),
        favorites=FavoriteService(store),
    )


def services() -> Services:
    """Services of the current Flask app."""
    return current_app.extensions[EXTENSION_KEY]
