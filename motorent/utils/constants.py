# motorent/utils/constants.py

"""
Global constants for collections, statuses, and categories.
These constants are imported by both models and services.
"""

# Date format (used for pickup/return dates)
DATE_FMT = "%Y-%m-%d"

DEFAULT_TIMEZONE = "Asia/Manila"
EARTH_RADIUS_KM = 6371.0


class Collections:
    VEHICLES = "vehicles"
    SUPPLIERS = "suppliers"
    BOOKINGS = "bookings"
    RENTER_BOOKINGS = "renter_bookings"
    FAVORITES = "favorites"
    VEHICLE_RATINGS = "vehicle_ratings"
    SUPPLIER_RATINGS = "supplier_ratings"

    ALL = (VEHICLES, SUPPLIERS, BOOKINGS, RENTER_BOOKINGS, FAVORITES,
           VEHICLE_RATINGS, SUPPLIER_RATINGS)


class BookingStatus:
    PENDING = "Pending"
    ON_GOING = "On-Going"
    COMPLETE = "Complete"
    CANCELLED = "Cancelled"
    # written by an older client build; shown under the Pending tab
    CONFIRMED = "Confirmed"

    TERMINAL = {COMPLETE, CANCELLED}


class VehicleCategory:
    TWO_WHEEL = "two-wheel"
    FOUR_WHEEL = "four-wheel"


class RatingTarget:
    VEHICLE = "Vehicle"
    SUPPLIER = "Supplier"


# --- Misc ---
ALLOWED_CATEGORIES = {VehicleCategory.TWO_WHEEL, VehicleCategory.FOUR_WHEEL}
MIN_SCORE = 1
MAX_SCORE = 5
UNKNOWN_SUPPLIER_NAME = "Unknown"
