"""Great-circle distance between two coordinates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from motorent.utils.constants import EARTH_RADIUS_KM


@dataclass(frozen=True)
class GeoCoordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> Optional["GeoCoordinate"]:
        """Build from {latitude, longitude} (or lat/lng); None when incomplete or off the globe."""
        if not d:
            return None
        lat = d.get("latitude", d.get("lat"))
        lng = d.get("longitude", d.get("lng", d.get("lon")))
        try:
            lat, lng = float(lat), float(lng)
        except (TypeError, ValueError):
            return None
        if not (math.isfinite(lat) and math.isfinite(lng)):
            return None
        if abs(lat) > 90 or abs(lng) > 180:
            return None
        return cls(lat, lng)

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


def distance_km(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Haversine distance in km on a mean Earth radius of 6371 km."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlng = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    # clamp rounding noise so asin never sees a value above 1
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, h)))
