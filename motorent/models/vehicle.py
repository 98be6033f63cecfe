from dataclasses import dataclass, field
from typing import List, Optional

from motorent.utils.constants import UNKNOWN_SUPPLIER_NAME
from motorent.utils.geo import GeoCoordinate


def _to_float(value, default: Optional[float] = 0.0) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value) -> Optional[int]:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


@dataclass
class Supplier:
    """
    The business that owns and lists vehicles. Its coordinate is where every
    one of its vehicles is picked up.
    """
    supplier_id: Optional[str]
    business_name: str
    business_address: Optional[str] = None
    coordinate: Optional[GeoCoordinate] = None
    verified: bool = False
    email: Optional[str] = None
    contact_number: Optional[str] = None
    profile_image: Optional[str] = None

    @property
    def is_sentinel(self) -> bool:
        return self.supplier_id is None

    @classmethod
    def unknown(cls) -> "Supplier":
        """Stand-in used when a vehicle's owner record is missing."""
        return cls(supplier_id=None, business_name=UNKNOWN_SUPPLIER_NAME)

    @classmethod
    def from_dict(cls, d: dict) -> "Supplier":
        return cls(
            supplier_id=d.get("id") or d.get("supplier_id"),
            business_name=d.get("business_name") or UNKNOWN_SUPPLIER_NAME,
            business_address=d.get("business_address"),
            coordinate=GeoCoordinate.from_dict(d.get("business_coordinate")),
            verified=bool(d.get("verified", False)),
            email=d.get("email"),
            contact_number=d.get("contact_number"),
            profile_image=d.get("profile_image"),
        )

    def public_fields(self) -> dict:
        return {
            "supplier_id": self.supplier_id,
            "business_name": self.business_name,
            "business_address": self.business_address,
            "business_coordinate": self.coordinate.to_dict() if self.coordinate else None,
            "verified": self.verified,
            "email": self.email,
            "contact_number": self.contact_number,
            "profile_image": self.profile_image,
        }


@dataclass
class Vehicle:
    """
    A rentable listing. Price is per calendar day; a vehicle has no
    location of its own and inherits its owner's coordinate.
    """
    vehicle_id: str
    name: str
    category: str  # "two-wheel" | "four-wheel"
    displacement: Optional[int]  # engine cc
    price_per_day: float
    owner_id: Optional[str]
    images: List[str] = field(default_factory=list)

    def price_for_days(self, days: int) -> float:
        return self.price_per_day * days

    @classmethod
    def from_dict(cls, d: dict) -> "Vehicle":
        return cls(
            vehicle_id=d.get("id") or d.get("vehicle_id"),
            name=d.get("name") or "",
            category=(d.get("category") or "").strip().lower(),
            displacement=_to_int(d.get("displacement")),
            price_per_day=_to_float(d.get("price_per_day")),
            owner_id=d.get("owner_id"),
            images=list(d.get("images") or []),
        )

    def to_dict(self) -> dict:
        return {
            "vehicle_id": self.vehicle_id,
            "name": self.name,
            "category": self.category,
            "displacement": self.displacement,
            "price_per_day": self.price_per_day,
            "owner_id": self.owner_id,
            "images": list(self.images),
        }
