from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from motorent.models.rating import RatingSummary
from motorent.models.vehicle import Supplier, Vehicle
from motorent.services.common import norm_category, parse_range, to_float_safe


class SortOrder:
    NONE = "none"
    NEAREST = "nearest"
    FARTHEST = "farthest"

    ALL = (NONE, NEAREST, FARTHEST)

    @classmethod
    def parse(cls, value: Optional[str]) -> str:
        v = (value or "").strip().lower()
        return v if v in cls.ALL else cls.NONE


@dataclass(frozen=True)
class Range:
    """Inclusive [low, high]; a missing bound is unconstrained."""
    low: Optional[float] = None
    high: Optional[float] = None

    def __post_init__(self):
        if self.low is not None and self.high is not None and self.low > self.high:
            low, high = self.high, self.low
            object.__setattr__(self, "low", low)
            object.__setattr__(self, "high", high)

    @property
    def is_open(self) -> bool:
        return self.low is None and self.high is None

    def contains(self, value: Optional[float]) -> bool:
        if value is None:
            return False
        if self.low is not None and value < self.low:
            return False
        if self.high is not None and value > self.high:
            return False
        return True

    @classmethod
    def parse(cls, value=None, low=None, high=None) -> Optional["Range"]:
        """From a 'min-max' string and/or explicit bounds; None when unconstrained."""
        r_low, r_high = parse_range(value)
        low_f = to_float_safe(low)
        high_f = to_float_safe(high)
        rng = cls(low_f if low_f is not None else r_low,
                  high_f if high_f is not None else r_high)
        return None if rng.is_open else rng


@dataclass(frozen=True)
class DiscoveryFilter:
    """Every predicate discovery understands; None means no constraint."""
    category: Optional[str] = None
    displacement: Optional[Range] = None
    price: Optional[Range] = None
    vehicle_rating: Optional[Range] = None
    supplier_rating: Optional[Range] = None
    search: Optional[str] = None
    sort_order: str = SortOrder.NONE

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "DiscoveryFilter":
        """
        Build a filter from query-string style input. Accepts both the
        'min-max' form ('price=0-500') and split bounds ('min_price=0').
        """
        def rng(name):
            return Range.parse(args.get(name), args.get(f"min_{name}"), args.get(f"max_{name}"))

        category = norm_category(args.get("category"))
        return cls(
            category=category if category and category != "all" else None,
            displacement=rng("displacement"),
            price=rng("price"),
            vehicle_rating=rng("vehicle_rating"),
            supplier_rating=rng("supplier_rating"),
            search=(args.get("search") or args.get("q") or "").strip() or None,
            sort_order=SortOrder.parse(args.get("sort") or args.get("sort_order")),
        )


@dataclass
class VehicleViewModel:
    vehicle: Vehicle
    supplier: Supplier
    vehicle_rating: RatingSummary = field(default_factory=RatingSummary)
    supplier_rating: RatingSummary = field(default_factory=RatingSummary)
    distance_km: Optional[float] = None
    is_favorite: bool = False

    @property
    def vehicle_id(self) -> str:
        return self.vehicle.vehicle_id

    def to_dict(self) -> dict:
        out = self.vehicle.to_dict()
        out["supplier"] = self.supplier.public_fields()
        out["vehicle_rating"] = self.vehicle_rating.to_dict()
        out["supplier_rating"] = self.supplier_rating.to_dict()
        out["distance_km"] = round(self.distance_km, 3) if self.distance_km is not None else None
        out["is_favorite"] = self.is_favorite
        return out
