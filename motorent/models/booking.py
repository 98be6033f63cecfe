from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from motorent.utils.constants import BookingStatus
from motorent.utils.datetimes import fmt_instant


def _as_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class Booking:
    """One renter's reservation of one vehicle. Never deleted, only transitioned."""
    booking_id: str
    vehicle_id: str
    renter_id: str
    pickup_at: datetime
    return_at: datetime
    days: int
    total_price: float
    status: str = BookingStatus.PENDING
    rated: bool = False
    created_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in BookingStatus.TERMINAL

    @classmethod
    def from_dict(cls, d: dict) -> "Booking":
        return cls(
            booking_id=d.get("id") or d.get("booking_id"),
            vehicle_id=d.get("vehicle_id"),
            renter_id=d.get("renter_id"),
            pickup_at=_as_datetime(d.get("pickup_at")),
            return_at=_as_datetime(d.get("return_at")),
            days=int(d.get("days") or 0),
            total_price=float(d.get("total_price") or 0),
            status=d.get("status") or BookingStatus.PENDING,
            rated=bool(d.get("rated", False)),
            created_at=_as_datetime(d.get("created_at")),
        )

    def to_record(self) -> dict:
        """Store representation (instants as ISO strings)."""
        return {
            "vehicle_id": self.vehicle_id,
            "renter_id": self.renter_id,
            "pickup_at": self.pickup_at.isoformat(),
            "return_at": self.return_at.isoformat(),
            "days": self.days,
            "total_price": self.total_price,
            "status": self.status,
            "rated": self.rated,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def to_dict(self) -> dict:
        out = self.to_record()
        out["booking_id"] = self.booking_id
        return out

    def display(self, tz=None) -> dict:
        """Human-readable pickup/return/created strings for the UI."""
        return {
            "pickup": fmt_instant(self.pickup_at, use_12h=True, tz=tz),
            "return": fmt_instant(self.return_at, use_12h=True, tz=tz),
            "created": fmt_instant(self.created_at, use_12h=True, tz=tz),
        }
