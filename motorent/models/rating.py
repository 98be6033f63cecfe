from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RatingSummary:
    average: float = 0.0
    count: int = 0

    def to_dict(self) -> dict:
        return {"average": self.average, "count": self.count}


@dataclass(frozen=True)
class Rating:
    """
    A post-completion review of either a vehicle or its supplier.
    Immutable once written.
    """
    target_type: str  # "Vehicle" | "Supplier"
    target_id: str
    booking_id: str
    score: int
    author_id: str
    created_at: str
    comment: Optional[str] = None

    def to_record(self) -> dict:
        return {
            "target_type": self.target_type,
            "target_id": self.target_id,
            "booking_id": self.booking_id,
            "score": self.score,
            "comment": self.comment,
            "author_id": self.author_id,
            "created_at": self.created_at,
        }
