"""Rating aggregation: turns the full set of reviews into {average, count}."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from loguru import logger

from motorent.models.rating import Rating, RatingSummary
from motorent.models.store import DocumentStore
from motorent.utils.constants import MAX_SCORE, MIN_SCORE, Collections

_LABELS = (
    (4.5, "Excellent"),
    (4.0, "Very Good"),
    (3.0, "Good"),
    (2.0, "Bad"),
    (1.0, "Very Bad"),
)


def _score_of(item) -> float:
    if isinstance(item, Rating):
        return item.score
    if isinstance(item, dict):
        return item["score"]
    return item


def aggregate(ratings: Iterable) -> RatingSummary:
    """Arithmetic mean and cardinality; an empty input yields (0, 0)."""
    scores = [float(_score_of(r)) for r in ratings]
    if not scores:
        return RatingSummary(0.0, 0)
    return RatingSummary(sum(scores) / len(scores), len(scores))


def rating_label(average: float) -> str:
    for threshold, label in _LABELS:
        if average >= threshold:
            return label
    return "No Rating"


def star_breakdown(average: float) -> Tuple[int, int, int]:
    """(filled, half, empty) out of five stars."""
    average = max(0.0, min(float(average), float(MAX_SCORE)))
    filled = int(average)
    half = 1 if filled < MAX_SCORE and average - filled >= 0.5 else 0
    return filled, half, MAX_SCORE - filled - half


def is_valid_score(score) -> bool:
    return isinstance(score, int) and not isinstance(score, bool) and MIN_SCORE <= score <= MAX_SCORE


class RatingService:
    """Loads a target's complete rating set and aggregates it."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def _valid_records(self, collection: str, target_id: str) -> List[dict]:
        records = await self.store.query_by_field(collection, "target_id", target_id)
        valid = []
        for r in records:
            if is_valid_score(r.get("score")):
                valid.append(r)
            else:
                logger.warning("Skipping rating {} on {} with score {!r}",
                               r.get("id"), target_id, r.get("score"))
        return valid

    async def vehicle_summary(self, vehicle_id: str) -> RatingSummary:
        return aggregate(await self._valid_records(Collections.VEHICLE_RATINGS, vehicle_id))

    async def supplier_summary(self, supplier_id: str) -> RatingSummary:
        if not supplier_id:
            return RatingSummary()
        return aggregate(await self._valid_records(Collections.SUPPLIER_RATINGS, supplier_id))
