"""Shared service helpers."""

from typing import Optional, Tuple

from motorent.exceptions import ValidationError
from motorent.utils.constants import VehicleCategory

# older listings and filter screens use these names for the two categories
_CATEGORY_ALIASES = {
    "two-wheel": VehicleCategory.TWO_WHEEL,
    "two-wheels": VehicleCategory.TWO_WHEEL,
    "2 wheels": VehicleCategory.TWO_WHEEL,
    "scooter": VehicleCategory.TWO_WHEEL,
    "scooters": VehicleCategory.TWO_WHEEL,
    "motorcycle": VehicleCategory.TWO_WHEEL,
    "four-wheel": VehicleCategory.FOUR_WHEEL,
    "four-wheels": VehicleCategory.FOUR_WHEEL,
    "4 wheels": VehicleCategory.FOUR_WHEEL,
    "car": VehicleCategory.FOUR_WHEEL,
    "cars": VehicleCategory.FOUR_WHEEL,
}


def round2(x: float) -> float:
    return round(float(x), 2)


def to_float_safe(value) -> Optional[float]:
    """Safely convert to float; return None if invalid."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _lc(s):
    """Safe lowercase for case-insensitive compare."""
    return (s or "").lower()


def norm_category(value: Optional[str]) -> str:
    """Normalize a vehicle category; unknown values are returned lowercased."""
    v = _lc(value).strip()
    return _CATEGORY_ALIASES.get(v, v)


def parse_range(value) -> Tuple[Optional[float], Optional[float]]:
    """
    Parse a 'min-max' string (as sent by the filter screens) into bounds.
    'all', '' and garbage mean no constraint; '500-' and '-500' are open-ended.
    """
    if value is None:
        return None, None
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return to_float_safe(value[0]), to_float_safe(value[1])
    s = str(value).strip()
    if not s or s.lower() == "all" or "-" not in s:
        return None, None
    low, _, high = s.partition("-")
    return to_float_safe(low), to_float_safe(high)


def require_identity(uid: Optional[str], what: str = "this action") -> str:
    """Reject a missing identity with a ValidationError."""
    uid = (uid or "").strip() if isinstance(uid, str) else uid
    if not uid:
        raise ValidationError(f"Error: you must be signed in for {what}")
    return uid
