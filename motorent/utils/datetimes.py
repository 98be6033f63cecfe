"""
Date and clock-time resolution.

Pickup/return times arrive as a calendar date plus a 12-hour clock string
("10:00 AM"). This module is the only place 12h/24h conversion happens:
booking creation uses it to build instants, and `fmt_instant` uses it to
render them back.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Optional, Tuple, Union

import pytz

from motorent.exceptions import ValidationError
from motorent.utils.constants import DATE_FMT, DEFAULT_TIMEZONE

# Parsed by hand instead of strptime("%p"), whose AM/PM tokens follow the locale.
_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")

DateLike = Union[date, datetime, str]


def _zone(tz=None):
    if tz is None:
        return pytz.timezone(DEFAULT_TIMEZONE)
    if isinstance(tz, str):
        try:
            return pytz.timezone(tz)
        except pytz.UnknownTimeZoneError:
            raise ValidationError(f"Error: unknown time zone '{tz}'")
    return tz


def parse_date(value: DateLike) -> date:
    """Coerce a date, datetime or 'YYYY-MM-DD' string into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        base = value.split("T", 1)[0].strip()
        try:
            return datetime.strptime(base, DATE_FMT).date()
        except ValueError:
            pass
    raise ValidationError(f"Error: invalid date {value!r} (expected YYYY-MM-DD)")


def to_24h(hour12: int, meridian: str) -> int:
    """12 AM -> 0, 12 PM -> 12, other PM hours add 12."""
    if not 1 <= hour12 <= 12:
        raise ValidationError(f"Error: hour {hour12} is not on a 12-hour clock")
    m = meridian.upper()
    if m not in ("AM", "PM"):
        raise ValidationError(f"Error: invalid meridian {meridian!r}")
    if m == "AM":
        return 0 if hour12 == 12 else hour12
    return hour12 if hour12 == 12 else hour12 + 12


def to_12h(hour24: int, minute: int) -> str:
    """Render a 24-hour time as 'h:MM AM|PM'."""
    meridian = "AM" if hour24 < 12 else "PM"
    hour12 = hour24 % 12 or 12
    return f"{hour12}:{minute:02d} {meridian}"


def parse_clock_time(value: str) -> Tuple[int, int]:
    """Parse 'h:MM AM|PM' into (hour24, minute)."""
    match = _CLOCK_RE.match(value or "")
    if not match:
        raise ValidationError(f"Error: invalid clock time {value!r} (expected h:MM AM/PM)")
    hour12, minute, meridian = int(match.group(1)), int(match.group(2)), match.group(3)
    if minute > 59:
        raise ValidationError(f"Error: invalid minute in {value!r}")
    return to_24h(hour12, meridian), minute


def to_instant(day: DateLike, clock_time: str, tz=None) -> datetime:
    """Combine a date and a 12-hour clock time into an aware datetime."""
    hour, minute = parse_clock_time(clock_time)
    naive = datetime.combine(parse_date(day), time(hour, minute))
    return _zone(tz).localize(naive)


def day_count(start: DateLike, end: DateLike) -> int:
    """Inclusive number of calendar days; same-day pickup and return is 1."""
    d1, d2 = parse_date(start), parse_date(end)
    if d2 < d1:
        raise ValidationError("Error: return date is before pickup date")
    return (d2 - d1).days + 1


def utcnow() -> datetime:
    """Wrapper for easier testing/mocking."""
    return datetime.now(timezone.utc)


def fmt_instant(value, use_12h: bool = False, tz=None) -> str:
    """
    Format an instant for display in the local rental zone.
    Supports:
      - datetime objects (naive ones are taken as UTC)
      - 'YYYY-MM-DD'
      - ISO strings with 'T', trailing 'Z' or offsets like '+08:00'
    On parse error, returns the original value (so the UI never goes blank).
    """
    if value is None:
        return ""

    dt: Optional[datetime] = value if isinstance(value, datetime) else None
    if dt is None:
        s = str(value).strip()
        if not s:
            return ""
        s_norm = s.replace("T", " ")
        if s_norm.endswith("Z"):
            s_norm = s_norm[:-1] + "+00:00"
        if ":" not in s_norm:
            try:
                return datetime.strptime(s_norm, DATE_FMT).strftime("%d/%m/%Y")
            except ValueError:
                return s
        try:
            dt = datetime.fromisoformat(s_norm)
        except ValueError:
            return s

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        local = dt.astimezone(_zone(tz))
    except ValidationError:
        return str(value)

    if use_12h:
        return f"{local.strftime('%d %b %Y')}, {to_12h(local.hour, local.minute)}"
    return local.strftime("%d/%m/%Y %H:%M")
