"""Booking lifecycle: create, transition, and rate."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

from loguru import logger

from motorent.exceptions import (
    AlreadyRated,
    InvalidTransition,
    NotFound,
    ValidationError,
    WriteConflict,
)
from motorent.models.booking import Booking
from motorent.models.rating import Rating
from motorent.models.store import DocumentStore
from motorent.models.vehicle import Vehicle
from motorent.services.common import require_identity, round2
from motorent.services.identity import Identity
from motorent.services.rating_service import is_valid_score
from motorent.utils.constants import BookingStatus, Collections, RatingTarget
from motorent.utils.datetimes import day_count, parse_date, to_instant, utcnow

# action -> (states it may start from, resulting state)
TRANSITIONS = {
    "confirm": ({BookingStatus.PENDING}, BookingStatus.ON_GOING),
    "complete": ({BookingStatus.ON_GOING}, BookingStatus.COMPLETE),
    "cancel": ({BookingStatus.PENDING, BookingStatus.ON_GOING}, BookingStatus.CANCELLED),
}

STATUS_TABS = {
    BookingStatus.PENDING: {BookingStatus.PENDING, BookingStatus.CONFIRMED},
    BookingStatus.ON_GOING: {BookingStatus.ON_GOING},
    BookingStatus.COMPLETE: {BookingStatus.COMPLETE},
    BookingStatus.CANCELLED: {BookingStatus.CANCELLED},
}

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def renter_booking_key(renter_id: str, booking_id: str) -> str:
    return f"{renter_id}:{booking_id}"


class BookingService:
    """
    Create, confirm, complete, cancel and rate bookings.

    Pricing is `day_count(pickup, return) * price_per_day`, where the day
    count is inclusive: a same-day rental costs one day.
    """

    def __init__(self, store: DocumentStore, identity: Optional[Identity] = None, tz=None):
        self.store = store
        self.identity = identity
        self.tz = tz

    def _check_actor(self, uid: Optional[str], what: str) -> str:
        """uid must be present and, when an identity is wired in, be the signed-in user."""
        uid = require_identity(uid, what)
        if self.identity is not None:
            current = self.identity.current_user_id()
            if current != uid:
                raise ValidationError(f"Error: {what} must be made by the signed-in user")
        return uid

    # --------------- Queries ---------------
    async def get_booking(self, booking_id: str) -> Booking:
        doc = await self.store.get_by_id(Collections.BOOKINGS, booking_id)
        if doc is None:
            raise NotFound(f"Error: booking with ID '{booking_id}' not found")
        return Booking.from_dict(doc)

    async def my_bookings(self, renter_id: str, status_tab: Optional[str] = None) -> List[Booking]:
        """
        Bookings reached through the renter's back-reference index, newest first.
        `status_tab` narrows by status; the Pending tab includes legacy Confirmed rows.
        """
        refs = await self.store.query_by_field(Collections.RENTER_BOOKINGS, "renter_id", renter_id)
        docs = await asyncio.gather(
            *(self.store.get_by_id(Collections.BOOKINGS, r["booking_id"]) for r in refs)
        )

        res = []
        for ref, doc in zip(refs, docs):
            if doc is None:
                logger.warning("Renter {} references missing booking {}", renter_id, ref.get("booking_id"))
                continue
            res.append(Booking.from_dict(doc))

        if status_tab:
            wanted = STATUS_TABS.get(status_tab, {status_tab})
            res = [b for b in res if b.status in wanted]

        res.sort(key=lambda b: b.created_at or _OLDEST, reverse=True)
        return res

    # --------------- Commands ---------------
    async def create_booking(self, vehicle_id: str, renter_id: str, pickup_date, return_date,
                             pickup_time: str, return_time: str) -> Booking:
        """
        Price and persist a Pending booking plus the renter's back reference.

        Raises ValidationError for a missing identity or a bad date/time
        window, NotFound for an unknown vehicle.
        """
        renter_id = self._check_actor(renter_id, "bookings")

        d1 = parse_date(pickup_date)
        d2 = parse_date(return_date)
        if d2 < d1:
            raise ValidationError("Error: return date must not be before pickup date")

        pickup_at = to_instant(d1, pickup_time, self.tz)
        return_at = to_instant(d2, return_time, self.tz)
        if return_at <= pickup_at:
            raise ValidationError("Error: return time must be after pickup time")

        doc = await self.store.get_by_id(Collections.VEHICLES, vehicle_id)
        if doc is None:
            raise NotFound(f"Error: vehicle with ID '{vehicle_id}' not found")
        vehicle = Vehicle.from_dict(doc)

        days = day_count(d1, d2)
        booking = Booking(
            booking_id=self.store.new_id(),
            vehicle_id=vehicle.vehicle_id,
            renter_id=renter_id,
            pickup_at=pickup_at,
            return_at=return_at,
            days=days,
            total_price=round2(vehicle.price_for_days(days)),
            status=BookingStatus.PENDING,
            rated=False,
            created_at=utcnow(),
        )

        batch = self.store.batch()
        batch.create(Collections.BOOKINGS, booking.to_record(), doc_id=booking.booking_id)
        batch.create(Collections.RENTER_BOOKINGS, {
            "renter_id": renter_id,
            "booking_id": booking.booking_id,
        }, doc_id=renter_booking_key(renter_id, booking.booking_id))
        await batch.commit()

        logger.info("Booking {} created: renter={} vehicle={} days={} total={}",
                    booking.booking_id, renter_id, vehicle.vehicle_id, days, booking.total_price)
        return booking

    async def _transition(self, booking_id: str, action: str) -> Booking:
        booking = await self.get_booking(booking_id)
        allowed, target = TRANSITIONS[action]

        if action == "cancel" and booking.status == BookingStatus.CANCELLED:
            return booking
        if booking.status not in allowed:
            raise InvalidTransition(
                f"Error: cannot {action} booking '{booking_id}' while it is {booking.status}")

        try:
            doc = await self.store.update(Collections.BOOKINGS, booking_id,
                                          {"status": target}, expect={"status": booking.status})
        except WriteConflict:
            raise InvalidTransition(
                f"Error: booking '{booking_id}' changed during {action}; reload and retry")

        logger.info("Booking {}: {} -> {}", booking_id, booking.status, target)
        return Booking.from_dict(doc)

    async def confirm(self, booking_id: str) -> Booking:
        """Pending -> On-Going."""
        return await self._transition(booking_id, "confirm")

    async def mark_complete(self, booking_id: str) -> Booking:
        """On-Going -> Complete. Rating stays a separate renter action."""
        return await self._transition(booking_id, "complete")

    async def cancel(self, booking_id: str) -> Booking:
        """Pending/On-Going -> Cancelled; cancelling a Cancelled booking is a no-op."""
        return await self._transition(booking_id, "cancel")

    async def submit_rating(self, booking_id: str, vehicle_score: int, vehicle_comment: Optional[str],
                            supplier_score: int, supplier_comment: Optional[str],
                            author_id: str) -> Booking:
        """
        Write the vehicle and supplier ratings and set `rated` in one batch.

        The batch only applies while the booking is still Complete and
        unrated, so a racing second submission fails as AlreadyRated and
        never leaves an orphan rating behind.
        """
        author_id = self._check_actor(author_id, "ratings")
        for label, score in (("vehicle", vehicle_score), ("supplier", supplier_score)):
            if not is_valid_score(score):
                raise ValidationError(f"Error: {label} score must be a whole number from 1 to 5")

        booking = await self.get_booking(booking_id)
        if booking.renter_id != author_id:
            raise ValidationError("Error: only the renter of this booking can rate it")
        if booking.status != BookingStatus.COMPLETE:
            raise InvalidTransition(
                f"Error: booking '{booking_id}' can only be rated once Complete (is {booking.status})")
        if booking.rated:
            raise AlreadyRated(f"Error: booking '{booking_id}' has already been rated")

        doc = await self.store.get_by_id(Collections.VEHICLES, booking.vehicle_id)
        if doc is None:
            raise NotFound(f"Error: vehicle with ID '{booking.vehicle_id}' not found")
        vehicle = Vehicle.from_dict(doc)
        if not vehicle.owner_id:
            raise NotFound(f"Error: vehicle '{vehicle.vehicle_id}' has no supplier to rate")

        now = utcnow().isoformat(timespec="seconds")
        vehicle_rating = Rating(RatingTarget.VEHICLE, vehicle.vehicle_id, booking_id, vehicle_score,
                                author_id, now, (vehicle_comment or "").strip() or None)
        supplier_rating = Rating(RatingTarget.SUPPLIER, vehicle.owner_id, booking_id, supplier_score,
                                 author_id, now, (supplier_comment or "").strip() or None)

        batch = self.store.batch()
        batch.create(Collections.VEHICLE_RATINGS, vehicle_rating.to_record())
        batch.create(Collections.SUPPLIER_RATINGS, supplier_rating.to_record())
        batch.update(Collections.BOOKINGS, booking_id, {"rated": True},
                     expect={"rated": False, "status": BookingStatus.COMPLETE})
        try:
            await batch.commit()
        except WriteConflict:
            raise AlreadyRated(f"Error: booking '{booking_id}' has already been rated")

        logger.info("Booking {} rated: vehicle={} supplier={}", booking_id, vehicle_score, supplier_score)
        booking.rated = True
        return booking
