from flask import Blueprint, current_app, jsonify, request, session

from ..exceptions import NotFound, ValidationError
from ..services.registry import services
from ..utils.constants import Collections
from ..utils.decorators import login_required

bp = Blueprint("bookings", __name__, url_prefix="/bookings")


def _booking_json(booking):
    out = booking.to_dict()
    out["display"] = booking.display(tz=current_app.config["DISPLAY_TIMEZONE"])
    return out


def _payload() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Error: expected a JSON object body")
    return data


async def _own_booking(bid):
    """Renters only see their own bookings; anything else looks like a missing one."""
    booking = await services().bookings.get_booking(bid)
    if booking.renter_id != session["uid"]:
        raise NotFound(f"Error: booking with ID '{bid}' not found")
    return booking


@bp.post("")
@login_required
async def create_booking():
    """
    Body: {vehicle_id, pickup_date, return_date, pickup_time, return_time}
    with dates as YYYY-MM-DD and times as 'h:MM AM/PM'.
    """
    data = _payload()
    missing = [k for k in ("vehicle_id", "pickup_date", "return_date", "pickup_time", "return_time")
               if not data.get(k)]
    if missing:
        raise ValidationError(f"Error: missing field(s): {', '.join(missing)}")

    booking = await services().bookings.create_booking(
        vehicle_id=data["vehicle_id"],
        renter_id=session["uid"],
        pickup_date=data["pickup_date"],
        return_date=data["return_date"],
        pickup_time=data["pickup_time"],
        return_time=data["return_time"],
    )
    return jsonify(_booking_json(booking)), 201


@bp.get("")
@login_required
async def my_bookings():
    rows = await services().bookings.my_bookings(session["uid"], request.args.get("tab") or None)
    return jsonify(bookings=[_booking_json(b) for b in rows], count=len(rows))


@bp.get("/<bid>")
@login_required
async def booking_detail(bid):
    return jsonify(_booking_json(await _own_booking(bid)))


@bp.post("/<bid>/cancel")
@login_required
async def cancel_booking(bid):
    await _own_booking(bid)
    return jsonify(_booking_json(await services().bookings.cancel(bid)))


async def _supplier_booking(bid):
    """Only the supplier owning the booked vehicle may confirm or complete it."""
    booking = await services().bookings.get_booking(bid)
    vehicle = await services().store.get_by_id(Collections.VEHICLES, booking.vehicle_id)
    if not vehicle or vehicle.get("owner_id") != session["uid"]:
        raise NotFound(f"Error: booking with ID '{bid}' not found")
    return booking


@bp.post("/<bid>/confirm")
@login_required
async def confirm_booking(bid):
    await _supplier_booking(bid)
    return jsonify(_booking_json(await services().bookings.confirm(bid)))


@bp.post("/<bid>/complete")
@login_required
async def complete_booking(bid):
    await _supplier_booking(bid)
    return jsonify(_booking_json(await services().bookings.mark_complete(bid)))


@bp.post("/<bid>/rating")
@login_required
async def rate_booking(bid):
    """Body: {vehicle_score, vehicle_comment?, supplier_score, supplier_comment?}"""
    data = _payload()
    booking = await services().bookings.submit_rating(
        bid,
        vehicle_score=data.get("vehicle_score"),
        vehicle_comment=data.get("vehicle_comment"),
        supplier_score=data.get("supplier_score"),
        supplier_comment=data.get("supplier_comment"),
        author_id=session["uid"],
    )
    return jsonify(_booking_json(booking))
