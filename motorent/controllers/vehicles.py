from flask import Blueprint, jsonify, request, session

from ..models.discovery import DiscoveryFilter
from ..services.registry import services
from ..utils.geo import GeoCoordinate

bp = Blueprint("vehicles", __name__, url_prefix="/vehicles")


def reference_location():
    """?lat=..&lng=.. from the caller's geolocation; None when absent or invalid."""
    return GeoCoordinate.from_dict({"lat": request.args.get("lat"), "lng": request.args.get("lng")})


@bp.get("")
async def list_vehicles():
    """Discovery with filters, e.g. /vehicles?category=two-wheel&price=0-500&sort=nearest&lat=..&lng=.."""
    q = {k: (v or "").strip() for k, v in request.args.items()}
    filt = DiscoveryFilter.from_args({k: v for k, v in q.items() if v})
    rows = await services().vehicles.discover(reference_location(), filt, session.get("uid"))
    return jsonify(vehicles=[vm.to_dict() for vm in rows], count=len(rows))


@bp.get("/<vid>")
async def vehicle_detail(vid):
    vm = await services().vehicles.get_vehicle(vid, reference_location(), session.get("uid"))
    return jsonify(vm.to_dict())
