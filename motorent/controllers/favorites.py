from flask import Blueprint, jsonify, session

from ..services.registry import services
from ..utils.decorators import login_required
from .vehicles import reference_location

bp = Blueprint("favorites", __name__, url_prefix="/favorites")


@bp.get("")
@login_required
async def my_favorites():
    rows = await services().vehicles.favorites(session["uid"], reference_location())
    return jsonify(vehicles=[vm.to_dict() for vm in rows], count=len(rows))


@bp.post("/<vid>/toggle")
@login_required
async def toggle_favorite(vid):
    return jsonify(await services().favorites.toggle(session["uid"], vid))
