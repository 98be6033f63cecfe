from __future__ import annotations

from typing import List

from loguru import logger

from motorent.exceptions import NotFound
from motorent.models.store import DocumentStore
from motorent.services.common import require_identity
from motorent.utils.constants import Collections
from motorent.utils.datetimes import utcnow


def favorite_key(renter_id: str, vehicle_id: str) -> str:
    """Favorites are keyed by the pair itself, so racing writes land on one record."""
    return f"{renter_id}:{vehicle_id}"


class FavoriteService:
    """Renter-scoped vehicle bookmarks."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def is_favorite(self, renter_id: str, vehicle_id: str) -> bool:
        doc = await self.store.get_by_id(Collections.FAVORITES, favorite_key(renter_id, vehicle_id))
        return doc is not None

    async def toggle(self, renter_id: str, vehicle_id: str) -> dict:
        """Flip membership of (renter, vehicle); returns {"is_favorite": <new state>}."""
        renter_id = require_identity(renter_id, "favorites")
        key = favorite_key(renter_id, vehicle_id)

        if await self.store.get_by_id(Collections.FAVORITES, key) is not None:
            await self.store.delete(Collections.FAVORITES, key)
            logger.info("Favorite removed: renter={} vehicle={}", renter_id, vehicle_id)
            return {"is_favorite": False}

        if await self.store.get_by_id(Collections.VEHICLES, vehicle_id) is None:
            raise NotFound(f"Error: vehicle with ID '{vehicle_id}' not found")

        await self.store.create(Collections.FAVORITES, {
            "renter_id": renter_id,
            "vehicle_id": vehicle_id,
            "created_at": utcnow().isoformat(timespec="seconds"),
        }, doc_id=key)
        logger.info("Favorite added: renter={} vehicle={}", renter_id, vehicle_id)
        return {"is_favorite": True}

    async def favorite_ids(self, renter_id: str) -> List[str]:
        favs = await self.store.query_by_field(Collections.FAVORITES, "renter_id", renter_id)
        return [f["vehicle_id"] for f in favs]
