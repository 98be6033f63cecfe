from __future__ import annotations

import asyncio
import math
from typing import Callable, List, Optional

from loguru import logger

from motorent.exceptions import NotFound
from motorent.models.discovery import DiscoveryFilter, SortOrder, VehicleViewModel
from motorent.models.store import DocumentStore
from motorent.models.vehicle import Supplier, Vehicle
from motorent.services.common import _lc, norm_category
from motorent.services.favorite_service import favorite_key
from motorent.services.rating_service import RatingService
from motorent.utils.constants import Collections
from motorent.utils.geo import GeoCoordinate, distance_km


class VehicleService:
    """Vehicle discovery: join, enrich, filter, sort."""

    def __init__(self, store: DocumentStore, ratings: Optional[RatingService] = None):
        self.store = store
        self.ratings = ratings or RatingService(store)

    # ---------------- enrichment ----------------
    async def _load_supplier(self, vehicle: Vehicle) -> Supplier:
        doc = await self.store.get_by_id(Collections.SUPPLIERS, vehicle.owner_id) if vehicle.owner_id else None
        if doc is None:
            logger.warning("Vehicle {} has no supplier record (owner_id={!r}); using placeholder",
                           vehicle.vehicle_id, vehicle.owner_id)
            return Supplier.unknown()
        return Supplier.from_dict(doc)

    async def _is_favorite(self, renter_id: Optional[str], vehicle_id: str) -> bool:
        if not renter_id:
            return False
        doc = await self.store.get_by_id(Collections.FAVORITES, favorite_key(renter_id, vehicle_id))
        return doc is not None

    async def _enrich(self, vehicle: Vehicle, reference: Optional[GeoCoordinate],
                      renter_id: Optional[str]) -> VehicleViewModel:
        """
        Supplier lookup, both rating sets and the favorite check are
        independent reads and are issued together. Distance needs the
        supplier's coordinate, so it is computed afterwards.
        """
        supplier, vehicle_rating, supplier_rating, is_fav = await asyncio.gather(
            self._load_supplier(vehicle),
            self.ratings.vehicle_summary(vehicle.vehicle_id),
            self.ratings.supplier_summary(vehicle.owner_id),
            self._is_favorite(renter_id, vehicle.vehicle_id),
        )

        dist = None
        if reference is not None and supplier.coordinate is not None:
            dist = distance_km(reference, supplier.coordinate)

        return VehicleViewModel(
            vehicle=vehicle,
            supplier=supplier,
            vehicle_rating=vehicle_rating,
            supplier_rating=supplier_rating,
            distance_km=dist,
            is_favorite=is_fav,
        )

    # ---------------- filtering & sorting ----------------
    @staticmethod
    def _predicates(filt: DiscoveryFilter) -> List[Callable[[VehicleViewModel], bool]]:
        """Predicates in application order; absent filter fields add nothing."""
        preds: List[Callable[[VehicleViewModel], bool]] = []

        if filt.category:
            wanted = norm_category(filt.category)
            preds.append(lambda vm: norm_category(vm.vehicle.category) == wanted)

        if filt.displacement is not None:
            preds.append(lambda vm: filt.displacement.contains(vm.vehicle.displacement))

        if filt.price is not None:
            preds.append(lambda vm: filt.price.contains(vm.vehicle.price_per_day))

        if filt.vehicle_rating is not None:
            preds.append(lambda vm: filt.vehicle_rating.contains(vm.vehicle_rating.average))

        if filt.supplier_rating is not None:
            preds.append(lambda vm: filt.supplier_rating.contains(vm.supplier_rating.average))

        kw = _lc(filt.search).strip()
        if kw:
            preds.append(lambda vm: kw in _lc(vm.vehicle.name))

        return preds

    @staticmethod
    def apply_filter(rows: List[VehicleViewModel], filt: DiscoveryFilter) -> List[VehicleViewModel]:
        res = list(rows)
        for pred in VehicleService._predicates(filt):
            res = [vm for vm in res if pred(vm)]
        return res

    @staticmethod
    def apply_sort(rows: List[VehicleViewModel], sort_order: str) -> List[VehicleViewModel]:
        """
        nearest: ascending, unlocated listings last (None counts as +inf).
        farthest: descending, unlocated listings first (None counts as 0).
        """
        if sort_order == SortOrder.NEAREST:
            return sorted(rows, key=lambda vm: vm.distance_km if vm.distance_km is not None else math.inf)
        if sort_order == SortOrder.FARTHEST:
            return sorted(rows, key=lambda vm: vm.distance_km if vm.distance_km is not None else 0.0,
                          reverse=True)
        return list(rows)

    # ---------------- public API ----------------
    async def discover(self, reference_location: Optional[GeoCoordinate],
                       filt: Optional[DiscoveryFilter] = None,
                       requesting_renter_id: Optional[str] = None) -> List[VehicleViewModel]:
        """
        Return the filtered, sorted list of enriched vehicles.

        Missing suppliers and empty rating sets degrade to placeholder values;
        only StoreUnavailable aborts the call.
        """
        filt = filt or DiscoveryFilter()

        docs = await self.store.list_all(Collections.VEHICLES)
        vehicles = [Vehicle.from_dict(d) for d in docs]

        rows = list(await asyncio.gather(
            *(self._enrich(v, reference_location, requesting_renter_id) for v in vehicles)
        ))

        res = self.apply_sort(self.apply_filter(rows, filt), filt.sort_order)
        logger.debug("discover: {} vehicles, {} after filters, sort={}",
                     len(rows), len(res), filt.sort_order)
        return res

    async def get_vehicle(self, vehicle_id: str, reference_location: Optional[GeoCoordinate] = None,
                          requesting_renter_id: Optional[str] = None) -> VehicleViewModel:
        """Return one enriched vehicle or raise NotFound."""
        doc = await self.store.get_by_id(Collections.VEHICLES, vehicle_id)
        if doc is None:
            raise NotFound(f"Error: vehicle with ID '{vehicle_id}' not found")
        return await self._enrich(Vehicle.from_dict(doc), reference_location, requesting_renter_id)

    async def favorites(self, renter_id: str,
                        reference_location: Optional[GeoCoordinate] = None) -> List[VehicleViewModel]:
        """The renter's favorite vehicles, skipping ones that were delisted."""
        favs = await self.store.query_by_field(Collections.FAVORITES, "renter_id", renter_id)
        docs = await asyncio.gather(
            *(self.store.get_by_id(Collections.VEHICLES, f["vehicle_id"]) for f in favs)
        )
        vehicles = []
        for fav, doc in zip(favs, docs):
            if doc is None:
                logger.warning("Favorite {} points at missing vehicle {}", fav.get("id"), fav.get("vehicle_id"))
                continue
            vehicles.append(Vehicle.from_dict(doc))
        return list(await asyncio.gather(
            *(self._enrich(v, reference_location, renter_id) for v in vehicles)
        ))
