"""
Distance computation, nearest/farthest ordering with unlocated listings,
favorites flag, and degradation on missing supplier records.
"""

import pytest

from conftest import run, seed_supplier, seed_vehicle
from motorent.exceptions import NotFound, StoreUnavailable
from motorent.models.discovery import DiscoveryFilter, SortOrder
from motorent.models.store import MemoryStore
from motorent.services.favorite_service import FavoriteService
from motorent.services.vehicle_service import VehicleService
from motorent.utils.geo import GeoCoordinate

ORIGIN = GeoCoordinate(0.0, 0.0)
# one degree of latitude is ~111.19 km on a 6371 km sphere
KM_PER_DEG = 111.19492664455873


@pytest.fixture
def located(store):
    seed_supplier(store, "s-near", "Near", coordinate={"latitude": 5 / KM_PER_DEG, "longitude": 0.0})
    seed_supplier(store, "s-far", "Far", coordinate={"latitude": 20 / KM_PER_DEG, "longitude": 0.0})
    seed_supplier(store, "s-nowhere", "Nowhere", coordinate=None)
    seed_vehicle(store, "v-far", owner_id="s-far")
    seed_vehicle(store, "v-nowhere", owner_id="s-nowhere")
    seed_vehicle(store, "v-near", owner_id="s-near")
    return store


def _ids(rows):
    return [vm.vehicle_id for vm in rows]


def test_distance_is_computed_from_supplier_coordinate(located):
    rows = run(VehicleService(located).discover(ORIGIN, DiscoveryFilter()))
    by_id = {vm.vehicle_id: vm for vm in rows}
    assert by_id["v-near"].distance_km == pytest.approx(5, abs=1e-6)
    assert by_id["v-far"].distance_km == pytest.approx(20, abs=1e-6)
    assert by_id["v-nowhere"].distance_km is None


def test_nearest_puts_unlocated_last(located):
    rows = run(VehicleService(located).discover(ORIGIN, DiscoveryFilter(sort_order=SortOrder.NEAREST)))
    assert _ids(rows) == ["v-near", "v-far", "v-nowhere"]


def test_farthest_puts_unlocated_first(located):
    rows = run(VehicleService(located).discover(ORIGIN, DiscoveryFilter(sort_order=SortOrder.FARTHEST)))
    assert _ids(rows) == ["v-nowhere", "v-far", "v-near"]


def test_no_reference_location_means_no_distance(located):
    rows = run(VehicleService(located).discover(None, DiscoveryFilter(sort_order=SortOrder.NEAREST)))
    assert all(vm.distance_km is None for vm in rows)
    assert len(rows) == 3


def test_missing_supplier_degrades_to_placeholder(store):
    seed_vehicle(store, "v-orphan", owner_id="ghost")
    rows = run(VehicleService(store).discover(ORIGIN))
    assert len(rows) == 1
    vm = rows[0]
    assert vm.supplier.business_name == "Unknown"
    assert vm.supplier.is_sentinel
    assert vm.distance_km is None
    assert vm.to_dict()["supplier"]["business_address"] is None


def test_is_favorite_is_relative_to_renter(located):
    run(FavoriteService(located).toggle("renter-1", "v-near"))
    svc = VehicleService(located)

    mine = {vm.vehicle_id: vm.is_favorite for vm in run(svc.discover(None, None, "renter-1"))}
    theirs = {vm.vehicle_id: vm.is_favorite for vm in run(svc.discover(None, None, "renter-2"))}
    anon = {vm.vehicle_id: vm.is_favorite for vm in run(svc.discover(None, None, None))}

    assert mine == {"v-near": True, "v-far": False, "v-nowhere": False}
    assert not any(theirs.values())
    assert not any(anon.values())


def test_rerun_is_an_independent_snapshot(located):
    svc = VehicleService(located)
    first = run(svc.discover(ORIGIN))
    seed_vehicle(located, "v-new", owner_id="s-near")
    second = run(svc.discover(ORIGIN))
    assert len(first) == 3
    assert len(second) == 4


def test_favorites_listing_skips_delisted_vehicles(located):
    favs = FavoriteService(located)
    run(favs.toggle("renter-1", "v-near"))
    run(favs.toggle("renter-1", "v-far"))
    run(located.delete("vehicles", "v-far"))

    rows = run(VehicleService(located).favorites("renter-1"))
    assert _ids(rows) == ["v-near"]
    assert rows[0].is_favorite


def test_get_vehicle_unknown_id(store):
    with pytest.raises(NotFound):
        run(VehicleService(store).get_vehicle("nope"))


class DownStore(MemoryStore):
    async def list_all(self, collection):
        raise StoreUnavailable("Error: connection refused")


class FlakyRatingsStore(MemoryStore):
    async def query_by_field(self, collection, field, value):
        raise StoreUnavailable("Error: connection reset")


def test_unreachable_store_is_fatal():
    with pytest.raises(StoreUnavailable):
        run(VehicleService(DownStore()).discover(ORIGIN))


def test_store_failure_during_enrichment_is_fatal():
    store = FlakyRatingsStore()
    seed_supplier(store, "sup-1")
    seed_vehicle(store, "v1")
    with pytest.raises(StoreUnavailable):
        run(VehicleService(store).discover(ORIGIN))
