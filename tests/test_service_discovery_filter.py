"""
Discovery filters: each predicate on its own, AND-combination, and the
"absent field means no constraint" rule.
"""

import pytest

from conftest import run, seed_rating, seed_supplier, seed_vehicle
from motorent.models.discovery import DiscoveryFilter, Range
from motorent.services.vehicle_service import VehicleService
from motorent.utils.constants import Collections


@pytest.fixture
def fleet(store):
    seed_supplier(store, "sup-good", "Good Rides")
    seed_supplier(store, "sup-meh", "Meh Motors")
    seed_vehicle(store, "v1", "Honda Click", "sup-good", price=400, displacement=125)
    seed_vehicle(store, "v2", "Yamaha NMAX", "sup-meh", price=900, displacement=155)
    seed_vehicle(store, "v3", "Toyota Wigo", "sup-meh", price=1800,
                 category="four-wheel", displacement=1000)

    for score in (4, 4, 5, 4, 4):  # 4.2
        seed_rating(store, Collections.VEHICLE_RATINGS, "v1", score)
    seed_rating(store, Collections.VEHICLE_RATINGS, "v2", 2)
    seed_rating(store, Collections.SUPPLIER_RATINGS, "sup-good", 5)
    seed_rating(store, Collections.SUPPLIER_RATINGS, "sup-meh", 3)
    return store


def _ids(rows):
    return [vm.vehicle_id for vm in rows]


def _discover(store, **kw):
    return run(VehicleService(store).discover(None, DiscoveryFilter(**kw)))


def test_no_filter_returns_everything(fleet):
    assert sorted(_ids(_discover(fleet))) == ["v1", "v2", "v3"]


def test_price_range(fleet):
    assert _ids(_discover(fleet, price=Range(0, 500))) == ["v1"]


def test_vehicle_rating_range(fleet):
    assert _ids(_discover(fleet, vehicle_rating=Range(4, 5))) == ["v1"]


def test_supplier_rating_range(fleet):
    assert sorted(_ids(_discover(fleet, supplier_rating=Range(2, 3.5)))) == ["v2", "v3"]


def test_category_accepts_aliases(fleet):
    assert _ids(_discover(fleet, category="cars")) == ["v3"]
    assert sorted(_ids(_discover(fleet, category="two-wheel"))) == ["v1", "v2"]


def test_displacement_range(fleet):
    assert _ids(_discover(fleet, displacement=Range(150, 200))) == ["v2"]


def test_search_is_case_insensitive_substring(fleet):
    assert _ids(_discover(fleet, search="nMa")) == ["v2"]


def test_predicates_are_and_combined(fleet):
    rows = _discover(fleet, category="two-wheel", price=Range(None, 1000), vehicle_rating=Range(3, None))
    assert _ids(rows) == ["v1"]


def test_unrated_vehicle_has_zero_summary(fleet):
    v3 = next(vm for vm in _discover(fleet) if vm.vehicle_id == "v3")
    assert v3.vehicle_rating.average == 0
    assert v3.vehicle_rating.count == 0
    assert v3.supplier_rating.count == 1


def test_rating_summary_values(fleet):
    v1 = next(vm for vm in _discover(fleet) if vm.vehicle_id == "v1")
    assert v1.vehicle_rating.average == pytest.approx(4.2)
    assert v1.vehicle_rating.count == 5


def test_from_args_parses_query_strings():
    f = DiscoveryFilter.from_args({
        "category": "all",
        "price": "0-500",
        "min_displacement": "125",
        "vehicle_rating": "garbage",
        "sort": "Nearest",
        "search": "  click ",
    })
    assert f.category is None
    assert f.price == Range(0, 500)
    assert f.displacement == Range(125, None)
    assert f.vehicle_rating is None
    assert f.sort_order == "nearest"
    assert f.search == "click"


def test_reversed_range_is_swapped():
    assert Range(500, 0) == Range(0, 500)
