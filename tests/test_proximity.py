import math

import pytest

from markets.models import RankedMarket, UserPosition
from markets.proximity import format_distance, haversine_km, rank_markets, sort_ranked
from conftest import CITY_HALL, make_market

POINTS = [
    CITY_HALL,
    UserPosition(37.5651, 126.9895),
    UserPosition(35.1796, 129.0756),
    UserPosition(33.4996, 126.5312),
    UserPosition(-33.8688, 151.2093),
    UserPosition(0.0, 179.9),
    UserPosition(0.0, -179.9),
]


def test_distance_zero_for_same_point():
    assert haversine_km(CITY_HALL, UserPosition(37.5665, 126.9780)) == 0


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_distance_symmetric(a, b):
    assert haversine_km(a, b) == pytest.approx(haversine_km(b, a), abs=1e-9)
    assert haversine_km(a, b) >= 0


def test_distance_golden_value():
    assert haversine_km(CITY_HALL, UserPosition(37.5651, 126.9895)) == pytest.approx(1.02, abs=0.05)


def test_distance_across_antimeridian_is_short():
    assert haversine_km(UserPosition(0.0, 179.9), UserPosition(0.0, -179.9)) == pytest.approx(22.24, abs=0.1)


HALF_EARTH_KM = math.pi * 6371.0


@pytest.mark.parametrize("lat", [i / 100 for i in range(1, 9000, 7)])
def test_distance_near_antipodal_points(lat):
    # (lat, lng) and (-lat, lng - 180) sit on opposite sides of the globe
    d = haversine_km(UserPosition(lat, 10.0), UserPosition(-lat, -170.0))
    assert d == pytest.approx(HALF_EARTH_KM, abs=0.01)


def test_distance_exact_antipode():
    assert haversine_km(UserPosition(0.0, 0.0), UserPosition(0.0, 180.0)) == pytest.approx(HALF_EARTH_KM)


def test_sort_puts_null_last_regardless_of_magnitude():
    items = (
        RankedMarket(make_market("a", {1}), 5.2),
        RankedMarket(make_market("b", {1}), None),
        RankedMarket(make_market("c", {1}), 1.1),
    )
    assert [r.distance_km for r in sort_ranked(items)] == [1.1, 5.2, None]


def test_sort_keeps_input_order_among_nulls():
    items = [RankedMarket(make_market(n, {1}), d) for n, d in
             [("x", None), ("y", 0.0), ("z", None), ("w", 1e6)]]
    assert [r.name for r in sort_ranked(items)] == ["y", "w", "x", "z"]


def test_rank_computes_distances_from_position():
    # due north of the origin, one degree of latitude ~= 111.195 km
    origin = UserPosition(0.0, 0.0)
    markets = [
        make_market("a", {1}, lat=5.2 / 111.195, lng=0.0),
        make_market("c", {1}, lat=1.1 / 111.195, lng=0.0),
    ]
    ranked = rank_markets(markets, origin)
    assert [r.name for r in ranked] == ["c", "a"]
    assert ranked[0].distance_km == pytest.approx(1.1, abs=0.01)
    assert ranked[1].distance_km == pytest.approx(5.2, abs=0.01)


def test_rank_without_position_is_identity(catalog):
    ranked = rank_markets(catalog, None)
    assert [r.market for r in ranked] == list(catalog)
    assert all(r.distance_km is None for r in ranked)


def test_rank_sorts_ascending(catalog):
    ranked = rank_markets(catalog, CITY_HALL)
    distances = [r.distance_km for r in ranked]
    assert distances == sorted(distances)
    assert ranked[0].name == "Near 4/9"


def test_rank_is_stable_for_equal_distances():
    here = UserPosition(37.0, 127.0)
    markets = [make_market(n, {1}, lat=37.0, lng=127.0) for n in ("first", "second", "third")]
    assert [r.name for r in rank_markets(markets, here)] == ["first", "second", "third"]


def test_rank_returns_new_sequence(catalog):
    before = tuple(catalog)
    ranked = rank_markets(catalog, CITY_HALL)
    assert isinstance(ranked, tuple)
    assert tuple(catalog) == before


@pytest.mark.parametrize("km, text", [
    (0.85, "850m"),
    (0.0, "0m"),
    (0.4994, "499m"),
    (1.0, "1.0km"),
    (1.04, "1.0km"),
    (12.34, "12.3km"),
    # halves round up
    (0.0125, "13m"),
    (0.0025, "3m"),
    (0.0005, "1m"),
])
def test_format_distance(km, text):
    assert format_distance(km) == text
