"""Distance and ranking for open markets."""
from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple

from markets.models import LatLng, Market, RankedMarket

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: LatLng, b: LatLng) -> float:
    """Great-circle distance in km between two lat/lng points (degrees)."""
    p1, p2 = math.radians(a.lat), math.radians(b.lat)
    dphi = p2 - p1
    dl = math.radians(b.lng - a.lng)
    h = math.sin(dphi / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    # rounding can push h past 1.0 for near-antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, h)))


def _rank_key(item: RankedMarket) -> Tuple[bool, float]:
    # present distances first; None ties keep input order (sorted is stable)
    return (item.distance_km is None, item.distance_km or 0.0)


def sort_ranked(items: Iterable[RankedMarket]) -> Tuple[RankedMarket, ...]:
    """Nearest first, unknown distances last, input order among ties."""
    return tuple(sorted(items, key=_rank_key))


def rank_markets(markets: Iterable[Market], position: Optional[LatLng]) -> Tuple[RankedMarket, ...]:
    """Attach distances and return a new, nearest-first sequence.

    Without a position every distance is None and the input order is
    returned unchanged.
    """
    return sort_ranked(
        RankedMarket(m, haversine_km(position, m.position) if position is not None else None)
        for m in markets
    )


def format_distance(km: float) -> str:
    if km < 1:
        # half a meter rounds up, not to even
        return f"{math.floor(km * 1000 + 0.5)}m"
    return f"{km:.1f}km"


__all__ = ["EARTH_RADIUS_KM", "haversine_km", "sort_ranked", "rank_markets", "format_distance"]
