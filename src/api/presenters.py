"""List/map-facing shapes built from a QueryResult.

Nothing here draws anything; it only decides what the list card shows and
which points the map should fit in its viewport.
"""
from __future__ import annotations

import typing as t

from markets.calendar import format_market_days
from markets.models import LatLng, PositionFailure, QueryResult, RankedMarket
from markets.proximity import format_distance

# Seoul City Hall
DEFAULT_CENTER = LatLng(37.5665, 126.9780)

BADGE_COUNT = 3

VIEWPORT_POLICIES = ("nearest", "all")

POSITION_MESSAGES = {
    PositionFailure.PERMISSION_DENIED: "위치 권한이 거부되었습니다.",
    PositionFailure.POSITION_UNAVAILABLE: "위치 정보를 사용할 수 없습니다.",
    PositionFailure.TIMEOUT: "위치 요청 시간이 초과되었습니다.",
    PositionFailure.UNSUPPORTED: "이 브라우저는 위치 서비스를 지원하지 않습니다.",
}


def position_message(reason: PositionFailure) -> str:
    return POSITION_MESSAGES.get(reason, "위치를 가져올 수 없습니다.")


def market_card(item: RankedMarket, index: int) -> dict[str, t.Any]:
    ranked = item.distance_km is not None
    return {
        "rank": index + 1,
        "badge": ranked and index < BADGE_COUNT,
        "name": item.name,
        "address": item.address,
        "lat": item.position.lat,
        "lng": item.position.lng,
        "open_days": sorted(item.open_days),
        "days_label": format_market_days(item.open_days),
        "distance_km": item.distance_km,
        "distance_label": format_distance(item.distance_km) if ranked else None,
    }


def viewport_points(result: QueryResult, policy: str = "nearest") -> list[LatLng]:
    """Points the map should keep visible.

    "nearest": the user and the closest market when both exist, else every
    market. "all": every market, plus the user when known.
    """
    if policy not in VIEWPORT_POLICIES:
        raise ValueError(f"unknown viewport policy {policy!r}")
    if result.is_empty:
        return []
    user = result.user_position
    if policy == "nearest" and user is not None:
        return [user, result.markets[0].position]
    points = [m.position for m in result.markets]
    if user is not None:
        points.append(user)
    return points


def bounds(points: t.Sequence[LatLng]) -> tuple[float, float, float, float] | None:
    """(south, west, north, east) around ``points``."""
    if not points:
        return None
    lats = [p.lat for p in points]
    lngs = [p.lng for p in points]
    return (min(lats), min(lngs), max(lats), max(lngs))


def viewport(result: QueryResult, policy: str = "nearest") -> dict[str, t.Any]:
    points = viewport_points(result, policy)
    box = bounds(points)
    if box is None:
        center = result.user_position or DEFAULT_CENTER
    else:
        center = LatLng((box[0] + box[2]) / 2, (box[1] + box[3]) / 2)
    return {
        "policy": policy,
        "center": {"lat": center.lat, "lng": center.lng},
        "bounds": list(box) if box else None,
        "points": [{"lat": p.lat, "lng": p.lng} for p in points],
    }
