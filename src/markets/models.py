"""Value types for the market finder.

Everything here is frozen: the catalog is built once and each query
produces fresh RankedMarket / QueryResult values instead of mutating
anything that came before.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Optional, Tuple, Union


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float


# the geolocation collaborator hands us a plain LatLng
UserPosition = LatLng


@dataclass(frozen=True)
class Market:
    name: str
    address: str
    position: LatLng
    open_days: FrozenSet[int]

    @property
    def lat(self) -> float:
        return self.position.lat

    @property
    def lng(self) -> float:
        return self.position.lng


@dataclass(frozen=True)
class RankedMarket:
    market: Market
    distance_km: Optional[float] = None

    @property
    def name(self) -> str:
        return self.market.name

    @property
    def address(self) -> str:
        return self.market.address

    @property
    def position(self) -> LatLng:
        return self.market.position

    @property
    def open_days(self) -> FrozenSet[int]:
        return self.market.open_days


class PositionFailure(str, enum.Enum):
    """Reason codes reported by the geolocation collaborator."""

    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class PositionUnavailable:
    reason: PositionFailure
    message: str = ""


PositionInput = Union[UserPosition, PositionUnavailable, None]


@dataclass(frozen=True)
class MarketQuery:
    date: date
    position: PositionInput = None

    @property
    def user_position(self) -> Optional[UserPosition]:
        return self.position if isinstance(self.position, UserPosition) else None

    @property
    def position_error(self) -> Optional[PositionUnavailable]:
        return self.position if isinstance(self.position, PositionUnavailable) else None


@dataclass(frozen=True)
class QueryResult:
    date: date
    day_ending: int
    markets: Tuple[RankedMarket, ...]
    user_position: Optional[UserPosition] = None
    position_error: Optional[PositionUnavailable] = None

    @property
    def is_empty(self) -> bool:
        return not self.markets

    @property
    def is_ranked(self) -> bool:
        # distances are attached only when a position was supplied
        return self.user_position is not None


__all__ = [
    "LatLng",
    "UserPosition",
    "Market",
    "RankedMarket",
    "PositionFailure",
    "PositionUnavailable",
    "PositionInput",
    "MarketQuery",
    "QueryResult",
]
