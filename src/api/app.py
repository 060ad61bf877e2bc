from __future__ import annotations
#!/usr/bin/env python3
"""
Five-day market finder — read-only FastAPI over the static market catalog

- Catalog is loaded once from MARKETS_CATALOG (CSV/JSON/Excel) on first use
- /markets        -> markets open on ?date=, nearest first when ?lat=&lng= given
- /calendar/{d}   -> day-ending code for a date and how many markets are open
"""

import logging
import os
import typing as t
from datetime import date

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from api.presenters import VIEWPORT_POLICIES, market_card, position_message, viewport
from ingest.scripts.ingest_catalog import build_catalog
from markets.calendar import day_ending, day_ending_label, format_date, open_markets, parse_date
from markets.logging_config import setup_logging
from markets.models import Market, MarketQuery, PositionFailure, PositionUnavailable, UserPosition
from markets.query import run_query

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------------- #
# Config
# ----------------------------------------------------------------------------- #

CATALOG_PATH = os.getenv("MARKETS_CATALOG", "data/markets.csv").strip()

ALLOWED_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "MARKETS_ALLOWED_ORIGINS",
        "http://127.0.0.1:8000,http://localhost:8000,http://127.0.0.1:5500,http://localhost:5500",
    ).split(",")
    if o.strip()
]

# ----------------------------------------------------------------------------- #
# App
# ----------------------------------------------------------------------------- #

app = FastAPI(title="Five-Day Market Finder API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# ----------------------------------------------------------------------------- #
# Catalog (loaded once, read-only afterwards)
# ----------------------------------------------------------------------------- #

_CATALOG: tuple[Market, ...] | None = None


def get_catalog() -> tuple[Market, ...]:
    global _CATALOG
    if _CATALOG is None:
        try:
            _CATALOG = build_catalog(CATALOG_PATH)
        except (FileNotFoundError, KeyError, ValueError) as exc:
            # ValueError covers MalformedCatalog and unsupported file formats
            logger.error("catalog unavailable: %s", exc)
            raise HTTPException(503, f"catalog unavailable: {exc}")
    return _CATALOG


def reset_catalog() -> None:
    global _CATALOG
    _CATALOG = None


def _resolve_date(value: str | None) -> date:
    if not value:
        return date.today()
    try:
        return parse_date(value)
    except ValueError as exc:
        raise HTTPException(400, str(exc))


# ----------------------------------------------------------------------------- #
# Routes
# ----------------------------------------------------------------------------- #

@app.get("/health")
def health():
    return {"ok": True, "markets": len(get_catalog())}


@app.get("/markets")
def markets(
    day_text: t.Optional[str] = Query(None, alias="date", description="YYYY-MM-DD, defaults to today"),
    lat: t.Optional[float] = Query(None, ge=-90, le=90, description="user latitude"),
    lng: t.Optional[float] = Query(None, ge=-180, le=180, description="user longitude"),
    position_error: t.Optional[PositionFailure] = Query(None, description="geolocation failure code"),
    viewport_policy: str = Query("nearest", alias="viewport", description="nearest | all"),
):
    """Open markets for a date, ranked by distance when a position is given."""
    day = _resolve_date(day_text)
    if (lat is None) != (lng is None):
        raise HTTPException(400, "lat and lng must be given together")
    if lat is not None and position_error is not None:
        raise HTTPException(400, "position and position_error are mutually exclusive")
    if viewport_policy not in VIEWPORT_POLICIES:
        raise HTTPException(400, f"viewport must be one of {', '.join(VIEWPORT_POLICIES)}")

    position: UserPosition | PositionUnavailable | None = None
    if lat is not None:
        position = UserPosition(lat, lng)
    elif position_error is not None:
        position = PositionUnavailable(position_error, position_message(position_error))

    result = run_query(get_catalog(), MarketQuery(date=day, position=position))

    user = result.user_position
    err = result.position_error
    return {
        "date": format_date(result.date),
        "day_ending": result.day_ending,
        "day_ending_label": day_ending_label(result.day_ending),
        "count": len(result.markets),
        "ranked": result.is_ranked,
        "user_position": {"lat": user.lat, "lng": user.lng} if user else None,
        "position_error": {"reason": err.reason.value, "message": err.message} if err else None,
        "viewport": viewport(result, viewport_policy),
        "items": [market_card(m, i) for i, m in enumerate(result.markets)],
    }


@app.get("/calendar/{day}")
def calendar_day(day: str):
    d = _resolve_date(day)
    ending = day_ending(d)
    return {
        "date": format_date(d),
        "day_ending": ending,
        "day_ending_label": day_ending_label(ending),
        "open_count": len(open_markets(get_catalog(), d)),
    }


# ----------------------------------------------------------------------------- #
# Entrypoint
# ----------------------------------------------------------------------------- #

if __name__ == "__main__":
    import uvicorn
    setup_logging()
    uvicorn.run("api.app:app", host="127.0.0.1", port=8001, reload=True)
