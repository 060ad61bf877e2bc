from __future__ import annotations

import logging
from typing import Iterable

from markets.calendar import day_ending, open_markets
from markets.models import Market, MarketQuery, QueryResult
from markets.proximity import rank_markets

logger = logging.getLogger(__name__)


def run_query(catalog: Iterable[Market], query: MarketQuery) -> QueryResult:
    """Open markets for ``query.date``, nearest first when a position is known.

    A PositionUnavailable in the query degrades to unranked catalog order
    and is carried through on the result.
    """
    opened = open_markets(catalog, query.date)
    ranked = rank_markets(opened, query.user_position)
    result = QueryResult(
        date=query.date,
        day_ending=day_ending(query.date),
        markets=ranked,
        user_position=query.user_position,
        position_error=query.position_error,
    )
    logger.debug(
        "query date=%s ending=%d open=%d ranked=%s",
        query.date.isoformat(), result.day_ending, len(ranked), result.is_ranked,
    )
    return result
