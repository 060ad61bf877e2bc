"""Calendar matching for 5-day markets.

A market runs on every day-of-month whose last digit is in its
``open_days``; day 10, 20 and 30 share the single code 0.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, Tuple

from markets.models import Market


def day_ending(d: date) -> int:
    return d.day % 10


def is_market_open(market: Market, d: date) -> bool:
    return day_ending(d) in market.open_days


def open_markets(catalog: Iterable[Market], d: date) -> Tuple[Market, ...]:
    """Markets open on ``d``, in catalog order."""
    ending = day_ending(d)
    return tuple(m for m in catalog if ending in m.open_days)


def day_ending_label(code: int) -> str:
    return "0, 10" if code == 0 else str(code)


def format_market_days(days: Iterable[int]) -> str:
    # 0 reads as the 10th, so it sorts after 9
    shown = sorted(10 if d == 0 else d for d in set(days))
    return ", ".join(f"{d}일" for d in shown)


def parse_date(text: str) -> date:
    """Parse a YYYY-MM-DD string; raises ValueError on anything else."""
    parts = (text or "").strip().split("-")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"expected YYYY-MM-DD, got {text!r}")
    year, month, day = (int(p) for p in parts)
    return date(year, month, day)


def format_date(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


__all__ = [
    "day_ending",
    "is_market_open",
    "open_markets",
    "day_ending_label",
    "format_market_days",
    "parse_date",
    "format_date",
]
