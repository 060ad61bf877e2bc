# File: ingest/scripts/cli.py
import json
import logging
import os
from datetime import date
from typing import Optional

import typer

from api.presenters import market_card
from ingest.scripts.ingest_catalog import build_catalog, load_catalog_frame
from ingest.scripts.validate import basic_validate, reject_reasons
from markets.calendar import day_ending_label, format_date, parse_date
from markets.logging_config import setup_logging
from markets.models import MarketQuery, UserPosition
from markets.query import run_query

APP = typer.Typer(help="Five-day market finder.")

CATALOG = os.getenv("MARKETS_CATALOG", "data/markets.csv")


@APP.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level")):
    setup_logging(level=logging.DEBUG if verbose else logging.WARNING)


@APP.command("validate")
def cmd_validate(
    catalog: str = typer.Option(CATALOG, help="Catalog file (CSV, JSON or Excel)"),
):
    try:
        df = load_catalog_frame(catalog)
    except (FileNotFoundError, KeyError, ValueError) as exc:
        typer.echo(f"[error] {exc}", err=True)
        raise typer.Exit(code=2)

    valid, rejects = basic_validate(df)
    typer.echo(f"valid={len(valid)} rejects={len(rejects)}")
    for reason in reject_reasons(rejects):
        typer.echo(f"  {reason}")
    if len(rejects):
        raise typer.Exit(code=1)


@APP.command("open")
def cmd_open(
    day: str = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
    lat: Optional[float] = typer.Option(None, min=-90, max=90, help="Your latitude"),
    lng: Optional[float] = typer.Option(None, min=-180, max=180, help="Your longitude"),
    catalog: str = typer.Option(CATALOG, help="Catalog file (CSV, JSON or Excel)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
):
    """List markets open on a date, nearest first when a position is given."""
    if (lat is None) != (lng is None):
        raise typer.BadParameter("--lat and --lng must be given together")
    try:
        when = parse_date(day) if day else date.today()
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--date")

    try:
        markets = build_catalog(catalog)
    except (FileNotFoundError, KeyError, ValueError) as exc:
        typer.echo(f"[error] {exc}", err=True)
        raise typer.Exit(code=2)

    position = UserPosition(lat, lng) if lat is not None else None
    result = run_query(markets, MarketQuery(date=when, position=position))
    cards = [market_card(m, i) for i, m in enumerate(result.markets)]

    if as_json:
        typer.echo(json.dumps({
            "date": format_date(result.date),
            "day_ending": result.day_ending,
            "ranked": result.is_ranked,
            "items": cards,
        }, ensure_ascii=False, indent=2))
        return

    typer.echo(f"{format_date(result.date)} (day ending {day_ending_label(result.day_ending)}): {len(cards)} market(s) open")
    if result.is_empty:
        typer.echo("No five-day markets open on this date. Try another day.")
        return
    for card in cards:
        dist = card["distance_label"] or "-"
        typer.echo(f"{card['rank']:>3}. {card['name']}  {dist}  [{card['days_label']}]  {card['address']}")


if __name__ == "__main__":
    APP()
