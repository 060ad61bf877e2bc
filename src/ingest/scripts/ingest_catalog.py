# File: ingest/scripts/ingest_catalog.py
import logging
import numbers
import os
import re
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

import pandas as pd
import yaml

from ingest.scripts.validate import basic_validate, reject_reasons
from markets.errors import MalformedCatalog
from markets.models import LatLng, Market

logger = logging.getLogger(__name__)

SCHEMA = os.getenv("MARKETS_SCHEMA") or str(Path(__file__).resolve().parents[1] / "config" / "schema.yml")

DAY_SPLIT_RE = re.compile(r"[\s,|/;]+")

EXCEL_SUFFIXES = (".xlsx", ".xlsm")


def parse_open_days(value) -> Optional[FrozenSet[int]]:
    """Turn "4,9", "4 9", "4일, 9일", [4, 9] or 4 into {4, 9}.

    "10" is accepted as the canonical 0. Returns None when any token is
    unusable or nothing is left.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (list, tuple, set, frozenset)):
        tokens = [str(v) for v in value]
    elif isinstance(value, numbers.Real):
        if pd.isna(value) or float(value) != int(value):
            return None
        tokens = [str(int(value))]
    else:
        text = str(value).strip().strip("[]")
        tokens = [tok for tok in DAY_SPLIT_RE.split(text) if tok]

    days = set()
    for tok in tokens:
        tok = tok.strip().removesuffix("일")
        if not tok.isdigit():
            return None
        day = int(tok)
        if day == 10:
            day = 0
        if not 0 <= day <= 9:
            return None
        days.add(day)
    return frozenset(days) or None


def load_config(schema_path: str) -> Tuple[list, dict, dict]:
    with open(schema_path, "r", encoding="utf-8") as f:
        conf = yaml.safe_load(f) or {}
    required = conf.get("required", [])
    rename = conf.get("rename", {})
    dtypes = conf.get("dtypes", {})
    return required, rename, dtypes


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".json":
        return pd.read_json(path, orient="records", dtype=False)
    if suffix in EXCEL_SUFFIXES:
        # dtype=str keeps "4,9" from being mangled; numbers are re-typed below
        return pd.read_excel(path, dtype=str, engine="openpyxl")
    if suffix == ".xls":
        raise ValueError(f"Legacy .xls catalogs are not supported, save {path.name} as .xlsx")
    return pd.read_csv(path, dtype=str, encoding="utf-8")


def load_catalog_frame(raw_path: str, schema_path: str | None = None) -> pd.DataFrame:
    path = Path(raw_path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Catalog not found: {path}")

    required, rename, dtypes = load_config(schema_path or SCHEMA)
    df = _read_frame(path)
    df.columns = [str(c).strip() for c in df.columns]

    to_rename = {k: v for k, v in rename.items() if k in df.columns and v not in df.columns}
    df = df.rename(columns=to_rename)

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise KeyError(f"Missing required columns in input: {missing}")

    for col, typ in dtypes.items():
        if col not in df.columns:
            continue
        if typ == "float":
            df[col] = pd.to_numeric(df[col], errors="coerce")
        elif typ == "str":
            df[col] = df[col].astype("string").str.strip()
        elif typ == "days":
            df[col] = df[col].map(parse_open_days).astype(object)
        # else: leave as-is

    return df


def frame_to_markets(df: pd.DataFrame) -> Tuple[Market, ...]:
    return tuple(
        Market(
            name=str(row.name),
            address=str(row.address),
            position=LatLng(float(row.lat), float(row.lng)),
            open_days=frozenset(row.open_days),
        )
        for row in df[["name", "address", "lat", "lng", "open_days"]].itertuples(index=False)
    )


def build_catalog(raw_path: str, schema_path: str | None = None, strict: bool = True) -> Tuple[Market, ...]:
    """Load, validate and freeze the catalog at ``raw_path``.

    With ``strict`` any rejected row raises MalformedCatalog; otherwise the
    rejects are logged and dropped.
    """
    df = load_catalog_frame(raw_path, schema_path)
    valid, rejects = basic_validate(df)
    if len(rejects):
        reasons = reject_reasons(rejects)
        if strict:
            raise MalformedCatalog(reasons, source=str(raw_path))
        for reason in reasons:
            logger.warning("skipping catalog %s", reason)

    catalog = frame_to_markets(valid)
    logger.info("loaded %d markets from %s (%d rejected)", len(catalog), raw_path, len(rejects))
    return catalog
