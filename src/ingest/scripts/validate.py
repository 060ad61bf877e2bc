# File: ingest/scripts/validate.py
"""Row checks for the market catalog.

Every failing rule appends its code to ``_reject_reason``; a row is valid
only when that column stays empty.
"""
from typing import Callable, List, Tuple

import pandas as pd

REJECT_COL = "_reject_reason"

DAY_CODES = frozenset(range(10))


def _blank(s: pd.Series) -> pd.Series:
    return s.isna() | (s.astype(str).str.strip() == "")


def _out_of_range(s: pd.Series, limit: float) -> pd.Series:
    values = pd.to_numeric(s, errors="coerce")
    return values.isna() | (values.abs() > limit)


def _bad_days(s: pd.Series) -> pd.Series:
    # the loader leaves None when a day list can't be parsed
    return s.map(lambda days: not isinstance(days, frozenset) or not days or not days <= DAY_CODES)


def _dup_name(df: pd.DataFrame) -> pd.Series:
    return df["name"].notna() & df.duplicated(subset=["name"], keep="first")


RULES: List[Tuple[str, Callable[[pd.DataFrame], pd.Series]]] = [
    ("missing:name", lambda df: _blank(df["name"])),
    ("missing:address", lambda df: _blank(df["address"])),
    ("missing:lat", lambda df: _blank(df["lat"])),
    ("missing:lng", lambda df: _blank(df["lng"])),
    ("bad:longitude", lambda df: _out_of_range(df["lng"], 180)),
    ("bad:latitude", lambda df: _out_of_range(df["lat"], 90)),
    ("bad:days", lambda df: _bad_days(df["open_days"])),
    ("dup:name", _dup_name),
]


def basic_validate(df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split into (valid, rejects) with reason codes; first of a duplicate name wins."""
    df = df.copy()
    df[REJECT_COL] = ""
    for code, rule in RULES:
        df.loc[rule(df).astype(bool), REJECT_COL] += f"{code};"

    failed = df[REJECT_COL] != ""
    return df[~failed].copy(), df[failed].copy()


def reject_reasons(rejects: pd.DataFrame) -> List[str]:
    """One "row N (name): codes" line per rejected row, in file order."""
    return [
        f"row {idx} ({row.get('name')}): {row[REJECT_COL]}"
        for idx, row in rejects.iterrows()
    ]
