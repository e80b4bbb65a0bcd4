"""Parsing of raw sheet rows into validated adoption records.

Rows arrive either as an array of arrays (first row holds the header names,
as returned by the Sheets API) or as an array of keyed mappings (the proxy's
`data` field, or a CSV read by pandas). Rows with a missing date, a missing
species or an unparseable date are dropped and counted, never raised.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from adoption_dashboard.models import AdoptionRecord, Species

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseResult:
    """Records accepted from one payload and the number of rows dropped.

    Attributes:
        records: Validated records, in input order.
        dropped: Rows rejected for a missing field or an invalid date.
    """
    records: tuple[AdoptionRecord, ...]
    dropped: int


def _rows_to_frame(rows: Sequence[Any]) -> pd.DataFrame:
    """Build a string DataFrame from either supported row layout."""
    if not rows:
        return pd.DataFrame()

    if isinstance(rows[0], Mapping):
        return pd.DataFrame([dict(r) for r in rows])

    # repeated names get ".1", ".2" suffixes, as pandas.read_csv mangles them
    header: list[str] = []
    seen: dict[str, int] = {}
    for h in rows[0]:
        base = name = str(h).strip()
        while name in seen:
            seen[base] += 1
            name = f"{base}.{seen[base]}"
        seen[name] = 0
        header.append(name)

    body = []
    for row in rows[1:]:
        cells = list(row)[: len(header)]
        body.append(cells + [""] * (len(header) - len(cells)))
    return pd.DataFrame(body, columns=header)


def _find_column(columns: Iterable[Any], name: str) -> Any | None:
    """Return the column whose trimmed, lower-cased name matches `name`."""
    wanted = name.strip().lower()
    for col in columns:
        if str(col).strip().lower() == wanted:
            return col
    return None


def _parse_date(value: str) -> dt.date | None:
    """Parse a single date string, returning None when it is not a valid date."""
    if not value:
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.date()


def parse_records(
    rows: Sequence[Any],
    date_field: str = "Date",
    category_field: str = "Species",
) -> ParseResult:
    """Convert raw rows into `AdoptionRecord` values.

    Args:
        rows: Array of arrays with a header row, or array of mappings.
        date_field: Header name of the date column (case-insensitive).
        category_field: Header name of the species column (case-insensitive).

    Returns:
        ParseResult with the accepted records and the dropped-row count.
    """
    df = _rows_to_frame(rows)
    if df.empty:
        return ParseResult(records=(), dropped=0)

    date_col = _find_column(df.columns, date_field)
    cat_col = _find_column(df.columns, category_field)
    if date_col is None or cat_col is None:
        log.warning(
            "Columns %r/%r not found in %s; dropping %d rows",
            date_field,
            category_field,
            list(df.columns),
            len(df),
        )
        return ParseResult(records=(), dropped=len(df))

    # -----------------------------
    # Normalize text
    # -----------------------------
    dates = df[date_col].fillna("").astype(str).str.strip()
    labels = df[cat_col].fillna("").astype(str).str.strip()

    # -----------------------------
    # Standardize date
    # -----------------------------
    parsed = dates.map(_parse_date)

    keep = parsed.notna() & (labels != "")
    records = tuple(
        AdoptionRecord(date=d, species=Species.parse(label))
        for d, label in zip(parsed[keep], labels[keep])
    )

    dropped = len(df) - len(records)
    if dropped:
        log.info("Dropped %d of %d rows with a missing or invalid date/species", dropped, len(df))

    return ParseResult(records=records, dropped=dropped)
