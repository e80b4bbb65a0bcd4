"""Year-to-date, full-year and month-by-year adoption series.

Functions in this module turn a sequence of `AdoptionRecord` values into the
row shapes the dashboard charts consume. Every function is pure: inputs are
never mutated and identical inputs produce identical rows.

Output shapes:
- YTD / full-year rows: `{"year": "2024", "Dog": 1, "Cat": 1, "Other": 0}`
- Monthly comparison rows: `{"month": "Jan", "Dog2024": 1, "Cat2024": 1,
  "Other2024": 0, "total2024": 2, ...}` for each requested year.

Unrecognized labels are counted under `Other`. `Other` is always reported in
its own column and is never part of a total; totals are dogs plus cats.
"""
from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from adoption_dashboard.models import (
    KNOWN_SPECIES,
    SPECIES,
    AdoptionRecord,
    KeyMetric,
    MonthlySpeciesPoint,
)

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
DEFAULT_START_YEAR = 2023

_SPECIES_COLS = [s.value for s in SPECIES]


def _records_frame(records: Iterable[AdoptionRecord]) -> pd.DataFrame:
    """Return a frame with `year`, `month`, `day` and `species` columns."""
    return pd.DataFrame(
        [(r.date.year, r.date.month, r.date.day, r.species.value) for r in records],
        columns=["year", "month", "day", "species"],
    )


def _year_range(start_year: int, as_of: dt.date) -> list[int]:
    if start_year > as_of.year:
        raise ValueError(f"start_year {start_year} is after reference year {as_of.year}")
    return list(range(start_year, as_of.year + 1))


def _counts_by_year(df: pd.DataFrame, years: list[int]) -> list[dict[str, Any]]:
    """Count rows per (year, species) and emit one zero-filled row per year."""
    if df.empty:
        counts = pd.DataFrame(0, index=years, columns=_SPECIES_COLS)
    else:
        counts = (
            df.groupby(["year", "species"])
            .size()
            .unstack(fill_value=0)
            .reindex(index=years, columns=_SPECIES_COLS, fill_value=0)
        )

    rows: list[dict[str, Any]] = []
    for year in years:
        row: dict[str, Any] = {"year": str(year)}
        for col in _SPECIES_COLS:
            row[col] = int(counts.at[year, col])
        rows.append(row)
    return rows


# =========================================================
# YEAR OVER YEAR
# =========================================================

def ytd_by_year(
    records: Sequence[AdoptionRecord],
    as_of: dt.date | None = None,
    start_year: int = DEFAULT_START_YEAR,
) -> list[dict[str, Any]]:
    """Return year-to-date counts per species for each year up to `as_of`.

    A record counts toward its year when its (month, day) is on or before
    the (month, day) of `as_of`, so every year is cut at the same point of
    the calendar. With a Feb 29 reference date, Feb 29 simply never occurs
    in non-leap comparison years.

    Args:
        records: Adoption records.
        as_of: Reference date; defaults to today.
        start_year: First year emitted.

    Returns:
        One row per year in `[start_year, as_of.year]`, ascending.

    Raises:
        ValueError: if `start_year` is after the reference year.
    """
    as_of = as_of or dt.date.today()
    years = _year_range(start_year, as_of)

    df = _records_frame(records)
    cutoff = (df["month"] < as_of.month) | (
        (df["month"] == as_of.month) & (df["day"] <= as_of.day)
    )
    return _counts_by_year(df[cutoff & df["year"].isin(years)], years)


def full_year_by_year(
    records: Sequence[AdoptionRecord],
    as_of: dt.date | None = None,
    start_year: int = DEFAULT_START_YEAR,
) -> list[dict[str, Any]]:
    """Return full calendar-year counts per species (no month/day cutoff).

    Same row shape and year range as `ytd_by_year`.
    """
    as_of = as_of or dt.date.today()
    years = _year_range(start_year, as_of)

    df = _records_frame(records)
    return _counts_by_year(df[df["year"].isin(years)], years)


# =========================================================
# MONTH BY YEAR
# =========================================================

def monthly_comparison(
    records: Sequence[AdoptionRecord],
    years: Iterable[int | str],
) -> list[dict[str, Any]]:
    """Return 12 rows (Jan-Dec) of per-year, per-species monthly counts.

    Only the requested years are counted, even if records exist for others.

    Args:
        records: Adoption records.
        years: Years to compare, in the order their keys should appear.

    Returns:
        Exactly 12 rows; empty months report zeros.
    """
    wanted = list(dict.fromkeys(int(y) for y in years))

    df = _records_frame(records)
    df = df[df["year"].isin(wanted)]
    counts: dict[tuple[int, int, str], int] = (
        df.groupby(["month", "year", "species"]).size().to_dict() if not df.empty else {}
    )

    rows: list[dict[str, Any]] = []
    for month_idx, month in enumerate(MONTHS, start=1):
        row: dict[str, Any] = {"month": month}
        for year in wanted:
            for col in _SPECIES_COLS:
                row[f"{col}{year}"] = int(counts.get((month_idx, year, col), 0))
            row[f"total{year}"] = sum(row[f"{s.value}{year}"] for s in KNOWN_SPECIES)
        rows.append(row)
    return rows


def row_total(row: dict[str, Any], year: int | str | None = None) -> int:
    """Return the known-species total of a row.

    For YTD / full-year rows pass no `year`; for monthly comparison rows
    pass the year whose total is wanted.
    """
    suffix = "" if year is None else str(year)
    return sum(int(row.get(f"{s.value}{suffix}", 0)) for s in KNOWN_SPECIES)


# =========================================================
# SHARES + CHANGE
# =========================================================

def _round_half_up(x: float) -> float:
    return float(np.floor(x + 0.5))


def share_pct(count: int, total: int) -> float:
    """Return `count` as a percentage of `total` with one decimal.

    A zero total yields 0.0 rather than NaN.
    """
    if total <= 0:
        return 0.0
    return _round_half_up((count / total) * 1000) / 10


def monthly_shares(rows: Sequence[dict[str, Any]], year: int | str) -> list[dict[str, Any]]:
    """Return per-month counts and species shares for one year.

    Args:
        rows: Output of `monthly_comparison` that includes `year`.
        year: Year to extract.

    Returns:
        Rows like `{"month": "Jan", "Dog": 130, "Cat": 140, "Other": 2,
        "total": 270, "DogPct": 48.1, "CatPct": 51.9}`.
    """
    out: list[dict[str, Any]] = []
    for row in rows:
        total = int(row.get(f"total{year}", 0))
        point: dict[str, Any] = {"month": row["month"]}
        for col in _SPECIES_COLS:
            point[col] = int(row.get(f"{col}{year}", 0))
        point["total"] = total
        for s in KNOWN_SPECIES:
            point[f"{s.value}Pct"] = share_pct(point[s.value], total)
        out.append(point)
    return out


def pct_change(current: int, previous: int) -> float | None:
    """Return the percentage change from `previous` to `current` (one decimal).

    Returns None when `previous` is zero.
    """
    if previous == 0:
        return None
    return _round_half_up(((current - previous) / previous) * 1000) / 10


def format_change(change: float | None) -> str | None:
    """Format a percentage change as a signed card label, e.g. "+12.4%"."""
    if change is None:
        return None
    return f"{change:+.1f}%"


@dataclass(frozen=True)
class ShareShift:
    """How one month's species mix compares with the months before it.

    Attributes:
        baseline: First and last month of the comparison window.
        cat_pct_range: Lowest and highest cat share in the window.
        dog_pct_range: Lowest and highest dog share in the window.
        peak_month: Busiest month of the window.
        peak_total: Adoptions in `peak_month`.
        month: The month being compared.
        dogs: Dog adoptions in `month`.
        cats: Cat adoptions in `month`.
        dog_pct: Dog share in `month`.
        cat_pct: Cat share in `month`.
        dog_pct_before: Dog share in the month just before `month`.
        dog_jump: Change in dog share from the month before, in points.
        dog_to_cat: Dogs per cat in `month`; None when no cats were adopted.
        lowest_cat_pct: True when `month` has the lowest cat share of the series.
    """
    baseline: tuple[str, str]
    cat_pct_range: tuple[float, float]
    dog_pct_range: tuple[float, float]
    peak_month: str
    peak_total: int
    month: str
    dogs: int
    cats: int
    dog_pct: float
    cat_pct: float
    dog_pct_before: float
    dog_jump: float
    dog_to_cat: float | None
    lowest_cat_pct: bool


def share_shift(points: Sequence[MonthlySpeciesPoint], month: str | None = None) -> ShareShift:
    """Compare `month` (default: the last point) with every month before it.

    Raises:
        ValueError: if `month` is missing or has no earlier months to compare.
    """
    months = [p.month for p in points]
    month = month or (months[-1] if months else None)
    if month not in months:
        raise ValueError(f"month {month!r} not in series")
    idx = months.index(month)
    if idx == 0:
        raise ValueError(f"no months before {month!r} to compare against")

    window = points[:idx]
    target = points[idx]
    before = window[-1]
    peak = max(window, key=lambda p: p.total)

    return ShareShift(
        baseline=(window[0].month, before.month),
        cat_pct_range=(min(p.cat_pct for p in window), max(p.cat_pct for p in window)),
        dog_pct_range=(min(p.dog_pct for p in window), max(p.dog_pct for p in window)),
        peak_month=peak.month,
        peak_total=peak.total,
        month=target.month,
        dogs=target.dogs,
        cats=target.cats,
        dog_pct=target.dog_pct,
        cat_pct=target.cat_pct,
        dog_pct_before=before.dog_pct,
        dog_jump=_round_half_up((target.dog_pct - before.dog_pct) * 10) / 10,
        dog_to_cat=_round_half_up(target.dogs / target.cats * 10) / 10 if target.cats else None,
        lowest_cat_pct=target.cat_pct < min(p.cat_pct for p in window),
    )


# =========================================================
# COMPUTED METRIC CARDS
# =========================================================

def _month_to_date_total(records: Sequence[AdoptionRecord], year: int, as_of: dt.date) -> int:
    """Known-species total for `as_of.month` of `year`, cut at `as_of.day`."""
    df = _records_frame(records)
    mask = (df["year"] == year) & (df["month"] == as_of.month) & (df["day"] <= as_of.day)
    return int(df[mask]["species"].isin([s.value for s in KNOWN_SPECIES]).sum())


def build_key_metrics(
    records: Sequence[AdoptionRecord],
    as_of: dt.date | None = None,
    start_year: int = DEFAULT_START_YEAR,
) -> list[KeyMetric]:
    """Derive the YTD and current-month cards from the record set.

    Cards:
    - "YTD Adoptions": this year's YTD total against last year's YTD.
    - "<Month> <Year>": the reference month up to `as_of.day` against the
      same days of that month last year.

    Args:
        records: Adoption records.
        as_of: Reference date; defaults to today.
        start_year: First year considered when ranking YTD totals.

    Returns:
        Two `KeyMetric` cards.
    """
    as_of = as_of or dt.date.today()
    ytd = ytd_by_year(records, as_of=as_of, start_year=start_year)
    totals = [row_total(r) for r in ytd]
    current = totals[-1]
    previous = totals[-2] if len(totals) > 1 else 0

    ytd_change = pct_change(current, previous) if len(totals) > 1 else None
    if len(totals) > 1 and current > max(totals[:-1]):
        ytd_subtitle = f"highest in the past {len(totals)} years"
    else:
        ytd_subtitle = f"through {as_of:%B} {as_of.day}"

    prior_year = as_of.year - 1
    month_now = _month_to_date_total(records, as_of.year, as_of)
    month_before = _month_to_date_total(records, prior_year, as_of)
    month_change = pct_change(month_now, month_before)
    month_name = f"{as_of:%B}"

    whole_month = as_of.day == calendar.monthrange(as_of.year, as_of.month)[1]
    if whole_month:
        month_subtitle = ""
        month_vs = f"vs {month_name} {prior_year}"
    else:
        month_subtitle = f"through {month_name} {as_of.day}"
        month_vs = f"vs {month_name} 1-{as_of.day}, {prior_year}"

    return [
        KeyMetric(
            title="YTD Adoptions",
            value=f"{current:,}",
            subtitle=ytd_subtitle,
            comparison=format_change(ytd_change),
            comparison_text=f"vs {as_of.year - 1} YTD" if ytd_change is not None else None,
            trend="down" if ytd_change is not None and ytd_change < 0 else "up",
        ),
        KeyMetric(
            title=f"{month_name} {as_of.year}",
            value=f"{month_now:,}",
            subtitle=month_subtitle,
            comparison=format_change(month_change),
            comparison_text=month_vs if month_change is not None else None,
            trend="down" if month_change is not None and month_change < 0 else "up",
        ),
    ]
