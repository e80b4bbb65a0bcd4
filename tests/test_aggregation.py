from __future__ import annotations

from datetime import date

import pytest

from adoption_dashboard.aggregate.series import (
    MONTHS,
    full_year_by_year,
    monthly_comparison,
    row_total,
    ytd_by_year,
)
from adoption_dashboard.models import Species
from conftest import rec

SCENARIO = (
    rec("2024-01-05", Species.DOG),
    rec("2024-01-20", Species.CAT),
    rec("2025-01-10", Species.DOG),
)


def test_ytd_by_year_scenario() -> None:
    rows = ytd_by_year(SCENARIO, as_of=date(2025, 6, 1), start_year=2024)
    assert rows == [
        {"year": "2024", "Dog": 1, "Cat": 1, "Other": 0},
        {"year": "2025", "Dog": 1, "Cat": 0, "Other": 0},
    ]


def test_monthly_comparison_scenario() -> None:
    rows = monthly_comparison(SCENARIO, ["2024", "2025"])
    assert len(rows) == 12
    assert rows[0] == {
        "month": "Jan",
        "Dog2024": 1,
        "Cat2024": 1,
        "Other2024": 0,
        "total2024": 2,
        "Dog2025": 1,
        "Cat2025": 0,
        "Other2025": 0,
        "total2025": 1,
    }
    for row in rows[1:]:
        assert all(v == 0 for k, v in row.items() if k != "month")


def test_ytd_cutoff_is_inclusive_of_reference_day() -> None:
    records = [
        rec("2024-04-15", Species.DOG),
        rec("2024-04-16", Species.DOG),
        rec("2024-03-01", Species.DOG),
        rec("2024-05-01", Species.CAT),
    ]
    rows = ytd_by_year(records, as_of=date(2025, 4, 15), start_year=2024)
    assert rows[0] == {"year": "2024", "Dog": 2, "Cat": 0, "Other": 0}


def test_ytd_earlier_month_wins_regardless_of_day() -> None:
    records = [rec("2023-03-31", Species.CAT), rec("2023-04-30", Species.CAT)]
    rows = ytd_by_year(records, as_of=date(2025, 4, 1), start_year=2023)
    assert rows[0]["Cat"] == 1


def test_ytd_row_count_and_zero_fill() -> None:
    rows = ytd_by_year([], as_of=date(2025, 7, 27), start_year=2020)
    assert [r["year"] for r in rows] == ["2020", "2021", "2022", "2023", "2024", "2025"]
    assert all(r["Dog"] == r["Cat"] == r["Other"] == 0 for r in rows)


def test_single_year_range() -> None:
    rows = ytd_by_year(SCENARIO, as_of=date(2025, 1, 31), start_year=2025)
    assert rows == [{"year": "2025", "Dog": 1, "Cat": 0, "Other": 0}]


def test_start_year_after_reference_year_is_rejected() -> None:
    with pytest.raises(ValueError):
        ytd_by_year(SCENARIO, as_of=date(2024, 6, 1), start_year=2025)


def test_records_before_start_year_are_ignored() -> None:
    records = [rec("2019-01-01", Species.DOG), rec("2024-01-01", Species.DOG)]
    rows = full_year_by_year(records, as_of=date(2024, 6, 1), start_year=2024)
    assert rows == [{"year": "2024", "Dog": 1, "Cat": 0, "Other": 0}]


def test_full_year_has_no_cutoff() -> None:
    records = [rec("2024-12-31", Species.CAT), rec("2024-02-01", Species.CAT)]
    ytd = ytd_by_year(records, as_of=date(2025, 6, 1), start_year=2024)
    full = full_year_by_year(records, as_of=date(2025, 6, 1), start_year=2024)
    assert ytd[0]["Cat"] == 1
    assert full[0]["Cat"] == 2
    assert len(full) == 2


def test_leap_day_reference_compares_raw_month_day() -> None:
    records = [
        rec("2023-02-28", Species.DOG),
        rec("2023-03-01", Species.DOG),
        rec("2024-02-29", Species.CAT),
    ]
    rows = ytd_by_year(records, as_of=date(2024, 2, 29), start_year=2023)
    assert rows == [
        {"year": "2023", "Dog": 1, "Cat": 0, "Other": 0},
        {"year": "2024", "Dog": 0, "Cat": 1, "Other": 0},
    ]


def _many_records() -> list:
    species = [Species.DOG, Species.CAT, Species.OTHER]
    return [
        rec(date(2023 + i % 3, 1 + i % 12, 1 + i % 28).isoformat(), species[(i // 3) % 3])
        for i in range(240)
    ]


def test_ytd_conserves_record_counts() -> None:
    records = _many_records()
    as_of = date(2025, 6, 15)
    rows = ytd_by_year(records, as_of=as_of, start_year=2023)

    expected = sum(
        1 for r in records if (r.date.month, r.date.day) <= (as_of.month, as_of.day)
    )
    assert sum(r["Dog"] + r["Cat"] + r["Other"] for r in rows) == expected


def test_monthly_conserves_record_counts_for_requested_years() -> None:
    records = _many_records()
    rows = monthly_comparison(records, [2024, 2025])

    expected = sum(1 for r in records if r.date.year in (2024, 2025))
    got = sum(
        row[f"{s.value}{y}"] for row in rows for y in (2024, 2025) for s in Species
    )
    assert got == expected
    assert not any(k.endswith("2023") for k in rows[0])


def test_monthly_comparison_with_no_records_has_twelve_zero_rows() -> None:
    rows = monthly_comparison([], [2025])
    assert [r["month"] for r in rows] == MONTHS
    assert all(r["total2025"] == 0 for r in rows)


def test_other_species_is_reported_but_not_totalled() -> None:
    records = [rec("2025-03-02", Species.OTHER), rec("2025-03-03", Species.DOG)]
    march = monthly_comparison(records, [2025])[2]
    assert march["Other2025"] == 1
    assert march["total2025"] == 1

    ytd = ytd_by_year(records, as_of=date(2025, 12, 31), start_year=2025)[0]
    assert ytd["Other"] == 1
    assert row_total(ytd) == 1


def test_row_total_for_monthly_rows() -> None:
    jan = monthly_comparison(SCENARIO, [2024, 2025])[0]
    assert row_total(jan, 2024) == jan["total2024"] == 2
    assert row_total(jan, "2025") == 1


def test_aggregation_is_deterministic_and_does_not_mutate_input() -> None:
    records = list(_many_records())
    snapshot = list(records)
    as_of = date(2025, 3, 9)

    assert ytd_by_year(records, as_of, 2023) == ytd_by_year(records, as_of, 2023)
    assert full_year_by_year(records, as_of, 2023) == full_year_by_year(records, as_of, 2023)
    assert monthly_comparison(records, [2023, 2025]) == monthly_comparison(records, [2023, 2025])
    assert records == snapshot
