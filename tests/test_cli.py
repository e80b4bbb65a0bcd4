from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from adoption_dashboard import cli
from adoption_dashboard.ingest.source import Fetched, Unavailable
from adoption_dashboard.models import Species
from conftest import make_settings, rec


def test_report_arguments_parse() -> None:
    args = cli.build_parser().parse_args(
        ["report", "--as-of", "2025-06-01", "--start-year", "2024", "--years", "2024", "2025"]
    )
    assert args.cmd == "report"
    assert args.as_of == date(2025, 6, 1)
    assert args.start_year == 2024
    assert args.years == [2024, 2025]


def test_invalid_as_of_is_rejected() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["report", "--as-of", "06/01/2025"])


def test_report_prints_tables(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    records = (rec("2024-01-05", Species.DOG), rec("2025-01-10", Species.CAT))
    monkeypatch.setattr(cli, "get_settings", lambda: make_settings(tmp_path))
    monkeypatch.setattr(cli, "load_records", lambda s: Fetched(records=records))

    args = cli.build_parser().parse_args(["report", "--as-of", "2025-06-01"])
    cli.cmd_report(args)

    out = capsys.readouterr().out
    assert "Year to date through Jun 1" in out
    assert "Monthly comparison 2024, 2025" in out
    assert "total2025" in out


def test_fetch_exits_nonzero_when_unavailable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "get_settings", lambda: make_settings(tmp_path))
    monkeypatch.setattr(cli, "load_records", lambda s: Unavailable(error="down"))

    with pytest.raises(SystemExit) as exc:
        cli.cmd_fetch(cli.build_parser().parse_args(["fetch"]))
    assert exc.value.code == 1


def test_report_rejects_start_year_after_as_of(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    loads: list[object] = []
    monkeypatch.setattr(cli, "get_settings", lambda: make_settings(tmp_path))
    monkeypatch.setattr(cli, "load_records", lambda s: loads.append(s))

    args = cli.build_parser().parse_args(["report", "--start-year", "2026", "--as-of", "2025-06-01"])
    with pytest.raises(SystemExit) as exc:
        cli.cmd_report(args)

    assert "start year 2026 is after the report year 2025" in str(exc.value.code)
    assert loads == []
