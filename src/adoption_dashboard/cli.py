"""Command-line interface for the adoption dashboard.

Provides subcommands: `serve`, `fetch`, `report`, and `dashboard`. Each
command is implemented as a `cmd_*` function that accepts an argparse
namespace.
"""
from __future__ import annotations

import argparse
import datetime as dt
import logging
import subprocess
import sys
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from adoption_dashboard.config import PROJECT_ROOT, get_settings
from adoption_dashboard.logging_config import configure_logging
from adoption_dashboard.ingest.source import FellBackToFile, Fetched, Unavailable, load_records
from adoption_dashboard.aggregate.series import (
    full_year_by_year,
    monthly_comparison,
    ytd_by_year,
)

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _parse_date(value: str) -> dt.date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return dt.date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from e


def _describe(result: Fetched | FellBackToFile | Unavailable) -> str:
    if isinstance(result, Fetched):
        return f"sheets proxy: {len(result.records)} records ({result.dropped} dropped)"
    if isinstance(result, FellBackToFile):
        return (
            f"fallback file: {len(result.records)} records ({result.dropped} dropped); "
            f"proxy error: {result.error}"
        )
    return f"unavailable: {result.error}"


# --------------------------------------------------
# SERVE
# --------------------------------------------------
def cmd_serve(args: argparse.Namespace) -> None:
    """Run the `/api/sheets` proxy with uvicorn.

    Args:
        args: argparse namespace with `host` and `port`.
    """
    import uvicorn

    from adoption_dashboard.api.app import create_app

    port = args.port or get_settings().api_port
    log.info("Serving sheets proxy on http://%s:%d", args.host, port)
    uvicorn.run(create_app(), host=args.host, port=port, log_level="info")


# --------------------------------------------------
# FETCH
# --------------------------------------------------
def cmd_fetch(_: argparse.Namespace) -> None:
    """Load records once and log where they came from.

    Raises:
        SystemExit: with status 1 when no source was available.
    """
    result = load_records(get_settings())
    log.info("Record source -> %s", _describe(result))
    if isinstance(result, Unavailable):
        raise SystemExit(1)


# --------------------------------------------------
# REPORT
# --------------------------------------------------
def cmd_report(args: argparse.Namespace) -> None:
    """Print YTD, full-year and monthly comparison tables.

    Args:
        args: argparse namespace with `as_of`, `start_year`, `years`.
    """
    s = get_settings()
    as_of = args.as_of or dt.date.today()
    start_year = args.start_year or s.start_year
    years = args.years or [as_of.year - 1, as_of.year]
    if start_year > as_of.year:
        raise SystemExit(f"error: start year {start_year} is after the report year {as_of.year}")

    result = load_records(s)
    log.info("Record source -> %s", _describe(result))
    if isinstance(result, Unavailable):
        raise SystemExit(1)

    with pd.option_context("display.width", 200, "display.max_columns", None):
        print(f"\nYear to date through {as_of:%b} {as_of.day}")
        print(pd.DataFrame(ytd_by_year(result.records, as_of, start_year)).to_string(index=False))
        print("\nFull year")
        print(pd.DataFrame(full_year_by_year(result.records, as_of, start_year)).to_string(index=False))
        print(f"\nMonthly comparison {', '.join(str(y) for y in years)}")
        print(pd.DataFrame(monthly_comparison(result.records, years)).to_string(index=False))


# --------------------------------------------------
# DASHBOARD
# --------------------------------------------------
def cmd_dashboard(_: argparse.Namespace) -> None:
    """Launch the Streamlit dashboard."""
    app_path = PROJECT_ROOT / "streamlit_app" / "app.py"
    subprocess.run(
        [sys.executable, "-m", "streamlit", "run", str(app_path), "--server.headless", "true"],
        check=False,
    )


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="adoption-dashboard")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_serve = sub.add_parser("serve")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=None)

    sub.add_parser("fetch")

    p_report = sub.add_parser("report")
    p_report.add_argument("--as-of", type=_parse_date, default=None)
    p_report.add_argument("--start-year", type=int, default=None)
    p_report.add_argument("--years", type=int, nargs="+", default=None)

    sub.add_parser("dashboard")

    return p


def main() -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    configure_logging(Path("logs/dashboard.log"))

    args = build_parser().parse_args()

    if args.cmd == "serve":
        cmd_serve(args)
    elif args.cmd == "fetch":
        cmd_fetch(args)
    elif args.cmd == "report":
        cmd_report(args)
    elif args.cmd == "dashboard":
        cmd_dashboard(args)
    else:
        raise SystemExit(2)


if __name__ == "__main__":
    main()
