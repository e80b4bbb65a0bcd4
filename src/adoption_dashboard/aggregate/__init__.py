"""Aggregation helpers.

This package contains the pure functions that convert parsed adoption
records into the year-to-date, full-year and month-by-year series charted by
the dashboard, plus the hand-maintained snapshot figures shown next to them.
"""
