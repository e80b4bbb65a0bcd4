"""Exception types raised at the dashboard's I/O boundaries.

Aggregation code never raises these; bad rows are filtered out instead.
"""

from __future__ import annotations


class DashboardError(Exception):
    """Base class for dashboard errors."""


class ConfigurationError(DashboardError):
    """Required configuration (e.g. the spreadsheet id) is missing."""
