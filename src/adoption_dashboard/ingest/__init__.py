"""Record ingestion for the dashboard.

Provides the Google Sheets client used by the proxy, the record source with
its CSV fallback, and parsing of raw rows into validated records.
"""
