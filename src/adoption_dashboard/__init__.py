"""adoption_dashboard package.

Contains modules for pulling shelter adoption records from a Google Sheets
proxy (with a local CSV fallback), parsing them into validated records,
building year-to-date and month-by-year aggregations, and utilities for
serving a Streamlit dashboard.

Architecture:
- Sheets proxy (FastAPI) → Record Source → Aggregation → Streamlit
- pandas is used for the grouped counts behind every series
- Pydantic models validate records, payloads and curated cards
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
