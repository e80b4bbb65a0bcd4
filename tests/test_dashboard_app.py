from __future__ import annotations

from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

ROOT = Path(__file__).resolve().parents[1]
APP_PATH = ROOT / "streamlit_app" / "app.py"


@pytest.fixture
def fallback_only(monkeypatch: pytest.MonkeyPatch) -> None:
    # nothing listens on the discard port, so the proxy call is refused at once
    monkeypatch.setenv("SHEETS_API_URL", "http://127.0.0.1:9/api/sheets")
    monkeypatch.setenv("FALLBACK_CSV_PATH", str(ROOT / "data" / "adoptions.csv"))
    st.cache_resource.clear()
    st.cache_data.clear()


def test_first_page_load_shows_records(fallback_only: None) -> None:
    at = AppTest.from_file(str(APP_PATH), default_timeout=30).run()

    assert not at.exception
    assert [i.value for i in at.info] == []
    assert "local file" in at.warning[0].value


def test_cats_vs_dogs_view_shows_analysis_panels(fallback_only: None) -> None:
    at = AppTest.from_file(str(APP_PATH), default_timeout=30).run()
    for _ in range(4):
        at.button[1].click().run()

    subheaders = [s.value for s in at.subheader]
    assert "The Pattern Until Jun" in subheaders
    assert "Jul's Shift" in subheaders
    assert any("168 vs 91" in m.value for m in at.markdown)
