from __future__ import annotations

import atexit
import datetime as dt

import altair as alt
import pandas as pd
import streamlit as st

from adoption_dashboard.aggregate.curated import (
    AS_OF_LABEL,
    KEY_METRICS,
    MONTHLY_2025_CATS_VS_DOGS,
    SNAPSHOT_METRICS,
)
from adoption_dashboard.aggregate.series import (
    MONTHS,
    build_key_metrics,
    full_year_by_year,
    monthly_comparison,
    monthly_shares,
    share_shift,
    ytd_by_year,
)
from adoption_dashboard.config import get_settings
from adoption_dashboard.ingest.source import FellBackToFile, Fetched, Unavailable
from adoption_dashboard.models import KeyMetric
from adoption_dashboard.refresh import PeriodicRefresher, RecordStore

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="Adoption Dashboard", layout="wide")
st.title("🐾 Adoption Dashboard")

settings = get_settings()


# =====================================================
# Record store (one per server process)
# =====================================================
@st.cache_resource(show_spinner="Loading adoption records...")
def get_refresher() -> PeriodicRefresher:
    """Load records once, then start the background refresh loop."""
    store = RecordStore.from_settings(settings)
    store.refresh()
    refresher = PeriodicRefresher(store, settings.refresh_interval_seconds)
    refresher.start(refresh_now=False)
    atexit.register(refresher.stop)
    return refresher


store = get_refresher().store


@st.fragment(run_every=settings.refresh_interval_seconds)
def watch_refresh() -> None:
    """Rerun the page once the background loop has loaded new records."""
    seen = st.session_state.setdefault("seen_refresh", store.last_success)
    if store.last_success != seen:
        st.session_state["seen_refresh"] = store.last_success
        st.rerun()


watch_refresh()


# =====================================================
# Helpers
# =====================================================
@st.cache_data(show_spinner=False)
def cached_series(records: tuple, as_of: dt.date, start_year: int) -> dict:
    """Compute every series for one record set and reference date."""
    return {
        "ytd": ytd_by_year(records, as_of=as_of, start_year=start_year),
        "full_year": full_year_by_year(records, as_of=as_of, start_year=start_year),
        "monthly": monthly_comparison(records, [as_of.year - 1, as_of.year]),
        "cards": build_key_metrics(records, as_of=as_of, start_year=start_year),
    }


def metric_card(metric: KeyMetric) -> None:
    """Display a single metric card.

    Args:
        metric: Card to render; `details` lines are shown under the value.
    """
    st.metric(
        metric.title,
        metric.value,
        delta=metric.comparison,
        delta_color="normal",
    )
    if metric.subtitle:
        st.caption(metric.subtitle)
    for line in metric.details:
        st.caption(line)
    if metric.comparison_text:
        st.caption(metric.comparison_text)


def species_long(rows: list[dict], key: str) -> pd.DataFrame:
    """Melt wide species rows into (`key`, species, adoptions) for Altair."""
    df = pd.DataFrame(rows)
    return df.melt(id_vars=[key], value_vars=["Dog", "Cat", "Other"], var_name="species", value_name="adoptions")


def year_bar_chart(rows: list[dict], title: str) -> alt.Chart:
    return (
        alt.Chart(species_long(rows, "year"))
        .mark_bar()
        .encode(
            x=alt.X("year:N", title="Year"),
            y=alt.Y("adoptions:Q", title="Adoptions"),
            color=alt.Color("species:N", title="Species"),
            xOffset="species:N",
            tooltip=["year:N", "species:N", "adoptions:Q"],
        )
        .properties(height=360, title=title)
    )


# =====================================================
# SECTION 0 — DATA FRESHNESS
# =====================================================
result = store.last_result
if isinstance(result, Fetched):
    st.caption(f"Live data from Google Sheets • {len(store.records):,} adoptions")
elif isinstance(result, FellBackToFile):
    st.warning(
        f"Google Sheets unavailable; showing {len(store.records):,} adoptions from the local file."
    )
elif isinstance(result, Unavailable):
    st.error(f"No adoption data source available: {result.error}")
else:
    st.info("Adoption records are still loading.")

if store.last_success is not None:
    st.caption(f"Last refreshed {store.last_success:%Y-%m-%d %H:%M} UTC")

# =====================================================
# SECTION 1 — KEY METRICS
# =====================================================
as_of = st.sidebar.date_input("As of", value=dt.date.today())
start_year = int(
    st.sidebar.number_input("First year", value=min(settings.start_year, as_of.year), min_value=2000, max_value=as_of.year, step=1)
)

records = store.records
series = cached_series(records, as_of, start_year) if records else None

st.header("📌 Key Metrics")
st.caption(f"Snapshot figures as of {AS_OF_LABEL}")

if series is not None:
    cards = series["cards"] + SNAPSHOT_METRICS
else:
    cards = KEY_METRICS

for col, metric in zip(st.columns(len(cards)), cards):
    with col:
        metric_card(metric)

st.divider()

# =====================================================
# SECTION 2 — CHART CAROUSEL
# =====================================================
CHART_VIEWS = [
    "Year to date by year",
    "Full year totals",
    "Monthly comparison",
    "Monthly species share",
    "2025 monthly cats vs dogs",
]

if "chart_idx" not in st.session_state:
    st.session_state["chart_idx"] = 0

prev_col, label_col, next_col = st.columns([1, 6, 1])
with prev_col:
    if st.button("◀ Previous"):
        st.session_state["chart_idx"] = (st.session_state["chart_idx"] - 1) % len(CHART_VIEWS)
with next_col:
    if st.button("Next ▶"):
        st.session_state["chart_idx"] = (st.session_state["chart_idx"] + 1) % len(CHART_VIEWS)

view = CHART_VIEWS[st.session_state["chart_idx"]]
with label_col:
    st.subheader(f"{view}  ({st.session_state['chart_idx'] + 1}/{len(CHART_VIEWS)})")

if view == "2025 monthly cats vs dogs":
    df_2025 = pd.DataFrame([p.model_dump() for p in MONTHLY_2025_CATS_VS_DOGS])
    base = alt.Chart(df_2025).encode(x=alt.X("month:N", sort=MONTHS, title=None))
    bars = (
        base.transform_fold(["dogs", "cats"], as_=["species", "adoptions"])
        .mark_bar()
        .encode(
            y=alt.Y("adoptions:Q", title="Number of Adoptions"),
            color=alt.Color("species:N", title="Species"),
            xOffset="species:N",
            tooltip=["month:N", "species:N", "adoptions:Q"],
        )
    )
    lines = (
        base.transform_fold(["dog_pct", "cat_pct"], as_=["share", "pct"])
        .mark_line(strokeWidth=3)
        .encode(
            y=alt.Y("pct:Q", title="Percentage (%)", scale=alt.Scale(domain=[0, 100])),
            strokeDash=alt.StrokeDash("share:N", title="Share"),
            tooltip=["month:N", "share:N", "pct:Q"],
        )
    )
    st.altair_chart(
        alt.layer(bars, lines).resolve_scale(y="independent").properties(height=400),
        width="stretch",
    )

    shift = share_shift(MONTHLY_2025_CATS_VS_DOGS)
    first, last = shift.baseline
    pattern_col, shift_col = st.columns(2)
    with pattern_col:
        st.subheader(f"The Pattern Until {last}")
        st.markdown(
            f"- **Consistent cat majority:** {shift.cat_pct_range[0]}-{shift.cat_pct_range[1]}% cats across {first}-{last}\n"
            f"- **Stable dog percentage:** dogs held at {shift.dog_pct_range[0]}-{shift.dog_pct_range[1]}%\n"
            f"- **Peak month:** {shift.peak_month} hit {shift.peak_total:,} total adoptions"
        )
    with shift_col:
        st.subheader(f"{shift.month}'s Shift")
        lines_md = [
            f"- **Dogs at {shift.dog_pct}%:** {shift.dog_jump:+.1f} points from {last}'s {shift.dog_pct_before}%",
            f"- **Cats at {shift.cat_pct}%:**"
            + (" lowest share of the year" if shift.lowest_cat_pct else " within the usual range"),
        ]
        if shift.dog_to_cat is not None:
            lines_md.append(f"- **{shift.dogs} vs {shift.cats}:** {shift.dog_to_cat}:1 dog-to-cat ratio")
        st.markdown("\n".join(lines_md))
elif series is None:
    st.info("No adoption records available yet.")
elif view == "Year to date by year":
    st.altair_chart(
        year_bar_chart(series["ytd"], f"Adoptions through {as_of:%b} {as_of.day} of each year"),
        width="stretch",
    )
elif view == "Full year totals":
    st.altair_chart(year_bar_chart(series["full_year"], "Adoptions per calendar year"), width="stretch")
elif view == "Monthly comparison":
    years = [as_of.year - 1, as_of.year]
    df_monthly = pd.DataFrame(series["monthly"])
    df_totals = df_monthly.melt(
        id_vars=["month"],
        value_vars=[f"total{y}" for y in years],
        var_name="year",
        value_name="adoptions",
    )
    df_totals["year"] = df_totals["year"].str.replace("total", "", regex=False)
    chart = (
        alt.Chart(df_totals)
        .mark_bar()
        .encode(
            x=alt.X("month:N", sort=MONTHS, title=None),
            y=alt.Y("adoptions:Q", title="Adoptions (dogs + cats)"),
            color=alt.Color("year:N", title="Year"),
            xOffset="year:N",
            tooltip=["month:N", "year:N", "adoptions:Q"],
        )
        .properties(height=360)
    )
    st.altair_chart(chart, width="stretch")
    st.dataframe(df_monthly, width="stretch", hide_index=True)
else:
    df_share = pd.DataFrame(monthly_shares(series["monthly"], as_of.year))
    df_share = df_share.melt(
        id_vars=["month"], value_vars=["DogPct", "CatPct"], var_name="species", value_name="pct"
    )
    chart = (
        alt.Chart(df_share)
        .mark_line(point=True)
        .encode(
            x=alt.X("month:N", sort=MONTHS, title=None),
            y=alt.Y("pct:Q", title="Share of adoptions (%)", scale=alt.Scale(domain=[0, 100])),
            color=alt.Color("species:N", title="Species"),
            tooltip=["month:N", "species:N", "pct:Q"],
        )
        .properties(height=360, title=f"Species share per month, {as_of.year}")
    )
    st.altair_chart(chart, width="stretch")

# =====================================================
# Footer
# =====================================================
st.caption(
    f"Google Sheets • FastAPI proxy • pandas • Streamlit | refreshes every "
    f"{settings.refresh_interval_seconds // 60} min"
)
