"""Curated snapshot figures shown alongside the computed series.

These values are maintained by hand from the weekly shelter report and are
not derived from the adoption records; update them together with
`AS_OF_LABEL`.
"""

from __future__ import annotations

from adoption_dashboard.models import KeyMetric, MonthlySpeciesPoint

AS_OF_LABEL = "Sunday, July 27, 2025"

# Cards that the record-derived metrics replace once records are loaded
RECORD_METRICS = [
    KeyMetric(
        title="YTD Adoptions",
        value="1,823",
        subtitle="highest in the past 3 years",
        comparison="+12.4%",
        comparison_text="vs 2024 YTD",
        trend="up",
    ),
    KeyMetric(
        title="July 2025",
        value="259",
        subtitle="highest in the last 5 years third month in a row",
        comparison="+45%",
        comparison_text="vs July 2024",
        trend="up",
    ),
]

# Shelter census figures with no counterpart in the adoption records
SNAPSHOT_METRICS = [
    KeyMetric(
        title="Animals in Foster Care",
        value="192",
        details=[
            "27 dogs in boarding",
            "10 cats at PetSmart",
            "17 cats at Meo Maison",
        ],
        trend="up",
    ),
    KeyMetric(
        title="Animals in Care VA",
        value="246",
        subtitle="current snapshot",
        comparison="+19%",
        comparison_text="vs last week",
        trend="up",
    ),
    KeyMetric(
        title="Animals in Care SC",
        value="72",
        subtitle="current snapshot",
        comparison="-53.1%",
        comparison_text="vs last week (155)",
        trend="down",
    ),
]

KEY_METRICS = RECORD_METRICS + SNAPSHOT_METRICS

MONTHLY_2025_CATS_VS_DOGS = [
    MonthlySpeciesPoint(month="Jan", dogs=130, cats=140, total=270, dog_pct=48.1, cat_pct=51.9),
    MonthlySpeciesPoint(month="Feb", dogs=101, cats=110, total=211, dog_pct=47.9, cat_pct=52.1),
    MonthlySpeciesPoint(month="Mar", dogs=133, cats=146, total=279, dog_pct=47.7, cat_pct=52.3),
    MonthlySpeciesPoint(month="Apr", dogs=104, cats=113, total=217, dog_pct=47.9, cat_pct=52.1),
    MonthlySpeciesPoint(month="May", dogs=136, cats=148, total=284, dog_pct=47.9, cat_pct=52.1),
    MonthlySpeciesPoint(month="Jun", dogs=145, cats=158, total=303, dog_pct=47.9, cat_pct=52.1),
    MonthlySpeciesPoint(month="Jul", dogs=168, cats=91, total=259, dog_pct=64.9, cat_pct=35.1),
]
