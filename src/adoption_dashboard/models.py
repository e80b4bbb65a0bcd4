"""Pydantic models for adoption records, proxy payloads and dashboard cards.

These models define the validated shapes that flow between the record
source, the aggregation functions and the Streamlit dashboard.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Species(str, Enum):
    """Closed set of adoption categories."""
    DOG = "Dog"
    CAT = "Cat"
    OTHER = "Other"

    @classmethod
    def parse(cls, label: str) -> "Species":
        """Map a raw label to a species (case-insensitive, trimmed).

        Any non-matching label is bucketed into `Species.OTHER`.
        """
        key = label.strip().lower()
        if key in ("dog", "dogs"):
            return cls.DOG
        if key in ("cat", "cats"):
            return cls.CAT
        return cls.OTHER


# Order used for every output row
SPECIES = [Species.DOG, Species.CAT, Species.OTHER]
KNOWN_SPECIES = [Species.DOG, Species.CAT]


class AdoptionRecord(BaseModel):
    """One adoption event.

    Attributes:
        date: Calendar date of the adoption.
        species: Category of the adopted animal.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)
    date: dt.date
    species: Species


class SheetPayload(BaseModel):
    """JSON body served by the `/api/sheets` proxy."""
    model_config = ConfigDict(extra="ignore")
    data: list[dict[str, str]]
    headers: list[str]


class KeyMetric(BaseModel):
    """A single metric card shown at the top of the dashboard."""
    model_config = ConfigDict(extra="forbid")
    title: str
    value: str
    subtitle: str = ""
    comparison: str | None = None
    comparison_text: str | None = None
    trend: Literal["up", "down"] = "up"
    details: list[str] = Field(default_factory=list)


class MonthlySpeciesPoint(BaseModel):
    """Curated month row comparing dog and cat adoptions."""
    model_config = ConfigDict(extra="forbid")
    month: str
    dogs: int = Field(..., ge=0)
    cats: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    dog_pct: float = Field(..., ge=0, le=100)
    cat_pct: float = Field(..., ge=0, le=100)
