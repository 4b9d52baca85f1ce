"""Pydantic data models — the system's type contracts."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

# --- Type Aliases ---

SourceLabel = str
SeriesId = str

UNKNOWN_DATE = "unknown"

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_YEAR_RE = re.compile(r"^(\d{4})$")

# --- Enumerations ---


class CommodityKey(StrEnum):
    """Energy commodities the platform prices."""

    OIL = "oil"
    NATURAL_GAS = "natural-gas"
    NUCLEAR = "nuclear"
    SOLAR = "solar"
    RENEWABLES = "renewables"
    COAL = "coal"


class Region(StrEnum):
    """Quote slots: the domestic benchmark and the global estimate."""

    US = "us"
    WORLD = "world"

    @property
    def display_name(self) -> str:
        return "United States" if self is Region.US else "World"


class ProviderName(StrEnum):
    """Upstream price providers."""

    EIA = "eia"
    FRED = "fred"
    OWID = "owid"
    YAHOO = "yahoo"


# --- Commodity Models ---


class CommodityConfig(BaseModel):
    """Static per-commodity constants used for display and projection."""

    model_config = ConfigDict(frozen=True)

    key: CommodityKey
    name: str
    full_name: str
    unit: str
    elasticity: float
    us_unit: str
    world_unit: str
    supply_constraint_factor: float

    @field_validator("elasticity")
    @classmethod
    def elasticity_in_range(cls, v: float) -> float:
        if not 0 < v <= 1:
            raise ValueError(f"elasticity must be in (0, 1], got {v}")
        return v

    @field_validator("supply_constraint_factor")
    @classmethod
    def factor_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"supply_constraint_factor must be > 0, got {v}")
        return v

    def unit_for(self, region: Region) -> str:
        return self.us_unit if region is Region.US else self.world_unit


# --- Price Models ---


class PricePoint(BaseModel):
    """One observation from one source, or a fallback estimate."""

    model_config = ConfigDict(frozen=True)

    value: float
    date: date | Literal["unknown"]
    source: SourceLabel
    is_fallback: bool = False

    @field_validator("value")
    @classmethod
    def value_positive(cls, v: float) -> float:
        if math.isnan(v) or math.isinf(v) or v <= 0:
            raise ValueError(f"price value must be a positive number, got {v}")
        return v


class AggregatedQuote(BaseModel):
    """US and world price for one commodity, with provenance."""

    model_config = ConfigDict(frozen=True)

    commodity: CommodityKey
    us: PricePoint
    world: PricePoint
    units_us: str
    units_world: str
    contributing_sources: list[SourceLabel]
    is_fallback: bool
    timestamp: datetime

    def slot(self, region: Region) -> PricePoint:
        return self.us if region is Region.US else self.world

    def units(self, region: Region) -> str:
        return self.units_us if region is Region.US else self.units_world


# --- Projection Models ---


class Projection(BaseModel):
    """Output of the elasticity formula."""

    model_config = ConfigDict(frozen=True)

    price_change_pct: float
    new_price: float


class ProjectionResult(BaseModel):
    """A single user projection, kept in session history."""

    model_config = ConfigDict(frozen=True)

    region: Region
    commodity: CommodityKey
    current_price: float
    usage_change_pct: float
    price_change_pct: float
    new_price: float
    timestamp: datetime
    unit: str
    contributing_sources: list[SourceLabel]
    is_live_data: bool
    price_source: SourceLabel | None = None

    @property
    def price_change(self) -> float:
        """Absolute change per unit (negative for a decrease)."""
        return self.new_price - self.current_price


# --- Helpers ---


def parse_period(raw: object) -> date | Literal["unknown"]:
    """Normalize a provider period string to a calendar date.

    Accepts ``YYYY-MM-DD``, ``YYYY-MM`` (first of month) and ``YYYY``
    (January 1). Anything else maps to ``"unknown"``.
    """
    if raw is None:
        return UNKNOWN_DATE
    text = str(raw).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    m = _YEAR_MONTH_RE.match(text)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), 1)
        except ValueError:
            return UNKNOWN_DATE
    m = _YEAR_RE.match(text)
    if m:
        return date(int(m.group(1)), 1, 1)
    return UNKNOWN_DATE
