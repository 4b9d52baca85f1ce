"""Our World in Data (OWID) energy dataset adapter.

Uses the GitHub-hosted ``owid-energy-data.json`` file (no API key). Unlike
the single-observation adapters, one download yields several indicators:
the USA yearly series is reduced to its most recent year with data, and
one value per generation technology is extracted into an ``LCOERecord``.
The record is cached on its own, so the solar, wind and nuclear lookups
share a single download.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict

from energy_projections.core.exceptions import ProviderError
from energy_projections.core.models import PricePoint, ProviderName, SeriesId
from energy_projections.prices.base import (
    MALFORMED_PAYLOAD_ERRORS,
    HTTPSourceAdapter,
    ProviderRequest,
)

logger = logging.getLogger(__name__)

_DATA_URL = "https://raw.githubusercontent.com/owid/energy-data/master/owid-energy-data.json"
_COUNTRY_KEYS = ("USA", "United States")
_RECORD_CACHE_KEY = "owid_energy-data"

# indicator -> (dataset column, default $/MWh when the column is missing)
LCOE_FIELDS: dict[str, tuple[str, float]] = {
    "solar": ("solar_electricity", 28.0),
    "wind": ("wind_electricity", 31.0),
    "nuclear": ("nuclear_electricity", 33.0),
}


class LCOERecord(BaseModel):
    """Per-technology values for the most recent year in the dataset."""

    model_config = ConfigDict(frozen=True)

    year: int
    solar: float
    wind: float
    nuclear: float
    source: str = "Our World in Data"

    def value(self, indicator: str) -> float:
        return getattr(self, indicator)


class OWIDAdapter(HTTPSourceAdapter):
    """Derives technology indicators from the OWID yearly energy series."""

    provider = ProviderName.OWID
    label = "Our World in Data"

    def __init__(self, *args: Any, data_url: str = _DATA_URL, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._data_url = data_url

    def _build_request(self, series_id: SeriesId) -> ProviderRequest:
        return ProviderRequest(url=self._data_url)

    async def _fetch_point(self, series_id: SeriesId) -> PricePoint:
        if series_id not in LCOE_FIELDS:
            raise ProviderError(
                f"Unsupported OWID indicator: {series_id}",
                context={"provider": self.provider.value, "series": series_id},
            )
        record = await self._load_record(series_id)
        return self._parse(record, series_id)

    async def _load_record(self, series_id: SeriesId) -> LCOERecord:
        cached = self._cache.get(_RECORD_CACHE_KEY)
        if cached is not None:
            return cached

        data = await self._get_json(self._build_request(series_id), series_id)
        try:
            record = extract_latest_record(data)
        except MALFORMED_PAYLOAD_ERRORS as e:
            raise ProviderError(
                f"Malformed OWID dataset: {e}",
                context={"provider": self.provider.value, "series": series_id},
            ) from e

        logger.debug("OWID dataset reduced to year %d", record.year)
        self._cache.put(_RECORD_CACHE_KEY, record)
        return record

    def _parse(self, data: LCOERecord, series_id: SeriesId) -> PricePoint:
        return PricePoint(
            value=data.value(series_id),
            date=date(data.year, 1, 1),
            source=data.source,
        )


def extract_latest_record(data: Any) -> LCOERecord:
    """Reduce the dataset to the newest USA year and its technology values.

    Accepts either a country entry keyed directly by year
    (``{"USA": {"2021": {...}, "2022": {...}}}``) or the published layout
    with a ``data`` list of rows carrying a ``year`` field.
    """
    country = next((data[k] for k in _COUNTRY_KEYS if k in data), None)
    if not isinstance(country, dict):
        raise ValueError("dataset has no USA entry")

    by_year = _yearly_series(country)
    years = sorted((y for y, row in by_year.items() if row), reverse=True)
    if not years:
        raise ValueError("USA series has no yearly data")

    latest = years[0]
    row = by_year[latest]
    values: dict[str, float] = {}
    for indicator, (column, default) in LCOE_FIELDS.items():
        values[indicator] = _field_or_default(row.get(column), default)

    return LCOERecord(year=latest, **values)


def _yearly_series(country: dict) -> dict[int, dict]:
    rows = country.get("data")
    if isinstance(rows, list):
        return {int(r["year"]): r for r in rows if isinstance(r, dict) and "year" in r}
    return {
        int(k): v
        for k, v in country.items()
        if str(k).isdigit() and isinstance(v, dict)
    }


def _field_or_default(raw: Any, default: float) -> float:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool) and raw > 0:
        return float(raw)
    return default
