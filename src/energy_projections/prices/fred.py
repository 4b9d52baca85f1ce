"""Federal Reserve Economic Data (FRED) adapter.

Documentation: https://fred.stlouisfed.org/docs/api/fred/

Requires an API key. Reads the newest observation of any FRED series.
"""

from __future__ import annotations

from typing import Any

from energy_projections.core.models import PricePoint, ProviderName, SeriesId, parse_period
from energy_projections.prices.base import HTTPSourceAdapter, ProviderRequest, positive_float

_BASE_URL = "https://api.stlouisfed.org/fred"

# FRED encodes a missing observation as a single dot.
_MISSING_VALUE = "."


class FREDAdapter(HTTPSourceAdapter):
    """Fetches the newest observation of a FRED series."""

    provider = ProviderName.FRED
    label = "FRED"
    requires_credential = True

    def __init__(self, *args: Any, base_url: str = _BASE_URL, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._base_url = base_url.rstrip("/")

    def _build_request(self, series_id: SeriesId) -> ProviderRequest:
        return ProviderRequest(
            url=f"{self._base_url}/series/observations",
            params={
                "series_id": series_id,
                "api_key": self._credential() or "",
                "file_type": "json",
                "sort_order": "desc",
                "limit": "1",
            },
        )

    def _parse(self, data: Any, series_id: SeriesId) -> PricePoint:
        observations = data.get("observations") or []
        if not observations:
            raise self._empty(series_id)

        obs = observations[0]
        if obs.get("value") == _MISSING_VALUE:
            raise ValueError(f"FRED reported no value for {obs.get('date')}")
        return PricePoint(
            value=positive_float(obs["value"]),
            date=parse_period(obs.get("date")),
            source=self.label,
        )
