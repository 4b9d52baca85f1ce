"""U.S. Energy Information Administration (EIA) API v2 adapter.

Documentation: https://www.eia.gov/opendata/documentation.php

Requires an API key. Each supported legacy series id maps to a v2 route
queried for the single newest row (sorted by period, descending).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from energy_projections.core.exceptions import ProviderError
from energy_projections.core.models import PricePoint, ProviderName, SeriesId, parse_period
from energy_projections.prices.base import HTTPSourceAdapter, ProviderRequest, positive_float

_BASE_URL = "https://api.eia.gov/v2"


@dataclass(frozen=True)
class EIASeries:
    """Route and facets for one EIA v2 series."""

    route: str
    frequency: str
    value_column: str
    facets: tuple[tuple[str, str], ...] = ()


EIA_SERIES: dict[str, EIASeries] = {
    # WTI Cushing spot price, $/barrel
    "PET.RWTC.D": EIASeries(
        route="petroleum/pri/spt/data/",
        frequency="daily",
        value_column="value",
        facets=(("series", "RWTC"),),
    ),
    # Henry Hub spot price, $/MMBtu
    "NG.RNGWHHD.D": EIASeries(
        route="natural-gas/pri/sum/data/",
        frequency="daily",
        value_column="value",
        facets=(("process", "PNG"),),
    ),
    # Coal market price, $/short ton
    "COAL.PRICE": EIASeries(
        route="coal/markets/data/",
        frequency="weekly",
        value_column="price",
    ),
}


class EIAAdapter(HTTPSourceAdapter):
    """Fetches the newest spot price for a supported EIA series."""

    provider = ProviderName.EIA
    label = "EIA"
    requires_credential = True

    def __init__(self, *args: Any, base_url: str = _BASE_URL, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._base_url = base_url.rstrip("/")

    def _build_request(self, series_id: SeriesId) -> ProviderRequest:
        series = EIA_SERIES.get(series_id)
        if series is None:
            raise ProviderError(
                f"Unsupported EIA series: {series_id}",
                context={"provider": self.provider.value, "series": series_id},
            )

        params = {
            "api_key": self._credential() or "",
            "frequency": series.frequency,
            "data[0]": series.value_column,
            "sort[0][column]": "period",
            "sort[0][direction]": "desc",
            "length": "1",
        }
        for facet, value in series.facets:
            params[f"facets[{facet}][]"] = value

        return ProviderRequest(url=f"{self._base_url}/{series.route}", params=params)

    def _parse(self, data: Any, series_id: SeriesId) -> PricePoint:
        rows = (data.get("response") or {}).get("data") or []
        if not rows:
            raise self._empty(series_id)

        newest = rows[0]
        column = EIA_SERIES[series_id].value_column
        return PricePoint(
            value=positive_float(newest[column]),
            date=parse_period(newest.get("period")),
            source=self.label,
        )
