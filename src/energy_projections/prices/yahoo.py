"""Yahoo Finance quote adapter — direct HTTP implementation.

Uses the unauthenticated ``/v8/finance/chart/`` endpoint via httpx and
reads the latest regular-market price from the chart ``meta`` block.
Futures symbols (``CL=F``, ``BZ=F``, ``NG=F``, ``MTF=F``) cover the
commodity benchmarks.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from energy_projections.core.exceptions import ProviderError
from energy_projections.core.models import PricePoint, ProviderName, SeriesId
from energy_projections.prices.base import HTTPSourceAdapter, ProviderRequest, positive_float

# Yahoo Finance chart API base
_BASE_URL = "https://query1.finance.yahoo.com"
_CHART_PATH = "/v8/finance/chart"
_USER_AGENT = "Mozilla/5.0 (compatible; energy-projections/1.0)"


class YahooFinanceAdapter(HTTPSourceAdapter):
    """Fetches the latest market price for a Yahoo Finance symbol."""

    provider = ProviderName.YAHOO
    label = "Yahoo Finance"

    def __init__(self, *args: Any, base_url: str = _BASE_URL, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._base_url = base_url.rstrip("/")

    def _build_request(self, series_id: SeriesId) -> ProviderRequest:
        return ProviderRequest(
            url=f"{self._base_url}{_CHART_PATH}/{series_id}",
            params={"interval": "1d", "range": "1d"},
            headers={"User-Agent": _USER_AGENT},
        )

    def _parse(self, data: Any, series_id: SeriesId) -> PricePoint:
        chart = data.get("chart") or {}

        # Check for API-level errors
        if chart.get("error"):
            err = chart["error"]
            raise ProviderError(
                f"Yahoo Finance API error: {err.get('code')} — {err.get('description')}",
                context={"provider": self.provider.value, "series": series_id},
            )

        results = chart.get("result")
        if not results:
            raise self._empty(series_id)

        meta = results[0]["meta"]
        return PricePoint(
            value=positive_float(meta.get("regularMarketPrice")),
            date=_market_date(meta.get("regularMarketTime")),
            source=self.label,
        )


def _market_date(ts: Any) -> date:
    """Convert a Unix market timestamp to a UTC date, defaulting to today."""
    if isinstance(ts, (int, float)) and not isinstance(ts, bool):
        return datetime.fromtimestamp(ts, tz=timezone.utc).date()
    return datetime.now(timezone.utc).date()
