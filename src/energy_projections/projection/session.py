"""Session-scoped projection history and plain-text summary reports."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from energy_projections.core.commodities import COMMODITIES
from energy_projections.core.exceptions import PriceUnavailableError
from energy_projections.core.models import AggregatedQuote, ProjectionResult, Region
from energy_projections.projection.calculator import project

logger = logging.getLogger(__name__)

_RULE = "=" * 48
_SECTION = "-" * 48

REFERENCE_SOURCES: list[tuple[str, str]] = [
    ("EIA - U.S. Energy Information Administration", "eia.gov/outlooks/steo/realprices/"),
    ("FRED - Federal Reserve Economic Data", "fred.stlouisfed.org"),
    ("Our World in Data", "ourworldindata.org/energy"),
    ("Yahoo Finance", "finance.yahoo.com/commodities/"),
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectionSession:
    """Holds one user's projections for the lifetime of their session.

    History is in-memory only and never shared between sessions.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._history: list[ProjectionResult] = []

    @property
    def history(self) -> list[ProjectionResult]:
        return list(self._history)

    def clear(self) -> None:
        self._history.clear()

    def calculate(
        self,
        quote: AggregatedQuote | None,
        region: Region | str,
        usage_change_pct: float,
    ) -> ProjectionResult:
        """Project ``quote``'s price for ``region`` and record the result.

        Raises:
            PriceUnavailableError: If no quote has been loaded yet.
        """
        region = Region(region)
        if quote is None:
            raise PriceUnavailableError(
                "Price data has not loaded yet",
                context={"commodity": None, "region": region.value},
            )

        commodity = COMMODITIES[quote.commodity]
        point = quote.slot(region)
        projection = project(
            current_price=point.value,
            usage_change_pct=usage_change_pct,
            elasticity=commodity.elasticity,
            supply_constraint_factor=commodity.supply_constraint_factor,
        )

        result = ProjectionResult(
            region=region,
            commodity=quote.commodity,
            current_price=point.value,
            usage_change_pct=usage_change_pct,
            price_change_pct=projection.price_change_pct,
            new_price=projection.new_price,
            timestamp=self._clock(),
            unit=quote.units(region),
            contributing_sources=list(quote.contributing_sources),
            is_live_data=not quote.is_fallback,
            price_source=point.source,
        )
        self._history.append(result)
        logger.info(
            "Projected %s %s: %+.1f%% usage -> %+.1f%% price",
            quote.commodity, region, usage_change_pct, projection.price_change_pct,
        )
        return result


def format_price(price: float) -> str:
    return f"{price:.2f}"


def _signed(value: float) -> str:
    return f"{'+' if value >= 0 else ''}{value:.1f}"


def render_summary(result: ProjectionResult) -> str:
    """Render a projection as the plain-text report users copy out."""
    commodity = COMMODITIES[result.commodity]
    ts = result.timestamp
    change_sign = "+" if result.new_price >= result.current_price else "-"
    apis = ", ".join(result.contributing_sources) if result.contributing_sources else "Fallback"

    lines = [
        "ENERGY PRICE PROJECTION SUMMARY",
        _RULE,
        "",
        "Report Generated",
        f"  Date: {ts.strftime('%A, %B')} {ts.day}, {ts.year}",
        f"  Time: {ts.strftime('%H:%M:%S')} {ts.tzname() or 'UTC'}",
        "",
        f"Energy Source: {commodity.full_name}",
        f"Region: {result.region.display_name}",
        "",
        "CURRENT MARKET DATA",
        _SECTION,
        f"Current Price: ${format_price(result.current_price)}{result.unit}",
        "",
        "PROJECTION ANALYSIS",
        _SECTION,
        f"Usage Change:    {_signed(result.usage_change_pct)}%",
        f"Price Impact:    {_signed(result.price_change_pct)}%",
        f"New Price:       ${format_price(result.new_price)}{result.unit}",
        f"Price Change:    {change_sign}${format_price(abs(result.price_change))}{result.unit}",
        "",
        "DATA SOURCE STATUS",
        _SECTION,
        f"Data Type:     {'LIVE DATA' if result.is_live_data else 'ESTIMATED DATA'}",
        f"Price Source:  {result.price_source or 'Multiple sources'}",
        f"APIs Queried:  {apis}",
        "",
        "REFERENCE SOURCES",
        _SECTION,
    ]
    for name, url in REFERENCE_SOURCES:
        lines.extend([f"* {name}", f"  {url}", ""])
    lines.extend(
        [
            "DISCLAIMER",
            _SECTION,
            "This projection uses economic modeling based on",
            "price elasticity and supply constraints. Actual",
            "prices may vary due to geopolitical events,",
            "weather, and policy changes.",
            "",
            _RULE,
            f"Energy Price Projections (c) {ts.year}",
            _RULE,
        ]
    )
    return "\n".join(lines) + "\n"
