"""Shared pytest fixtures for energy-projections."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from energy_projections.core.config import ProjectionsConfig, ProvidersConfig
from energy_projections.core.models import (
    AggregatedQuote,
    CommodityKey,
    PricePoint,
    ProviderName,
)
from energy_projections.prices.aggregator import PriceAggregator
from energy_projections.prices.cache import TTLCache
from energy_projections.prices.fallback import FallbackTable

FIXED_NOW = datetime(2024, 6, 3, 14, 30, 0, tzinfo=timezone.utc)

_LABELS = {
    ProviderName.EIA: "EIA",
    ProviderName.FRED: "FRED",
    ProviderName.OWID: "Our World in Data",
    ProviderName.YAHOO: "Yahoo Finance",
}


class StubAdapter:
    """In-memory SourceAdapter: returns canned points and counts calls."""

    def __init__(self, provider: ProviderName, configured: bool = True) -> None:
        self.provider = provider
        self.label = _LABELS[provider]
        self.configured = configured
        self.responses: dict[str, PricePoint] = {}
        self.calls: list[str] = []
        self.error: Exception | None = None

    async def fetch(self, series_id: str) -> PricePoint | None:
        self.calls.append(series_id)
        if self.error is not None:
            raise self.error
        if not self.configured:
            return None
        return self.responses.get(series_id)


class FakeClock:
    """Manually advanced monotonic clock for cache tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def point(value: float, source: str = "EIA", on: date | str = date(2024, 6, 1)) -> PricePoint:
    return PricePoint(value=value, date=on, source=source)


@pytest.fixture
def stub_adapters() -> dict[ProviderName, StubAdapter]:
    """One stub per provider; every fetch returns None until primed."""
    return {name: StubAdapter(name) for name in ProviderName}


@pytest.fixture
def aggregator(stub_adapters) -> PriceAggregator:
    return PriceAggregator(stub_adapters, FallbackTable(), clock=lambda: FIXED_NOW)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(fake_clock) -> TTLCache:
    return TTLCache(ttl_seconds=300, clock=fake_clock)


@pytest.fixture
def config() -> ProjectionsConfig:
    return ProjectionsConfig(
        providers=ProvidersConfig(eia_api_key="test-eia-key", fred_api_key="test-fred-key"),
    )


@pytest.fixture
def unkeyed_config() -> ProjectionsConfig:
    return ProjectionsConfig()


@pytest.fixture
def sample_quote() -> AggregatedQuote:
    return AggregatedQuote(
        commodity=CommodityKey.OIL,
        us=point(74.50, "EIA"),
        world=point(78.80, "Yahoo Finance"),
        units_us="/barrel",
        units_world="/barrel",
        contributing_sources=["EIA", "Yahoo Finance (Brent)"],
        is_fallback=False,
        timestamp=FIXED_NOW,
    )
