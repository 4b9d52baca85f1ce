"""Provider-agnostic price aggregation.

Architecture
------------
    Provider API → SourceAdapter → PricePoint → PriceAggregator → AggregatedQuote

Key abstractions:

- ``SourceAdapter``: Normalizes one provider's newest observation.
- ``TTLCache``: Short-lived memo of adapter results, shared by all adapters.
- ``FallbackTable``: Static estimates used when every adapter for a slot fails.
- ``PRICE_POLICIES``: Declarative per-commodity source priorities.
- ``PriceAggregator``: Interprets the policies into quotes.

Built-in adapters: ``EIAAdapter``, ``FREDAdapter``, ``OWIDAdapter``,
``YahooFinanceAdapter``.
"""

from __future__ import annotations

import httpx

from energy_projections.core.config import ProjectionsConfig
from energy_projections.core.models import ProviderName
from energy_projections.prices.aggregator import PriceAggregator
from energy_projections.prices.base import HTTPSourceAdapter, ProviderRequest
from energy_projections.prices.cache import CacheEntry, TTLCache
from energy_projections.prices.eia import EIAAdapter
from energy_projections.prices.fallback import FallbackEntry, FallbackTable
from energy_projections.prices.fred import FREDAdapter
from energy_projections.prices.owid import LCOERecord, OWIDAdapter
from energy_projections.prices.policy import (
    PRICE_POLICIES,
    CommodityPolicy,
    DerivedPrice,
    SourceStep,
)
from energy_projections.prices.provider import SourceAdapter
from energy_projections.prices.yahoo import YahooFinanceAdapter


def build_adapters(
    config: ProjectionsConfig,
    cache: TTLCache,
    client: httpx.AsyncClient | None = None,
) -> dict[ProviderName, SourceAdapter]:
    """Instantiate one adapter per provider from configuration."""
    providers = config.providers
    common = {
        "timeout": providers.request_timeout,
        "rate_limit": providers.rate_limit,
        "client": client,
    }
    return {
        ProviderName.EIA: EIAAdapter(cache, api_key=providers.eia_api_key, **common),
        ProviderName.FRED: FREDAdapter(cache, api_key=providers.fred_api_key, **common),
        ProviderName.OWID: OWIDAdapter(cache, **common),
        ProviderName.YAHOO: YahooFinanceAdapter(cache, **common),
    }


def create_aggregator(
    config: ProjectionsConfig,
    client: httpx.AsyncClient | None = None,
    cache: TTLCache | None = None,
) -> PriceAggregator:
    """Wire cache, adapters and fallback table into a PriceAggregator."""
    if cache is None:
        cache = TTLCache(
            ttl_seconds=config.cache.ttl_seconds,
            max_entries=config.cache.max_entries,
        )
    return PriceAggregator(build_adapters(config, cache, client), FallbackTable())


__all__ = [
    # Cache
    "CacheEntry",
    "TTLCache",
    # Protocols and bases
    "SourceAdapter",
    "HTTPSourceAdapter",
    "ProviderRequest",
    # Adapters
    "EIAAdapter",
    "FREDAdapter",
    "OWIDAdapter",
    "LCOERecord",
    "YahooFinanceAdapter",
    # Fallback
    "FallbackEntry",
    "FallbackTable",
    # Policies
    "PRICE_POLICIES",
    "CommodityPolicy",
    "DerivedPrice",
    "SourceStep",
    # Aggregation
    "PriceAggregator",
    "build_adapters",
    "create_aggregator",
]
