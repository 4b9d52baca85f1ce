"""FastAPI route definitions for the Energy Price Projections API."""

from __future__ import annotations

import logging
from datetime import UTC as _UTC, datetime

from fastapi import APIRouter, Depends, Query

import energy_projections
from energy_projections.api.deps import get_aggregator, get_config
from energy_projections.api.schemas import (
    APIKeysResponse,
    CommodityResponse,
    HealthResponse,
    PricePointResponse,
    PriceResponse,
    ProjectionResponse,
    ProviderStatus,
    StatusResponse,
    UnitsResponse,
)
from energy_projections.core.commodities import COMMODITIES, parse_commodity
from energy_projections.core.config import ProjectionsConfig
from energy_projections.core.models import AggregatedQuote, CommodityKey, PricePoint, Region
from energy_projections.prices.aggregator import PriceAggregator
from energy_projections.projection.session import ProjectionSession

logger = logging.getLogger(__name__)

router = APIRouter()

PLATFORM_NAME = "Energy Price Projections"

REFERENCE_URLS = [
    "https://www.eia.gov/opendata/",
    "https://fred.stlouisfed.org/docs/api/fred/",
    "https://github.com/owid/energy-data",
    "https://finance.yahoo.com/",
]


async def _resolve_or_fallback(
    aggregator: PriceAggregator,
    key: CommodityKey,
) -> tuple[AggregatedQuote, str | None]:
    """Resolve a quote; any internal failure degrades to fallback data.

    The UI never receives a failed request for a valid commodity, so the
    error is reported in the body instead of the status code.
    """
    try:
        return await aggregator.resolve(key), None
    except Exception as e:
        logger.exception("Error fetching prices for %s", key)
        return aggregator.fallback_quote(key), str(e)


def _point_response(point: PricePoint) -> PricePointResponse:
    return PricePointResponse(
        value=point.value,
        date=str(point.date),
        source=point.source,
        is_fallback=point.is_fallback,
    )


# -- Prices --


@router.get(
    "/prices/{source}",
    response_model=PriceResponse,
    response_model_exclude_none=True,
)
async def get_prices(
    source: str,
    aggregator: PriceAggregator = Depends(get_aggregator),
):
    """Current US and world prices for one commodity, with provenance."""
    key = parse_commodity(source)
    logger.info("Fetching prices for: %s", key)
    quote, error = await _resolve_or_fallback(aggregator, key)

    return PriceResponse(
        source=key.value,
        timestamp=quote.timestamp,
        us=_point_response(quote.us),
        world=_point_response(quote.world),
        units=UnitsResponse(us=quote.units_us, world=quote.units_world),
        data_sources=quote.contributing_sources,
        is_fallback=quote.is_fallback,
        error=error,
    )


# -- Projections --


@router.get(
    "/projections/{source}",
    response_model=ProjectionResponse,
    response_model_exclude_none=True,
)
async def get_projection(
    source: str,
    usage_change: float = Query(..., ge=-100.0, description="Usage change in percent"),
    region: Region = Query(Region.US),
    aggregator: PriceAggregator = Depends(get_aggregator),
):
    """Project the price impact of a usage change against the current quote."""
    key = parse_commodity(source)
    quote, error = await _resolve_or_fallback(aggregator, key)
    result = ProjectionSession().calculate(quote, region, usage_change)

    return ProjectionResponse(
        commodity=key.value,
        region=result.region.value,
        current_price=result.current_price,
        usage_change_pct=result.usage_change_pct,
        price_change_pct=result.price_change_pct,
        new_price=result.new_price,
        unit=result.unit,
        data_sources=result.contributing_sources,
        is_live_data=result.is_live_data,
        price_source=result.price_source,
        timestamp=result.timestamp,
        error=error,
    )


# -- Commodities --


@router.get("/commodities", response_model=list[CommodityResponse])
async def list_commodities():
    """Static constants for every supported commodity."""
    return [
        CommodityResponse(
            key=c.key.value,
            name=c.name,
            full_name=c.full_name,
            unit=c.unit,
            elasticity=c.elasticity,
            us_unit=c.us_unit,
            world_unit=c.world_unit,
            supply_constraint_factor=c.supply_constraint_factor,
        )
        for c in COMMODITIES.values()
    ]


# -- Health --


@router.get("/health", response_model=HealthResponse)
async def health_check(config: ProjectionsConfig = Depends(get_config)):
    """Liveness plus credential presence (not validity)."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(_UTC),
        api_keys=APIKeysResponse(
            eia=config.providers.eia_configured,
            fred=config.providers.fred_configured,
        ),
    )


@router.get("/status", response_model=StatusResponse)
async def api_status(config: ProjectionsConfig = Depends(get_config)):
    """Static platform and provider metadata."""
    providers = config.providers
    return StatusResponse(
        platform=PLATFORM_NAME,
        version=energy_projections.__version__,
        apis={
            "eia": ProviderStatus(
                configured=providers.eia_configured,
                description="U.S. Energy Information Administration",
            ),
            "fred": ProviderStatus(
                configured=providers.fred_configured,
                description="Federal Reserve Economic Data",
            ),
            "owid": ProviderStatus(
                configured=True,
                description="Our World in Data (no key required)",
            ),
            "yahoo": ProviderStatus(
                configured=True,
                description="Yahoo Finance (no key required)",
            ),
        },
        data_sources=REFERENCE_URLS,
    )
