"""API-specific request/response schemas (Pydantic v2).

Field names follow the camelCase contract the browser front end consumes.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -- Error --


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    error: str
    detail: str | None = None


class InvalidCommodityResponse(_CamelModel):
    """Returned with HTTP 400 for an unknown commodity key."""

    error: str
    detail: str
    valid_keys: list[str] = Field(alias="validKeys")


# -- Prices --


class PricePointResponse(_CamelModel):
    """One slot of a quote."""

    value: float
    date: str
    source: str
    is_fallback: bool = Field(default=False, alias="isFallback")


class UnitsResponse(BaseModel):
    us: str
    world: str


class PriceResponse(_CamelModel):
    """Response for GET /api/prices/{source}."""

    source: str
    timestamp: datetime
    us: PricePointResponse
    world: PricePointResponse
    units: UnitsResponse
    data_sources: list[str] = Field(alias="dataSources")
    is_fallback: bool = Field(alias="isFallback")
    error: str | None = None


# -- Commodities --


class CommodityResponse(_CamelModel):
    """Static commodity constants."""

    key: str
    name: str
    full_name: str = Field(alias="fullName")
    unit: str
    elasticity: float
    us_unit: str = Field(alias="usUnit")
    world_unit: str = Field(alias="worldUnit")
    supply_constraint_factor: float = Field(alias="supplyConstraintFactor")


# -- Projections --


class ProjectionResponse(_CamelModel):
    """Response for GET /api/projections/{source}."""

    commodity: str
    region: str
    current_price: float = Field(alias="currentPrice")
    usage_change_pct: float = Field(alias="usageChangePct")
    price_change_pct: float = Field(alias="priceChangePct")
    new_price: float = Field(alias="newPrice")
    unit: str
    data_sources: list[str] = Field(alias="dataSources")
    is_live_data: bool = Field(alias="isLiveData")
    price_source: str | None = Field(default=None, alias="priceSource")
    timestamp: datetime
    error: str | None = None


# -- Health / Status --


class APIKeysResponse(BaseModel):
    eia: bool
    fred: bool


class HealthResponse(_CamelModel):
    """Response for GET /api/health. Reports key presence, not validity."""

    status: str = "ok"
    timestamp: datetime
    api_keys: APIKeysResponse = Field(alias="apiKeys")


class ProviderStatus(BaseModel):
    configured: bool
    description: str


class StatusResponse(_CamelModel):
    """Response for GET /api/status."""

    platform: str
    version: str
    apis: dict[str, ProviderStatus]
    data_sources: list[str] = Field(alias="dataSources")
