"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from energy_projections.api.deps import AppState
from energy_projections.api.schemas import ErrorResponse, InvalidCommodityResponse
from energy_projections.api.routes import router
from energy_projections.core.config import ProjectionsConfig, load_config
from energy_projections.core.exceptions import (
    ConfigError,
    EnergyProjectionsError,
    InvalidCommodityError,
    PriceUnavailableError,
)
from energy_projections.prices import create_aggregator
from energy_projections.prices.aggregator import PriceAggregator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    config = app.state._pending_config or load_config()
    aggregator = app.state._pending_aggregator
    client: httpx.AsyncClient | None = None

    if aggregator is None:
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.providers.request_timeout),
            follow_redirects=True,
        )
        aggregator = create_aggregator(config, client=client)

    app.state.app_state = AppState(config=config, aggregator=aggregator, client=client)
    logger.info(
        "API keys: EIA %s, FRED %s",
        "configured" if config.providers.eia_configured else "not configured",
        "configured" if config.providers.fred_configured else "not configured",
    )

    yield

    if client is not None:
        await client.aclose()


def create_app(
    config: ProjectionsConfig | None = None,
    aggregator: PriceAggregator | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    import energy_projections

    app = FastAPI(
        title="Energy Price Projections API",
        description="Energy commodity prices with fallback estimates and elasticity projections",
        version=energy_projections.__version__,
        lifespan=lifespan,
    )

    # Stash config and collaborators so lifespan can retrieve them
    app.state._pending_config = config
    app.state._pending_aggregator = aggregator

    origins = config.api.cors_origins if config else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    # Exception handlers
    @app.exception_handler(InvalidCommodityError)
    async def invalid_commodity_handler(request: Request, exc: InvalidCommodityError):
        return JSONResponse(
            status_code=400,
            content=InvalidCommodityResponse(
                error=type(exc).__name__,
                detail=str(exc),
                valid_keys=exc.context.get("valid_keys", []),
            ).model_dump(by_alias=True),
        )

    @app.exception_handler(EnergyProjectionsError)
    async def projections_exception_handler(request: Request, exc: EnergyProjectionsError):
        status_map = {
            ConfigError: 500,
            PriceUnavailableError: 503,
        }
        status = status_map.get(type(exc), 500)
        return JSONResponse(
            status_code=status,
            content=ErrorResponse(error=type(exc).__name__, detail=str(exc)).model_dump(),
        )

    return app
