"""Dependency injection for FastAPI routes."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from fastapi import Request

from energy_projections.core.config import ProjectionsConfig
from energy_projections.prices.aggregator import PriceAggregator


@dataclass
class AppState:
    """Shared application state, attached to app.state during lifespan."""

    config: ProjectionsConfig
    aggregator: PriceAggregator
    client: httpx.AsyncClient | None = None


def get_config(request: Request) -> ProjectionsConfig:
    """Dependency: retrieve config."""
    return request.app.state.app_state.config


def get_aggregator(request: Request) -> PriceAggregator:
    """Dependency: retrieve the price aggregator."""
    return request.app.state.app_state.aggregator
