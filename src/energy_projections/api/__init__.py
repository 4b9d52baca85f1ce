"""HTTP boundary: FastAPI app exposing prices, projections and status."""

from energy_projections.api.app import create_app

__all__ = ["create_app"]
