"""Elasticity-based price projections and session history."""

from energy_projections.projection.calculator import project
from energy_projections.projection.session import (
    ProjectionSession,
    format_price,
    render_summary,
)

__all__ = [
    "project",
    "ProjectionSession",
    "format_price",
    "render_summary",
]
