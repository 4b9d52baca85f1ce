"""Price-elasticity projection formula."""

from __future__ import annotations

from energy_projections.core.exceptions import ConfigError
from energy_projections.core.models import Projection


def project(
    current_price: float,
    usage_change_pct: float,
    elasticity: float,
    supply_constraint_factor: float,
) -> Projection:
    """Project the price after a change in consumption.

    % price change = (% usage change) / elasticity * supply constraint factor

    A negative usage change yields a negative price change; results are not
    clamped.

    Raises:
        ConfigError: If ``elasticity`` is not positive. Elasticity is a
            per-commodity constant, so this is a configuration fault.
    """
    if elasticity <= 0:
        raise ConfigError(
            f"elasticity must be > 0, got {elasticity}",
            context={"field": "elasticity", "value": elasticity},
        )

    price_change_pct = (usage_change_pct / 100) * (1 / elasticity) * supply_constraint_factor * 100
    new_price = current_price * (1 + price_change_pct / 100)
    return Projection(price_change_pct=price_change_pct, new_price=new_price)
