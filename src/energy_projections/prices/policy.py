"""Declarative per-commodity source policies.

Each commodity lists, in priority order, the provider series to consult for
its US slot and for its world slot. A world slot may instead be derived
from the resolved US price with a fixed multiplier, for benchmarks that
have no independent global quote (LNG, levelized costs).
"""

from __future__ import annotations

from dataclasses import dataclass

from energy_projections.core.models import CommodityKey, ProviderName, SeriesId

DERIVED_SOURCE = "Calculated from US price"


@dataclass(frozen=True)
class SourceStep:
    """One provider lookup. ``label`` overrides the provenance label."""

    provider: ProviderName
    series: SeriesId
    label: str | None = None


@dataclass(frozen=True)
class DerivedPrice:
    """World price computed as ``us.value * multiplier``."""

    multiplier: float
    source: str = DERIVED_SOURCE

    def __post_init__(self) -> None:
        if self.multiplier <= 0:
            raise ValueError(f"multiplier must be > 0, got {self.multiplier}")


@dataclass(frozen=True)
class CommodityPolicy:
    """Resolution plan for one commodity.

    ``corroborating`` steps are fetched only to record provenance; their
    values never fill a slot.
    """

    us: tuple[SourceStep, ...]
    world: tuple[SourceStep, ...] | DerivedPrice
    corroborating: tuple[SourceStep, ...] = ()

    @property
    def derives_world(self) -> bool:
        return isinstance(self.world, DerivedPrice)

    def providers(self) -> set[ProviderName]:
        steps = list(self.us) + list(self.corroborating)
        if not isinstance(self.world, DerivedPrice):
            steps.extend(self.world)
        return {s.provider for s in steps}


PRICE_POLICIES: dict[CommodityKey, CommodityPolicy] = {
    CommodityKey.OIL: CommodityPolicy(
        us=(
            SourceStep(ProviderName.EIA, "PET.RWTC.D"),
            SourceStep(ProviderName.YAHOO, "CL=F"),
        ),
        world=(SourceStep(ProviderName.YAHOO, "BZ=F", label="Yahoo Finance (Brent)"),),
    ),
    CommodityKey.NATURAL_GAS: CommodityPolicy(
        us=(
            SourceStep(ProviderName.EIA, "NG.RNGWHHD.D"),
            SourceStep(ProviderName.YAHOO, "NG=F"),
        ),
        # LNG typically trades at a premium to Henry Hub
        world=DerivedPrice(multiplier=3.5),
    ),
    CommodityKey.NUCLEAR: CommodityPolicy(
        us=(SourceStep(ProviderName.OWID, "nuclear"),),
        world=DerivedPrice(multiplier=1.1),
        corroborating=(SourceStep(ProviderName.FRED, "PURANUSDM"),),
    ),
    CommodityKey.SOLAR: CommodityPolicy(
        us=(SourceStep(ProviderName.OWID, "solar"),),
        world=DerivedPrice(multiplier=1.15),
    ),
    CommodityKey.RENEWABLES: CommodityPolicy(
        us=(SourceStep(ProviderName.OWID, "wind"),),
        world=DerivedPrice(multiplier=1.15),
    ),
    CommodityKey.COAL: CommodityPolicy(
        us=(SourceStep(ProviderName.EIA, "COAL.PRICE"),),
        world=(SourceStep(ProviderName.YAHOO, "MTF=F"),),
    ),
}
