"""Static per-commodity price estimates used when no provider answers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

from energy_projections.core.commodities import COMMODITIES, parse_commodity
from energy_projections.core.models import CommodityKey, PricePoint, Region

FALLBACK_SOURCE = "Fallback"
FALLBACK_SOURCES_LABEL = "Fallback estimates"


@dataclass(frozen=True)
class FallbackEntry:
    """Estimated US and world prices with their display units."""

    us_value: float
    world_value: float
    us_unit: str
    world_unit: str

    def value(self, region: Region) -> float:
        return self.us_value if region is Region.US else self.world_value

    def unit(self, region: Region) -> str:
        return self.us_unit if region is Region.US else self.world_unit


# (us, world) current market estimates
_ESTIMATES: dict[CommodityKey, tuple[float, float]] = {
    CommodityKey.OIL: (74.50, 78.80),
    CommodityKey.NATURAL_GAS: (3.15, 12.40),
    CommodityKey.NUCLEAR: (31.00, 35.00),
    CommodityKey.SOLAR: (28.00, 32.00),
    CommodityKey.RENEWABLES: (31.00, 36.00),
    CommodityKey.COAL: (140.00, 120.00),
}


class FallbackTable:
    """Pure lookup over the static estimates.

    Units come from the commodity table so that live and estimated quotes
    always carry the same labels.
    """

    def __init__(self, estimates: dict[CommodityKey, tuple[float, float]] | None = None) -> None:
        source = estimates if estimates is not None else _ESTIMATES
        self._entries: dict[CommodityKey, FallbackEntry] = {}
        for key, (us_value, world_value) in source.items():
            commodity = COMMODITIES[key]
            self._entries[key] = FallbackEntry(
                us_value=us_value,
                world_value=world_value,
                us_unit=commodity.us_unit,
                world_unit=commodity.world_unit,
            )

    def get(self, commodity: str | CommodityKey) -> FallbackEntry:
        """Return the entry for ``commodity``.

        Raises:
            InvalidCommodityError: If the key is not a supported commodity.
        """
        return self._entries[parse_commodity(commodity)]

    def point(
        self,
        commodity: str | CommodityKey,
        region: Region,
        on: date | None = None,
    ) -> PricePoint:
        """Build a fallback PricePoint for one slot, dated today by default."""
        entry = self.get(commodity)
        return PricePoint(
            value=entry.value(region),
            date=on or datetime.now(timezone.utc).date(),
            source=FALLBACK_SOURCE,
            is_fallback=True,
        )

    def keys(self) -> list[CommodityKey]:
        return list(self._entries)
