"""Per-commodity price aggregation with fallback resolution.

The aggregator is a generic interpreter over ``PRICE_POLICIES``:

1. US slot: consult the policy's steps in priority order and keep the
   first observation returned.
2. World slot: same, or derive ``us.value * multiplier`` from a live US
   observation (carrying its date).
3. Any slot still empty is filled from the Fallback Table.
4. The quote is a fallback only when both slots are.
5. Units always come from the Fallback Table.

Independent step chains (US, world, corroborating) run concurrently;
within a chain, steps run sequentially and the first success short-circuits
the rest, so results never depend on response timing.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone

from energy_projections.core.commodities import parse_commodity
from energy_projections.core.exceptions import ConfigError
from energy_projections.core.models import (
    AggregatedQuote,
    CommodityKey,
    PricePoint,
    ProviderName,
    Region,
)
from energy_projections.prices.fallback import FALLBACK_SOURCES_LABEL, FallbackTable
from energy_projections.prices.policy import (
    PRICE_POLICIES,
    CommodityPolicy,
    DerivedPrice,
    SourceStep,
)
from energy_projections.prices.provider import SourceAdapter

logger = logging.getLogger(__name__)

# (observation, provenance label) for a slot resolved by an adapter
SlotResult = tuple[PricePoint, str]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PriceAggregator:
    """Resolves commodity keys into AggregatedQuotes.

    Parameters
    ----------
    adapters : Mapping[ProviderName, SourceAdapter]
        One adapter per provider referenced by the policies.
    fallback : FallbackTable | None
        Static estimates. Uses the built-in table if None.
    policies : Mapping[CommodityKey, CommodityPolicy] | None
        Resolution plans. Uses ``PRICE_POLICIES`` if None.
    clock : Callable[[], datetime]
        UTC time source for quote timestamps and fallback dates.

    Raises
    ------
    ConfigError
        If a policy references a provider with no adapter.
    """

    def __init__(
        self,
        adapters: Mapping[ProviderName, SourceAdapter],
        fallback: FallbackTable | None = None,
        policies: Mapping[CommodityKey, CommodityPolicy] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._adapters = dict(adapters)
        self._fallback = fallback or FallbackTable()
        self._policies = dict(policies or PRICE_POLICIES)
        self._clock = clock

        for key, policy in self._policies.items():
            missing = policy.providers() - set(self._adapters)
            if missing:
                raise ConfigError(
                    f"Policy for {key} references providers without adapters: "
                    f"{', '.join(sorted(missing))}",
                    context={"field": "adapters", "value": sorted(missing)},
                )

    @property
    def adapters(self) -> dict[ProviderName, SourceAdapter]:
        return dict(self._adapters)

    @property
    def fallback(self) -> FallbackTable:
        return self._fallback

    async def resolve(self, commodity: str | CommodityKey) -> AggregatedQuote:
        """Resolve both price slots for ``commodity``.

        Raises:
            InvalidCommodityError: If the key is not a supported commodity.
        """
        key = parse_commodity(commodity)
        policy = self._policies[key]
        logger.info("Resolving prices for %s", key)

        if isinstance(policy.world, DerivedPrice):
            us_result, corroborated = await asyncio.gather(
                self._resolve_slot(key, Region.US, policy.us),
                self._corroborate(policy.corroborating),
            )
            world_result = self._derive_world(us_result, policy.world)
        else:
            us_result, world_result, corroborated = await asyncio.gather(
                self._resolve_slot(key, Region.US, policy.us),
                self._resolve_slot(key, Region.WORLD, policy.world),
                self._corroborate(policy.corroborating),
            )

        now = self._clock()
        sources: list[str] = []
        us, us_label = self._fill(key, Region.US, us_result, now)
        world, world_label = self._fill(key, Region.WORLD, world_result, now)
        for label in (us_label, world_label, *corroborated):
            if label and label not in sources:
                sources.append(label)

        entry = self._fallback.get(key)
        quote = AggregatedQuote(
            commodity=key,
            us=us,
            world=world,
            units_us=entry.us_unit,
            units_world=entry.world_unit,
            contributing_sources=sources or [FALLBACK_SOURCES_LABEL],
            is_fallback=us.is_fallback and world.is_fallback,
            timestamp=now,
        )
        logger.debug(
            "Resolved %s: us=%s (%s) world=%s (%s)",
            key, us.value, us.source, world.value, world.source,
        )
        return quote

    def fallback_quote(self, commodity: str | CommodityKey) -> AggregatedQuote:
        """A quote built entirely from the Fallback Table."""
        key = parse_commodity(commodity)
        now = self._clock()
        entry = self._fallback.get(key)
        return AggregatedQuote(
            commodity=key,
            us=self._fallback.point(key, Region.US, now.date()),
            world=self._fallback.point(key, Region.WORLD, now.date()),
            units_us=entry.us_unit,
            units_world=entry.world_unit,
            contributing_sources=[FALLBACK_SOURCES_LABEL],
            is_fallback=True,
            timestamp=now,
        )

    async def _resolve_slot(
        self,
        key: CommodityKey,
        region: Region,
        steps: Sequence[SourceStep],
    ) -> SlotResult | None:
        for step in steps:
            adapter = self._adapters[step.provider]
            point = await adapter.fetch(step.series)
            if point is not None:
                return point, step.label or adapter.label
            logger.debug(
                "%s %s slot: %s %s unavailable%s",
                key, region, step.provider, step.series,
                "" if adapter.configured else " (not configured)",
            )
        logger.info("%s %s slot: all sources exhausted, using fallback", key, region)
        return None

    async def _corroborate(self, steps: Sequence[SourceStep]) -> list[str]:
        labels: list[str] = []
        for step in steps:
            adapter = self._adapters[step.provider]
            if await adapter.fetch(step.series) is not None:
                labels.append(step.label or adapter.label)
        return labels

    @staticmethod
    def _derive_world(us_result: SlotResult | None, rule: DerivedPrice) -> SlotResult | None:
        # Derivation only applies to a live US observation.
        if us_result is None:
            return None
        us, _ = us_result
        world = PricePoint(value=us.value * rule.multiplier, date=us.date, source=rule.source)
        return world, ""

    def _fill(
        self,
        key: CommodityKey,
        region: Region,
        result: SlotResult | None,
        now: datetime,
    ) -> tuple[PricePoint, str | None]:
        if result is None:
            return self._fallback.point(key, region, now.date()), None
        return result
