"""Source adapter protocol — the provider-agnostic interface layer.

Architecture
------------
Each upstream provider is wrapped by an adapter that normalizes its
response into the canonical ``PricePoint``:

    Provider API → SourceAdapter.fetch(series_id) → PricePoint | None → Aggregator

- **SourceAdapter** is the aggregator-facing protocol. The aggregator only
  depends on this interface and looks adapters up by provider name.

- ``fetch`` never raises. A missing credential, an outage, or a malformed
  payload all come back as ``None``; ``configured`` tells the caller which
  of the first case and the others applies.

Adding a provider = writing one adapter and registering it under a new
``ProviderName``; policies can then reference it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from energy_projections.core.models import PricePoint, ProviderName, SeriesId


@runtime_checkable
class SourceAdapter(Protocol):
    """Normalizes one provider's newest observation into a PricePoint."""

    @property
    def provider(self) -> ProviderName: ...

    @property
    def label(self) -> str:
        """Human-readable source label stamped on PricePoints."""
        ...

    @property
    def configured(self) -> bool:
        """False when a required credential is missing."""
        ...

    async def fetch(self, series_id: SeriesId) -> PricePoint | None:
        """Return the newest observation for ``series_id``, or None."""
        ...
