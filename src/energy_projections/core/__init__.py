"""energy_projections.core — Foundation types, config, and exceptions."""

from energy_projections.core.commodities import (
    COMMODITIES,
    get_commodity,
    parse_commodity,
    valid_keys,
)
from energy_projections.core.config import (
    APIConfig,
    CacheConfig,
    ProjectionsConfig,
    ProvidersConfig,
    load_config,
)
from energy_projections.core.exceptions import (
    ConfigError,
    CredentialMissingError,
    EnergyProjectionsError,
    InvalidCommodityError,
    PriceUnavailableError,
    ProviderError,
)
from energy_projections.core.models import (
    AggregatedQuote,
    CommodityConfig,
    CommodityKey,
    PricePoint,
    Projection,
    ProjectionResult,
    ProviderName,
    Region,
    SeriesId,
    SourceLabel,
    UNKNOWN_DATE,
    parse_period,
)

__all__ = [
    # Type aliases
    "SeriesId",
    "SourceLabel",
    "UNKNOWN_DATE",
    # Enums
    "CommodityKey",
    "ProviderName",
    "Region",
    # Models
    "CommodityConfig",
    "PricePoint",
    "AggregatedQuote",
    "Projection",
    "ProjectionResult",
    "parse_period",
    # Commodity table
    "COMMODITIES",
    "get_commodity",
    "parse_commodity",
    "valid_keys",
    # Config
    "ProjectionsConfig",
    "ProvidersConfig",
    "CacheConfig",
    "APIConfig",
    "load_config",
    # Exceptions
    "EnergyProjectionsError",
    "ConfigError",
    "ProviderError",
    "CredentialMissingError",
    "InvalidCommodityError",
    "PriceUnavailableError",
]
