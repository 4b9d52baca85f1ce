"""Custom exception hierarchy for energy-projections."""

from typing import Any


class EnergyProjectionsError(Exception):
    """Base exception for all energy-projections errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(EnergyProjectionsError):
    """Invalid or missing configuration.

    Raised by load_config() during startup and by the projection calculator
    when a commodity constant is unusable. Should be treated as fatal.

    Context keys:
        field: str — the config field that failed validation
        value: Any — the invalid value (redacted for secrets)
    """


class ProviderError(EnergyProjectionsError):
    """An upstream price provider failed or returned unusable data.

    Policy: log at WARNING and treat the observation as absent. Never
    propagated past the adapter's public ``fetch``.

    Context keys:
        provider: str — "eia", "fred", "owid", or "yahoo"
        series: str — the series or symbol being fetched
        url: str | None — the URL that was being fetched
        status_code: int | None — HTTP status code if applicable
    """


class CredentialMissingError(ProviderError):
    """The provider needs an API key that is not configured.

    Policy: log at INFO and treat the observation as absent. No request is
    attempted.

    Context keys:
        provider: str — the provider lacking a credential
    """


class InvalidCommodityError(EnergyProjectionsError):
    """A commodity key outside the supported set was requested.

    Policy: reject the request (HTTP 400). Never substituted by a default.

    Context keys:
        commodity: str — the rejected key
        valid_keys: list[str] — the supported keys
    """


class PriceUnavailableError(EnergyProjectionsError):
    """A projection was requested before any price data was loaded.

    Context keys:
        commodity: str | None — the commodity being projected
        region: str | None — "us" or "world"
    """
