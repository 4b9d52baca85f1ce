"""Shared HTTP plumbing for source adapters.

``HTTPSourceAdapter`` implements the cache-check / credential-check /
fetch / normalize / cache-store sequence once. Concrete adapters supply the
request (``_build_request``) and the response parser (``_parse``); both may
raise freely, and every failure is folded into ``ProviderError`` before
``fetch`` logs it and returns None.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

import httpx
from aiolimiter import AsyncLimiter

from energy_projections.core.exceptions import CredentialMissingError, ProviderError
from energy_projections.core.models import PricePoint, ProviderName, SeriesId
from energy_projections.prices.cache import TTLCache

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_RATE_LIMIT = 5

# Errors a parser raises on a payload that does not have the expected shape
# (including numbers too large for a float).
MALFORMED_PAYLOAD_ERRORS = (
    KeyError,
    IndexError,
    TypeError,
    ValueError,
    AttributeError,
    ArithmeticError,
)


@dataclass(frozen=True)
class ProviderRequest:
    """A single GET against a provider's read endpoint."""

    url: str
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


class HTTPSourceAdapter(ABC):
    """Base class for adapters backed by one JSON-over-HTTP endpoint.

    Parameters
    ----------
    cache : TTLCache
        Shared response cache. Keys are scoped by provider and series.
    api_key : str | None
        Provider credential. Required only when ``requires_credential``.
    timeout : float
        Per-request timeout in seconds; a timeout counts as a failure.
    rate_limit : int
        Maximum requests per second issued by this adapter.
    client : httpx.AsyncClient | None
        Shared client owned by the caller. When None, a short-lived client
        is opened per request.
    """

    provider: ClassVar[ProviderName]
    label: ClassVar[str]
    requires_credential: ClassVar[bool] = False

    def __init__(
        self,
        cache: TTLCache,
        *,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        rate_limit: int = DEFAULT_RATE_LIMIT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._cache = cache
        self._api_key = api_key
        self._timeout = timeout
        self._client = client
        self._limiter = AsyncLimiter(max_rate=rate_limit, time_period=1.0)

    @property
    def configured(self) -> bool:
        return not self.requires_credential or bool(self._api_key)

    def cache_key(self, series_id: SeriesId) -> str:
        return f"{self.provider.value}_{series_id}"

    async def fetch(self, series_id: SeriesId) -> PricePoint | None:
        """Return the newest observation for ``series_id``, or None.

        Never raises: missing credentials are logged at INFO, provider
        failures at WARNING.
        """
        try:
            self._credential()
        except CredentialMissingError:
            logger.info(
                "%s API key not configured, skipping %s (fallback data will be used)",
                self.label,
                series_id,
            )
            return None

        key = self.cache_key(series_id)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        try:
            point = await self._fetch_point(series_id)
        except ProviderError as e:
            logger.warning("%s unavailable for %s: %s", self.label, series_id, e)
            return None
        except Exception as e:
            logger.warning(
                "%s unavailable for %s: unexpected %s: %s",
                self.label, series_id, type(e).__name__, e,
            )
            return None

        self._cache.put(key, point)
        return point

    async def _fetch_point(self, series_id: SeriesId) -> PricePoint:
        request = self._build_request(series_id)
        data = await self._get_json(request, series_id)
        return self._parse_safely(data, series_id)

    def _parse_safely(self, data: Any, series_id: SeriesId) -> PricePoint:
        try:
            return self._parse(data, series_id)
        except ProviderError:
            raise
        except MALFORMED_PAYLOAD_ERRORS as e:
            raise ProviderError(
                f"Malformed {self.label} response: {e}",
                context={"provider": self.provider.value, "series": series_id},
            ) from e

    @abstractmethod
    def _build_request(self, series_id: SeriesId) -> ProviderRequest:
        """Describe the GET for ``series_id``. Raise ProviderError if unsupported."""

    @abstractmethod
    def _parse(self, data: Any, series_id: SeriesId) -> PricePoint:
        """Extract the newest single observation from a decoded response."""

    def _credential(self) -> str | None:
        """Return the API key, raising if one is required but absent."""
        if self.requires_credential and not self._api_key:
            raise CredentialMissingError(
                f"{self.label} API key not configured",
                context={"provider": self.provider.value},
            )
        return self._api_key

    def _empty(self, series_id: SeriesId) -> ProviderError:
        return ProviderError(
            f"{self.label} returned no observations",
            context={"provider": self.provider.value, "series": series_id},
        )

    async def _get_json(self, request: ProviderRequest, series_id: SeriesId) -> Any:
        """Issue one rate-limited GET and decode the JSON body."""
        context = {
            "provider": self.provider.value,
            "series": series_id,
            "url": request.url,
        }
        await self._limiter.acquire()
        try:
            if self._client is not None:
                resp = await self._client.get(
                    request.url,
                    params=request.params,
                    headers=request.headers,
                    timeout=self._timeout,
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.get(
                        request.url,
                        params=request.params,
                        headers=request.headers,
                    )
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"HTTP {e.response.status_code} from {request.url}",
                context={**context, "status_code": e.response.status_code},
            ) from e
        except httpx.TimeoutException as e:
            raise ProviderError(
                f"Timed out after {self._timeout}s: {request.url}", context=context
            ) from e
        except httpx.InvalidURL as e:
            raise ProviderError(f"Invalid URL: {e}", context=context) from e
        except httpx.RequestError as e:
            raise ProviderError(
                f"Request failed: {type(e).__name__}", context=context
            ) from e
        except ValueError as e:
            raise ProviderError(
                f"Invalid JSON from {request.url}", context=context
            ) from e


def positive_float(raw: Any) -> float:
    """Coerce a provider value to a positive finite float or raise ValueError."""
    if raw is None or isinstance(raw, bool):
        raise ValueError(f"missing numeric value: {raw!r}")
    value = float(raw)
    if math.isnan(value) or math.isinf(value) or value <= 0:
        raise ValueError(f"non-positive or non-finite value: {raw!r}")
    return value
