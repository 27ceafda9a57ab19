from __future__ import annotations

"""Rate acquisition pipeline.

``RatePipeline.fetch_rates(base)`` walks the provider cascade in order and
stops at the first success. When every provider declines it answers from the
static fallback tables; when something unexpected blows up anywhere in the
run it still answers from the fallback tables, tagged ``fallback-error``.
The call never raises to its caller.

Providers are called one after another (no fan-out) so quota/price priority
is honoured; each call is bounded by the client timeout. Live results are
cached per base for the configured TTL, fallback answers are not, so a
recovered provider is picked up on the next request.
"""
from datetime import datetime, timezone
import logging
from typing import Optional, Sequence

import httpx

from forex_bureau.core.config import Settings
from forex_bureau.models.rates import (
    SOURCE_FALLBACK,
    SOURCE_FALLBACK_ERROR,
    RateTable,
)
from forex_bureau.services.http_client import make_client
from .base import ProviderResult, RateProvider
from .cache_service import RateTableCache
from .fallback import fallback_rates
from .providers import api_key_configured, make_rate_providers

logger = logging.getLogger(__name__)

DEFAULT_BASE = "USD"


class RatePipeline:
    def __init__(
        self,
        providers: Sequence[RateProvider],
        *,
        api_key: Optional[str] = None,
        timeout: float = 5.0,
        cache: Optional[RateTableCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._providers = list(providers)
        self._needs_api_key = not api_key_configured(api_key)
        self._timeout = timeout
        self._cache = cache or RateTableCache(ttl_seconds=0)
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RatePipeline":
        return cls(
            make_rate_providers(settings),
            api_key=settings.exchangerate_api_key,
            timeout=settings.http_timeout_seconds,
            cache=RateTableCache(settings.rates_cache_ttl_seconds),
            transport=transport,
        )

    # Internal --------------------------------------------------
    async def _cascade(self, base: str) -> Optional[ProviderResult]:
        async with make_client(self._timeout, self._transport) as client:
            for provider in self._providers:
                result = await provider.fetch(client, base)
                if result.data is None:
                    logger.info(
                        "rate provider unavailable, trying next",
                        extra={"provider": provider.code, "reason": result.reason},
                    )
                    continue
                if result.data.base != base:
                    logger.warning(
                        "provider answered for a different base",
                        extra={"provider": provider.code, "base": base},
                    )
                    continue
                return result
        return None

    def _fallback(self, base: str, source: str) -> RateTable:
        now = datetime.now(timezone.utc)
        return RateTable(
            base=base,
            date=now.date(),
            rates=fallback_rates(base),
            source=source,
            timestamp=now,
            needs_api_key=True,
        )

    # Public API -----------------------------------------------
    async def fetch_rates(self, base: Optional[str] = None) -> RateTable:
        base = (base or DEFAULT_BASE).strip().upper() or DEFAULT_BASE
        try:
            cached = self._cache.get(base)
            if cached is not None:
                return cached
            result = await self._cascade(base)
            if result is None or result.data is None:
                logger.warning("all rate providers failed, using fallback rates")
                return self._fallback(base, SOURCE_FALLBACK)
            now = datetime.now(timezone.utc)
            table = RateTable(
                base=base,
                date=result.data.date or now.date(),
                rates=result.data.rates,
                source=result.source,
                timestamp=now,
                needs_api_key=self._needs_api_key,
            )
            self._cache.purge_expired()
            self._cache.put(table)
            return table
        except Exception:
            logger.exception("rate acquisition failed unexpectedly")
            return self._fallback(base, SOURCE_FALLBACK_ERROR)
