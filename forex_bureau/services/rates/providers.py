from __future__ import annotations

"""Concrete rate providers and the cascade factory.

Order matters: the keyed exchangerate-api v6 tier is preferred, then
Frankfurter (ECB reference rates, limited set), then the exchangerate-api v4
free tier (broader set). Each provider maps its own payload onto RawRates.
"""
from datetime import date, datetime, timezone
import logging
import math
from typing import Any, Dict, List, Mapping, Optional

import httpx

from forex_bureau.core.config import Settings
from forex_bureau.models.rates import (
    SOURCE_EXCHANGERATE_API_FREE,
    SOURCE_EXCHANGERATE_API_V6,
    SOURCE_FRANKFURTER,
)
from forex_bureau.services.http_client import HttpError, get_json
from .base import ProviderResult, RateProvider, RawRates

logger = logging.getLogger(__name__)

# Keys this short are placeholders (or unset) and the keyed tier is skipped.
MIN_API_KEY_LENGTH = 20


def api_key_configured(api_key: Optional[str]) -> bool:
    return bool(api_key) and len(api_key) > MIN_API_KEY_LENGTH  # type: ignore[arg-type]


def clean_rates(raw: Any) -> Dict[str, float]:
    """Keep only finite, positive numeric rates with upper-cased codes."""
    if not isinstance(raw, Mapping):
        return {}
    cleaned: Dict[str, float] = {}
    for code, value in raw.items():
        if isinstance(value, bool):
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(number) and number > 0:
            cleaned[str(code).upper()] = number
    return cleaned


def _parse_date(value: Any) -> Optional[date]:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _native_shape(payload: Dict[str, Any], base: str) -> Optional[RawRates]:
    """Map the common ``{base, date, rates}`` payload; None when unusable."""
    rates = clean_rates(payload.get("rates"))
    if not rates:
        return None
    return RawRates(
        base=str(payload.get("base") or base).upper(),
        date=_parse_date(payload.get("date")),
        rates=rates,
    )


class ExchangeRateApiV6Provider:
    """Keyed exchangerate-api.com v6 tier."""

    code = SOURCE_EXCHANGERATE_API_V6
    name = "ExchangeRate-API v6"

    def __init__(self, base_url: str, api_key: str, retries: int = 0):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._retries = retries

    @property
    def configured(self) -> bool:
        return api_key_configured(self._api_key)

    async def fetch(self, client: httpx.AsyncClient, base: str) -> ProviderResult:
        if not self.configured:
            return ProviderResult.failure(self.code, "api key not configured")
        url = f"{self._base_url}/{self._api_key}/latest/{base}"
        try:
            payload = await get_json(client, url, retries=self._retries)
        except HttpError as e:
            error_type = (e.payload or {}).get("error-type")
            if error_type == "invalid-key":
                logger.warning("exchangerate-api key rejected, using free providers")
                return ProviderResult.failure(self.code, "invalid-key")
            return ProviderResult.failure(self.code, str(e))
        if payload.get("result") != "success":
            return ProviderResult.failure(
                self.code, f"error payload: {payload.get('error-type', 'unknown')}"
            )
        rates = clean_rates(payload.get("conversion_rates"))
        if not rates:
            return ProviderResult.failure(self.code, "empty conversion_rates")
        updated = payload.get("time_last_update_unix")
        as_of: Optional[date] = None
        if isinstance(updated, (int, float)) and not isinstance(updated, bool):
            as_of = datetime.fromtimestamp(updated, tz=timezone.utc).date()
        return ProviderResult.success(
            self.code,
            RawRates(
                base=str(payload.get("base_code") or base).upper(),
                date=as_of,
                rates=rates,
            ),
        )


class _NativeShapeProvider:
    """Free providers that already answer with ``{base, date, rates}``."""

    code = ""
    name = ""

    def __init__(self, base_url: str, retries: int = 0):
        self._base_url = base_url.rstrip("/")
        self._retries = retries

    def _request(self, base: str) -> tuple[str, Optional[Dict[str, Any]]]:
        raise NotImplementedError

    async def fetch(self, client: httpx.AsyncClient, base: str) -> ProviderResult:
        url, params = self._request(base)
        try:
            payload = await get_json(client, url, params=params, retries=self._retries)
        except HttpError as e:
            return ProviderResult.failure(self.code, str(e))
        data = _native_shape(payload, base)
        if data is None:
            return ProviderResult.failure(self.code, "payload without usable rates")
        return ProviderResult.success(self.code, data)


class FrankfurterProvider(_NativeShapeProvider):
    code = SOURCE_FRANKFURTER
    name = "Frankfurter"

    def _request(self, base: str) -> tuple[str, Optional[Dict[str, Any]]]:
        return f"{self._base_url}/latest", {"from": base}


class ExchangeRateApiFreeProvider(_NativeShapeProvider):
    code = SOURCE_EXCHANGERATE_API_FREE
    name = "ExchangeRate-API free tier"

    def _request(self, base: str) -> tuple[str, Optional[Dict[str, Any]]]:
        return f"{self._base_url}/latest/{base}", None


def make_rate_providers(settings: Settings) -> List[RateProvider]:
    """Providers in cascade order."""
    return [
        ExchangeRateApiV6Provider(
            settings.exchangerate_api_v6_url,
            settings.exchangerate_api_key,
            retries=settings.http_retries,
        ),
        FrankfurterProvider(settings.frankfurter_url, retries=settings.http_retries),
        ExchangeRateApiFreeProvider(
            settings.exchangerate_api_free_url, retries=settings.http_retries
        ),
    ]
