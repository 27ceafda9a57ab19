from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import httpx
import pytest

from conftest import FREE_HOST, FRANKFURTER_HOST, GOOD_KEY, V6_HOST, native_payload, v6_payload
from forex_bureau.services.rates.base import ProviderResult, RawRates
from forex_bureau.services.rates.cache_service import RateTableCache
from forex_bureau.services.rates.pipeline import RatePipeline


class _ExplodingProvider:
    code = "exploding"
    name = "Exploding"

    async def fetch(self, client: httpx.AsyncClient, base: str) -> ProviderResult:
        raise RuntimeError("unexpected")


class _StaticProvider:
    def __init__(self, code: str, base: str, rates):
        self.code = code
        self.name = code
        self._data = RawRates(base=base, date=None, rates=rates)
        self.calls = 0

    async def fetch(self, client: httpx.AsyncClient, base: str) -> ProviderResult:
        self.calls += 1
        return ProviderResult.success(self.code, self._data)


@pytest.mark.asyncio
async def test_keyed_provider_wins_when_configured(upstream, pipeline_factory) -> None:
    upstream.json(V6_HOST, v6_payload())
    upstream.json(FRANKFURTER_HOST, native_payload())

    table = await pipeline_factory(exchangerate_api_key=GOOD_KEY).fetch_rates("USD")

    assert table.source == "exchangerate-api-v6"
    assert table.date == date(2025, 1, 1)
    assert table.needs_api_key is False
    assert upstream.hosts_called() == [V6_HOST]


@pytest.mark.asyncio
async def test_short_key_skips_keyed_provider(upstream, pipeline_factory) -> None:
    upstream.json(V6_HOST, v6_payload())
    upstream.json(FRANKFURTER_HOST, native_payload())

    table = await pipeline_factory(exchangerate_api_key="placeholder").fetch_rates("USD")

    assert table.source == "frankfurter"
    assert table.needs_api_key is True
    assert V6_HOST not in upstream.hosts_called()


@pytest.mark.asyncio
async def test_cascade_moves_on_in_order(upstream, pipeline_factory) -> None:
    upstream.json(V6_HOST, {"result": "error", "error-type": "invalid-key"}, status=403)
    upstream.fail(FRANKFURTER_HOST, httpx.ReadTimeout)
    upstream.json(FREE_HOST, native_payload(rates={"EUR": 0.9, "USD": 7}))

    table = await pipeline_factory(exchangerate_api_key=GOOD_KEY).fetch_rates("usd")

    assert upstream.hosts_called() == [V6_HOST, FRANKFURTER_HOST, FREE_HOST]
    assert table.source == "exchangerate-api-free"
    assert table.base == "USD"
    # self rate from the provider is overwritten
    assert table.rates["USD"] == 1.0
    assert table.rates["EUR"] == 0.9


@pytest.mark.asyncio
async def test_defaults_to_usd(upstream, pipeline_factory) -> None:
    upstream.json(FRANKFURTER_HOST, native_payload())

    table = await pipeline_factory().fetch_rates()

    assert table.base == "USD"
    assert upstream.calls[0].url.params["from"] == "USD"


@pytest.mark.asyncio
@pytest.mark.parametrize("base", ["USD", "EUR", "GBP", "KES", "XYZ"])
async def test_all_providers_down_uses_fallback(upstream, pipeline_factory, base) -> None:
    table = await pipeline_factory(exchangerate_api_key=GOOD_KEY).fetch_rates(base)

    assert table.source == "fallback"
    assert table.base == base
    assert table.rates[base] == 1.0
    assert table.needs_api_key is True
    assert table.date == datetime.now(timezone.utc).date()
    assert all(v > 0 for v in table.rates.values())


@pytest.mark.asyncio
async def test_unknown_base_fallback_does_not_leak_into_usd(upstream, pipeline_factory) -> None:
    pipeline = pipeline_factory()

    odd = await pipeline.fetch_rates("QQQ")
    usd = await pipeline.fetch_rates("USD")

    assert odd.source == usd.source == "fallback"
    assert odd.rates["QQQ"] == 1.0
    assert "QQQ" not in usd.rates
    assert usd.rates["EUR"] == 0.92


@pytest.mark.asyncio
async def test_unexpected_fault_is_tagged_fallback_error() -> None:
    pipeline = RatePipeline([_ExplodingProvider()], transport=httpx.MockTransport(lambda r: httpx.Response(500)))

    table = await pipeline.fetch_rates("EUR")

    assert table.source == "fallback-error"
    assert table.rates["EUR"] == 1.0
    assert table.rates["USD"] == 1.09


@pytest.mark.asyncio
async def test_provider_answering_for_other_base_is_skipped() -> None:
    wrong = _StaticProvider("wrong", "EUR", {"USD": 1.1})
    right = _StaticProvider("right", "USD", {"EUR": 0.9})
    pipeline = RatePipeline([wrong, right], transport=httpx.MockTransport(lambda r: httpx.Response(500)))

    table = await pipeline.fetch_rates("USD")

    assert table.source == "right"
    assert wrong.calls == 1


@pytest.mark.asyncio
async def test_cache_serves_within_ttl_and_refetches_after() -> None:
    now = [datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)]
    cache = RateTableCache(ttl_seconds=300, clock=lambda: now[0])
    provider = _StaticProvider("static", "USD", {"EUR": 0.9})
    pipeline = RatePipeline([provider], cache=cache, transport=httpx.MockTransport(lambda r: httpx.Response(500)))

    first = await pipeline.fetch_rates("USD")
    second = await pipeline.fetch_rates("USD")
    assert second is first
    assert provider.calls == 1

    now[0] += timedelta(seconds=301)
    third = await pipeline.fetch_rates("USD")
    assert third is not first
    assert provider.calls == 2


@pytest.mark.asyncio
async def test_fallback_answers_are_not_cached(upstream, pipeline_factory) -> None:
    pipeline = pipeline_factory(rates_cache_ttl_seconds=300)

    first = await pipeline.fetch_rates("USD")
    assert first.source == "fallback"

    upstream.json(FRANKFURTER_HOST, native_payload())
    second = await pipeline.fetch_rates("USD")
    assert second.source == "frankfurter"
