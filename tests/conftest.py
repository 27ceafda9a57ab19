from __future__ import annotations

from typing import Callable, Dict, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from forex_bureau.core.config import Settings
from forex_bureau.db.store import MemoryStore
from forex_bureau.main import create_app
from forex_bureau.services.rates.pipeline import RatePipeline

V6_HOST = "v6.exchangerate-api.com"
FRANKFURTER_HOST = "api.frankfurter.app"
FREE_HOST = "api.exchangerate-api.com"

GOOD_KEY = "k" * 24


def make_settings(**overrides) -> Settings:
    values = dict(exchangerate_api_key="", auth_tokens=[], http_retries=0)
    values.update(overrides)
    settings = Settings(_env_file=None, **values)
    settings.init_post_load()
    return settings


def v6_payload(base: str = "USD", rates: Optional[Dict[str, float]] = None) -> dict:
    return {
        "result": "success",
        "base_code": base,
        "time_last_update_unix": 1735689600,  # 2025-01-01T00:00:00Z
        "conversion_rates": rates or {"USD": 1, "EUR": 0.91, "GBP": 0.78},
    }


def native_payload(base: str = "USD", rates: Optional[Dict[str, float]] = None) -> dict:
    return {"base": base, "date": "2025-02-03", "rates": rates or {"EUR": 0.93, "JPY": 150.1}}


class Upstream:
    """Scriptable stand-in for the three rate APIs.

    ``responses`` maps host -> handler(request) returning an httpx.Response;
    unknown hosts answer 503. Every request is recorded in ``calls``.
    """

    def __init__(self):
        self.responses: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.calls: list[httpx.Request] = []

    def json(self, host: str, payload: dict, status: int = 200) -> None:
        self.responses[host] = lambda request: httpx.Response(status, json=payload)

    def fail(self, host: str, exc: type[Exception] = httpx.ConnectError) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc("boom", request=request)

        self.responses[host] = handler

    def hosts_called(self) -> list[str]:
        return [r.url.host for r in self.calls]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self.responses.get(request.url.host)
        if handler is None:
            return httpx.Response(503, json={"error": "unavailable"})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def pipeline_factory(upstream: Upstream):
    def build(**overrides) -> RatePipeline:
        return RatePipeline.from_settings(make_settings(**overrides), transport=upstream.transport)

    return build


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def client_factory(upstream: Upstream, store: MemoryStore):
    def build(**overrides) -> TestClient:
        settings = make_settings(**overrides)
        app = create_app(
            settings,
            store=store,
            rate_pipeline=RatePipeline.from_settings(settings, transport=upstream.transport),
        )
        return TestClient(app)

    return build


@pytest.fixture
def client(client_factory) -> TestClient:
    return client_factory()
