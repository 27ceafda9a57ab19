from __future__ import annotations

"""Rate provider contract.

A provider is a strategy with a short ``code`` (its provenance tag), a human
``name`` and an async ``fetch``. Expected unavailability (missing key, HTTP
failure, error payload) comes back as a failed ``ProviderResult`` rather than
an exception, so the cascade is a plain loop over results.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Protocol

import httpx


@dataclass(frozen=True)
class RawRates:
    """A provider payload normalized to one shape, before table construction."""

    base: str
    date: Optional[date]
    rates: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ProviderResult:
    source: str
    data: Optional[RawRates] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.data is not None

    @classmethod
    def success(cls, source: str, data: RawRates) -> "ProviderResult":
        return cls(source=source, data=data)

    @classmethod
    def failure(cls, source: str, reason: str) -> "ProviderResult":
        return cls(source=source, reason=reason)


class RateProvider(Protocol):
    code: str
    name: str

    async def fetch(self, client: httpx.AsyncClient, base: str) -> ProviderResult:
        """Return the latest rates for ``base`` or a failure with a reason."""
        ...
