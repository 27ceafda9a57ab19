from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, date as date_type, datetime, timezone
from types import MappingProxyType
from typing import Dict, List, Mapping

from pydantic import BaseModel

# Provenance tags, one per cascade step
SOURCE_EXCHANGERATE_API_V6 = "exchangerate-api-v6"
SOURCE_FRANKFURTER = "frankfurter"
SOURCE_EXCHANGERATE_API_FREE = "exchangerate-api-free"
SOURCE_FALLBACK = "fallback"
SOURCE_FALLBACK_ERROR = "fallback-error"

FALLBACK_SOURCES = frozenset({SOURCE_FALLBACK, SOURCE_FALLBACK_ERROR})


@dataclass(frozen=True)
class RateTable:
    """Rates anchored at `base`: rates[code] is units of code per 1 base.

    Built once per acquisition and never mutated; `rates` is exposed as a
    read-only mapping and always holds rates[base] == 1.
    """

    base: str
    date: date
    rates: Mapping[str, float]
    source: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    needs_api_key: bool = True

    def __post_init__(self) -> None:
        frozen = dict(self.rates)
        frozen[self.base] = 1.0
        object.__setattr__(self, "rates", MappingProxyType(frozen))

    @property
    def is_fallback(self) -> bool:
        return self.source in FALLBACK_SOURCES


class RateTableOut(BaseModel):
    success: bool = True
    base: str
    date: date_type
    rates: Dict[str, float]
    timestamp: datetime
    source: str
    needs_api_key: bool

    @classmethod
    def from_table(cls, table: RateTable) -> "RateTableOut":
        return cls(
            base=table.base,
            date=table.date,
            rates=dict(table.rates),
            timestamp=table.timestamp,
            source=table.source,
            needs_api_key=table.needs_api_key,
        )


class RateQuote(BaseModel):
    code: str
    name: str
    rate: float
    buy: str
    sell: str


class RateBoardOut(BaseModel):
    base: str
    source: str
    using_fallback: bool
    updated_at: datetime
    quotes: List[RateQuote]


class ConversionOut(BaseModel):
    amount: float
    from_currency: str
    to_currency: str
    rate: float
    converted: float
    source: str
