from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

from forex_bureau.models.constants import display_name
from forex_bureau.models.rates import RateTable
from forex_bureau.services.money import round2, round4

"""Pure rate arithmetic: re-basing, the counter calculator and buy/sell quotes.

Rate tables read "units of code per 1 base". Nothing here performs I/O;
callers hand in a RateTable obtained from the pipeline.
"""


def rebase(
    rates: Mapping[str, float], old_base: str, new_base: str
) -> Mapping[str, float]:
    """Re-anchor ``rates`` from ``old_base`` to ``new_base``.

    Each rate is divided by ``rates[new_base]`` (the old-base price of the
    new base). When that pivot is missing or zero the input is returned
    unconverted; callers must cope with the anchor mismatch.
    """
    if old_base == new_base:
        return rates
    pivot = rates.get(new_base)
    if not pivot:
        return rates
    converted: Dict[str, float] = {c: r / pivot for c, r in rates.items()}
    converted[old_base] = 1 / pivot
    converted[new_base] = 1.0
    return converted


@dataclass(frozen=True)
class ConversionResult:
    amount: float
    from_currency: str
    to_currency: str
    rate: float
    converted: float
    source: str


def convert_amount(amount: float, to_currency: str, table: RateTable) -> ConversionResult:
    """Convert ``amount`` of ``table.base`` into ``to_currency``.

    Unknown target codes convert at parity, as the counter calculator does.
    """
    to_currency = to_currency.upper()
    rate = table.rates.get(to_currency, 1.0)
    return ConversionResult(
        amount=amount,
        from_currency=table.base,
        to_currency=to_currency,
        rate=round4(rate),
        converted=round2(amount * rate),
        source=table.source,
    )


@dataclass(frozen=True)
class Quote:
    code: str
    name: str
    rate: float
    buy: str
    sell: str


def build_quotes(table: RateTable, codes: Iterable[str], spread: float) -> List[Quote]:
    """Buy/sell quotes around the mid rate for each listed code the table has."""
    quotes: List[Quote] = []
    for code in codes:
        rate = table.rates.get(code)
        if not rate or code == table.base:
            continue
        quotes.append(
            Quote(
                code=code,
                name=display_name(code),
                rate=rate,
                buy=f"{rate * (1 - spread):.4f}",
                sell=f"{rate * (1 + spread):.4f}",
            )
        )
    return quotes
