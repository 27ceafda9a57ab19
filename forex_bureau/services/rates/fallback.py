from __future__ import annotations

"""Static rate tables used when every live provider fails.

Two anchors are kept (USD and EUR). Any other base is derived by re-basing
the USD table, which only works for currencies that table lists; an unknown
base comes back USD-anchored apart from its own self-rate of 1.
"""
from types import MappingProxyType
from typing import Dict, Mapping

from .conversion import rebase

_FALLBACK_ROWS: Dict[str, Dict[str, float]] = {
    "USD": {
        "EUR": 0.92,
        "GBP": 0.79,
        "NGN": 1650.0,
        "ZAR": 18.5,
        "KES": 129.0,
        "GHS": 15.8,
        "UGX": 3700.0,
        "TZS": 2500.0,
        "EGP": 49.5,
        "MAD": 10.2,
        "XOF": 605.0,
        "XAF": 605.0,
        "ETB": 125.0,
        "MUR": 46.5,
        "ZMW": 27.5,
        "BWP": 13.8,
        "JPY": 149.5,
        "CNY": 7.24,
        "INR": 83.2,
        "AUD": 1.52,
        "CAD": 1.36,
    },
    "EUR": {
        "USD": 1.09,
        "GBP": 0.86,
        "NGN": 1793.0,
        "ZAR": 20.1,
        "KES": 140.0,
        "GHS": 17.2,
        "UGX": 4020.0,
        "TZS": 2715.0,
        "EGP": 53.8,
        "MAD": 11.1,
        "XOF": 656.0,
        "XAF": 656.0,
        "ETB": 136.0,
        "MUR": 50.5,
        "ZMW": 29.9,
        "BWP": 15.0,
        "JPY": 162.5,
        "CNY": 7.87,
        "INR": 90.4,
        "AUD": 1.65,
        "CAD": 1.48,
    },
}

# Read-only views; fallback_rates hands out copies.
FALLBACK_RATES: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {code: MappingProxyType(table) for code, table in _FALLBACK_ROWS.items()}
)


def fallback_rates(base: str) -> Dict[str, float]:
    base = base.upper()
    if base in FALLBACK_RATES:
        rates = dict(FALLBACK_RATES[base])
    else:
        rates = dict(rebase(FALLBACK_RATES["USD"], "USD", base))
    rates[base] = 1.0
    return rates
