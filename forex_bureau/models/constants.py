"""Domain constants: the static currency catalog and ledger enumerations.

The catalog is a fixed code -> display name/region table used to label
inventory rows and rate board entries. Codes outside it are still accepted
by the ledgers; the catalog is informational.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    region: str


_CATALOG_ROWS = (
    # Major currencies
    ("USD", "US Dollar", "Americas"),
    ("EUR", "Euro", "Europe"),
    ("GBP", "British Pound", "Europe"),
    ("JPY", "Japanese Yen", "Asia"),
    ("CHF", "Swiss Franc", "Europe"),
    ("CAD", "Canadian Dollar", "Americas"),
    ("AUD", "Australian Dollar", "Oceania"),
    ("CNY", "Chinese Yuan", "Asia"),
    # African currencies
    ("ZAR", "South African Rand", "Africa"),
    ("NGN", "Nigerian Naira", "Africa"),
    ("KES", "Kenyan Shilling", "Africa"),
    ("GHS", "Ghanaian Cedi", "Africa"),
    ("UGX", "Ugandan Shilling", "Africa"),
    ("TZS", "Tanzanian Shilling", "Africa"),
    ("EGP", "Egyptian Pound", "Africa"),
    ("MAD", "Moroccan Dirham", "Africa"),
    ("XOF", "West African CFA Franc", "Africa"),
    ("XAF", "Central African CFA Franc", "Africa"),
    ("ETB", "Ethiopian Birr", "Africa"),
    ("ZMW", "Zambian Kwacha", "Africa"),
    ("BWP", "Botswana Pula", "Africa"),
    ("MUR", "Mauritian Rupee", "Africa"),
    ("NAD", "Namibian Dollar", "Africa"),
    ("RWF", "Rwandan Franc", "Africa"),
    # Other popular currencies
    ("INR", "Indian Rupee", "Asia"),
    ("BRL", "Brazilian Real", "Americas"),
    ("MXN", "Mexican Peso", "Americas"),
    ("SGD", "Singapore Dollar", "Asia"),
    ("HKD", "Hong Kong Dollar", "Asia"),
    ("NZD", "New Zealand Dollar", "Oceania"),
    ("SEK", "Swedish Krona", "Europe"),
    ("NOK", "Norwegian Krone", "Europe"),
    ("DKK", "Danish Krone", "Europe"),
    ("PLN", "Polish Zloty", "Europe"),
    ("THB", "Thai Baht", "Asia"),
    ("MYR", "Malaysian Ringgit", "Asia"),
    ("IDR", "Indonesian Rupiah", "Asia"),
    ("PHP", "Philippine Peso", "Asia"),
    ("AED", "UAE Dirham", "Middle East"),
    ("SAR", "Saudi Riyal", "Middle East"),
)

CURRENCY_CATALOG: Dict[str, Currency] = {
    code: Currency(code=code, name=name, region=region)
    for code, name, region in _CATALOG_ROWS
}
CURRENCIES: Set[str] = set(CURRENCY_CATALOG)

TRANSACTION_STATUSES: Set[str] = {"completed", "pending", "cancelled"}

# Entity names understood by the stores
INVENTORY = "inventory"
TRANSACTIONS = "transactions"


def get_currency(code: str) -> Optional[Currency]:
    return CURRENCY_CATALOG.get(code.upper())


def currencies_by_region(region: str) -> List[Currency]:
    return [c for c in CURRENCY_CATALOG.values() if c.region == region]


def list_currencies() -> List[Currency]:
    return list(CURRENCY_CATALOG.values())


def display_name(code: str) -> str:
    """Catalog name for code, or the code itself when uncatalogued."""
    currency = get_currency(code)
    return currency.name if currency else code.upper()
