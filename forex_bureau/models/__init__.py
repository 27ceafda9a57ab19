"""Pydantic and dataclass domain models for the forex bureau dashboard."""

from .constants import (
    CURRENCIES,
    CURRENCY_CATALOG,
    TRANSACTION_STATUSES,
    Currency,
)  # re-export
from .dashboard import DashboardOut, DashboardSnapshot
from .inventory import InventoryItemIn, InventoryItemOut, InventoryItemPatch
from .rates import RateTable, RateTableOut
from .transaction import TransactionIn, TransactionPatch

__all__ = [
    "CURRENCIES",
    "CURRENCY_CATALOG",
    "TRANSACTION_STATUSES",
    "Currency",
    "DashboardOut",
    "DashboardSnapshot",
    "InventoryItemIn",
    "InventoryItemOut",
    "InventoryItemPatch",
    "RateTable",
    "RateTableOut",
    "TransactionIn",
    "TransactionPatch",
]
