from __future__ import annotations

from datetime import date, datetime, timezone
import logging
import math
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol

from forex_bureau.models.dashboard import DashboardSnapshot
from forex_bureau.models.rates import RateTable
from forex_bureau.services.ledgers import InventoryLedger, TransactionLedger
from forex_bureau.services.money import is_positive_number, to_number

"""Dashboard aggregation.

Combines both ledgers with one USD-anchored rate fetch:
    - transactions_today: rows whose ISO `date` string equals today's UTC date
    - active_customers: distinct `customer` values over all rows
    - total_revenue: per row, `converted` (USD) when it is a positive number,
      else `amount`, else 0
    - cash_on_hand: sum of amount / rates[code] (missing code -> parity);
      plain sum of amounts when the rate table is empty or there is no
      inventory

Each computation is a pure function over rows so it can be tested without
stores or HTTP.
"""

logger = logging.getLogger(__name__)

USD = "USD"


class SupportsFetchRates(Protocol):
    async def fetch_rates(self, base: Optional[str] = None) -> RateTable: ...


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def count_transactions_on(rows: Iterable[Mapping[str, Any]], day: date) -> int:
    iso = day.isoformat()
    return sum(1 for r in rows if r.get("date") == iso)


def count_active_customers(rows: Iterable[Mapping[str, Any]]) -> int:
    return len({r.get("customer") for r in rows})


def compute_total_revenue(rows: Iterable[Mapping[str, Any]]) -> float:
    total = 0.0
    for r in rows:
        converted = r.get("converted")
        if is_positive_number(converted):
            total += to_number(converted)
            continue
        amount = to_number(r.get("amount") or 0)
        total += 0.0 if math.isnan(amount) else amount
    return total


def _amount(item: Mapping[str, Any]) -> float:
    amount = to_number(item.get("amount") or 0)
    return 0.0 if math.isnan(amount) else amount


def compute_cash_on_hand(
    items: Iterable[Mapping[str, Any]], rates: Optional[Mapping[str, float]]
) -> float:
    """Inventory value in USD; ``rates`` must be USD-anchored (code per 1 USD)."""
    items = list(items)
    if not rates or not items:
        return sum(_amount(i) for i in items)
    total = 0.0
    for item in items:
        amount = _amount(item)
        rate = rates.get(str(item.get("code") or "").upper(), 1.0)
        total += amount / rate if rate else amount
    return total


async def compute_snapshot(
    transactions: TransactionLedger,
    inventory: InventoryLedger,
    rate_source: SupportsFetchRates,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Return ``{success: True, ...snapshot}`` or ``{success: False, error}``.

    Only a fault escaping the whole computation produces the failure shape;
    ledger read faults and rate fetch faults degrade instead.
    """
    try:
        today = today or today_utc()
        txns = transactions.list_transactions()
        items = inventory.list_items()

        rates: Optional[Mapping[str, float]] = None
        try:
            table = await rate_source.fetch_rates(USD)
            rates = table.rates
        except Exception:
            logger.warning("rate fetch for dashboard failed, summing raw amounts", exc_info=True)

        snapshot = DashboardSnapshot(
            total_revenue=compute_total_revenue(txns),
            transactions_today=count_transactions_on(txns, today),
            active_customers=count_active_customers(txns),
            cash_on_hand=compute_cash_on_hand(items, rates),
        )
    except Exception as e:
        logger.exception("dashboard aggregation failed")
        return {"success": False, "error": str(e)}
    return {
        "success": True,
        "total_revenue": snapshot.total_revenue,
        "transactions_today": snapshot.transactions_today,
        "active_customers": snapshot.active_customers,
        "cash_on_hand": snapshot.cash_on_hand,
    }
