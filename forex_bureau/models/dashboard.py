from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel


@dataclass(frozen=True)
class DashboardSnapshot:
    """Derived bureau statistics; recomputed per request, never stored."""

    total_revenue: float
    transactions_today: int
    active_customers: int
    cash_on_hand: float


class DashboardOut(BaseModel):
    success: bool = True
    total_revenue: float
    transactions_today: int
    active_customers: int
    cash_on_hand: float
