from __future__ import annotations

import math
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from forex_bureau.services.money import to_number


def _upper_code(v: str) -> str:
    v = v.strip().upper()
    if len(v) != 3 or not v.isalpha():
        raise ValueError("currency code must be 3 letters")
    return v


def _stored_number(value: Any) -> float:
    number = to_number(value)
    return number if math.isfinite(number) else 0.0


class InventoryItemIn(BaseModel):
    code: str = Field(..., description="3-letter currency code, unique in the ledger")
    name: str = Field("", description="Display name (catalog name when blank)")
    amount: float = Field(0, ge=0, description="Cash on hand in units of code")
    threshold: float = Field(0, ge=0, description="Low-stock threshold")

    @field_validator("code")
    @classmethod
    def valid_code(cls, v: str) -> str:
        return _upper_code(v)


class InventoryItemPatch(BaseModel):
    name: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
    threshold: Optional[float] = Field(None, ge=0)


class InventoryItemOut(BaseModel):
    code: str
    name: str
    amount: float
    threshold: float
    low_stock: bool
    percent_of_threshold: float

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "InventoryItemOut":
        amount = _stored_number(row.get("amount"))
        threshold = _stored_number(row.get("threshold"))
        if threshold > 0:
            percent = round(amount / threshold * 100, 2)
        else:
            percent = 0.0
        return cls(
            code=row["code"],
            name=row.get("name") or row["code"],
            amount=amount,
            threshold=threshold,
            low_stock=amount < threshold,
            percent_of_threshold=percent,
        )
