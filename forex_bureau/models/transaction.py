from __future__ import annotations

from datetime import date as date_type
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import TRANSACTION_STATUSES


class TransactionIn(BaseModel):
    """A completed (or pending) exchange as entered at the counter.

    `converted` is expected to be close to amount * rate; the ledger does not
    enforce it.
    """

    id: Optional[str] = None
    date: date_type
    time: Optional[str] = None
    customer: str = Field(..., min_length=1)
    from_currency: str
    to_currency: str
    amount: float = Field(..., gt=0)
    converted: float = Field(0, ge=0)
    rate: float = Field(..., gt=0)
    status: str = "completed"

    @field_validator("from_currency", "to_currency")
    @classmethod
    def valid_code(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("currency code must be 3 letters")
        return v

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str) -> str:
        if v not in TRANSACTION_STATUSES:
            raise ValueError("unsupported transaction status")
        return v


class TransactionPatch(BaseModel):
    date: Optional[date_type] = None
    time: Optional[str] = None
    customer: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    converted: Optional[float] = Field(None, ge=0)
    rate: Optional[float] = Field(None, gt=0)
    status: Optional[str] = None

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in TRANSACTION_STATUSES:
            raise ValueError("unsupported transaction status")
        return v
