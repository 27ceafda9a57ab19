from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from forex_bureau.core.deps import get_transaction_ledger, require_user
from forex_bureau.models.transaction import TransactionIn, TransactionPatch
from forex_bureau.services.auth import AuthStatus
from forex_bureau.services.ledgers import TransactionLedger

router = APIRouter(prefix="/transactions", tags=["transactions"])


class TransactionListOut(BaseModel):
    success: bool = True
    items: List[Dict[str, Any]]


class TransactionEnvelope(BaseModel):
    success: bool = True
    item: Dict[str, Any]


@router.get("", response_model=TransactionListOut, summary="List transactions, newest first")
async def list_transactions(
    status: Optional[str] = Query(None, description="Filter by status"),
    customer: Optional[str] = Query(None, description="Case-insensitive customer match"),
    ledger: TransactionLedger = Depends(get_transaction_ledger),
):
    rows = ledger.list_transactions()
    if status:
        rows = [r for r in rows if r.get("status") == status]
    if customer:
        needle = customer.lower()
        rows = [r for r in rows if needle in str(r.get("customer") or "").lower()]
    return TransactionListOut(items=rows)


@router.post("", response_model=TransactionEnvelope, status_code=201, summary="Record an exchange")
async def record_transaction(
    payload: TransactionIn,
    _: AuthStatus = Depends(require_user),
    ledger: TransactionLedger = Depends(get_transaction_ledger),
):
    return TransactionEnvelope(item=ledger.record(payload))


@router.put("/{txn_id}", response_model=TransactionEnvelope, summary="Update a transaction")
async def update_transaction(
    txn_id: str,
    payload: TransactionPatch,
    _: AuthStatus = Depends(require_user),
    ledger: TransactionLedger = Depends(get_transaction_ledger),
):
    return TransactionEnvelope(item=ledger.update(txn_id, payload))


@router.delete("/{txn_id}", response_model=TransactionEnvelope, summary="Delete a transaction")
async def delete_transaction(
    txn_id: str,
    _: AuthStatus = Depends(require_user),
    ledger: TransactionLedger = Depends(get_transaction_ledger),
):
    return TransactionEnvelope(item=ledger.remove(txn_id))
