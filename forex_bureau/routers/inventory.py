from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from forex_bureau.core.deps import get_inventory_ledger, require_user
from forex_bureau.models.inventory import (
    InventoryItemIn,
    InventoryItemOut,
    InventoryItemPatch,
)
from forex_bureau.services.auth import AuthStatus
from forex_bureau.services.ledgers import InventoryLedger

router = APIRouter(prefix="/inventory", tags=["inventory"])


class InventoryListOut(BaseModel):
    success: bool = True
    items: List[InventoryItemOut]


class InventoryItemEnvelope(BaseModel):
    success: bool = True
    item: InventoryItemOut


@router.get("", response_model=InventoryListOut, summary="List cash inventory")
async def list_inventory(ledger: InventoryLedger = Depends(get_inventory_ledger)):
    return InventoryListOut(
        items=[InventoryItemOut.from_row(r) for r in ledger.list_items()]
    )


@router.get(
    "/low-stock",
    response_model=InventoryListOut,
    summary="Currencies below their low-stock threshold",
)
async def low_stock(ledger: InventoryLedger = Depends(get_inventory_ledger)):
    return InventoryListOut(items=[InventoryItemOut.from_row(r) for r in ledger.low_stock()])


@router.post("", response_model=InventoryItemEnvelope, status_code=201, summary="Add a currency")
async def add_item(
    payload: InventoryItemIn,
    _: AuthStatus = Depends(require_user),
    ledger: InventoryLedger = Depends(get_inventory_ledger),
):
    return InventoryItemEnvelope(item=InventoryItemOut.from_row(ledger.add_item(payload)))


@router.put("/{code}", response_model=InventoryItemEnvelope, summary="Update a currency balance")
async def update_item(
    code: str,
    payload: InventoryItemPatch,
    _: AuthStatus = Depends(require_user),
    ledger: InventoryLedger = Depends(get_inventory_ledger),
):
    return InventoryItemEnvelope(
        item=InventoryItemOut.from_row(ledger.update_item(code, payload))
    )


@router.delete("/{code}", response_model=InventoryItemEnvelope, summary="Remove a currency")
async def delete_item(
    code: str,
    _: AuthStatus = Depends(require_user),
    ledger: InventoryLedger = Depends(get_inventory_ledger),
):
    return InventoryItemEnvelope(item=InventoryItemOut.from_row(ledger.remove_item(code)))
