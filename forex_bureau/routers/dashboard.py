from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette import status

from forex_bureau.core.deps import (
    get_inventory_ledger,
    get_pipeline,
    get_transaction_ledger,
)
from forex_bureau.models.dashboard import DashboardOut
from forex_bureau.services.dashboard import compute_snapshot
from forex_bureau.services.ledgers import InventoryLedger, TransactionLedger
from forex_bureau.services.rates.pipeline import RatePipeline

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardOut,
    responses={500: {"description": "Aggregation failed unexpectedly"}},
    summary="Revenue, activity and cash-on-hand statistics",
)
async def dashboard(
    transactions: TransactionLedger = Depends(get_transaction_ledger),
    inventory: InventoryLedger = Depends(get_inventory_ledger),
    pipeline: RatePipeline = Depends(get_pipeline),
):
    result = await compute_snapshot(transactions, inventory, pipeline)
    if not result["success"]:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=result)
    return result
