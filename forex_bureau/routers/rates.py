from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query

from forex_bureau.core.config import Settings
from forex_bureau.core.deps import get_app_settings, get_pipeline
from forex_bureau.models.rates import (
    ConversionOut,
    RateBoardOut,
    RateQuote,
    RateTableOut,
)
from forex_bureau.services.rates.conversion import build_quotes, convert_amount
from forex_bureau.services.rates.pipeline import RatePipeline

"""Rates router.

Endpoints:
    - GET /rates?base=USD          -> latest rate table with provenance
    - GET /rates/board             -> buy/sell quotes for the counter board
    - GET /rates/convert           -> calculator conversion

All three always answer; when providers are down the body says so through
`source` (fallback / fallback-error) rather than an error status.
"""

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("", response_model=RateTableOut, summary="Latest rates for a base currency")
async def get_rates(
    base: Optional[str] = Query(None, min_length=3, max_length=3, description="Base currency (default USD)"),
    pipeline: RatePipeline = Depends(get_pipeline),
):
    table = await pipeline.fetch_rates(base)
    return RateTableOut.from_table(table)


@router.get("/board", response_model=RateBoardOut, summary="Buy/sell quotes against USD")
async def rate_board(
    pipeline: RatePipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_app_settings),
):
    table = await pipeline.fetch_rates("USD")
    quotes = build_quotes(table, settings.board_currencies, settings.quote_spread)
    return RateBoardOut(
        base=table.base,
        source=table.source,
        using_fallback=table.is_fallback,
        updated_at=table.timestamp,
        quotes=[RateQuote(**asdict(q)) for q in quotes],
    )


@router.get("/convert", response_model=ConversionOut, summary="Convert an amount between currencies")
async def convert(
    amount: float = Query(..., ge=0),
    from_currency: str = Query(..., alias="from", min_length=3, max_length=3),
    to_currency: str = Query(..., alias="to", min_length=3, max_length=3),
    pipeline: RatePipeline = Depends(get_pipeline),
):
    table = await pipeline.fetch_rates(from_currency)
    result = convert_amount(amount, to_currency, table)
    return ConversionOut(**asdict(result))
