"""Smoke script for the live rate cascade.

Demonstrates:
 1. First fetch per base walks the providers (or lands on fallback).
 2. A second fetch within the TTL is served from cache (same timestamp).
 3. The dashboard snapshot against the in-memory seed rows.

NOTE: This hits the real provider APIs and is a diagnostic, not a test.
"""

import asyncio
import json

from forex_bureau.core.config import get_settings
from forex_bureau.db.seed import seed_rows
from forex_bureau.db.store import MemoryStore
from forex_bureau.services.dashboard import compute_snapshot
from forex_bureau.services.ledgers import InventoryLedger, TransactionLedger
from forex_bureau.services.rates.pipeline import RatePipeline


async def run():
    pipeline = RatePipeline.from_settings(get_settings())
    out = {}
    for base in ("USD", "EUR", "KES"):
        first = await pipeline.fetch_rates(base)
        second = await pipeline.fetch_rates(base)
        out[base] = {
            "source": first.source,
            "date": first.date.isoformat(),
            "currencies": len(first.rates),
            "cached": second is first,
            "needs_api_key": first.needs_api_key,
        }

    store = MemoryStore(seed_rows())
    out["dashboard"] = await compute_snapshot(
        TransactionLedger(store), InventoryLedger(store), pipeline
    )
    print(json.dumps(out, indent=2))


if __name__ == "__main__":
    asyncio.run(run())
