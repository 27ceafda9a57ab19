"""FastAPI dependencies resolving the per-app collaborators.

The store, rate pipeline and identity provider are created once by
``create_app`` and parked on ``app.state``; routes pull them from there so
tests can build independent apps with their own instances.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from starlette import status

from forex_bureau.core.config import Settings
from forex_bureau.db.store import EntityStore
from forex_bureau.services.auth import AuthStatus, IdentityProvider, bearer_token
from forex_bureau.services.ledgers import InventoryLedger, TransactionLedger
from forex_bureau.services.rates.pipeline import RatePipeline


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> EntityStore:
    return request.app.state.store


def get_pipeline(request: Request) -> RatePipeline:
    return request.app.state.rate_pipeline


def get_identity(request: Request) -> IdentityProvider:
    return request.app.state.identity


def get_inventory_ledger(store: EntityStore = Depends(get_store)) -> InventoryLedger:
    return InventoryLedger(store)


def get_transaction_ledger(store: EntityStore = Depends(get_store)) -> TransactionLedger:
    return TransactionLedger(store)


def get_auth_status(
    request: Request, identity: IdentityProvider = Depends(get_identity)
) -> AuthStatus:
    return identity.is_authenticated(bearer_token(request.headers.get("authorization")))


def require_user(
    settings: Settings = Depends(get_app_settings),
    auth: AuthStatus = Depends(get_auth_status),
) -> AuthStatus:
    if settings.auth_required and not auth.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth
