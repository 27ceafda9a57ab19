from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from forex_bureau.core.deps import get_auth_status
from forex_bureau.models.constants import currencies_by_region, list_currencies
from forex_bureau.services.auth import AuthStatus

router = APIRouter(tags=["meta"])


class CurrencyOut(BaseModel):
    code: str
    name: str
    region: str


class AuthStatusOut(BaseModel):
    authenticated: bool
    user: Optional[Dict[str, str]] = None


@router.get("/health", summary="Liveness probe")
async def health():
    return {"status": "ok"}


@router.get("/currencies", response_model=List[CurrencyOut], summary="Currency catalog")
async def currencies(region: Optional[str] = Query(None, description="Filter by region")):
    rows = currencies_by_region(region) if region else list_currencies()
    return [CurrencyOut(code=c.code, name=c.name, region=c.region) for c in rows]


@router.get("/auth/status", response_model=AuthStatusOut, summary="Bearer token check")
async def auth_status(auth: AuthStatus = Depends(get_auth_status)):
    return AuthStatusOut(authenticated=auth.authenticated, user=auth.user)
