from fastapi import APIRouter, Depends, Header, HTTPException

from airouter.accounts import Account, accounts
from airouter.catalog import catalog
from airouter.handlers import (
    handle_account,
    handle_generate,
    handle_health,
    handle_login,
    handle_tools,
    handle_tools_by_category,
)
from airouter.schemas import GenerateRequest, HealthResponse, LoginRequest
from airouter.util import bearer_token

router = APIRouter()


async def optional_account(authorization: str | None = Header(default=None)) -> Account | None:
    """Resolve the bearer token when one is sent; anonymous requests get ``None``."""
    if authorization is None:
        return None
    token = bearer_token(authorization)
    account = accounts.get_by_token(token) if token else None
    if account is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session token")
    return account


async def required_account(account: Account | None = Depends(optional_account)) -> Account:
    if account is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return account


@router.get("/health", response_model=HealthResponse)
async def health() -> dict:
    return await handle_health()


@router.get("/api/tools")
async def get_tools() -> dict:
    return await handle_tools(catalog)


@router.get("/api/tools/{category}")
async def get_tools_by_category(category: str) -> dict:
    return await handle_tools_by_category(catalog, category)


@router.post("/api/generate")
async def generate(
    payload: GenerateRequest,
    account: Account | None = Depends(optional_account),
) -> dict:
    return await handle_generate(payload, catalog, accounts, account)


@router.post("/api/auth/login")
async def login(payload: LoginRequest) -> dict:
    return await handle_login(accounts, payload.email)


@router.get("/api/auth/me")
async def me(account: Account = Depends(required_account)) -> dict:
    return await handle_account(account)
