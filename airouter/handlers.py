"""Core handler functions, free of request objects. Used by the REST routes."""

import asyncio
import logging
import uuid
from typing import Any

import httpx
from fastapi import HTTPException

from airouter.accounts import Account, AccountRegistry
from airouter.catalog import Catalog, ModelInfo
from airouter.config import REQUEST_TIMEOUT_SECONDS
from airouter.costs import estimate_cost
from airouter.llm import get_provider
from airouter.llm.base import GenerationProvider
from airouter.schemas import AccountInfo, GenerateRequest, GenerateResponse

logger = logging.getLogger("airouter.handlers")


async def handle_health() -> dict:
    return {"status": "ok", "message": "Server is running"}


async def handle_tools(catalog: Catalog) -> dict:
    return {
        "success": True,
        "data": [entry.model_dump(mode="json") for entry in catalog.categories()],
    }


async def handle_tools_by_category(catalog: Catalog, category: str) -> dict:
    entry = catalog.get(category)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Category '{category}' not found")
    return {"success": True, "data": entry.model_dump(mode="json")}


async def _run_provider(
    provider: GenerationProvider,
    model: ModelInfo,
    request: GenerateRequest,
    request_id: str,
    timeout: float,
) -> dict[str, Any]:
    try:
        return await asyncio.wait_for(
            provider.generate(model, request.prompt, dict(request.additionalParams)),
            timeout=timeout,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException):
        logger.error("Generation %s timed out after %ss", request_id, timeout)
        raise HTTPException(status_code=500, detail=f"{provider.provider_name} request timed out")
    except httpx.RequestError as exc:
        logger.error("Generation %s could not reach %s: %s", request_id, provider.provider_name, exc)
        raise HTTPException(
            status_code=500,
            detail=f"Could not reach {provider.provider_name}: {str(exc) or type(exc).__name__}",
        )


async def handle_generate(
    request: GenerateRequest,
    catalog: Catalog,
    registry: AccountRegistry,
    account: Account | None = None,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
) -> dict:
    category = request.category.strip()
    model_name = request.model.strip()
    for field_name, value in (("category", category), ("model", model_name), ("prompt", request.prompt.strip())):
        if not value:
            raise HTTPException(status_code=400, detail=f"{field_name} is required")

    if category not in catalog:
        raise HTTPException(status_code=404, detail=f"Category '{category}' not found")
    model = catalog.find_model(category, model_name)
    if model is None:
        raise HTTPException(
            status_code=400,
            detail=f"Model '{model_name}' is not available in category '{category}'",
        )

    provider = get_provider(model.provider)
    cost = estimate_cost(model, request.prompt)
    request_id = str(uuid.uuid4())
    if account is not None:
        registry.reserve(account, cost)

    logger.info("Generation %s: %s / %s via %s", request_id, category, model.name, provider.provider_name)
    try:
        data = await _run_provider(provider, model, request, request_id, timeout)
    except BaseException:
        if account is not None:
            registry.refund(account, cost)
        raise

    if account is not None:
        registry.record(account, cost, model=model.name, category=category, request_id=request_id)

    return GenerateResponse(
        success=True,
        data=data,
        cost=cost,
        requestId=request_id,
        model=model.name,
        category=category,
    ).model_dump(exclude_none=True)


async def handle_login(registry: AccountRegistry, email: str) -> dict:
    email = email.strip()
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")
    try:
        account, created = registry.login(email)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"success": True, "data": _account_info(account, created)}


async def handle_account(account: Account) -> dict:
    return {"success": True, "data": _account_info(account)}


def _account_info(account: Account, created: bool = False) -> dict[str, Any]:
    return AccountInfo(
        email=account.email,
        credits=account.credits,
        token=account.token,
        isNew=created,
    ).model_dump()
