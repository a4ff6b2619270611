from typing import Any

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    category: str = ""
    model: str = ""
    prompt: str = ""
    additionalParams: dict[str, Any] = Field(default_factory=dict)


class ApiEnvelope(BaseModel):
    success: bool
    data: Any | None = None
    error: str | None = None


class GenerateResponse(ApiEnvelope):
    cost: float | None = None
    requestId: str | None = None
    model: str | None = None
    category: str | None = None


class HealthResponse(BaseModel):
    status: str
    message: str


class LoginRequest(BaseModel):
    email: str = ""


class AccountInfo(BaseModel):
    email: str
    credits: float
    token: str
    isNew: bool = False
