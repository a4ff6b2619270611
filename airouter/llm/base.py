"""Base class for Generation Provider integrations."""

from abc import ABC, abstractmethod
from typing import Any

import httpx
from fastapi import HTTPException

from airouter.catalog import ModelInfo
from airouter.config import REQUEST_TIMEOUT_SECONDS, settings


class GenerationProvider(ABC):
    """Shared infrastructure for all generation providers."""

    provider_id: str    # "openai", "anthropic", "google"
    provider_name: str  # "OpenAI", "Anthropic", "Google"
    api_key_env: str    # "OPENAI_API_KEY", etc.
    default_timeout: float = REQUEST_TIMEOUT_SECONDS

    def get_api_key(self) -> str:
        """Return the API key from config/env, or raise if it is missing."""
        api_key = settings.get(self.api_key_env)
        if not api_key:
            raise HTTPException(
                status_code=503,
                detail=f"{self.provider_name} is not configured: {self.api_key_env} is not set",
            )
        return api_key

    def make_client(self, timeout: float | None = None) -> httpx.AsyncClient:
        """Create an httpx async client with the provider's default timeout."""
        return httpx.AsyncClient(timeout=timeout or self.default_timeout)

    def auth_headers(self, api_key: str) -> dict[str, str]:
        """Return auth headers. Default: Bearer token. Override per provider."""
        return {"Authorization": f"Bearer {api_key}"}

    def raise_on_error(self, response: httpx.Response) -> None:
        """Raise HTTPException if response indicates an error."""
        if response.status_code < 400:
            return
        try:
            payload = response.json()
        except ValueError:
            raise HTTPException(
                status_code=502,
                detail=f"{self.provider_name} returned an unexpected error ({response.status_code}).",
            )

        error_obj = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error_obj, dict):
            message = error_obj.get("message", "") or ""
            code = str(error_obj.get("code", "") or "")
            if "moderation" in code or "safety" in message.lower():
                raise HTTPException(
                    status_code=422,
                    detail=f"{self.provider_name}: Your prompt was blocked by the safety filter. Try rephrasing it.",
                )
            if message:
                raise HTTPException(
                    status_code=502,
                    detail=f"{self.provider_name}: {message}",
                )

        raise HTTPException(
            status_code=502,
            detail=f"{self.provider_name} error ({response.status_code}). Please try again.",
        )

    @abstractmethod
    async def generate(self, model: ModelInfo, prompt: str, params: dict[str, Any]) -> dict[str, Any]:
        """Run one generation and return the payload placed in the envelope's ``data``."""

    @staticmethod
    def to_data_url(image_b64: str, mime_type: str = "image/png") -> str:
        return f"data:{mime_type};base64,{image_b64}"

    @staticmethod
    def text_result(content: str, usage: dict[str, Any] | None = None) -> dict[str, Any]:
        return {"type": "text", "content": content, "usage": usage or {}}

    @staticmethod
    def image_result(image_data_url: str) -> dict[str, Any]:
        return {"type": "image", "imageDataUrl": image_data_url}
