from typing import Any

from fastapi import HTTPException

from airouter.catalog import ModelInfo
from airouter.llm.base import GenerationProvider

MESSAGES_URL = "https://api.anthropic.com/v1/messages"
DEFAULT_MAX_TOKENS = 4096


class AnthropicProvider(GenerationProvider):
    provider_id = "anthropic"
    provider_name = "Anthropic"
    api_key_env = "ANTHROPIC_API_KEY"

    def auth_headers(self, api_key: str) -> dict[str, str]:
        return {
            "x-api-key": api_key,
            "anthropic-version": "2023-06-01",
        }

    async def generate(self, model: ModelInfo, prompt: str, params: dict[str, Any]) -> dict[str, Any]:
        if model.kind != "text":
            raise HTTPException(status_code=400, detail=f"Anthropic does not support {model.kind} generation")
        api_key = self.get_api_key()

        async with self.make_client() as client:
            response = await client.post(
                MESSAGES_URL,
                headers={**self.auth_headers(api_key), "Content-Type": "application/json"},
                json={
                    "max_tokens": DEFAULT_MAX_TOKENS,
                    **params,
                    "model": model.providerModel,
                    "messages": [{"role": "user", "content": prompt}],
                },
            )

        self.raise_on_error(response)

        payload = response.json()
        text_parts = [
            block.get("text", "")
            for block in (payload.get("content") or [])
            if block.get("type") == "text"
        ]
        if not text_parts:
            raise HTTPException(status_code=502, detail="Anthropic returned no text content")
        return self.text_result("\n".join(text_parts), payload.get("usage"))
