from typing import Any

from fastapi import HTTPException

from airouter.catalog import ModelInfo
from airouter.llm.base import GenerationProvider

CHAT_URL = "https://api.openai.com/v1/chat/completions"
IMAGES_URL = "https://api.openai.com/v1/images/generations"


class OpenAIProvider(GenerationProvider):
    provider_id = "openai"
    provider_name = "OpenAI"
    api_key_env = "OPENAI_API_KEY"

    async def generate(self, model: ModelInfo, prompt: str, params: dict[str, Any]) -> dict[str, Any]:
        if model.kind == "image":
            return await self.generate_image(model, prompt, params)
        return await self.generate_text(model, prompt, params)

    async def generate_text(self, model: ModelInfo, prompt: str, params: dict[str, Any]) -> dict[str, Any]:
        api_key = self.get_api_key()
        async with self.make_client() as client:
            response = await client.post(
                CHAT_URL,
                headers={**self.auth_headers(api_key), "Content-Type": "application/json"},
                json={
                    **params,
                    "model": model.providerModel,
                    "messages": [{"role": "user", "content": prompt}],
                },
            )

        self.raise_on_error(response)

        payload = response.json()
        text = (((payload.get("choices") or [{}])[0]).get("message") or {}).get("content")
        if not text:
            raise HTTPException(status_code=502, detail="OpenAI returned an empty completion")
        return self.text_result(text, payload.get("usage"))

    async def generate_image(self, model: ModelInfo, prompt: str, params: dict[str, Any]) -> dict[str, Any]:
        api_key = self.get_api_key()
        async with self.make_client() as client:
            response = await client.post(
                IMAGES_URL,
                headers={**self.auth_headers(api_key), "Content-Type": "application/json"},
                json={
                    "size": "1024x1024",
                    "quality": "auto",
                    **params,
                    "model": model.providerModel,
                    "prompt": prompt,
                    "n": 1,
                },
            )

        self.raise_on_error(response)

        payload = response.json()
        image_b64 = ((payload.get("data") or [{}])[0]).get("b64_json")
        if not image_b64:
            raise HTTPException(status_code=502, detail="OpenAI returned no image payload")
        return self.image_result(self.to_data_url(image_b64))
