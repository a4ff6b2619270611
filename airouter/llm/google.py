from typing import Any

from fastapi import HTTPException

from airouter.catalog import ModelInfo
from airouter.llm.base import GenerationProvider

GENERATE_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


class GoogleProvider(GenerationProvider):
    provider_id = "google"
    provider_name = "Google"
    api_key_env = "GOOGLE_API_KEY"

    def auth_headers(self, api_key: str) -> dict[str, str]:
        return {"x-goog-api-key": api_key}

    async def generate(self, model: ModelInfo, prompt: str, params: dict[str, Any]) -> dict[str, Any]:
        api_key = self.get_api_key()
        generation_config = dict(params)
        if model.kind == "image":
            generation_config.setdefault("responseModalities", ["IMAGE", "TEXT"])

        async with self.make_client() as client:
            response = await client.post(
                GENERATE_URL.format(model=model.providerModel),
                headers={**self.auth_headers(api_key), "Content-Type": "application/json"},
                json={
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": generation_config,
                },
            )

        self.raise_on_error(response)

        payload = response.json()
        parts = []
        for candidate in payload.get("candidates") or []:
            parts.extend(((candidate.get("content") or {}).get("parts")) or [])

        if model.kind == "image":
            for part in parts:
                inline_data = part.get("inline_data") or part.get("inlineData")
                if inline_data and inline_data.get("data"):
                    mime = inline_data.get("mime_type") or inline_data.get("mimeType") or "image/png"
                    return self.image_result(self.to_data_url(inline_data["data"], mime))
            raise HTTPException(status_code=502, detail="Google returned no image payload")

        text = "".join(part.get("text", "") for part in parts)
        if not text:
            raise HTTPException(status_code=502, detail="Google returned no text content")
        return self.text_result(text, payload.get("usageMetadata"))
