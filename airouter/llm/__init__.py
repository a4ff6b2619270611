from fastapi import HTTPException

from airouter.llm.anthropic import AnthropicProvider
from airouter.llm.base import GenerationProvider
from airouter.llm.google import GoogleProvider
from airouter.llm.openai import OpenAIProvider

# Module-level singletons, keyed by ModelInfo.provider
PROVIDERS: dict[str, GenerationProvider] = {
    provider.provider_id: provider
    for provider in (OpenAIProvider(), AnthropicProvider(), GoogleProvider())
}


def get_provider(provider_id: str) -> GenerationProvider:
    provider = PROVIDERS.get(provider_id)
    if provider is None:
        raise HTTPException(status_code=500, detail=f"No generation provider registered for '{provider_id}'")
    return provider
