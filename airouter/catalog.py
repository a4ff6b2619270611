"""Catalog of AI tools grouped by category.

The catalog is loaded once at startup, either from the built-in
``DEFAULT_CATALOG`` or from a JSON file named by ``CATALOG_PATH``, and is
read-only afterwards.
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from airouter.config import settings


class ModelInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    logo: str
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    pricePerToken: float
    price: str
    description: str
    # Routing details, never sent to clients
    provider: str = Field(default="openai", exclude=True)
    providerModel: str = Field(default="", exclude=True)
    kind: str = Field(default="text", exclude=True)


class ToolCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    models: list[ModelInfo] = Field(default_factory=list)


class Catalog:
    """Ordered, read-only mapping of category name to its models."""

    def __init__(self, categories: Iterable[ToolCategory]) -> None:
        self._categories: dict[str, ToolCategory] = {}
        for entry in categories:
            if entry.category in self._categories:
                raise ValueError(f"Duplicate category in catalog: {entry.category}")
            self._categories[entry.category] = entry

    def categories(self) -> list[ToolCategory]:
        return list(self._categories.values())

    def names(self) -> list[str]:
        return list(self._categories)

    def get(self, category: str) -> ToolCategory | None:
        return self._categories.get(category)

    def find_model(self, category: str, model: str) -> ModelInfo | None:
        entry = self._categories.get(category)
        if entry is None:
            return None
        for info in entry.models:
            if info.name == model:
                return info
        return None

    def __contains__(self, category: object) -> bool:
        return category in self._categories

    def __len__(self) -> int:
        return len(self._categories)


DEFAULT_CATALOG: list[dict[str, Any]] = [
    {
        "category": "Text Generation",
        "models": [
            {
                "name": "GPT-4.1 mini",
                "logo": "https://cdn.simpleicons.org/openai",
                "pros": ["Fast responses", "Strong instruction following"],
                "cons": ["Smaller context than flagship models"],
                "pricePerToken": 0.002,
                "price": "2 credits / 1K tokens",
                "description": "OpenAI's compact general-purpose chat model.",
                "provider": "openai",
                "providerModel": "gpt-4.1-mini",
                "kind": "text",
            },
            {
                "name": "Claude Sonnet",
                "logo": "https://cdn.simpleicons.org/anthropic",
                "pros": ["Careful long-form writing", "Large context window"],
                "cons": ["Slower than mini models"],
                "pricePerToken": 0.006,
                "price": "6 credits / 1K tokens",
                "description": "Anthropic's balanced model for writing and analysis.",
                "provider": "anthropic",
                "providerModel": "claude-sonnet-4-5",
                "kind": "text",
            },
            {
                "name": "Gemini Flash",
                "logo": "https://cdn.simpleicons.org/googlegemini",
                "pros": ["Very low latency", "Cheap"],
                "cons": ["Less precise on complex reasoning"],
                "pricePerToken": 0.001,
                "price": "1 credit / 1K tokens",
                "description": "Google's lightweight multimodal model.",
                "provider": "google",
                "providerModel": "gemini-2.5-flash",
                "kind": "text",
            },
        ],
    },
    {
        "category": "Image Generation",
        "models": [
            {
                "name": "GPT Image",
                "logo": "https://cdn.simpleicons.org/openai",
                "pros": ["Accurate text rendering", "Good prompt adherence"],
                "cons": ["Slow at high quality"],
                "pricePerToken": 0.04,
                "price": "40 credits / image",
                "description": "OpenAI image generation.",
                "provider": "openai",
                "providerModel": "gpt-image-1",
                "kind": "image",
            },
            {
                "name": "Gemini Image",
                "logo": "https://cdn.simpleicons.org/googlegemini",
                "pros": ["Fast", "Good photorealism"],
                "cons": ["Fewer size options"],
                "pricePerToken": 0.04,
                "price": "40 credits / image",
                "description": "Google Gemini native image generation.",
                "provider": "google",
                "providerModel": "gemini-2.5-flash-image",
                "kind": "image",
            },
        ],
    },
    {
        "category": "Code Generation",
        "models": [
            {
                "name": "GPT-4.1",
                "logo": "https://cdn.simpleicons.org/openai",
                "pros": ["Strong at code edits", "Long context"],
                "cons": ["Higher price"],
                "pricePerToken": 0.008,
                "price": "8 credits / 1K tokens",
                "description": "OpenAI's flagship model tuned for coding tasks.",
                "provider": "openai",
                "providerModel": "gpt-4.1",
                "kind": "text",
            },
            {
                "name": "Claude Opus",
                "logo": "https://cdn.simpleicons.org/anthropic",
                "pros": ["Excellent multi-file reasoning"],
                "cons": ["Most expensive option"],
                "pricePerToken": 0.03,
                "price": "30 credits / 1K tokens",
                "description": "Anthropic's most capable model for hard programming problems.",
                "provider": "anthropic",
                "providerModel": "claude-opus-4-1",
                "kind": "text",
            },
        ],
    },
]


def parse_catalog(raw: Any) -> Catalog:
    """Build a catalog from a list of categories or a ``{category: models}`` mapping."""
    if isinstance(raw, dict):
        raw = [{"category": name, "models": models} for name, models in raw.items()]
    if not isinstance(raw, list):
        raise ValueError("Catalog must be a list of categories or a mapping of category to models")
    return Catalog(ToolCategory.model_validate(item) for item in raw)


def load_catalog(path: str | None = None) -> Catalog:
    path = path or settings.get("CATALOG_PATH")
    if not path:
        return parse_catalog(DEFAULT_CATALOG)
    return parse_catalog(json.loads(Path(path).read_text(encoding="utf-8")))


# Module singleton
catalog = load_catalog()
