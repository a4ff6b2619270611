from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from airouter.accounts import accounts
from airouter.catalog import ModelInfo
from airouter.config import settings
from airouter.main import create_app

SAMPLE_PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


@pytest.fixture(autouse=True)
def _reset_state():
    accounts.reset()
    settings.reset()
    yield
    accounts.reset()
    settings.reset()


@pytest.fixture
def client():
    return TestClient(create_app(), raise_server_exceptions=False)


def make_model(**overrides) -> ModelInfo:
    fields = {
        "name": "Test Model",
        "logo": "https://example.com/logo.png",
        "pros": ["fast"],
        "cons": ["made up"],
        "pricePerToken": 0.01,
        "price": "10 credits / 1K tokens",
        "description": "A model used in tests.",
        "provider": "openai",
        "providerModel": "test-model-1",
        "kind": "text",
    }
    fields.update(overrides)
    return ModelInfo(**fields)


def mock_http_client(status_code: int = 200, json_data: dict | None = None, json_raises: bool = False):
    """Stand-in for ``httpx.AsyncClient`` returning one canned response from ``post``."""
    resp = MagicMock()
    resp.status_code = status_code
    if json_raises:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = json_data or {}

    http_client = AsyncMock()
    http_client.post.return_value = resp
    http_client.__aenter__ = AsyncMock(return_value=http_client)
    http_client.__aexit__ = AsyncMock(return_value=False)
    return http_client, resp
