from unittest.mock import patch

import pytest
from fastapi import HTTPException

from airouter.llm.anthropic import DEFAULT_MAX_TOKENS, MESSAGES_URL, AnthropicProvider
from tests.conftest import make_model, mock_http_client

provider = AnthropicProvider()


def _messages_response(*texts: str) -> dict:
    return {
        "content": [{"type": "text", "text": t} for t in texts],
        "usage": {"input_tokens": 10, "output_tokens": 20},
    }


class TestGenerate:
    @pytest.mark.asyncio
    async def test_success(self):
        client, _ = mock_http_client(200, _messages_response("Hello", "again"))
        model = make_model(provider="anthropic", providerModel="claude-sonnet-4-5")
        with patch("airouter.llm.base.httpx.AsyncClient", return_value=client), \
             patch.dict("os.environ", {"ANTHROPIC_API_KEY": "ak-test"}):
            result = await provider.generate(model, "Write a haiku", {})
        assert result["type"] == "text"
        assert result["content"] == "Hello\nagain"
        assert result["usage"]["output_tokens"] == 20

    @pytest.mark.asyncio
    async def test_request_shape(self):
        client, _ = mock_http_client(200, _messages_response("ok"))
        model = make_model(provider="anthropic", providerModel="claude-sonnet-4-5")
        with patch("airouter.llm.base.httpx.AsyncClient", return_value=client), \
             patch.dict("os.environ", {"ANTHROPIC_API_KEY": "ak-test"}):
            await provider.generate(model, "Write a haiku", {"temperature": 0.5})
        assert client.post.call_args[0][0] == MESSAGES_URL
        headers = client.post.call_args[1]["headers"]
        assert headers["x-api-key"] == "ak-test"
        assert headers["anthropic-version"] == "2023-06-01"
        assert "Authorization" not in headers
        payload = client.post.call_args[1]["json"]
        assert payload["model"] == "claude-sonnet-4-5"
        assert payload["max_tokens"] == DEFAULT_MAX_TOKENS
        assert payload["temperature"] == 0.5

    @pytest.mark.asyncio
    async def test_no_text_blocks(self):
        client, _ = mock_http_client(200, {"content": [{"type": "tool_use"}]})
        with patch("airouter.llm.base.httpx.AsyncClient", return_value=client), \
             patch.dict("os.environ", {"ANTHROPIC_API_KEY": "ak-test"}):
            with pytest.raises(HTTPException) as exc_info:
                await provider.generate(make_model(provider="anthropic"), "hi", {})
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_image_kind_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            await provider.generate(make_model(provider="anthropic", kind="image"), "a cat", {})
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_api_error(self):
        client, _ = mock_http_client(529, {"error": {"message": "Overloaded", "type": "overloaded_error"}})
        with patch("airouter.llm.base.httpx.AsyncClient", return_value=client), \
             patch.dict("os.environ", {"ANTHROPIC_API_KEY": "ak-test"}):
            with pytest.raises(HTTPException) as exc_info:
                await provider.generate(make_model(provider="anthropic"), "hi", {})
        assert exc_info.value.status_code == 502
        assert "Overloaded" in exc_info.value.detail
