"""API client: the single path from the UI layer to the backend.

Every call unwraps the ``{success, data, error}`` envelope and turns failures
into ``ApiError``.  The client is handed one base URL and makes no
assumption about whether it points at the backend directly or at a proxy.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from airouter.config import REQUEST_TIMEOUT_SECONDS, api_base_url

logger = logging.getLogger("airouter.client")


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CategoryNotFoundError(ApiError):
    pass


def _error_message(response: httpx.Response) -> str | None:
    """Best-effort ``error`` field from a failure body; ``None`` when unparsable."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return None


def _unwrap(response: httpx.Response, fallback: str) -> dict[str, Any]:
    """Return the success envelope, raising ApiError for anything else."""
    if not response.is_success:
        raise ApiError(
            _error_message(response) or f"HTTP error! status: {response.status_code}",
            response.status_code,
        )
    result = response.json()
    if not isinstance(result, dict):
        raise ApiError(fallback, response.status_code)
    if not result.get("success"):
        raise ApiError(result.get("error") or fallback, response.status_code)
    return result


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        health_url: str | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
        token: str | None = None,
    ) -> None:
        self.base_url = (base_url or api_base_url()).rstrip("/")
        self.health_url = health_url or str(httpx.URL(self.base_url).join("/health"))
        self.timeout = timeout
        self.transport = transport
        self.token = token
        logger.info("API base URL: %s", self.base_url)

    def _client(self) -> httpx.AsyncClient:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else None
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport, headers=headers)

    async def _get(self, url: str) -> httpx.Response:
        async with self._client() as client:
            return await client.get(url)

    async def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        async with self._client() as client:
            return await client.post(url, json=payload)

    async def fetch_tools(self) -> list[dict[str, Any]]:
        """Return every category with its models."""
        try:
            result = _unwrap(await self._get(f"{self.base_url}/tools"), "Failed to fetch tools")
            return result.get("data") or []
        except ApiError as exc:
            logger.error("Error fetching tools: %s", exc)
            raise
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error fetching tools: %s", exc)
            raise ApiError(str(exc) or "Failed to fetch tools from server") from exc

    async def fetch_tools_by_category(self, category: str) -> list[dict[str, Any]]:
        """Return the models of one category; raises CategoryNotFoundError on 404."""
        try:
            response = await self._get(f"{self.base_url}/tools/{quote(category, safe='')}")
            if response.status_code == 404:
                raise CategoryNotFoundError(f'Category "{category}" not found', 404)
            data = _unwrap(response, "Failed to fetch category tools").get("data")
            return (data.get("models") if isinstance(data, dict) else None) or []
        except ApiError as exc:
            logger.error('Error fetching tools for category "%s": %s', category, exc)
            raise
        except (httpx.HTTPError, ValueError) as exc:
            logger.error('Error fetching tools for category "%s": %s', category, exc)
            raise ApiError(str(exc) or f"Failed to fetch tools for {category}") from exc

    async def generate_content(self, request: dict[str, Any]) -> dict[str, Any]:
        """POST a generation request and return the full success envelope."""
        try:
            return _unwrap(await self._post(f"{self.base_url}/generate", request), "Generation failed")
        except ApiError as exc:
            logger.error("Error generating content: %s", exc)
            raise
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error generating content: %s", exc)
            raise ApiError(str(exc) or "Failed to generate content") from exc

    async def login(self, email: str) -> dict[str, Any]:
        """Log in (or register) by email; remembers the session token on success."""
        try:
            result = _unwrap(await self._post(f"{self.base_url}/auth/login", {"email": email}), "Login failed")
        except ApiError as exc:
            logger.error("Error logging in: %s", exc)
            raise
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error logging in: %s", exc)
            raise ApiError(str(exc) or "Failed to login") from exc
        account = result.get("data") or {}
        self.token = account.get("token") or self.token
        return account

    async def check_server_health(self) -> bool:
        """True when the health endpoint answers 2xx; any failure reads as unhealthy."""
        try:
            response = await self._get(self.health_url)
        except Exception as exc:
            logger.debug("Health check failed: %s", exc)
            return False
        return response.is_success
