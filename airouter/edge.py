"""Edge proxy: forwards ``/api/*`` calls to one fixed backend origin.

Deployed as a serverless function (see ``api/index.py``).  Every response,
error paths and the ``OPTIONS`` preflight included, carries permissive CORS
headers; the preflight is answered locally without contacting the backend.
"""

import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from airouter.config import REQUEST_TIMEOUT_SECONDS, resolve_backend_url

logger = logging.getLogger("airouter.edge")

ROUTING_PARAM = "path"
PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def build_upstream_url(
    backend_url: str,
    segments: Sequence[str],
    query: Iterable[tuple[str, str]] = (),
) -> str:
    """Rebuild ``<backend>/api/<segments>`` plus every query item except the routing one."""
    path = "/".join(segment for segment in segments if segment)
    params = [(key, value) for key, value in query if key != ROUTING_PARAM and value is not None]
    url = f"{backend_url.rstrip('/')}/api/{path}"
    query_string = str(httpx.QueryParams(params)) if params else ""
    return f"{url}?{query_string}" if query_string else url


def forward_headers(inbound: Any) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    authorization = inbound.get("authorization")
    if authorization:
        headers["Authorization"] = str(authorization)
    return headers


def encode_body(body: Any) -> bytes | str | None:
    """Raw bytes and strings pass through as-is; anything else is serialized to JSON."""
    if body is None or body == b"" or body == "":
        return None
    if isinstance(body, (bytes, str)):
        return body
    return json.dumps(body)


def cors_json(status_code: int, content: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


async def proxy_request(
    method: str,
    url: str,
    headers: dict[str, str],
    body: bytes | str | None,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
) -> JSONResponse:
    """Forward one request and translate the outcome into a CORS-enabled JSON response."""
    send_body = body if method not in ("GET", "HEAD") else None
    try:
        async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
            response = await client.request(method, url, headers=headers, content=send_body)

            if not response.is_success:
                error_text = response.text
                logger.error("Backend error: %s %s", response.status_code, error_text)
                return cors_json(
                    response.status_code,
                    {"success": False, "error": error_text or f"HTTP {response.status_code}"},
                )

            data = response.json()
            return cors_json(response.status_code, data)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        logger.error("Proxy error for %s %s: %s", method, url, exc)
        return cors_json(500, {"success": False, "error": str(exc) or "Proxy request failed"})


def create_edge_app(
    backend_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    target = (backend_url or resolve_backend_url()).rstrip("/")
    app = FastAPI(title="AI Router edge proxy", docs_url=None, redoc_url=None, openapi_url=None)

    # Paths no route matches (including ones decoding to a newline) still get CORS headers
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return cors_json(exc.status_code, {"success": False, "error": message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Edge proxy failed on %s %s", request.method, request.url.path)
        return cors_json(500, {"success": False, "error": "Proxy request failed"})

    @app.api_route("/api", methods=PROXY_METHODS, include_in_schema=False)
    @app.api_route("/api/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def edge_proxy(request: Request, path: str = "") -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        # Catch-all rewrites deliver the segments as repeated ?path= values
        segments = request.query_params.getlist(ROUTING_PARAM) or path.split("/")
        url = build_upstream_url(target, segments, request.query_params.multi_items())
        logger.info("Proxying %s %s -> %s", request.method, request.url.path, url)

        body = encode_body(await request.body())
        return await proxy_request(request.method, url, forward_headers(request.headers), body, transport)

    return app
