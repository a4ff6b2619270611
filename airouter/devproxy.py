"""Local development reverse proxy.

Forwards ``/api/*`` unchanged to the backend origin and rewrites the ``Host``
header to the target, so the backend sees a same-origin request.  Only meant
for local use; production traffic goes through the edge proxy.
"""

import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from airouter.config import REQUEST_TIMEOUT_SECONDS, resolve_backend_url

logger = logging.getLogger("airouter.devproxy")

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

# Connection-level headers that must not be forwarded by a proxy
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "trailers",
    "transfer-encoding",
    "upgrade",
}


def rewrite_request_headers(headers: httpx.Headers | dict, target: httpx.URL) -> dict[str, str]:
    forwarded = {
        key: value
        for key, value in headers.items()
        if key.lower() not in HOP_BY_HOP_HEADERS and key.lower() not in ("host", "content-length")
    }
    forwarded["host"] = target.netloc.decode("ascii")
    return forwarded


def filter_response_headers(headers: httpx.Headers) -> dict[str, str]:
    return {
        key: value
        for key, value in headers.items()
        if key.lower() not in HOP_BY_HOP_HEADERS and key.lower() not in ("content-length", "content-encoding")
    }


def create_dev_proxy_app(
    backend_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
) -> FastAPI:
    origin = (backend_url or resolve_backend_url()).rstrip("/")
    target = httpx.URL(origin)
    app = FastAPI(title="AI Router dev proxy", docs_url=None, redoc_url=None, openapi_url=None)

    @app.api_route("/api/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def dev_proxy(request: Request, path: str) -> Response:
        # Forward the path exactly as received, percent-encoding included
        raw_path = request.scope.get("raw_path") or request.url.path.encode("utf-8")
        url = origin + raw_path.decode("latin-1")
        if request.url.query:
            url = f"{url}?{request.url.query}"
        headers = rewrite_request_headers(request.headers, target)
        body = await request.body()
        logger.debug("Dev proxy %s %s -> %s", request.method, request.url.path, url)

        try:
            async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
                upstream = await client.request(request.method, url, headers=headers, content=body or None)
        except httpx.HTTPError as exc:
            logger.error("Dev proxy could not reach %s: %s", target, exc)
            return JSONResponse(status_code=502, content={"success": False, "error": f"Backend unreachable: {exc}"})

        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers=filter_response_headers(upstream.headers),
        )

    return app
