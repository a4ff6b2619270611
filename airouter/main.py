import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from airouter.config import MAX_BODY_BYTES
from airouter.costs import InsufficientCredits
from airouter.cors import CORS_ALLOW_HEADERS, CORS_ALLOW_METHODS, OriginPolicy
from airouter.middleware import BodySizeLimitMiddleware
from airouter.routes import router

logger = logging.getLogger("airouter.main")

CATCH_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:]) or "body"
        messages.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(messages) or "Invalid request"


def create_app(origin_policy: OriginPolicy | None = None, max_body_bytes: int = MAX_BODY_BYTES) -> FastAPI:
    policy = origin_policy or OriginPolicy.from_settings()
    app = FastAPI(title="AI Router")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"success": False, "error": _validation_message(exc)})

    @app.exception_handler(InsufficientCredits)
    async def insufficient_credits_handler(_request: Request, exc: InsufficientCredits) -> JSONResponse:
        return JSONResponse(
            status_code=402,
            content={"success": False, "error": str(exc), "balance": exc.balance, "attempted": exc.attempted},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Something went wrong!"})

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(policy.exact_origins),
        allow_origin_regex=policy.origin_regex,
        allow_credentials=True,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )

    app.include_router(router)

    # Registered last so every known route wins
    @app.api_route("/{full_path:path}", methods=CATCH_ALL_METHODS, include_in_schema=False)
    async def route_not_found(full_path: str) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "Route not found"})

    return app


app = create_app()
