"""Command-line entry point.

    airouter serve        # backend API on PORT (default 3001)
    airouter dev-proxy    # local /api proxy on DEV_PROXY_PORT (default 3000)
"""

import argparse
import logging
import sys

import uvicorn

from airouter.config import resolve_backend_url, settings

logger = logging.getLogger("airouter")


def configure_logging(level: int = logging.INFO) -> None:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s"))
    logger.setLevel(level)
    logger.addHandler(handler)


def serve(host: str, port: int) -> None:
    from airouter.main import app

    logger.info("Server is running on http://localhost:%s", port)
    logger.info("API available at http://localhost:%s/api", port)
    uvicorn.run(app, host=host, port=port)


def dev_proxy(host: str, port: int) -> None:
    from airouter.devproxy import create_dev_proxy_app

    backend_url = resolve_backend_url()
    logger.info("Dev proxy on http://localhost:%s forwarding /api to %s", port, backend_url)
    uvicorn.run(create_dev_proxy_app(backend_url), host=host, port=port)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="airouter", description="AI Router backend and development proxy")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the catalog/generate API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=None, help="Defaults to $PORT or 3001")

    proxy_parser = subparsers.add_parser("dev-proxy", help="Run the local /api reverse proxy")
    proxy_parser.add_argument("--host", default="127.0.0.1")
    proxy_parser.add_argument("--port", type=int, default=None, help="Defaults to $DEV_PROXY_PORT or 3000")
    proxy_parser.add_argument("--backend-url", default=None, help="Overrides $BACKEND_URL")

    args = parser.parse_args(argv)
    configure_logging()

    if args.command == "serve":
        serve(args.host, args.port or settings.port)
    else:
        if args.backend_url:
            settings.BACKEND_URL = args.backend_url
        dev_proxy(args.host, args.port or settings.dev_proxy_port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
