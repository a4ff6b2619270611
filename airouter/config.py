"""Global configuration singleton for AI Router.

Values are read from the attribute when it has been set, otherwise from the
process environment (a ``.env`` file in the working directory is loaded on
import).  Embedding hosts and tests can populate the singleton directly:

    from airouter.config import settings
    settings.BACKEND_URL = "http://10.0.0.5:3001"
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PORT = 3001
DEFAULT_DEV_PROXY_PORT = 3000
DEFAULT_BACKEND_URL = "http://localhost:3001"

# Backend origin per APP_ENV when BACKEND_URL is not given explicitly
MODE_BACKEND_URLS: dict[str, str] = {
    "development": "http://localhost:3001",
    "test": "http://testserver",
}

MAX_BODY_BYTES = 50 * 1024 * 1024
REQUEST_TIMEOUT_SECONDS = 600.0
DEFAULT_STARTING_CREDITS = 5000

DEFAULT_CORS_DOMAIN_SUFFIXES = (".vercel.app",)


class Settings:
    """Lightweight mutable config, one global instance."""

    PORT: Optional[int] = None
    DEV_PROXY_PORT: Optional[int] = None
    BACKEND_URL: Optional[str] = None
    APP_ENV: Optional[str] = None
    CATALOG_PATH: Optional[str] = None
    CORS_ALLOWED_ORIGINS: Optional[str] = None
    CORS_ALLOWED_DOMAIN_SUFFIXES: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    ANTHROPIC_API_KEY: Optional[str] = None
    GOOGLE_API_KEY: Optional[str] = None
    STARTING_CREDITS: Optional[int] = None

    def get(self, name: str) -> Optional[str]:
        """Return the attribute value if set, otherwise fall back to env."""
        value = getattr(self, name, None)
        if value is not None:
            return value if isinstance(value, str) else str(value)
        return os.getenv(name)

    def get_int(self, name: str, default: int) -> int:
        value = self.get(name)
        if not value:
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {value!r}")

    def get_list(self, name: str, default: tuple[str, ...] = ()) -> list[str]:
        """Comma-separated value as a list; unset falls back to ``default``."""
        value = self.get(name)
        if value is None:
            return list(default)
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def port(self) -> int:
        return self.get_int("PORT", DEFAULT_PORT)

    @property
    def dev_proxy_port(self) -> int:
        return self.get_int("DEV_PROXY_PORT", DEFAULT_DEV_PROXY_PORT)

    @property
    def starting_credits(self) -> int:
        return self.get_int("STARTING_CREDITS", DEFAULT_STARTING_CREDITS)

    def reset(self) -> None:
        """Drop every attribute override so values come from env again."""
        for name in list(vars(self)):
            delattr(self, name)


settings = Settings()


def resolve_backend_url(config: Settings | None = None) -> str:
    """Pick the backend origin once: explicit env > mode default > fallback."""
    config = config or settings
    explicit = config.get("BACKEND_URL")
    if explicit:
        return explicit.rstrip("/")
    mode = (config.get("APP_ENV") or "").strip().lower()
    if mode in MODE_BACKEND_URLS:
        return MODE_BACKEND_URLS[mode]
    return DEFAULT_BACKEND_URL


def api_base_url(backend_url: str | None = None) -> str:
    return f"{(backend_url or resolve_backend_url()).rstrip('/')}/api"
