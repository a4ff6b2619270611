"""Origin allow-list for the backend's CORS policy.

Origins that match no rule are denied.  Requests without an ``Origin`` header
never reach this check: CORS only applies to browser requests.
"""

import re
from dataclasses import dataclass, field

from airouter.config import DEFAULT_CORS_DOMAIN_SUFFIXES, Settings, settings

CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization"]

LOCAL_ORIGIN_PATTERN = r"https?://(localhost|127\.0\.0\.1)(:\d+)?"


@dataclass(frozen=True)
class OriginPolicy:
    exact_origins: frozenset[str] = field(default_factory=frozenset)
    domain_suffixes: tuple[str, ...] = DEFAULT_CORS_DOMAIN_SUFFIXES
    allow_local: bool = True

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "OriginPolicy":
        config = config or settings
        origins = frozenset(o.rstrip("/") for o in config.get_list("CORS_ALLOWED_ORIGINS"))
        suffixes = tuple(
            s if s.startswith(".") else f".{s}"
            for s in config.get_list("CORS_ALLOWED_DOMAIN_SUFFIXES", DEFAULT_CORS_DOMAIN_SUFFIXES)
        )
        return cls(exact_origins=origins, domain_suffixes=suffixes)

    @property
    def origin_regex(self) -> str | None:
        """Single pattern for the local and suffix rules, matched against the whole origin."""
        alternatives = []
        if self.allow_local:
            alternatives.append(LOCAL_ORIGIN_PATTERN)
        for suffix in self.domain_suffixes:
            alternatives.append(r"https?://[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*" + re.escape(suffix) + r"(:\d+)?")
        if not alternatives:
            return None
        return "(?:" + "|".join(alternatives) + r")\Z"
