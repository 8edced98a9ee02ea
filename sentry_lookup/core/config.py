"""Configuration model and resolution using Pydantic."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from platformdirs import user_cache_dir
from pydantic import BaseModel, Field, ValidationError, field_validator

from sentry_lookup.core.exceptions import ConfigurationError

APP_NAME = "sentry-lookup"
DEFAULT_API_URL = "https://sentry.io"
CACHE_FILENAME = "projects.json"

API_KEY_ENV = "SENTRY_APIKEY"
API_URL_ENV = "SENTRY_URL"
ORG_ENV = "SENTRY_ORG"
CACHE_DIR_ENV = "SENTRY_LOOKUP_CACHE_DIR"

# field -> (flag, env var) for error reporting
_SOURCES: Dict[str, tuple[str, Optional[str]]] = {
    "api_key": ("--api-key", API_KEY_ENV),
    "org": ("--org", ORG_ENV),
    "project_id": ("PROJECT-ID", None),
}


def default_cache_dir() -> Path:
    return Path(user_cache_dir(APP_NAME)) / "cache"


class LookupConfig(BaseModel):
    """Everything a lookup needs, passed explicitly to each step."""
    api_key: str = Field(..., min_length=1)
    api_url: str = Field(default=DEFAULT_API_URL)
    org: str = Field(..., min_length=1)
    project_id: Optional[str] = Field(default=None)
    clear_cache: bool = Field(default=False)
    cache_dir: Path = Field(default_factory=default_cache_dir)

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require a scheme and host, drop any trailing slash."""
        parsed = urlparse(v)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(
                f"Invalid URL: '{v}'. URL must include scheme (http:// or https://)"
            )
        return v.rstrip("/")

    @property
    def cache_path(self) -> Path:
        return self.cache_dir / CACHE_FILENAME

    @classmethod
    def resolve(
        cls,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        org: Optional[str] = None,
        project_id: Optional[str] = None,
        clear_cache: bool = False,
        cache_dir: Optional[Path] = None,
        require_project_id: bool = False,
    ) -> LookupConfig:
        """Build a config from explicit values, falling back to the environment.

        Raises ConfigurationError naming every missing value. Nothing here
        touches the network or the cache.
        """
        values: Dict[str, Any] = {
            "api_key": api_key or os.getenv(API_KEY_ENV),
            "api_url": api_url or os.getenv(API_URL_ENV) or DEFAULT_API_URL,
            "org": org or os.getenv(ORG_ENV),
            "project_id": project_id,
            "clear_cache": clear_cache,
        }
        env_cache_dir = os.getenv(CACHE_DIR_ENV)
        if cache_dir is not None:
            values["cache_dir"] = Path(cache_dir).expanduser()
        elif env_cache_dir:
            values["cache_dir"] = Path(env_cache_dir).expanduser()

        required = ["api_key", "org"]
        if require_project_id:
            required.append("project_id")
        missing: List[str] = [name for name in required if not values[name]]
        if missing:
            raise ConfigurationError(
                "Missing required configuration: " + "; ".join(_describe(name) for name in missing)
            )

        try:
            return cls(**values)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {details}") from e


def _describe(name: str) -> str:
    flag, env = _SOURCES[name]
    if env:
        return f"{name} (set {flag} or {env})"
    return f"{name} (pass {flag})"
