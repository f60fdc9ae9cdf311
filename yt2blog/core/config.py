"""Configuration for the relay server and CLI.

Settings come from environment variables only; API keys are never stored,
they are looked up per request or per CLI invocation.
"""

from __future__ import annotations

import os
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from yt2blog.core.constants import DEFAULT_LOCALE, SUPPORTED_LOCALES
from yt2blog.utils.log import get_logger

logger = get_logger()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_PRODUCTION_ORIGIN = "https://your-domain.vercel.app"
DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

_EXTRA_KEY_ENV: Dict[str, List[str]] = {
    "gemini": ["GOOGLE_API_KEY"],
    "anthropic": ["ANTHROPIC_AUTH_TOKEN"],
    "zhipu": ["ZHIPUAI_API_KEY", "GLM_API_KEY"],
    "moonshot": ["KIMI_API_KEY"],
    "cohere": ["CO_API_KEY"],
}


def _split_csv(value: Optional[str]) -> List[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def get_allowed_origins(
    environment: str,
    explicit: Optional[str] = None,
    client_url: Optional[str] = None,
) -> List[str]:
    """CORS origins: explicit list, else the production client URL, else local dev."""
    origins = _split_csv(explicit)
    if origins:
        return origins
    if environment == "production":
        return [client_url or DEFAULT_PRODUCTION_ORIGIN]
    return list(DEV_ORIGINS)


class ServerSettings(BaseModel):
    """Runtime settings of the HTTP relay."""

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    environment: str = "development"
    allowed_origins: List[str] = Field(default_factory=lambda: list(DEV_ORIGINS))
    default_locale: str = DEFAULT_LOCALE
    log_level: str = "WARNING"

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, value: str) -> str:
        return (value or "development").strip().lower()

    @field_validator("default_locale")
    @classmethod
    def _check_locale(cls, value: str) -> str:
        if value not in SUPPORTED_LOCALES:
            logger.warning(
                "[config] Unsupported default locale; falling back",
                extra={"locale": value, "fallback": DEFAULT_LOCALE},
            )
            return DEFAULT_LOCALE
        return value

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ServerSettings:
    """Build ``ServerSettings`` from environment variables."""
    env = os.environ if environ is None else environ
    environment = env.get("ENVIRONMENT", "development")
    port = env.get("YT2BLOG_PORT") or env.get("PORT") or str(DEFAULT_PORT)
    settings = ServerSettings(
        host=env.get("YT2BLOG_HOST", DEFAULT_HOST),
        port=int(port),
        environment=environment,
        allowed_origins=get_allowed_origins(
            environment.strip().lower(),
            env.get("ALLOWED_ORIGINS"),
            env.get("CLIENT_URL"),
        ),
        default_locale=env.get("YT2BLOG_DEFAULT_LOCALE", DEFAULT_LOCALE),
        log_level=env.get("YT2BLOG_LOG_LEVEL", "WARNING").upper(),
    )
    logger.debug(
        "[config] Loaded server settings",
        extra={
            "host": settings.host,
            "port": settings.port,
            "environment": settings.environment,
            "allowed_origins": settings.allowed_origins,
        },
    )
    return settings


def api_key_env_candidates(provider_id: str) -> List[str]:
    """Environment variables to check for a provider's API key."""
    key = provider_id.strip().lower()
    return [f"{key.upper()}_API_KEY", *_EXTRA_KEY_ENV.get(key, [])]


def resolve_api_key(
    provider_id: str,
    explicit: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Prefer an explicit key, then the provider's environment variables."""
    if explicit and explicit.strip():
        return explicit.strip()
    env = os.environ if environ is None else environ
    for env_var in api_key_env_candidates(provider_id):
        value = env.get(env_var)
        if value and value.strip():
            return value.strip()
    return None
