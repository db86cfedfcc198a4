"""Process configuration, read once from the environment (and .env)."""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from openai import OpenAI

from .errors import ConfigurationError

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_API_VERSION = "2025-01-01-preview"
DEFAULT_WEATHER_URL = "https://api.openweathermap.org/data/2.5"


def _get(env: Mapping[str, str], *names: str) -> Optional[str]:
    """First non-blank value among ``names``."""
    for name in names:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    provider_api_key: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION
    model: str = DEFAULT_MODEL
    weather_api_key: Optional[str] = None
    weather_base_url: str = DEFAULT_WEATHER_URL
    http_timeout: float = 30.0
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env

        raw_timeout = _get(env, "WEATHER_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else 30.0
        except ValueError as e:
            raise ConfigurationError(f"WEATHER_TIMEOUT must be a number, got {raw_timeout!r}") from e

        return cls(
            openai_api_key=_get(env, "OPENAI_API_KEY"),
            openai_base_url=_get(env, "VITE_OPENAI_BASE_URL", "OPENAI_BASE_URL"),
            provider_api_key=_get(env, "VITE_OPENAI_API_KEY"),
            api_version=_get(env, "OPENAI_API_VERSION") or DEFAULT_API_VERSION,
            model=_get(env, "OPENAI_MODEL") or DEFAULT_MODEL,
            weather_api_key=_get(env, "WEATHER_API_KEY"),
            weather_base_url=(_get(env, "WEATHER_BASE_URL") or DEFAULT_WEATHER_URL).rstrip("/"),
            http_timeout=timeout,
            log_level=(_get(env, "LOG_LEVEL") or "WARNING").upper(),
        )


def build_openai_client(settings: Settings) -> OpenAI:
    """OpenAI client that also speaks to Azure-style gateways.

    The gateway key travels in an ``api-key`` header and the API version as a
    default query parameter. Raises ``openai.OpenAIError`` when no key is
    configured at all.
    """
    headers = {"api-key": settings.provider_api_key} if settings.provider_api_key else None
    return OpenAI(
        api_key=settings.openai_api_key or settings.provider_api_key,
        base_url=settings.openai_base_url,
        default_query={"api-version": settings.api_version},
        default_headers=headers,
    )
