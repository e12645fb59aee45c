from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


def _env(name: str, default: str | None = None) -> str | None:
    val = os.environ.get(name)
    if val is None or val.strip() == "":
        return default
    return val


@dataclass(frozen=True)
class Settings:
    """Settings loaded from environment variables. Blank values count as unset."""

    openrouter_api_key: str | None = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    model: str = "openai/gpt-3.5-turbo"
    max_tokens: int = 1200
    inference_timeout_seconds: float = 20.0
    app_origin: str = "http://localhost:8080"
    app_title: str = "ThinkSpark AI Learning"
    trend_threshold: int = 5
    topic_window_size: int = 50
    speech_locale: str = "en-US"
    session_ttl_seconds: int = 60 * 60
    session_max: int = 10_000
    log_level: str = "INFO"
    port: int = 8080

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            openrouter_api_key=_env("OPENROUTER_API_KEY"),
            openrouter_base_url=_env("OPENROUTER_BASE_URL", cls.openrouter_base_url).rstrip("/"),
            model=_env("OPENROUTER_MODEL", cls.model),
            max_tokens=int(_env("OPENROUTER_MAX_TOKENS", str(cls.max_tokens))),
            inference_timeout_seconds=float(_env("INFERENCE_TIMEOUT_SECONDS", str(cls.inference_timeout_seconds))),
            app_origin=_env("APP_ORIGIN", cls.app_origin),
            app_title=_env("APP_TITLE", cls.app_title),
            trend_threshold=int(_env("TREND_THRESHOLD", str(cls.trend_threshold))),
            topic_window_size=int(_env("TOPIC_WINDOW_SIZE", str(cls.topic_window_size))),
            speech_locale=_env("SPEECH_LOCALE", cls.speech_locale),
            session_ttl_seconds=int(_env("SESSION_TTL_SECONDS", str(cls.session_ttl_seconds))),
            session_max=int(_env("SESSION_MAX", str(cls.session_max))),
            log_level=_env("LOG_LEVEL", cls.log_level).upper(),
            port=int(_env("PORT", str(cls.port))),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
