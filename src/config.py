from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # LLM
    single_chunk_model: str = "claude-3-5-haiku-latest"
    multi_chunk_model: str = "claude-sonnet-4-20250514"
    single_chunk_max_tokens: int = 2000
    multi_chunk_max_tokens: int = 4000
    speaker_max_tokens: int = 8000
    llm_temperature: float = 0.3
    llm_timeout_seconds: float = 120.0
    llm_max_retries: int = 0  # retries belong above the analyzer

    # Chunking / scheduling
    chunk_threshold: int = 15000
    chunk_size: int = 10000
    inter_call_delay_seconds: float = 1.0  # provider rate limits
    attribute_speakers: bool = True
    apply_rubric: bool = True
    oversized_line_policy: Literal["keep", "split"] = "keep"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
