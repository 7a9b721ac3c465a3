"""
Central application configuration using pydantic-settings.

This module provides typed access to environment-based configuration for:
- LLM providers (Ollama, vLLM, OpenAI-compatible endpoints)
- Turn orchestration limits
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMProvider(str, Enum):
    """Supported LLM backends."""

    OLLAMA = "ollama"
    VLLM = "vllm"
    OPENAI = "openai"
    CUSTOM = "custom"


class LLMSettings(BaseSettings):
    """
    Configuration for LLM provider endpoints and models.

    Environment variables (prefix: LLM_):
        LLM_PROVIDER        - ollama | vllm | openai | custom (default: ollama)
        LLM_BASE_URL        - Base URL for OpenAI-compatible API
        LLM_MODEL           - Model name or identifier
        LLM_API_KEY         - Optional API key for authenticated providers
        LLM_TIMEOUT_SECONDS - Request timeout in seconds (default: unset, wait indefinitely)
        LLM_MAX_TOKENS      - Max response tokens (default: 512)
        LLM_TEMPERATURE     - Sampling temperature (default: 0.7)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="LLM_",
    )

    provider: LLMProvider = Field(
        default=LLMProvider.OLLAMA,
        description="LLM backend to use (ollama | vllm | openai | custom).",
    )
    base_url: Optional[str] = Field(
        default=None,
        validate_default=True,
        description="Base URL for OpenAI-compatible API, e.g. http://localhost:11434/v1.",
    )
    model: str = Field(
        default="gemma3:4b",
        description="Model name or identifier.",
    )
    api_key: Optional[SecretStr] = Field(
        default=None,
        description="API key for providers that require authentication.",
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="HTTP request timeout in seconds. Unset means no timeout.",
    )
    max_tokens: int = Field(
        default=512,
        gt=0,
        description="Maximum number of tokens to generate.",
    )
    temperature: float = Field(
        default=0.7,
        ge=0,
        le=2,
        description="Sampling temperature.",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def default_base_url(cls, value: Optional[str], info):
        """
        Provide sensible defaults for base_url depending on the provider.

        - ollama -> http://localhost:11434/v1
        - vllm   -> http://localhost:8000/v1
        - openai -> https://api.openai.com/v1
        - custom -> must be provided explicitly
        """
        if value:
            return value

        provider = info.data.get("provider", LLMProvider.OLLAMA)
        if isinstance(provider, str):
            try:
                provider = LLMProvider(provider)
            except ValueError:
                provider = LLMProvider.OLLAMA

        if provider == LLMProvider.OLLAMA:
            return "http://localhost:11434/v1"
        if provider == LLMProvider.VLLM:
            return "http://localhost:8000/v1"
        if provider == LLMProvider.OPENAI:
            return "https://api.openai.com/v1"

        return value


class TurnSettings(BaseSettings):
    """
    Limits for the turn orchestrator.

    Environment variables (prefix: TURN_):
        TURN_MAX_ITERATIONS      - Decisions per callback cycle before forcing end of turn (default: 8)
        TURN_MAX_CYCLES_PER_TURN - Callback cycles per turn before forcing end of turn (default: 24)
        TURN_HISTORY_CAPACITY    - Turn history ring buffer size (default: 10)
        TURN_HISTORY_EXPOSED     - History entries shown to the decision oracle (default: 5)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="TURN_",
    )

    max_iterations: int = Field(default=8, gt=0)
    max_cycles_per_turn: int = Field(default=24, gt=0)
    history_capacity: int = Field(default=10, gt=0)
    history_exposed: int = Field(default=5, ge=0)

    @field_validator("history_exposed", mode="after")
    @classmethod
    def exposed_within_capacity(cls, value: int, info) -> int:
        capacity = info.data.get("history_capacity", 10)
        return min(value, capacity)


@lru_cache
def get_llm_settings() -> LLMSettings:
    """Return cached LLM settings instance."""
    return LLMSettings()


@lru_cache
def get_turn_settings() -> TurnSettings:
    """Return cached turn settings instance."""
    return TurnSettings()
