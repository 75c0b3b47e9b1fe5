"""
Centralized application configuration.

Uses pydantic BaseSettings for automatic env-var loading and validation.
Import the singleton ``settings`` instance throughout the app.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

from checkpoint_quiz.services.quiz.models import PromptVariant

# Resolve project root once; all relative paths resolve from here
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


class Settings(BaseSettings):
    """Application settings, validated from environment variables."""

    # ── Environment ────────────────────────────────────────
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False

    # ── Logging ───────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "./logs"

    # ── CORS ──────────────────────────────────────────────
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v):
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    # ── LLM ───────────────────────────────────────────────
    LLM_PROVIDER: str = "OLLAMA"  # OLLAMA, GOOGLE, NVIDIA
    OLLAMA_MODEL: str = "llama3"
    GOOGLE_MODEL: str = "models/gemini-2.5-flash"
    GOOGLE_API_KEY: str = ""
    NVIDIA_MODEL: str = "qwen/qwen3.5-397b-a17b"
    NVIDIA_API_KEY: str = ""
    LLM_TIMEOUT: int = 120

    # ── LLM Generation Control ───────────────────────────
    LLM_TEMPERATURE_STRUCTURED: float = 0.1
    LLM_TOP_P_STRUCTURED: float = 0.9
    LLM_MAX_TOKENS: int = 1024
    LLM_TOP_K: int = 50

    # ── Quiz ──────────────────────────────────────────────
    QUIZ_DEFAULT_PROMPT_VARIANT: str = "default"

    @field_validator("LLM_PROVIDER", mode="after")
    @classmethod
    def _uppercase_provider(cls, v: str) -> str:
        v = v.upper()
        valid = {"GOOGLE", "NVIDIA", "OLLAMA"}
        if v not in valid:
            raise ValueError(f"LLM_PROVIDER must be one of {valid}, got {v!r}")
        return v

    @field_validator("QUIZ_DEFAULT_PROMPT_VARIANT", mode="after")
    @classmethod
    def _validate_variant(cls, v: str) -> str:
        try:
            return PromptVariant.parse(v).value
        except ValueError as e:
            raise ValueError(f"QUIZ_DEFAULT_PROMPT_VARIANT: {e}") from None

    @model_validator(mode="after")
    def _resolve_paths_and_cross_validate(self):
        """Resolve the log directory and require the active provider's API key."""
        if self.LOG_DIR and not os.path.isabs(self.LOG_DIR):
            object.__setattr__(self, "LOG_DIR", os.path.join(_PROJECT_ROOT, self.LOG_DIR))

        if self.LLM_PROVIDER == "GOOGLE" and not self.GOOGLE_API_KEY:
            raise ValueError("LLM_PROVIDER is GOOGLE but GOOGLE_API_KEY is not set")
        if self.LLM_PROVIDER == "NVIDIA" and not self.NVIDIA_API_KEY:
            raise ValueError("LLM_PROVIDER is NVIDIA but NVIDIA_API_KEY is not set")

        return self

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()


settings = get_settings()
