"""LLM provider factory with timeout and token limits.

Usage:
    from checkpoint_quiz.services.llm_service.llm import get_llm_structured

    llm = get_llm_structured()
    response = await llm.ainvoke("Hello")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_nvidia_ai_endpoints import ChatNVIDIA
from langchain_ollama import ChatOllama

from checkpoint_quiz.core.config import settings

logger = logging.getLogger(__name__)

# ── Provider registry ─────────────────────────────────────────

_PROVIDERS: Dict[str, Any] = {}

# ── LLM instance cache (keyed on frozen kwargs) ───────────────
_llm_cache: Dict[tuple, Any] = {}
_LLM_CACHE_MAX = 8


def _register_providers():
    """Build the provider map lazily (called once on first ``get_llm_structured``)."""
    if _PROVIDERS:
        return

    _PROVIDERS["OLLAMA"] = _build_ollama
    _PROVIDERS["GOOGLE"] = _build_google
    _PROVIDERS["NVIDIA"] = _build_nvidia


# ── Builder functions ─────────────────────────────────────────


def _build_ollama(temperature: float, top_p: float, max_tokens: int, **extra_kwargs):
    """Build Ollama client with generation parameters."""
    kw = {
        "model": settings.OLLAMA_MODEL,
        "temperature": temperature,
        "top_p": top_p,
        "num_predict": max_tokens,
        "client_kwargs": {"timeout": settings.LLM_TIMEOUT},
    }
    if "top_k" in extra_kwargs:
        kw["top_k"] = extra_kwargs["top_k"]
    return ChatOllama(**kw)


def _build_google(temperature: float, top_p: float, max_tokens: int, **extra_kwargs):
    """Build Google Gemini client with generation parameters."""
    kw = {
        "model": settings.GOOGLE_MODEL,
        "google_api_key": settings.GOOGLE_API_KEY,
        "temperature": temperature,
        "top_p": top_p,
        "max_tokens": max_tokens,
        "timeout": settings.LLM_TIMEOUT,
    }
    if "top_k" in extra_kwargs:
        kw["top_k"] = extra_kwargs["top_k"]
    return ChatGoogleGenerativeAI(**kw)


def _build_nvidia(temperature: float, top_p: float, max_tokens: int, **extra_kwargs):
    """Build NVIDIA client with generation parameters."""
    return ChatNVIDIA(
        model=settings.NVIDIA_MODEL,
        api_key=settings.NVIDIA_API_KEY,
        temperature=temperature,
        top_p=top_p,
        max_tokens=max_tokens,
        model_kwargs={"chat_template_kwargs": {"thinking": False}},  # disable 'thinking'
    )


# ── Public API ────────────────────────────────────────────────


def get_llm_structured(
    temperature: Optional[float] = None,
    top_p: Optional[float] = None,
    max_tokens: Optional[int] = None,
    provider: Optional[str] = None,
    **kwargs
):
    """Return a LLM instance for quiz generation (low temperature, deterministic).

    Args:
        temperature: Generation temperature (default: LLM_TEMPERATURE_STRUCTURED)
        top_p: Nucleus sampling parameter (default: LLM_TOP_P_STRUCTURED)
        max_tokens: Max tokens to generate (default: LLM_MAX_TOKENS)
        provider: Ignore global config and use a specific provider.
        **kwargs: Additional provider-specific parameters

    Returns:
        LangChain chat model configured for structured generation
    """
    _register_providers()

    temp = temperature if temperature is not None else settings.LLM_TEMPERATURE_STRUCTURED
    p = top_p if top_p is not None else settings.LLM_TOP_P_STRUCTURED
    tokens = max_tokens if max_tokens is not None else settings.LLM_MAX_TOKENS

    # top_k only for providers that support it
    active_provider = (provider or settings.LLM_PROVIDER).upper()
    if "top_k" not in kwargs and active_provider in ("GOOGLE", "OLLAMA"):
        kwargs["top_k"] = settings.LLM_TOP_K

    builder = _PROVIDERS.get(active_provider)
    if builder is None:
        logger.warning(f"Unknown LLM_PROVIDER '{active_provider}', falling back to OLLAMA")
        builder = _PROVIDERS["OLLAMA"]

    cache_key = ("structured", active_provider, temp, p, tokens, tuple(sorted(kwargs.items())))
    cached = _llm_cache.get(cache_key)
    if cached is not None:
        return cached

    instance = builder(temperature=temp, top_p=p, max_tokens=tokens, **kwargs)
    if len(_llm_cache) >= _LLM_CACHE_MAX:
        _llm_cache.pop(next(iter(_llm_cache)))
    _llm_cache[cache_key] = instance
    return instance
