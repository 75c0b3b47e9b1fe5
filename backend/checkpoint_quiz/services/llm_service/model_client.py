"""Text-in / text-out model client used by the quiz orchestrator.

The orchestrator only needs one capability, ``execute_llm(prompt) -> str``.
Anything with that coroutine method qualifies, so tests pass small scripted
stand-ins instead of a real provider.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, runtime_checkable

from checkpoint_quiz.services.llm_service.llm import get_llm_structured

logger = logging.getLogger(__name__)


@runtime_checkable
class ModelClient(Protocol):
    async def execute_llm(self, prompt: str) -> str:
        ...


def _content_to_text(content: Any) -> str:
    """Flatten a LangChain message ``content`` (str or list of parts) into text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return str(content)


class LangChainModelClient:
    """Adapts a LangChain chat model to ``ModelClient``.

    Provider errors (network, auth, quota, timeout) are not caught here;
    the orchestrator wraps them with context.
    """

    def __init__(self, llm: Any):
        self._llm = llm

    async def execute_llm(self, prompt: str) -> str:
        logger.debug(f"Invoking LLM (prompt length: {len(prompt)})")
        response = await self._llm.ainvoke(prompt)
        text = _content_to_text(getattr(response, "content", response))
        logger.debug(f"LLM response received (length: {len(text)})")
        return text


def get_model_client(provider: Optional[str] = None) -> ModelClient:
    """Build a ``ModelClient`` for the configured (or given) provider."""
    return LangChainModelClient(get_llm_structured(provider=provider))
