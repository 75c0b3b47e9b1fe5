"""Health check endpoint.

Checks component availability:
- LLM provider configuration
- Quiz prompt templates
"""

from __future__ import annotations

import logging
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from checkpoint_quiz.core.config import settings
from checkpoint_quiz.prompts import get_quiz_prompt
from checkpoint_quiz.services.llm_service.llm import get_llm_structured
from checkpoint_quiz.services.quiz.models import PromptVariant

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint - verify quiz components.

    Returns:
        JSON with status of each component
    """
    health_status = {
        "llm": "unknown",
        "prompts": "unknown",
        "provider": settings.LLM_PROVIDER,
        "overall": "unknown",
    }

    # Check LLM (configuration only; a real call would cost a request)
    try:
        get_llm_structured()
        health_status["llm"] = "ok"
        logger.debug("LLM health check: OK")
    except Exception as e:
        health_status["llm"] = "error"
        logger.error(f"LLM health check failed: {e}")

    # Check every prompt template loads and embeds content
    try:
        for variant in PromptVariant:
            if "health-probe" not in get_quiz_prompt("health-probe", variant):
                raise ValueError(f"template {variant.value} does not embed content")
        health_status["prompts"] = "ok"
    except (OSError, ValueError) as e:
        health_status["prompts"] = "error"
        logger.error(f"Prompt template health check failed: {e}")

    if health_status["llm"] == "ok" and health_status["prompts"] == "ok":
        health_status["overall"] = "healthy"
        status_code = 200
    else:
        health_status["overall"] = "unhealthy"
        status_code = 503

    return JSONResponse(content=health_status, status_code=status_code)


@router.get("/health/simple")
async def simple_health_check():
    """Simple health check - just returns 200 OK.

    For basic uptime monitoring without component checks.
    """
    return {"status": "ok"}
