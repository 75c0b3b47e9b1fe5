"""Quiz generation routes."""

import logging
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional

from checkpoint_quiz.services.llm_service.model_client import ModelClient, get_model_client
from checkpoint_quiz.services.quiz.errors import (
    EmptyContentError,
    QuizParseError,
    QuizSemanticError,
    QuizStructureError,
    UpstreamModelError,
)
from checkpoint_quiz.services.quiz.generator import create_quiz, submit_quiz_answer
from checkpoint_quiz.services.quiz.models import PromptVariant, Quiz

logger = logging.getLogger(__name__)
router = APIRouter()


class QuizRequest(BaseModel):
    content: str
    prompt_variant: Optional[str] = None


class QuizAttemptRequest(BaseModel):
    quiz: Quiz
    answer: str


def get_quiz_model_client() -> ModelClient:
    """Model client for the configured provider (overridden in tests)."""
    return get_model_client()


@router.post("/quiz")
async def create_quiz_route(
    request: QuizRequest,
    model_client: ModelClient = Depends(get_quiz_model_client),
):
    try:
        variant = PromptVariant.parse(request.prompt_variant) if request.prompt_variant else None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        quiz = await create_quiz(request.content, model_client, prompt_variant=variant)
    except EmptyContentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (QuizParseError, QuizStructureError, QuizSemanticError) as e:
        logger.warning(f"Quiz generation rejected: {type(e).__name__}: {e}")
        raise HTTPException(status_code=422, detail=f"{type(e).__name__}: {e}")
    except UpstreamModelError as e:
        logger.error(f"Quiz generation failed upstream: {e}")
        raise HTTPException(status_code=502, detail="Language model request failed")

    return JSONResponse(content=quiz.model_dump(mode="json"))


@router.post("/quiz/attempt")
async def submit_quiz_attempt_route(request: QuizAttemptRequest):
    attempt = submit_quiz_answer(request.quiz, request.answer)
    return JSONResponse(content=attempt.model_dump(mode="json"))
