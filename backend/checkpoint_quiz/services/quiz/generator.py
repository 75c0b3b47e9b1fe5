"""Checkpoint quiz generation: prompt -> model -> parse -> validate -> Quiz."""

from __future__ import annotations

import logging
from typing import Any, Optional

from checkpoint_quiz.core.config import settings
from checkpoint_quiz.prompts import get_quiz_prompt
from checkpoint_quiz.services.llm_service.model_client import ModelClient
from checkpoint_quiz.services.performance_logger import (
    PerformanceTimer,
    record_llm_time,
    record_validation_time,
)
from checkpoint_quiz.services.quiz.errors import (
    EmptyContentError,
    QuizGenerationError,
    QuizParseError,
    UpstreamModelError,
)
from checkpoint_quiz.services.quiz.models import PromptVariant, Quiz, QuizAttempt
from checkpoint_quiz.services.quiz.response_parser import parse_response
from checkpoint_quiz.services.quiz.validators import find_listed_answer, run_validator_chain

logger = logging.getLogger(__name__)


async def create_quiz(
    content: str,
    model_client: ModelClient,
    prompt_variant: Optional[PromptVariant | str] = None,
) -> Quiz:
    """Generate one validated multiple-choice question over *content*.

    The model is called exactly once. Nothing is retried: a bad response
    surfaces as the error of the first stage that rejects it.

    Args:
        content: Source text the question must be grounded in
        model_client: Anything with ``async execute_llm(prompt) -> str``
        prompt_variant: ``default``, ``structured-output`` or
            ``constrained-template`` (falls back to QUIZ_DEFAULT_PROMPT_VARIANT)

    Returns:
        Quiz whose ``content`` is exactly the *content* passed in

    Raises:
        EmptyContentError: content is empty or whitespace-only (model not called)
        UpstreamModelError: the model client raised
        QuizParseError: response matched neither JSON nor the line template
        QuizStructureError: wrong answer count or correct answer not listed
        QuizSemanticError: empty, duplicate, catch-all, or ungrounded answers
    """
    if not content or not content.strip():
        raise EmptyContentError("Content must not be empty")

    variant = PromptVariant.parse(
        prompt_variant if prompt_variant is not None else settings.QUIZ_DEFAULT_PROMPT_VARIANT
    )
    prompt = get_quiz_prompt(content, variant)
    logger.info(f"Generating quiz (variant={variant.value}, content length={len(content)})")

    with PerformanceTimer() as llm_timer:
        try:
            response = await model_client.execute_llm(prompt)
        except Exception as exc:
            logger.error(f"Model client failed (variant={variant.value}): {type(exc).__name__}: {exc}")
            raise UpstreamModelError(f"Failed to create quiz: model call failed: {exc}") from exc
    record_llm_time(llm_timer.elapsed)

    if not isinstance(response, str):
        raise UpstreamModelError(
            f"Failed to create quiz: model returned {type(response).__name__}, expected text"
        )

    with PerformanceTimer() as validation_timer:
        try:
            quiz = _build_quiz(response, content)
        except QuizGenerationError as exc:
            logger.warning(f"Quiz rejected (variant={variant.value}): {type(exc).__name__}: {exc}")
            raise
    record_validation_time(validation_timer.elapsed)

    logger.info(f"Quiz created (variant={variant.value}, answers={len(quiz.answers)})")
    return quiz


def _build_quiz(response: str, content: str) -> Quiz:
    result = parse_response(response)
    if not result.ok:
        raise QuizParseError(result.error)
    logger.debug(f"Response parsed as {result.kind.value}")

    candidate = result.candidate
    run_validator_chain(candidate, content)

    return Quiz(
        content=content,
        question=candidate.question.strip(),
        answers=tuple(candidate.answers),
        correct_answer=find_listed_answer(candidate),
    )


def submit_quiz_answer(quiz: Quiz, answer: Any) -> QuizAttempt:
    """Record an answer against *quiz*. Correct only on an exact match."""
    selected = "" if answer is None else str(answer)
    return QuizAttempt(
        quiz=quiz,
        selected_answer=selected,
        is_correct=selected == quiz.correct_answer,
    )
