"""Quiz validator chain.

Each validator is a plain function ``(candidate, content) -> None`` that
raises on the first problem it sees. ``run_validator_chain`` applies them
in a fixed order, so the first failing rule decides the error:

1. answer count           -> QuizStructureError
2. correct answer listed  -> QuizStructureError
3. answers well formed    -> QuizSemanticError (empty, too long, duplicate)
4. no catch-all options   -> QuizSemanticError
5. grounded in content    -> QuizSemanticError

All comparisons use ``normalize_text`` except the correct-answer
membership check, which only trims surrounding whitespace.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Set, Tuple

from checkpoint_quiz.core.utils import normalize_text
from checkpoint_quiz.services.llm_service.llm_schemas import QuizCandidate
from checkpoint_quiz.services.quiz.errors import QuizSemanticError, QuizStructureError
from checkpoint_quiz.services.quiz.validation_rules import (
    BANNED_CATCH_ALL_OPTIONS,
    KEYWORD_PATTERN,
    MAX_ANSWER_LENGTH,
    MIN_KEYWORD_LENGTH,
    REQUIRED_ANSWER_COUNT,
)

logger = logging.getLogger(__name__)

Validator = Callable[[QuizCandidate, str], None]


def extract_keywords(text: str) -> Set[str]:
    """Case-folded alphabetic words of at least ``MIN_KEYWORD_LENGTH`` letters."""
    return {
        word.casefold()
        for word in KEYWORD_PATTERN.findall(text or "")
        if len(word) >= MIN_KEYWORD_LENGTH
    }


def find_listed_answer(candidate: QuizCandidate) -> Optional[str]:
    """Return the answer entry equal to the correct answer once both are trimmed."""
    target = candidate.correct_answer.strip()
    return next((ans for ans in candidate.answers if ans.strip() == target), None)


# ── Structural rules ──────────────────────────────────────────


def check_answer_count(candidate: QuizCandidate, content: str) -> None:
    if len(candidate.answers) != REQUIRED_ANSWER_COUNT:
        raise QuizStructureError(
            f"There must be exactly four answers (got {len(candidate.answers)})."
        )


def check_correct_answer_membership(candidate: QuizCandidate, content: str) -> None:
    if find_listed_answer(candidate) is None:
        raise QuizStructureError(
            f"Correct answer must be one of the provided answers "
            f"(got {candidate.correct_answer!r})."
        )


# ── Semantic rules ────────────────────────────────────────────


def check_unique_answers(candidate: QuizCandidate, content: str) -> None:
    seen = {}
    for position, answer in enumerate(candidate.answers, start=1):
        normalized = normalize_text(answer)
        if not normalized:
            raise QuizSemanticError(f"Answer {position} is empty.")
        if len(normalized) > MAX_ANSWER_LENGTH:
            raise QuizSemanticError(
                f"Answer {position} is longer than {MAX_ANSWER_LENGTH} characters."
            )
        if normalized in seen:
            raise QuizSemanticError(
                f"Answers {seen[normalized]} and {position} are duplicates ({answer.strip()!r})."
            )
        seen[normalized] = position


def check_no_catch_all_options(candidate: QuizCandidate, content: str) -> None:
    for position, answer in enumerate(candidate.answers, start=1):
        if normalize_text(answer) in BANNED_CATCH_ALL_OPTIONS:
            raise QuizSemanticError(
                f"Answer {position} is a catch-all option ({answer.strip()!r})."
            )


def check_grounding(candidate: QuizCandidate, content: str) -> None:
    """Question or correct answer must share at least one keyword with the content."""
    content_keywords = extract_keywords(content)
    question_hits = extract_keywords(candidate.question) & content_keywords
    answer_hits = extract_keywords(candidate.correct_answer) & content_keywords
    if not question_hits and not answer_hits:
        raise QuizSemanticError(
            "Quiz is ungrounded: neither the question nor the correct answer "
            "shares a keyword with the content."
        )


VALIDATOR_CHAIN: Tuple[Validator, ...] = (
    check_answer_count,
    check_correct_answer_membership,
    check_unique_answers,
    check_no_catch_all_options,
    check_grounding,
)


def run_validator_chain(candidate: QuizCandidate, content: str) -> None:
    """Apply every validator in order; the first failure propagates."""
    for validator in VALIDATOR_CHAIN:
        validator(candidate, content)
    logger.debug(f"Quiz candidate passed {len(VALIDATOR_CHAIN)} validators")
