"""Quiz domain entities.

``Quiz`` and ``QuizAttempt`` are frozen pydantic models: once the
orchestrator hands one out it is never mutated.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from checkpoint_quiz.services.llm_service.llm_schemas import QuizCandidate
from checkpoint_quiz.services.quiz.errors import QuizSemanticError
from checkpoint_quiz.services.quiz.validation_rules import REQUIRED_ANSWER_COUNT
from checkpoint_quiz.services.quiz.validators import (
    check_no_catch_all_options,
    check_unique_answers,
)


class PromptVariant(str, Enum):
    """Which instruction template is sent to the model."""

    DEFAULT = "default"
    STRUCTURED_OUTPUT = "structured-output"
    CONSTRAINED_TEMPLATE = "constrained-template"

    @classmethod
    def parse(cls, value: "PromptVariant | str | None") -> "PromptVariant":
        """Resolve a variant from its tag or a short alias (``json``, ``constrained``)."""
        if value is None:
            return cls.DEFAULT
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        aliased = _VARIANT_ALIASES.get(key, key)
        try:
            return cls(aliased)
        except ValueError:
            valid = sorted([v.value for v in cls] + list(_VARIANT_ALIASES))
            raise ValueError(f"Unknown prompt variant {value!r}; expected one of {valid}") from None


_VARIANT_ALIASES = {
    "json": PromptVariant.STRUCTURED_OUTPUT.value,
    "structured": PromptVariant.STRUCTURED_OUTPUT.value,
    "constrained": PromptVariant.CONSTRAINED_TEMPLATE.value,
}


class Quiz(BaseModel):
    """A validated single-question quiz over ``content``."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(min_length=1)
    question: str
    answers: Tuple[str, ...]
    correct_answer: str

    @model_validator(mode="after")
    def _check_contract(self) -> "Quiz":
        if not self.content.strip():
            raise ValueError("Content must not be empty")
        if len(self.answers) != REQUIRED_ANSWER_COUNT:
            raise ValueError("There must be exactly four answers.")
        if self.correct_answer not in self.answers:
            raise ValueError("Correct answer must be one of the provided answers.")
        candidate = QuizCandidate(
            question=self.question,
            answers=list(self.answers),
            correct_answer=self.correct_answer,
        )
        try:
            check_unique_answers(candidate, self.content)
            check_no_catch_all_options(candidate, self.content)
        except QuizSemanticError as e:
            raise ValueError(str(e)) from None
        return self


class QuizAttempt(BaseModel):
    """One answer submitted against a quiz."""

    model_config = ConfigDict(frozen=True)

    quiz: Quiz
    selected_answer: str
    is_correct: bool
