"""Pydantic schemas for validating structured LLM outputs."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator

from checkpoint_quiz.services.quiz.validation_rules import REQUIRED_ANSWER_COUNT


# ── Quiz ──────────────────────────────────────────────────

class QuizCandidate(BaseModel):
    """Raw quiz fields read from a model response, not yet validated.

    Both parser paths produce this shape; the validator chain decides
    whether it becomes a ``Quiz``.
    """

    model_config = ConfigDict(populate_by_name=True)

    question: str
    answers: List[str]
    correct_answer: str = Field(alias="correctAnswer")


class StructuredQuizOutput(BaseModel):
    """Wire schema for the structured-output prompt variant.

    ``{"question": str, "answers": [str, str, str, str], "correctAnswer": str}``
    """

    model_config = ConfigDict(populate_by_name=True)

    question: StrictStr
    answers: List[StrictStr] = Field(
        min_length=REQUIRED_ANSWER_COUNT, max_length=REQUIRED_ANSWER_COUNT
    )
    correct_answer: StrictStr = Field(alias="correctAnswer")

    @model_validator(mode="after")
    def _correct_answer_listed(self) -> "StructuredQuizOutput":
        if self.correct_answer not in self.answers:
            raise ValueError("correctAnswer is not one of answers")
        return self

    def to_candidate(self) -> QuizCandidate:
        return QuizCandidate(
            question=self.question,
            answers=list(self.answers),
            correct_answer=self.correct_answer,
        )
