"""Turn a raw model response into a quiz candidate.

Two readings are tried in order:

1. **Structured**: when the text looks like JSON (``{...}`` or an
   ``"answers"`` key), decode it and check it against
   ``StructuredQuizOutput``. Any problem discards this reading.
2. **Templated**: find the ``Question:``, ``Answers:`` and
   ``Correct Answer:`` lines (any order). Answers are comma-separated.

The result is a ``ParseResult`` tagged ``structured``, ``templated`` or
``failed``; nothing here raises except ``parse_response_or_raise``.
Answer count and membership on the templated path are left to the
validator chain.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import ValidationError

from checkpoint_quiz.core.utils import sanitize_null_bytes
from checkpoint_quiz.services.llm_service.llm_schemas import QuizCandidate, StructuredQuizOutput
from checkpoint_quiz.services.llm_service.structured_output import parse_json_object
from checkpoint_quiz.services.quiz.errors import QuizParseError

logger = logging.getLogger(__name__)

QUESTION_PREFIX = "Question:"
ANSWERS_PREFIX = "Answers:"
CORRECT_ANSWER_PREFIX = "Correct Answer:"
TEMPLATE_PREFIXES = (QUESTION_PREFIX, ANSWERS_PREFIX, CORRECT_ANSWER_PREFIX)

_ANSWERS_FIELD_MARKER = '"answers"'
_FENCE_LINE_RE = re.compile(r"^```[A-Za-z]*$")


class ParseKind(str, Enum):
    STRUCTURED = "structured"
    TEMPLATED = "templated"
    FAILED = "failed"


@dataclass(frozen=True)
class ParseResult:
    kind: ParseKind
    candidate: Optional[QuizCandidate] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind is not ParseKind.FAILED

    @classmethod
    def failed(cls, error: str) -> "ParseResult":
        return cls(kind=ParseKind.FAILED, error=error)


# ── Structured reading ────────────────────────────────────────


def looks_structured(text: str) -> bool:
    return (text.startswith("{") and text.endswith("}")) or _ANSWERS_FIELD_MARKER in text


def _parse_structured(text: str) -> Optional[QuizCandidate]:
    try:
        data = parse_json_object(text)
        return StructuredQuizOutput.model_validate(data).to_candidate()
    except (ValidationError, ValueError) as exc:
        logger.debug(f"Structured reading discarded: {type(exc).__name__}: {str(exc)[:200]}")
        return None


# ── Line-template reading ─────────────────────────────────────


def _first_with_prefix(lines: List[str], prefix: str) -> Optional[str]:
    return next((line for line in lines if line.startswith(prefix)), None)


def _parse_template(text: str) -> ParseResult:
    lines = [line.strip() for line in text.splitlines()]

    question_line = _first_with_prefix(lines, QUESTION_PREFIX)
    answers_line = _first_with_prefix(lines, ANSWERS_PREFIX)
    correct_line = _first_with_prefix(lines, CORRECT_ANSWER_PREFIX)

    missing = [
        prefix
        for prefix, line in zip(TEMPLATE_PREFIXES, (question_line, answers_line, correct_line))
        if line is None
    ]
    if missing:
        return ParseResult.failed(
            f"Invalid response format from LLM: missing {', '.join(repr(p) for p in missing)} line"
        )

    # The template is exactly three lines; prose around it is a format violation
    commentary = [
        line for line in lines
        if line and not line.startswith(TEMPLATE_PREFIXES) and not _FENCE_LINE_RE.match(line)
    ]
    if commentary:
        return ParseResult.failed(
            f"Invalid response format from LLM: unexpected commentary {commentary[0][:80]!r}"
        )

    candidate = QuizCandidate(
        question=question_line[len(QUESTION_PREFIX):].strip(),
        answers=[ans.strip() for ans in answers_line[len(ANSWERS_PREFIX):].split(",")],
        correct_answer=correct_line[len(CORRECT_ANSWER_PREFIX):].strip(),
    )
    return ParseResult(kind=ParseKind.TEMPLATED, candidate=candidate)


# ── Public API ────────────────────────────────────────────────


def parse_response(raw: str) -> ParseResult:
    """Read a model response as JSON first, then as the three-line template."""
    text = sanitize_null_bytes(raw or "").strip()
    if not text:
        return ParseResult.failed("Invalid response format from LLM: empty response")

    if looks_structured(text):
        candidate = _parse_structured(text)
        if candidate is not None:
            return ParseResult(kind=ParseKind.STRUCTURED, candidate=candidate)

    return _parse_template(text)


def parse_response_or_raise(raw: str) -> QuizCandidate:
    result = parse_response(raw)
    if not result.ok:
        raise QuizParseError(result.error)
    return result.candidate
