"""Prompt template loader.

Each ``get_*_prompt`` function loads a ``.txt`` template from this
package directory and substitutes placeholders.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Dict

from checkpoint_quiz.services.quiz.models import PromptVariant

_DIR = os.path.dirname(__file__)

_QUIZ_TEMPLATES: Dict[PromptVariant, str] = {
    PromptVariant.DEFAULT: "quiz_default_prompt.txt",
    PromptVariant.STRUCTURED_OUTPUT: "quiz_structured_prompt.txt",
    PromptVariant.CONSTRAINED_TEMPLATE: "quiz_constrained_prompt.txt",
}


@lru_cache(maxsize=8)
def _load(filename: str) -> str:
    """Read a template file, caching the result."""
    with open(os.path.join(_DIR, filename), encoding="utf-8") as f:
        return f.read()


def _render(filename: str, subs: Dict[str, str]) -> str:
    """Load *filename* and apply all substitutions."""
    text = _load(filename)
    for key, val in subs.items():
        text = text.replace(key, val)
    return text


# ── Public helpers ────────────────────────────────────────


def get_quiz_prompt(content_text: str, variant: PromptVariant | str = PromptVariant.DEFAULT) -> str:
    """Instruction string for one quiz question over *content_text*.

    ``default`` asks for the three-line ``Question:/Answers:/Correct Answer:``
    format, ``structured-output`` asks for a bare JSON object, and
    ``constrained-template`` keeps the three-line format but spells out the
    answer-count and verbatim-correct-answer rules.
    """
    filename = _QUIZ_TEMPLATES[PromptVariant.parse(variant)]
    return _render(filename, {"{{CONTENT_TEXT}}": content_text})
