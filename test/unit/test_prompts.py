"""
Unit tests for backend/checkpoint_quiz/prompts/__init__.py
Tests: each variant embeds content, carries its distinguishing instructions,
and the default prompt stays free of the stricter phrasing
"""

import sys
import os
import pytest

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "backend"))
sys.path.insert(0, BACKEND_DIR)

os.environ.setdefault("LLM_PROVIDER", "OLLAMA")

from checkpoint_quiz.prompts import get_quiz_prompt
from checkpoint_quiz.services.quiz.models import PromptVariant

CONTENT = "The Seine river flows through Paris."

STRICT_PHRASES = ["Return only JSON", "STRICT JSON", "EXACTLY FOUR", "mutually exclusive", "MUST be copied verbatim"]


class TestQuizPrompts:

    @pytest.mark.parametrize("variant", list(PromptVariant))
    def test_content_is_embedded(self, variant):
        prompt = get_quiz_prompt(CONTENT, variant)
        assert CONTENT in prompt
        assert "{{CONTENT_TEXT}}" not in prompt

    def test_default_is_the_plain_template(self):
        prompt = get_quiz_prompt(CONTENT)
        assert "Question: <question>" in prompt
        assert "Answers: <answer1>, <answer2>, <answer3>, <answer4>" in prompt
        assert "Correct Answer: <correctAnswer>" in prompt
        for phrase in STRICT_PHRASES:
            assert phrase not in prompt

    def test_structured_output_demands_json(self):
        prompt = get_quiz_prompt(CONTENT, PromptVariant.STRUCTURED_OUTPUT)
        assert "Return only JSON" in prompt
        assert "STRICT JSON" in prompt
        assert '"correctAnswer"' in prompt

    def test_constrained_template_spells_out_rules(self):
        prompt = get_quiz_prompt(CONTENT, PromptVariant.CONSTRAINED_TEMPLATE)
        assert "EXACTLY FOUR" in prompt
        assert "mutually exclusive" in prompt
        assert "MUST be copied verbatim" in prompt
        assert "All of the above" in prompt
        assert "Correct Answer: <correctAnswer>" in prompt

    def test_string_alias_accepted(self):
        assert get_quiz_prompt(CONTENT, "json") == get_quiz_prompt(CONTENT, PromptVariant.STRUCTURED_OUTPUT)

    def test_unknown_variant_raises(self):
        with pytest.raises(ValueError):
            get_quiz_prompt(CONTENT, "haiku")

    def test_content_with_braces_is_kept_verbatim(self):
        content = "Use {placeholders} and {{double}} braces."
        assert content in get_quiz_prompt(content)
