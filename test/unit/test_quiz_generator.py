"""
Unit tests for backend/checkpoint_quiz/services/quiz/generator.py
Tests: create_quiz happy paths, empty-content guard, upstream error wrapping,
parse/validation failures, variant selection, submit_quiz_answer
Uses scripted model clients; no LLM required.
"""

import sys
import os
import asyncio
import pytest

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "backend"))
sys.path.insert(0, BACKEND_DIR)

os.environ.setdefault("LLM_PROVIDER", "OLLAMA")

from pydantic import ValidationError

from checkpoint_quiz.services.quiz.errors import (
    EmptyContentError,
    QuizGenerationError,
    QuizParseError,
    QuizSemanticError,
    QuizStructureError,
    UpstreamModelError,
)
from checkpoint_quiz.services.quiz.generator import create_quiz, submit_quiz_answer
from checkpoint_quiz.services.quiz.models import PromptVariant, Quiz, QuizAttempt
from conftest import (
    PARIS_CONTENT,
    PARIS_JSON,
    PARIS_TEMPLATE,
    FailingModelClient,
    FakeModelClient,
)


class TestCreateQuizSuccess:

    @pytest.mark.asyncio
    async def test_template_response_builds_quiz(self, template_client):
        quiz = await create_quiz(PARIS_CONTENT, template_client)
        assert isinstance(quiz, Quiz)
        assert quiz.question == "What is the capital of France?"
        assert quiz.answers == ("Paris", "Lyon", "Marseille", "Nice")
        assert quiz.correct_answer == "Paris"

    @pytest.mark.asyncio
    async def test_json_response_builds_quiz(self, json_client):
        quiz = await create_quiz(PARIS_CONTENT, json_client, PromptVariant.STRUCTURED_OUTPUT)
        assert quiz.correct_answer == "Paris"
        assert len(quiz.answers) == 4

    @pytest.mark.asyncio
    async def test_content_is_preserved_exactly(self):
        content = "  Paris is the capital of France.\n"
        quiz = await create_quiz(content, FakeModelClient([PARIS_TEMPLATE]))
        assert quiz.content == content

    @pytest.mark.asyncio
    async def test_quiz_is_frozen(self, template_client):
        quiz = await create_quiz(PARIS_CONTENT, template_client)
        with pytest.raises(ValidationError):
            quiz.question = "changed"

    @pytest.mark.asyncio
    async def test_model_called_exactly_once(self):
        client = FakeModelClient([PARIS_TEMPLATE])
        await create_quiz(PARIS_CONTENT, client)
        assert len(client.prompts) == 1
        assert PARIS_CONTENT in client.prompts[0]

    @pytest.mark.asyncio
    async def test_correct_answer_taken_from_listed_entry(self):
        raw = "Question: Capital of France?\nAnswers: Paris, Lyon, Marseille, Nice\nCorrect Answer: Paris"
        quiz = await create_quiz(PARIS_CONTENT, FakeModelClient([raw]))
        assert quiz.correct_answer in quiz.answers


class TestVariantSelection:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("variant,marker", [
        ("default", "Format the response as follows"),
        ("structured-output", "Return only JSON"),
        ("json", "STRICT JSON"),
        ("constrained-template", "EXACTLY FOUR"),
        (PromptVariant.CONSTRAINED_TEMPLATE, "MUST be copied verbatim"),
    ])
    async def test_variant_selects_prompt(self, variant, marker):
        client = FakeModelClient([PARIS_TEMPLATE])
        await create_quiz(PARIS_CONTENT, client, variant)
        assert marker in client.prompts[0]

    @pytest.mark.asyncio
    async def test_unknown_variant_raises_value_error_before_call(self):
        client = FakeModelClient([PARIS_TEMPLATE])
        with pytest.raises(ValueError, match="Unknown prompt variant"):
            await create_quiz(PARIS_CONTENT, client, "freestyle")
        assert client.prompts == []

    @pytest.mark.asyncio
    async def test_no_variant_uses_configured_default(self, monkeypatch):
        from checkpoint_quiz.services.quiz import generator
        monkeypatch.setattr(generator.settings, "QUIZ_DEFAULT_PROMPT_VARIANT", "structured-output")
        client = FakeModelClient([PARIS_JSON])
        await create_quiz(PARIS_CONTENT, client)
        assert "Return only JSON" in client.prompts[0]


class TestCreateQuizFailures:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   ", "\n\t "])
    async def test_empty_content_raises_before_model_call(self, content):
        client = FakeModelClient([PARIS_TEMPLATE])
        with pytest.raises(EmptyContentError, match="Content must not be empty"):
            await create_quiz(content, client)
        assert client.prompts == []

    @pytest.mark.asyncio
    async def test_model_error_is_wrapped_with_cause(self):
        original = ConnectionError("connection refused")
        client = FailingModelClient(original)
        with pytest.raises(UpstreamModelError, match="connection refused") as excinfo:
            await create_quiz(PARIS_CONTENT, client)
        assert excinfo.value.__cause__ is original

    @pytest.mark.asyncio
    async def test_cancellation_is_not_wrapped(self):
        client = FailingModelClient(asyncio.CancelledError())
        with pytest.raises(asyncio.CancelledError):
            await create_quiz(PARIS_CONTENT, client)

    @pytest.mark.asyncio
    async def test_non_text_response_is_upstream_error(self):
        client = FakeModelClient([None])
        with pytest.raises(UpstreamModelError, match="expected text"):
            await create_quiz(PARIS_CONTENT, client)

    @pytest.mark.asyncio
    async def test_unparseable_response_raises_parse_error(self):
        with pytest.raises(QuizParseError, match="Invalid response format"):
            await create_quiz(PARIS_CONTENT, FakeModelClient(["no quiz here"]))

    @pytest.mark.asyncio
    async def test_deeply_nested_json_raises_parse_error(self):
        raw = '{"answers": ' + "[" * 100000 + "]" * 100000 + "}"
        with pytest.raises(QuizParseError):
            await create_quiz(PARIS_CONTENT, FakeModelClient([raw]))

    @pytest.mark.asyncio
    async def test_wrong_answer_count_raises_structure_error(self):
        raw = "Question: Capital of France?\nAnswers: Paris, Lyon, Marseille, Nice, Lille\nCorrect Answer: Paris"
        with pytest.raises(QuizStructureError, match="exactly four answers"):
            await create_quiz(PARIS_CONTENT, FakeModelClient([raw]))

    @pytest.mark.asyncio
    async def test_unlisted_correct_answer_raises_structure_error(self):
        raw = "Question: Capital of France?\nAnswers: Lyon, Marseille, Nice, Lille\nCorrect Answer: Paris"
        with pytest.raises(QuizStructureError, match="one of the provided answers"):
            await create_quiz(PARIS_CONTENT, FakeModelClient([raw]))

    @pytest.mark.asyncio
    async def test_catch_all_option_raises_semantic_error(self):
        raw = "Question: Capital of France?\nAnswers: Paris, Lyon, Nice, None of the above\nCorrect Answer: Paris"
        with pytest.raises(QuizSemanticError, match="catch-all"):
            await create_quiz(PARIS_CONTENT, FakeModelClient([raw]))

    @pytest.mark.asyncio
    async def test_ungrounded_quiz_raises_semantic_error(self):
        raw = "Question: Who wrote Hamlet?\nAnswers: Shakespeare, Marlowe, Jonson, Kyd\nCorrect Answer: Shakespeare"
        with pytest.raises(QuizSemanticError, match="ungrounded"):
            await create_quiz(PARIS_CONTENT, FakeModelClient([raw]))

    @pytest.mark.asyncio
    async def test_all_failures_share_base_class(self):
        with pytest.raises(QuizGenerationError):
            await create_quiz("", FakeModelClient())


class TestSubmitQuizAnswer:

    def test_correct_answer(self, paris_quiz):
        attempt = submit_quiz_answer(paris_quiz, "Paris")
        assert isinstance(attempt, QuizAttempt)
        assert attempt.is_correct is True
        assert attempt.selected_answer == "Paris"
        assert attempt.quiz is paris_quiz

    @pytest.mark.parametrize("answer", ["Lyon", "paris", " Paris", "", "Berlin"])
    def test_anything_else_is_incorrect(self, paris_quiz, answer):
        assert submit_quiz_answer(paris_quiz, answer).is_correct is False

    def test_none_answer_is_incorrect_not_an_error(self, paris_quiz):
        attempt = submit_quiz_answer(paris_quiz, None)
        assert attempt.is_correct is False
        assert attempt.selected_answer == ""

    def test_every_listed_answer(self, paris_quiz):
        results = {a: submit_quiz_answer(paris_quiz, a).is_correct for a in paris_quiz.answers}
        assert results == {"Paris": True, "Lyon": False, "Marseille": False, "Nice": False}
