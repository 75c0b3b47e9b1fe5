"""
Shared pytest fixtures and configuration for the entire test suite.
Applies to all subdirectories: unit/, api/, e2e/
"""

import sys
import os
from typing import List, Optional, Sequence

import pytest

# ── Ensure backend is importable from every pytest session ──────────────────
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# Minimal env so that Pydantic Settings validates without API keys
os.environ.setdefault("LLM_PROVIDER", "OLLAMA")
os.environ.setdefault("ENVIRONMENT", "development")


# ── Fake model clients ───────────────────────────────────────────────────────

class FakeModelClient:
    """Returns canned responses in order and records every prompt it receives."""

    def __init__(self, responses: Sequence[str] = ()):
        self._responses = list(responses)
        self.prompts: List[str] = []

    async def execute_llm(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._responses:
            raise AssertionError("FakeModelClient ran out of responses")
        return self._responses.pop(0)


class PromptAwareModelClient:
    """Returns ``fixed`` when the prompt contains any trigger phrase, else ``default``."""

    def __init__(self, default: str, fixed: str, triggers: Sequence[str]):
        self.default = default
        self.fixed = fixed
        self.triggers = tuple(triggers)
        self.prompts: List[str] = []

    async def execute_llm(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if any(t in prompt for t in self.triggers):
            return self.fixed
        return self.default


class FailingModelClient:
    """Raises the given exception on every call."""

    def __init__(self, exc: Optional[BaseException] = None):
        self.exc = exc or ConnectionError("connection refused")
        self.prompts: List[str] = []

    async def execute_llm(self, prompt: str) -> str:
        self.prompts.append(prompt)
        raise self.exc


PARIS_CONTENT = "Paris is the capital of France."

PARIS_TEMPLATE = (
    "Question: What is the capital of France?\n"
    "Answers: Paris, Lyon, Marseille, Nice\n"
    "Correct Answer: Paris"
)

PARIS_JSON = (
    '{"question": "What is the capital of France?", '
    '"answers": ["Paris", "Lyon", "Marseille", "Nice"], '
    '"correctAnswer": "Paris"}'
)


@pytest.fixture
def paris_content():
    return PARIS_CONTENT


@pytest.fixture
def template_client():
    """Client that always answers with a clean three-line quiz about Paris."""
    return PromptAwareModelClient(default=PARIS_TEMPLATE, fixed=PARIS_TEMPLATE, triggers=())


@pytest.fixture
def json_client():
    return PromptAwareModelClient(default=PARIS_JSON, fixed=PARIS_JSON, triggers=())


@pytest.fixture
def failing_client():
    return FailingModelClient()


@pytest.fixture
def paris_quiz():
    from checkpoint_quiz.services.quiz.models import Quiz
    return Quiz(
        content=PARIS_CONTENT,
        question="What is the capital of France?",
        answers=("Paris", "Lyon", "Marseille", "Nice"),
        correct_answer="Paris",
    )


# ── FastAPI TestClient fixture ────────────────────────────────────────────────

@pytest.fixture
def app_client():
    """Return a FastAPI TestClient for the full application with overrides cleared afterwards."""
    from fastapi.testclient import TestClient
    from checkpoint_quiz.main import app
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
    app.dependency_overrides.clear()
