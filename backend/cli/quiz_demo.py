#!/usr/bin/env python
"""Generate a checkpoint quiz from the command line.

Usage
-----
    # From backend/
    python -m cli.quiz_demo --content "Paris is the capital of France."
    python -m cli.quiz_demo --content "..." --variant constrained-template --answer Paris
    python -m cli.quiz_demo --scenarios        # scripted mitigation walkthrough, no LLM needed

``--scenarios`` replays three misbehaving model responses against the
default prompt, shows each failure, then retries with the prompt variant
that fixes it. A fourth case checks that empty content is refused before
the model is called.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Type

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from checkpoint_quiz.services.llm_service.model_client import get_model_client  # noqa: E402
from checkpoint_quiz.services.quiz.display import display_quiz, display_quiz_attempt  # noqa: E402
from checkpoint_quiz.services.quiz.errors import (  # noqa: E402
    EmptyContentError,
    QuizGenerationError,
    QuizParseError,
    QuizStructureError,
)
from checkpoint_quiz.services.quiz.generator import create_quiz, submit_quiz_answer  # noqa: E402
from checkpoint_quiz.services.quiz.models import PromptVariant  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
)
logger = logging.getLogger("cli.quiz_demo")


# ── Scripted scenarios ────────────────────────────────────────


@dataclass(frozen=True)
class Scenario:
    name: str
    content: str
    default_response: str
    fixed_response: str
    # Prompt phrases that make the scripted model behave
    triggers: Tuple[str, ...]
    fix_variant: PromptVariant
    expected_error: Type[QuizGenerationError]


SCENARIOS: Tuple[Scenario, ...] = (
    Scenario(
        name="prose-with-noise",
        content="Paris is the capital of France.",
        default_response=(
            "Here is your quiz based on the content provided.\n\n"
            "Question: What is the capital of France?\n"
            "Answers: Paris, Lyon, Marseille, Nice\n"
            "Correct Answer: Paris\n\n"
            "Note: Capitals can be tricky!"
        ),
        fixed_response=(
            '{"question": "What is the capital of France?", '
            '"answers": ["Paris", "Lyon", "Marseille", "Nice"], '
            '"correctAnswer": "Paris"}'
        ),
        triggers=("Return only JSON", "STRICT JSON"),
        fix_variant=PromptVariant.STRUCTURED_OUTPUT,
        expected_error=QuizParseError,
    ),
    Scenario(
        name="wrong-answer-count",
        content="The Seine river flows through Paris.",
        default_response=(
            "Question: Which river flows through Paris?\n"
            "Answers: Seine, Loire, Garonne, Rhône, Danube\n"
            "Correct Answer: Seine"
        ),
        fixed_response=(
            "Question: Which river flows through Paris?\n"
            "Answers: Seine, Loire, Garonne, Rhône\n"
            "Correct Answer: Seine"
        ),
        triggers=("EXACTLY FOUR", "mutually exclusive"),
        fix_variant=PromptVariant.CONSTRAINED_TEMPLATE,
        expected_error=QuizStructureError,
    ),
    Scenario(
        name="missing-correct-answer",
        content="France is one of the five permanent members of the UN Security Council.",
        default_response=(
            "Question: France is a member of which council?\n"
            "Answers: NATO, EU, OECD, G7\n"
            "Correct Answer: UN Security Council"
        ),
        fixed_response=(
            "Question: France is a member of which council?\n"
            "Answers: UN Security Council, NATO, EU, OECD\n"
            "Correct Answer: UN Security Council"
        ),
        triggers=("EXACTLY FOUR", "MUST be copied verbatim"),
        fix_variant=PromptVariant.CONSTRAINED_TEMPLATE,
        expected_error=QuizStructureError,
    ),
)


class ScriptedModelClient:
    """Answers from a scenario script, depending on what the prompt asks for."""

    def __init__(self, scenario: Optional[Scenario] = None):
        self.scenario = scenario
        self.prompts: List[str] = []

    async def execute_llm(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.scenario is None:
            raise RuntimeError("No scripted response")
        if any(trigger in prompt for trigger in self.scenario.triggers):
            return self.scenario.fixed_response
        return self.scenario.default_response


@dataclass
class ScenarioOutcome:
    name: str
    passed: bool
    notes: List[str] = field(default_factory=list)


async def run_scenario(scenario: Scenario) -> ScenarioOutcome:
    outcome = ScenarioOutcome(name=scenario.name, passed=False)
    client = ScriptedModelClient(scenario)

    try:
        await create_quiz(scenario.content, client, PromptVariant.DEFAULT)
        outcome.notes.append("default variant unexpectedly succeeded")
        return outcome
    except scenario.expected_error as e:
        outcome.notes.append(f"default variant failed as expected: {e}")

    quiz = await create_quiz(scenario.content, client, scenario.fix_variant)
    display_quiz(quiz)
    outcome.notes.append(f"{scenario.fix_variant.value} variant succeeded")
    outcome.passed = True
    return outcome


async def run_empty_content_check() -> ScenarioOutcome:
    outcome = ScenarioOutcome(name="empty-content", passed=False)
    client = ScriptedModelClient()
    try:
        await create_quiz("", client)
        outcome.notes.append("empty content unexpectedly accepted")
    except EmptyContentError as e:
        outcome.passed = not client.prompts
        outcome.notes.append(f"refused with {e!r}; model calls={len(client.prompts)}")
    return outcome


async def run_scenarios() -> List[ScenarioOutcome]:
    outcomes = []
    for scenario in SCENARIOS:
        try:
            outcomes.append(await run_scenario(scenario))
        except QuizGenerationError as e:
            logger.error("Scenario %s failed: %s", scenario.name, e)
            outcomes.append(ScenarioOutcome(name=scenario.name, passed=False, notes=[str(e)]))
    outcomes.append(await run_empty_content_check())
    return outcomes


# ── Live generation ───────────────────────────────────────────


async def _generate(content: str, variant: str, answer: Optional[str], provider: Optional[str]) -> None:
    quiz = await create_quiz(content, get_model_client(provider), variant)
    display_quiz(quiz)
    if answer is not None:
        print()
        display_quiz_attempt(submit_quiz_answer(quiz, answer))


# ── CLI entry-point ───────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate a single multiple-choice checkpoint question from text.",
    )
    parser.add_argument("--content", default=None, help="Source text for the question.")
    parser.add_argument(
        "--variant",
        default=None,
        choices=[v.value for v in PromptVariant],
        help="Prompt variant (default: QUIZ_DEFAULT_PROMPT_VARIANT).",
    )
    parser.add_argument("--answer", default=None, help="Submit this answer after the quiz is shown.")
    parser.add_argument("--provider", default=None, help="Override LLM_PROVIDER for this run.")
    parser.add_argument(
        "--scenarios",
        action="store_true",
        default=False,
        help="Replay the scripted failure/mitigation scenarios (no LLM needed).",
    )
    args = parser.parse_args(argv)

    if args.scenarios:
        outcomes = asyncio.run(run_scenarios())
        for outcome in outcomes:
            mark = "✔" if outcome.passed else "✘"
            print(f"{mark} {outcome.name}")
            for note in outcome.notes:
                print(f"    {note}")
        return 0 if all(o.passed for o in outcomes) else 1

    if args.content is None:
        parser.error("--content is required unless --scenarios is given")

    try:
        asyncio.run(_generate(args.content, args.variant, args.answer, args.provider))
    except QuizGenerationError as e:
        print(f"✘ Failed to create quiz: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
