"""Plain-text rendering of quizzes and attempts."""

from __future__ import annotations

from string import ascii_uppercase
from typing import Callable, List

from checkpoint_quiz.services.quiz.models import Quiz, QuizAttempt


def _option_lines(quiz: Quiz) -> List[str]:
    return [f"  {ascii_uppercase[i]}. {answer}" for i, answer in enumerate(quiz.answers)]


def format_quiz(quiz: Quiz) -> str:
    lines = [f"Question: {quiz.question}", *_option_lines(quiz), f"Correct Answer: {quiz.correct_answer}"]
    return "\n".join(lines)


def format_quiz_attempt(attempt: QuizAttempt) -> str:
    verdict = "Correct!" if attempt.is_correct else "Incorrect."
    lines = [
        f"Question: {attempt.quiz.question}",
        *_option_lines(attempt.quiz),
        f"Selected Answer: {attempt.selected_answer}",
        f"Correct Answer: {attempt.quiz.correct_answer}",
        f"Result: {verdict}",
    ]
    return "\n".join(lines)


def display_quiz(quiz: Quiz, write: Callable[[str], None] = print) -> None:
    write(format_quiz(quiz))


def display_quiz_attempt(attempt: QuizAttempt, write: Callable[[str], None] = print) -> None:
    write(format_quiz_attempt(attempt))
