"""Checkpoint quiz backend.

Generates a single multiple-choice comprehension quiz from a block of text
through a language model, then parses and validates the model's answer.
"""

__version__ = "1.0.0"
