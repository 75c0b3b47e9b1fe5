"""Lookup tables and limits used by the quiz validators."""

from __future__ import annotations

import re

REQUIRED_ANSWER_COUNT = 4

# Measured on the normalized answer
MAX_ANSWER_LENGTH = 200

# Catch-all options that let a reader answer without reading (compared normalized)
BANNED_CATCH_ALL_OPTIONS: frozenset[str] = frozenset({
    "all of the above",
    "none of the above",
    "both a and b",
    "all of these",
    "all of the options",
})

# Grounding keywords: alphabetic runs (any script), case-folded
KEYWORD_PATTERN = re.compile(r"[^\W\d_]+")
MIN_KEYWORD_LENGTH = 3
