"""Robust JSON extraction from free-form LLM output.

Models asked for "only JSON" still wrap it in markdown fences, prepend
"Here is the JSON:", or leave a trailing comma. This module peels those
layers off before handing the text to ``json``:

1. Direct parse
2. Strip fences / reasoning tags / chatty prefixes and parse
3. Extract the outermost ``{...}`` block and parse
4. ``json_repair`` as a last resort
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict

import json_repair

logger = logging.getLogger(__name__)

# ── JSON Extraction Patterns ──────────────────────────────────

_CODE_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*\n?|```\s*", re.DOTALL)
_THINK_TAG_RE = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
_PREFIX_RE = re.compile(r"^(Here's|Here is|The JSON|Output:|Response:)\s*:?\s*", re.IGNORECASE)


def clean_json_text(text: str) -> str:
    """Remove markdown fences, reasoning tags, and explanatory prefixes."""
    text = _THINK_TAG_RE.sub("", text).strip()
    text = _CODE_FENCE_RE.sub("", text).strip()
    text = _PREFIX_RE.sub("", text)
    return text.strip()


def extract_json_object(text: str) -> str:
    """Return the span from the first ``{`` to the last ``}``."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("No JSON object found")
    return text[start:end + 1]


def parse_json_object(text: str) -> Dict[str, Any]:
    """Extract and parse a JSON object from LLM output.

    Args:
        text: Raw LLM output text

    Returns:
        The decoded object

    Raises:
        ValueError: If no JSON object can be recovered
    """
    try:
        return _decode_object(text)
    except RecursionError:
        raise ValueError("JSON object is nested too deeply to decode") from None


def _decode_object(text: str) -> Dict[str, Any]:
    # Quick path: valid JSON
    try:
        data = json.loads(text)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    cleaned = clean_json_text(text)
    try:
        data = json.loads(cleaned)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    try:
        block = extract_json_object(cleaned)
        data = json.loads(block)
        if isinstance(data, dict):
            return data
    except (ValueError, json.JSONDecodeError):
        block = cleaned

    # Last resort: json_repair fixes quotes, trailing commas, truncation
    repaired = json_repair.loads(block)
    if isinstance(repaired, dict) and repaired:
        logger.debug("JSON object recovered with json_repair")
        return repaired

    raise ValueError(f"Cannot extract a JSON object from LLM response. First 200 chars: {text[:200]}")
