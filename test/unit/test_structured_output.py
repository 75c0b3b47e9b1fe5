"""
Unit tests for backend/checkpoint_quiz/services/llm_service/structured_output.py
Tests: fence/prefix cleaning, object extraction, json_repair fallback, rejection of non-objects
"""

import sys
import os
import pytest

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "backend"))
sys.path.insert(0, BACKEND_DIR)

from checkpoint_quiz.services.llm_service.structured_output import (
    clean_json_text,
    extract_json_object,
    parse_json_object,
)


class TestCleanJsonText:

    def test_strips_code_fences(self):
        assert clean_json_text('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_think_tags(self):
        assert clean_json_text('<think>hmm</think>{"a": 1}') == '{"a": 1}'

    def test_strips_chatty_prefix(self):
        assert clean_json_text('Here is: {"a": 1}') == '{"a": 1}'


class TestExtractJsonObject:

    def test_outermost_span(self):
        assert extract_json_object('noise {"a": {"b": 1}} tail') == '{"a": {"b": 1}}'

    def test_no_object_raises(self):
        with pytest.raises(ValueError, match="No JSON object"):
            extract_json_object("no braces here")


class TestParseJsonObject:

    def test_plain_object(self):
        assert parse_json_object('{"a": 1}') == {"a": 1}

    def test_object_inside_prose(self):
        assert parse_json_object('Sure thing!\n{"a": 1}\nHope that helps.') == {"a": 1}

    def test_trailing_comma_repaired(self):
        assert parse_json_object('{"a": 1, "b": [1, 2,],}') == {"a": 1, "b": [1, 2]}

    def test_single_quotes_repaired(self):
        assert parse_json_object("{'a': 'x'}") == {"a": "x"}

    def test_top_level_list_rejected(self):
        with pytest.raises(ValueError):
            parse_json_object("[1, 2, 3]")

    def test_deep_nesting_is_value_error(self):
        text = '{"answers": ' + "[" * 100000 + "]" * 100000 + "}"
        with pytest.raises(ValueError, match="nested too deeply"):
            parse_json_object(text)
