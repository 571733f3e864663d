"""
Unit tests for model reply cleanup and parsing.

Tests cover:
- strip_code_fences() - removal of ``` / ```json markers
- parse_extraction() - JSON parsing and MalformedResponseError
"""
import json

import pytest

from budget_helper.extraction.exceptions import MalformedResponseError
from budget_helper.extraction.service import strip_code_fences, parse_extraction
from tests.conftest import DEFAULT_BILL, fenced


class TestStripCodeFences:
    """Tests for strip_code_fences() function."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ('```json\n{"a": 1}\n```', '{"a": 1}'),
            ('```\n{"a": 1}\n```', '{"a": 1}'),
            ('```JSON {"a": 1} ```', '{"a": 1}'),
            ('  \n```json\n{"a": 1}\n```\n  ', '{"a": 1}'),
            ('{"a": 1}', '{"a": 1}'),
            ('  {"a": 1}  ', '{"a": 1}'),
            ('```json\n{"a": 1}\n```\n```json\n```', '{"a": 1}'),
            ('', ''),
        ],
    )
    @pytest.mark.unit
    def test_strip_code_fences(self, text, expected):
        assert strip_code_fences(text) == expected

    @pytest.mark.parametrize(
        "text",
        ['{"vendor": "Shop", "amount": 12}', "[1, 2, 3]", "plain text reply"],
    )
    @pytest.mark.unit
    def test_fence_free_text_is_unchanged(self, text):
        assert strip_code_fences(text) == text

    @pytest.mark.unit
    def test_strip_is_idempotent(self):
        once = strip_code_fences(fenced(DEFAULT_BILL))
        assert strip_code_fences(once) == once


class TestParseExtraction:
    """Tests for parse_extraction() function."""

    @pytest.mark.unit
    def test_fenced_json_round_trip(self):
        record = {
            "vendor": "Księgarnia Naukowa",
            "amount": 129.99,
            "date": "2024-02-14",
            "category": "learning_education",
            "items": ["Python course book", "notebook"],
        }
        assert parse_extraction(fenced(record)) == record

    @pytest.mark.unit
    def test_unfenced_json_is_parsed(self):
        assert parse_extraction(json.dumps(DEFAULT_BILL)) == DEFAULT_BILL

    @pytest.mark.unit
    def test_extra_and_missing_fields_are_kept_as_is(self):
        reply = fenced({"vendor": "Gym", "note": "monthly pass"})
        assert parse_extraction(reply) == {"vendor": "Gym", "note": "monthly pass"}

    @pytest.mark.unit
    def test_not_json_raises_malformed_response(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_extraction("not json")
        assert exc_info.value.raw_text == "not json"

    @pytest.mark.unit
    def test_malformed_error_carries_cleaned_text(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_extraction("```json\n{broken\n```")
        assert exc_info.value.raw_text == "{broken"
        assert "{broken" in str(exc_info.value)
