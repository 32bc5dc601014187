"""Test balanced JSON array extraction from free-form model output."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json

import pytest

from utils.json_extraction import extract_json_array, strip_code_fences


ARRAY = '[{"id": 1, "title": "Senso-ji", "stops": ["Nakamise", "Kaminarimon"]}]'


def test_pure_array_returned_unchanged():
    assert extract_json_array(ARRAY) == ARRAY


@pytest.mark.parametrize("before, after", [
    ("Here is your itinerary:\n", "\nEnjoy your trip!"),
    ("", "\n\nSources: maps.google.com"),
    ("Sure thing. ", ""),
])
def test_array_surrounded_by_prose(before, after):
    """Prose on either side must not leak into the extracted literal."""
    assert extract_json_array(before + ARRAY + after) == ARRAY


def test_trailing_metadata_array_ignored():
    """Only the first balanced array is returned."""
    text = ARRAY + '\n[{"groundingChunks": 3}]'
    assert extract_json_array(text) == ARRAY


def test_escaped_quote_and_brackets_inside_strings():
    literal = r'[{"title": "a \" b"}, "[not real]", "]]]", {"x": ["y"]}]'
    text = "prefix " + literal + " suffix"
    extracted = extract_json_array(text)
    assert extracted == literal
    assert json.loads(extracted)[1] == "[not real]"


def test_escaped_backslash_before_closing_quote():
    """"\\\\" ends with an escaped backslash, so the next quote closes the string."""
    literal = r'["C:\\", "]"]'
    assert extract_json_array(literal + " trailing") == literal


def test_no_bracket_returns_none():
    assert extract_json_array('{"itinerary": "none here"}') is None
    assert extract_json_array("") is None


def test_truncated_array_returns_none():
    """A response cut off mid-array must signal absence, never raise."""
    text = '[{"id": 1, "title": "Senso-ji"}, {"id": 2, "title": "Ueno'
    assert extract_json_array(text) is None


def test_unterminated_string_returns_none():
    assert extract_json_array('["abc]') is None


def test_strip_code_fences():
    text = 'Here is your itinerary:\n```json\n[1, 2]\n```\n'
    assert strip_code_fences(text) == "Here is your itinerary:\n\n[1, 2]"
    assert strip_code_fences("```\n[]\n```") == "[]"
    assert strip_code_fences("  [3]  ") == "[3]"
