"""
Text Tool Tests
"""
import pytest

from hyperindex_mcp.tools.text import count_chars, count_words


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", 0),
        ("  ", 0),
        ("\n\t ", 0),
        ("a b  c", 3),
        ("  leading and trailing  ", 3),
        ("one\ntwo\tthree", 3),
        ("single", 1),
    ],
)
def test_count_words(text, expected):
    assert count_words(text) == expected


def test_count_chars():
    assert count_chars("a b") == 2
    assert count_chars("a b", include_whitespace=True) == 3
    assert count_chars(" a\tb\nc ", include_whitespace=False) == 3
    assert count_chars("", include_whitespace=True) == 0


async def test_word_count_tool(registry):
    response = await registry.dispatch("word_count", {"text": "a b  c"})
    assert response.is_error is False
    assert response.joined_text == "3"


async def test_char_count_defaults_to_excluding_whitespace(registry):
    omitted = await registry.dispatch("char_count", {"text": "a b"})
    excluded = await registry.dispatch("char_count", {"text": "a b", "includeWhitespace": False})
    included = await registry.dispatch("char_count", {"text": "a b", "includeWhitespace": True})
    assert omitted.joined_text == "2"
    assert excluded.joined_text == "2"
    assert included.joined_text == "3"


async def test_missing_text_is_invalid(registry):
    response = await registry.dispatch("word_count", {})
    assert response.is_error is True
    assert "text:" in response.joined_text
