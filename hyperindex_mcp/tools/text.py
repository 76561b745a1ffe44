"""Text statistics tools: word_count and char_count."""

import re

from pydantic import Field

from hyperindex_mcp.envelope import ToolResponse
from hyperindex_mcp.schema import Flag, Text, ToolParams

WORD_COUNT = "word_count"
WORD_COUNT_DESCRIPTION = "Count the number of whitespace-separated words in a text."

CHAR_COUNT = "char_count"
CHAR_COUNT_DESCRIPTION = "Count the characters in a text, optionally ignoring whitespace."

_WHITESPACE = re.compile(r"\s+")


class WordCountParams(ToolParams):
    text: Text = Field(description="The text to analyze")


class CharCountParams(ToolParams):
    text: Text = Field(description="The text to analyze")
    include_whitespace: Flag = Field(
        default=False, description="Whether to count whitespace characters"
    )


def count_words(text: str) -> int:
    trimmed = text.strip()
    if not trimmed:
        return 0
    return len([token for token in _WHITESPACE.split(trimmed) if token])


def count_chars(text: str, include_whitespace: bool = False) -> int:
    if include_whitespace:
        return len(text)
    return len(_WHITESPACE.sub("", text))


def word_count(params: WordCountParams) -> ToolResponse:
    return ToolResponse.text(str(count_words(params.text)))


def char_count(params: CharCountParams) -> ToolResponse:
    return ToolResponse.text(str(count_chars(params.text, params.include_whitespace)))
