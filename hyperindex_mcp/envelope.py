"""
Response envelope shared by every tool.

A handler either produces a ToolResponse (success) or a DomainError, which
the registry turns into a ToolResponse with isError set.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from mcp.types import TextContent
from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    INVALID_PARAMS = "invalid_params"
    NOT_FOUND = "not_found"
    DIVISION_BY_ZERO = "division_by_zero"
    NON_FINITE_RESULT = "non_finite_result"
    UNSUPPORTED = "unsupported"
    DIRECTORY_CREATION = "directory_creation"
    COMMAND_FAILED = "command_failed"
    INTERNAL = "internal"


@dataclass(frozen=True)
class DomainError:
    """A recoverable, tool-specific failure reported in-band to the caller."""

    kind: ErrorKind
    detail: str

    def to_response(self) -> "ToolResponse":
        return ToolResponse.error(self.detail)


class ToolResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    content: List[TextContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def text(cls, *texts: str) -> "ToolResponse":
        return cls(content=[TextContent(type="text", text=t) for t in texts])

    @classmethod
    def error(cls, message: str) -> "ToolResponse":
        return cls(content=[TextContent(type="text", text=message)], is_error=True)

    @property
    def joined_text(self) -> str:
        """All text blocks joined with newlines."""
        return "\n".join(block.text for block in self.content)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
