"""
Parameter schemas and validation.

Every tool declares its inputs as a ToolParams subclass. Wire names are
camelCase (``includeWhitespace``), attributes are snake_case.
validate_params() is total: it returns the typed record or a DomainError
listing every violated constraint, and never raises.
"""

from collections.abc import Mapping
from typing import Annotated, Any, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from hyperindex_mcp.envelope import DomainError, ErrorKind

# Strict so "3" or true are not coerced into numbers; ints are accepted.
FiniteNumber = Annotated[float, Field(strict=True, allow_inf_nan=False)]
NonEmptyStr = Annotated[str, Field(strict=True, min_length=1)]
Text = Annotated[str, Field(strict=True)]
Flag = Annotated[bool, Field(strict=True)]


class ToolParams(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


P = TypeVar("P", bound=ToolParams)


def is_param_model(schema: Any) -> bool:
    return isinstance(schema, type) and issubclass(schema, BaseModel)


def json_schema(model: Type[BaseModel]) -> dict:
    """JSON schema advertised to clients, using wire (camelCase) names."""
    return model.model_json_schema(by_alias=True)


def format_validation_error(error: ValidationError, tool_name: Optional[str] = None) -> str:
    problems = []
    for item in error.errors(include_url=False):
        loc = ".".join(str(part) for part in item["loc"]) or "(root)"
        problems.append(f"{loc}: {item['msg']}")
    target = f" for tool '{tool_name}'" if tool_name else ""
    return f"Invalid parameters{target}: " + "; ".join(problems)


def validate_params(
    model: Type[P], payload: Any, tool_name: Optional[str] = None
) -> Union[P, DomainError]:
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        target = f" for tool '{tool_name}'" if tool_name else ""
        return DomainError(
            ErrorKind.INVALID_PARAMS,
            f"Invalid parameters{target}: expected an object, got {type(payload).__name__}",
        )
    try:
        return model.model_validate(dict(payload))
    except ValidationError as e:
        return DomainError(ErrorKind.INVALID_PARAMS, format_validation_error(e, tool_name))
