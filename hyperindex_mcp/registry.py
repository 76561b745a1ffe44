"""
Tool registry and dispatch.

The registry is built once at startup and is read-only afterwards:

    registry = ToolRegistry()
    registry.register("calculate", "Basic arithmetic", CalculateParams, calculate)
    response = await registry.dispatch("calculate", {"a": 1, "b": 2, "operation": "add"})

dispatch() never raises for a tool-level failure. Unknown names, invalid
parameters, domain errors and unexpected handler exceptions all come back as
a ToolResponse with isError set.
"""

import inspect
import logging
import time
import traceback
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Tuple, Type

from pydantic import BaseModel

from hyperindex_mcp.envelope import DomainError, ErrorKind, ToolResponse
from hyperindex_mcp.schema import is_param_model, json_schema, validate_params

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


class ToolRegistrationError(Exception):
    """Raised at startup when a tool cannot be registered."""


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    schema: Type[BaseModel]
    handler: Handler
    input_schema: Dict[str, Any]


def _time_call() -> Tuple[float, Callable[[], float]]:
    """Simple wall-clock timer for execution duration."""
    start = time.perf_counter()

    def done() -> float:
        return time.perf_counter() - start

    return start, done


def _describe_exception(exc: BaseException) -> str:
    message = str(exc).strip()
    return message or exc.__class__.__name__


class ToolRegistry:
    """Name -> ToolDescriptor mapping plus the dispatch boundary."""

    def __init__(self):
        self._tools: Dict[str, ToolDescriptor] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def register(
        self,
        name: str,
        description: str,
        schema: Type[BaseModel],
        handler: Handler,
    ) -> ToolDescriptor:
        if not isinstance(name, str) or not name.strip():
            raise ToolRegistrationError("Tool name must be a non-empty string")
        if name in self._tools:
            raise ToolRegistrationError(f"Tool '{name}' is already registered")
        if not is_param_model(schema):
            raise ToolRegistrationError(
                f"Tool '{name}' schema must be a pydantic model class, got {schema!r}"
            )
        if not callable(handler):
            raise ToolRegistrationError(f"Tool '{name}' handler is not callable")
        try:
            input_schema = json_schema(schema)
        except Exception as e:
            raise ToolRegistrationError(f"Tool '{name}' has a malformed schema: {e}") from e

        descriptor = ToolDescriptor(
            name=name,
            description=description,
            schema=schema,
            handler=handler,
            input_schema=input_schema,
        )
        self._tools[name] = descriptor
        logger.info(f"Registered tool: {name}")
        return descriptor

    def get(self, name: str) -> ToolDescriptor:
        try:
            return self._tools[name]
        except KeyError:
            raise KeyError(f"Tool '{name}' not found") from None

    def names(self) -> List[str]:
        return list(self._tools)

    async def dispatch(self, name: str, payload: Any = None) -> ToolResponse:
        call_id = uuid.uuid4().hex[:8]
        _, done = _time_call()

        descriptor = self._tools.get(name)
        if descriptor is None:
            available = ", ".join(self.names()) or "none"
            logger.warning(f"[{call_id}] unknown tool '{name}' requested")
            return DomainError(
                ErrorKind.NOT_FOUND,
                f"Tool '{name}' not found. Available tools: {available}",
            ).to_response()

        logger.debug(f"[{call_id}] {name}() invoked")
        params = validate_params(descriptor.schema, payload, tool_name=name)
        if isinstance(params, DomainError):
            logger.warning(f"[{call_id}] {name}() rejected: {params.detail}")
            return params.to_response()

        try:
            result = descriptor.handler(params)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            tb = "".join(traceback.format_exception(type(e), e, e.__traceback__))
            logger.error(f"[{call_id}] {name}() unexpected error after {done():.6f}s:\n{tb}")
            return ToolResponse.error(f"Error executing tool '{name}': {_describe_exception(e)}")

        response = self._normalize(name, result)
        if response.is_error:
            logger.warning(f"[{call_id}] {name}() failed in {done():.6f}s: {response.joined_text}")
        else:
            logger.info(f"[{call_id}] {name}() success in {done():.6f}s")
        return response

    @staticmethod
    def _normalize(name: str, result: Any) -> ToolResponse:
        if isinstance(result, ToolResponse):
            return result
        if isinstance(result, DomainError):
            return result.to_response()
        if isinstance(result, str):
            return ToolResponse.text(result)
        return ToolResponse.error(
            f"Tool '{name}' returned an unsupported result type: {type(result).__name__}"
        )
