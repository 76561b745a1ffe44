"""Basic arithmetic on two finite numbers."""

import math
import operator
from typing import Literal, Union

from pydantic import Field

from hyperindex_mcp.envelope import DomainError, ErrorKind, ToolResponse
from hyperindex_mcp.schema import FiniteNumber, ToolParams

NAME = "calculate"
DESCRIPTION = "Perform a basic arithmetic operation (add, subtract, multiply, divide) on two numbers."

Operation = Literal["add", "subtract", "multiply", "divide"]

_OPERATIONS = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
}

# Largest integer a double represents exactly.
_MAX_EXACT_INT = 2 ** 53


class CalculateParams(ToolParams):
    a: FiniteNumber = Field(description="The first operand")
    b: FiniteNumber = Field(description="The second operand")
    operation: Operation = Field(description="The operation to perform")


def format_number(value: float) -> str:
    """Render 5.0 as "5" and keep the shortest round-trip form otherwise."""
    if value.is_integer() and abs(value) <= _MAX_EXACT_INT:
        return str(int(value))
    return repr(value)


def calculate(params: CalculateParams) -> Union[ToolResponse, DomainError]:
    a, b = float(params.a), float(params.b)
    if params.operation == "divide" and b == 0:
        return DomainError(ErrorKind.DIVISION_BY_ZERO, "Division by zero")

    try:
        result = _OPERATIONS[params.operation](a, b)
    except OverflowError:
        result = math.inf

    if not math.isfinite(result):
        return DomainError(
            ErrorKind.NON_FINITE_RESULT,
            f"Result of {params.operation}({format_number(a)}, {format_number(b)}) "
            "is not a finite number (numeric overflow)",
        )
    return ToolResponse.text(format_number(result))
