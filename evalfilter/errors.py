"""Errors raised while evaluating an evalfilter script."""
from __future__ import annotations


class FilterError(Exception):
    """Runtime error in an evalfilter script.

    `context` is a trail of descriptions, innermost first, added as the
    error unwinds through the statements that were executing.
    """
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def add_context(self, description: str):
        self.context.append(description)

    def __str__(self):
        if not self.context:
            return self.message
        return f"{self.message} (in {' <- '.join(self.context)})"


class UnknownOperator(FilterError):
    def __init__(self, symbol: str):
        super().__init__(f"unknown operator {symbol!r}")
        self.symbol = symbol


class UnknownCombinator(FilterError):
    def __init__(self, tag: str):
        super().__init__(f"unknown if-expression-type {tag!r}")
        self.tag = tag


class NotCoercibleToNumber(FilterError):
    def __init__(self, rendered: str, type_name: str):
        super().__init__(f"failed to convert {rendered} ({type_name}) to number")
        self.rendered = rendered
        self.type_name = type_name


class MissingOperand(FilterError):
    def __init__(self, symbol: str):
        super().__init__(f"operator {symbol!r} needs a right-hand operand")
        self.symbol = symbol


class ValueOutOfRange(FilterError, ValueError):
    def __init__(self, value: int, type_name: str):
        super().__init__(f"{value} does not fit in {type_name}")
        self.value = value
        self.type_name = type_name


class UnknownFunction(FilterError):
    def __init__(self, name: str):
        super().__init__(f"function '{name}' is not defined")
        self.name = name


class NestingTooDeep(FilterError):
    def __init__(self, depth: int):
        super().__init__(f"statement nesting exceeds maximum depth of {depth}")
        self.depth = depth


class EvaluationCancelled(FilterError):
    """Raised by a host cancellation check to abort a run."""
    def __init__(self, message: str = "evaluation cancelled"):
        super().__init__(message)
