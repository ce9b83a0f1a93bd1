"""Variable, function and per-run state for evalfilter."""
from __future__ import annotations
from typing import Any, Callable, Optional, TYPE_CHECKING

from .types import Value, ef_null, from_native

if TYPE_CHECKING:
    from .stdlib import BuiltinFunc


class Environment:
    """Lookup context handed to every statement and argument during one run."""

    def __init__(self, variables: Optional[dict[str, Value]] = None,
                 functions: Optional[dict[str, BuiltinFunc]] = None,
                 max_depth: int = 100, quiet: bool = False,
                 check: Optional[Callable[[], Any]] = None):
        self.variables: dict[str, Value] = dict(variables or {})
        self.functions: dict[str, BuiltinFunc] = dict(functions or {})
        self.max_depth = max_depth
        self.quiet = quiet
        # Cancellation hook, called before every statement
        self.check = check
        self.depth = 0
        self.output: list[str] = []

    def set_variable(self, name: str, value: Any):
        self.variables[name] = from_native(value)

    def get_variable(self, name: str) -> Value:
        return self.variables.get(name) or ef_null()

    def add_function(self, name: str, fn: BuiltinFunc):
        self.functions[name] = fn

    def get_function(self, name: str) -> Optional[BuiltinFunc]:
        return self.functions.get(name)

    def warn(self, message: str):
        self.output.append(f"[evalfilter] Warning: {message}")
