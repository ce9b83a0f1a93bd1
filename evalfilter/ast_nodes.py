"""Statement and argument node definitions for evalfilter."""
from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

from .errors import UnknownFunction
from .types import Value, ef_null, from_native

if TYPE_CHECKING:
    from .environment import Environment
    from .runtime import Outcome


# ============================================================
# Base
# ============================================================

@dataclass
class ASTNode:
    """Base for all nodes."""
    line: int = field(default=0, kw_only=True)


@dataclass
class Statement(ASTNode):
    """Base for statements.

    Executors for the built-in statement kinds are installed by
    `evalfilter.runtime_statements`; host statements override `execute`.
    """

    def execute(self, env: Environment, obj: Any) -> Outcome:
        raise NotImplementedError(f"{type(self).__name__} has no executor")

    def describe(self) -> str:
        return type(self).__name__


@dataclass
class Argument(ASTNode):
    """Base for operands that resolve to a Value."""

    def resolve(self, env: Environment, obj: Any) -> Value:
        raise NotImplementedError(f"{type(self).__name__} cannot be resolved")


# ============================================================
# Arguments
# ============================================================

@dataclass
class Literal(Argument):
    value: Any = None

    def resolve(self, env: Environment, obj: Any) -> Value:
        return from_native(self.value)

    def __str__(self):
        return repr(str(from_native(self.value)))


@dataclass
class Field(Argument):
    """A field of the subject object: mapping key first, then attribute."""
    name: str = ""

    def resolve(self, env: Environment, obj: Any) -> Value:
        if obj is None:
            return ef_null()
        if isinstance(obj, Mapping):
            if self.name in obj:
                return from_native(obj[self.name])
            return ef_null()
        return from_native(getattr(obj, self.name, None))

    def __str__(self):
        return self.name


@dataclass
class Variable(Argument):
    """A host-supplied variable, written `$name` in diagnostics."""
    name: str = ""

    def resolve(self, env: Environment, obj: Any) -> Value:
        return env.get_variable(self.name)

    def __str__(self):
        return f"${self.name}"


@dataclass
class Call(Argument):
    name: str = ""
    arguments: list[Argument] = field(default_factory=list)

    def resolve(self, env: Environment, obj: Any) -> Value:
        fn = env.get_function(self.name)
        if fn is None:
            raise UnknownFunction(self.name)
        args = [a.resolve(env, obj) for a in self.arguments]
        return fn(env, args)

    def __str__(self):
        inner = ", ".join(str(a) for a in self.arguments)
        return f"{self.name}({inner})"


# ============================================================
# Statements
# ============================================================

@dataclass
class IfTest:
    """One relational test. `right` is absent and `op` empty for a truth test."""
    left: Argument = field(default_factory=Argument)
    op: str = ""
    right: Optional[Argument] = None

    def __str__(self):
        if self.op == "":
            return str(self.left)
        return f"{self.left} {self.op} {self.right}"


@dataclass
class IfStatement(Statement):
    tests: list[IfTest] = field(default_factory=list)
    combinator: str = "and"  # "and" or "or"
    true_branch: list[Statement] = field(default_factory=list)
    false_branch: list[Statement] = field(default_factory=list)

    def describe(self) -> str:
        joiner = f" {self.combinator} "
        return f"if ({joiner.join(str(t) for t in self.tests)})"


@dataclass
class ReturnStatement(Statement):
    value: bool = False

    def describe(self) -> str:
        return f"return {'true' if self.value else 'false'}"


@dataclass
class CallStatement(Statement):
    """A function call evaluated for its side effects."""
    call: Call = field(default_factory=Call)

    def describe(self) -> str:
        return str(self.call)
