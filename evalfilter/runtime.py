"""Core interpreter runtime for evalfilter: statement sequencing and if-test matching."""
from __future__ import annotations
from typing import Any, Callable, Iterable, Optional

from .ast_nodes import Statement, IfStatement, IfTest
from .environment import Environment
from .errors import FilterError, MissingOperand, NestingTooDeep, UnknownCombinator, UnknownOperator
from .stdlib import BUILTINS, BuiltinFunc
from .types import OPERATORS, compare, from_native, Value


class Outcome:
    """What a statement tells its caller: carry on, or stop with a verdict."""
    __slots__ = ()
    terminated = False


class Continue(Outcome):
    __slots__ = ()

    def __repr__(self):
        return "CONTINUE"


CONTINUE = Continue()


class Terminate(Outcome):
    """Stop the script now; `value` is its verdict."""
    __slots__ = ("value",)
    terminated = True

    def __init__(self, value: bool):
        self.value = value

    def __eq__(self, other):
        return isinstance(other, Terminate) and other.value == self.value

    def __hash__(self):
        return hash(("terminate", self.value))

    def __repr__(self):
        return f"Terminate({self.value})"


# ================================================
# Statement sequences
# ================================================

def run(statements: Iterable[Statement], env: Environment, obj: Any) -> Outcome:
    """Execute statements in order until one of them terminates the script."""
    env.depth += 1
    try:
        if env.depth > env.max_depth:
            raise NestingTooDeep(env.max_depth)

        for stmt in statements:
            if env.check is not None:
                env.check()
            try:
                outcome = stmt.execute(env, obj)
            except RecursionError:
                # Python ran out of stack before max_depth was reached
                raise NestingTooDeep(env.depth) from None
            except FilterError as err:
                err.add_context(stmt.describe())
                raise
            if outcome.terminated:
                return outcome
        return CONTINUE
    finally:
        env.depth -= 1


# ================================================
# If-test matching
# ================================================

def does_match(node: IfStatement, env: Environment, obj: Any) -> bool:
    """Combine the node's tests. `and` stops at the first failure; `or` runs every test."""
    if node.combinator == "and":
        for test in node.tests:
            if not does_match_test(test, env, obj):
                return False
        return True

    if node.combinator == "or":
        matched = False
        for test in node.tests:
            if does_match_test(test, env, obj):
                matched = True
        return matched

    raise UnknownCombinator(node.combinator)


def does_match_test(test: IfTest, env: Environment, obj: Any) -> bool:
    if test.op != "" and test.right is None:
        if test.op not in OPERATORS:
            raise UnknownOperator(test.op)
        raise MissingOperand(test.op)

    left = test.left.resolve(env, obj)

    # Single argument form
    if test.op == "":
        return compare(left, None, "", env.warn)

    right = test.right.resolve(env, obj)
    try:
        return compare(left, right, test.op, env.warn)
    except FilterError as err:
        err.add_context(f"test {str(left)!r} {test.op} {str(right)!r}")
        raise


# ================================================
# Embedding
# ================================================

class Interpreter:
    """Runs a statement tree against subject objects.

    Each call to `run` gets a fresh Environment built from the host's
    variables and functions, so nothing leaks from one subject to the next.
    """

    def __init__(self, statements: Iterable[Statement], flags: dict | None = None):
        self.statements = list(statements)
        self.flags = flags or {}
        self.variables: dict[str, Value] = {}
        self.functions: dict[str, BuiltinFunc] = dict(BUILTINS)
        self.check: Optional[Callable[[], Any]] = None

        # Output of the most recent run (print + warnings)
        self.output: list[str] = []

    def set_variable(self, name: str, value: Any):
        self.variables[name] = from_native(value)

    def add_function(self, name: str, fn: BuiltinFunc):
        self.functions[name] = fn

    def new_environment(self) -> Environment:
        return Environment(
            variables=self.variables,
            functions=self.functions,
            # Python's recursion limit (about 450 levels at the default of
            # 1000) also ends the run with NestingTooDeep.
            max_depth=self.flags.get("max_depth", 100),
            quiet=self.flags.get("quiet", False),
            check=self.check,
        )

    def execute(self, obj: Any = None) -> Outcome:
        """Run the script and return its raw outcome."""
        env = self.new_environment()
        try:
            return run(self.statements, env, obj)
        finally:
            self.output = env.output

    def run(self, obj: Any = None) -> bool:
        """Run the script and return its verdict."""
        outcome = self.execute(obj)
        if outcome.terminated:
            return outcome.value
        return bool(self.flags.get("default", False))
