"""Built-in functions available to every evalfilter script.

Each built-in is a callable of signature
(environment, args: list[Value]) -> Value.
"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable

from .errors import FilterError
from .types import Value, ValueType, ef_bool, ef_int, ef_string

if TYPE_CHECKING:
    from .environment import Environment

# ---------------------------------------------------------------------------
# Type alias for built-in functions
# ---------------------------------------------------------------------------
BuiltinFunc = Callable[["Environment", list[Value]], Value]


def _expect_args(name: str, args: list[Value], count: int):
    if len(args) != count:
        raise FilterError(f"{name}() expects {count} argument(s), got {len(args)}")


def _fn_print(env: Environment, args: list[Value]) -> Value:
    text = "".join(str(a) for a in args)
    env.output.append(text)
    if not env.quiet:
        print(text)
    return ef_int(len(args))


def _fn_len(env: Environment, args: list[Value]) -> Value:
    _expect_args("len", args, 1)
    arg = args[0]
    if arg.type in (ValueType.STRING, ValueType.ARRAY, ValueType.MAP):
        return ef_int(len(arg.value))
    return ef_int(len(str(arg)))


def _fn_lower(env: Environment, args: list[Value]) -> Value:
    _expect_args("lower", args, 1)
    return ef_string(str(args[0]).lower())


def _fn_upper(env: Environment, args: list[Value]) -> Value:
    _expect_args("upper", args, 1)
    return ef_string(str(args[0]).upper())


def _fn_trim(env: Environment, args: list[Value]) -> Value:
    _expect_args("trim", args, 1)
    return ef_string(str(args[0]).strip())


def _fn_type(env: Environment, args: list[Value]) -> Value:
    _expect_args("type", args, 1)
    return ef_string(args[0].type_name())


def _fn_match(env: Environment, args: list[Value]) -> Value:
    """match(value, pattern): does the regexp match anywhere in the value?"""
    _expect_args("match", args, 2)
    try:
        pattern = re.compile(str(args[1]))
    except re.error as e:
        raise FilterError(f"invalid regular expression {str(args[1])!r}: {e}") from e
    return ef_bool(pattern.search(str(args[0])) is not None)


BUILTINS: dict[str, BuiltinFunc] = {
    "print": _fn_print,
    "len": _fn_len,
    "lower": _fn_lower,
    "upper": _fn_upper,
    "trim": _fn_trim,
    "type": _fn_type,
    "match": _fn_match,
}
