"""Value system for evalfilter: runtime values, truthiness, coercion and comparison."""
from __future__ import annotations
from enum import Enum
from typing import Any, Callable, Optional
from decimal import Decimal
import math
import struct

from .errors import NotCoercibleToNumber, UnknownOperator, ValueOutOfRange


class ValueType(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    STRING = "string"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    ARRAY = "array"
    MAP = "map"
    OBJECT = "object"


SIGNED_INTEGERS = {
    ValueType.INT: 64,
    ValueType.INT8: 8,
    ValueType.INT16: 16,
    ValueType.INT32: 32,
    ValueType.INT64: 64,
}

UNSIGNED_INTEGERS = {
    ValueType.UINT: 64,
    ValueType.UINT8: 8,
    ValueType.UINT16: 16,
    ValueType.UINT32: 32,
    ValueType.UINT64: 64,
}

INTEGERS = {**SIGNED_INTEGERS, **UNSIGNED_INTEGERS}

FLOATS = (ValueType.FLOAT32, ValueType.FLOAT64)


class Value:
    """Wraps a Python value with its evalfilter type."""

    __slots__ = ("value", "type")

    def __init__(self, value: Any, value_type: ValueType):
        self.value = value
        self.type = value_type

    def __repr__(self):
        return f"Value({self.type.value}: {self.value!r})"

    def __str__(self):
        if self.type == ValueType.NULL:
            return "null"
        if self.type == ValueType.BOOLEAN:
            return "true" if self.value else "false"
        if self.type == ValueType.STRING:
            return self.value
        if self.type in INTEGERS:
            return str(self.value)
        if self.type in FLOATS:
            return _format_float(self.value, self.type == ValueType.FLOAT32)
        if self.type == ValueType.ARRAY:
            inner = ", ".join(str(v) for v in self.value)
            return f"[{inner}]"
        if self.type == ValueType.MAP:
            pairs = ", ".join(f"{k}: {v}" for k, v in self.value.items())
            return f"{{{pairs}}}"
        return str(self.value)

    def type_name(self) -> str:
        return self.type.value

    def to_native(self) -> Any:
        """Convert back to a plain Python value for embedding code."""
        if self.type == ValueType.ARRAY:
            return [v.to_native() for v in self.value]
        if self.type == ValueType.MAP:
            return {k: v.to_native() for k, v in self.value.items()}
        return self.value

    def iterate(self) -> ValueIterator:
        if self.type not in (ValueType.ARRAY, ValueType.STRING, ValueType.MAP):
            raise TypeError(f"{self.type_name()} value is not iterable")
        return ValueIterator(self)


class ValueIterator:
    """A cursor over an iterable Value. The value itself is never modified."""

    def __init__(self, target: Value):
        self.target = target
        self.offset = 0
        if target.type == ValueType.MAP:
            self._keys = list(target.value.keys())
        else:
            self._keys = None

    def reset(self):
        self.offset = 0

    def next(self) -> tuple[Optional[Value], Any, bool]:
        if self._keys is not None:
            if self.offset < len(self._keys):
                key = self._keys[self.offset]
                self.offset += 1
                return self.target.value[key], key, True
            return None, 0, False

        if self.offset < len(self.target.value):
            self.offset += 1
            element = self.target.value[self.offset - 1]
            if self.target.type == ValueType.STRING:
                element = ef_string(element)
            return element, self.offset - 1, True
        return None, 0, False


def _round_float32(value: float) -> float:
    """Round to the nearest single-precision value; overflow becomes +/-Inf."""
    if not math.isfinite(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _shortest_digits(value: float, single: bool) -> str:
    """The fewest significant digits that read back as `value`."""
    if not single:
        return repr(value)
    for places in range(9):
        text = format(value, f".{places}e")
        if _round_float32(float(text)) == value:
            return text
    return repr(value)


def _format_float(value: float, single: bool = False) -> str:
    """Render like %g with shortest digits: exponent form below 1e-4 or from 1e6."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"

    number = Decimal(_shortest_digits(value, single)).normalize()
    if number.is_zero():
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign, digits, exponent = number.as_tuple()
    point = len(digits) + exponent
    if point - 1 < -4 or point - 1 >= 6:
        mantissa = str(digits[0])
        if len(digits) > 1:
            mantissa += "." + "".join(str(d) for d in digits[1:])
        exp = point - 1
        text = f"{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
        return f"-{text}" if sign else text
    return format(number, "f")


# ============================================================
# Constructors
# ============================================================

def ef_null() -> Value:
    return Value(None, ValueType.NULL)

def ef_bool(value: bool) -> Value:
    return Value(bool(value), ValueType.BOOLEAN)

def ef_string(value: str) -> Value:
    return Value(value, ValueType.STRING)

def ef_int(value: int, value_type: ValueType = ValueType.INT) -> Value:
    if value_type not in INTEGERS:
        raise ValueError(f"{value_type.value} is not an integer type")
    bits = INTEGERS[value_type]
    if value_type in SIGNED_INTEGERS:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        raise ValueOutOfRange(value, value_type.value)
    return Value(int(value), value_type)

def ef_float(value: float, value_type: ValueType = ValueType.FLOAT64) -> Value:
    if value_type not in FLOATS:
        raise ValueError(f"{value_type.value} is not a float type")
    value = float(value)
    if value_type == ValueType.FLOAT32:
        value = _round_float32(value)
    return Value(value, value_type)

def ef_array(elements: list[Value]) -> Value:
    return Value(list(elements), ValueType.ARRAY)

def ef_map(pairs: dict[str, Value]) -> Value:
    return Value(dict(pairs), ValueType.MAP)

def ef_object(obj: Any) -> Value:
    return Value(obj, ValueType.OBJECT)


def from_native(obj: Any) -> Value:
    """Wrap a host value, recursing into lists and dicts."""
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return ef_null()
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return ef_bool(obj)
    if isinstance(obj, int):
        # Too big for int but still a valid uint64
        if (1 << 63) <= obj < (1 << 64):
            return ef_int(obj, ValueType.UINT64)
        return ef_int(obj)
    if isinstance(obj, float):
        return ef_float(obj)
    if isinstance(obj, str):
        return ef_string(obj)
    if isinstance(obj, (list, tuple)):
        return ef_array([from_native(v) for v in obj])
    if isinstance(obj, dict):
        return ef_map({str(k): from_native(v) for k, v in obj.items()})
    return ef_object(obj)


# ============================================================
# Truthiness
# ============================================================

def is_truthy(value: Value, warn: Optional[Callable[[str], None]] = None) -> bool:
    if value.type == ValueType.BOOLEAN:
        return value.value
    if value.type == ValueType.STRING:
        return value.value != ""
    if value.type in INTEGERS or value.type in FLOATS:
        return value.value != 0
    if value.type == ValueType.NULL:
        return False
    if value.type in (ValueType.ARRAY, ValueType.MAP):
        return len(value.value) > 0
    if warn is not None:
        warn(f"unexpected type {type(value.value).__name__} in truth test")
    return False


# ============================================================
# Numeric coercion
# ============================================================

def _parse_float(text: str) -> float:
    """Parse a single-precision float literal. Malformed input is 0, not an error."""
    if text != text.strip() or "_" in text:
        return 0.0
    try:
        return _round_float32(float(text))
    except ValueError:
        return 0.0


def to_number(value: Value) -> float:
    if value.type == ValueType.STRING:
        return _parse_float(value.value)
    if value.type in SIGNED_INTEGERS:
        return float(value.value)
    raise NotCoercibleToNumber(str(value), value.type_name())


# ============================================================
# Comparison
# ============================================================

NUMERIC_OPERATORS: dict[str, Callable[[float, float], bool]] = {
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
}

OPERATORS = ("==", "!=", "~=", "!~", *NUMERIC_OPERATORS)


def compare(left: Value, right: Optional[Value], op: str,
            warn: Optional[Callable[[str], None]] = None) -> bool:
    """Apply a relational operator. The empty operator tests `left` alone."""
    if op == "":
        return is_truthy(left, warn)

    l_str = str(left)
    r_str = str(right)

    if op == "==":
        return l_str == r_str
    if op == "!=":
        return l_str != r_str
    if op == "~=":
        return r_str in l_str
    if op == "!~":
        return r_str not in l_str

    if op not in NUMERIC_OPERATORS:
        raise UnknownOperator(op)

    a = to_number(left)
    b = to_number(right)
    return NUMERIC_OPERATORS[op](a, b)
