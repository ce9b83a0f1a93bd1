"""Tests for the evalfilter value system."""
import math

import pytest
from evalfilter.errors import FilterError, NotCoercibleToNumber, UnknownOperator, ValueOutOfRange
from evalfilter.types import (
    Value, ValueType,
    ef_null, ef_bool, ef_string, ef_int, ef_float, ef_array, ef_map, ef_object,
    from_native, is_truthy, to_number, compare,
)


class TestValueCreation:
    def test_int_default_width(self):
        v = ef_int(42)
        assert v.type == ValueType.INT
        assert v.value == 42

    def test_int_widths(self):
        assert ef_int(-128, ValueType.INT8).value == -128
        assert ef_int(255, ValueType.UINT8).value == 255
        assert ef_int(2**63 - 1, ValueType.INT64).type == ValueType.INT64

    def test_int_out_of_range(self):
        with pytest.raises(ValueError):
            ef_int(128, ValueType.INT8)
        with pytest.raises(ValueError):
            ef_int(-1, ValueType.UINT32)

    def test_int_rejects_float_type(self):
        with pytest.raises(ValueError):
            ef_int(1, ValueType.FLOAT64)

    def test_float32_rounds(self):
        v = ef_float(0.1, ValueType.FLOAT32)
        assert v.type == ValueType.FLOAT32
        assert v.value != 0.1
        assert abs(v.value - 0.1) < 1e-7

    def test_float32_overflow_is_infinite(self):
        assert ef_float(1e300, ValueType.FLOAT32).value == math.inf

    def test_type_name(self):
        assert ef_string("x").type_name() == "string"
        assert ef_int(1, ValueType.UINT16).type_name() == "uint16"


class TestFromNative:
    def test_scalars(self):
        assert from_native(None).type == ValueType.NULL
        assert from_native(True).type == ValueType.BOOLEAN
        assert from_native(7).type == ValueType.INT
        assert from_native(1.5).type == ValueType.FLOAT64
        assert from_native("hi").type == ValueType.STRING

    def test_bool_is_not_int(self):
        assert from_native(False).type == ValueType.BOOLEAN

    def test_list_and_dict(self):
        v = from_native([1, "a", {"k": None}])
        assert v.type == ValueType.ARRAY
        assert v.value[2].type == ValueType.MAP
        assert v.value[2].value["k"].type == ValueType.NULL

    def test_value_passes_through(self):
        v = ef_string("x")
        assert from_native(v) is v

    def test_unknown_is_object(self):
        v = from_native(object())
        assert v.type == ValueType.OBJECT

    def test_large_int_is_uint64(self):
        v = from_native(2**63)
        assert v.type == ValueType.UINT64
        assert str(v) == "9223372036854775808"
        assert from_native(2**64 - 1).type == ValueType.UINT64
        assert from_native(2**63 - 1).type == ValueType.INT
        assert from_native(-2**63).type == ValueType.INT

    def test_int_wider_than_64_bits(self):
        with pytest.raises(ValueOutOfRange) as info:
            from_native(2**64)
        assert isinstance(info.value, FilterError)
        assert info.value.value == 2**64
        with pytest.raises(ValueOutOfRange):
            from_native(-2**63 - 1)


class TestRender:
    def test_null(self):
        assert str(ef_null()) == "null"

    def test_booleans(self):
        assert str(ef_bool(True)) == "true"
        assert str(ef_bool(False)) == "false"

    def test_integral_float_drops_fraction(self):
        assert str(ef_float(1000.0)) == "1000"

    def test_fractional_float(self):
        assert str(ef_float(2.5)) == "2.5"

    def test_exponent_form(self):
        assert str(ef_float(1e6)) == "1e+06"
        assert str(ef_float(123456.0)) == "123456"
        assert str(ef_float(1234567.0)) == "1.234567e+06"
        assert str(ef_float(-2.5e10)) == "-2.5e+10"
        assert str(ef_float(0.0001)) == "0.0001"
        assert str(ef_float(0.00001)) == "1e-05"

    def test_zero(self):
        assert str(ef_float(0.0)) == "0"
        assert str(ef_float(-0.0)) == "-0"

    def test_float32_shortest_digits(self):
        assert str(ef_float(0.1, ValueType.FLOAT32)) == "0.1"
        assert str(ef_float(16777217.0, ValueType.FLOAT32)) == "1.6777216e+07"

    def test_special_floats(self):
        assert str(ef_float(math.inf)) == "+Inf"
        assert str(ef_float(-math.inf)) == "-Inf"
        assert str(ef_float(math.nan)) == "NaN"

    def test_array(self):
        assert str(ef_array([ef_int(1), ef_string("a")])) == "[1, a]"

    def test_map(self):
        assert str(ef_map({"a": ef_int(1)})) == "{a: 1}"


class TestToNative:
    def test_array_recurses(self):
        v = ef_array([ef_int(1), ef_array([ef_string("x")])])
        assert v.to_native() == [1, ["x"]]

    def test_map_recurses(self):
        v = ef_map({"a": ef_bool(True)})
        assert v.to_native() == {"a": True}

    def test_scalar(self):
        assert ef_string("s").to_native() == "s"


class TestIteration:
    def test_array(self):
        it = ef_array([ef_string("a"), ef_string("b")]).iterate()
        first, index, more = it.next()
        assert (str(first), index, more) == ("a", 0, True)
        second, index, more = it.next()
        assert (str(second), index, more) == ("b", 1, True)
        element, _, more = it.next()
        assert element is None
        assert more is False

    def test_reset(self):
        it = ef_array([ef_int(1)]).iterate()
        it.next()
        it.reset()
        element, index, more = it.next()
        assert element.value == 1
        assert index == 0
        assert more is True

    def test_independent_cursors(self):
        arr = ef_array([ef_int(1), ef_int(2)])
        a = arr.iterate()
        b = arr.iterate()
        a.next()
        a.next()
        element, index, _ = b.next()
        assert element.value == 1
        assert index == 0

    def test_string_yields_characters(self):
        it = ef_string("hi").iterate()
        element, index, _ = it.next()
        assert element.type == ValueType.STRING
        assert element.value == "h"

    def test_map_yields_keys(self):
        it = ef_map({"x": ef_int(1), "y": ef_int(2)}).iterate()
        element, key, more = it.next()
        assert (element.value, key, more) == (1, "x", True)

    def test_not_iterable(self):
        with pytest.raises(TypeError):
            ef_int(1).iterate()


class TestTruthiness:
    def test_booleans(self):
        assert is_truthy(ef_bool(True)) is True
        assert is_truthy(ef_bool(False)) is False

    def test_strings(self):
        assert is_truthy(ef_string("x")) is True
        assert is_truthy(ef_string("")) is False

    @pytest.mark.parametrize("value_type", [
        ValueType.INT, ValueType.INT8, ValueType.INT16, ValueType.INT32, ValueType.INT64,
        ValueType.UINT, ValueType.UINT8, ValueType.UINT16, ValueType.UINT32, ValueType.UINT64,
    ])
    def test_integer_widths(self, value_type):
        assert is_truthy(ef_int(0, value_type)) is False
        assert is_truthy(ef_int(1, value_type)) is True

    def test_floats(self):
        assert is_truthy(ef_float(0.0)) is False
        assert is_truthy(ef_float(0.5, ValueType.FLOAT32)) is True

    def test_null(self):
        assert is_truthy(ef_null()) is False

    def test_array_non_empty(self):
        assert is_truthy(ef_array([])) is False
        assert is_truthy(ef_array([ef_null()])) is True

    def test_map_non_empty(self):
        assert is_truthy(ef_map({})) is False
        assert is_truthy(ef_map({"a": ef_null()})) is True

    def test_object_is_false_with_warning(self):
        warnings = []
        assert is_truthy(ef_object(object()), warnings.append) is False
        assert len(warnings) == 1
        assert "object" in warnings[0]


class TestToNumber:
    def test_numeric_string(self):
        assert to_number(ef_string("1000")) == 1000.0
        assert to_number(ef_string("-2.5")) == -2.5

    def test_malformed_string_is_zero(self):
        assert to_number(ef_string("not-a-number")) == 0

    def test_padded_string_is_zero(self):
        assert to_number(ef_string(" 12 ")) == 0
        assert to_number(ef_string("1_000")) == 0

    def test_string_parsed_at_single_precision(self):
        assert to_number(ef_string("16777217")) == 16777216.0
        assert to_number(ef_string("0.1")) == ef_float(0.1, ValueType.FLOAT32).value
        assert to_number(ef_string("0.1")) != 0.1

    def test_string_overflow_is_infinite(self):
        assert to_number(ef_string("1e39")) == math.inf
        assert to_number(ef_string("-1e39")) == -math.inf

    def test_signed_integers(self):
        assert to_number(ef_int(-5, ValueType.INT8)) == -5.0
        assert to_number(ef_int(2**40, ValueType.INT64)) == float(2**40)

    def test_boolean_fails(self):
        with pytest.raises(NotCoercibleToNumber) as info:
            to_number(ef_bool(True))
        assert info.value.type_name == "boolean"
        assert info.value.rendered == "true"

    @pytest.mark.parametrize("value", [
        ef_null(),
        ef_float(1.5),
        ef_int(3, ValueType.UINT32),
        ef_array([]),
    ])
    def test_other_kinds_fail(self, value):
        with pytest.raises(NotCoercibleToNumber):
            to_number(value)


class TestCompare:
    def test_unary_truth(self):
        assert compare(ef_string("x"), None, "") is True
        assert compare(ef_null(), None, "") is False

    def test_equality_across_kinds(self):
        assert compare(ef_int(1000), ef_string("1000"), "==") is True
        assert compare(ef_string("1000"), ef_int(1000), "==") is True

    def test_inequality(self):
        assert compare(ef_int(1), ef_string("2"), "!=") is True
        assert compare(ef_bool(True), ef_string("true"), "!=") is False

    def test_contains(self):
        assert compare(ef_string("Debian-based"), ef_string("Debian"), "~=") is True
        assert compare(ef_string("abc"), ef_string("xyz"), "~=") is False

    def test_does_not_contain(self):
        assert compare(ef_string("abc"), ef_string("xyz"), "!~") is True
        assert compare(ef_string("abc"), ef_string("b"), "!~") is False

    def test_numeric_operators(self):
        assert compare(ef_string("1000"), ef_string("999"), ">") is True
        assert compare(ef_int(5), ef_string("5"), ">=") is True
        assert compare(ef_int(4), ef_int(5), "<") is True
        assert compare(ef_int(6), ef_int(5), "<=") is False

    def test_numeric_string_loses_precision(self):
        assert compare(ef_string("16777217"), ef_int(16777216), ">") is False
        assert compare(ef_string("16777217"), ef_int(16777216), ">=") is True
        assert compare(ef_string("1e39"), ef_int(2**62), ">") is True

    def test_large_float_renders_in_exponent_form(self):
        assert compare(ef_float(1e6), ef_string("1000000"), "==") is False
        assert compare(ef_float(1e6), ef_string("1e+06"), "==") is True

    def test_numeric_with_malformed_string(self):
        assert compare(ef_string("junk"), ef_int(0), "<=") is True

    def test_numeric_not_coercible(self):
        with pytest.raises(NotCoercibleToNumber):
            compare(ef_bool(True), ef_int(1), ">")

    def test_unknown_operator(self):
        with pytest.raises(UnknownOperator) as info:
            compare(ef_int(1), ef_int(1), "=~")
        assert info.value.symbol == "=~"
