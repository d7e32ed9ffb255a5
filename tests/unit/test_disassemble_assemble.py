"""Tests for peeling and rebuilding generic layers."""

import pytest

from jpoet.type_name import (
    INT,
    STRING,
    ClassName,
    ParameterizedTypeName,
    UnsupportedDisassembly,
    assemble,
    disassemble,
    parse_type_name,
)

OUTER = "a.b.Outer<c.d.Inner<e.f.Leaf>>"
LIVE_DATA = "androidx.lifecycle.LiveData<java.util.List<java.lang.String>>"


class Activity:
    __java_name__ = "com.zeoflow.app.Activity"


class TestDisassemble:
    def test_first_layer(self):
        assert parse_type_name(OUTER).disassemble() == parse_type_name("c.d.Inner<e.f.Leaf>")

    def test_second_layer(self):
        assert parse_type_name(OUTER).disassemble().disassemble() == parse_type_name("e.f.Leaf")

    def test_third_call_is_a_no_op(self):
        twice = parse_type_name(OUTER).disassemble().disassemble()
        assert twice.disassemble() == twice

    def test_repeated_disassembly_reaches_leaf(self):
        result = parse_type_name(LIVE_DATA).disassemble().disassemble().disassemble().disassemble()
        assert result == STRING

    @pytest.mark.parametrize("text", ["java.lang.String", "int", "a.Foo[]", "void"])
    def test_leaf_is_returned_unchanged(self, text):
        leaf = parse_type_name(text)
        assert disassemble(leaf) == leaf
        assert disassemble(disassemble(leaf)) == disassemble(leaf)

    def test_multiple_arguments_return_last(self):
        parsed = parse_type_name("java.util.Map<a.K, b.V>")
        assert parsed.disassemble() == parse_type_name("b.V")

    def test_strict_rejects_multiple_arguments(self):
        parsed = parse_type_name("java.util.Map<a.K, b.V>")
        with pytest.raises(UnsupportedDisassembly):
            parsed.disassemble(strict=True)

    def test_strict_allows_single_argument(self):
        assert parse_type_name(OUTER).disassemble(strict=True) == parse_type_name(
            "c.d.Inner<e.f.Leaf>"
        )


class TestAssemble:
    def test_wraps_with_string_base(self):
        assembled = STRING.assemble("java.util.List")
        assert str(assembled) == "java.util.List<java.lang.String>"

    def test_wraps_with_native_base(self):
        assembled = STRING.assemble(Activity)
        assert str(assembled) == "com.zeoflow.app.Activity<java.lang.String>"

    def test_additive_assembly_adds_one_level(self):
        descriptor = parse_type_name("c.d.Inner<e.f.Leaf>")
        assembled = descriptor.assemble("a.b.Outer")
        assert assembled == parse_type_name(OUTER)

    def test_chained_assembly(self):
        assembled = parse_type_name(LIVE_DATA).assemble("java.lang.String").assemble(str)
        assert str(assembled) == (
            "java.lang.String<java.lang.String<androidx.lifecycle.LiveData"
            "<java.util.List<java.lang.String>>>>"
        )

    def test_base_with_arguments_appends(self):
        assembled = STRING.assemble("java.util.Map<java.lang.Integer>")
        assert str(assembled) == "java.util.Map<java.lang.Integer, java.lang.String>"

    def test_primitive_is_boxed(self):
        assert str(INT.assemble("java.util.List")) == "java.util.List<java.lang.Integer>"

    def test_non_generic_base_is_rejected(self):
        with pytest.raises(ValueError):
            STRING.assemble("int")

    def test_round_trip_law(self):
        original = parse_type_name(OUTER)
        assert assemble(disassemble(original), original.raw_type) == original

    def test_round_trip_law_on_live_data(self):
        original = parse_type_name(LIVE_DATA)
        assert original.disassemble().assemble(original.raw_type) == original


class TestAssembleReplace:
    def test_replace_keeps_depth(self):
        descriptor = parse_type_name("java.util.List<java.lang.String>")
        replaced = descriptor.assemble("java.lang.Integer", replace=True)
        assert replaced == parse_type_name("java.util.List<java.lang.Integer>")

    def test_replace_differs_from_additive(self):
        descriptor = parse_type_name("java.util.List<java.lang.String>")
        added = descriptor.assemble("java.util.Set")
        replaced = descriptor.assemble("java.util.Set", replace=True)
        assert added == parse_type_name("java.util.Set<java.util.List<java.lang.String>>")
        assert replaced == parse_type_name("java.util.List<java.util.Set>")

    def test_replace_touches_only_the_last_argument(self):
        descriptor = parse_type_name("java.util.Map<a.K, b.V>")
        replaced = descriptor.assemble("c.W", replace=True)
        assert replaced == parse_type_name("java.util.Map<a.K, c.W>")
        assert replaced.disassemble() == parse_type_name("c.W")

    def test_replace_on_leaf_returns_outer(self):
        assert STRING.assemble(Activity, True) == ClassName.best_guess("com.zeoflow.app.Activity")

    def test_additive_on_leaf(self):
        assembled = STRING.assemble(Activity, False)
        assert isinstance(assembled, ParameterizedTypeName)
        assert assembled.type_arguments == (STRING,)
