"""Tests for canonical-string parsing and rendering of type descriptors."""

import pytest

from jpoet.type_name import (
    INT,
    STRING,
    VOID,
    ArrayTypeName,
    ClassName,
    MalformedTypeName,
    ParameterizedTypeName,
    PrimitiveKind,
    PrimitiveType,
    WildcardTypeName,
    parse_type_name,
)

ROUND_TRIP_CASES = [
    "java.lang.String",
    "Foo",
    "java.util.List<java.lang.String>",
    "java.util.Map<java.lang.String, java.util.List<java.lang.Integer>>",
    "androidx.lifecycle.LiveData<java.util.List<java.lang.String>>",
    "a.b.Outer<c.d.Inner<e.f.Leaf>, g.H>",
    "java.util.List<? extends java.lang.Number>",
    "java.util.List<? super java.lang.Integer>",
    "java.util.Map<?, ?>",
    "int[]",
    "java.lang.String[][]",
    "java.util.List<java.lang.String>[]",
    "java.util.List<int[]>",
    "void",
    "double",
]


def _strip(text: str) -> str:
    return "".join(text.split())


class TestParseClassNames:
    def test_qualified_name(self):
        parsed = parse_type_name("java.lang.String")
        assert parsed == ClassName(package=("java", "lang"), simple_name="String")
        assert parsed == STRING

    def test_simple_name(self):
        assert parse_type_name("Foo") == ClassName(simple_name="Foo")

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_type_name("  java.lang.String ") == STRING


class TestParseGenerics:
    def test_single_argument(self):
        parsed = parse_type_name("java.util.List<java.lang.String>")
        assert isinstance(parsed, ParameterizedTypeName)
        assert parsed.raw_type == ClassName(package=("java", "util"), simple_name="List")
        assert parsed.type_arguments == (STRING,)

    def test_nested_commas_are_not_split(self):
        parsed = parse_type_name("java.util.Map<a.K, java.util.Map<b.K, c.V>>")
        assert len(parsed.type_arguments) == 2
        inner = parsed.type_arguments[1]
        assert isinstance(inner, ParameterizedTypeName)
        assert len(inner.type_arguments) == 2

    def test_whitespace_inside_arguments(self):
        assert parse_type_name("java.util.List< java.lang.String >") == parse_type_name(
            "java.util.List<java.lang.String>"
        )

    def test_wildcards(self):
        parsed = parse_type_name("java.util.List<? extends java.lang.Number>")
        wildcard = parsed.type_arguments[0]
        assert isinstance(wildcard, WildcardTypeName)
        assert wildcard.upper_bound == ClassName(package=("java", "lang"), simple_name="Number")
        assert wildcard.lower_bound is None

    def test_unbounded_wildcard(self):
        parsed = parse_type_name("java.util.List<?>")
        assert parsed.type_arguments[0] == WildcardTypeName()


class TestParsePrimitivesAndArrays:
    def test_primitive(self):
        assert parse_type_name("int") == INT
        assert parse_type_name("boolean") == PrimitiveType(keyword=PrimitiveKind.BOOLEAN)

    def test_void(self):
        assert parse_type_name("void") == VOID

    def test_array(self):
        assert parse_type_name("int[]") == ArrayTypeName(component_type=INT)

    def test_multi_dimensional_array(self):
        parsed = parse_type_name("java.lang.String[][]")
        assert parsed == ArrayTypeName(component_type=ArrayTypeName(component_type=STRING))


class TestParseErrors:
    @pytest.mark.parametrize(
        "text",
        [
            "java.util.List<java.lang.String",
            "java.util.List<java.lang.String>>",
            "java.util.List java.lang.String>",
            "java.util.Map<a.K,>",
            "java.util.Map<, a.V>",
            "java.util.List<>",
            "java.util.",
            "a..B",
            "",
            "   ",
            "java.util.List<int>",
            "java.util.List<void>",
            "?",
            "java.lang.class",
            "int[",
            "A<B>C<D>",
        ],
    )
    def test_malformed(self, text):
        with pytest.raises(MalformedTypeName):
            parse_type_name(text)

    def test_error_is_not_a_partial_result(self):
        with pytest.raises(MalformedTypeName, match="Unbalanced"):
            parse_type_name("a.Outer<b.Inner<c.Leaf>")


class TestRendering:
    @pytest.mark.parametrize("text", ROUND_TRIP_CASES)
    def test_round_trip(self, text):
        assert _strip(str(parse_type_name(text))) == _strip(text)

    def test_arguments_separated_by_comma_space(self):
        assert str(parse_type_name("a.M<b.K,c.V>")) == "a.M<b.K, c.V>"

    def test_get_accepts_strings(self):
        from jpoet.type_name import TypeName

        assert TypeName.get("java.lang.String") == STRING

    def test_descriptors_are_hashable_and_equal_structurally(self):
        a = parse_type_name("java.util.List<java.lang.String>")
        b = parse_type_name("java.util.List<java.lang.String>")
        assert a == b
        assert hash(a) == hash(b)
        assert a != parse_type_name("java.util.List<java.lang.Integer>")

    def test_argument_order_matters(self):
        assert parse_type_name("a.M<b.K, c.V>") != parse_type_name("a.M<c.V, b.K>")
