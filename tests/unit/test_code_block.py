"""Tests for statement templates and placeholder handling."""

import pytest

from jpoet.code_block import CodeBlock, string_literal
from jpoet.specs import MethodSpec, ParameterSpec
from jpoet.type_name import STRING


class System:
    __java_name__ = "java.lang.System"


class TestPlaceholders:
    def test_type_and_string(self):
        block = CodeBlock.of("$T.out.println($S)", System, "Hello, JavaPoet!")
        assert str(block) == 'java.lang.System.out.println("Hello, JavaPoet!")'

    def test_type_argument_is_normalized(self):
        block = CodeBlock.of("$T", "java.util.List<java.lang.String>")
        assert block.args[0].raw_type.simple_name == "List"

    def test_literal(self):
        assert str(CodeBlock.of("int x = $L", 42)) == "int x = 42"

    def test_literal_booleans_and_null(self):
        assert str(CodeBlock.of("$L, $L, $L", True, False, None)) == "true, false, null"

    def test_literal_nested_block(self):
        inner = CodeBlock.of("$S", "hi")
        assert str(CodeBlock.of("print($L)", inner)) == 'print("hi")'

    def test_name_of_spec(self):
        parameter = ParameterSpec.of(STRING, "value")
        assert str(CodeBlock.of("return $N", parameter)) == "return value"

    def test_name_of_non_named_fails(self):
        with pytest.raises(ValueError, match="Expected a name"):
            CodeBlock.of("$N", 3)

    def test_null_string(self):
        assert str(CodeBlock.of("$S", None)) == "null"

    def test_dollar(self):
        assert str(CodeBlock.of("a$$b")) == "a$b"

    def test_indexed(self):
        assert str(CodeBlock.of("$2L $1L $2L", "a", "b")) == "b a b"


class TestFormatErrors:
    def test_mixing_indexed_and_relative(self):
        with pytest.raises(ValueError, match="Cannot mix"):
            CodeBlock.of("$1L $L", "a")

    def test_unused_arguments(self):
        with pytest.raises(ValueError, match="Unused"):
            CodeBlock.of("$L", "a", "b")

    def test_arguments_without_placeholders(self):
        with pytest.raises(ValueError, match="Unused"):
            CodeBlock.of("plain", "a")

    def test_unused_indexed_argument(self):
        with pytest.raises(ValueError, match="Unused"):
            CodeBlock.of("$2L", "a", "b")

    def test_not_enough_arguments(self):
        with pytest.raises(ValueError, match="Not enough"):
            CodeBlock.of("$L $L", "a")

    def test_index_out_of_range(self):
        with pytest.raises(ValueError, match="not in range"):
            CodeBlock.of("$3L", "a")

    def test_unknown_placeholder(self):
        with pytest.raises(ValueError, match="Invalid placeholder"):
            CodeBlock.of("$Q")

    def test_dangling_dollar(self):
        with pytest.raises(ValueError, match="Dangling"):
            CodeBlock.of("cost $")


class TestStatements:
    def test_add_statement(self):
        block = CodeBlock.builder().add_statement("int x = $L", 1).build()
        assert str(block) == "int x = 1;\n"

    def test_control_flow(self):
        block = (
            CodeBlock.builder()
            .begin_control_flow("if ($L)", "ready")
            .add_statement("return 1")
            .next_control_flow("else")
            .add_statement("return 2")
            .end_control_flow()
            .build()
        )
        assert str(block) == (
            "if (ready) {\n"
            "    return 1;\n"
            "} else {\n"
            "    return 2;\n"
            "}\n"
        )

    def test_control_flow_with_trailer(self):
        block = (
            CodeBlock.builder()
            .begin_control_flow("do")
            .add_statement("i++")
            .end_control_flow("while (i < $L)", 10)
            .build()
        )
        assert str(block) == "do {\n    i++;\n} while (i < 10);\n"

    def test_comment(self):
        assert str(CodeBlock.builder().add_comment("step $L", 1).build()) == "// step 1\n"

    def test_join(self):
        joined = CodeBlock.join([CodeBlock.of("a"), CodeBlock.of("$S", "b")], ", ")
        assert str(joined) == 'a, "b"'

    def test_is_empty(self):
        assert CodeBlock().is_empty()
        assert not CodeBlock.of("x").is_empty()

    def test_to_builder_copies(self):
        block = CodeBlock.of("a")
        extended = block.to_builder().add("b").build()
        assert str(block) == "a"
        assert str(extended) == "ab"

    def test_unbalanced_unindent_fails_on_render(self):
        block = CodeBlock.builder().unindent().build()
        with pytest.raises(ValueError, match="unindent"):
            str(block)


class TestFailedAddLeavesBuilderUnchanged:
    def test_add_statement_missing_argument(self):
        builder = CodeBlock.builder().add_statement("int x = $L", 1)
        with pytest.raises(ValueError, match="Not enough"):
            builder.add_statement("foo($L, $L)", 1)
        assert str(builder.add_statement("bar()").build()) == "int x = 1;\nbar();\n"

    @pytest.mark.parametrize(
        "format, args",
        [
            ("foo($L)", ("a", "b")),
            ("foo($1L, $L)", ("a",)),
            ("foo($Q)", ()),
            ("foo($", ()),
        ],
    )
    def test_add_rejects_without_appending(self, format, args):
        builder = CodeBlock.builder()
        with pytest.raises(ValueError):
            builder.add(format, *args)
        assert builder.is_empty()
        assert builder.build() == CodeBlock()

    def test_add_comment_leaves_no_prefix(self):
        builder = CodeBlock.builder()
        with pytest.raises(ValueError):
            builder.add_comment("step $L")
        assert builder.is_empty()

    def test_next_control_flow_leaves_block_open(self):
        builder = CodeBlock.builder().begin_control_flow("if (a)")
        with pytest.raises(ValueError):
            builder.next_control_flow("else if ($L)")
        block = builder.add_statement("go()").end_control_flow().build()
        assert str(block) == "if (a) {\n    go();\n}\n"

    def test_method_body_after_failed_statement(self):
        method = MethodSpec.method_builder("m")
        with pytest.raises(ValueError):
            method.add_statement("foo($L, $L)", 1)
        assert str(method.add_statement("bar()").build()) == "void m() {\n    bar();\n}\n"


class TestStringLiteral:
    def test_escapes(self):
        assert string_literal('say "hi"\n') == '"say \\"hi\\"\\n"'

    def test_backslash(self):
        assert string_literal("a\\b") == '"a\\\\b"'

    def test_control_characters(self):
        assert string_literal("\x01") == '"\\u0001"'

    def test_single_quote_unescaped(self):
        assert string_literal("it's") == '"it\'s"'

    def test_none(self):
        assert string_literal(None) == "null"
