"""Tests for the composable API layer."""

import pytest

from jpoet.api import canonical_type_name, generate_source, parse_type, write_source
from jpoet.config import WriterConfig
from jpoet.specs import MethodSpec, Modifier, TypeSpec
from jpoet.verify import JavaSyntaxError


def _greeter(statement: str = "return $S") -> TypeSpec:
    return (
        TypeSpec.class_builder("Greeter")
        .add_modifiers(Modifier.PUBLIC)
        .add_method(
            MethodSpec.method_builder("greet")
            .add_modifiers(Modifier.PUBLIC)
            .returns(str)
            .add_statement(statement, "hi")
            .build()
        )
        .build()
    )


class TestParseType:
    def test_native_and_canonical_agree(self):
        assert parse_type(dict[str, list[int]]) == parse_type(
            "java.util.Map<java.lang.String, java.util.List<java.lang.Integer>>"
        )

    def test_canonical_type_name(self):
        assert canonical_type_name(list[str]) == "java.util.List<java.lang.String>"


class TestGenerateSource:
    def test_generates_valid_java(self):
        source = generate_source("com.example", _greeter(), validate=True)
        assert source.startswith("package com.example;\n")
        assert "    public String greet() {\n" in source

    def test_file_comment(self):
        source = generate_source("com.example", _greeter(), file_comment="Do not edit.")
        assert source.startswith("// Do not edit.\n\npackage com.example;\n")

    def test_config_controls_java_lang_imports(self):
        source = generate_source(
            "com.example", _greeter(), config=WriterConfig(skip_java_lang_imports=False)
        )
        assert "import java.lang.String;\n" in source

    def test_validation_failure(self):
        with pytest.raises(JavaSyntaxError):
            generate_source("com.example", _greeter("return ($S"), validate=True)


class TestWriteSource:
    def test_writes_under_package_directory(self, tmp_path):
        path = write_source("com.example", _greeter(), tmp_path)
        assert path == tmp_path / "com" / "example" / "Greeter.java"
        assert path.read_text(encoding="utf-8") == generate_source("com.example", _greeter())
