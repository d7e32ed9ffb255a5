"""Tests for tree-sitter syntax verification."""

import pytest

from jpoet.verify import JavaSyntaxError, check_java_source, ensure_valid_java

VALID = """\
package a;

class Main {
    int x = 1;
}
"""

INVALID = """\
class Main {
    void f( {
    }
}
"""


class TestCheckJavaSource:
    def test_valid_source_has_no_problems(self):
        assert check_java_source(VALID) == []

    def test_invalid_source_reports_problems(self):
        problems = check_java_source(INVALID)
        assert problems
        assert all(p.kind in ("error", "missing") for p in problems)
        assert problems == sorted(problems, key=lambda p: (p.line, p.column))

    def test_problem_lines_are_one_based(self):
        problems = check_java_source(INVALID)
        assert min(p.line for p in problems) >= 1


class TestEnsureValidJava:
    def test_returns_source(self):
        assert ensure_valid_java(VALID) == VALID

    def test_raises_with_problems(self):
        with pytest.raises(JavaSyntaxError, match="syntax problem") as excinfo:
            ensure_valid_java(INVALID)
        assert excinfo.value.problems
