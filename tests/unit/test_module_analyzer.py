#!/usr/bin/env python3
"""
Tests for per-module analysis: duplicate definitions, settings and child
module declarations.
"""

import pytest
from tests.test_utils import assert_compile_error
from recipec.analysis.module_analyzer import ModuleAnalyzer
from recipec.shared.errors import CompileError, CompileErrorKind


class TestModuleInputs:

    def test_recipes_keep_declaration_order(self, parser):
        inputs = ModuleAnalyzer().analyze(parser.parse("b:\na:\nc:"))
        assert list(inputs.recipes) == ["b", "a", "c"]

    def test_assignments_and_modules(self, parser):
        inputs = ModuleAnalyzer().analyze(parser.parse("x := 'a'\nmod foo\nmod bar"), name="root")
        assert inputs.name == "root"
        assert list(inputs.assignments) == ["x"]
        assert [m.key for m in inputs.modules] == ["foo", "bar"]

    def test_default_settings(self, parser):
        settings = ModuleAnalyzer().analyze(parser.parse("a:")).settings
        assert settings.ignore_comments is False
        assert settings.quiet is False

    def test_settings(self, parser):
        syntax = parser.parse("set ignore-comments\nset quiet := false\nset positional-arguments := true")
        settings = ModuleAnalyzer().analyze(syntax).settings
        assert settings.ignore_comments is True
        assert settings.quiet is False
        assert settings.positional_arguments is True

    def test_later_setting_wins(self, parser):
        syntax = parser.parse("set quiet\nset quiet := false")
        assert ModuleAnalyzer().analyze(syntax).settings.quiet is False

    def test_quoted_value_for_boolean_setting(self, parser):
        syntax = parser.parse("set quiet := 'yes'")
        with pytest.raises(CompileError) as exc_info:
            ModuleAnalyzer().analyze(syntax)
        error = exc_info.value
        assert error.kind is CompileErrorKind.INVALID_SETTING_VALUE
        assert error.data == {"setting": "quiet", "expected": "boolean"}
        assert (error.location.column, error.location.length) == (14, 5)


class TestDuplicates:

    def test_duplicate_recipe(self):
        error = assert_compile_error(
            "a:\nb:\na:",
            CompileErrorKind.DUPLICATE_RECIPE,
            {"recipe": "a", "first": 1, "line": 3},
            offset=6, line=3, column=1, width=1,
        )
        assert error.message == "Recipe `a` first defined on line 1 is redefined on line 3"

    def test_duplicate_variable(self):
        assert_compile_error(
            'x := "a"\nx := "b"',
            CompileErrorKind.DUPLICATE_VARIABLE,
            {"variable": "x"},
            offset=9, line=2, column=1, width=1,
        )

    def test_duplicate_module(self):
        assert_compile_error(
            "mod foo\nmod foo",
            CompileErrorKind.DUPLICATE_MODULE,
            {"module": "foo", "first": 1, "line": 2},
            offset=12, line=2, column=5, width=3,
        )

    def test_unknown_setting(self):
        error = assert_compile_error(
            "set foo",
            CompileErrorKind.UNKNOWN_SETTING,
            {"setting": "foo"},
            offset=4, line=1, column=5, width=3,
        )
        assert error.message == "Unknown setting `foo`"

    def test_recipe_and_variable_may_share_a_name(self, parser):
        inputs = ModuleAnalyzer().analyze(parser.parse("a := 'x'\na:"))
        assert "a" in inputs.recipes and "a" in inputs.assignments

    def test_analyze_raises_compile_error(self, parser):
        with pytest.raises(CompileError):
            ModuleAnalyzer().analyze(parser.parse("a:\na:"))
