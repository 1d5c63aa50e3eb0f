#!/usr/bin/env python3
"""
Tests for diagnostics: compile error payloads and rustc-style rendering.
"""

import re
import pytest
from tests.test_utils import compile_source
from recipec.shared.errors import (
    CompileError,
    CompileErrorKind,
    Error,
    ErrorReporter,
    RecipecError,
    RecipecImplementationError,
)
from recipec.shared.source_location import SourceLocation

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


class TestRendering:

    def test_circular_dependency_snippet(self):
        result = compile_source("a: b\nb: a")
        assert result.get_errors() == [
            "error[circular-recipe-dependency]: Recipe `b` has circular dependency `a -> b -> a`\n"
            " --> justfile:2:4\n"
            "  |\n"
            "2 | b: a\n"
            "  |    ^"
        ]

    def test_caret_width_matches_token(self):
        result = compile_source("x:\n {{   hello}}")
        rendered = result.get_errors()[0]
        assert rendered.splitlines()[-1] == "  |       ^^^^^"

    def test_summary_line(self):
        result = compile_source("a: b")
        text = result.reporter.format_all_errors(color=False)
        assert text.endswith("error: aborting due to 1 previous error")

    def test_color_output_has_same_text(self):
        result = compile_source("a: b")
        colored = result.reporter.format_error(result.reporter.errors[0], color=True)
        plain = result.reporter.format_error(result.reporter.errors[0], color=False)
        assert "\x1b[" in colored
        assert _strip_ansi(colored) == plain

    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        result = compile_source("a: b")
        assert "\x1b[" not in result.reporter.format_all_errors()

    def test_location_none(self):
        reporter = ErrorReporter({})
        out = reporter.format_error(Error(message="something failed", location=None, code="x"), color=False)
        assert "error[x]: something failed" in out
        assert "unknown location" in out

    def test_file_not_in_source_files(self):
        loc = SourceLocation(file="other.just", line=3, column=2)
        out = ErrorReporter({}).format_error(Error(message="oops", location=loc), color=False)
        assert " --> other.just:3:2" in out

    def test_help_line(self):
        loc = SourceLocation(file="justfile", line=1, column=1, offset=0, length=1)
        err = Error(message="bad", location=loc, help="try this")
        out = ErrorReporter({"justfile": "a: b"}).format_error(err, color=False)
        assert out.splitlines()[-2:] == ["  |", "  = help: try this"]

    def test_argument_count_error_has_help(self):
        result = compile_source("b x:\na: b")
        rendered = result.get_errors()[0]
        assert rendered.endswith("  = help: dependency arguments are written `(b ARG...)`")

    def test_module_not_found_has_help(self, tmp_path):
        result = compile_source("mod tools", root_path=tmp_path)
        assert result.error.help_text == "create `tools.just` or `tools/mod.just` next to the declaring file"

    def test_errors_without_help_end_at_carets(self):
        result = compile_source("a: b")
        assert result.error.help_text is None
        assert result.get_errors()[0].splitlines()[-1] == "  |    ^"

    def test_print_errors(self, capsys, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        compile_source("a: b").reporter.print_errors()
        err = capsys.readouterr().err
        assert "error[unknown-dependency]: Recipe `a` has unknown dependency `b`" in err
        assert "aborting due to 1 previous error" in err


class TestCompileError:

    def test_is_recipec_error(self):
        error = CompileError(CompileErrorKind.UNKNOWN_SETTING, None, setting="x")
        assert isinstance(error, RecipecError)
        assert error.error_code == "unknown-setting"
        assert error.data == {"setting": "x"}

    def test_str_without_source(self):
        loc = SourceLocation("justfile", 2, 4, 8, 1)
        error = CompileError(CompileErrorKind.UNDEFINED_VARIABLE, loc, variable="v")
        text = str(error)
        assert "Variable `v` not defined" in text
        assert "justfile:2:4" in text

    def test_str_with_source(self):
        loc = SourceLocation("justfile", 1, 4, 3, 1)
        error = CompileError(CompileErrorKind.UNKNOWN_DEPENDENCY, loc, recipe="a", unknown="b")
        error.source_code = "a: b"
        assert "1 | a: b" in str(error)

    @pytest.mark.parametrize("found,minimum,maximum,expected", [
        (0, 2, 2, "got 0 arguments but takes 2 arguments"),
        (3, 1, 2, "got 3 arguments but takes at most 2 arguments"),
        (0, 1, 2, "got 0 arguments but takes at least 1 argument"),
        (1, 2, None, "got 1 argument but takes at least 2 arguments"),
    ])
    def test_argument_count_messages(self, found, minimum, maximum, expected):
        error = CompileError(
            CompileErrorKind.DEPENDENCY_ARGUMENT_COUNT_MISMATCH,
            None, dependency="b", found=found, min=minimum, max=maximum,
        )
        assert error.message == f"Dependency `b` {expected}"

    def test_module_messages(self):
        not_found = CompileError(CompileErrorKind.MODULE_NOT_FOUND, None, module="a::b")
        assert not_found.message == "Could not find source file for module `a::b`"
        circular = CompileError(CompileErrorKind.CIRCULAR_MODULE, None, module="a", path="a.just")
        assert circular.message == "Module `a` is included circularly from `a.just`"

    def test_implementation_error_str(self):
        assert str(RecipecImplementationError("boom")) == "internal error: boom"
