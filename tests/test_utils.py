"""
Test utilities for the recipec test suite.

Helpers for the compile-then-inspect pattern: compile a source string and
either get the resolved namespace back or assert on the exact error.
"""

import sys
from typing import Any, Dict, Optional
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from recipec.analysis.namespace import Namespace
from recipec.compiler.driver import CompilationResult, CompilerDriver
from recipec.shared.errors import CompileError, CompileErrorKind

_compiler = CompilerDriver()


def compile_source(
    source: str,
    source_overlay: Optional[Dict[tuple, str]] = None,
    root_path: Optional[Path] = None,
    compiler: Optional[CompilerDriver] = None,
) -> CompilationResult:
    """Compile `source` as the root `justfile`."""
    comp = compiler if compiler is not None else _compiler
    return comp.compile(source, "justfile", root_path=root_path, source_overlay=source_overlay)


def compile_ok(source: str, **kwargs: Any) -> Namespace:
    """Compile and return the namespace, failing the test with rendered errors otherwise."""
    result = compile_source(source, **kwargs)
    assert result.success, "\n".join(result.get_errors())
    return result.namespace


def compile_error(source: str, **kwargs: Any) -> CompileError:
    """Compile and return the CompileError that aborted compilation."""
    result = compile_source(source, **kwargs)
    assert not result.success, f"expected a compile error for:\n{source}"
    assert isinstance(result.error, CompileError), f"unexpected error: {result.error!r}"
    return result.error


def assert_compile_error(
    source: str,
    kind: CompileErrorKind,
    data: Dict[str, Any],
    offset: int,
    line: int,
    column: int,
    width: int,
    **kwargs: Any,
) -> CompileError:
    """
    Assert that compiling `source` fails with exactly this error.

    `line` and `column` are 1-based, `offset` is the 0-based character offset
    of the offending token and `width` its length.
    """
    error = compile_error(source, **kwargs)
    assert error.kind is kind, f"expected {kind}, got {error!r}"
    assert error.data == data
    location = error.location
    assert location is not None
    assert (location.offset, location.line, location.column, location.length) == (
        offset, line, column, width,
    ), f"unexpected location {location!r}"
    return error
