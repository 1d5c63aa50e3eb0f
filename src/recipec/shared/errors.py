"""
Error Reporting

Diagnostic payloads for recipe compilation and their rustc-style rendering.
Rendering is the caller's concern; the resolver only raises `CompileError`
carrying a kind, a location and kind-specific data.
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .source_location import SourceLocation
from ..utils.config import Settings


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("RECIPEC_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Error dataclass
# ---------------------------------------------------------------------------

@dataclass
class Error:
    """
    One diagnostic ready for rendering.
    """
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def _format_diagnostic(
    error: Error,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a single diagnostic in rustc style.

    Example output (plain, no color)::

        error[circular-recipe-dependency]: Recipe `b` has circular dependency `a -> b -> a`
         --> justfile:2:4
          |
        2 | b: a
          |    ^
    """
    out: List[str] = []

    # ---- header -----------------------------------------------------------
    code_str = f"[{error.code}]" if error.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    )

    # ---- location arrow ---------------------------------------------------
    if error.location is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<unknown location>")
        _append_help(out, error, 1, color)
        return "\n".join(out)

    loc = error.location

    # ---- source snippet ---------------------------------------------------
    source = source_files.get(loc.file)
    if source is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + str(loc))
        _append_help(out, error, 1, color)
        return "\n".join(out)

    src_lines = source.split("\n")
    gw = max(len(str(loc.line)), 1)

    idx = loc.line - 1
    code_line = src_lines[idx] if 0 <= idx < len(src_lines) else ""

    out.append(_style(" " * gw + "--> ", _BOLD, _BLUE, color=color) + str(loc))
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
    out.append(_style(str(loc.line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)

    col_start = max(loc.column, 1) - 1
    carets = " " * col_start + "^" * max(1, loc.length)
    out.append(
        _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
        + _style(carets, _BOLD, _RED, color=color)
    )

    _append_help(out, error, gw, color)

    return "\n".join(out)


def _append_help(out: List[str], error: Error, gw: int, color: bool) -> None:
    if not error.help:
        return
    pad = " " * (gw + 1)
    out.append(_style(pad + "|", _BOLD, _BLUE, color=color))
    out.append(
        _style(f"{pad}= ", _BOLD, _CYAN, color=color)
        + _style("help: ", _BOLD, color=color)
        + error.help
    )


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """
    Collects diagnostics for a compilation and renders them against the
    source texts it was given.
    """

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(
            message=message,
            location=location,
            code=code,
            help=help,
        ))

    def report_exception(self, exc: "RecipecError") -> None:
        """Record a raised recipec error as a diagnostic."""
        if isinstance(exc, RecipecSourceError):
            self.errors.append(exc.to_diagnostic())
        else:
            self.report_error(exc.message, exc.location)

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [self.format_error(e, color=use_color) for e in self.errors]
        parts.append(_summary(len(self.errors), use_color))
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def print_errors(self) -> None:
        color = _use_color()
        for error in self.errors:
            print(self.format_error(error, color=color), file=sys.stderr)
        if self.errors:
            print(f"\n{_summary(len(self.errors), color)}", file=sys.stderr)


def _summary(count: int, color: bool) -> str:
    summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
    return (
        _style("error", _BOLD, _RED, color=color)
        + _style(f": {summary}", _BOLD, color=color)
    )


# ============================================================================
# Exception Classes
# ============================================================================

class RecipecError(Exception):
    """Base exception for all recipec errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"error: {self.message}\n --> {self.location}"
        return self.message


class RecipecSourceError(RecipecError):
    """
    Error in a recipe file with rich rustc-style formatting.

    Attach the source text with `source_code` to get a snippet with carets
    under the offending token.
    """
    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 error_code: Optional[str] = None,
                 source_code: Optional[str] = None,
                 help: Optional[str] = None):
        super().__init__(message, location)
        self.error_code = error_code
        self.source_code = source_code
        self.help_text = help

    def to_diagnostic(self) -> Error:
        return Error(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
        )

    def __str__(self):
        source_files: Dict[str, str] = {}
        if self.source_code and self.location:
            source_files[self.location.file] = self.source_code
        return _format_diagnostic(self.to_diagnostic(), source_files, color=False)


class RecipecImplementationError(Exception):
    """
    Internal invariant violated inside recipec itself, never a problem
    with the user's recipe file.
    """
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"internal error: {self.message}"


# ============================================================================
# Compile errors
# ============================================================================

class CompileErrorKind(Enum):
    UNDEFINED_VARIABLE = "undefined-variable"
    CIRCULAR_RECIPE_DEPENDENCY = "circular-recipe-dependency"
    UNKNOWN_DEPENDENCY = "unknown-dependency"
    DEPENDENCY_ARGUMENT_COUNT_MISMATCH = "dependency-argument-count-mismatch"
    DUPLICATE_RECIPE = "duplicate-recipe"
    DUPLICATE_VARIABLE = "duplicate-variable"
    DUPLICATE_MODULE = "duplicate-module"
    UNKNOWN_SETTING = "unknown-setting"
    INVALID_SETTING_VALUE = "invalid-setting-value"
    MODULE_NOT_FOUND = "module-not-found"
    CIRCULAR_MODULE = "circular-module"


def _plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"


def _arity_message(data: Dict[str, Any]) -> str:
    found, minimum, maximum = data["found"], data["min"], data["max"]
    if maximum is None:
        takes = f"at least {minimum} {_plural(minimum, 'argument')}"
    elif minimum == maximum:
        takes = f"{minimum} {_plural(minimum, 'argument')}"
    elif found < minimum:
        takes = f"at least {minimum} {_plural(minimum, 'argument')}"
    else:
        takes = f"at most {maximum} {_plural(maximum, 'argument')}"
    return f"Dependency `{data['dependency']}` got {found} {_plural(found, 'argument')} but takes {takes}"


def _circle_message(data: Dict[str, Any]) -> str:
    circle = data["circle"]
    if len(circle) == 2:
        return f"Recipe `{data['recipe']}` depends on itself"
    return f"Recipe `{data['recipe']}` has circular dependency `{' -> '.join(circle)}`"


_MESSAGES = {
    CompileErrorKind.UNDEFINED_VARIABLE:
        lambda d: f"Variable `{d['variable']}` not defined",
    CompileErrorKind.CIRCULAR_RECIPE_DEPENDENCY: _circle_message,
    CompileErrorKind.UNKNOWN_DEPENDENCY:
        lambda d: f"Recipe `{d['recipe']}` has unknown dependency `{d['unknown']}`",
    CompileErrorKind.DEPENDENCY_ARGUMENT_COUNT_MISMATCH: _arity_message,
    CompileErrorKind.DUPLICATE_RECIPE:
        lambda d: f"Recipe `{d['recipe']}` first defined on line {d['first']} is redefined on line {d['line']}",
    CompileErrorKind.DUPLICATE_VARIABLE:
        lambda d: f"Variable `{d['variable']}` has multiple definitions",
    CompileErrorKind.DUPLICATE_MODULE:
        lambda d: f"Module `{d['module']}` first defined on line {d['first']} is redefined on line {d['line']}",
    CompileErrorKind.UNKNOWN_SETTING:
        lambda d: f"Unknown setting `{d['setting']}`",
    CompileErrorKind.INVALID_SETTING_VALUE:
        lambda d: f"Setting `{d['setting']}` expects a {d['expected']} value",
    CompileErrorKind.MODULE_NOT_FOUND:
        lambda d: f"Could not find source file for module `{d['module']}`",
    CompileErrorKind.CIRCULAR_MODULE:
        lambda d: f"Module `{d['module']}` is included circularly from `{d['path']}`",
}


def _module_file_help(data: Dict[str, Any]) -> str:
    name = data["module"].split("::")[-1]
    return f"create `{name}.just` or `{name}/mod.just` next to the declaring file"


_HELP = {
    CompileErrorKind.DEPENDENCY_ARGUMENT_COUNT_MISMATCH:
        lambda d: f"dependency arguments are written `({d['dependency']} ARG...)`",
    CompileErrorKind.MODULE_NOT_FOUND: _module_file_help,
    CompileErrorKind.UNKNOWN_SETTING:
        lambda d: "known settings: " + ", ".join(Settings.known()),
}


class CompileError(RecipecSourceError):
    """
    Static semantic error in a recipe module.

    `kind` selects the failure and `data` holds its payload, e.g.
    ``{"recipe": "b", "circle": ["a", "b", "a"]}`` for a circular
    dependency.
    """
    def __init__(self,
                 kind: CompileErrorKind,
                 location: Optional[SourceLocation] = None,
                 **data: Any):
        help_for = _HELP.get(kind)
        super().__init__(
            _MESSAGES[kind](data),
            location,
            error_code=kind.value,
            help=help_for(data) if help_for else None,
        )
        self.kind = kind
        self.data = data

    def __repr__(self) -> str:
        return f"CompileError({self.kind.name}, {self.data!r}, location={self.location})"
