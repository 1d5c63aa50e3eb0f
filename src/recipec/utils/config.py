"""
Configuration constants and per-module settings for recipec
"""

from dataclasses import dataclass, fields
from typing import Tuple

# Module resolution constants
MODULE_SEPARATOR = "::"
MODULE_FILE_EXTENSION = ".just"
MODULE_DIRECTORY_FILE = "mod.just"
DEFAULT_SOURCE_FILE = "justfile"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Body interpolation delimiters
INTERPOLATION_OPEN = "{{"
INTERPOLATION_CLOSE = "}}"

# Comment marker for top-level lines and comment-only body lines
COMMENT_PREFIX = "#"

# Boolean setting literals
BOOLEAN_TRUE_LITERAL = "true"
BOOLEAN_FALSE_LITERAL = "false"


@dataclass(frozen=True)
class Settings:
    """
    Module settings collected from `set name := value` lines.

    Only `ignore_comments` affects resolution (comment-only body lines are
    not checked for undefined variables); the rest are carried through for
    the execution stage.
    """
    ignore_comments: bool = False
    export: bool = False
    positional_arguments: bool = False
    quiet: bool = False

    @staticmethod
    def known() -> Tuple[str, ...]:
        """Setting names as written in source (`ignore-comments`, ...)."""
        return tuple(f.name.replace("_", "-") for f in fields(Settings))

    @staticmethod
    def attribute_for(setting: str) -> str:
        return setting.replace("-", "_")

    @staticmethod
    def value_type(setting: str) -> type:
        """Python type a setting's value must have."""
        attribute = Settings.attribute_for(setting)
        return next(f.type for f in fields(Settings) if f.name == attribute)
