"""
Built-in constants

Names that are always defined in every expression scope, mapped to their
values.
"""

import os
from types import MappingProxyType
from typing import Mapping

_CONSTANTS = {
    "HEX": "0123456789abcdef",
    "HEXLOWER": "0123456789abcdef",
    "HEXUPPER": "0123456789ABCDEF",
    "PATH_SEP": os.sep,
    "PATH_VAR_SEP": os.pathsep,
    "CLEAR": "\x1bc",
    "NORMAL": "\x1b[0m",
    "BOLD": "\x1b[1m",
    "ITALIC": "\x1b[3m",
    "UNDERLINE": "\x1b[4m",
    "INVERT": "\x1b[7m",
    "HIDE": "\x1b[8m",
    "STRIKETHROUGH": "\x1b[9m",
    "BLACK": "\x1b[30m",
    "RED": "\x1b[31m",
    "GREEN": "\x1b[32m",
    "YELLOW": "\x1b[33m",
    "BLUE": "\x1b[34m",
    "MAGENTA": "\x1b[35m",
    "CYAN": "\x1b[36m",
    "WHITE": "\x1b[37m",
    "BG_BLACK": "\x1b[40m",
    "BG_RED": "\x1b[41m",
    "BG_GREEN": "\x1b[42m",
    "BG_YELLOW": "\x1b[43m",
    "BG_BLUE": "\x1b[44m",
    "BG_MAGENTA": "\x1b[45m",
    "BG_CYAN": "\x1b[46m",
    "BG_WHITE": "\x1b[47m",
}

CONSTANTS: Mapping[str, str] = MappingProxyType(_CONSTANTS)


def constants() -> Mapping[str, str]:
    """Read-only view of the built-in constants."""
    return CONSTANTS
