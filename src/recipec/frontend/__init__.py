"""Recipe file frontend: Lark grammar, transformer and line-oriented parser."""

from .parser import Parser, ParseError

__all__ = ["Parser", "ParseError"]
