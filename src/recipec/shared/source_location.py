"""
Source Location (Span)

Every diagnostic produced by the resolver points at one token: the
file, 1-based line and column, 0-based character offset and the width of
the offending token.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Immutable span of a single token.

    `line` and `column` are 1-based (as reported by lark); `offset` is the
    0-based character offset of the token's first character in the file.
    """
    file: str
    line: int
    column: int
    offset: int = 0
    length: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
