"""
Body Line Parser
Splits a recipe body line into text and {{ interpolation }} fragments;
`{{{{` is an escaped literal `{{`
"""

from typing import Callable, List

from ...shared.nodes import Expression, Fragment, Interpolation, Line, Text
from ...shared.source_location import SourceLocation
from ...utils.config import INTERPOLATION_CLOSE, INTERPOLATION_OPEN

# (expression text, line number, offset of text in file, columns before text) -> Expression
ExpressionParser = Callable[[str, int, int, int], Expression]

_ESCAPED_OPEN = INTERPOLATION_OPEN * 2


def _find_close(text: str, start: int) -> int:
    """Index of the `}}` closing an interpolation, skipping string literals; -1 if none."""
    pos = start
    while pos < len(text):
        ch = text[pos]
        if ch == "'":
            end = text.find("'", pos + 1)
            if end == -1:
                return -1
            pos = end + 1
        elif ch == '"':
            pos += 1
            while pos < len(text) and text[pos] != '"':
                pos += 2 if text[pos] == "\\" else 1
            if pos >= len(text):
                return -1
            pos += 1
        elif text.startswith(INTERPOLATION_CLOSE, pos):
            return pos
        else:
            pos += 1
    return -1


class BodyLineParser:
    """Dedicated parser for body lines; interpolated expressions go to `parse_expression`."""

    def __init__(self, parse_expression: ExpressionParser):
        self.parse_expression = parse_expression

    def parse(self, text: str, source_file: str, line_number: int,
              text_offset: int, column_offset: int) -> Line:
        """
        `text` is the line without its indentation; it starts at file offset
        `text_offset`, after `column_offset` characters of the line.
        """
        fragments: List[Fragment] = []
        pending: List[str] = []
        pending_start = 0
        pos = 0

        def location(start: int, length: int) -> SourceLocation:
            return SourceLocation(
                file=source_file,
                line=line_number,
                column=column_offset + start + 1,
                offset=text_offset + start,
                length=length,
            )

        def flush(end: int) -> None:
            if pending:
                fragments.append(Text("".join(pending), location(pending_start, end - pending_start)))
                pending.clear()

        while pos < len(text):
            if text.startswith(_ESCAPED_OPEN, pos):
                pending.append(INTERPOLATION_OPEN)
                pos += len(_ESCAPED_OPEN)
                continue

            if text.startswith(INTERPOLATION_OPEN, pos):
                flush(pos)
                start = pos + len(INTERPOLATION_OPEN)
                close = _find_close(text, start)
                if close == -1:
                    from ..parser import ParseError
                    raise ParseError(
                        "Unterminated interpolation",
                        source_file,
                        location(pos, len(INTERPOLATION_OPEN)),
                    )
                expression = self.parse_expression(
                    text[start:close], line_number, text_offset + start, column_offset + start
                )
                end = close + len(INTERPOLATION_CLOSE)
                fragments.append(Interpolation(expression, location(pos, end - pos)))
                pos = end
                pending_start = pos
                continue

            pending.append(text[pos])
            pos += 1

        flush(pos)
        return Line(fragments=tuple(fragments), number=line_number)
