"""
Parser

Line-oriented recipe file parser. Top-level lines go through the Lark
grammar (`item` start rule); indented lines after a recipe header form its
body, and each {{ interpolation }} in them is parsed with the `expression`
start rule. Every location in the result is absolute within the file.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken, VisitError

from ..shared.errors import RecipecError, RecipecSourceError
from ..shared.nodes import Expression, Item, Line, ModuleSyntax, UnresolvedRecipe
from ..shared.source_location import SourceLocation
from ..utils.config import COMMENT_PREFIX, DEFAULT_SOURCE_FILE
from ..utils.io_utils import read_source_file
from .transformers import BodyLineParser, RecipeHeader, RecipeTransformer

logger = logging.getLogger("recipec.frontend.parser")

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"


class ParseError(RecipecSourceError):
    """Parse error with source location"""
    def __init__(self, message: str, source_file: str, location: Optional[SourceLocation] = None):
        super().__init__(message, location, error_code="parse-error")
        self.source_file = source_file


@lru_cache(maxsize=1)
def _load_grammar() -> Lark:
    """Build the LALR parser once per process."""
    return Lark.open(
        str(GRAMMAR_PATH),
        start=["item", "expression"],
        parser="lalr",
        propagate_positions=True,
        maybe_placeholders=False,
    )


class Parser:
    """
    Recipe file parser.

    Returns: ModuleSyntax (items in source order)
    """

    def __init__(self) -> None:
        self.parser = _load_grammar()
        self.transformer = RecipeTransformer()
        self.body_parser = BodyLineParser(self._parse_expression)
        self._file = DEFAULT_SOURCE_FILE

    def parse_file(self, path: Union[Path, str]) -> ModuleSyntax:
        return self.parse(read_source_file(path), str(path))

    def parse(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> ModuleSyntax:
        self._file = source_file
        module = ModuleSyntax(file=source_file)

        header: Optional[RecipeHeader] = None
        header_doc: Optional[str] = None
        body: List[Line] = []
        indentation: Optional[str] = None
        doc: Optional[str] = None

        offset = 0
        for number, raw in enumerate(source.split("\n"), start=1):
            line_offset = offset
            offset += len(raw) + 1
            text = raw[:-1] if raw.endswith("\r") else raw
            stripped = text.strip()

            if not stripped:
                doc = None
                continue

            if text[0] in " \t":
                if header is not None:
                    if indentation is None:
                        indentation = text[:len(text) - len(text.lstrip(" \t"))]
                    body.append(self._parse_body_line(text, indentation, number, line_offset))
                    continue
                if stripped.startswith(COMMENT_PREFIX):
                    continue
                indent = len(text) - len(text.lstrip(" \t"))
                raise ParseError(
                    "Unexpected indentation outside of a recipe body",
                    source_file,
                    SourceLocation(source_file, number, 1, line_offset, indent),
                )

            if header is not None:
                module.items.append(_finish_recipe(header, body, header_doc))
                header, body, indentation = None, [], None

            if stripped.startswith(COMMENT_PREFIX):
                doc = stripped[len(COMMENT_PREFIX):].strip()
                continue

            item = self._parse_item(text, number, line_offset)
            if isinstance(item, RecipeHeader):
                header, header_doc = item, doc
            else:
                module.items.append(item)
            doc = None

        if header is not None:
            module.items.append(_finish_recipe(header, body, header_doc))

        logger.debug(f"parsed {source_file}: {len(module.items)} item(s)")
        return module

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _parse_item(self, text: str, number: int, line_offset: int) -> Union[Item, RecipeHeader]:
        return self._run("item", text, number, line_offset, 0)

    def _parse_expression(self, text: str, number: int, text_offset: int, column_offset: int) -> Expression:
        return self._run("expression", text, number, text_offset, column_offset)

    def _parse_body_line(self, text: str, indentation: str, number: int, line_offset: int) -> Line:
        if text.startswith(indentation):
            indent = len(indentation)
        else:
            indent = len(text) - len(text.lstrip(" \t"))
        return self.body_parser.parse(text[indent:], self._file, number, line_offset + indent, indent)

    def _run(self, start: str, text: str, number: int, text_offset: int, column_offset: int):
        try:
            tree = self.parser.parse(text, start=start)
        except UnexpectedInput as e:
            raise self._convert_error(e, text, number, text_offset, column_offset) from e

        try:
            return self.transformer.at(self._file, number, text_offset, column_offset).transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, RecipecError):
                raise e.orig_exc from None
            raise

    def _convert_error(self, e: UnexpectedInput, text: str, number: int,
                       text_offset: int, column_offset: int) -> ParseError:
        """Convert a Lark error into a located ParseError."""
        pos = getattr(e, "pos_in_stream", None)
        if isinstance(e, UnexpectedToken) and e.token.type == "$END":
            message = "Unexpected end of line"
            pos = None
        elif isinstance(e, UnexpectedToken):
            message = f"Unexpected token `{e.token}`"
            pos = e.token.start_pos if e.token.start_pos is not None else pos
        elif isinstance(e, UnexpectedCharacters):
            message = f"Unexpected character `{text[e.pos_in_stream]}`"
        else:
            message = "Unexpected end of line"
            pos = None

        if pos is None or pos < 0:
            pos = len(text.rstrip())
        location = SourceLocation(
            file=self._file,
            line=number,
            column=column_offset + pos + 1,
            offset=text_offset + pos,
            length=1,
        )
        return ParseError(message, self._file, location)


def _finish_recipe(header: RecipeHeader, body: List[Line], doc: Optional[str]) -> UnresolvedRecipe:
    return UnresolvedRecipe(
        name=header.name,
        parameters=header.parameters,
        dependencies=header.dependencies,
        body=tuple(body),
        quiet=header.quiet,
        doc=doc,
    )
