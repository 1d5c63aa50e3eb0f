"""
Recipe AST Transformer
Converts Lark parse trees of single lines to recipe AST nodes
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from lark import Transformer, v_args
from lark.lexer import Token
from typing_extensions import TypeAlias

from ...shared.nodes import (
    Assignment, Call, Concatenation, Conditional, Dependency, Expression, Group,
    Join, ModDeclaration, Name, Namepath, Parameter, ParameterKind,
    SettingDeclaration, StringLiteral, Variable,
)
from ...shared.errors import RecipecImplementationError
from ...shared.source_location import SourceLocation
from ...utils.config import BOOLEAN_FALSE_LITERAL, BOOLEAN_TRUE_LITERAL
from .literals import unquote

LarkChild: TypeAlias = Union[Token, Expression, Parameter, Dependency, Namepath]

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipeHeader:
    """`[@]name params... : deps...`; the parser attaches the body."""
    name: Name
    quiet: bool
    parameters: Tuple[Parameter, ...]
    dependencies: Tuple[Dependency, ...]


@v_args(inline=True)
class RecipeTransformer(Transformer):
    """
    Builds AST nodes from one line's parse tree.

    Lark positions are relative to the text handed to the parser (a single
    line, or an interpolation inside a body line); `at()` sets where that
    text starts in the file so every location comes out absolute.
    """

    def __init__(self) -> None:
        super().__init__()
        self.current_file: str = ""
        self.line_number: int = 1
        self.text_offset: int = 0
        self.column_offset: int = 0

    def at(self, current_file: str, line_number: int, text_offset: int, column_offset: int) -> "RecipeTransformer":
        self.current_file = current_file
        self.line_number = line_number
        self.text_offset = text_offset
        self.column_offset = column_offset
        return self

    def location(self, token: Token, length: Optional[int] = None) -> SourceLocation:
        if not self.current_file:
            raise RecipecImplementationError(
                "current_file not set; call at() before transforming"
            )
        return SourceLocation(
            file=self.current_file,
            line=self.line_number,
            column=self.column_offset + token.column,
            offset=self.text_offset + token.start_pos,
            length=len(token) if length is None else length,
        )

    def _name(self, token: Token) -> Name:
        return Name(str(token), self.location(token))

    # =========================================================================
    # TOP-LEVEL ITEMS
    # =========================================================================

    def assignment(self, name: Token, value: Expression) -> Assignment:
        return Assignment(name=self._name(name), value=value)

    def export_assignment(self, name: Token, value: Expression) -> Assignment:
        return Assignment(name=self._name(name), value=value, export=True)

    def module_decl(self, name: Token) -> ModDeclaration:
        return ModDeclaration(name=self._name(name))

    def setting(self, name: Token, value: Optional[Token] = None) -> SettingDeclaration:
        if value is None:
            return SettingDeclaration(name=self._name(name))
        location = self.location(value)
        if value.type == "STRING":
            return SettingDeclaration(self._name(name), unquote(str(value)), location)
        if str(value) == BOOLEAN_TRUE_LITERAL:
            return SettingDeclaration(self._name(name), True, location)
        if str(value) == BOOLEAN_FALSE_LITERAL:
            return SettingDeclaration(self._name(name), False, location)
        from ..parser import ParseError
        raise ParseError(
            f"Expected `true`, `false` or a string, found `{value}`",
            self.current_file,
            location,
        )

    def recipe_header(self, *children: LarkChild) -> RecipeHeader:
        quiet = False
        name: Optional[Name] = None
        parameters = []
        dependencies = []
        for child in children:
            if isinstance(child, Token) and child.type == "AT":
                quiet = True
            elif isinstance(child, Token):
                name = self._name(child)
            elif isinstance(child, Parameter):
                parameters.append(child)
            elif isinstance(child, Dependency):
                dependencies.append(child)
        if name is None:
            raise RecipecImplementationError("recipe header without a name")
        return RecipeHeader(name, quiet, tuple(parameters), tuple(dependencies))

    def parameter(self, *children: LarkChild) -> Parameter:
        export = False
        kind = ParameterKind.SINGULAR
        name: Optional[Name] = None
        default: Optional[Expression] = None
        for child in children:
            if isinstance(child, Expression):
                default = child
            elif child.type == "DOLLAR":
                export = True
            elif child.type == "PLUS":
                kind = ParameterKind.PLUS
            elif child.type == "STAR":
                kind = ParameterKind.STAR
            else:
                name = self._name(child)
        if name is None:
            raise RecipecImplementationError("parameter without a name")
        return Parameter(name=name, default=default, kind=kind, export=export)

    def dependency(self, path: Namepath, *arguments: Expression) -> Dependency:
        return Dependency(recipe=path, arguments=tuple(arguments))

    def namepath(self, *names: Token) -> Namepath:
        return Namepath(tuple(self._name(n) for n in names))

    def keyword_name(self, keyword: Token) -> Token:
        # `export:`, `mod:` and `set:` name recipes
        return keyword

    # =========================================================================
    # EXPRESSIONS
    # =========================================================================

    def string(self, token: Token) -> StringLiteral:
        return StringLiteral(value=unquote(str(token)), location=self.location(token))

    def variable(self, token: Token) -> Variable:
        return Variable(self._name(token))

    def call(self, function: Token, *arguments: Expression) -> Call:
        # CALL_NAME carries the opening parenthesis
        name = Name(str(function)[:-1], self.location(function, length=len(function) - 1))
        return Call(function=name, arguments=tuple(arguments))

    def group(self, contents: Expression) -> Group:
        return Group(contents)

    def concatenation(self, lhs: Expression, _plus: Token, rhs: Expression) -> Concatenation:
        return Concatenation(lhs, rhs)

    def join(self, lhs: Expression, rhs: Expression) -> Join:
        return Join(lhs, rhs)

    def conditional(self, lhs: Expression, operator: Token, rhs: Expression,
                    then: Expression, otherwise: Expression) -> Conditional:
        return Conditional(lhs, str(operator), rhs, then, otherwise)

    def __default__(self, data: Any, children: Any, meta: Any) -> Any:
        from ..parser import ParseError
        raise ParseError(f"Missing transformer method for grammar rule '{data}'", self.current_file)
