"""
Recipe AST and resolved-recipe definitions

Syntax nodes produced by the frontend, the unresolved recipes fed to the
resolver and the resolved recipes it hands out. Everything here is
immutable once built.

Visitor Pattern Support:
- Expression nodes have accept() methods for polymorphic dispatch
- `Expression.variables()` is implemented with a visitor (see ast_visitor.py)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Tuple, TypeVar, Union

from .errors import CompileError, CompileErrorKind, RecipecImplementationError
from .source_location import SourceLocation
from ..utils.config import COMMENT_PREFIX, MODULE_SEPARATOR

if TYPE_CHECKING:
    from .ast_visitor import ExpressionVisitor

T = TypeVar('T')


# =============================================================================
# Names
# =============================================================================

@dataclass(frozen=True)
class Name:
    """Located identifier token."""
    lexeme: str
    location: SourceLocation

    def error(self, kind: CompileErrorKind, **data: Any) -> CompileError:
        """Build a compile error located at this token."""
        return CompileError(kind, self.location, **data)

    def __str__(self) -> str:
        return self.lexeme


@dataclass(frozen=True)
class Namepath:
    """
    Non-empty `::`-separated path to a recipe; the prefix addresses nested
    modules and `last` is the recipe name.
    """
    segments: Tuple[Name, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise RecipecImplementationError("Namepath must have at least one segment")

    @classmethod
    def of(cls, *names: Name) -> Namepath:
        return cls(tuple(names))

    @property
    def last(self) -> Name:
        return self.segments[-1]

    def lexemes(self) -> Tuple[str, ...]:
        return tuple(segment.lexeme for segment in self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Name]:
        return iter(self.segments)

    def __str__(self) -> str:
        return MODULE_SEPARATOR.join(self.lexemes())


# =============================================================================
# Expressions
# =============================================================================

class Expression:
    """
    Base class for expressions.

    Only the set of variables an expression references matters to
    resolution; evaluation belongs to the execution stage.
    """
    __slots__ = ()

    def accept(self, visitor: ExpressionVisitor[T]) -> T:
        raise NotImplementedError(f"{type(self).__name__}.accept")

    def variables(self) -> Iterator[Name]:
        """Referenced variable tokens, in source order."""
        from .ast_visitor import VariableCollector
        return iter(VariableCollector().collect(self))


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str
    location: SourceLocation

    def accept(self, visitor: ExpressionVisitor[T]) -> T:
        return visitor.visit_string_literal(self)


@dataclass(frozen=True)
class Variable(Expression):
    name: Name

    def accept(self, visitor: ExpressionVisitor[T]) -> T:
        return visitor.visit_variable(self)


@dataclass(frozen=True)
class Call(Expression):
    """`function(arguments...)`; the function name is not a variable."""
    function: Name
    arguments: Tuple[Expression, ...] = ()

    def accept(self, visitor: ExpressionVisitor[T]) -> T:
        return visitor.visit_call(self)


@dataclass(frozen=True)
class Concatenation(Expression):
    lhs: Expression
    rhs: Expression

    def accept(self, visitor: ExpressionVisitor[T]) -> T:
        return visitor.visit_concatenation(self)


@dataclass(frozen=True)
class Join(Expression):
    """Path join, `lhs / rhs`."""
    lhs: Expression
    rhs: Expression

    def accept(self, visitor: ExpressionVisitor[T]) -> T:
        return visitor.visit_join(self)


@dataclass(frozen=True)
class Conditional(Expression):
    """`if lhs == rhs { then } else { otherwise }` (also `!=` and `=~`)."""
    lhs: Expression
    operator: str
    rhs: Expression
    then: Expression
    otherwise: Expression

    def accept(self, visitor: ExpressionVisitor[T]) -> T:
        return visitor.visit_conditional(self)


@dataclass(frozen=True)
class Group(Expression):
    contents: Expression

    def accept(self, visitor: ExpressionVisitor[T]) -> T:
        return visitor.visit_group(self)


# =============================================================================
# Recipe parts
# =============================================================================

class ParameterKind(Enum):
    SINGULAR = "singular"
    PLUS = "plus"    # +name: one or more values
    STAR = "star"    # *name: zero or more values


@dataclass(frozen=True)
class Parameter:
    name: Name
    default: Optional[Expression] = None
    kind: ParameterKind = ParameterKind.SINGULAR
    export: bool = False

    @property
    def is_required(self) -> bool:
        return self.default is None and self.kind is not ParameterKind.STAR

    @property
    def is_variadic(self) -> bool:
        return self.kind is not ParameterKind.SINGULAR


@dataclass(frozen=True)
class Dependency:
    """Unresolved reference to another recipe plus its argument expressions."""
    recipe: Namepath
    arguments: Tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Text:
    text: str
    location: SourceLocation


@dataclass(frozen=True)
class Interpolation:
    expression: Expression
    location: SourceLocation


Fragment = Union[Text, Interpolation]


@dataclass(frozen=True)
class Line:
    """One body line; indentation is stripped."""
    fragments: Tuple[Fragment, ...]
    number: int = 0

    def is_comment(self) -> bool:
        return (
            bool(self.fragments)
            and isinstance(self.fragments[0], Text)
            and self.fragments[0].text.startswith(COMMENT_PREFIX)
        )

    def interpolations(self) -> Iterator[Interpolation]:
        return (f for f in self.fragments if isinstance(f, Interpolation))


def _argument_range(parameters: Tuple[Parameter, ...]) -> Tuple[int, Optional[int]]:
    minimum = sum(1 for p in parameters if p.is_required)
    if any(p.is_variadic for p in parameters):
        return minimum, None
    return minimum, len(parameters)


# =============================================================================
# Recipes
# =============================================================================

@dataclass(frozen=True)
class UnresolvedRecipe:
    """Parsed recipe whose dependencies are still paths."""
    name: Name
    parameters: Tuple[Parameter, ...] = ()
    dependencies: Tuple[Dependency, ...] = ()
    body: Tuple[Line, ...] = ()
    quiet: bool = False
    doc: Optional[str] = None

    @property
    def key(self) -> str:
        return self.name.lexeme

    def resolve(self, dependencies: List[Recipe]) -> Recipe:
        """
        Link this recipe to its resolved dependencies (same order as
        `self.dependencies`), checking each dependency's argument count
        against the parameters of the recipe it names.
        """
        if len(dependencies) != len(self.dependencies):
            raise RecipecImplementationError(
                f"recipe `{self.key}` declares {len(self.dependencies)} dependencies "
                f"but {len(dependencies)} were resolved"
            )

        resolved = []
        for dependency, target in zip(self.dependencies, dependencies):
            minimum, maximum = target.argument_range()
            found = len(dependency.arguments)
            if found < minimum or (maximum is not None and found > maximum):
                raise dependency.recipe.last.error(
                    CompileErrorKind.DEPENDENCY_ARGUMENT_COUNT_MISMATCH,
                    dependency=str(dependency.recipe),
                    found=found,
                    min=minimum,
                    max=maximum,
                )
            resolved.append(ResolvedDependency(
                recipe=target,
                arguments=dependency.arguments,
                path=dependency.recipe,
            ))

        return Recipe(
            name=self.name,
            parameters=self.parameters,
            dependencies=tuple(resolved),
            body=self.body,
            quiet=self.quiet,
            doc=self.doc,
        )


@dataclass(frozen=True, eq=False)
class ResolvedDependency:
    """Shared reference to a resolved recipe plus the call-site arguments."""
    recipe: Recipe
    arguments: Tuple[Expression, ...]
    path: Namepath


@dataclass(frozen=True, eq=False)
class Recipe:
    """
    Fully linked recipe. Compared by identity: the same instance is shared by
    the namespace and every dependent recipe.
    """
    name: Name
    parameters: Tuple[Parameter, ...]
    dependencies: Tuple[ResolvedDependency, ...]
    body: Tuple[Line, ...]
    quiet: bool = False
    doc: Optional[str] = None

    @property
    def key(self) -> str:
        return self.name.lexeme

    def argument_range(self) -> Tuple[int, Optional[int]]:
        """(min, max) argument count; max is None with a variadic parameter."""
        return _argument_range(self.parameters)

    def __repr__(self) -> str:
        deps = ", ".join(str(d.path) for d in self.dependencies)
        return f"Recipe({self.key!r}, dependencies=[{deps}])"


# =============================================================================
# Module-level items
# =============================================================================

@dataclass(frozen=True)
class Assignment:
    name: Name
    value: Expression
    export: bool = False

    @property
    def key(self) -> str:
        return self.name.lexeme


@dataclass(frozen=True)
class ModDeclaration:
    """`mod name`: declares a child module loaded from its own file."""
    name: Name

    @property
    def key(self) -> str:
        return self.name.lexeme


@dataclass(frozen=True)
class SettingDeclaration:
    """`set name [:= value]`; a bare `set name` means true."""
    name: Name
    value: Union[bool, str] = True
    value_location: Optional[SourceLocation] = None


Item = Union[Assignment, ModDeclaration, SettingDeclaration, UnresolvedRecipe]


@dataclass
class ModuleSyntax:
    """Parsed items of one recipe file, in source order."""
    file: str
    items: List[Item] = field(default_factory=list)

    def recipes(self) -> Iterator[UnresolvedRecipe]:
        return (i for i in self.items if isinstance(i, UnresolvedRecipe))

    def assignments(self) -> Iterator[Assignment]:
        return (i for i in self.items if isinstance(i, Assignment))

    def modules(self) -> Iterator[ModDeclaration]:
        return (i for i in self.items if isinstance(i, ModDeclaration))

    def settings(self) -> Iterator[SettingDeclaration]:
        return (i for i in self.items if isinstance(i, SettingDeclaration))
