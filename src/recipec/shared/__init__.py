"""
Shared components: source locations, errors, AST nodes and visitors.
"""

from .source_location import SourceLocation
from .errors import (
    Error, ErrorReporter, RecipecError, RecipecSourceError,
    RecipecImplementationError, CompileError, CompileErrorKind,
)
from .nodes import (
    Name, Namepath,
    Expression, StringLiteral, Variable, Call, Concatenation, Join, Conditional, Group,
    ParameterKind, Parameter, Dependency, Text, Interpolation, Fragment, Line,
    UnresolvedRecipe, ResolvedDependency, Recipe,
    Assignment, ModDeclaration, SettingDeclaration, Item, ModuleSyntax,
)
from .ast_visitor import ExpressionVisitor, VariableCollector
from .constants import CONSTANTS, constants
