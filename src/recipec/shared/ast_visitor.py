"""
Expression Visitor Pattern

- Abstract base class with visit_* methods for each expression node type
- VariableCollector: the visitor behind `Expression.variables()`
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, List, TypeVar

if TYPE_CHECKING:
    from .nodes import (
        Call, Concatenation, Conditional, Expression, Group, Join, Name,
        StringLiteral, Variable,
    )

T = TypeVar('T')


class ExpressionVisitor(ABC, Generic[T]):
    """Visitor over expression nodes; nodes dispatch via accept()."""

    @abstractmethod
    def visit_string_literal(self, node: "StringLiteral") -> T:
        pass

    @abstractmethod
    def visit_variable(self, node: "Variable") -> T:
        pass

    @abstractmethod
    def visit_call(self, node: "Call") -> T:
        pass

    @abstractmethod
    def visit_concatenation(self, node: "Concatenation") -> T:
        pass

    @abstractmethod
    def visit_join(self, node: "Join") -> T:
        pass

    @abstractmethod
    def visit_conditional(self, node: "Conditional") -> T:
        pass

    @abstractmethod
    def visit_group(self, node: "Group") -> T:
        pass


class VariableCollector(ExpressionVisitor[None]):
    """
    Collects every variable token an expression references, left to right.
    Function names in calls are not variables.
    """

    def __init__(self) -> None:
        self.names: List["Name"] = []

    def collect(self, expression: "Expression") -> List["Name"]:
        expression.accept(self)
        return self.names

    def visit_string_literal(self, node: "StringLiteral") -> None:
        pass

    def visit_variable(self, node: "Variable") -> None:
        self.names.append(node.name)

    def visit_call(self, node: "Call") -> None:
        for argument in node.arguments:
            argument.accept(self)

    def visit_concatenation(self, node: "Concatenation") -> None:
        node.lhs.accept(self)
        node.rhs.accept(self)

    def visit_join(self, node: "Join") -> None:
        node.lhs.accept(self)
        node.rhs.accept(self)

    def visit_conditional(self, node: "Conditional") -> None:
        node.lhs.accept(self)
        node.rhs.accept(self)
        node.then.accept(self)
        node.otherwise.accept(self)

    def visit_group(self, node: "Group") -> None:
        node.contents.accept(self)
