#!/usr/bin/env python3
"""
Tests for expression variable collection and the expression visitor.
"""

from recipec.shared.ast_visitor import ExpressionVisitor
from recipec.shared.constants import CONSTANTS, constants


def _value(parser, expression: str):
    return parser.parse(f"x := {expression}").items[0].value


def _names(parser, expression: str):
    return [name.lexeme for name in _value(parser, expression).variables()]


class TestVariables:

    def test_string_has_no_variables(self, parser):
        assert _names(parser, "'a'") == []

    def test_single_variable(self, parser):
        assert _names(parser, "a") == ["a"]

    def test_source_order(self, parser):
        assert _names(parser, "a + 'x' + b / c") == ["a", "b", "c"]

    def test_call_arguments_only(self, parser):
        assert _names(parser, "join(a, 'b', c)") == ["a", "c"]

    def test_conditional_all_parts(self, parser):
        assert _names(parser, "if a =~ b { c } else { d }") == ["a", "b", "c", "d"]

    def test_group(self, parser):
        assert _names(parser, "(a + (b))") == ["a", "b"]

    def test_repeated_variable_reported_each_time(self, parser):
        assert _names(parser, "a + a") == ["a", "a"]

    def test_variable_tokens_are_located(self, parser):
        (name,) = _value(parser, "'p' + abc").variables()
        assert (name.location.column, name.location.length) == (12, 3)


class _NodeCounter(ExpressionVisitor[int]):

    def visit_string_literal(self, node):
        return 1

    def visit_variable(self, node):
        return 1

    def visit_call(self, node):
        return 1 + sum(a.accept(self) for a in node.arguments)

    def visit_concatenation(self, node):
        return 1 + node.lhs.accept(self) + node.rhs.accept(self)

    def visit_join(self, node):
        return 1 + node.lhs.accept(self) + node.rhs.accept(self)

    def visit_conditional(self, node):
        parts = (node.lhs, node.rhs, node.then, node.otherwise)
        return 1 + sum(p.accept(self) for p in parts)

    def visit_group(self, node):
        return 1 + node.contents.accept(self)


class TestVisitor:

    def test_custom_visitor(self, parser):
        assert _value(parser, "(a + 'b') / f(c)").accept(_NodeCounter()) == 7


class TestConstants:

    def test_constants_read_only(self):
        assert constants() is CONSTANTS
        assert CONSTANTS["HEXUPPER"] == "0123456789ABCDEF"
        assert "PATH_SEP" in CONSTANTS and "BG_WHITE" in CONSTANTS
