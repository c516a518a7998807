"""
Test suite for the CALF parser.

Tests cover:
- Operator precedence and associativity
- Ternaries, calls, lambdas, lists and ranges
- Node positions
- Syntax error messages and positions
"""

import logging
import unittest
import sys
import os
from decimal import Decimal

import numpy as np
import pytest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from calf import FrontendConfiguration
from calf.lexer import LexerError, Position, TokenType
from calf.parser import (
    AST, ASTVisitor, Assign, BinaryOp, Call, ExpressionStatement, Group, Identifier,
    Lambda, Number, ParseError, Parser, RangeLiteral, TernaryOp, UnaryOp,
    build_ast, format_node
)


def render(source, number_type=int):
    """Parse and render each statement in prefix notation."""
    return [format_node(statement) for statement in build_ast(source, number_type)]


def parse_error(source, number_type=int):
    with pytest.raises(ParseError) as excinfo:
        build_ast(source, number_type)
    return excinfo.value


class TestPrecedence(unittest.TestCase):
    """Test the precedence tiers and their associativity."""

    def test_subtraction_is_left_associative(self):
        self.assertEqual(render("1 - 2 - 3"), ["(- (- 1 2) 3)"])

    def test_factor_binds_tighter_than_term(self):
        self.assertEqual(render("1 + 2 * 3"), ["(+ 1 (* 2 3))"])
        self.assertEqual(render("a * b % c / d"), ["(/ (% (* a b) c) d)"])

    def test_tier_ordering(self):
        self.assertEqual(render("a == b < c"), ["(== a (< b c))"])
        self.assertEqual(render("a && b | c"), ["(&& a (| b c))"])
        self.assertEqual(render("a & b + c"), ["(& a (+ b c))"])
        self.assertEqual(render("a != b == c"), ["(== (!= a b) c)"])

    def test_logical_operators_share_comparison_tier(self):
        self.assertEqual(render("a < b && c >= d"), ["(>= (&& (< a b) c) d)"])
        self.assertEqual(render("a || b <= c"), ["(<= (|| a b) c)"])

    def test_unary_operators(self):
        self.assertEqual(render("!!var"), ["(! (! var))"])
        self.assertEqual(render("- a * b"), ["(* (- a) b)"])
        self.assertEqual(render("!f{x}"), ["(! (call f x))"])

    def test_full_precedence_chain(self):
        source = "num / 4 + 10 * (!!var - 2) % 3 == -num + 9 != 8 * num > !19"
        self.assertEqual(render(source), [
            "(!= (== (+ (/ num 4) (% (* 10 (group (- (! (! var)) 2))) 3)) "
            "(+ (- num) 9)) (> (* 8 num) (! 19)))"
        ])

    def test_groups_are_kept(self):
        self.assertEqual(render("(a)"), ["(group a)"])
        self.assertEqual(render("((1))"), ["(group (group 1))"])
        self.assertEqual(render("(1 + 2) * 3"), ["(* (group (+ 1 2)) 3)"])

    def test_negative_literal_after_name_starts_new_statement(self):
        self.assertEqual(render("x-1"), ["x", "-1"])
        self.assertEqual(render("x - 1"), ["(- x 1)"])


class TestTernary(unittest.TestCase):
    """Test the conditional operator."""

    def test_simple(self):
        self.assertEqual(render("a ? b : c"), ["(? a b c)"])

    def test_nests_right_in_else_branch(self):
        self.assertEqual(render("a ? b : c ? d : e"), ["(? a b (? c d e))"])

    def test_nests_in_then_branch(self):
        self.assertEqual(render("a ? b ? c : d : e"), ["(? a (? b c d) e)"])

    def test_condition_is_equality_tier(self):
        self.assertEqual(render("a == 1 ? x + 1 : y"), ["(? (== a 1) (+ x 1) y)"])

    def test_position_is_condition_position(self):
        statement = build_ast("  c ? t : e")[0]
        self.assertIsInstance(statement.expression, TernaryOp)
        self.assertEqual(statement.expression.pos, Position(0, 2))

    def test_missing_colon(self):
        error = parse_error("a ? b")
        self.assertEqual(error.message, "Expected a colon operator")
        self.assertEqual(error.position, Position(0, 4))

        error = parse_error("a ? b c")
        self.assertEqual(error.message, "Expected a colon operator")
        self.assertEqual(error.position, Position(0, 4))


class TestCalls(unittest.TestCase):
    """Test function calls and strict comma alternation."""

    def test_no_arguments(self):
        self.assertEqual(render("f{}"), ["(call f)"])

    def test_nested_arguments(self):
        self.assertEqual(render("f{1, g{2}, x + 1}"), ["(call f 1 (call g 2) (+ x 1))"])

    def test_call_position_and_arity(self):
        call = build_ast("  add{a, b}")[0].expression
        self.assertIsInstance(call, Call)
        self.assertEqual(call.function_name, "add")
        self.assertEqual(len(call.arguments), 2)
        self.assertEqual(call.pos, Position(0, 2))

    def test_doubled_comma(self):
        error = parse_error("f{1,,2}")
        self.assertEqual(error.message, "Not expecting a comma")
        self.assertEqual(error.position, Position(0, 4))
        self.assertEqual(error.code, "P003")
        self.assertEqual(error.description, "Unexpected comma")

    def test_parse_error_rejects_lexer_codes(self):
        with self.assertRaises(ValueError):
            ParseError("bad", Position(0, 0), code="L001")

    def test_leading_comma(self):
        error = parse_error("f{,1}")
        self.assertEqual(error.message, "Not expecting a comma")
        self.assertEqual(error.position, Position(0, 2))

    def test_trailing_comma(self):
        error = parse_error("f{1,2,}")
        self.assertEqual(error.message, "Unexpected trailing comma")
        self.assertEqual(error.position, Position(0, 5))

    def test_missing_comma(self):
        error = parse_error("f{1 2}")
        self.assertEqual(error.message, "Expecting a comma")
        self.assertEqual(error.position, Position(0, 4))

    def test_unterminated(self):
        error = parse_error("f{1")
        self.assertTrue(error.message.startswith("Unexpected end of input"))
        self.assertEqual(error.position, Position(0, 3))


class TestLambdas(unittest.TestCase):
    """Test anonymous functions."""

    def test_lambda(self):
        self.assertEqual(render("fn(a, b) a + b"), ["(fn (a b) (+ a b))"])
        self.assertEqual(render("fn() 1"), ["(fn () 1)"])

    def test_lambda_assigned_and_passed(self):
        self.assertEqual(render("add = fn(a, b) a + b"), ["(= add (fn (a b) (+ a b)))"])
        self.assertEqual(render("map{xs, fn(x) x * 2}"), ["(call map xs (fn (x) (* x 2)))"])

    def test_lambda_node(self):
        node = build_ast("fn(x, y) x")[0].expression
        self.assertIsInstance(node, Lambda)
        self.assertEqual(node.parameters, ("x", "y"))
        self.assertEqual(node.pos, Position(0, 0))

    def test_fn_without_parenthesis_is_identifier(self):
        self.assertEqual(render("fn"), ["fn"])

    def test_trailing_comma_in_parameters(self):
        error = parse_error("fn(a,) a")
        self.assertEqual(error.message, "Unexpected trailing comma")
        self.assertEqual(error.position, Position(0, 4))

    def test_parameter_must_be_identifier(self):
        error = parse_error("fn(1) a")
        self.assertEqual(error.message, "Expecting a parameter")
        self.assertEqual(error.position, Position(0, 3))

    def test_missing_body(self):
        error = parse_error("fn(a)")
        self.assertEqual(error.message, "Could not parse a valid expression")
        self.assertEqual(error.position, Position(0, 5))


class TestAggregates(unittest.TestCase):
    """Test list and range literals."""

    def test_lists(self):
        self.assertEqual(render("[]"), ["(list)"])
        self.assertEqual(render("[1, 2 + 3, f{x}]"), ["(list 1 (+ 2 3) (call f x))"])
        self.assertEqual(render("[[a], []]"), ["(list (list a) (list))"])

    def test_list_comma_errors(self):
        error = parse_error("[1,,2]")
        self.assertEqual(error.message, "Not expecting a comma")
        self.assertEqual(error.position, Position(0, 3))

        error = parse_error("[1, 2,]")
        self.assertEqual(error.message, "Unexpected trailing comma")
        self.assertEqual(error.position, Position(0, 5))

    def test_ranges(self):
        self.assertEqual(render("[0..5]"), ["(range 0 5)"])
        self.assertEqual(render("[0..5;2]"), ["(range 0 5 2)"])
        self.assertEqual(render("[0.5..3;0.5]", float), ["(range 0.5 3 0.5)"])

    def test_range_node(self):
        node = build_ast("r = [1..4]", int)[0].value
        self.assertEqual(node, RangeLiteral(1, 4, None, Position(0, 4)))

    def test_range_length_must_be_whole(self):
        error = parse_error("[0..2.5]", float)
        self.assertEqual(error.message, "Range length must be a non-negative integer")
        self.assertEqual(error.position, Position(0, 4))

        error = parse_error("[0..-1]")
        self.assertEqual(error.position, Position(0, 4))

    def test_range_length_must_be_number(self):
        error = parse_error("[0..x]")
        self.assertEqual(error.message, "Expecting a range length")
        self.assertEqual(error.position, Position(0, 4))

    def test_unclosed_range(self):
        error = parse_error("[0..5")
        self.assertEqual(error.message, "Expected a closing bracket")
        self.assertEqual(error.position, Position(0, 4))


class TestPrimary(unittest.TestCase):
    """Test primary expressions and their failures."""

    def test_missing_closing_parenthesis_at_end(self):
        error = parse_error("(1 + 2")
        self.assertEqual(error.message, "Expected a closing parenthesis after expression")
        self.assertEqual(error.position, Position(0, 5))

    def test_missing_closing_parenthesis_before_token(self):
        error = parse_error("(1 + 2 3")
        self.assertEqual(error.message, "Expected a closing parenthesis after expression")
        self.assertEqual(error.position, Position(0, 7))

    def test_invalid_expression_reported_at_lexer_position(self):
        error = parse_error("x = )")
        self.assertEqual(error.message, "Could not parse a valid expression")
        self.assertEqual(error.position, Position(0, 5))
        self.assertEqual(error.token.pos, Position(0, 4))

    def test_assignment_without_value(self):
        error = parse_error("x =")
        self.assertEqual(error.message, "Could not parse a valid expression")
        self.assertEqual(error.position, Position(0, 3))

    def test_lexer_error_propagates(self):
        with self.assertRaises(LexerError) as ctx:
            build_ast("a = 1 @")
        self.assertEqual(ctx.exception.position, Position(0, 6))


class TestStatements(unittest.TestCase):
    """Test whole programs."""

    def test_end_to_end(self):
        ast = build_ast("x = 10   y = (var + num) - 7", int)
        expected = AST((
            Assign("x", Number(10, Position(0, 4)), Position(0, 0)),
            Assign(
                "y",
                BinaryOp(
                    TokenType.MINUS,
                    Group(
                        BinaryOp(
                            TokenType.PLUS,
                            Identifier("var", Position(0, 14)),
                            Identifier("num", Position(0, 20)),
                            Position(0, 14),
                        ),
                        Position(0, 13),
                    ),
                    Number(7, Position(0, 27)),
                    Position(0, 13),
                ),
                Position(0, 9),
            ),
        ))
        self.assertEqual(ast, expected)
        self.assertEqual([format_node(s) for s in ast],
                         ["(= x 10)", "(= y (- (group (+ var num)) 7))"])

    def test_default_number_type_is_float(self):
        self.assertEqual([format_node(s) for s in build_ast("x = 10")], ["(= x 10.0)"])

    def test_empty_inputs(self):
        for source in ["", "   ", "\n\n", "// c\n\n// d"]:
            self.assertEqual(len(build_ast(source)), 0)

    def test_statements_need_no_separator(self):
        self.assertEqual(render("a b c"), ["a", "b", "c"])
        self.assertEqual(render("f{1} g{2}"), ["(call f 1)", "(call g 2)"])

    def test_statement_positions(self):
        ast = build_ast("a = 1\n  !b\n// done\nc")
        self.assertEqual([s.pos for s in ast], [Position(0, 0), Position(1, 3), Position(3, 0)])
        self.assertIsInstance(ast[1], ExpressionStatement)
        self.assertIsInstance(ast[1].expression, UnaryOp)

    def test_parse_is_deterministic(self):
        source = "z = fn(a) a ? [1..3] : f{a, -2}"
        self.assertEqual(build_ast(source), build_ast(source))

    def test_scan_statement_one_at_a_time(self):
        parser = Parser("a = 1 b")
        self.assertIsInstance(parser.scan_statement(), Assign)
        self.assertFalse(parser.is_end())
        self.assertIsInstance(parser.scan_statement(), ExpressionStatement)
        self.assertTrue(parser.is_end())


class TestConfiguration(unittest.TestCase):
    """Test how configuration reaches the parser."""

    def test_number_type_from_configuration(self):
        ast = build_ast("x = 7", config=FrontendConfiguration(number_type="int"))
        self.assertEqual(ast[0].value.value, 7)
        self.assertIsInstance(ast[0].value.value, int)

    def test_explicit_number_type_overrides_configuration(self):
        config = FrontendConfiguration(number_type="int")
        ast = build_ast("x = 0.1", Decimal, config)
        self.assertEqual(ast[0].value.value, Decimal("0.1"))

    def test_numpy_number_type(self):
        ast = build_ast("x = 5", np.int32)
        self.assertIsInstance(ast[0].value.value, np.int32)

    def test_invalid_configuration(self):
        with self.assertRaises(TypeError):
            FrontendConfiguration(number_type="nope")
        with self.assertRaises(ValueError):
            FrontendConfiguration(max_lookahead=1)

    def test_smallest_lookahead_covers_grammar(self):
        config = FrontendConfiguration(number_type="int", max_lookahead=2)
        ast = build_ast("f = fn(a) [0..2] ? g{a} : a", config=config)
        self.assertEqual([format_node(s) for s in ast],
                         ["(= f (fn (a) (? (range 0 2) (call g a) a)))"])

    def test_parser_leaves_logger_levels_alone(self):
        calf_logger = logging.getLogger("calf")
        level = calf_logger.level
        build_ast("a = 1", config=FrontendConfiguration(filename="quiet.calf"))
        self.assertEqual(calf_logger.level, level)

    def test_filename_in_diagnostics(self):
        config = FrontendConfiguration(filename="demo.calf")
        with self.assertRaises(LexerError) as ctx:
            build_ast("@", config=config)
        self.assertIn("demo.calf:0:0", str(ctx.exception))

        with self.assertRaises(ParseError) as ctx:
            build_ast("f{1,,2}", config=config)
        self.assertIn("--> demo.calf:0:4", str(ctx.exception))


class TestVisitors(unittest.TestCase):
    """Test traversal of built trees."""

    def test_generic_visit_walks_children_in_order(self):
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_Identifier(self, node):
                self.names.append(node.name)

        collector = NameCollector()
        for statement in build_ast("f{a, b + c} ? d : e"):
            statement.accept(collector)
        self.assertEqual(collector.names, ["a", "b", "c", "d", "e"])

    def test_printer_rejects_unknown_nodes(self):
        with self.assertRaises(TypeError):
            format_node(object())


if __name__ == '__main__':
    unittest.main()
