"""
TXR Parser Test Suite
=====================

Tests for AST construction, precedence folding and syntax errors.

Test Organization
-----------------
- TestPrimaries: literals, identifiers, groups and unary prefixes
- TestPrecedence: folding of binary operator runs
- TestParseErrors: first-error reporting with token positions
- TestDepthLimit: deeply nested input fails with a parse error
- TestASTVisitor: visitor dispatch and tree utilities
"""

import dataclasses

import pytest

from txr.lexer import Operator, Token, TokenType, tokenize
from txr.parser import MAX_EXPRESSION_DEPTH, Parser, parse
from txr.ast import (
    ASTVisitor,
    BinaryExpression,
    IdentifierExpression,
    NumberLiteral,
    UnaryExpression,
    UnaryOperator,
    node_count,
    tree_depth,
)
from txr.errors import (
    ParseError,
    UnexpectedTokenError,
    ExpectedCloseParenError,
    TrailingDataError,
    InvalidOperatorPrecedenceError,
    ExpressionTooDeepError,
)


def parse_source(source):
    return parse(tokenize(source))


# =============================================================================
# Primary Expression Tests
# =============================================================================

class TestPrimaries:
    """Tests for single operands."""

    def test_number(self):
        assert parse_source("42") == NumberLiteral(0, 42)

    def test_identifier(self):
        assert parse_source("  x") == IdentifierExpression(2, "x")

    def test_parentheses_leave_no_node(self):
        assert parse_source("((7))") == NumberLiteral(2, 7)

    def test_unary_minus(self):
        assert parse_source("-5") == UnaryExpression(0, UnaryOperator.NEGATE, NumberLiteral(1, 5))

    def test_unary_plus_is_dropped(self):
        assert parse_source("+5") == NumberLiteral(1, 5)

    def test_double_negation(self):
        """'- - 5' keeps both negations."""
        root = parse_source("- - 5")
        assert root == UnaryExpression(
            0,
            UnaryOperator.NEGATE,
            UnaryExpression(2, UnaryOperator.NEGATE, NumberLiteral(4, 5)),
        )

    def test_unary_binds_to_single_primary(self):
        """'-2 * 3' parses as '(-2) * 3'."""
        root = parse_source("-2 * 3")
        assert isinstance(root, BinaryExpression)
        assert root.operator == Operator.MULTIPLY
        assert isinstance(root.left, UnaryExpression)
        assert root.right == NumberLiteral(5, 3)

    def test_negated_group(self):
        root = parse_source("-(1 + 2)")
        assert isinstance(root, UnaryExpression)
        assert root.operand.operator == Operator.ADD

    def test_negative_right_operand(self):
        root = parse_source("1 - -2")
        assert root.operator == Operator.SUBTRACT
        assert root.right == UnaryExpression(4, UnaryOperator.NEGATE, NumberLiteral(5, 2))

    def test_missing_eof_is_supplied(self):
        parser = Parser([Token(TokenType.NUMBER, 0, 1)])
        assert parser.parse() == NumberLiteral(0, 1)
        assert parser.tokens[-1].is_eof

    def test_parse_is_deterministic(self):
        tokens = tokenize("2 * (5 + 5) - 1")
        assert parse(tokens) == parse(tokens)


# =============================================================================
# Precedence Tests
# =============================================================================

class TestPrecedence:
    """Tests for binary operator folding."""

    def test_left_associative_subtraction(self):
        """'8 - 3 - 2' groups as '(8 - 3) - 2'."""
        root = parse_source("8 - 3 - 2")
        assert root == BinaryExpression(
            6,
            Operator.SUBTRACT,
            BinaryExpression(2, Operator.SUBTRACT, NumberLiteral(0, 8), NumberLiteral(4, 3)),
            NumberLiteral(8, 2),
        )

    def test_left_associative_mixed_rank(self):
        """'8 / 4 * 2' groups as '(8 / 4) * 2'."""
        root = parse_source("8 / 4 * 2")
        assert root.operator == Operator.MULTIPLY
        assert root.left.operator == Operator.FLOAT_DIVIDE

    def test_multiplication_binds_tighter_on_right(self):
        root = parse_source("2 + 3 * 4")
        assert root.operator == Operator.ADD
        assert root.left == NumberLiteral(0, 2)
        assert root.right.operator == Operator.MULTIPLY

    def test_multiplication_binds_tighter_on_left(self):
        root = parse_source("2 * 3 + 4")
        assert root.operator == Operator.ADD
        assert root.left.operator == Operator.MULTIPLY
        assert root.right == NumberLiteral(8, 4)

    def test_groups_override_precedence(self):
        root = parse_source("(2 + 3) * 4")
        assert root.operator == Operator.MULTIPLY
        assert root.left.operator == Operator.ADD

    def test_reference_expression(self):
        """'2 * (5 + 5) - 1' with node positions."""
        root = parse_source("2 * (5 + 5) - 1")
        assert root == BinaryExpression(
            12,
            Operator.SUBTRACT,
            BinaryExpression(
                2,
                Operator.MULTIPLY,
                NumberLiteral(0, 2),
                BinaryExpression(7, Operator.ADD, NumberLiteral(5, 5), NumberLiteral(9, 5)),
            ),
            NumberLiteral(14, 1),
        )

    def test_long_mixed_run(self):
        """'1 + 2 * 3 - 4 mod 3' groups as '(1 + (2 * 3)) - (4 mod 3)'."""
        root = parse_source("1 + 2 * 3 - 4 mod 3")
        assert root.operator == Operator.SUBTRACT
        assert root.left.operator == Operator.ADD
        assert root.left.right.operator == Operator.MULTIPLY
        assert root.right.operator == Operator.MODULO

    def test_operators_within_group_fold_independently(self):
        root = parse_source("2 * (3 + 4 * 5)")
        inner = root.right
        assert inner.operator == Operator.ADD
        assert inner.right.operator == Operator.MULTIPLY


# =============================================================================
# Error Tests
# =============================================================================

class TestParseErrors:
    """Tests for syntax errors and their positions."""

    def test_unclosed_group(self):
        with pytest.raises(ExpectedCloseParenError) as exc_info:
            parse_source("(2 + 3")
        error = exc_info.value
        assert error.token.is_eof
        assert str(error.position) == "<EOF>"
        assert error.summary == "Expected a ')' at position <EOF>"

    def test_group_closed_by_wrong_token(self):
        with pytest.raises(ExpectedCloseParenError) as exc_info:
            parse_source("(2 3)")
        assert exc_info.value.position.offset == 3

    def test_trailing_data(self):
        with pytest.raises(TrailingDataError) as exc_info:
            parse_source("2 + 3 4")
        assert exc_info.value.position.offset == 6
        assert exc_info.value.summary == "Trailing data at position 6"

    def test_stray_close_paren(self):
        with pytest.raises(TrailingDataError) as exc_info:
            parse_source("1)")
        assert exc_info.value.position.offset == 1

    def test_empty_source(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("")
        assert str(exc_info.value.position) == "<EOF>"

    def test_dangling_operator(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("2 +")
        assert exc_info.value.token.is_eof

    def test_empty_group(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("()")
        assert exc_info.value.position.offset == 1

    @pytest.mark.parametrize("source,offset", [
        ("* 2", 0),
        ("mod 2", 0),
        (")", 0),
        ("2 * / 3", 4),
    ])
    def test_token_cannot_start_operand(self, source, offset):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source(source)
        assert exc_info.value.position.offset == offset

    def test_operator_without_rank(self):
        """An operator token carrying no binary operator has no precedence."""
        tokens = [
            Token(TokenType.NUMBER, 0, 1),
            Token(TokenType.OPERATOR, 2, "?"),
            Token(TokenType.NUMBER, 4, 2),
            Token(TokenType.EOF, 5),
        ]
        with pytest.raises(InvalidOperatorPrecedenceError) as exc_info:
            parse(tokens)
        assert exc_info.value.position.offset == 2

    def test_all_parse_errors_share_base(self):
        for source in ["(1", "1 2", "", "1 *"]:
            with pytest.raises(ParseError):
                parse_source(source)


# =============================================================================
# Depth Limit Tests
# =============================================================================

class TestDepthLimit:
    """Nesting past MAX_EXPRESSION_DEPTH is a parse error, not a crash."""

    def test_deep_groups(self):
        source = "(" * 3000 + "1" + ")" * 3000
        with pytest.raises(ExpressionTooDeepError) as exc_info:
            parse_source(source)
        assert exc_info.value.position.offset == MAX_EXPRESSION_DEPTH

    def test_deep_prefixes(self):
        with pytest.raises(ExpressionTooDeepError) as exc_info:
            parse_source("-" * 3000 + "1")
        assert exc_info.value.position.offset == MAX_EXPRESSION_DEPTH

    def test_prefix_chain_one_past_limit(self):
        """A literal under the deepest allowed prefix chain adds one level."""
        with pytest.raises(ExpressionTooDeepError) as exc_info:
            parse_source("-" * MAX_EXPRESSION_DEPTH + "1")
        assert exc_info.value.position.offset == 0

    def test_long_operator_chain(self):
        source = "1" + " + 1" * 300
        with pytest.raises(ExpressionTooDeepError) as exc_info:
            parse_source(source)
        # the operator whose fold makes the tree one level too deep
        assert exc_info.value.position.offset == 2 + 4 * (MAX_EXPRESSION_DEPTH - 1)

    def test_nesting_within_limit(self):
        depth = MAX_EXPRESSION_DEPTH - 50
        assert parse_source("(" * depth + "1" + ")" * depth) == NumberLiteral(depth, 1)
        assert tree_depth(parse_source("-" * depth + "1")) == depth + 1
        assert tree_depth(parse_source("1" + " + 1" * depth)) == depth + 1

    def test_parser_is_reusable_after_limit(self):
        parser = Parser(tokenize("(" * 3000 + "1"))
        with pytest.raises(ExpressionTooDeepError):
            parser.parse()
        assert Parser(tokenize("(1)")).parse() == NumberLiteral(1, 1)


# =============================================================================
# Visitor Tests
# =============================================================================

class TestASTVisitor:
    """Tests for visitor dispatch and tree helpers."""

    def test_generic_visit_walks_children(self):
        class NumberCollector(ASTVisitor):
            def __init__(self):
                self.values = []

            def visit_NumberLiteral(self, node):
                self.values.append(node.value)

        collector = NumberCollector()
        collector.visit(parse_source("-(1 + 2) * 3"))
        assert collector.values == [1, 2, 3]

    def test_dispatch_returns_handler_result(self):
        class Evaluator(ASTVisitor):
            def visit_NumberLiteral(self, node):
                return node.value

            def visit_BinaryExpression(self, node):
                return self.visit(node.left) + self.visit(node.right)

        assert Evaluator().visit(parse_source("1 + 2 + 3")) == 6

    def test_node_count(self):
        assert node_count(parse_source("7")) == 1
        assert node_count(parse_source("-(1 + 2)")) == 4
        assert node_count(parse_source("2 * (5 + 5) - 1")) == 7

    def test_tree_depth(self):
        assert tree_depth(parse_source("7")) == 1
        assert tree_depth(parse_source("-(1 + 2)")) == 3
        assert tree_depth(parse_source("2 * (5 + 5) - 1")) == 4

    def test_nodes_are_immutable(self):
        node = parse_source("1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.value = 2
