"""
TXR Recursive Descent Parser
============================

This module builds an AST from the lexer's token list. Operands are parsed
by recursive descent; runs of binary operators are resolved by a
precedence sweep rather than one grammar rule per precedence level.

Grammar (Simplified EBNF)
-------------------------
expression  ::= primary (OPERATOR primary)*
primary     ::= NUMBER
              | IDENTIFIER
              | '(' expression ')'
              | '+' primary
              | '-' primary

The operands of a unary ``+``/``-`` are single primaries, so ``-2 * 3``
parses as ``(-2) * 3``. Unary plus is a no-op and leaves no node behind.

Precedence Resolution
---------------------
An ``expression`` is first collected flat:

    operands:  [2,  3,  4,  1]
    operators: [ +,  *,  - ]

then folded one precedence rank at a time, tightest first. Each sweep
scans left to right and combines every operator of the current rank with
its two neighbours, producing new operand/operator lists:

    rank 0 (* / % div):  [2, (3 * 4), 1]   [+, -]
    rank 1 (+ -):        [((2 + (3 * 4)) - 1)]

Folding left to right makes operators of equal rank left associative.

Example Usage
-------------
>>> from txr.lexer import tokenize
>>> from txr.parser import parse
>>> parse(tokenize("8 - 3 - 2"))
BinaryExpression(position=6, operator=<Operator.SUBTRACT: 17>, ...)
"""

import logging
from typing import Sequence

from txr.lexer import MAX_PRECEDENCE, Operator, Token, TokenType
from txr.ast import (
    Expression,
    tree_depth,
    NumberLiteral,
    IdentifierExpression,
    UnaryExpression,
    UnaryOperator,
    BinaryExpression,
)
from txr.errors import (
    UnexpectedTokenError,
    ExpectedCloseParenError,
    TrailingDataError,
    InvalidOperatorPrecedenceError,
    ExpressionTooDeepError,
)

logger = logging.getLogger(__name__)

# Deepest tree (and deepest group or prefix nesting) the parser will build.
# Later stages walk the tree recursively.
MAX_EXPRESSION_DEPTH = 200


class Parser:
    """
    Recursive descent parser for TXR expressions.

    Parsing stops at the first error; there is no recovery.

    Attributes:
        tokens: Token list ending with an EOF token
    """

    def __init__(self, tokens: Sequence[Token]):
        """
        Initialize the parser.

        Args:
            tokens: Token list from the lexer. An EOF token is assumed at
                    the end; reads past the end return the last token.
        """
        self.tokens = list(tokens)
        if not self.tokens or not self.tokens[-1].is_eof:
            end = self.tokens[-1].position + 1 if self.tokens else 0
            self.tokens.append(Token(TokenType.EOF, end))

        # Current position in token stream
        self._pos = 0
        # Open groups and unary prefixes around the current token
        self._nesting = 0

    def parse(self) -> Expression:
        """
        Parse the token list into a single-rooted AST.

        Returns:
            Root expression node

        Raises:
            ParseError: If the tokens do not form exactly one expression
        """
        self._pos = 0
        self._nesting = 0
        root = self._parse_primary(allow_operators=True)

        trailing = self._peek()
        if not trailing.is_eof:
            raise TrailingDataError(trailing)

        return root

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _peek(self) -> Token:
        """Look at the current token without consuming it."""
        if self._pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self._pos]

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._peek()
        self._pos += 1
        return token

    # =========================================================================
    # Operand Parsing
    # =========================================================================

    def _parse_primary(self, allow_operators: bool) -> Expression:
        """
        Parse one operand, then (optionally) a following operator run.

        Args:
            allow_operators: False for the operand of a unary prefix or of
                             an operator run, which must not swallow the
                             operators that follow it
        """
        token = self._advance()

        if token.type == TokenType.NUMBER:
            node = NumberLiteral(token.position, token.value)

        elif token.type == TokenType.IDENTIFIER:
            node = IdentifierExpression(token.position, token.value)

        elif token.type == TokenType.PAREN_OPEN:
            self._enter(token)
            node = self._parse_primary(allow_operators=True)
            closing = self._advance()
            if closing.type != TokenType.PAREN_CLOSE:
                raise ExpectedCloseParenError(closing)
            self._nesting -= 1

        elif token.type == TokenType.OPERATOR and token.value == Operator.ADD:
            self._enter(token)
            node = self._parse_primary(allow_operators=False)
            self._nesting -= 1

        elif token.type == TokenType.OPERATOR and token.value == Operator.SUBTRACT:
            self._enter(token)
            operand = self._parse_primary(allow_operators=False)
            self._nesting -= 1
            node = self._checked(
                UnaryExpression(token.position, UnaryOperator.NEGATE, operand), token
            )

        else:
            raise UnexpectedTokenError(token)

        if allow_operators and self._peek().type == TokenType.OPERATOR:
            return self._parse_operators(node, self._advance())

        return node

    # =========================================================================
    # Binary Operator Resolution
    # =========================================================================

    def _parse_operators(self, first_operand: Expression, first_operator: Token) -> Expression:
        """
        Collect ``operand (operator operand)*`` and fold it by precedence.

        Args:
            first_operand: Operand already parsed before the run
            first_operator: The (consumed) operator token that started it
        """
        operands = [first_operand]
        operators = [first_operator]

        while True:
            operands.append(self._parse_primary(allow_operators=False))
            if self._peek().type != TokenType.OPERATOR:
                break
            operators.append(self._advance())

        for token in operators:
            self._precedence_of(token)

        for rank in range(MAX_PRECEDENCE):
            operands, operators = self._fold_rank(rank, operands, operators)

        return operands[0]

    def _fold_rank(
        self,
        rank: int,
        operands: list[Expression],
        operators: list[Token],
    ) -> tuple[list[Expression], list[Token]]:
        """
        Combine every operator of ``rank`` with its neighbours.

        Returns:
            New (operands, operators) lists without the folded operators
        """
        folded = [operands[0]]
        remaining: list[Token] = []

        for token, right in zip(operators, operands[1:]):
            if self._precedence_of(token) == rank:
                left = folded.pop()
                node = BinaryExpression(token.position, token.value, left, right)
                folded.append(self._checked(node, token))
            else:
                remaining.append(token)
                folded.append(right)

        return folded, remaining

    # =========================================================================
    # Depth Limits
    # =========================================================================

    def _enter(self, token: Token) -> None:
        """Open one group or prefix level at ``token``."""
        self._nesting += 1
        if self._nesting > MAX_EXPRESSION_DEPTH:
            raise ExpressionTooDeepError(token, MAX_EXPRESSION_DEPTH)

    @staticmethod
    def _checked(node: Expression, token: Token) -> Expression:
        if tree_depth(node) > MAX_EXPRESSION_DEPTH:
            raise ExpressionTooDeepError(token, MAX_EXPRESSION_DEPTH)
        return node

    @staticmethod
    def _precedence_of(token: Token) -> int:
        """
        Precedence rank of an operator token.

        Raises:
            InvalidOperatorPrecedenceError: If the token does not carry a
                                            binary operator with a valid rank
        """
        if not isinstance(token.value, Operator):
            raise InvalidOperatorPrecedenceError(token)
        rank = token.value.precedence
        if not 0 <= rank < MAX_PRECEDENCE:
            raise InvalidOperatorPrecedenceError(token)
        return rank


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(tokens: Sequence[Token]) -> Expression:
    """
    Parse a token list into an AST.

    Args:
        tokens: Token list from ``txr.lexer.tokenize``

    Returns:
        Root expression node

    Raises:
        ParseError: On the first syntax error
    """
    root = Parser(tokens).parse()
    logger.debug(f"Parsed {len(tokens)} tokens into {type(root).__name__}")
    return root
