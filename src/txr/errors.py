"""
TXR Error Hierarchy
===================

This module defines the exception hierarchy for the TXR expression
compiler. All user-facing exceptions inherit from TxrError, allowing
callers to catch every compilation or execution failure with a single
except clause.

Exception Hierarchy
-------------------
TxrError (base)
├── LexError (tokenizer)
│   ├── UnexpectedCharacterError - character outside the language
│   └── NumberTooLargeError - digit run too long to convert
├── ParseError (AST builder)
│   ├── UnexpectedTokenError - token cannot start an operand
│   ├── ExpectedCloseParenError - '(' without matching ')'
│   ├── TrailingDataError - tokens left after a complete expression
│   ├── InvalidOperatorPrecedenceError - operator with no precedence rank
│   └── ExpressionTooDeepError - nesting beyond the parser depth limit
├── LowerError (bytecode lowering)
│   └── UnsupportedNodeError - AST node outside the closed node set
└── ExecError (stack machine)
    ├── UnboundIdentifierError - identifiers cannot be evaluated
    ├── UnknownOperatorError - binary operator outside the operator table
    ├── ArithmeticOverflowError - result too large for a float
    └── UnknownInstructionError - instruction outside the instruction set

TxrInternalError (RuntimeError)
└── StackInvariantError - stack discipline violated during execution

Internal errors signal defects in the compiler itself (or in hand-built
bytecode) and do not derive from TxrError.

Error Message Format
--------------------
    error: Unexpected character "&" at position 2
        2 & 3
          ^
    hint: only digits, letters, '_', '(', ')' and + - * / % are allowed
"""

from dataclasses import dataclass
from typing import Any, Optional


# =============================================================================
# Source Position Tracking
# =============================================================================

EOF_MARKER = "<EOF>"


@dataclass(frozen=True)
class SourcePosition:
    """
    Anchor of a token, node or instruction in the source text.

    Attributes:
        offset: Zero-based character offset into the original source
        at_end: True when the anchor is the end-of-input token
    """
    offset: int
    at_end: bool = False

    def __str__(self) -> str:
        """Format as the offset, or '<EOF>' for end of input."""
        if self.at_end:
            return EOF_MARKER
        return str(self.offset)

    @classmethod
    def of_token(cls, token: Any) -> "SourcePosition":
        """Build the anchor for a lexer token (EOF tokens use '<EOF>')."""
        # txr.lexer imports this module
        from txr.lexer import TokenType

        return cls(token.position, at_end=token.type == TokenType.EOF)


# =============================================================================
# Base Exception Class
# =============================================================================

class TxrError(Exception):
    """
    Base exception for all TXR compilation and execution errors.

    Attributes:
        message: The error description
        position: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source: The source text the position refers to (optional)
    """

    def __init__(
        self,
        message: str,
        position: Optional[SourcePosition] = None,
        hint: Optional[str] = None,
        source: Optional[str] = None,
    ):
        self.message = message
        self.position = position
        self.hint = hint
        self.source = source
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with position, source context, and hint.

        Example output:
            error: Expected a ')' at position <EOF>
                (2 + 3
                      ^
        """
        parts = []

        if self.position is not None:
            parts.append(f"error: {self.message} at position {self.position}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source is not None and self.position is not None:
            parts.append(f"    {self.source}")
            column = len(self.source) if self.position.at_end else self.position.offset
            parts.append(" " * (4 + column) + "^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def with_source(self, source: str) -> "TxrError":
        """
        Attach the source text so the message shows a caret under the error.

        Returns:
            self, for use in a raise statement
        """
        # Whitespace is flattened to spaces so the caret column matches the offset
        self.source = "".join(" " if ch.isspace() else ch for ch in source)
        self.args = (self._format_message(),)
        return self

    @property
    def summary(self) -> str:
        """One-line form: '<message> at position <pos>'."""
        if self.position is None:
            return self.message
        return f"{self.message} at position {self.position}"


# =============================================================================
# Lexer Errors
# =============================================================================

class LexError(TxrError):
    """Error while converting source text into tokens."""
    pass


class UnexpectedCharacterError(LexError):
    """
    Character that cannot begin any token.

    Attributes:
        char: The offending character
        offset: Its offset in the source text
    """

    def __init__(self, char: str, offset: int, source: Optional[str] = None):
        self.char = char
        self.offset = offset
        super().__init__(
            f'Unexpected character "{char}"',
            SourcePosition(offset),
            hint="only digits, letters, '_', '(', ')' and + - * / % are allowed",
            source=source,
        )


class NumberTooLargeError(LexError):
    """Digit run with more digits than an int can be built from."""

    def __init__(self, offset: int, source: Optional[str] = None):
        self.offset = offset
        super().__init__(
            "Number literal too large",
            SourcePosition(offset),
            hint="use a literal with fewer digits",
            source=source,
        )


# =============================================================================
# Parser Errors
# =============================================================================

class ParseError(TxrError):
    """
    Error while building the AST from tokens.

    Attributes:
        token: The token the parser was looking at when it failed
    """

    def __init__(self, message: str, token: Any, hint: Optional[str] = None):
        self.token = token
        super().__init__(message, SourcePosition.of_token(token), hint=hint)


class UnexpectedTokenError(ParseError):
    """Token that cannot begin an operand (including end of input)."""

    def __init__(self, token: Any):
        super().__init__("Unexpected token", token)


class ExpectedCloseParenError(ParseError):
    """Parenthesized group not followed by ')'."""

    def __init__(self, token: Any):
        super().__init__("Expected a ')'", token, hint="add ')' to close the group")


class TrailingDataError(ParseError):
    """Tokens remain after a complete expression."""

    def __init__(self, token: Any):
        super().__init__(
            "Trailing data",
            token,
            hint="an expression must be a single value; join operands with an operator",
        )


class InvalidOperatorPrecedenceError(ParseError):
    """Operator token whose precedence rank cannot be determined."""

    def __init__(self, token: Any):
        super().__init__("Illegitimate operator priority", token)


class ExpressionTooDeepError(ParseError):
    """Groups, prefixes or operator chains nested past the depth limit."""

    def __init__(self, token: Any, limit: int):
        self.limit = limit
        super().__init__(
            "Expression nested too deeply",
            token,
            hint=f"expressions may nest at most {limit} levels",
        )


# =============================================================================
# Lowering Errors
# =============================================================================

class LowerError(TxrError):
    """Error while lowering the AST into bytecode."""
    pass


class UnsupportedNodeError(LowerError):
    """
    AST node outside the closed node set.

    Attributes:
        node: The node that could not be lowered
    """

    def __init__(self, node: Any):
        self.node = node
        position = getattr(node, "position", None)
        super().__init__(
            f"Cannot compile node of type {type(node).__name__}",
            SourcePosition(position) if isinstance(position, int) else None,
        )


# =============================================================================
# Execution Errors
# =============================================================================

class ExecError(TxrError):
    """Error while executing bytecode on the stack machine."""
    pass


class UnboundIdentifierError(ExecError):
    """
    Identifier reference reached the executor.

    Identifiers are parsed and lowered, but variables are not implemented,
    so evaluating one always fails.
    """

    def __init__(self, name: str, position: Optional[int] = None):
        self.name = name
        super().__init__(
            f"Variables are not yet implemented (identifier '{name}')",
            SourcePosition(position) if position is not None else None,
        )


class UnknownOperatorError(ExecError):
    """Binary operator outside the executor's operator table."""

    def __init__(self, operator: Any, position: Optional[int] = None):
        self.operator = operator
        super().__init__(
            f"Can't apply operator {operator!r}",
            SourcePosition(position) if position is not None else None,
        )


class ArithmeticOverflowError(ExecError):
    """Operation whose result cannot be represented as a float."""

    def __init__(self, operator: Any, position: Optional[int] = None):
        self.operator = operator
        name = operator.name if hasattr(operator, "name") else repr(operator)
        super().__init__(
            f"Result of {name} is too large",
            SourcePosition(position) if position is not None else None,
        )


class UnknownInstructionError(ExecError):
    """Object in the instruction list that is not a known instruction."""

    def __init__(self, instruction: Any):
        self.instruction = instruction
        position = getattr(instruction, "position", None)
        super().__init__(
            f"Can't run action {type(instruction).__name__}",
            SourcePosition(position) if isinstance(position, int) else None,
        )


# =============================================================================
# Internal Errors
# =============================================================================

class TxrInternalError(RuntimeError):
    """Defect in the compiler or in hand-built bytecode; not a user error."""
    pass


class StackInvariantError(TxrInternalError):
    """
    Stack discipline violated during execution.

    Lowering guarantees balanced bytecode, so an empty stack on pop or a
    stack not holding exactly one value at the end indicates malformed
    instructions.
    """

    def __init__(self, message: str, depth: int):
        self.depth = depth
        super().__init__(f"{message} (stack depth {depth})")
