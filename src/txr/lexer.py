"""
TXR Lexer (Tokenizer)
=====================

This module converts expression source text into a flat list of tokens
for the parser.

Token Categories
----------------
- Numbers: maximal runs of decimal digits (37, 0042)
- Identifiers: [A-Za-z_][A-Za-z0-9_]*
- Operators: + - * / % and the reserved words ``mod`` and ``div``
- Delimiters: ( )

Whitespace separates tokens and is otherwise ignored. There are no signed
or fractional literals: ``-5`` is a unary minus applied to ``5`` and is
handled by the parser.

Reserved Words
--------------
The identifier runs ``mod`` and ``div`` lex as operators (MODULO and
FLOAT_DIVIDE). Matching is done on the whole run, so ``divisor`` and
``mode`` remain plain identifiers.

Operator Encoding
-----------------
Operators keep their numeric encoding; the high nibble is the precedence
rank, lower ranks bind tighter:

| Operator     | Source  | Value | Rank |
|--------------|---------|-------|------|
| MULTIPLY     | *       | 0x01  | 0    |
| FLOAT_DIVIDE | / div   | 0x02  | 0    |
| MODULO       | % mod   | 0x03  | 0    |
| INT_DIVIDE   | (none)  | 0x04  | 0    |
| ADD          | +       | 0x10  | 1    |
| SUBTRACT     | -       | 0x11  | 1    |

Example Usage
-------------
>>> from txr.lexer import tokenize
>>> for token in tokenize("2 * x"):
...     print(token)
Token(NUMBER, 2, @0)
Token(OPERATOR, MULTIPLY, @2)
Token(IDENTIFIER, 'x', @4)
Token(EOF, @5)
"""

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Iterator
import logging
import string

from txr.errors import NumberTooLargeError, UnexpectedCharacterError

logger = logging.getLogger(__name__)


# =============================================================================
# Token and Operator Enumerations
# =============================================================================

class TokenType(Enum):
    """Token types for the expression language."""
    EOF = auto()            # End of input
    OPERATOR = auto()       # + - * / % div mod
    PAREN_OPEN = auto()     # (
    PAREN_CLOSE = auto()    # )
    NUMBER = auto()         # 37
    IDENTIFIER = auto()     # some_name


class Operator(IntEnum):
    """
    Binary operators.

    The value encodes the precedence rank in its high nibble; see
    the ``precedence`` property.
    """
    MULTIPLY = 0x01      # *
    FLOAT_DIVIDE = 0x02  # / and div
    MODULO = 0x03        # % and mod
    INT_DIVIDE = 0x04    # floor division
    ADD = 0x10           # +
    SUBTRACT = 0x11      # -

    @property
    def precedence(self) -> int:
        """Precedence rank; 0 binds tightest."""
        return self.value >> 4


# One past the loosest rank in use
MAX_PRECEDENCE = 0x20 >> 4


# Single-character operators
OPERATOR_CHARS: dict[str, Operator] = {
    "+": Operator.ADD,
    "-": Operator.SUBTRACT,
    "*": Operator.MULTIPLY,
    "/": Operator.FLOAT_DIVIDE,
    "%": Operator.MODULO,
}

# Identifier runs that lex as operators
RESERVED_WORDS: dict[str, Operator] = {
    "mod": Operator.MODULO,
    "div": Operator.FLOAT_DIVIDE,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of expression source.

    Attributes:
        type: The TokenType classification
        position: Offset of the first character in the original source
        value: Operator for OPERATOR, int for NUMBER, str for IDENTIFIER,
               None for everything else
    """
    type: TokenType
    position: int
    value: Operator | int | str | None = None

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is None:
            return f"Token({self.type.name}, @{self.position})"
        if isinstance(self.value, Operator):
            return f"Token({self.type.name}, {self.value.name}, @{self.position})"
        if isinstance(self.value, int):
            return f"Token({self.type.name}, {self.value}, @{self.position})"
        return f"Token({self.type.name}, {self.value!r}, @{self.position})"

    @property
    def is_eof(self) -> bool:
        """Return True for the end-of-input token."""
        return self.type == TokenType.EOF


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes expression source code.

    Scanning is a single left-to-right pass. Whether a run is numeric or
    an identifier is decided by its first character alone.

    Usage:
        lexer = Lexer(source_text)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source text being tokenized
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    def __init__(self, source: str):
        self.source = source
        self._pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source text.

        Yields:
            Token objects, always ending with an EOF token whose position
            is the length of the source

        Raises:
            UnexpectedCharacterError: On a character outside the language
        """
        while True:
            self._skip_whitespace()
            if self._at_end():
                break
            yield self._scan_token()

        yield Token(TokenType.EOF, len(self.source))

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Current character, or empty string past the end."""
        if self._at_end():
            return ""
        return self.source[self._pos]

    def _skip_whitespace(self) -> None:
        # Whitespace only separates tokens; positions stay offsets into source
        while not self._at_end() and self.source[self._pos].isspace():
            self._pos += 1

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        start = self._pos
        char = self.source[start]
        self._pos += 1

        if char == "(":
            return Token(TokenType.PAREN_OPEN, start)
        if char == ")":
            return Token(TokenType.PAREN_CLOSE, start)

        operator = OPERATOR_CHARS.get(char)
        if operator is not None:
            return Token(TokenType.OPERATOR, start, operator)

        if char in string.digits:
            return self._scan_number(start)

        if char in self.IDENT_START:
            return self._scan_identifier(start)

        raise UnexpectedCharacterError(char, start, source=self.source)

    def _scan_number(self, start: int) -> Token:
        """Scan a maximal run of ASCII digits as a base-10 integer."""
        while self._peek() and self._peek() in string.digits:
            self._pos += 1
        try:
            value = int(self.source[start:self._pos], 10)
        except ValueError:
            # Digit run longer than the interpreter's int conversion limit
            raise NumberTooLargeError(start, source=self.source) from None
        return Token(TokenType.NUMBER, start, value)

    def _scan_identifier(self, start: int) -> Token:
        """Scan an identifier run; reserved words become operators."""
        while self._peek() and self._peek() in self.IDENT_CHARS:
            self._pos += 1

        name = self.source[start:self._pos]
        operator = RESERVED_WORDS.get(name)
        if operator is not None:
            return Token(TokenType.OPERATOR, start, operator)
        return Token(TokenType.IDENTIFIER, start, name)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str) -> list[Token]:
    """
    Tokenize expression source into a list of tokens.

    Args:
        source: Expression source text

    Returns:
        List of tokens terminated by an EOF token

    Raises:
        UnexpectedCharacterError: On a character outside the language
    """
    tokens = list(Lexer(source).tokenize())
    logger.debug(f"Tokenized {len(source)} characters into {len(tokens)} tokens")
    return tokens

