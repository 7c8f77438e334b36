"""
TXR - Arithmetic Expression Compiler and Stack Machine
======================================================

This package compiles a small arithmetic-expression language into a flat
bytecode program and runs it on a stack machine.

Main Components
---------------
- **lexer**: source text → tokens
- **parser**: tokens → AST (recursive descent plus precedence folding)
- **lowering**: AST → bytecode (post-order traversal)
- **executor**: bytecode → number (stack machine)
- **printer**: human-readable listings of every stage
- **cli**: the ``txrc`` command-line tool

Language
--------
- Integer literals: 0, 42, 007
- Identifiers: parsed, but evaluating one always fails
- Grouping: ( ... )
- Unary: -x, +x
- Binary, tightest first: * / % div mod, then + -

Quick Start
-----------
    >>> from txr import compile_and_run
    >>> compile_and_run("2 * (5 + 5) - 1").value
    19
    >>> result = compile_and_run("(2 + 3")
    >>> result.success
    False
    >>> print(result.error.summary)
    Expected a ')' at position <EOF>

Stage by stage:
    >>> from txr import tokenize, parse, lower, execute
    >>> execute(lower(parse(tokenize("8 - 3 - 2"))))
    3

Or use the command-line tool:
    $ txrc "2 * (5 + 5) - 1"
    19
"""

__version__ = "1.0.0"
__author__ = "TXR Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from txr.lexer import Lexer, Token, TokenType, Operator, tokenize
from txr.parser import Parser, parse
from txr.lowering import BytecodeGenerator, lower
from txr.executor import StackMachine, execute
from txr.ast import (
    Expression,
    NumberLiteral,
    IdentifierExpression,
    UnaryExpression,
    UnaryOperator,
    BinaryExpression,
)
from txr.bytecode import (
    Instruction,
    PushNumber,
    Negate,
    ApplyBinaryOp,
    LoadIdentifier,
)
from txr.compiler import Compiler, RunResult, compile_source, compile_and_run
from txr.config import CompilerOptions
from txr.diagnostics import Diagnostic, DiagnosticState, last_error
from txr.errors import (
    TxrError,
    SourcePosition,
    LexError,
    UnexpectedCharacterError,
    NumberTooLargeError,
    ParseError,
    UnexpectedTokenError,
    ExpectedCloseParenError,
    TrailingDataError,
    InvalidOperatorPrecedenceError,
    ExpressionTooDeepError,
    LowerError,
    UnsupportedNodeError,
    ExecError,
    UnboundIdentifierError,
    UnknownOperatorError,
    ArithmeticOverflowError,
    UnknownInstructionError,
    TxrInternalError,
    StackInvariantError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Pipeline stages
    "Lexer",
    "Token",
    "TokenType",
    "Operator",
    "tokenize",
    "Parser",
    "parse",
    "BytecodeGenerator",
    "lower",
    "StackMachine",
    "execute",
    # AST nodes
    "Expression",
    "NumberLiteral",
    "IdentifierExpression",
    "UnaryExpression",
    "UnaryOperator",
    "BinaryExpression",
    # Bytecode
    "Instruction",
    "PushNumber",
    "Negate",
    "ApplyBinaryOp",
    "LoadIdentifier",
    # Compiler
    "Compiler",
    "RunResult",
    "CompilerOptions",
    "compile_source",
    "compile_and_run",
    # Diagnostics
    "Diagnostic",
    "DiagnosticState",
    "last_error",
    # Exception hierarchy
    "TxrError",
    "SourcePosition",
    "LexError",
    "UnexpectedCharacterError",
    "NumberTooLargeError",
    "ParseError",
    "UnexpectedTokenError",
    "ExpectedCloseParenError",
    "TrailingDataError",
    "InvalidOperatorPrecedenceError",
    "ExpressionTooDeepError",
    "LowerError",
    "UnsupportedNodeError",
    "ExecError",
    "UnboundIdentifierError",
    "UnknownOperatorError",
    "ArithmeticOverflowError",
    "UnknownInstructionError",
    "TxrInternalError",
    "StackInvariantError",
]
