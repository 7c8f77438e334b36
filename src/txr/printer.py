"""
TXR Pretty Printers
===================

Human-readable listings of each pipeline stage, used by verbose mode and
by the ``txrc`` command-line tool.

- ``format_tokens``: one line per token
- ``ASTPrinter``: indented expression tree
- ``format_bytecode``: numbered, step-by-step description of the program
- ``reconstruct_source``: source text rebuilt from a token list
"""

from typing import Any, Sequence

from txr.lexer import Operator, Token, TokenType
from txr.config import STAGE_TOKENS, STAGE_AST, STAGE_BYTECODE
from txr.ast import (
    ASTVisitor,
    Expression,
    NumberLiteral,
    IdentifierExpression,
    UnaryExpression,
    BinaryExpression,
)
from txr.bytecode import (
    Instruction,
    PushNumber,
    Negate,
    ApplyBinaryOp,
    LoadIdentifier,
)


OPERATOR_NAMES: dict[Operator, str] = {
    Operator.ADD: "ADD",
    Operator.SUBTRACT: "SUBTRACT",
    Operator.MULTIPLY: "MULTIPLY",
    Operator.FLOAT_DIVIDE: "DIVIDE",
    Operator.INT_DIVIDE: "INTEGER DIVIDE",
    Operator.MODULO: "MODULO",
}

OPERATOR_SYMBOLS: dict[Operator, str] = {
    Operator.ADD: "+",
    Operator.SUBTRACT: "-",
    Operator.MULTIPLY: "*",
    Operator.FLOAT_DIVIDE: "/",
    Operator.INT_DIVIDE: "div",
    Operator.MODULO: "%",
}

# Bytecode listing text for each binary operator
OPERATION_STEPS: dict[Operator, str] = {
    Operator.ADD: "Add A to B",
    Operator.SUBTRACT: "Subtract B from A",
    Operator.MULTIPLY: "Multiply A by B",
    Operator.FLOAT_DIVIDE: "Divide A by B",
    Operator.MODULO: "Get the remainder of dividing A by B",
    Operator.INT_DIVIDE: "Integer divide A by B",
}


# =============================================================================
# Tokens
# =============================================================================

def format_token(token: Token) -> str:
    """Describe a single token."""
    if token.type == TokenType.EOF:
        return "END OF FILE"
    if token.type == TokenType.PAREN_OPEN:
        return "OPEN PAREN"
    if token.type == TokenType.PAREN_CLOSE:
        return "CLOSE PAREN"
    if token.type == TokenType.NUMBER:
        return f"NUMBER ( {token.value} )"
    if token.type == TokenType.IDENTIFIER:
        return f"IDENTIFIER ( {token.value} )"
    if token.type == TokenType.OPERATOR:
        return OPERATOR_NAMES.get(token.value, "UNKNOWN")
    return f"UNKNOWN TOKEN {token.type}"


def format_tokens(tokens: Sequence[Token]) -> list[str]:
    """Describe each token on its own line."""
    return [format_token(token) for token in tokens]


def token_text(token: Token) -> str:
    """Source spelling of a token (empty for EOF)."""
    if token.type == TokenType.PAREN_OPEN:
        return "("
    if token.type == TokenType.PAREN_CLOSE:
        return ")"
    if token.type == TokenType.OPERATOR:
        return OPERATOR_SYMBOLS.get(token.value, str(token.value))
    if token.type in (TokenType.NUMBER, TokenType.IDENTIFIER):
        return str(token.value)
    return ""


def reconstruct_source(tokens: Sequence[Token]) -> str:
    """
    Rebuild source text from a token list.

    Each token is written at its original offset and gaps are filled with
    spaces, so tokenizing the result yields the same tokens. The EOF token
    fixes the total length.
    """
    text = ""
    for token in tokens:
        if len(text) < token.position:
            text += " " * (token.position - len(text))
        text += token_text(token)
    return text


# =============================================================================
# AST
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(ast))

    Output for ``2 * (5 + 5) - 1``:
        SUBTRACT @12
          MULTIPLY @2
            NUMBER 2 @0
            ADD @7
              NUMBER 5 @5
              NUMBER 5 @9
          NUMBER 1 @14
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: Expression) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_NumberLiteral(self, node: NumberLiteral):
        self._emit(f"NUMBER {node.value} @{node.position}")

    def visit_IdentifierExpression(self, node: IdentifierExpression):
        self._emit(f"IDENTIFIER {node.name} @{node.position}")

    def visit_UnaryExpression(self, node: UnaryExpression):
        self._emit(f"{node.operator.name} @{node.position}")
        self.indent_level += 1
        self.visit(node.operand)
        self.indent_level -= 1

    def visit_BinaryExpression(self, node: BinaryExpression):
        self._emit(f"{OPERATOR_NAMES.get(node.operator, 'UNKNOWN')} @{node.position}")
        self.indent_level += 1
        self.visit(node.left)
        self.visit(node.right)
        self.indent_level -= 1

    def generic_visit(self, node):
        self._emit(f"<{type(node).__name__}>")


# =============================================================================
# Bytecode
# =============================================================================

def format_bytecode(instructions: Sequence[Instruction]) -> list[str]:
    """
    Describe a program as numbered stack-machine steps.

    Binary operators expand into pop, operation and push steps.
    """
    lines: list[str] = []

    def push(text: str) -> None:
        lines.append(f"{len(lines)}: {text}")

    for instruction in instructions:
        if isinstance(instruction, PushNumber):
            push(f"Push Number {instruction.value} onto stack")
        elif isinstance(instruction, Negate):
            push("Negate the value on top of the stack")
        elif isinstance(instruction, ApplyBinaryOp):
            push("Pop values A and B from stack")
            push(OPERATION_STEPS.get(instruction.operator, "UNKNOWN ACTION"))
            push("Push result onto stack")
        elif isinstance(instruction, LoadIdentifier):
            push(f"Push value of '{instruction.name}' onto stack")
        else:
            push(f"UNKNOWN ACTION {type(instruction).__name__}")

    push("Pop final result from stack and return")
    return lines


# =============================================================================
# Pipeline Stages
# =============================================================================

def format_stage(stage: str, payload: Any) -> list[str]:
    """Listing for a verbose-mode stage payload (tokens, AST or bytecode)."""
    if stage == STAGE_TOKENS:
        return format_tokens(payload)
    if stage == STAGE_AST:
        return ASTPrinter().print(payload).splitlines()
    if stage == STAGE_BYTECODE:
        return format_bytecode(payload)
    return [repr(payload)]
