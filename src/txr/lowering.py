"""
TXR Lowering Compiler
=====================

Lowers an expression AST into stack-machine bytecode by post-order
traversal: children are emitted before their parent, left before right.

    2 * (5 + 5) - 1

    0: PushNumber 2
    1: PushNumber 5
    2: PushNumber 5
    3: ApplyBinaryOp ADD
    4: ApplyBinaryOp MULTIPLY
    5: PushNumber 1
    6: ApplyBinaryOp SUBTRACT

Emitting the right operand last leaves it on top of the stack, which is
the order the executor pops binary operands in.
"""

import logging

from txr.ast import (
    ASTVisitor,
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
from txr.errors import UnsupportedNodeError

logger = logging.getLogger(__name__)


class BytecodeGenerator(ASTVisitor):
    """
    Generates bytecode from an expression AST.

    Each call to ``generate`` starts a fresh instruction list, so one
    generator can be reused for several trees.
    """

    def __init__(self):
        self._output: list[Instruction] = []

    def generate(self, root: Expression) -> list[Instruction]:
        """
        Lower an AST into bytecode.

        Args:
            root: The root expression node

        Returns:
            Instructions in execution order

        Raises:
            UnsupportedNodeError: If the tree contains a foreign node
        """
        self._output = []
        self.visit(root)
        return list(self._output)

    def _emit(self, instruction: Instruction) -> None:
        self._output.append(instruction)

    # =========================================================================
    # Node Handlers
    # =========================================================================

    def visit_NumberLiteral(self, node: NumberLiteral) -> None:
        self._emit(PushNumber(node.position, node.value))

    def visit_IdentifierExpression(self, node: IdentifierExpression) -> None:
        self._emit(LoadIdentifier(node.position, node.name))

    def visit_UnaryExpression(self, node: UnaryExpression) -> None:
        if node.operator != UnaryOperator.NEGATE:
            raise UnsupportedNodeError(node)
        self.visit(node.operand)
        self._emit(Negate(node.position))

    def visit_BinaryExpression(self, node: BinaryExpression) -> None:
        self.visit(node.left)
        self.visit(node.right)
        self._emit(ApplyBinaryOp(node.position, node.operator))

    def generic_visit(self, node) -> None:
        raise UnsupportedNodeError(node)


def lower(root: Expression) -> list[Instruction]:
    """
    Lower an AST into a flat instruction list.

    Args:
        root: The root expression node

    Returns:
        Instructions in execution order

    Raises:
        UnsupportedNodeError: If the tree contains a foreign node
    """
    instructions = BytecodeGenerator().generate(root)
    logger.debug(f"Lowered AST into {len(instructions)} instructions")
    return instructions
