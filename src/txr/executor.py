"""
TXR Stack Machine
=================

Executes bytecode produced by ``txr.lowering`` against a value stack and
returns the single value left at the end.

Operator Semantics
------------------
Binary operators pop B (top of stack, the right operand) and then A:

| Operator     | Result               | B == 0 |
|--------------|----------------------|--------|
| ADD          | A + B                |        |
| SUBTRACT     | A - B                |        |
| MULTIPLY     | A * B                |        |
| FLOAT_DIVIDE | A / B                | 0      |
| MODULO       | fmod(A, B)           | 0      |
| INT_DIVIDE   | floor(A / B)         | 0      |

Division and modulo by zero evaluate to 0 rather than failing. A result
too large for a float raises ArithmeticOverflowError. MODULO is a
truncated remainder (sign follows A), as in C's fmod.

Identifier references always fail: variables are not implemented.
"""

import logging
import math
from typing import Callable, Sequence

from txr.lexer import Operator
from txr.bytecode import (
    Instruction,
    PushNumber,
    Negate,
    ApplyBinaryOp,
    LoadIdentifier,
)
from txr.errors import (
    UnboundIdentifierError,
    UnknownOperatorError,
    UnknownInstructionError,
    ArithmeticOverflowError,
    StackInvariantError,
)

logger = logging.getLogger(__name__)

Number = int | float


# =============================================================================
# Operator Implementations
# =============================================================================

def _float_divide(a: Number, b: Number) -> Number:
    if b == 0:
        return 0
    return a / b


def _modulo(a: Number, b: Number) -> Number:
    if b == 0:
        return 0
    if isinstance(a, int) and isinstance(b, int):
        remainder = abs(a) % abs(b)
        return -remainder if a < 0 else remainder
    return math.fmod(a, b)


def _int_divide(a: Number, b: Number) -> Number:
    if b == 0:
        return 0
    if isinstance(a, int) and isinstance(b, int):
        return a // b
    return math.floor(a / b)


BINARY_OPERATIONS: dict[Operator, Callable[[Number, Number], Number]] = {
    Operator.ADD: lambda a, b: a + b,
    Operator.SUBTRACT: lambda a, b: a - b,
    Operator.MULTIPLY: lambda a, b: a * b,
    Operator.FLOAT_DIVIDE: _float_divide,
    Operator.MODULO: _modulo,
    Operator.INT_DIVIDE: _int_divide,
}


# =============================================================================
# Stack Machine
# =============================================================================

class StackMachine:
    """
    Interprets a bytecode instruction list.

    The stack is reset at the start of every ``run``; a machine holds no
    state between runs.
    """

    def __init__(self):
        self._stack: list[Number] = []

    def run(self, instructions: Sequence[Instruction]) -> Number:
        """
        Execute instructions and return the final value.

        Args:
            instructions: Bytecode in execution order

        Returns:
            The single value left on the stack

        Raises:
            ExecError: On identifier references or unknown operators
            StackInvariantError: If the bytecode is not stack balanced
        """
        self._stack = []

        for instruction in instructions:
            self._step(instruction)

        if len(self._stack) != 1:
            raise StackInvariantError(
                "program must leave exactly one value on the stack",
                len(self._stack),
            )
        return self._stack.pop()

    def _step(self, instruction: Instruction) -> None:
        if isinstance(instruction, PushNumber):
            self._stack.append(instruction.value)

        elif isinstance(instruction, Negate):
            self._stack.append(-self._pop())

        elif isinstance(instruction, ApplyBinaryOp):
            operation = BINARY_OPERATIONS.get(instruction.operator)
            if operation is None:
                raise UnknownOperatorError(instruction.operator, instruction.position)
            b = self._pop()
            a = self._pop()
            try:
                self._stack.append(operation(a, b))
            except OverflowError:
                raise ArithmeticOverflowError(instruction.operator, instruction.position) from None

        elif isinstance(instruction, LoadIdentifier):
            raise UnboundIdentifierError(instruction.name, instruction.position)

        else:
            raise UnknownInstructionError(instruction)

    def _pop(self) -> Number:
        if not self._stack:
            raise StackInvariantError("pop from empty stack", 0)
        return self._stack.pop()


def execute(instructions: Sequence[Instruction]) -> Number:
    """
    Execute bytecode on a fresh stack machine.

    Args:
        instructions: Bytecode in execution order

    Returns:
        The numeric result

    Raises:
        ExecError: On identifier references or unknown operators
        StackInvariantError: If the bytecode is not stack balanced
    """
    result = StackMachine().run(instructions)
    logger.debug(f"Executed {len(instructions)} instructions, result {type(result).__name__}")
    return result
