"""
TXR Bytecode Instructions
=========================

A compiled expression is a flat list of stack-machine instructions in
execution order. Every instruction records the source offset of the AST
node it came from, so runtime errors point back into the source.

| Instruction     | Stack effect                         |
|-----------------|--------------------------------------|
| PushNumber(v)   | push v                               |
| Negate          | push(-pop())                         |
| ApplyBinaryOp   | b = pop(); a = pop(); push(a op b)   |
| LoadIdentifier  | always fails (variables unsupported) |
"""

from dataclasses import dataclass

from txr.lexer import Operator


@dataclass(frozen=True)
class Instruction:
    """
    Base class for bytecode instructions.

    Attributes:
        position: Source offset of the originating node
    """
    position: int


@dataclass(frozen=True)
class PushNumber(Instruction):
    """Push a numeric constant."""
    value: int | float = 0


@dataclass(frozen=True)
class Negate(Instruction):
    """Replace the top of stack with its negation."""


@dataclass(frozen=True)
class ApplyBinaryOp(Instruction):
    """Pop B then A and push ``A <operator> B``."""
    operator: Operator = Operator.ADD


@dataclass(frozen=True)
class LoadIdentifier(Instruction):
    """Reference to a named value. Emitted for identifiers; not executable."""
    name: str = ""
