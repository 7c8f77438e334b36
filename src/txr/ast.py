"""
TXR Abstract Syntax Tree (AST) Definitions
==========================================

This module defines the AST node types produced by the parser and
consumed by the lowering compiler.

Node Hierarchy
--------------
Expression (base)
├── NumberLiteral - integer constant
├── IdentifierExpression - name reference (never evaluable)
├── UnaryExpression - unary operator applied to one operand
└── BinaryExpression - binary operator applied to two operands

Design Notes
------------
- All nodes are frozen dataclasses; a parse builds a new tree bottom-up
- Each node stores the offset of the token that defined it
- Every node owns its children; subtrees are never shared
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from txr.lexer import Operator


# =============================================================================
# AST Node Base Class
# =============================================================================

@dataclass(frozen=True)
class Expression:
    """
    Base class for all expression nodes.

    Attributes:
        position: Source offset of the defining token
    """
    position: int


class UnaryOperator(Enum):
    """Unary operator types."""
    NEGATE = auto()     # -x


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberLiteral(Expression):
    """Integer constant."""
    value: int = 0


@dataclass(frozen=True)
class IdentifierExpression(Expression):
    """Reference to a name. Parsed and lowered, but never resolvable."""
    name: str = ""


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Unary operation expression (op x).

    Attributes:
        operator: The unary operator
        operand: The operand expression
    """
    operator: UnaryOperator = UnaryOperator.NEGATE
    operand: Expression = None


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation expression (a op b).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: Operator = Operator.ADD
    left: Expression = None
    right: Expression = None


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Dispatches on the node's class name to ``visit_<ClassName>``.
    Subclasses override the methods for the node types they handle;
    anything else reaches ``generic_visit``.

    Usage:
        class DepthCounter(ASTVisitor):
            def visit_NumberLiteral(self, node):
                return 1

        DepthCounter().visit(ast)
    """

    def visit(self, node: Any) -> Any:
        """
        Visit a node by dispatching to the appropriate method.

        Args:
            node: The AST node to visit

        Returns:
            The result of the visit method (varies by visitor)
        """
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Any) -> Any:
        """
        Default visit method for unhandled node types.

        Visits the operands of unary and binary nodes.
        """
        if isinstance(node, UnaryExpression):
            self.visit(node.operand)
        elif isinstance(node, BinaryExpression):
            self.visit(node.left)
            self.visit(node.right)
        return None


def node_count(node: Expression) -> int:
    """Number of nodes in the tree rooted at ``node``."""
    if isinstance(node, UnaryExpression):
        return 1 + node_count(node.operand)
    if isinstance(node, BinaryExpression):
        return 1 + node_count(node.left) + node_count(node.right)
    return 1


def tree_depth(node: Expression) -> int:
    """Height of the tree rooted at ``node``; a leaf has depth 1."""
    depth = 0
    pending = [(node, 1)]
    while pending:
        current, level = pending.pop()
        depth = max(depth, level)
        if isinstance(current, UnaryExpression):
            pending.append((current.operand, level + 1))
        elif isinstance(current, BinaryExpression):
            pending.append((current.left, level + 1))
            pending.append((current.right, level + 1))
    return depth
