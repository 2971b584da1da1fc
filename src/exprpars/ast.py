"""
Abstract Syntax Tree (AST) node types for the expression language.

The AST is produced by the parser and consumed by the evaluator. Nodes
are immutable and hold no reference to an environment, so one tree can
be evaluated any number of times against different environments.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Literal, Sequence, Union

# ============================================================
# Operator Types
# ============================================================

UnaryOperator = Literal["+", "-"]

BinaryOperator = Literal[
    "+",
    "-",
    "*",
    "/",
    "%",
    "^",
]


# ============================================================
# AST Node Types
# ============================================================


@dataclass(frozen=True)
class AstNodeBase(ABC):
    """Base class for all AST nodes."""

    position: int
    """Position in source expression (for error reporting)."""


@dataclass(frozen=True)
class ConstantNode(AstNodeBase):
    """Numeric constant node."""

    value: float

    @property
    def type(self) -> Literal["Constant"]:
        return "Constant"


@dataclass(frozen=True)
class VariableNode(AstNodeBase):
    """Variable reference node."""

    name: str

    @property
    def type(self) -> Literal["Variable"]:
        return "Variable"


@dataclass(frozen=True)
class FunctionCallNode(AstNodeBase):
    """Function call node."""

    name: str
    args: Sequence["AstNode"]

    @property
    def type(self) -> Literal["FunctionCall"]:
        return "FunctionCall"


@dataclass(frozen=True)
class UnaryOpNode(AstNodeBase):
    """Unary operator node."""

    operator: UnaryOperator
    operand: "AstNode"

    @property
    def type(self) -> Literal["UnaryOp"]:
        return "UnaryOp"


@dataclass(frozen=True)
class BinaryOpNode(AstNodeBase):
    """Binary operator node."""

    operator: BinaryOperator
    left: "AstNode"
    right: "AstNode"

    @property
    def type(self) -> Literal["BinaryOp"]:
        return "BinaryOp"


# Union type for all AST nodes
AstNode = Union[
    ConstantNode,
    VariableNode,
    FunctionCallNode,
    UnaryOpNode,
    BinaryOpNode,
]


# ============================================================
# AST Utilities
# ============================================================


def count_ast_nodes(node: AstNode) -> int:
    """Counts the total number of nodes in an AST."""
    count = 1

    if node.type in ("Constant", "Variable"):
        return count

    if node.type == "FunctionCall":
        node = node  # type: FunctionCallNode
        for arg in node.args:
            count += count_ast_nodes(arg)
        return count

    if node.type == "UnaryOp":
        node = node  # type: UnaryOpNode
        return count + count_ast_nodes(node.operand)

    if node.type == "BinaryOp":
        node = node  # type: BinaryOpNode
        return count + count_ast_nodes(node.left) + count_ast_nodes(node.right)

    return count


def calculate_ast_depth(node: AstNode) -> int:
    """Calculates the maximum depth of an AST."""
    if node.type in ("Constant", "Variable"):
        return 1

    if node.type == "FunctionCall":
        node = node  # type: FunctionCallNode
        max_arg_depth = 0
        for arg in node.args:
            max_arg_depth = max(max_arg_depth, calculate_ast_depth(arg))
        return 1 + max_arg_depth

    if node.type == "UnaryOp":
        node = node  # type: UnaryOpNode
        return 1 + calculate_ast_depth(node.operand)

    if node.type == "BinaryOp":
        node = node  # type: BinaryOpNode
        return 1 + max(calculate_ast_depth(node.left), calculate_ast_depth(node.right))

    return 1


def ast_to_string(node: AstNode, indent: int = 0) -> str:
    """Returns a human-readable representation of an AST node for debugging."""
    prefix = "  " * indent

    if node.type == "Constant":
        node = node  # type: ConstantNode
        return f"{prefix}Constant: {node.value}"

    if node.type == "Variable":
        node = node  # type: VariableNode
        return f"{prefix}Variable: {node.name}"

    if node.type == "FunctionCall":
        node = node  # type: FunctionCallNode
        if not node.args:
            return f"{prefix}FunctionCall: {node.name}"
        args_str = "\n".join(ast_to_string(a, indent + 1) for a in node.args)
        return f"{prefix}FunctionCall: {node.name}\n{args_str}"

    if node.type == "UnaryOp":
        node = node  # type: UnaryOpNode
        return f"{prefix}UnaryOp: {node.operator}\n{ast_to_string(node.operand, indent + 1)}"

    if node.type == "BinaryOp":
        node = node  # type: BinaryOpNode
        return (
            f"{prefix}BinaryOp: {node.operator}\n"
            f"{ast_to_string(node.left, indent + 1)}\n"
            f"{ast_to_string(node.right, indent + 1)}"
        )

    return f"{prefix}Unknown: {node}"
