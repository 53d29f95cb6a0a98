"""Abstract syntax tree nodes for predicate expressions."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""


@dataclass(frozen=True)
class Literal(Node):
    """A literal value (string, number, boolean, null)."""

    value: Any


@dataclass(frozen=True)
class Variable(Node):
    """A dotted property path read from the record (e.g. ``status.key``)."""

    path: str


@dataclass(frozen=True)
class ListLiteral(Node):
    """A list of expressions (e.g. ``['a', 'b']``)."""

    items: tuple[Node, ...]


@dataclass(frozen=True)
class BinaryOp(Node):
    """A binary operation (e.g. ``age >= 18``)."""

    left: Node
    operator: str
    right: Node


@dataclass(frozen=True)
class UnaryOp(Node):
    """A unary operation (e.g. ``not active``)."""

    operator: str
    operand: Node


@dataclass(frozen=True)
class FunctionCall(Node):
    """A call to a built-in function (e.g. ``contains(tags, 'x')``)."""

    name: str
    arguments: tuple[Node, ...]
