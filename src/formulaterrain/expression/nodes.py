"""Abstract syntax tree for formulas.

The node set is closed: every formula is built from these six kinds.
"""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Number:
    """Numeric literal."""
    value: float
    position: int = 0


@dataclass(frozen=True)
class Name:
    """Reference to a coordinate (x, z) or a named constant."""
    identifier: str
    position: int = 0


@dataclass(frozen=True)
class Unary:
    """Prefix operator: '-', '+' or '!'."""
    op: str
    operand: "Node"
    position: int = 0


@dataclass(frozen=True)
class Binary:
    """Infix operator, arithmetic, comparison or logical."""
    op: str
    left: "Node"
    right: "Node"
    position: int = 0


@dataclass(frozen=True)
class Call:
    """Named function applied to zero or more arguments."""
    function: str
    args: Tuple["Node", ...]
    position: int = 0


@dataclass(frozen=True)
class Conditional:
    """`test ? if_true : if_false`."""
    test: "Node"
    if_true: "Node"
    if_false: "Node"
    position: int = 0


Node = Union[Number, Name, Unary, Binary, Call, Conditional]
