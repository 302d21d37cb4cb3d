"""Formula language: parsing, evaluation context and compilation."""

from .errors import CompileError
from .nodes import Binary, Call, Conditional, Name, Node, Number, Unary
from .parser import parse, preprocess
from .context import (
    COORDINATE_NAMES,
    Coordinate,
    EvaluationContext,
    Function,
)
from .engine import (
    CompiledHeightFunction,
    ExpressionEngine,
    compile_formula,
)

__all__ = [
    # Errors
    "CompileError",
    # Tree
    "Binary",
    "Call",
    "Conditional",
    "Name",
    "Node",
    "Number",
    "Unary",
    "parse",
    "preprocess",
    # Context
    "COORDINATE_NAMES",
    "Coordinate",
    "EvaluationContext",
    "Function",
    # Engine
    "CompiledHeightFunction",
    "ExpressionEngine",
    "compile_formula",
]
