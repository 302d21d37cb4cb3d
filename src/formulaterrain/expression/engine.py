"""Compilation of formula text into height functions.

Formula text is parsed into a tree, names are resolved against an
EvaluationContext and the tree is turned into nested closures. Nothing in the
text is ever executed by the host interpreter: only context members and the
coordinates `x` and `z` are reachable.
"""

from typing import Callable, Optional
import logging
import operator

from .context import (
    COORDINATE_NAMES,
    Coordinate,
    EvaluationContext,
    Function,
    divide,
    power,
    remainder,
)
from .errors import CompileError
from .nodes import Binary, Call, Conditional, Name, Node, Number, Unary
from .parser import parse

logger = logging.getLogger(__name__)

# Coordinate used for the trial evaluation of every new formula
CANARY_COORDINATE = (0, 0)

Evaluator = Callable[[EvaluationContext, Coordinate], float]


def truthy(value: float) -> bool:
    """Zero and NaN are false, everything else is true."""
    return value == value and value != 0


ARITHMETIC_OPS = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": divide,
    "%": remainder,
    "**": power,
    "<": lambda a, b: 1.0 if a < b else 0.0,
    "<=": lambda a, b: 1.0 if a <= b else 0.0,
    ">": lambda a, b: 1.0 if a > b else 0.0,
    ">=": lambda a, b: 1.0 if a >= b else 0.0,
    "==": lambda a, b: 1.0 if a == b else 0.0,
    "!=": lambda a, b: 1.0 if a != b else 0.0,
}


class CompiledHeightFunction:
    """A formula ready to be evaluated per column.

    Holds no mutable state. Call it with the context and the column's world
    coordinates.
    """

    def __init__(self, source: str, tree: Node, evaluator: Evaluator):
        self.source = source
        self.tree = tree
        self._evaluator = evaluator

    def __call__(self, context: EvaluationContext, x: float, z: float) -> float:
        return self._evaluator(context, Coordinate(x, z))

    def __repr__(self) -> str:
        return f"CompiledHeightFunction({self.source!r})"


class ExpressionEngine:
    """Turns formula text into CompiledHeightFunctions.

    The engine is stateless apart from the context it validates against; a
    failed compile leaves whatever the caller held untouched.
    """

    def __init__(self, context: Optional[EvaluationContext] = None):
        self.context = context or EvaluationContext()

    def compile(self, text: str) -> CompiledHeightFunction:
        """Compile and validate a formula.

        Args:
            text: Formula text over x, z and context names

        Returns:
            The compiled height function

        Raises:
            CompileError: If the text does not parse, references unknown
                names, calls a function with the wrong number of arguments,
                or raises during the canary evaluation at (0, 0)
        """
        try:
            tree = parse(text)
            evaluator = self._build(tree)
        except CompileError as e:
            logger.info("Rejected formula %r: %s", text, e)
            raise
        except RecursionError:
            logger.info("Rejected formula %r: nested too deeply", text)
            raise CompileError("Formula is nested too deeply") from None

        compiled = CompiledHeightFunction(text, tree, evaluator)
        try:
            compiled(self.context, *CANARY_COORDINATE)
        except Exception as e:
            logger.info("Formula %r failed canary evaluation: %s", text, e)
            raise CompileError(f"Formula failed to evaluate: {e}") from e

        logger.debug("Compiled formula %r", text)
        return compiled

    def _build(self, node: Node) -> Evaluator:
        if isinstance(node, Number):
            return self._build_number(node)
        if isinstance(node, Name):
            return self._build_name(node)
        if isinstance(node, Unary):
            return self._build_unary(node)
        if isinstance(node, Binary):
            return self._build_binary(node)
        if isinstance(node, Call):
            return self._build_call(node)
        if isinstance(node, Conditional):
            return self._build_conditional(node)
        raise CompileError(f"Unsupported node {type(node).__name__}")

    def _build_number(self, node: Number) -> Evaluator:
        value = node.value
        return lambda ctx, c: value

    def _build_name(self, node: Name) -> Evaluator:
        name = node.identifier
        if name == "x":
            return lambda ctx, c: c.x
        if name == "z":
            return lambda ctx, c: c.z

        entry = self.context.lookup(name)
        if entry is None:
            raise CompileError(f"Unknown name '{name}'", node.position)
        if isinstance(entry, Function):
            raise CompileError(f"'{name}' is a function, call it as {name}(...)", node.position)
        return lambda ctx, c: ctx.constants[name]

    def _build_unary(self, node: Unary) -> Evaluator:
        operand = self._build(node.operand)
        if node.op == "-":
            return lambda ctx, c: -operand(ctx, c)
        if node.op == "+":
            return operand
        if node.op == "!":
            return lambda ctx, c: 0.0 if truthy(operand(ctx, c)) else 1.0
        raise CompileError(f"Unknown operator '{node.op}'", node.position)

    def _build_binary(self, node: Binary) -> Evaluator:
        left = self._build(node.left)
        right = self._build(node.right)

        # Logical operators short-circuit and return an operand, not a flag
        if node.op == "&&":
            def logical_and(ctx, c):
                value = left(ctx, c)
                return right(ctx, c) if truthy(value) else value
            return logical_and
        if node.op == "||":
            def logical_or(ctx, c):
                value = left(ctx, c)
                return value if truthy(value) else right(ctx, c)
            return logical_or

        op = ARITHMETIC_OPS.get(node.op)
        if op is None:
            raise CompileError(f"Unknown operator '{node.op}'", node.position)
        return lambda ctx, c: op(left(ctx, c), right(ctx, c))

    def _build_call(self, node: Call) -> Evaluator:
        name = node.function
        if name in COORDINATE_NAMES:
            raise CompileError(f"'{name}' is a coordinate, not a function", node.position)

        entry = self.context.lookup(name)
        if entry is None:
            raise CompileError(f"Unknown function '{name}'", node.position)
        if not isinstance(entry, Function):
            raise CompileError(f"'{name}' is a constant, not a function", node.position)
        if not entry.accepts(len(node.args)):
            raise CompileError(
                f"{name}() takes {entry.describe_arity()} argument(s), got {len(node.args)}",
                node.position,
            )

        args = [self._build(arg) for arg in node.args]

        if entry.uses_coordinate:
            def call_with_coordinate(ctx, c):
                return ctx.functions[name].impl(c, *[arg(ctx, c) for arg in args])
            return call_with_coordinate

        def call(ctx, c):
            return ctx.functions[name].impl(*[arg(ctx, c) for arg in args])
        return call

    def _build_conditional(self, node: Conditional) -> Evaluator:
        test = self._build(node.test)
        if_true = self._build(node.if_true)
        if_false = self._build(node.if_false)
        return lambda ctx, c: if_true(ctx, c) if truthy(test(ctx, c)) else if_false(ctx, c)


def compile_formula(text: str, context: Optional[EvaluationContext] = None) -> CompiledHeightFunction:
    """Compile a formula with a throwaway engine."""
    return ExpressionEngine(context).compile(text)
