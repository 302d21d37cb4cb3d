"""Names visible to formulas: constants, math functions, noise and randomness.

Math here follows IEEE semantics rather than raising: domain errors give NaN
and overflow gives an infinity. A formula such as `sqrt(x - 1)` therefore
compiles, and the terrain window flattens the non-finite columns it produces.

Randomness is keyed by the column being evaluated. Functions that need it are
marked `uses_coordinate` and receive the column `Coordinate` as their first
argument from the evaluator, so formulas can write `rand()` without threading
coordinates through every call.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, NamedTuple, Optional, Union
import logging
import math

from ..noise import GradientNoiseField, HashField

logger = logging.getLogger(__name__)

INF = math.inf
NAN = math.nan

GOLDEN_RATIO = 1.61803

# Names bound per evaluation rather than by the context
COORDINATE_NAMES = ("x", "z")


class Coordinate(NamedTuple):
    """World column being evaluated."""
    x: float
    z: float


@dataclass(frozen=True)
class Function:
    """A callable entry of the context table."""
    name: str
    impl: Callable[..., float]
    min_args: int
    max_args: Optional[int]
    uses_coordinate: bool = False

    def accepts(self, count: int) -> bool:
        """Check whether `count` arguments are allowed."""
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args

    def describe_arity(self) -> str:
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args} to {self.max_args}"


Entry = Union[float, Function]


# --- IEEE style arithmetic -------------------------------------------------

def divide(a: float, b: float) -> float:
    """Division that returns an infinity or NaN for a zero divisor."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return NAN
        return math.copysign(INF, a) * math.copysign(1.0, b)
    return a / b


def remainder(a: float, b: float) -> float:
    """Truncating remainder, sign follows the dividend."""
    if b == 0 or not math.isfinite(a) or math.isnan(b):
        return NAN
    if math.isinf(b):
        return float(a)
    return math.fmod(a, b)


def power(a: float, b: float) -> float:
    """`a` raised to `b`; never raises."""
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0 and float(b).is_integer() and b % 2 == 1:
            return -INF
        return INF
    except ValueError:
        # 0 to a negative power, or a negative base with a fractional exponent
        if a == 0:
            return math.copysign(INF, a) if float(b).is_integer() and b % 2 == 1 else INF
        return NAN


def _domain(fn: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap a math function so domain errors give NaN."""
    def wrapped(v: float) -> float:
        try:
            return fn(v)
        except ValueError:
            return NAN
    wrapped.__name__ = fn.__name__
    return wrapped


_sin = _domain(math.sin)
_cos = _domain(math.cos)


def _floor(v: float) -> float:
    return float(math.floor(v)) if math.isfinite(v) else v


def _ceil(v: float) -> float:
    return float(math.ceil(v)) if math.isfinite(v) else v


def _round(v: float) -> float:
    """Round half up (toward positive infinity)."""
    return float(math.floor(v + 0.5)) if math.isfinite(v) else v


def _sqrt(v: float) -> float:
    return math.sqrt(v) if v >= 0 else NAN


def _ln(v: float) -> float:
    if v > 0:
        return math.log(v)
    if v == 0:
        return -INF
    return NAN


def _log10(v: float) -> float:
    if v > 0:
        return math.log10(v)
    if v == 0:
        return -INF
    return NAN


def _exp(v: float) -> float:
    try:
        return math.exp(v)
    except OverflowError:
        return INF


def _sinh(v: float) -> float:
    try:
        return math.sinh(v)
    except OverflowError:
        return math.copysign(INF, v)


def _cosh(v: float) -> float:
    try:
        return math.cosh(v)
    except OverflowError:
        return INF


def _csc(v: float) -> float:
    return divide(1.0, _sin(v))


def _sec(v: float) -> float:
    return divide(1.0, _cos(v))


def _mod(a: float, b: float) -> float:
    """Modulo that is non-negative for a positive divisor."""
    return remainder(remainder(a, b) + b, b)


def _max(*values: float) -> float:
    if any(math.isnan(v) for v in values):
        return NAN
    return max(values)


def _min(*values: float) -> float:
    if any(math.isnan(v) for v in values):
        return NAN
    return min(values)


def _plane_args(args) -> tuple:
    """Pick (x, z) from either (x, z) or (x, y, z) noise arguments."""
    if len(args) == 3:
        return args[0], args[2]
    return args[0], args[1]


MATH_FUNCTIONS: List[Function] = [
    Function("sin", _sin, 1, 1),
    Function("cos", _cos, 1, 1),
    Function("tan", _domain(math.tan), 1, 1),
    Function("asin", _domain(math.asin), 1, 1),
    Function("acos", _domain(math.acos), 1, 1),
    Function("atan", math.atan, 1, 1),
    Function("atan2", math.atan2, 2, 2),
    Function("csc", _csc, 1, 1),
    Function("sec", _sec, 1, 1),
    Function("sinh", _sinh, 1, 1),
    Function("cosh", _cosh, 1, 1),
    Function("tanh", math.tanh, 1, 1),
    Function("abs", abs, 1, 1),
    Function("floor", _floor, 1, 1),
    Function("ceil", _ceil, 1, 1),
    Function("round", _round, 1, 1),
    Function("sqrt", _sqrt, 1, 1),
    Function("pow", power, 2, 2),
    Function("exp", _exp, 1, 1),
    Function("ln", _ln, 1, 1),
    Function("log", _ln, 1, 1),
    Function("lg", _log10, 1, 1),
    Function("log10", _log10, 1, 1),
    Function("mod", _mod, 2, 2),
    Function("min", _min, 1, None),
    Function("max", _max, 1, None),
]

CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "π": math.pi,
    "e": math.e,
    "phi": GOLDEN_RATIO,
}


class EvaluationContext:
    """Symbol table that formulas are evaluated against.

    Constants and functions are fixed at construction. The noise field is
    owned by the context and can be reseeded between refreshes.
    """

    def __init__(
        self,
        noise: Optional[GradientNoiseField] = None,
        hash_field: Optional[HashField] = None,
        seed: Optional[int] = None,
    ):
        """Initialize the context.

        Args:
            noise: Gradient noise field (a new one is created if omitted)
            hash_field: Hash field used by randomness functions
            seed: Seed for a newly created noise field
        """
        self.noise = noise or GradientNoiseField(seed)
        self.hash_field = hash_field or HashField()

        functions = {f.name: f for f in MATH_FUNCTIONS}
        for f in self._noise_functions():
            functions[f.name] = f

        self.constants: Mapping[str, float] = MappingProxyType(dict(CONSTANTS))
        self.functions: Mapping[str, Function] = MappingProxyType(functions)

    def _noise_functions(self) -> List[Function]:
        return [
            Function("simplex", self._simplex, 2, 3),
            Function("perlin", self._simplex, 2, 3),
            Function("blended", self._blended, 2, 3),
            Function("octaved", self._octaved, 2, 4),
            Function("normal", self._normal, 0, 3, uses_coordinate=True),
            Function("rand", self._rand, 0, 0, uses_coordinate=True),
            Function("randnormal", self._rand_normal, 0, 2, uses_coordinate=True),
            Function("randNormal", self._rand_normal, 0, 2, uses_coordinate=True),
            Function("hash", self._hash, 2, 2),
        ]

    def lookup(self, name: str) -> Optional[Entry]:
        """Get a constant value or Function by name, None if unknown."""
        if name in self.constants:
            return self.constants[name]
        return self.functions.get(name)

    def names(self) -> List[str]:
        """All names a formula may reference, including coordinates."""
        return sorted(set(COORDINATE_NAMES) | set(self.constants) | set(self.functions))

    def reseed(self, seed: Optional[int] = None) -> None:
        """Reseed the gradient noise field. Only call between refreshes."""
        self.noise.reseed(seed)

    # --- noise bindings ---------------------------------------------------

    def _simplex(self, *args: float) -> float:
        x, z = _plane_args(args)
        if not (math.isfinite(x) and math.isfinite(z)):
            return NAN
        return self.noise.sample(x, z)

    def _blended(self, *args: float) -> float:
        x, z = _plane_args(args)
        if not (math.isfinite(x) and math.isfinite(z)):
            return NAN
        return (self.noise.sample(x, z) + math.sin(x) * math.cos(z)) * 0.5

    def _octaved(self, x: float, z: float, octave_count: float = 0, persistence: float = 0) -> float:
        if not (math.isfinite(x) and math.isfinite(z)):
            return NAN
        return self.noise.octaves(x, z, octave_count, persistence)

    def _hash(self, x: float, z: float) -> float:
        return self.hash_field.scalar_at(x, z)

    # --- coordinate keyed randomness --------------------------------------

    def _rand(self, coord: Coordinate) -> float:
        return self.hash_field.rand(coord.x, coord.z)

    def _rand_normal(self, coord: Coordinate, mean: float = 0.0, stdev: float = 1.0) -> float:
        return self.hash_field.normal(coord.x, coord.z, mean, stdev)

    def _normal(self, coord: Coordinate, *_ignored: float) -> float:
        return self.hash_field.normal(coord.x, coord.z)
