"""Random formula synthesis.

Formulas come from two sources: a bounded-depth recursive expression builder
and a table of themed templates. Every fragment emitted here belongs to the
formula grammar, so any combination of choices compiles.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import random

BINARY_OPS = ["+", "-", "*"]
UNARY_FUNCTIONS = ["sin", "cos", "abs", "floor", "round", "sqrt"]
NOISE_TYPES = ["Perlin", "Simplex", "Normal", "Blended"]

# Level name to recursion depth of the expression builder
LEVEL_DEPTHS: Dict[str, int] = {
    "Hardcoded": 1,
    "Expert": 4,
    "Unreal": 3,
    "Long Math": 5,
    "Intermediate": 3,
}
LEVELS = list(LEVEL_DEPTHS)

REALISTIC_THEME = "Realistic"

# Template arguments: base noise term, random sub-expression
Template = Callable[[str, str], str]

THEME_TEMPLATES: Dict[str, Template] = {
    # Directional / transform
    "Upwards": lambda base, expr: f"abs({expr}) + (x + z) * 0.1",
    "Downward": lambda base, expr: f"abs({expr}) - (x + z) * 0.1",
    "Reverse": lambda base, expr: f"-1 * ({expr})",
    "Forward": lambda base, expr: f"({expr}) + z * 0.5",
    "FlipX": lambda base, expr: f"sin(-x*0.1) * 10 + {base}*10",
    "FlipY": lambda base, expr: f"-1 * abs({expr})",
    "FlipZ": lambda base, expr: f"cos(-z*0.1) * 10 + {base}*10",
    "Upside Down": lambda base, expr: f"-1 * ({expr} + 20)",
    # Voxel / grid
    "Blocky": lambda base, expr: f"floor({base} * 15) * 2",
    "Cubes": lambda base, expr: f"floor(x/4)*4 + floor(z/4)*4 + {base}*5",
    "Digital": lambda base, expr: f"round({base} * 10) * 2 + mod(x, 2)",
    "Modern": lambda base, expr: f"max(abs(x%10), abs(z%10)) + {base}*5",
    "Cyberpunk2077": lambda base, expr: f"mod(floor(x), 5) * mod(floor(z), 5) * 5 + {base}*10",
    "One Block": lambda base, expr: "(abs(x)<1 && abs(z)<1) ? 10 : 0",
    "X-Ray": lambda base, expr: f"(mod(x, 2) > 1 && mod(z, 2) > 1) ? {base}*20 : 0",
    # Geometric
    "Sphere": lambda base, expr: "sqrt(max(0, 900 - x*x - z*z))",
    "Torus": lambda base, expr: "sqrt(max(0, 100 - pow(sqrt(x*x+z*z) - 30, 2)))",
    "Pyramid": lambda base, expr: "max(0, 40 - max(abs(x), abs(z)))",
    "Star": lambda base, expr: "max(0, 30 - sqrt(x*x+z*z) + sin(atan2(z,x)*5)*10)",
    "Tower": lambda base, expr: "max(0, 50 - sqrt(x*x+z*z)*2)",
    # Organic
    "Smooth": lambda base, expr: f"sin(x*0.05)*10 + cos(z*0.05)*10 + {base}*5",
    REALISTIC_THEME: lambda base, expr: "octaved(x*0.01, z*0.01, 4, 0.5) * 40",
    "Fantasy": lambda base, expr: f"sin(x*0.1)*cos(z*0.1)*10 + pow(abs({base}), 3)*15",
    "Underwater": lambda base, expr: f"min(-2, {base} * 20)",
    "Cavern": lambda base, expr: f"abs({base}*20) * -1 + 10",
    "Holes": lambda base, expr: "10 - max(0, sin(x*0.2)*sin(z*0.2)*20)",
    "Notch": lambda base, expr: f"{base} * 20 + (rand() > 0.9 ? 10 : 0)",
    # Maze
    "Maze": lambda base, expr: "floor(sin(x*0.2) + cos(z*0.2) + 1.5) * 10",
    "Giant Maze": lambda base, expr: "floor(sin(x*0.05) + cos(z*0.05) + 1.2) * 20",
    "Auto Maze": lambda base, expr: "(perlin(x*0.1,0,z*0.1) > 0.2) ? 10 : 0",
    "Skyscraper": lambda base, expr: f"(mod(x, 10) < 3 && mod(z, 10) < 3) ? {expr} + 20 : 0",
    # Abstract
    "Void": lambda base, expr: f"(sqrt(x*x+z*z) > 20) ? {expr} : -50",
    "Floating": lambda base, expr: f"{base}*10 + 30",
    "Floating Island": lambda base, expr: f"max(0, 30 - sqrt(x*x+z*z)) + {base}*5 + 20",
    "Hell": lambda base, expr: f"abs(tan(x*0.05 + z*0.05)) * 10 + {base}*5",
    "Underworld": lambda base, expr: f"{base} * 10 - 30",
}
THEMES: List[str] = list(THEME_TEMPLATES)


@dataclass(frozen=True)
class GeneratedFormula:
    """A synthesized formula and the choices that produced it."""
    formula: str
    noise: str
    theme: str
    level: str


def noise_function(noise: str) -> str:
    """Formula function name for a noise type ('Perlin' -> 'perlin')."""
    return noise.lower()


def base_noise_term(noise: str) -> str:
    """Fixed low-frequency noise term embedded by many themes."""
    return f"{noise_function(noise)}(x*0.05, 0, z*0.05)"


class FormulaGenerator:
    """Generates random formulas from levels, themes and noise types."""

    def __init__(self, rng: Optional[random.Random] = None, realistic_only: bool = False):
        """Initialize the generator.

        Args:
            rng: Random source (a fresh unseeded one if omitted)
            realistic_only: Always emit an octave-noise formula
        """
        self.rng = rng or random.Random()
        self.realistic_only = realistic_only

    def _pick(self, options: List[str]) -> str:
        return options[self.rng.randrange(len(options))]

    def build_expression(self, depth: int, noise: str) -> str:
        """Build a random sub-expression.

        At depth 0 the result is a scaled coordinate or a small literal.
        Above that it is a binary combination, a unary function or a noise
        call, with sub-expressions built at depth - 1.
        """
        rng = self.rng
        if depth <= 0:
            if rng.random() < 0.6:
                axis = "x" if rng.random() < 0.5 else "z"
                return f"{axis}*{rng.random() * 0.15 + 0.01:.3f}"
            return f"{rng.random() * 15:.1f}"

        kind = rng.random()
        if kind < 0.3:
            left = self.build_expression(depth - 1, noise)
            op = self._pick(BINARY_OPS)
            right = self.build_expression(depth - 1, noise)
            return f"({left} {op} {right})"
        if kind < 0.6:
            fn = self._pick(UNARY_FUNCTIONS)
            return f"{fn}({self.build_expression(depth - 1, noise)})"
        return (
            f"{noise_function(noise)}(x*{rng.random() * 0.1:.3f}, 0, z*{rng.random() * 0.1:.3f})"
            f" * {rng.random() * 20 + 5:.0f}"
        )

    def realistic_formula(self) -> str:
        """Octave noise with randomized frequency and amplitude."""
        scale = self.rng.random() * 0.02 + 0.005
        height = self.rng.random() * 30 + 15
        return f"octaved(x*{scale:.4f}, z*{scale:.4f}, 4, 0.5) * {height:.0f}"

    def formula_for_theme(self, theme: str, noise: str, level: str) -> str:
        """Build the formula text for a theme.

        Args:
            theme: Theme name from THEMES
            noise: Noise type from NOISE_TYPES
            level: Level name from LEVELS

        Returns:
            Formula text
        """
        depth = LEVEL_DEPTHS.get(level, 3)
        expr = self.build_expression(depth, noise)
        template = THEME_TEMPLATES.get(theme)
        if template is None:
            return expr
        return template(base_noise_term(noise), expr)

    def create(self) -> GeneratedFormula:
        """Generate a formula with randomly chosen theme, level and noise."""
        if self.realistic_only:
            noise = self._pick(NOISE_TYPES)
            return GeneratedFormula(
                formula=self.realistic_formula(),
                noise=noise,
                theme=REALISTIC_THEME,
                level="Intermediate",
            )

        theme = self._pick(THEMES)
        level = self._pick(LEVELS)
        noise = self._pick(NOISE_TYPES)
        return GeneratedFormula(
            formula=self.formula_for_theme(theme, noise, level),
            noise=noise,
            theme=theme,
            level=level,
        )
