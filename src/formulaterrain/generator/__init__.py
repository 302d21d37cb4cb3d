"""Random formula generation."""

from .formulas import (
    FormulaGenerator,
    GeneratedFormula,
    LEVELS,
    LEVEL_DEPTHS,
    NOISE_TYPES,
    THEMES,
    THEME_TEMPLATES,
    base_noise_term,
    noise_function,
)

__all__ = [
    "FormulaGenerator",
    "GeneratedFormula",
    "LEVELS",
    "LEVEL_DEPTHS",
    "NOISE_TYPES",
    "THEMES",
    "THEME_TEMPLATES",
    "base_noise_term",
    "noise_function",
]
