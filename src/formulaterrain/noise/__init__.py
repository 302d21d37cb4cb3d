"""Hash and gradient noise fields."""

from .hashing import (
    HashField,
    hash_int,
    to_uint32,
)
from .simplex import (
    GradientNoiseField,
    DEFAULT_OCTAVES,
    DEFAULT_PERSISTENCE,
)

__all__ = [
    # Hashing
    "HashField",
    "hash_int",
    "to_uint32",
    # Simplex
    "GradientNoiseField",
    "DEFAULT_OCTAVES",
    "DEFAULT_PERSISTENCE",
]
