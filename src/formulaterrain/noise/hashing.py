"""Deterministic integer hashing for coordinate-keyed randomness.

Values are derived from an FNV-1a style mix over 32-bit integers, so the
result for a given column never depends on floating point rounding. This keeps
randomness stable at coordinates far away from the origin.
"""

import math
from typing import Union

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
UINT32_MASK = 0xFFFFFFFF
UINT32_RANGE = 4294967296.0

# Sub-unit resolution used by scalar_at (1/100 of a block)
SCALAR_QUANTIZATION = 100

# Coordinate multipliers decorrelating the two Box-Muller samples
NORMAL_U_MULTIPLIER = 167
NORMAL_V_MULTIPLIER = 253
NORMAL_U_FLOOR = 0.0001

Number = Union[int, float]


def to_uint32(value: Number) -> int:
    """Reduce a number to its 32-bit two's complement bit pattern.

    Reals are truncated toward zero first. NaN and infinities map to 0.
    """
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        value = int(value)
    return value & UINT32_MASK


def hash_int(ix: Number, iz: Number) -> float:
    """Hash an integer coordinate pair to a float in [0, 1)."""
    h = FNV_OFFSET_BASIS
    h ^= to_uint32(ix)
    h = (h * FNV_PRIME) & UINT32_MASK
    h ^= to_uint32(iz)
    h = (h * FNV_PRIME) & UINT32_MASK
    return h / UINT32_RANGE


class HashField:
    """Pseudo-random scalar field over world coordinates."""

    def hash(self, ix: Number, iz: Number) -> float:
        """Get the hash value for an integer coordinate pair."""
        return hash_int(ix, iz)

    def scalar_at(self, x: float, z: float) -> float:
        """Get a hash value for a real coordinate.

        Coordinates are quantized to 1/100 of a unit before hashing.
        """
        xi = math.floor(x * SCALAR_QUANTIZATION) if math.isfinite(x) else 0
        zi = math.floor(z * SCALAR_QUANTIZATION) if math.isfinite(z) else 0
        return hash_int(xi, zi)

    def rand(self, x: Number, z: Number) -> float:
        """Uniform value in [0, 1) for a column."""
        return hash_int(x, z)

    def normal(self, x: Number, z: Number, mean: float = 0.0, stdev: float = 1.0) -> float:
        """Normally distributed value for a column (Box-Muller transform).

        Args:
            x: Column X coordinate
            z: Column Z coordinate
            mean: Distribution mean
            stdev: Distribution standard deviation

        Returns:
            Deterministic sample for this column
        """
        u = hash_int(x * NORMAL_U_MULTIPLIER, z * NORMAL_U_MULTIPLIER)
        v = hash_int(x * NORMAL_V_MULTIPLIER, z * NORMAL_V_MULTIPLIER)
        if u <= 0:
            u = NORMAL_U_FLOOR
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v) * stdev + mean
