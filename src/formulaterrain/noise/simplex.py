"""Seeded 2D simplex noise.

The permutation table is a uniform shuffle of 0..255 duplicated into 512
entries so corner lookups never need to wrap.
"""

import logging
import math
import random
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

PERMUTATION_SIZE = 256

# Skew/unskew factors for two dimensions
F2 = 0.5 * (math.sqrt(3.0) - 1.0)
G2 = (3.0 - math.sqrt(3.0)) / 6.0

# Scales the summed corner contributions to roughly [-1, 1]
OUTPUT_SCALE = 70.0

DEFAULT_OCTAVES = 4
DEFAULT_PERSISTENCE = 0.5
# Beyond this the added octaves fall below float resolution
MAX_OCTAVES = 32

GRADIENTS: List[Tuple[int, int, int]] = [
    (1, 1, 0), (-1, 1, 0), (1, -1, 0), (-1, -1, 0),
    (1, 0, 1), (-1, 0, 1), (1, 0, -1), (-1, 0, -1),
    (0, 1, 1), (0, -1, 1), (0, 1, -1), (0, -1, -1),
]


def _corner(gradient_index: int, x: float, y: float) -> float:
    """Radially attenuated contribution of one simplex corner."""
    t = 0.5 - x * x - y * y
    if t < 0:
        return 0.0
    t *= t
    g = GRADIENTS[gradient_index]
    return t * t * (g[0] * x + g[1] * y)


def _octave_count(value: float) -> int:
    """Number of loop iterations for a requested octave count."""
    if not value or math.isnan(value):
        return DEFAULT_OCTAVES
    if value <= 0:
        return 0
    if math.isinf(value):
        return MAX_OCTAVES
    # A loop running while i < value iterates ceil(value) times
    return min(math.ceil(value), MAX_OCTAVES)


class GradientNoiseField:
    """Continuous gradient noise over the (x, z) plane."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize the field.

        Args:
            seed: Optional seed for a reproducible permutation
        """
        self.perm: List[int] = []
        self.reseed(seed)

    def reseed(self, seed: Optional[int] = None) -> None:
        """Draw a new permutation, giving a visually distinct field."""
        rng = random.Random(seed)
        p = list(range(PERMUTATION_SIZE))
        rng.shuffle(p)
        self.perm = p + p
        logger.debug("Noise field reseeded (seed=%s)", seed)

    def sample(self, x: float, z: float) -> float:
        """Sample the noise field.

        Returns:
            Noise value in approximately [-1, 1]
        """
        perm = self.perm

        # Skew into simplex space to find the containing cell
        s = (x + z) * F2
        i = math.floor(x + s)
        j = math.floor(z + s)
        t = (i + j) * G2
        x0 = x - (i - t)
        y0 = z - (j - t)

        # Lower or upper triangle of the cell
        if x0 > y0:
            i1, j1 = 1, 0
        else:
            i1, j1 = 0, 1

        x1 = x0 - i1 + G2
        y1 = y0 - j1 + G2
        x2 = x0 - 1.0 + 2.0 * G2
        y2 = y0 - 1.0 + 2.0 * G2

        ii = i & 255
        jj = j & 255
        gi0 = perm[ii + perm[jj]] % 12
        gi1 = perm[ii + i1 + perm[jj + j1]] % 12
        gi2 = perm[ii + 1 + perm[jj + 1]] % 12

        total = _corner(gi0, x0, y0) + _corner(gi1, x1, y1) + _corner(gi2, x2, y2)
        return OUTPUT_SCALE * total

    def octaves(
        self,
        x: float,
        z: float,
        octave_count: float = DEFAULT_OCTAVES,
        persistence: float = DEFAULT_PERSISTENCE,
    ) -> float:
        """Fractal sum of noise samples.

        Each octave doubles the frequency and multiplies the amplitude by
        `persistence`. The sum is divided by the total amplitude so the range
        does not grow with the octave count.

        Args:
            x: X coordinate
            z: Z coordinate
            octave_count: Number of octaves. 0 or NaN falls back to the default,
                fractional counts round up, capped at MAX_OCTAVES
            persistence: Amplitude decay per octave (0 or NaN falls back to the
                default)

        Returns:
            Noise value in approximately [-1, 1]
        """
        octave_count = _octave_count(octave_count)
        if not persistence or math.isnan(persistence):
            persistence = DEFAULT_PERSISTENCE

        total = 0.0
        amplitude = 1.0
        frequency = 1.0
        max_amplitude = 0.0
        for _ in range(octave_count):
            total += self.sample(x * frequency, z * frequency) * amplitude
            max_amplitude += amplitude
            amplitude *= persistence
            frequency *= 2
        if max_amplitude == 0:
            return 0.0
        return total / max_amplitude
