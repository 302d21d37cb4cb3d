"""Biome classification from column height.

The base ladder is read from the integer-truncated height, while the two
overrides (ALIEN, LAVA) compare against the raw height and are applied after
the ladder, overwriting it.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import NamedTuple, Optional
import math


class Biome(Enum):
    """Surface categories for terrain columns."""
    WATER = auto()
    SAND = auto()
    GRASS = auto()
    STONE = auto()
    SNOW = auto()
    ALIEN = auto()
    LAVA = auto()


@dataclass
class BiomeConfig:
    """Height thresholds for biome classification."""
    # Ladder on the truncated height (upper bounds, exclusive)
    water_below: int = -2
    sand_below: int = 2
    grass_below: int = 15
    stone_below: int = 40
    # Overrides on the raw height
    alien_above: float = 60.0
    lava_below: float = -30.0


class Color(NamedTuple):
    """RGB color with components in [0, 1]."""
    r: float
    g: float
    b: float

    @classmethod
    def from_hex(cls, value: int) -> "Color":
        """Create a color from a 0xRRGGBB integer."""
        return cls(
            ((value >> 16) & 0xFF) / 255.0,
            ((value >> 8) & 0xFF) / 255.0,
            (value & 0xFF) / 255.0,
        )

    def scaled(self, factor: float) -> "Color":
        """Multiply every component by `factor`."""
        return Color(self.r * factor, self.g * factor, self.b * factor)

    def to_hex(self) -> str:
        """Format as '#rrggbb'."""
        def channel(v: float) -> int:
            return max(0, min(255, int(round(v * 255))))
        return f"#{channel(self.r):02x}{channel(self.g):02x}{channel(self.b):02x}"


WATER_COLOR = Color.from_hex(0x3273A8)
SAND_COLOR = Color.from_hex(0xDEC28A)
GRASS_COLOR = Color.from_hex(0x56A34C)
DIRT_COLOR = Color.from_hex(0x795548)
STONE_COLOR = Color.from_hex(0x808080)
SNOW_COLOR = Color.from_hex(0xFFFFFF)
ALIEN_COLOR = Color.from_hex(0x9C27B0)
LAVA_COLOR = Color.from_hex(0xFF5722)


class BiomeClassifier:
    """Maps a column height to a biome."""

    def __init__(self, config: Optional[BiomeConfig] = None):
        """Initialize the classifier.

        Args:
            config: Height thresholds
        """
        self.config = config or BiomeConfig()

    def classify(self, height: float) -> Biome:
        """Classify a column by its raw (untruncated) height.

        Args:
            height: Finite column height

        Returns:
            Biome for the column
        """
        cfg = self.config
        h = math.floor(height)

        if h < cfg.water_below:
            biome = Biome.WATER
        elif h < cfg.sand_below:
            biome = Biome.SAND
        elif h < cfg.grass_below:
            biome = Biome.GRASS
        elif h < cfg.stone_below:
            biome = Biome.STONE
        else:
            biome = Biome.SNOW

        if height > cfg.alien_above:
            biome = Biome.ALIEN
        if height < cfg.lava_below:
            biome = Biome.LAVA

        return biome


_DEFAULT_CLASSIFIER = BiomeClassifier()


def classify(height: float) -> Biome:
    """Classify a height with the default thresholds."""
    return _DEFAULT_CLASSIFIER.classify(height)


# Biome to top layer color
BIOME_SURFACE_COLORS = {
    Biome.WATER: WATER_COLOR,
    Biome.SAND: SAND_COLOR,
    Biome.GRASS: GRASS_COLOR,
    Biome.STONE: STONE_COLOR,
    Biome.SNOW: SNOW_COLOR,
    Biome.ALIEN: ALIEN_COLOR,
    Biome.LAVA: LAVA_COLOR,
}

# Biome to color of the layers below the surface
BIOME_UNDER_COLORS = {
    Biome.GRASS: DIRT_COLOR,
}


def get_surface_color(biome: Biome) -> Color:
    """Get the top layer color for a biome."""
    return BIOME_SURFACE_COLORS[biome]


def get_under_color(biome: Biome) -> Color:
    """Get the sub-surface color for a biome: dirt under grass, stone otherwise."""
    return BIOME_UNDER_COLORS.get(biome, STONE_COLOR)
