"""Biome classification and windowed terrain evaluation."""

from .biome import (
    Biome,
    BiomeClassifier,
    BiomeConfig,
    Color,
    classify,
    get_surface_color,
    get_under_color,
)
from .window import (
    Column,
    FrameListener,
    TerrainWindow,
    VoxelLayer,
    WindowConfig,
    WindowFrame,
    WindowState,
)

__all__ = [
    # Biome
    "Biome",
    "BiomeClassifier",
    "BiomeConfig",
    "Color",
    "classify",
    "get_surface_color",
    "get_under_color",
    # Window
    "Column",
    "FrameListener",
    "TerrainWindow",
    "VoxelLayer",
    "WindowConfig",
    "WindowFrame",
    "WindowState",
]
