"""Windowed terrain evaluation around a moving reference point.

The window is a square of columns centered on the floored reference point.
Each refresh recomputes every column from scratch and emits the complete,
ordered list of voxel descriptors: columns in x-major order (x index outer,
z index inner), and within a column the layers from the surface downward.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple
import logging
import math

import numpy as np

from ..expression import CompiledHeightFunction, EvaluationContext
from .biome import (
    Biome,
    BiomeClassifier,
    Color,
    get_surface_color,
    get_under_color,
)

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Configuration for the terrain window."""
    # Columns along each side of the square window
    size: int = 200
    # Stacked voxels emitted per column
    layer_count: int = 4
    # Minimum movement (in columns, per axis) before a refresh happens
    hysteresis: int = 2
    # Brightness of the layers below the surface
    under_layer_shade: float = 0.85

    def validate(self) -> None:
        """Validate the configuration."""
        if self.size <= 0:
            raise ValueError(f"size must be positive: {self.size}")
        if self.layer_count <= 0:
            raise ValueError(f"layer_count must be positive: {self.layer_count}")
        if self.hysteresis < 0:
            raise ValueError(f"hysteresis must be >= 0: {self.hysteresis}")
        if not (0 < self.under_layer_shade <= 1):
            raise ValueError(f"under_layer_shade must be in (0, 1]: {self.under_layer_shade}")


@dataclass(frozen=True)
class Column:
    """One evaluated terrain column."""
    x: int
    z: int
    surface_level: int
    biome: Biome
    raw_height: float


@dataclass(frozen=True)
class VoxelLayer:
    """A unit voxel of a column, ready for the renderer."""
    x: int
    y: int
    z: int
    depth: int
    color: Color


@dataclass
class WindowState:
    """Center and dimensions of the last refresh."""
    center: Tuple[int, int]
    size: int
    layer_count: int


@dataclass
class WindowFrame:
    """Everything produced by one refresh."""
    center: Tuple[int, int]
    size: int
    layer_count: int
    columns: List[Column] = field(default_factory=list)
    voxels: List[VoxelLayer] = field(default_factory=list)
    # Columns whose height could not be evaluated and were flattened to 0
    failures: int = 0

    def heightmap(self) -> np.ndarray:
        """Surface levels as a (size, size) array indexed [x index, z index]."""
        levels = np.fromiter(
            (c.surface_level for c in self.columns),
            dtype=np.int64,
            count=len(self.columns),
        )
        return levels.reshape(self.size, self.size)

    def positions(self) -> np.ndarray:
        """Voxel positions as an (N, 3) array of (x, y, z)."""
        data = np.empty((len(self.voxels), 3), dtype=np.int64)
        for i, voxel in enumerate(self.voxels):
            data[i] = (voxel.x, voxel.y, voxel.z)
        return data

    def colors(self) -> np.ndarray:
        """Voxel colors as an (N, 3) float32 array of RGB in [0, 1]."""
        return np.array([tuple(v.color) for v in self.voxels], dtype=np.float32).reshape(-1, 3)

    def biome_counts(self) -> Dict[Biome, int]:
        """Number of columns per biome."""
        counts: Dict[Biome, int] = {}
        for column in self.columns:
            counts[column.biome] = counts.get(column.biome, 0) + 1
        return counts


FrameListener = Callable[[WindowFrame], None]


class TerrainWindow:
    """Keeps a square of columns evaluated around a reference point."""

    def __init__(
        self,
        context: EvaluationContext,
        config: Optional[WindowConfig] = None,
        classifier: Optional[BiomeClassifier] = None,
        height_function: Optional[CompiledHeightFunction] = None,
    ):
        """Initialize the window.

        Args:
            context: Evaluation context passed to the height function
            config: Window dimensions and refresh policy
            classifier: Biome classifier for column heights
            height_function: Initial compiled formula, if any
        """
        self.context = context
        self.config = config or WindowConfig()
        self.config.validate()
        self.classifier = classifier or BiomeClassifier()
        self.height_function = height_function
        self.state: Optional[WindowState] = None
        self.last_frame: Optional[WindowFrame] = None
        self._listeners: List[FrameListener] = []

    def add_listener(self, listener: FrameListener) -> None:
        """Register a callable that receives every emitted frame."""
        self._listeners.append(listener)

    def reset(self) -> None:
        """Forget the last refreshed center so the next call refreshes."""
        self.state = None

    def needs_refresh(self, center_x: int, center_z: int) -> bool:
        """Check whether a floored reference point is outside the hysteresis band."""
        if self.state is None:
            return True
        last_x, last_z = self.state.center
        band = self.config.hysteresis
        return abs(center_x - last_x) >= band or abs(center_z - last_z) >= band

    def maybe_refresh(
        self,
        reference_x: float,
        reference_z: float,
        force: bool = False,
    ) -> Optional[WindowFrame]:
        """Refresh the window if the reference point moved far enough.

        Args:
            reference_x: Reference point X (camera or look-at target)
            reference_z: Reference point Z
            force: Refresh regardless of movement (formula change,
                recentering, first initialization)

        Returns:
            The new frame, or None if nothing was recomputed
        """
        if self.height_function is None:
            return None
        if not (math.isfinite(reference_x) and math.isfinite(reference_z)):
            raise ValueError(f"Reference point must be finite: ({reference_x}, {reference_z})")

        center_x = math.floor(reference_x)
        center_z = math.floor(reference_z)
        if not force and not self.needs_refresh(center_x, center_z):
            return None

        frame = self._refresh(center_x, center_z)
        self.state = WindowState((center_x, center_z), self.config.size, self.config.layer_count)
        self.last_frame = frame

        for listener in self._listeners:
            listener(frame)
        return frame

    def _refresh(self, center_x: int, center_z: int) -> WindowFrame:
        size = self.config.size
        offset = size // 2
        frame = WindowFrame((center_x, center_z), size, self.config.layer_count)

        for i in range(size):
            world_x = center_x - offset + i
            for j in range(size):
                world_z = center_z - offset + j
                height, ok = self.evaluate(world_x, world_z)
                if not ok:
                    frame.failures += 1
                column = Column(
                    x=world_x,
                    z=world_z,
                    surface_level=math.floor(height),
                    biome=self.classifier.classify(height),
                    raw_height=height,
                )
                frame.columns.append(column)
                frame.voxels.extend(self._layers_for(column))

        if frame.failures:
            logger.debug(
                "%d of %d columns failed to evaluate and were flattened",
                frame.failures, size * size,
            )
        logger.debug("Refreshed %dx%d window at (%d, %d)", size, size, center_x, center_z)
        return frame

    def evaluate(self, world_x: int, world_z: int) -> Tuple[float, bool]:
        """Evaluate the height of one column.

        Returns:
            Tuple of (height, ok). A raising or non-finite evaluation gives
            (0.0, False).
        """
        try:
            height = float(self.height_function(self.context, world_x, world_z))
        except Exception:
            return 0.0, False
        if not math.isfinite(height):
            return 0.0, False
        return height, True

    def _layers_for(self, column: Column) -> List[VoxelLayer]:
        """Stack voxels downward from the surface level."""
        top = get_surface_color(column.biome)
        under = get_under_color(column.biome).scaled(self.config.under_layer_shade)
        layers = []
        for depth in range(self.config.layer_count):
            layers.append(VoxelLayer(
                x=column.x,
                y=column.surface_level - depth,
                z=column.z,
                depth=depth,
                color=top if depth == 0 else under,
            ))
        return layers
