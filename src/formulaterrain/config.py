"""Configuration classes for formula terrain."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any
import json

from .terrain import WindowConfig


@dataclass
class TerrainConfig:
    """Configuration for a terrain session."""
    # Columns along each side of the window
    window_size: int = 200

    # Voxels stacked under every column's surface
    layer_count: int = 4

    # Reference point movement (per axis) that triggers a refresh
    hysteresis: int = 2

    # Brightness multiplier for layers below the surface
    under_layer_shade: float = 0.85

    # Noise/generator seed (None draws a fresh field each time)
    seed: Optional[int] = None

    # Only generate octave-noise "realistic" formulas
    realistic_only: bool = False

    def validate(self) -> None:
        """Validate the configuration."""
        self.window_config().validate()

    def window_config(self) -> WindowConfig:
        """Window settings derived from this configuration."""
        return WindowConfig(
            size=self.window_size,
            layer_count=self.layer_count,
            hysteresis=self.hysteresis,
            under_layer_shade=self.under_layer_shade,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "window_size": self.window_size,
            "layer_count": self.layer_count,
            "hysteresis": self.hysteresis,
            "under_layer_shade": self.under_layer_shade,
            "seed": self.seed,
            "realistic_only": self.realistic_only,
        }

    def save(self, filepath: Path) -> None:
        """Save configuration to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path) -> "TerrainConfig":
        """Load configuration from JSON file."""
        with open(filepath) as f:
            data = json.load(f)

        return cls(
            window_size=data.get("window_size", 200),
            layer_count=data.get("layer_count", 4),
            hysteresis=data.get("hysteresis", 2),
            under_layer_shade=data.get("under_layer_shade", 0.85),
            seed=data.get("seed"),
            realistic_only=data.get("realistic_only", False),
        )


# Named formulas for quick access
FORMULA_PRESETS: Dict[str, str] = {
    "realistic": "octaved(x*0.01, z*0.01, 4, 0.5) * 40",
    "rolling_hills": "sin(x*0.05)*10 + cos(z*0.05)*10 + perlin(x*0.05, 0, z*0.05)*5",
    "cubes": "floor(x/4)*4 + floor(z/4)*4",
    "pyramid": "max(0, 40 - max(abs(x), abs(z)))",
    "sphere": "sqrt(max(0, 900 - x*x - z*z))",
    "torus": "sqrt(max(0, 100 - pow(sqrt(x*x+z*z) - 30, 2)))",
    "maze": "floor(sin(x*0.2) + cos(z*0.2) + 1.5) * 10",
    "islands": "max(0, 30 - sqrt(x*x+z*z)) + simplex(x*0.05, z*0.05)*5 + 20",
    "underworld": "simplex(x*0.05, z*0.05) * 10 - 30",
    "static": "rand() * 4 + randnormal(0, 1)",
}


def get_preset(name: str) -> Optional[str]:
    """Get a preset formula by name."""
    return FORMULA_PRESETS.get(name.lower().replace("-", "_").replace(" ", "_"))


def list_presets() -> list[str]:
    """Get list of available preset names."""
    return list(FORMULA_PRESETS.keys())
