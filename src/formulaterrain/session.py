"""Host-side driver tying the engine, window and generator together.

A session owns one evaluation context, keeps the last formula that compiled
and forwards reference point updates to the terrain window. A rejected
formula never replaces the one being rendered.
"""

from dataclasses import dataclass
from typing import Optional
import logging
import random

from .config import TerrainConfig
from .expression import (
    CompiledHeightFunction,
    EvaluationContext,
    ExpressionEngine,
)
from .generator import FormulaGenerator, GeneratedFormula
from .terrain import FrameListener, TerrainWindow, WindowFrame

logger = logging.getLogger(__name__)


@dataclass
class ReferencePoint:
    """Point the window follows (camera look-at target)."""
    x: float = 0.0
    z: float = 0.0


class TerrainSession:
    """Compiles formulas and keeps the terrain window current."""

    def __init__(self, config: Optional[TerrainConfig] = None):
        """Initialize the session.

        Args:
            config: Session configuration
        """
        self.config = config or TerrainConfig()
        self.config.validate()

        self.context = EvaluationContext(seed=self.config.seed)
        self.engine = ExpressionEngine(self.context)
        self.window = TerrainWindow(self.context, self.config.window_config())
        self.generator = FormulaGenerator(
            rng=random.Random(self.config.seed),
            realistic_only=self.config.realistic_only,
        )
        self.reference = ReferencePoint()
        self.generated: Optional[GeneratedFormula] = None

    @property
    def compiled(self) -> Optional[CompiledHeightFunction]:
        """The formula currently driving the window."""
        return self.window.height_function

    @property
    def formula(self) -> Optional[str]:
        return self.compiled.source if self.compiled else None

    @property
    def frame(self) -> Optional[WindowFrame]:
        """The most recently emitted frame."""
        return self.window.last_frame

    def add_listener(self, listener: FrameListener) -> None:
        """Register a renderer sink for emitted frames."""
        self.window.add_listener(listener)

    def set_formula(self, text: str) -> WindowFrame:
        """Compile a formula and, if it is valid, re-render with it.

        Raises:
            CompileError: If the formula is rejected; the previous formula
                and frame stay in place
        """
        compiled = self.engine.compile(text)
        self.window.height_function = compiled
        self.generated = None
        return self.window.maybe_refresh(self.reference.x, self.reference.z, force=True)

    def randomize(self) -> GeneratedFormula:
        """Reseed the noise field and switch to a newly generated formula."""
        self.context.reseed(self.generator.rng.getrandbits(32))
        generated = self.generator.create()
        logger.debug("Generated %s/%s formula: %s", generated.theme, generated.level, generated.formula)
        self.set_formula(generated.formula)
        self.generated = generated
        return generated

    def update(self, x: float, z: float) -> Optional[WindowFrame]:
        """Move the reference point; refreshes only past the hysteresis band."""
        self.reference = ReferencePoint(x, z)
        return self.window.maybe_refresh(x, z)

    def recenter(self) -> Optional[WindowFrame]:
        """Move the reference point back to the origin and refresh."""
        self.reference = ReferencePoint()
        return self.window.maybe_refresh(0.0, 0.0, force=True)
