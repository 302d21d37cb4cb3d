"""Command-line interface for Formula Terrain."""

from pathlib import Path
from typing import Optional
import logging
import math
import random

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import TerrainConfig, get_preset, list_presets, FORMULA_PRESETS
from .expression import CompileError
from .generator import FormulaGenerator
from .session import ReferencePoint, TerrainSession
from .terrain import WindowFrame, get_surface_color

app = typer.Typer(
    name="formulaterrain",
    help="Evaluate height formulas into voxel terrain.",
    no_args_is_help=True,
)
console = Console()

# Windows larger than this are summarized without drawing the map
MAX_MAP_SIZE = 64


def version_callback(value: bool):
    if value:
        console.print(f"Formula Terrain version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    """Route package logs through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
):
    """Formula Terrain: infinite voxel terrain from height formulas."""
    setup_logging(verbose)


def _print_map(frame: WindowFrame) -> None:
    """Draw the window top-down, one colored cell per column."""
    heights = frame.heightmap()
    biomes = [c.biome for c in frame.columns]
    size = frame.size
    for j in range(size):
        row = Text()
        for i in range(size):
            biome = biomes[i * size + j]
            row.append("  ", style=f"on {get_surface_color(biome).to_hex()}")
        console.print(row)
    console.print(f"  surface range: {heights.min()} .. {heights.max()}")


def _print_summary(frame: WindowFrame) -> None:
    table = Table(title=f"Window at {frame.center} ({frame.size}x{frame.size}, {frame.layer_count} layers)")
    table.add_column("Biome", style="cyan")
    table.add_column("Columns", justify="right")
    table.add_column("Share", justify="right")

    total = len(frame.columns)
    for biome, count in sorted(frame.biome_counts().items(), key=lambda item: item[0].value):
        table.add_row(biome.name, str(count), f"{100.0 * count / total:.1f}%")

    console.print(table)
    console.print(f"  Voxels: {len(frame.voxels)}")
    if frame.failures:
        console.print(f"  [yellow]Flattened columns:[/yellow] {frame.failures}")


def _save_frame(frame: WindowFrame, output: Path) -> None:
    np.savez(
        output,
        positions=frame.positions(),
        colors=frame.colors(),
        heightmap=frame.heightmap(),
        center=np.array(frame.center, dtype=np.int64),
    )
    console.print(f"[green]Saved[/green] voxel arrays to: {output}")


def _render(
    formula: str,
    x: float,
    z: float,
    size: int,
    layers: int,
    seed: Optional[int],
    output: Optional[Path],
    show_map: Optional[bool],
) -> None:
    config = TerrainConfig(window_size=size, layer_count=layers, seed=seed)
    try:
        config.validate()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    session = TerrainSession(config)
    session.reference = ReferencePoint(x, z)
    try:
        frame = session.set_formula(formula)
    except CompileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[bold]Formula:[/bold] {formula}")
    if show_map is None:
        show_map = size <= MAX_MAP_SIZE
    if show_map:
        _print_map(frame)
    _print_summary(frame)
    if output is not None:
        _save_frame(frame, output)


@app.command()
def render(
    formula: str = typer.Argument(..., help="Height formula over x and z"),
    x: float = typer.Option(0.0, "--x", help="Reference point X"),
    z: float = typer.Option(0.0, "--z", help="Reference point Z"),
    size: int = typer.Option(32, "--size", "-s", help="Window size in columns"),
    layers: int = typer.Option(4, "--layers", "-l", help="Voxel layers per column"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Noise seed"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save voxel arrays (.npz)"),
    show_map: Optional[bool] = typer.Option(None, "--map/--no-map", help="Draw the biome map"),
):
    """Render a formula around a reference point.

    Example:
        formulaterrain render "floor(x/4)*4 + floor(z/4)*4" --size 16
    """
    _render(formula, x, z, size, layers, seed, output, show_map)


@app.command()
def preset(
    name: str = typer.Argument(..., help="Preset name"),
    x: float = typer.Option(0.0, "--x", help="Reference point X"),
    z: float = typer.Option(0.0, "--z", help="Reference point Z"),
    size: int = typer.Option(32, "--size", "-s", help="Window size in columns"),
    layers: int = typer.Option(4, "--layers", "-l", help="Voxel layers per column"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Noise seed"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save voxel arrays (.npz)"),
    show_map: Optional[bool] = typer.Option(None, "--map/--no-map", help="Draw the biome map"),
):
    """Render a preset formula.

    Example:
        formulaterrain preset pyramid --size 48
    """
    formula = get_preset(name)
    if formula is None:
        console.print(f"[red]Error:[/red] Unknown preset: {name}")
        console.print("Available presets:")
        for p in list_presets():
            console.print(f"  - {p}")
        raise typer.Exit(1)
    _render(formula, x, z, size, layers, seed, output, show_map)


@app.command("list-presets")
def list_presets_cmd():
    """List available preset formulas."""
    table = Table(title="Available Presets")
    table.add_column("Name", style="cyan")
    table.add_column("Formula")

    for name in list_presets():
        table.add_row(name, FORMULA_PRESETS[name])

    console.print(table)


@app.command("eval")
def eval_cmd(
    formula: str = typer.Argument(..., help="Height formula over x and z"),
    x: float = typer.Argument(..., help="World X"),
    z: float = typer.Argument(..., help="World Z"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Noise seed"),
):
    """Evaluate a formula at a single column.

    Example:
        formulaterrain eval "x + z" 2 3
    """
    session = TerrainSession(TerrainConfig(window_size=1, seed=seed))
    try:
        compiled = session.engine.compile(formula)
    except CompileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    session.window.height_function = compiled
    # Same column the window would render for this point
    height, ok = session.window.evaluate(math.floor(x), math.floor(z))
    biome = session.window.classifier.classify(height)

    console.print(f"[cyan]Height:[/cyan]  {height:g}" + ("" if ok else " [yellow](flattened)[/yellow]"))
    console.print(f"[cyan]Surface:[/cyan] {math.floor(height)}")
    console.print(f"[cyan]Biome:[/cyan]   {biome.name}")


@app.command()
def generate(
    count: int = typer.Option(5, "--count", "-n", help="Number of formulas"),
    realistic: bool = typer.Option(False, "--realistic/--any", help="Only realistic octave-noise formulas"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Generator seed"),
):
    """Generate random formulas.

    Example:
        formulaterrain generate --count 10 --seed 7
    """
    generator = FormulaGenerator(rng=random.Random(seed), realistic_only=realistic)

    table = Table(title="Generated Formulas")
    table.add_column("Theme", style="cyan")
    table.add_column("Level")
    table.add_column("Noise")
    table.add_column("Formula")

    for _ in range(count):
        g = generator.create()
        table.add_row(g.theme, g.level, g.noise, g.formula)

    console.print(table)


if __name__ == "__main__":
    app()
