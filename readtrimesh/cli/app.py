"""Command-line interface for readtrimesh."""

import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from readtrimesh.core import (
    Config,
    Mesh,
    MeshLoader,
    PostProcessFlags,
    ReadTrimeshError,
    load_config,
)
from readtrimesh.formats import ExtractorFactory, detect_format
from readtrimesh.utils import get_logger, log_load_result, log_performance, setup_logging

app = typer.Typer(
    name="readtrimesh",
    help="Load STL, PLY, OBJ and COLLADA files as triangle meshes",
    add_completion=False,
)
console = Console()
logger = get_logger(__name__)


def _load(
    mesh_file: Path,
    scale: Optional[float],
    flags: bool,
    cfg: Config,
) -> Mesh:
    loader = MeshLoader(cfg.loader)
    try:
        mesh = loader.load(
            mesh_file,
            scale=scale,
            flags=None if flags else PostProcessFlags.NONE,
        )
    except ReadTrimeshError as e:
        log_load_result(logger, mesh_file, error=e)
        raise
    log_load_result(logger, mesh_file, mesh=mesh)
    return mesh


def _configure(config: Optional[Path]) -> Config:
    cfg = load_config(config)
    setup_logging(cfg.logging)
    return cfg


@app.command()
def info(
    mesh_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Path to mesh file (.stl, .ply, .obj, .dae)",
    ),
    scale: Optional[float] = typer.Option(
        None,
        "--scale",
        "-s",
        help="Uniform scale factor (default from config, else 1.0)",
    ),
    flags: bool = typer.Option(
        True,
        "--flags/--no-flags",
        help="Apply post-processing flags",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file",
    ),
) -> None:
    """Load a mesh file and display information about it."""
    try:
        cfg = _configure(config)
        with console.status(f"Loading {mesh_file.name}..."):
            mesh = _load(mesh_file, scale, flags, cfg)
        summary = MeshLoader(cfg.loader).get_mesh_info(mesh)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title="Mesh Information", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("File", str(mesh_file))
    table.add_row("Format", detect_format(mesh_file).value.upper())
    table.add_row("Vertices", f"{summary['vertices']:,}")
    table.add_row("Faces", f"{summary['faces']:,}")
    table.add_row("Flags", ", ".join(summary["flags"]) or "none")

    if summary["extents"] is not None:
        bounds_min = summary["bounds"]["min"]
        bounds_max = summary["bounds"]["max"]
        extents = summary["extents"]
        table.add_row(
            "Bounding Box",
            f"[{bounds_min[0]:.3f}, {bounds_min[1]:.3f}, {bounds_min[2]:.3f}] to "
            f"[{bounds_max[0]:.3f}, {bounds_max[1]:.3f}, {bounds_max[2]:.3f}]"
        )
        table.add_row(
            "Size",
            f"{extents[0]:.3f} x {extents[1]:.3f} x {extents[2]:.3f}"
        )

    console.print(table)


@app.command()
def formats() -> None:
    """List the supported file extensions."""
    console.print("\nSupported formats:")
    for extension in ExtractorFactory.available_formats():
        console.print(f"  • .{extension}")


@app.command()
def export(
    mesh_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Path to mesh file to load",
    ),
    output: Path = typer.Argument(
        ...,
        help="Output file; the format follows its extension",
    ),
    scale: Optional[float] = typer.Option(
        None,
        "--scale",
        "-s",
        help="Uniform scale factor (default from config, else 1.0)",
    ),
    flags: bool = typer.Option(
        True,
        "--flags/--no-flags",
        help="Apply post-processing flags",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file",
    ),
) -> None:
    """Load a mesh file and write it back out with trimesh."""
    try:
        cfg = _configure(config)
        mesh = _load(mesh_file, scale, flags, cfg)
        output.parent.mkdir(parents=True, exist_ok=True)
        start = time.perf_counter()
        mesh.to_trimesh().export(output)
        log_performance(
            logger,
            "mesh_export",
            time.perf_counter() - start,
            output_file=str(output),
        )
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(
        f"💾 Wrote {mesh.vertex_count:,} vertices and {mesh.face_count:,} faces "
        f"to [cyan]{output}[/cyan]"
    )


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
