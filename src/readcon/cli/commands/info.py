"""`readcon info` command.

Prints one line per frame: index, atom count, type blocks and velocity flag.
"""

from __future__ import annotations

import typer

from readcon.codecs._con_writer import group_type_blocks
from readcon.codecs.con import read_con
from readcon.core.errors import ReadconError


def register(app: typer.Typer) -> None:
    @app.command("info")
    def info(
        path: str = typer.Argument(..., help="Path to a .con or .convel file."),
    ) -> None:
        """Summarize the frames of a CON/CONVEL file."""
        try:
            frames = read_con(path)
        except ReadconError as e:
            raise typer.BadParameter(str(e)) from e

        typer.echo(f"frames: {len(frames)}")
        for i, frame in enumerate(frames):
            blocks = ", ".join(f"{b.symbol}x{len(b.atoms)}" for b in group_type_blocks(frame.atoms))
            typer.echo(
                f"frame {i}: natoms={len(frame)} types=[{blocks}] "
                f"velocities={'yes' if frame.has_velocities else 'no'}"
            )
