"""`readcon convert` command.

Re-serializes a CON/CONVEL file, e.g. to change the float precision or the
velocity layout (`section` as eOn writes it, or `inline` columns).
"""

from __future__ import annotations

import typer

from readcon.codecs._con_writer import DEFAULT_PRECISION, VELOCITY_LAYOUTS
from readcon.codecs.con import read_con, write_con
from readcon.core.errors import ReadconError


def register(app: typer.Typer) -> None:
    @app.command("convert")
    def convert(
        src: str = typer.Argument(..., help="Input .con/.convel file."),
        dst: str = typer.Argument(..., help="Output file path."),
        precision: int = typer.Option(
            DEFAULT_PRECISION,
            "--precision",
            min=0,
            help="Digits after the decimal point for float fields.",
        ),
        velocity_layout: str = typer.Option(
            "section",
            "--velocity-layout",
            help="How velocities are written: section|inline.",
        ),
    ) -> None:
        """Read SRC and write it back to DST."""
        if velocity_layout not in VELOCITY_LAYOUTS:
            raise typer.BadParameter(f"velocity layout must be one of {list(VELOCITY_LAYOUTS)}")

        try:
            frames = read_con(src)
            write_con(dst, frames, precision=precision, velocity_layout=velocity_layout)
        except ReadconError as e:
            raise typer.BadParameter(str(e)) from e

        typer.echo(dst)
