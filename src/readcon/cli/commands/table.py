"""`readcon table` command.

Exports the atoms of every frame as one CSV table (leading `frame` column).
Floats are written with `%.17g` so the CSV preserves full double precision.
"""

from __future__ import annotations

from pathlib import Path

import typer

from readcon.codecs.con import read_con
from readcon.core.errors import ReadconError
from readcon.core.tables import frames_to_dataframe


def register(app: typer.Typer) -> None:
    @app.command("table")
    def table(
        src: str = typer.Argument(..., help="Input .con/.convel file."),
        out: str = typer.Option(..., "--out", help="Output CSV path."),
    ) -> None:
        """Write the atom table of SRC as CSV."""
        try:
            frames = read_con(src)
        except ReadconError as e:
            raise typer.BadParameter(str(e)) from e

        df = frames_to_dataframe(frames)
        out_path = Path(out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out_path, index=False, lineterminator="\n", float_format="%.17g")
        typer.echo(str(out_path))
