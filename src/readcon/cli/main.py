"""readcon CLI entrypoint.

A thin Typer application over `readcon.codecs.con`; every command reads and
writes whole files through the codec API.
"""

from __future__ import annotations

import logging

import typer

app = typer.Typer(
    name="readcon",
    add_completion=False,
    no_args_is_help=True,
    help="Inspect and convert eOn .con/.convel atomic configuration files.",
)


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """readcon CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command("version")
def version() -> None:
    """Print the installed readcon version."""
    from readcon import __version__

    typer.echo(__version__)


def _register_commands() -> None:
    """Register CLI subcommands.

    Importing these modules must remain lightweight so `readcon --help` is fast.
    """
    from readcon.cli.commands import convert as convert_cmd
    from readcon.cli.commands import info as info_cmd
    from readcon.cli.commands import table as table_cmd

    info_cmd.register(app)
    convert_cmd.register(app)
    table_cmd.register(app)


_register_commands()
