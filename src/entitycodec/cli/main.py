"""entitycodec CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer

from entitycodec.cli.check import check_cmd
from entitycodec.cli.fmt import format_cmd
from entitycodec.cli.show import show_cmd


def _version() -> str:
    try:
        return importlib.metadata.version("entitycodec")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"entitycodec {_version()}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


app = typer.Typer(
    name="entitycodec",
    help=(
        "entitycodec — canonical JSON entity files.\n\n"
        "  entitycodec check   Verify entity files are canonical.\n"
        "  entitycodec format  Rewrite entity files canonically."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose logging."),
    ] = False,
) -> None:
    """entitycodec — canonical JSON entity files."""
    _setup_logging(verbose)


app.command("check")(check_cmd)
app.command("format")(format_cmd)
app.command("show")(show_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed entitycodec version."""
    typer.echo(f"entitycodec {_version()}")


if __name__ == "__main__":
    app()
