"""entitycodec show — print the derived path and classifier of an entity file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from entitycodec.cli.common import describe_error, load_registry
from entitycodec.cli.errors import err_unreadable_file, err_unsupported_file
from entitycodec.errors import EntitySerializationError
from entitycodec.paths import is_valid_entity_path, split_entity_path

console = Console()


def show_cmd(
    path: Annotated[
        Path,
        typer.Argument(help="Entity file to inspect.", exists=True, dir_okay=False),
    ],
) -> None:
    """Show the entity path, classifier and top-level content keys of a file."""
    registry = load_registry(console)
    serializer = registry.for_path(path)
    if serializer is None:
        console.print(err_unsupported_file(str(path), sorted(registry.extensions)))
        raise typer.Exit(1)

    try:
        with path.open("rb") as stream:
            entity = serializer.deserialize(stream)
    except EntitySerializationError as exc:
        console.print(describe_error(path, exc))
        raise typer.Exit(1) from exc
    except OSError as exc:
        console.print(err_unreadable_file(str(path), str(exc)))
        raise typer.Exit(1) from exc

    package, name = split_entity_path(entity.path)

    table = Table(title=escape(str(path)), show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Path", escape(entity.path))
    table.add_row("Package", escape(package) if package is not None else "[dim](none)[/]")
    table.add_row("Name", escape(name))
    table.add_row("Classifier", escape(entity.classifier_path))
    table.add_row("Content keys", escape(", ".join(sorted(entity.content))) or "[dim](empty)[/]")
    console.print(table)

    if not is_valid_entity_path(entity.path):
        console.print(
            f"[yellow]Warning:[/] '{escape(entity.path)}' is not a valid entity path.\n"
            "  Path segments may only contain letters, digits, '_' and '$'."
        )
