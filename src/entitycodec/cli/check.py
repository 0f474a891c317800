"""entitycodec check — verify entity files are in canonical form.

Usage:
  entitycodec check model/
  entitycodec check model/ --recursive --exclude "*.draft.json"

Exit code 1 if any file is not canonical or cannot be decoded.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from entitycodec.cli.common import describe_error, expand_paths, load_registry, recode_file
from entitycodec.cli.errors import (
    err_no_entity_files,
    err_not_canonical,
    err_unreadable_file,
    err_unsupported_file,
)

console = Console()


def check_cmd(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Entity files or directories to check."),
    ],
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Recurse into subdirectories (max 10 levels)."),
    ] = False,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", help="Glob pattern to exclude (repeatable)."),
    ] = None,
) -> None:
    """Check that entity files match their canonical encoding."""
    registry = load_registry(console)
    files = expand_paths(paths, registry.extensions, recursive=recursive, exclude=exclude or [])

    if not files:
        console.print(err_no_entity_files(sorted(registry.extensions)))
        raise typer.Exit(0)

    checked = failed = 0
    for path in files:
        serializer = registry.for_path(path)
        if serializer is None:
            console.print(err_unsupported_file(str(path), sorted(registry.extensions)))
            continue

        checked += 1
        try:
            result = recode_file(path, serializer)
        except OSError as exc:
            console.print(err_unreadable_file(str(path), str(exc)))
            failed += 1
            continue
        if result.error is not None:
            console.print(describe_error(path, result.error))
            failed += 1
        elif not result.is_canonical:
            console.print(err_not_canonical(str(path)))
            failed += 1
        else:
            console.print(f"[green]✓[/] {escape(str(path))}")

    console.print(f"\n{checked} file(s) checked, {failed} with problems")
    if failed:
        raise typer.Exit(1)
