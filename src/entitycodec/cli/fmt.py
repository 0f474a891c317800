"""entitycodec format — rewrite entity files in canonical form.

Files that cannot be decoded are reported and left untouched.

Usage:
  entitycodec format model/ --recursive
  entitycodec format model/Person.json --dry-run
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from entitycodec.cli.common import describe_error, expand_paths, load_registry, recode_file
from entitycodec.cli.errors import err_no_entity_files, err_unreadable_file, err_unsupported_file

console = Console()


def format_cmd(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Entity files or directories to format."),
    ],
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Recurse into subdirectories (max 10 levels)."),
    ] = False,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", help="Glob pattern to exclude (repeatable)."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show which files would change without writing."),
    ] = False,
) -> None:
    """Rewrite entity files with their canonical encoding."""
    registry = load_registry(console)
    files = expand_paths(paths, registry.extensions, recursive=recursive, exclude=exclude or [])

    if not files:
        console.print(err_no_entity_files(sorted(registry.extensions)))
        raise typer.Exit(0)

    changed = failed = 0
    for path in files:
        serializer = registry.for_path(path)
        if serializer is None:
            console.print(err_unsupported_file(str(path), sorted(registry.extensions)))
            continue

        try:
            result = recode_file(path, serializer)
        except OSError as exc:
            console.print(err_unreadable_file(str(path), str(exc)))
            failed += 1
            continue
        if result.error is not None:
            console.print(describe_error(path, result.error))
            failed += 1
            continue
        if result.is_canonical or result.canonical is None:
            continue

        if dry_run:
            changed += 1
            console.print(f"[dim]would format[/] {escape(str(path))}")
        else:
            try:
                path.write_bytes(result.canonical)
            except OSError as exc:
                console.print(err_unreadable_file(str(path), str(exc)))
                failed += 1
                continue
            changed += 1
            console.print(f"[green]✓[/] formatted {escape(str(path))}")

    verb = "would be formatted" if dry_run else "formatted"
    console.print(f"\n{changed} file(s) {verb}, {failed} failed")
    if failed:
        raise typer.Exit(1)
