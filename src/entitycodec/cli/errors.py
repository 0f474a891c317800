"""entitycodec rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from entitycodec.cli.errors import err_decode_failed
    console.print(err_decode_failed("model/Person.json", str(exc)))
    raise typer.Exit(1)
"""

from __future__ import annotations

from rich.markup import escape


def err_decode_failed(path: str, detail: str) -> str:
    """File is not a well-formed entity document."""
    return (
        f"[red]Error:[/] Could not read entity file '{escape(path)}'.\n"
        f"  {escape(detail)}\n"
        '  Fix the file so it is a JSON object with only "classifierPath" and "content".'
    )


def err_path_derivation(path: str, detail: str) -> str:
    """Document is well-formed but its path cannot be computed."""
    return (
        f"[red]Error:[/] Could not compute the entity path of '{escape(path)}'.\n"
        f"  {escape(detail)}\n"
        '  Set a string "name" (and optionally a string "package") at the top of "content".'
    )


def err_not_canonical(path: str) -> str:
    """File decodes but differs from its canonical encoding."""
    return (
        f"[yellow]✗ Not canonical:[/] {escape(path)}\n"
        f"  Run:  entitycodec format {escape(path)}"
    )


def err_no_entity_files(extensions: list[str]) -> str:
    """Nothing to process after expanding the given paths."""
    exts = ", ".join(f".{e}" for e in sorted(extensions)) or "(none)"
    return (
        f"[yellow]No entity files found.[/] Looked for: {exts}\n"
        "  Pass entity files or directories, and use --recursive for nested directories."
    )


def err_unsupported_file(path: str, extensions: list[str]) -> str:
    """File extension has no registered serializer."""
    exts = ", ".join(f".{e}" for e in sorted(extensions)) or "(none)"
    return (
        f"[yellow]Skipped:[/] '{escape(path)}' has no matching serializer.\n"
        f"  Supported extensions: {exts}"
    )


def err_config(detail: str) -> str:
    """Configuration file or environment variable is invalid."""
    return (
        f"[red]Error:[/] Invalid configuration: {escape(detail)}\n"
        "  Fix entitycodec.yaml (or the ENTITYCODEC_* environment variables) and re-run."
    )


def err_unreadable_file(path: str, detail: str) -> str:
    """File is missing or cannot be read or written."""
    return (
        f"[red]Error:[/] Could not access '{escape(path)}'.\n"
        f"  {escape(detail)}\n"
        "  Check that the path exists and is readable, then re-run."
    )
