"""
CLI commands for the output store.

Thin wrappers around ``core.persistence.output_store``.
"""

from __future__ import annotations

import json
import sys

import click

from paygen.ui.cli.helpers import get_output_root


def _resolve_format(file_format: str) -> str:
    from paygen.core.errors import UnsupportedFormatError
    from paygen.core.models.request import FileFormat

    try:
        return str(FileFormat.resolve(file_format))
    except UnsupportedFormatError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.group()
def files() -> None:
    """Browse generated files in the output store."""


@files.command("list")
@click.argument("file_format")
@click.option("--sun", default="DEFAULT", show_default=True, help="Service user number.")
@click.option("--limit", type=int, default=None, help="Show at most this many files.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_files(ctx: click.Context, file_format: str, sun: str, limit: int | None, as_json: bool) -> None:
    """List stored files for FILE_FORMAT, newest first."""
    from paygen.core.errors import PathTraversalError
    from paygen.core.persistence.output_store import list_output_files

    fmt = _resolve_format(file_format)
    try:
        entries = list_output_files(get_output_root(ctx), fmt, sun)
    except PathTraversalError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if limit is not None:
        entries = entries[:limit]

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    if not entries:
        click.echo(f"No files for {fmt}/{sun}.")
        return

    click.secho(f"\n📁 {fmt}/{sun}", fg="cyan", bold=True)
    for entry in entries:
        click.echo(f"   {entry.name}  {entry.size:>8} B  {entry.modified:%Y-%m-%d %H:%M:%S}")
    click.echo()


@files.command("read")
@click.argument("file_format")
@click.argument("name")
@click.option("--sun", default="DEFAULT", show_default=True, help="Service user number.")
@click.option("--offset", type=int, default=0, help="Byte offset to start from.")
@click.option("--length", type=int, default=None, help="Maximum bytes to read.")
@click.option("--base64", "as_base64", is_flag=True, help="Return data base64-encoded.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def read_file(
    ctx: click.Context,
    file_format: str,
    name: str,
    sun: str,
    offset: int,
    length: int | None,
    as_base64: bool,
    as_json: bool,
) -> None:
    """Print a stored file (or a slice of it)."""
    from paygen.core.errors import PathTraversalError
    from paygen.core.persistence.output_store import DEFAULT_READ_LENGTH, read_output_file

    fmt = _resolve_format(file_format)
    try:
        chunk = read_output_file(
            get_output_root(ctx), fmt, sun, name,
            offset=offset,
            length=DEFAULT_READ_LENGTH if length is None else length,
            mode="base64" if as_base64 else "utf8",
        )
    except (PathTraversalError, FileNotFoundError, ValueError) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(chunk.to_dict(), indent=2))
        return
    click.echo(chunk.data)
