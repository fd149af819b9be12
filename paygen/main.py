"""
paygen — CLI entrypoint.

Usage:
    python -m paygen.main --help
    python -m paygen.main generate --format SDDirect --rows 20
    python -m paygen.main preview --format Bacs18PaymentLines --variant narrow
"""

from __future__ import annotations

import json
import operator
import sys
from pathlib import Path

import click
from click.core import ParameterSource

from paygen import __version__
from paygen.core.observability.logging_config import resolve_level, setup_logging
from paygen.ui.cli.helpers import get_calendar, get_output_root, get_settings

_VARIANTS = ["narrow", "wide", "DAILY", "MULTI"]
_DATE_FORMATS = ["YYYY-MM-DD", "DD-MMM-YYYY", "DD/MM/YYYY"]


@click.group()
@click.version_option(version=__version__, prog_name="paygen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to paygen.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """paygen — synthetic UK payment file generator."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = resolve_level()

    setup_logging(level=level, quiet_third_party=not debug)


# ── Generation ──────────────────────────────────────────────────────


def _generation_options(func):  # type: ignore[no-untyped-def]
    """Options shared by ``generate`` and ``preview``."""
    options = [
        click.option("--format", "-f", "file_format", required=True,
                     help="SDDirect, Bacs18PaymentLines or EaziPay (aliases accepted)."),
        click.option("--rows", "-n", "row_count", default=15, show_default=True, type=int,
                     help="Number of data rows."),
        click.option("--invalid", "inject_invalid", is_flag=True, help="Inject invalid rows."),
        click.option("--no-inline-edit", is_flag=True,
                     help="Lift the cap on invalid rows."),
        click.option("--optional/--no-optional", "include_optional", default=True,
                     help="Include optional columns (SDDirect)."),
        click.option("--column", "columns", multiple=True,
                     help="Only include these optional columns (SDDirect, repeatable)."),
        click.option("--no-headers", is_flag=True, help="Omit the header row (SDDirect)."),
        click.option("--date-format", type=click.Choice(_DATE_FORMATS), default=None,
                     help="Processing date format (EaziPay; random when omitted)."),
        click.option("--variant", type=click.Choice(_VARIANTS, case_sensitive=False), default=None,
                     help="Line width variant (Bacs18PaymentLines)."),
        click.option("--sun", default="DEFAULT", show_default=True,
                     help="Service user number used to namespace output."),
        click.option("--seed", type=int, default=None, help="Seed for reproducible output."),
        click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


# click parameter -> (FileParams field, conversion); later entries win.
_PARAM_FIELDS = [
    ("sun", "sun", None),
    ("row_count", "row_count", None),
    ("inject_invalid", "inject_invalid_rows", None),
    ("no_inline_edit", "allow_inline_edit", operator.not_),
    ("include_optional", "include_optional_columns", None),
    ("columns", "include_optional_columns", list),
    ("no_headers", "include_headers", operator.not_),
    ("date_format", "date_format", None),
    ("variant", "width_variant", None),
]


def _build_params(ctx: click.Context, **kwargs):  # type: ignore[no-untyped-def]
    """FileParams from the options given on the command line.

    Options left at their click default stay unset, so ``defaults`` in
    paygen.yml can fill them.
    """
    from pydantic import ValidationError

    from paygen.core.models.params import FileParams

    values = {}
    for param, field_name, convert in _PARAM_FIELDS:
        if ctx.get_parameter_source(param) in (None, ParameterSource.DEFAULT):
            continue
        value = kwargs[param]
        values[field_name] = convert(value) if convert else value

    try:
        return FileParams(**values)
    except ValidationError as e:
        click.secho("❌ Invalid options:", fg="red", bold=True)
        for err in e.errors():
            loc = ".".join(str(part) for part in err["loc"])
            click.echo(f"   • {loc}: {err['msg']}")
        sys.exit(1)


def _run(ctx: click.Context, write: bool, output_root: str | None, **kwargs) -> None:  # type: ignore[no-untyped-def]
    from paygen.core.engine.random_source import RandomSource
    from paygen.core.use_cases.generate import run_generate

    file_format = kwargs.pop("file_format")
    seed = kwargs.pop("seed")
    as_json = kwargs.pop("as_json")
    params = _build_params(ctx, **kwargs)
    settings = get_settings(ctx)

    result = run_generate(
        params,
        file_format=file_format,
        output_root=get_output_root(ctx, output_root) if write else None,
        write=write,
        max_rows=settings.max_rows,
        defaults=settings.defaults,
        rng=RandomSource(seed),
        calendar=get_calendar(ctx),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(include_content=not write), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    meta = result.file.meta
    if not write:
        click.echo(result.file.content)
        if not ctx.obj.get("quiet"):
            click.secho(
                f"\n{result.file.filename}  ({meta.row_count} rows, {meta.invalid_rows} invalid)",
                fg="cyan", err=True,
            )
        return

    click.secho(f"✅ {result.file.filename}", fg="green", bold=True)
    if not ctx.obj.get("quiet"):
        click.echo(f"   Path:    {result.path}")
        click.echo(f"   Rows:    {meta.row_count} ({meta.valid_rows} valid, {meta.invalid_rows} invalid)")
        click.echo(f"   Columns: {meta.column_count}")


@cli.command()
@_generation_options
@click.option("--output-root", "-o", default=None, type=click.Path(file_okay=False),
              help="Root of the output/ tree (default: from config).")
@click.pass_context
def generate(ctx: click.Context, output_root: str | None, **kwargs) -> None:  # type: ignore[no-untyped-def]
    """Generate a payment file and write it to the output store."""
    _run(ctx, write=True, output_root=output_root, **kwargs)


@cli.command()
@_generation_options
@click.pass_context
def preview(ctx: click.Context, **kwargs) -> None:  # type: ignore[no-untyped-def]
    """Generate a payment file and print it without writing."""
    _run(ctx, write=False, output_root=None, **kwargs)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def formats(as_json: bool) -> None:
    """List supported file formats."""
    from paygen.core.engine.generator import get_registry

    described = get_registry().describe()
    if as_json:
        click.echo(json.dumps(described, indent=2))
        return

    click.secho("\n📄 Supported formats", fg="cyan", bold=True)
    for info in described:
        header = "header optional" if info["supportsHeaders"] else "no header"
        click.echo(f"   • {info['name']}  (.{info['extension']}, {header})")
    click.echo()


# ── Servers ─────────────────────────────────────────────────────────


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", "-p", default=3001, type=int, help="Port number.")
@click.pass_context
def web(ctx: click.Context, host: str, port: int) -> None:
    """Start the HTTP API."""
    from paygen.ui.web.server import create_app, run_server

    settings = get_settings(ctx)
    app = create_app(
        settings=settings,
        config_path=ctx.obj.get("resolved_config_path"),
        output_root=get_output_root(ctx),
    )

    click.echo()
    click.secho("⚡ paygen HTTP API", bold=True)
    click.echo(f"   Listening: http://{host}:{port}")
    click.echo(f"   Output:    {app.config['OUTPUT_ROOT']}")
    click.echo()

    run_server(app, host=host, port=port, debug=ctx.obj.get("debug", False))


@cli.command()
@click.pass_context
def rpc(ctx: click.Context) -> None:
    """Serve JSON-RPC 2.0 over stdin/stdout."""
    from paygen.ui.rpc.server import serve
    from paygen.ui.rpc.tools import RpcContext, build_dispatcher

    rpc_ctx = RpcContext(
        settings=get_settings(ctx),
        output_root=get_output_root(ctx),
        calendar=get_calendar(ctx),
    )
    serve(build_dispatcher(rpc_ctx))


# ── Register sub-command groups from paygen/ui/cli/ ─────────────────

from paygen.ui.cli.calendar import calendar  # noqa: E402
from paygen.ui.cli.files import files  # noqa: E402

cli.add_command(calendar)
cli.add_command(files)


if __name__ == "__main__":
    cli()
