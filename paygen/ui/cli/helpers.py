"""
Shared CLI helpers.

Settings are loaded once per invocation and cached on ``ctx.obj`` so
that every subcommand sees the same values. A bad config file is
reported in red and exits 1.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from paygen.core.engine.calendar import DEFAULT_CALENDAR, WorkingDayCalendar
from paygen.core.models.settings import Settings


def get_settings(ctx: click.Context) -> Settings:
    """Settings for this invocation, loading them on first use."""
    if "settings" not in ctx.obj:
        from paygen.core.config.loader import ConfigError, find_config_file, load_settings

        config_path: Path | None = ctx.obj.get("config_path")
        try:
            ctx.obj["settings"] = load_settings(config_path)
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)
        ctx.obj["resolved_config_path"] = config_path or find_config_file()
    return ctx.obj["settings"]


def get_output_root(ctx: click.Context, override: str | None = None) -> Path:
    if override:
        return Path(override).resolve()
    from paygen.core.config.loader import resolve_output_root

    settings = get_settings(ctx)
    return resolve_output_root(settings, ctx.obj.get("resolved_config_path"))


def get_calendar(ctx: click.Context) -> WorkingDayCalendar:
    settings = get_settings(ctx)
    if not settings.extra_bank_holidays:
        return DEFAULT_CALENDAR
    return DEFAULT_CALENDAR.with_extra_holidays(settings.extra_bank_holidays)
