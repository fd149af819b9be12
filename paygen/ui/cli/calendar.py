"""
CLI commands for working-day calendar queries.
"""

from __future__ import annotations

import json
import sys
from datetime import date

import click

from paygen.ui.cli.helpers import get_calendar


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}") from None


@click.group()
def calendar() -> None:
    """Weekend and bank-holiday lookups."""


@calendar.command("next-working-day")
@click.argument("day")
@click.option("--add", "add_days", type=int, default=0, help="Advance by this many working days instead.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def next_working_day(ctx: click.Context, day: str, add_days: int, as_json: bool) -> None:
    """First working day on or after DAY (YYYY-MM-DD)."""
    from paygen.core.errors import HolidayTableError

    start = _parse_day(day)
    cal = get_calendar(ctx)
    try:
        result = cal.add_working_days(start, add_days) if add_days else cal.next_working_day(start)
    except (HolidayTableError, ValueError) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({"date": result.isoformat()}))
        return
    click.echo(result.isoformat())


@calendar.command("is-working-day")
@click.argument("day")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def is_working_day(ctx: click.Context, day: str, as_json: bool) -> None:
    """Whether DAY (YYYY-MM-DD) is a working day. Exit code 1 when it is not."""
    from paygen.core.errors import HolidayTableError

    target = _parse_day(day)
    cal = get_calendar(ctx)
    try:
        working = cal.is_working_day(target)
        holiday = cal.is_bank_holiday(target)
    except HolidayTableError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(2)

    if as_json:
        click.echo(json.dumps({
            "date": target.isoformat(),
            "workingDay": working,
            "weekend": cal.is_weekend(target),
            "bankHoliday": holiday,
        }))
    elif working:
        click.secho(f"✅ {target} is a working day", fg="green")
    else:
        reason = "weekend" if cal.is_weekend(target) else "bank holiday"
        click.secho(f"⛔ {target} is not a working day ({reason})", fg="yellow")

    sys.exit(0 if working else 1)
