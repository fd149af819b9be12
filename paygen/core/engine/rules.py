"""
Cross-field business rules.

Per-field generators know nothing about each other. Once every field of
a record has a value, ``apply_cross_field_rules`` runs a fixed, ordered
pass over the record:

    1. zero-amount transaction code  ->  amount forced to the zero literal
    2. settlement date               ->  exact lead time for zero-amount codes,
                                         otherwise a random day in the window
    3. secondary identifier          ->  cleared unless the code is zero-amount
    4. realtime checksum             ->  populated only for code 99

``validate_record`` is the read side: it re-runs every field check and
the cross-field predicates and returns the issues found.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date

from paygen.core.engine.fields import (
    ALPHANUMERIC,
    TRANSACTION_CODES,
    FieldContext,
    FieldRule,
    FieldValue,
    LogicalRecord,
    check_lead_time,
    random_working_day,
)

MAX_LEAD_DAYS = 30
CHECKSUM_CODE = "99"
_CHECKSUM_RE = re.compile(r"^(0000|/[A-Za-z0-9]{3})?$")


@dataclass(frozen=True)
class DateRule:
    """Settlement-date window for one format.

    Zero-amount rows settle exactly ``lead_days`` working days out; all
    other rows fall anywhere from ``min_days`` to ``max_days``.
    """

    field: str
    lead_days: int
    min_days: int
    render: Callable[[date], str]
    parse: Callable[[str], date | None]
    max_days: int = MAX_LEAD_DAYS

    def check(self, value: FieldValue, ctx: FieldContext) -> list[str]:
        day = self.parse("" if value is None else str(value))
        if day is None:
            return ["is not a valid date in the expected format"]
        return check_lead_time(day, ctx, self.min_days, self.max_days)

    def invalid(self, ctx: FieldContext) -> str:
        """A well-formed date that misses the settlement window.

        Zero-amount rows get a day inside the window but off the exact
        lead time; every other row gets a day that is too soon.
        """
        if ctx.is_zero_amount:
            return self.render(ctx.calendar.add_working_days(ctx.today, self.lead_days + 1))
        return self.render(ctx.calendar.add_working_days(ctx.today, self.min_days - 1))


@dataclass(frozen=True)
class CrossFieldProfile:
    """Which fields of a format the cross-field pass touches."""

    amount_field: str
    zero_amount: FieldValue
    date: DateRule | None = None
    secondary_id_field: str | None = None
    checksum_field: str | None = None


# ── Generation pass ─────────────────────────────────────────────


def generate_secondary_id(ctx: FieldContext) -> str | None:
    """Half of the zero-amount rows carry a 5-10 character identifier."""
    if not ctx.is_zero_amount or ctx.rng.boolean():
        return None
    return ctx.rng.alphanumeric(ctx.rng.randint(5, 10))


def generate_checksum(ctx: FieldContext) -> str:
    if ctx.transaction_code != CHECKSUM_CODE:
        return ""
    return ctx.rng.choice(("0000", "/" + ctx.rng.string(3, ALPHANUMERIC), ""))


def settlement_date(profile: CrossFieldProfile, ctx: FieldContext) -> date:
    rule = profile.date
    if ctx.is_zero_amount:
        return ctx.calendar.add_working_days(ctx.today, rule.lead_days)
    return random_working_day(ctx, rule.min_days, rule.max_days)


def apply_cross_field_rules(profile: CrossFieldProfile, ctx: FieldContext) -> LogicalRecord:
    """Run the ordered pass over ``ctx.record`` in place and return it.

    Only fields already present in the record are touched, so unselected
    optional columns stay absent.
    """
    record = ctx.record

    if ctx.is_zero_amount and profile.amount_field in record:
        record[profile.amount_field] = profile.zero_amount

    if profile.date and profile.date.field in record:
        record[profile.date.field] = profile.date.render(settlement_date(profile, ctx))

    if profile.secondary_id_field and profile.secondary_id_field in record:
        if not ctx.is_zero_amount:
            record[profile.secondary_id_field] = None

    if profile.checksum_field and profile.checksum_field in record:
        record[profile.checksum_field] = generate_checksum(ctx)

    return record


# ── Validation ──────────────────────────────────────────────────


def _is_zero(value: FieldValue) -> bool | None:
    try:
        return float(str(value)) == 0
    except (TypeError, ValueError):
        return None


def check_checksum(value: FieldValue, ctx: FieldContext) -> list[str]:
    if not _CHECKSUM_RE.match("" if value is None else str(value)):
        return ["must be empty, 0000 or / followed by 3 letters or digits"]
    return []


def cross_field_issues(profile: CrossFieldProfile, ctx: FieldContext) -> list[str]:
    record = ctx.record
    issues: list[str] = []

    # An unknown code is reported by its own field check.
    if ctx.transaction_code not in TRANSACTION_CODES:
        return issues

    if profile.amount_field in record:
        zero = _is_zero(record[profile.amount_field])
        if zero is not None:
            if ctx.is_zero_amount and not zero:
                issues.append(f"{profile.amount_field}: must be zero for code {ctx.transaction_code}")
            elif not ctx.is_zero_amount and zero:
                issues.append(f"{profile.amount_field}: must be greater than zero for code {ctx.transaction_code}")

    if profile.date and profile.date.field in record and ctx.is_zero_amount:
        day = profile.date.parse(str(record[profile.date.field] or ""))
        expected = ctx.calendar.add_working_days(ctx.today, profile.date.lead_days)
        if day is not None and day != expected:
            issues.append(
                f"{profile.date.field}: must be exactly {profile.date.lead_days} working days out "
                f"for code {ctx.transaction_code}"
            )

    if profile.secondary_id_field and record.get(profile.secondary_id_field) and not ctx.is_zero_amount:
        issues.append(f"{profile.secondary_id_field}: only allowed for zero-amount codes")

    if profile.checksum_field and record.get(profile.checksum_field):
        if ctx.transaction_code != CHECKSUM_CODE:
            issues.append(f"{profile.checksum_field}: only allowed for code {CHECKSUM_CODE}")

    return issues


def validate_record(
    rules: Iterable[FieldRule],
    profile: CrossFieldProfile,
    ctx: FieldContext,
) -> list[str]:
    """Every field-level and cross-field issue in ``ctx.record``."""
    issues: list[str] = []
    for rule in rules:
        if rule.name in ctx.record:
            issues.extend(rule.violations(ctx.record[rule.name], ctx))
    issues.extend(cross_field_issues(profile, ctx))
    return issues
