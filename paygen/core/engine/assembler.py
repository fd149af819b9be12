"""
Record assembler — composes one logical record from a format's rules.

Steps, always in this order:
    1. every selected field gets a valid value, in rule order
    2. the cross-field pass fixes up amount, date and identifiers
    3. invalid rows then have 1-3 fields overwritten with invalid values
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from datetime import date

from paygen.core.engine.calendar import DEFAULT_CALENDAR, WorkingDayCalendar
from paygen.core.engine.fields import FieldContext, FieldRule, LogicalRecord
from paygen.core.engine.injection import choose_fields_to_invalidate
from paygen.core.engine.random_source import RandomSource
from paygen.core.engine.rules import CrossFieldProfile, apply_cross_field_rules, validate_record
from paygen.core.models.request import OriginatingAccount

logger = logging.getLogger(__name__)

ORIGINATING_FIELDS = frozenset({
    "originating_sort_code",
    "originating_account_number",
    "originating_account_name",
})


@dataclass
class AssembledRecord:
    """A logical record plus what happened to it."""

    record: LogicalRecord
    valid: bool = True
    invalidated: list[str] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)


class RecordAssembler:
    """Builds records for one format within one request.

    Args:
        rules: The format's field rules, in generation order.
        profile: Cross-field profile for the format.
        selected: Names of the fields the output will carry.
    """

    def __init__(
        self,
        rules: Sequence[FieldRule],
        profile: CrossFieldProfile,
        selected: Collection[str],
        rng: RandomSource,
        today: date,
        calendar: WorkingDayCalendar = DEFAULT_CALENDAR,
        originating: OriginatingAccount | None = None,
    ):
        self.rules = list(rules)
        self.profile = profile
        self.selected = set(selected)
        self.rng = rng
        self.today = today
        self.calendar = calendar
        self.originating = originating

    def _context(self) -> FieldContext:
        return FieldContext(
            rng=self.rng,
            today=self.today,
            calendar=self.calendar,
            originating=self.originating,
        )

    def assemble(self, valid: bool = True) -> AssembledRecord:
        ctx = self._context()
        for rule in self.rules:
            if rule.name in self.selected:
                ctx.record[rule.name] = rule.valid(ctx)

        apply_cross_field_rules(self.profile, ctx)

        invalidated: list[str] = []
        if not valid:
            chosen = choose_fields_to_invalidate(self.rules, list(ctx.record), self.rng)
            if self.originating and self.originating.can_be_invalid:
                chosen = self._force_originating(chosen, ctx.record)
            # Overwrite in rule order so later generators see earlier corruption.
            for rule in sorted(chosen, key=self.rules.index):
                ctx.record[rule.name] = rule.invalid(ctx)
                invalidated.append(rule.name)
            logger.debug("Invalidated fields: %s", ", ".join(invalidated))

        issues = validate_record(self.rules, self.profile, ctx)
        return AssembledRecord(
            record=ctx.record,
            valid=not issues,
            invalidated=invalidated,
            issues=issues,
        )

    def _force_originating(self, chosen: list[FieldRule], present: Collection[str]) -> list[FieldRule]:
        """Swap the last pick for an originating field when none was picked."""
        if any(rule.name in ORIGINATING_FIELDS for rule in chosen):
            return chosen
        candidates = [
            r for r in self.rules
            if r.invalidatable and r.name in ORIGINATING_FIELDS and r.name in present
        ]
        if not candidates:
            return chosen
        return chosen[:-1] + [self.rng.choice(candidates)]

    def validate(self, record: LogicalRecord) -> list[str]:
        """Issues in an already-built record."""
        ctx = self._context()
        ctx.record = dict(record)
        return validate_record(self.rules, self.profile, ctx)
