"""
Invalid-row injection policy.

Decides how many rows of a batch are invalid and where they sit. One
policy applies to every format: mark the first ``valid_count`` slots
valid and the rest invalid, then Fisher–Yates shuffle the whole batch
with the injected random source.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from paygen.core.engine.fields import FieldRule
from paygen.core.engine.random_source import RandomSource

logger = logging.getLogger(__name__)

INVALID_ROW_RATIO = 0.5
# Downstream inline editors review at most this many invalid rows.
INLINE_EDIT_INVALID_CAP = 49
MIN_FIELDS_PER_INVALID_ROW = 1
MAX_FIELDS_PER_INVALID_ROW = 3


def invalid_row_count(row_count: int, inject_invalid_rows: bool, allow_inline_edit: bool) -> int:
    if not inject_invalid_rows:
        return 0
    count = int(row_count * INVALID_ROW_RATIO)
    if allow_inline_edit:
        count = min(count, INLINE_EDIT_INVALID_CAP)
    return count


def plan_row_validity(
    row_count: int,
    inject_invalid_rows: bool,
    allow_inline_edit: bool,
    rng: RandomSource,
) -> list[bool]:
    """One flag per row, ``True`` meaning the row stays valid."""
    invalid = invalid_row_count(row_count, inject_invalid_rows, allow_inline_edit)
    plan = [True] * (row_count - invalid) + [False] * invalid
    if invalid:
        rng.shuffle(plan)
    logger.debug("Validity plan: %d valid, %d invalid", row_count - invalid, invalid)
    return plan


def choose_fields_to_invalidate(
    rules: Sequence[FieldRule],
    present: Sequence[str],
    rng: RandomSource,
) -> list[FieldRule]:
    """Pick 1-3 invalidatable rules among the fields present on a row."""
    candidates = [r for r in rules if r.invalidatable and r.name in present]
    if not candidates:
        return []
    upper = min(MAX_FIELDS_PER_INVALID_ROW, len(candidates))
    count = rng.randint(MIN_FIELDS_PER_INVALID_ROW, upper)
    return rng.sample(candidates, count)
