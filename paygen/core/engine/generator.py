"""
Generation pipeline — request in, ``GeneratedFile`` out.

    request → registry → adapter.prepare → validity plan
            → records (fields, cross-field pass, invalidation)
            → rows → content → meta → filename

The pipeline is synchronous and keeps no state between calls. The
random source, clock and calendar are all injectable so a test can pin
every byte of the output.
"""

from __future__ import annotations

import logging

from paygen.adapters.registry import FormatRegistry, default_registry
from paygen.core.engine.calendar import DEFAULT_CALENDAR, WorkingDayCalendar
from paygen.core.engine.naming import Clock, build_filename, system_clock
from paygen.core.engine.random_source import RandomSource
from paygen.core.errors import ConstraintViolationError
from paygen.core.models.generated import GeneratedFile, GeneratedRow
from paygen.core.models.request import GenerationRequest

logger = logging.getLogger(__name__)

_registry: FormatRegistry | None = None


def get_registry() -> FormatRegistry:
    """Lazily built process-wide registry of the built-in formats."""
    global _registry
    if _registry is None:
        _registry = default_registry()
    return _registry


def check_request(request: GenerationRequest) -> None:
    """Reject requests the pipeline cannot structurally satisfy.

    Raises:
        ConstraintViolationError: If ``row_count`` is below 1.
    """
    if request.row_count < 1:
        raise ConstraintViolationError(f"row_count must be at least 1 (got {request.row_count})")


def generate_file(
    request: GenerationRequest,
    rng: RandomSource | None = None,
    clock: Clock | None = None,
    calendar: WorkingDayCalendar | None = None,
    registry: FormatRegistry | None = None,
) -> GeneratedFile:
    """Build one complete payment file.

    Args:
        request: What to build.
        rng: Random source; a fresh unseeded one when omitted.
        clock: Supplies "now" for the settlement window and the filename.
        calendar: Working-day calendar; the built-in table when omitted.
        registry: Adapter registry; the built-in formats when omitted.

    Raises:
        UnsupportedFormatError: No adapter for ``request.file_format``.
        ConstraintViolationError: The request cannot be satisfied.
    """
    check_request(request)
    rng = rng or RandomSource()
    clock = clock or system_clock
    calendar = calendar or DEFAULT_CALENDAR
    adapter = (registry or get_registry()).get(request.file_format)

    request = adapter.prepare(request, rng)
    now = clock()

    records = adapter.assemble(request, rng, now.date(), calendar)
    rows = [adapter.project(r.record, request) for r in records]
    invalid = sum(1 for r in records if not r.valid)

    content = adapter.serialize(rows, request)
    meta = adapter.compute_meta(rows, request, invalid_rows=invalid)
    filename = build_filename(meta, now)

    logger.info(
        "Generated %s: %d rows (%d valid, %d invalid), %d columns",
        filename, meta.row_count, meta.valid_rows, meta.invalid_rows, meta.column_count,
    )
    return GeneratedFile(content=content, filename=filename, meta=meta)


def generate_row(
    request: GenerationRequest,
    valid: bool = True,
    rng: RandomSource | None = None,
    clock: Clock | None = None,
    calendar: WorkingDayCalendar | None = None,
    registry: FormatRegistry | None = None,
) -> GeneratedRow:
    """Build a single standalone row, valid or deliberately invalid."""
    rng = rng or RandomSource()
    clock = clock or system_clock
    adapter = (registry or get_registry()).get(request.file_format)
    request = adapter.prepare(request, rng)
    row = adapter.build_row(request, rng, clock().date(), valid=valid, calendar=calendar or DEFAULT_CALENDAR)
    logger.debug("Generated %s row (valid=%s): %s", adapter.name, row.valid, row.issues)
    return row
