"""
Working-day calendar — weekends and England & Wales bank holidays.

A working day is any day that is neither a Saturday/Sunday nor a listed
bank holiday. The holiday table is keyed by calendar year; asking about
a year that is not in the table is a configuration error, not a guess.

    add_working_days(date(2025, 2, 20), 3)  → date(2025, 2, 25)
    add_working_days(saturday, 0)           → saturday (pass-through)
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from paygen.core.errors import HolidayTableError

# ── England & Wales bank holidays ───────────────────────────────

UK_BANK_HOLIDAYS: dict[int, tuple[date, ...]] = {
    2024: (
        date(2024, 1, 1),    # New Year's Day
        date(2024, 3, 29),   # Good Friday
        date(2024, 4, 1),    # Easter Monday
        date(2024, 5, 6),    # Early May bank holiday
        date(2024, 5, 27),   # Spring bank holiday
        date(2024, 8, 26),   # Summer bank holiday
        date(2024, 12, 25),  # Christmas Day
        date(2024, 12, 26),  # Boxing Day
    ),
    2025: (
        date(2025, 1, 1),
        date(2025, 4, 18),
        date(2025, 4, 21),
        date(2025, 5, 5),
        date(2025, 5, 26),
        date(2025, 8, 25),
        date(2025, 12, 25),
        date(2025, 12, 26),
    ),
    2026: (
        date(2026, 1, 1),
        date(2026, 4, 3),
        date(2026, 4, 6),
        date(2026, 5, 4),
        date(2026, 5, 25),
        date(2026, 8, 31),
        date(2026, 12, 25),
        date(2026, 12, 28),  # Boxing Day (substitute)
    ),
    2027: (
        date(2027, 1, 1),
        date(2027, 3, 26),
        date(2027, 3, 29),
        date(2027, 5, 3),
        date(2027, 5, 31),
        date(2027, 8, 30),
        date(2027, 12, 27),  # Christmas Day (substitute)
        date(2027, 12, 28),  # Boxing Day (substitute)
    ),
    2028: (
        date(2028, 1, 3),    # New Year's Day (substitute)
        date(2028, 4, 14),
        date(2028, 4, 17),
        date(2028, 5, 1),
        date(2028, 5, 29),
        date(2028, 8, 28),
        date(2028, 12, 25),
        date(2028, 12, 26),
    ),
}


class WorkingDayCalendar:
    """Weekend + bank-holiday calendar over a per-year holiday table."""

    def __init__(self, holidays: dict[int, Iterable[date]] | None = None):
        source = UK_BANK_HOLIDAYS if holidays is None else holidays
        self._holidays: dict[int, frozenset[date]] = {
            year: frozenset(days) for year, days in source.items()
        }

    @property
    def years(self) -> list[int]:
        """Calendar years covered by the holiday table."""
        return sorted(self._holidays)

    def with_extra_holidays(self, extra: Iterable[date]) -> WorkingDayCalendar:
        """Return a new calendar with additional holidays merged in.

        Adding a holiday in a year the table does not cover makes that
        year known, with only the added dates as holidays.
        """
        merged: dict[int, set[date]] = {
            year: set(days) for year, days in self._holidays.items()
        }
        for day in extra:
            merged.setdefault(day.year, set()).add(day)
        return WorkingDayCalendar(merged)

    @staticmethod
    def is_weekend(day: date) -> bool:
        return day.weekday() >= 5

    def is_bank_holiday(self, day: date) -> bool:
        """Whether ``day`` is a listed bank holiday.

        Raises:
            HolidayTableError: If the table has no entry for ``day.year``.
        """
        table = self._holidays.get(day.year)
        if table is None:
            raise HolidayTableError(day.year)
        return day in table

    def is_working_day(self, day: date) -> bool:
        if self.is_weekend(day):
            return False
        return not self.is_bank_holiday(day)

    def add_working_days(self, start: date, days: int) -> date:
        """Advance ``start`` by exactly ``days`` working days.

        Steps one calendar day at a time and counts only working days.
        ``days == 0`` returns ``start`` unchanged, even when ``start`` is
        itself a weekend or holiday.
        """
        if days < 0:
            raise ValueError(f"days must be >= 0, got {days}")
        current = start
        remaining = days
        while remaining > 0:
            current += timedelta(days=1)
            if self.is_working_day(current):
                remaining -= 1
        return current

    def next_working_day(self, start: date) -> date:
        """The first working day on or after ``start``."""
        current = start
        while not self.is_working_day(current):
            current += timedelta(days=1)
        return current

    def working_days_between(self, start: date, end: date) -> int:
        """Number of working days in ``(start, end]``; 0 when end <= start."""
        count = 0
        current = start
        while current < end:
            current += timedelta(days=1)
            if self.is_working_day(current):
                count += 1
        return count


DEFAULT_CALENDAR = WorkingDayCalendar()


def is_weekend(day: date) -> bool:
    return WorkingDayCalendar.is_weekend(day)


def is_bank_holiday(day: date) -> bool:
    return DEFAULT_CALENDAR.is_bank_holiday(day)


def is_working_day(day: date) -> bool:
    return DEFAULT_CALENDAR.is_working_day(day)


def add_working_days(start: date, days: int) -> date:
    return DEFAULT_CALENDAR.add_working_days(start, days)


def next_working_day(start: date) -> date:
    return DEFAULT_CALENDAR.next_working_day(start)
