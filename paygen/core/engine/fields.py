"""
Field value generators and standalone field checks.

Every logical field is described by a ``FieldRule``: a generator for a
valid value, a generator for an invalid value, and a check that lists
the rules a value breaks. Valid generators always pass their check.
Invalid generators break exactly one identifiable rule; they never
produce a value that happens to pass.

The generators here are the shared building blocks. Each format
adapter assembles its own ordered rule table from them.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from paygen.core.engine.calendar import DEFAULT_CALENDAR, WorkingDayCalendar
from paygen.core.engine.codec import ALLOWED_TEXT_CHARS
from paygen.core.engine.random_source import ALPHANUMERIC, RandomSource
from paygen.core.models.request import OriginatingAccount

FieldValue = str | int | None
LogicalRecord = dict[str, FieldValue]

# ── Business constants ──────────────────────────────────────────

TRANSACTION_CODES: tuple[str, ...] = ("01", "17", "18", "99", "0C", "0N", "0S")
ZERO_AMOUNT_CODES: frozenset[str] = frozenset({"0C", "0N", "0S"})
INVALID_TRANSACTION_CODES: tuple[str, ...] = ("XX", "0X", "00")

RESERVED_REFERENCE_PREFIX = "DDIC"
ACCOUNT_NAME_MAX = 18
REFERENCE_MIN = 7
REFERENCE_MAX = 17

# Leading two digits of real UK clearing banks.
UK_SORT_CODE_PREFIXES: tuple[str, ...] = ("12", "20", "30", "40", "50", "60", "77", "82", "83")

_DIGITS_RE = re.compile(r"^\d+$")
_DECIMAL_AMOUNT_RE = re.compile(r"^\d+(\.\d{1,2})?$")
_TEXT_RE = re.compile(r"^[A-Za-z0-9.&/\- ]*$")


@dataclass
class FieldContext:
    """What a generator or check may look at while building one record."""

    rng: RandomSource
    today: date
    record: LogicalRecord = field(default_factory=dict)
    calendar: WorkingDayCalendar = DEFAULT_CALENDAR
    originating: OriginatingAccount | None = None

    @property
    def transaction_code(self) -> str:
        return str(self.record.get("transaction_code") or "")

    @property
    def is_zero_amount(self) -> bool:
        return self.transaction_code in ZERO_AMOUNT_CODES


Generator = Callable[[FieldContext], FieldValue]
Check = Callable[[FieldValue, FieldContext], list[str]]


@dataclass(frozen=True)
class FieldRule:
    """How to produce and check one logical field."""

    name: str
    header: str
    valid: Generator
    invalid: Generator
    check: Check
    invalidatable: bool = True

    def violations(self, value: FieldValue, ctx: FieldContext) -> list[str]:
        return [f"{self.header}: {msg}" for msg in self.check(value, ctx)]


# ── Text ────────────────────────────────────────────────────────


def clean_text(text: str) -> str:
    """Drop every character outside the free-text charset."""
    return "".join(ch for ch in text if ch in ALLOWED_TEXT_CHARS)


def generate_account_name(ctx: FieldContext) -> str:
    raw = ctx.rng.company_name() if ctx.rng.boolean() else ctx.rng.person_name()
    name = " ".join(clean_text(raw).split())
    while len(name) < 3:
        name += ctx.rng.alpha(3 - len(name))
    return name[:ACCOUNT_NAME_MAX].rstrip()


def invalid_account_name(ctx: FieldContext) -> str:
    return ctx.rng.alpha(ACCOUNT_NAME_MAX + 7)


def blank_account_name(ctx: FieldContext) -> str:
    # Every character falls outside the charset; fixed-width rendering blanks it.
    return "@" * ACCOUNT_NAME_MAX


def check_account_name(value: FieldValue, ctx: FieldContext) -> list[str]:
    text = "" if value is None else str(value)
    problems = []
    if not text.strip():
        problems.append("must not be blank")
    if len(text) > ACCOUNT_NAME_MAX:
        problems.append(f"must be at most {ACCOUNT_NAME_MAX} characters")
    if not _TEXT_RE.match(text):
        problems.append("contains characters outside A-Z a-z 0-9 . & / - space")
    return problems


# ── Sort codes and account numbers ──────────────────────────────


def generate_sort_code(ctx: FieldContext) -> str:
    return ctx.rng.choice(UK_SORT_CODE_PREFIXES) + ctx.rng.digits(4)


def generate_account_number(ctx: FieldContext) -> str:
    number = ctx.rng.digits(8)
    while set(number) == {"0"}:
        number = ctx.rng.digits(8)
    return number


def alpha_sort_code(ctx: FieldContext) -> str:
    return ctx.rng.alpha(6)


def alpha_account_number(ctx: FieldContext) -> str:
    return ctx.rng.alpha(8)


def zero_sort_code(ctx: FieldContext) -> str:
    return "000000"


def zero_account_number(ctx: FieldContext) -> str:
    return "00000000"


def _check_digits(value: FieldValue, length: int) -> list[str]:
    text = "" if value is None else str(value)
    problems = []
    if len(text) != length:
        problems.append(f"must be exactly {length} characters")
    if not _DIGITS_RE.match(text):
        problems.append("must be numeric")
    elif set(text) == {"0"}:
        problems.append("must not be all zeros")
    return problems


def check_sort_code(value: FieldValue, ctx: FieldContext) -> list[str]:
    return _check_digits(value, 6)


def check_account_number(value: FieldValue, ctx: FieldContext) -> list[str]:
    return _check_digits(value, 8)


def originating_sort_code(ctx: FieldContext) -> str:
    if ctx.originating:
        return ctx.originating.sort_code
    return generate_sort_code(ctx)


def originating_account_number(ctx: FieldContext) -> str:
    if ctx.originating:
        return ctx.originating.account_number
    return generate_account_number(ctx)


def originating_account_name(ctx: FieldContext) -> str:
    if ctx.originating:
        return ctx.originating.account_name
    return generate_account_name(ctx)


# ── Payment reference ───────────────────────────────────────────


def check_payment_reference(value: FieldValue, ctx: FieldContext) -> list[str]:
    text = "" if value is None else str(value)
    problems = []
    if not REFERENCE_MIN <= len(text) <= REFERENCE_MAX:
        problems.append(f"must be {REFERENCE_MIN}-{REFERENCE_MAX} characters")
    if not _TEXT_RE.match(text):
        problems.append("contains characters outside A-Z a-z 0-9 . & / - space")
    if text.startswith(RESERVED_REFERENCE_PREFIX):
        problems.append(f"must not start with {RESERVED_REFERENCE_PREFIX!r}")
    if text[:1].isspace() or (text[:1] and not (text[0].isalnum() or text[0] == "_")):
        problems.append("must start with a letter or digit")
    if len(text) > 1 and len(set(text)) == 1:
        problems.append("must not repeat a single character")
    return problems


def generate_payment_reference(ctx: FieldContext) -> str:
    while True:
        ref = ctx.rng.alphanumeric(ctx.rng.randint(REFERENCE_MIN, REFERENCE_MAX))
        if not check_payment_reference(ref, ctx):
            return ref


def _varied(ctx: FieldContext, length: int) -> str:
    """Alphanumeric text that neither repeats one character nor uses the reserved prefix."""
    while True:
        text = ctx.rng.alphanumeric(length)
        if len(set(text)) > 1 and not text.startswith(RESERVED_REFERENCE_PREFIX):
            return text


def invalid_payment_reference(ctx: FieldContext) -> str:
    kind = ctx.rng.choice(("reserved_prefix", "leading_space", "repeated", "too_long"))
    if kind == "reserved_prefix":
        return RESERVED_REFERENCE_PREFIX + _varied(ctx, 5)
    if kind == "leading_space":
        return " " + _varied(ctx, 7)
    if kind == "repeated":
        return ctx.rng.choice(ALPHANUMERIC) * 9
    return _varied(ctx, REFERENCE_MAX + 3)


def reserved_prefix_reference(ctx: FieldContext) -> str:
    return RESERVED_REFERENCE_PREFIX + _varied(ctx, 5)


# ── Transaction code ────────────────────────────────────────────


def generate_transaction_code(ctx: FieldContext) -> str:
    return ctx.rng.choice(TRANSACTION_CODES)


def invalid_transaction_code(ctx: FieldContext) -> str:
    return ctx.rng.choice(INVALID_TRANSACTION_CODES)


def check_transaction_code(value: FieldValue, ctx: FieldContext) -> list[str]:
    if value not in TRANSACTION_CODES:
        return [f"must be one of {', '.join(TRANSACTION_CODES)}"]
    return []


# ── Amounts ─────────────────────────────────────────────────────


def generate_decimal_amount(ctx: FieldContext) -> str:
    """Pounds with two decimals between 0.01 and 10000.00."""
    pence = ctx.rng.randint(1, 1_000_000)
    return f"{pence // 100}.{pence % 100:02d}"


def negative_decimal_amount(ctx: FieldContext) -> str:
    return "-9999.99"


def check_decimal_amount(value: FieldValue, ctx: FieldContext) -> list[str]:
    if not _DECIMAL_AMOUNT_RE.match("" if value is None else str(value)):
        return ["must be a non-negative amount with at most two decimals"]
    return []


def generate_pence_amount(ctx: FieldContext) -> int:
    return ctx.rng.randint(1, 999_999)


def negative_pence_amount(ctx: FieldContext) -> int:
    return -999


def invalid_decimal_amount(ctx: FieldContext) -> str:
    # Zero-amount codes already reject any non-zero amount.
    return "1.00" if ctx.is_zero_amount else negative_decimal_amount(ctx)


def invalid_pence_amount(ctx: FieldContext) -> int:
    return 1 if ctx.is_zero_amount else negative_pence_amount(ctx)


def check_pence_amount(value: FieldValue, ctx: FieldContext) -> list[str]:
    try:
        pence = int(str(value))
    except (TypeError, ValueError):
        return ["must be a whole number of pence"]
    if pence < 0:
        return ["must not be negative"]
    return []


def mismatched_zero_amount(ctx: FieldContext) -> str:
    """An amount that contradicts the transaction code, still numeric."""
    return "1" if ctx.is_zero_amount else "0"


# ── Fixed zero / empty ──────────────────────────────────────────


def fixed_zero(ctx: FieldContext) -> int:
    return 0


def non_zero_digit(ctx: FieldContext) -> int:
    return ctx.rng.randint(1, 9)


def check_fixed_zero(value: FieldValue, ctx: FieldContext) -> list[str]:
    if str(value) != "0":
        return ["must be exactly 0"]
    return []


def always_empty(ctx: FieldContext) -> None:
    return None


def filled_empty(ctx: FieldContext) -> str:
    return "X"


def check_empty(value: FieldValue, ctx: FieldContext) -> list[str]:
    if value not in (None, ""):
        return ["must be empty"]
    return []


# ── Date helpers ────────────────────────────────────────────────


def random_working_day(ctx: FieldContext, min_days: int, max_days: int) -> date:
    """A working day between ``min_days`` and ``max_days`` working days out."""
    return ctx.calendar.add_working_days(ctx.today, ctx.rng.randint(min_days, max_days))


def check_lead_time(day: date, ctx: FieldContext, min_days: int, max_days: int) -> list[str]:
    problems = []
    if not ctx.calendar.is_working_day(day):
        problems.append("must be a working day")
    offset = ctx.calendar.working_days_between(ctx.today, day)
    if day <= ctx.today or not min_days <= offset <= max_days:
        problems.append(f"must be {min_days}-{max_days} working days after today")
    return problems


def to_bacs_julian(day: date) -> str:
    """Bacs processing date: a space, two-digit year, three-digit day of year."""
    return f" {day:%y}{day.timetuple().tm_yday:03d}"


def from_bacs_julian(text: str) -> date | None:
    raw = text.strip()
    if len(raw) != 5 or not raw.isdigit():
        return None
    year, day_of_year = 2000 + int(raw[:2]), int(raw[2:])
    first = date(year, 1, 1)
    if not 1 <= day_of_year <= (date(year + 1, 1, 1) - first).days:
        return None
    return date.fromordinal(first.toordinal() + day_of_year - 1)
