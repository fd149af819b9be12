"""
EaziPay adapter — fixed 14-column CSV with an empty trailer column.

Never a header. Column 10 and column 14 are always empty. The SUN
number may only be populated on zero-amount rows, and the processing
date is rendered in one of three textual formats, picked at random once
per file when the request leaves it open.
"""

from __future__ import annotations

import re
from datetime import date

from paygen.adapters.base import FormatAdapter
from paygen.core.engine import fields as f
from paygen.core.engine.codec import to_csv_line
from paygen.core.engine.fields import FieldContext, FieldRule, LogicalRecord
from paygen.core.engine.random_source import RandomSource
from paygen.core.engine.rules import CrossFieldProfile, DateRule, generate_secondary_id
from paygen.core.models.request import DateFormat, FileFormat, GenerationRequest

PROCESSING_DATE_LEAD_DAYS = 2
PROCESSING_DATE_MIN_DAYS = 2
SUN_NUMBER_MIN = 5
SUN_NUMBER_MAX = 10

MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

FIELDS = [
    "transaction_code",
    "originating_sort_code",
    "originating_account_number",
    "destination_sort_code",
    "destination_account_number",
    "destination_account_name",
    "fixed_zero",
    "amount",
    "processing_date",
    "empty",
    "sun_name",
    "payment_reference",
    "sun_number",
    "trailer",
]


# ── Dates ───────────────────────────────────────────────────────


def format_date(day: date, fmt: DateFormat) -> str:
    if fmt == DateFormat.DAY_MONTH_NAME:
        return f"{day.day:02d}-{MONTHS[day.month - 1]}-{day.year:04d}"
    if fmt == DateFormat.DAY_SLASH:
        return f"{day.day:02d}/{day.month:02d}/{day.year:04d}"
    return day.isoformat()


_DATE_PATTERNS = {
    DateFormat.ISO: re.compile(r"^(?P<y>\d{4})-(?P<m>\d{2})-(?P<d>\d{2})$"),
    DateFormat.DAY_MONTH_NAME: re.compile(r"^(?P<d>\d{2})-(?P<m>[A-Z]{3})-(?P<y>\d{4})$"),
    DateFormat.DAY_SLASH: re.compile(r"^(?P<d>\d{2})/(?P<m>\d{2})/(?P<y>\d{4})$"),
}


def parse_date(text: str, fmt: DateFormat) -> date | None:
    match = _DATE_PATTERNS[fmt].match(text)
    if not match:
        return None
    month = match["m"]
    if fmt == DateFormat.DAY_MONTH_NAME:
        if month not in MONTHS:
            return None
        month_number = MONTHS.index(month) + 1
    else:
        month_number = int(month)
    try:
        return date(int(match["y"]), month_number, int(match["d"]))
    except ValueError:
        return None


def date_rule(fmt: DateFormat) -> DateRule:
    return DateRule(
        field="processing_date",
        lead_days=PROCESSING_DATE_LEAD_DAYS,
        min_days=PROCESSING_DATE_MIN_DAYS,
        render=lambda day: format_date(day, fmt),
        parse=lambda text: parse_date(text, fmt),
    )


# ── SUN number ──────────────────────────────────────────────────


def _invalid_sun_number(ctx: FieldContext) -> str:
    # Any value breaks a rule on a paying row; zero-amount rows need a bad length.
    if not ctx.is_zero_amount:
        return ctx.rng.alphanumeric(SUN_NUMBER_MIN)
    return ctx.rng.alpha(50)


def _check_sun_number(value, ctx: FieldContext) -> list[str]:
    if value in (None, ""):
        return []
    text = str(value)
    if not SUN_NUMBER_MIN <= len(text) <= SUN_NUMBER_MAX or not text.isalnum():
        return [f"must be {SUN_NUMBER_MIN}-{SUN_NUMBER_MAX} letters or digits"]
    return []


def build_rules(fmt: DateFormat) -> list[FieldRule]:
    rule = date_rule(fmt)

    def valid_date(ctx: FieldContext) -> str:
        return rule.render(f.random_working_day(ctx, rule.min_days, rule.max_days))

    return [
        FieldRule("transaction_code", "Transaction Code",
                  f.generate_transaction_code, f.invalid_transaction_code, f.check_transaction_code),
        FieldRule("originating_sort_code", "Originating Sort Code",
                  f.originating_sort_code, f.alpha_sort_code, f.check_sort_code),
        FieldRule("originating_account_number", "Originating Account Number",
                  f.originating_account_number, f.alpha_account_number, f.check_account_number),
        FieldRule("destination_sort_code", "Destination Sort Code",
                  f.generate_sort_code, f.alpha_sort_code, f.check_sort_code),
        FieldRule("destination_account_number", "Destination Account Number",
                  f.generate_account_number, f.alpha_account_number, f.check_account_number),
        FieldRule("destination_account_name", "Destination Account Name",
                  f.generate_account_name, f.invalid_account_name, f.check_account_name),
        FieldRule("fixed_zero", "Fixed Zero", f.fixed_zero, f.non_zero_digit, f.check_fixed_zero),
        FieldRule("amount", "Amount",
                  f.generate_pence_amount, f.invalid_pence_amount, f.check_pence_amount),
        FieldRule("processing_date", "Processing Date", valid_date, rule.invalid, rule.check,
                  invalidatable=False),
        FieldRule("empty", "Empty", f.always_empty, f.filled_empty, f.check_empty,
                  invalidatable=False),
        FieldRule("sun_name", "SUN Name",
                  f.generate_account_name, f.invalid_account_name, f.check_account_name,
                  invalidatable=False),
        FieldRule("payment_reference", "Payment Reference",
                  f.generate_payment_reference, f.reserved_prefix_reference, f.check_payment_reference),
        FieldRule("sun_number", "SUN Number",
                  generate_secondary_id, _invalid_sun_number, _check_sun_number),
        FieldRule("trailer", "Empty Trailer 1", f.always_empty, f.filled_empty, f.check_empty,
                  invalidatable=False),
    ]


class EaziPayAdapter(FormatAdapter):
    """Fourteen-column CSV with a trailing empty column."""

    @property
    def file_format(self) -> FileFormat:
        return FileFormat.EAZIPAY

    @property
    def extension(self) -> str:
        return "csv"

    def prepare(self, request: GenerationRequest, rng: RandomSource) -> GenerationRequest:
        if request.date_format is None:
            return request.model_copy(update={"date_format": rng.choice(list(DateFormat))})
        return request

    def _date_format(self, request: GenerationRequest) -> DateFormat:
        return request.date_format or DateFormat.ISO

    def field_rules(self, request: GenerationRequest) -> list[FieldRule]:
        return build_rules(self._date_format(request))

    def profile(self, request: GenerationRequest) -> CrossFieldProfile:
        return CrossFieldProfile(
            amount_field="amount",
            zero_amount=0,
            date=date_rule(self._date_format(request)),
            secondary_id_field="sun_number",
        )

    def selected_fields(self, request: GenerationRequest) -> list[str]:
        return list(FIELDS)

    def project(self, record: LogicalRecord, request: GenerationRequest) -> list[str]:
        return ["" if record.get(name) is None else str(record[name]) for name in FIELDS]

    def render_line(self, fields: list[str], request: GenerationRequest) -> str:
        return to_csv_line(fields)

    def describe(self) -> dict:
        info = super().describe()
        info["columns"] = len(FIELDS)
        info["dateFormats"] = [str(d) for d in DateFormat]
        return info
