"""
Bacs18PaymentLines adapter — fixed-width transfer lines.

    narrow: 11 columns, 100 characters
    wide:   12 columns, 106 characters (trailing Julian processing date)

No header, ever. Invalid values are chosen so that they survive column
rendering: an alphabetic sort code would be stripped to zeros by the
numeric column anyway, so the corrupt values here are already in the
shape the column will emit.
"""

from __future__ import annotations

from paygen.adapters.base import FormatAdapter
from paygen.core.engine import fields as f
from paygen.core.engine.codec import ColumnSpec, numeric_column, text_column, to_fixed_width_line
from paygen.core.engine.fields import FieldContext, FieldRule, LogicalRecord
from paygen.core.engine.rules import CrossFieldProfile, DateRule
from paygen.core.models.request import FileFormat, GenerationRequest, WidthVariant

PROCESSING_DATE_LEAD_DAYS = 2
PROCESSING_DATE_MIN_DAYS = 2

NARROW_FIELDS = [
    "destination_sort_code",
    "destination_account_number",
    "fixed_zero",
    "transaction_code",
    "originating_sort_code",
    "originating_account_number",
    "realtime_information_checksum",
    "amount",
    "originating_account_name",
    "payment_reference",
    "destination_account_name",
]
WIDE_FIELDS = NARROW_FIELDS + ["processing_date"]

COLUMN_SPECS: dict[str, ColumnSpec] = {
    "destination_sort_code": numeric_column("Destination Sort Code", 6),
    "destination_account_number": numeric_column("Destination Account Number", 8),
    "fixed_zero": numeric_column("Fixed Zero", 1),
    "transaction_code": text_column("Transaction Code", 2),
    "originating_sort_code": numeric_column("Originating Sort Code", 6),
    "originating_account_number": numeric_column("Originating Account Number", 8),
    "realtime_information_checksum": numeric_column("Realtime Information Checksum", 4),
    "amount": numeric_column("Amount", 11),
    "originating_account_name": text_column("Originating Account Name", 18),
    "payment_reference": text_column("Payment Reference", 18),
    "destination_account_name": text_column("Destination Account Name", 18),
    "processing_date": text_column("Processing Date", 6),
}

PROCESSING_DATE = DateRule(
    field="processing_date",
    lead_days=PROCESSING_DATE_LEAD_DAYS,
    min_days=PROCESSING_DATE_MIN_DAYS,
    render=f.to_bacs_julian,
    parse=f.from_bacs_julian,
)


def _valid_ric(ctx: FieldContext) -> str:
    return ctx.rng.digits(4)


def _short_ric(ctx: FieldContext) -> str:
    return ctx.rng.digits(3)


def _check_ric(value, ctx: FieldContext) -> list[str]:
    text = "" if value is None else str(value)
    if len(text) != 4 or not text.isdigit():
        return ["must be 4 digits"]
    return []


def _valid_processing_date(ctx: FieldContext) -> str:
    return f.to_bacs_julian(
        f.random_working_day(ctx, PROCESSING_DATE.min_days, PROCESSING_DATE.max_days)
    )


def _invalid_processing_date(ctx: FieldContext) -> str:
    return "ABCDEF"


def _invalid_transaction_code(ctx: FieldContext) -> str:
    return "XX"


def _header(name: str) -> str:
    return COLUMN_SPECS[name].name


RULES: list[FieldRule] = [
    FieldRule("transaction_code", _header("transaction_code"),
              f.generate_transaction_code, _invalid_transaction_code, f.check_transaction_code),
    FieldRule("destination_sort_code", _header("destination_sort_code"),
              f.generate_sort_code, f.zero_sort_code, f.check_sort_code),
    FieldRule("destination_account_number", _header("destination_account_number"),
              f.generate_account_number, f.zero_account_number, f.check_account_number),
    FieldRule("fixed_zero", _header("fixed_zero"),
              f.fixed_zero, f.non_zero_digit, f.check_fixed_zero),
    FieldRule("originating_sort_code", _header("originating_sort_code"),
              f.originating_sort_code, f.zero_sort_code, f.check_sort_code),
    FieldRule("originating_account_number", _header("originating_account_number"),
              f.originating_account_number, f.zero_account_number, f.check_account_number),
    FieldRule("realtime_information_checksum", _header("realtime_information_checksum"),
              _valid_ric, _short_ric, _check_ric, invalidatable=False),  # the column zero-pads it back
    FieldRule("amount", _header("amount"),
              f.generate_pence_amount, f.mismatched_zero_amount, f.check_pence_amount),
    FieldRule("originating_account_name", _header("originating_account_name"),
              f.originating_account_name, f.blank_account_name, f.check_account_name),
    FieldRule("payment_reference", _header("payment_reference"),
              f.generate_payment_reference, f.reserved_prefix_reference, f.check_payment_reference),
    FieldRule("destination_account_name", _header("destination_account_name"),
              f.generate_account_name, f.blank_account_name, f.check_account_name),
    FieldRule("processing_date", _header("processing_date"),
              _valid_processing_date, _invalid_processing_date, PROCESSING_DATE.check),
]

PROFILE = CrossFieldProfile(amount_field="amount", zero_amount=0, date=PROCESSING_DATE)


class Bacs18PaymentLinesAdapter(FormatAdapter):
    """Fixed-width payment lines in narrow or wide layout."""

    @property
    def file_format(self) -> FileFormat:
        return FileFormat.BACS18_PAYMENT_LINES

    @property
    def extension(self) -> str:
        return "txt"

    def field_rules(self, request: GenerationRequest) -> list[FieldRule]:
        return RULES

    def profile(self, request: GenerationRequest) -> CrossFieldProfile:
        return PROFILE

    def selected_fields(self, request: GenerationRequest) -> list[str]:
        if request.width_variant == WidthVariant.NARROW:
            return list(NARROW_FIELDS)
        return list(WIDE_FIELDS)

    def column_specs(self, request: GenerationRequest) -> list[ColumnSpec]:
        return [COLUMN_SPECS[name] for name in self.selected_fields(request)]

    def line_width(self, request: GenerationRequest) -> int:
        return sum(c.width for c in self.column_specs(request))

    def project(self, record: LogicalRecord, request: GenerationRequest) -> list[str]:
        return [
            "" if record.get(name) is None else str(record[name])
            for name in self.selected_fields(request)
        ]

    def render_line(self, fields: list[str], request: GenerationRequest) -> str:
        return to_fixed_width_line(fields, self.column_specs(request))

    def describe(self) -> dict:
        info = super().describe()
        info["variants"] = {
            str(v): {
                "columns": len(NARROW_FIELDS if v == WidthVariant.NARROW else WIDE_FIELDS),
                "lineWidth": sum(
                    COLUMN_SPECS[n].width
                    for n in (NARROW_FIELDS if v == WidthVariant.NARROW else WIDE_FIELDS)
                ),
            }
            for v in WidthVariant
        }
        return info
