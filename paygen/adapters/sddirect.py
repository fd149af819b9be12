"""
SDDirect adapter — variable-column CSV.

Six required columns, then whichever optional columns the request
selects. ``include_optional_columns`` may be a boolean or an allow-list
of field keys (``payDate``), display names (``Pay Date``), snake-case
names (``pay_date``) or the ``originatingAccountDetails`` group.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime

from paygen.adapters.base import FormatAdapter
from paygen.core.engine import fields as f
from paygen.core.engine.codec import to_csv_line
from paygen.core.engine.fields import FieldContext, FieldRule, LogicalRecord
from paygen.core.engine.rules import (
    CHECKSUM_CODE,
    CrossFieldProfile,
    DateRule,
    check_checksum,
    generate_checksum,
)
from paygen.core.models.request import FileFormat, GenerationRequest

logger = logging.getLogger(__name__)

PAY_DATE_LEAD_DAYS = 3
PAY_DATE_MIN_DAYS = 3

REQUIRED_FIELDS = [
    "destination_account_name",
    "destination_sort_code",
    "destination_account_number",
    "payment_reference",
    "amount",
    "transaction_code",
]
OPTIONAL_FIELDS = [
    "realtime_information_checksum",
    "pay_date",
    "originating_sort_code",
    "originating_account_number",
    "originating_account_name",
]
ORIGINATING_GROUP = "originatingaccountdetails"

INVALID_CHECKSUMS = ("123", "/1234", "/12", "ABCD", "0000X", "00000")


def format_pay_date(day: date) -> str:
    return day.strftime("%Y%m%d")


def parse_pay_date(text: str) -> date | None:
    if not re.fullmatch(r"\d{8}", text):
        return None
    try:
        return datetime.strptime(text, "%Y%m%d").date()
    except ValueError:
        return None


PAY_DATE = DateRule(
    field="pay_date",
    lead_days=PAY_DATE_LEAD_DAYS,
    min_days=PAY_DATE_MIN_DAYS,
    render=format_pay_date,
    parse=parse_pay_date,
)


def _valid_pay_date(ctx: FieldContext) -> str:
    return format_pay_date(f.random_working_day(ctx, PAY_DATE.min_days, PAY_DATE.max_days))


def _invalid_pay_date(ctx: FieldContext) -> str:
    return ctx.rng.choice(("2025013A", "202501", PAY_DATE.invalid(ctx)))


def _invalid_checksum(ctx: FieldContext) -> str:
    # Off code 99 any populated value is wrong, so stay well-formed there.
    if ctx.transaction_code != CHECKSUM_CODE:
        return "0000"
    return ctx.rng.choice(INVALID_CHECKSUMS)


# Generation order: the transaction code comes first so later fields can read it.
RULES: list[FieldRule] = [
    FieldRule("transaction_code", "Transaction code",
              f.generate_transaction_code, f.invalid_transaction_code, f.check_transaction_code),
    FieldRule("destination_account_name", "Destination Account Name",
              f.generate_account_name, f.invalid_account_name, f.check_account_name),
    FieldRule("destination_sort_code", "Destination Sort Code",
              f.generate_sort_code, f.alpha_sort_code, f.check_sort_code),
    FieldRule("destination_account_number", "Destination Account Number",
              f.generate_account_number, f.alpha_account_number, f.check_account_number),
    FieldRule("payment_reference", "Payment Reference",
              f.generate_payment_reference, f.invalid_payment_reference, f.check_payment_reference),
    FieldRule("amount", "Amount",
              f.generate_decimal_amount, f.invalid_decimal_amount, f.check_decimal_amount),
    FieldRule("realtime_information_checksum", "Realtime Information Checksum",
              generate_checksum, _invalid_checksum, check_checksum),
    FieldRule("pay_date", "Pay Date", _valid_pay_date, _invalid_pay_date, PAY_DATE.check),
    FieldRule("originating_sort_code", "Originating Sort Code",
              f.originating_sort_code, f.alpha_sort_code, f.check_sort_code),
    FieldRule("originating_account_number", "Originating Account Number",
              f.originating_account_number, f.alpha_account_number, f.check_account_number),
    FieldRule("originating_account_name", "Originating Account Name",
              f.originating_account_name, f.invalid_account_name, f.check_account_name),
]

PROFILE = CrossFieldProfile(
    amount_field="amount",
    zero_amount="0",
    date=PAY_DATE,
    checksum_field="realtime_information_checksum",
)


def _normalize(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())


# Every spelling of an optional field maps to its snake-case name.
_OPTIONAL_ALIASES: dict[str, str] = {}
for _rule in RULES:
    if _rule.name in OPTIONAL_FIELDS:
        _OPTIONAL_ALIASES[_normalize(_rule.name)] = _rule.name
        _OPTIONAL_ALIASES[_normalize(_rule.header)] = _rule.name


def resolve_optional_fields(selection: bool | list[str]) -> list[str]:
    """Optional field names selected by a request, in column order."""
    if selection is True:
        return list(OPTIONAL_FIELDS)
    if not selection:
        return []

    chosen: set[str] = set()
    for item in selection:
        key = _normalize(item)
        if key == ORIGINATING_GROUP:
            chosen.update(OPTIONAL_FIELDS[2:])
        elif key in _OPTIONAL_ALIASES:
            chosen.add(_OPTIONAL_ALIASES[key])
        else:
            logger.warning("Ignoring unknown SDDirect optional column: %s", item)
    return [name for name in OPTIONAL_FIELDS if name in chosen]


class SDDirectAdapter(FormatAdapter):
    """Variable-column CSV with an optional header row."""

    supports_headers = True

    @property
    def file_format(self) -> FileFormat:
        return FileFormat.SDDIRECT

    @property
    def extension(self) -> str:
        return "csv"

    def field_rules(self, request: GenerationRequest) -> list[FieldRule]:
        return RULES

    def profile(self, request: GenerationRequest) -> CrossFieldProfile:
        return PROFILE

    def selected_fields(self, request: GenerationRequest) -> list[str]:
        return REQUIRED_FIELDS + resolve_optional_fields(request.include_optional_columns)

    def project(self, record: LogicalRecord, request: GenerationRequest) -> list[str]:
        return [
            "" if record.get(name) is None else str(record[name])
            for name in self.selected_fields(request)
        ]

    def render_line(self, fields: list[str], request: GenerationRequest) -> str:
        return to_csv_line(fields)

    def describe(self) -> dict:
        info = super().describe()
        info["requiredColumns"] = [r.header for r in RULES if r.name in REQUIRED_FIELDS]
        info["optionalColumns"] = [r.header for r in RULES if r.name in OPTIONAL_FIELDS]
        return info
