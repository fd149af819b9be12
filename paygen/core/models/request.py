"""
Generation request — what the caller asks the core to build.

The request is a declaration of intent: "give me N rows of format F
with these options." Bounds checks that belong to the transport (row
ranges, strict booleans) happen before the request reaches the core;
the core itself only rejects what it cannot structurally honour.
"""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from paygen.core.errors import UnsupportedFormatError


class FileFormat(StrEnum):
    """Supported payment file formats."""

    SDDIRECT = "SDDirect"
    BACS18_PAYMENT_LINES = "Bacs18PaymentLines"
    EAZIPAY = "EaziPay"

    @classmethod
    def resolve(cls, value: str | FileFormat) -> FileFormat:
        """Resolve an identifier case-insensitively, accepting aliases.

        Raises:
            UnsupportedFormatError: If nothing matches.
        """
        if isinstance(value, FileFormat):
            return value
        key = str(value).strip().lower().replace("-", "_")
        found = _FORMAT_ALIASES.get(key)
        if found is None:
            raise UnsupportedFormatError(str(value), [f.value for f in cls])
        return found


_FORMAT_ALIASES: dict[str, FileFormat] = {
    "sddirect": FileFormat.SDDIRECT,
    "variable_csv": FileFormat.SDDIRECT,
    "bacs18paymentlines": FileFormat.BACS18_PAYMENT_LINES,
    "bacs18": FileFormat.BACS18_PAYMENT_LINES,
    "fixed_width": FileFormat.BACS18_PAYMENT_LINES,
    "eazipay": FileFormat.EAZIPAY,
    "csv_trailer": FileFormat.EAZIPAY,
}


class WidthVariant(StrEnum):
    """Bacs18 payment-line width variants."""

    NARROW = "narrow"   # 11 columns, no processing date
    WIDE = "wide"       # 12 columns, trailing processing date


class DateFormat(StrEnum):
    """Textual date renderings accepted by EaziPay."""

    ISO = "YYYY-MM-DD"
    DAY_MONTH_NAME = "DD-MMM-YYYY"
    DAY_SLASH = "DD/MM/YYYY"


ORIGINATING_NAME_MAX = 18
_DIGIT_LENGTHS = {"sort_code": 6, "account_number": 8}
_DIGITS_RE = re.compile(r"^[0-9]+\Z")
_NAME_RE = re.compile(r"^[A-Za-z0-9.&/\- ]*\Z")


class OriginatingAccount(BaseModel):
    """Default originating account details applied to every row.

    The values land in valid rows verbatim, so they must already pass the
    field checks. With ``can_be_invalid`` set, every invalid row corrupts
    at least one of the originating fields it carries.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sort_code: str
    account_number: str
    account_name: str
    can_be_invalid: bool = False

    @field_validator("sort_code", "account_number")
    @classmethod
    def _check_digits(cls, value: str, info: ValidationInfo) -> str:
        length = _DIGIT_LENGTHS[info.field_name]
        if len(value) != length or not _DIGITS_RE.match(value):
            raise ValueError(f"must be exactly {length} digits")
        if set(value) == {"0"}:
            raise ValueError("must not be all zeros")
        return value

    @field_validator("account_name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        if len(value) > ORIGINATING_NAME_MAX:
            raise ValueError(f"must be at most {ORIGINATING_NAME_MAX} characters")
        if not _NAME_RE.match(value):
            raise ValueError("may only contain A-Z a-z 0-9 . & / - and spaces")
        return value


class GenerationRequest(BaseModel):
    """Everything the core needs to build one file."""

    file_format: FileFormat
    row_count: int = 15
    include_optional_columns: bool | list[str] = True
    inject_invalid_rows: bool = False
    allow_inline_edit: bool = True
    include_headers: bool = True               # SDDirect only
    date_format: DateFormat | None = None      # EaziPay only; random per file when None
    width_variant: WidthVariant = WidthVariant.WIDE  # Bacs18 only
    sun: str = "DEFAULT"                       # output namespacing only
    originating_account: OriginatingAccount | None = None

    @field_validator("file_format", mode="before")
    @classmethod
    def _resolve_format(cls, value: object) -> FileFormat:
        try:
            return FileFormat.resolve(str(value))
        except UnsupportedFormatError as e:
            raise ValueError(str(e)) from e

    @field_validator("width_variant", mode="before")
    @classmethod
    def _resolve_variant(cls, value: object) -> object:
        # Legacy names for the two variants.
        legacy = {"DAILY": WidthVariant.NARROW, "MULTI": WidthVariant.WIDE}
        if isinstance(value, str) and value.upper() in legacy:
            return legacy[value.upper()]
        return value
