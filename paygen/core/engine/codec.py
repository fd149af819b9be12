"""
Serialization primitives shared by the format adapters.

CSV: a field is wrapped in double quotes (with inner quotes doubled)
only when it contains a comma, a quote, CR or LF.

Fixed-width: each value passes through its ``ColumnSpec`` so that the
rendered width is exact whatever the input — numeric columns keep
digits only, text columns are upper-cased and restricted to the Bacs
character set, then both are truncated and padded.
"""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from typing import Literal

# Characters allowed in free-text payment fields.
ALLOWED_TEXT_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789.&/- "

_DISALLOWED_UPPER = re.compile(r"[^A-Z0-9.&/\- ]")
_NON_DIGITS = re.compile(r"\D")
_CSV_SPECIALS = (",", '"', "\n", "\r")

LINE_TERMINATOR = "\n"


# ── CSV ─────────────────────────────────────────────────────────


def escape_csv_field(value: str) -> str:
    """Quote ``value`` if it holds a comma, quote or line break."""
    if any(ch in value for ch in _CSV_SPECIALS):
        return '"' + value.replace('"', '""') + '"'
    return value


def unescape_csv_field(value: str) -> str:
    """Inverse of :func:`escape_csv_field` for a single field."""
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1].replace('""', '"')
    return value


def to_csv_line(fields: list[str]) -> str:
    return ",".join(escape_csv_field(f) for f in fields)


def parse_csv_line(line: str) -> list[str]:
    """Split one CSV record into fields, honouring quoted sections."""
    return next(csv.reader([line]), [])


def parse_csv_content(content: str) -> list[list[str]]:
    """Parse a whole CSV document; quoted fields may span lines."""
    reader = csv.reader(io.StringIO(content, newline=""))
    return [row for row in reader if row]


# ── Fixed width ─────────────────────────────────────────────────


@dataclass(frozen=True)
class ColumnSpec:
    """One fixed-width column."""

    name: str
    width: int
    pad_char: str = " "
    justification: Literal["left", "right"] = "left"
    numeric_only: bool = False

    def render(self, value: str) -> str:
        """Render ``value`` to exactly ``width`` characters."""
        if self.numeric_only:
            text = _NON_DIGITS.sub("", value)
        else:
            text = sanitize_fixed_width_text(value)
        text = text[: self.width]
        if self.justification == "right":
            return text.rjust(self.width, self.pad_char)
        return text.ljust(self.width, self.pad_char)


def numeric_column(name: str, width: int) -> ColumnSpec:
    return ColumnSpec(name=name, width=width, pad_char="0", justification="right", numeric_only=True)


def text_column(name: str, width: int) -> ColumnSpec:
    return ColumnSpec(name=name, width=width)


def sanitize_fixed_width_text(value: str) -> str:
    """Upper-case and replace characters outside the Bacs set with spaces."""
    return _DISALLOWED_UPPER.sub(" ", value.upper())


def total_width(columns: list[ColumnSpec]) -> int:
    return sum(c.width for c in columns)


def to_fixed_width_line(fields: list[str], columns: list[ColumnSpec]) -> str:
    """Render a row; extra fields beyond the column list are dropped,
    missing fields render as blank columns."""
    padded = list(fields[: len(columns)]) + [""] * max(0, len(columns) - len(fields))
    return "".join(col.render(value) for col, value in zip(columns, padded))
