"""
Filename and metadata derivation.

    {format}_{columns:02d}_x_{rows}_{H|NH}_{V|I}_{YYYYMMDD_HHMMSS}.{ext}

Pure given its inputs; the only moving part is the timestamp, which
comes from an injectable clock.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from paygen.core.models.generated import FileMeta

Clock = Callable[[], datetime]

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def system_clock() -> datetime:
    return datetime.now()


def build_filename(meta: FileMeta, timestamp: datetime) -> str:
    return (
        f"{meta.file_format}_{meta.column_count:02d}_x_{meta.row_count}"
        f"_{meta.header_token}_{meta.validity_token}"
        f"_{timestamp.strftime(TIMESTAMP_FORMAT)}.{meta.extension}"
    )
