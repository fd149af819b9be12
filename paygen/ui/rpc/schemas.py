"""
Parameter models for the RPC tools that have no HTTP counterpart.

Generation tools reuse ``FileParams`` / ``RowParams`` from
``paygen.core.models.params``.
"""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt

from paygen.core.models.params import SUN_PATTERN
from paygen.core.models.request import DateFormat
from paygen.core.persistence.output_store import DEFAULT_READ_LENGTH


class _Params(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class PreviewFileNameParams(_Params):
    file_format: str = Field(alias="fileType", min_length=1)
    sun: str = Field(default="DEFAULT", pattern=SUN_PATTERN)
    row_count: StrictInt = Field(default=15, ge=1, alias="numberOfRows")
    inject_invalid_rows: StrictBool = Field(default=False, alias="hasInvalidRows")
    include_headers: StrictBool = Field(default=True, alias="includeHeaders")
    include_optional_columns: StrictBool | list[str] = Field(default=True, alias="includeOptionalFields")
    width_variant: str | None = Field(default=None, alias="variant")


class ValidateDateParams(_Params):
    file_format: str = Field(alias="fileType", min_length=1)
    value: str = Field(alias="date", min_length=1)
    date_format: DateFormat | None = Field(default=None, alias="dateFormat")


class ListOutputParams(_Params):
    file_format: str = Field(alias="fileType", min_length=1)
    sun: str = Field(default="DEFAULT", pattern=SUN_PATTERN)
    limit: StrictInt | None = Field(default=None, ge=1)


class ReadOutputParams(_Params):
    file_format: str = Field(alias="fileType", min_length=1)
    sun: str = Field(default="DEFAULT", pattern=SUN_PATTERN)
    file_name: str = Field(alias="fileName", min_length=1)
    offset: StrictInt = Field(default=0, ge=0)
    length: StrictInt = Field(default=DEFAULT_READ_LENGTH, ge=1)
    mode: Literal["utf8", "base64"] = "utf8"


class CalendarParams(_Params):
    day: datetime.date = Field(alias="date")
