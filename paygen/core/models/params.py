"""
Transport parameters — what HTTP bodies and RPC params look like.

Field names follow the public camelCase API (``fileType``,
``numberOfRows`` ...); snake-case names are accepted too. Booleans and
integers are strict: ``"true"`` or ``"10"`` are rejected rather than
coerced. Bounds that depend on settings (the row ceiling) are checked
in ``to_request``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt

from paygen.core.errors import ConstraintViolationError
from paygen.core.models.request import (
    DateFormat,
    FileFormat,
    GenerationRequest,
    OriginatingAccount,
    WidthVariant,
)

SUN_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


class FileParams(BaseModel):
    """Options shared by every generation call."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    sun: str = Field(default="DEFAULT", pattern=SUN_PATTERN)
    row_count: StrictInt = Field(default=15, ge=1, alias="numberOfRows")
    include_optional_columns: StrictBool | list[str] = Field(default=True, alias="includeOptionalFields")
    inject_invalid_rows: StrictBool = Field(default=False, alias="hasInvalidRows")
    allow_inline_edit: StrictBool = Field(default=True, alias="forInlineEditing")
    include_headers: StrictBool = Field(default=True, alias="includeHeaders")
    date_format: DateFormat | None = Field(default=None, alias="dateFormat")
    width_variant: str | None = Field(default=None, alias="variant")
    originating_account: OriginatingAccount | None = Field(default=None, alias="originatingAccount")

    def with_defaults(self, defaults: FileParams) -> FileParams:
        """A copy where ``defaults`` fills every option the caller left unset."""
        data = defaults.model_dump(exclude_unset=True)
        data.update(self.model_dump(exclude_unset=True))
        return self.model_validate(data)

    def to_request(self, file_format: str | FileFormat, max_rows: int | None = None) -> GenerationRequest:
        """Build a core request.

        Raises:
            UnsupportedFormatError: Unknown ``file_format``.
            ConstraintViolationError: ``row_count`` above ``max_rows``.
        """
        resolved = FileFormat.resolve(file_format)
        if max_rows is not None and self.row_count > max_rows:
            raise ConstraintViolationError(
                f"numberOfRows must be at most {max_rows} (got {self.row_count})"
            )
        data = self.model_dump(exclude_none=True, exclude={"width_variant"})
        data["file_format"] = resolved
        if self.width_variant is not None:
            data["width_variant"] = self.width_variant
        return GenerationRequest.model_validate(data)


class GenerateParams(FileParams):
    """An HTTP generate/preview body: options plus the format."""

    file_format: str = Field(alias="fileType", min_length=1)

    def to_request(self, file_format: str | FileFormat | None = None, max_rows: int | None = None) -> GenerationRequest:
        return super().to_request(file_format or self.file_format, max_rows)


class RowParams(BaseModel):
    """Options for single-row tools."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    sun: str = Field(default="DEFAULT", pattern=SUN_PATTERN)
    include_optional_columns: StrictBool | list[str] = Field(default=True, alias="includeOptionalFields")
    date_format: DateFormat | None = Field(default=None, alias="dateFormat")
    width_variant: WidthVariant | str | None = Field(default=None, alias="variant")
    originating_account: OriginatingAccount | None = Field(default=None, alias="originatingAccount")

    def to_request(self, file_format: str | FileFormat) -> GenerationRequest:
        data = self.model_dump(exclude_none=True)
        data["file_format"] = FileFormat.resolve(file_format)
        data["row_count"] = 1
        return GenerationRequest.model_validate(data)
