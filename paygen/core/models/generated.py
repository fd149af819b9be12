"""
Generated output models — the immutable result of one request.

A ``GeneratedFile`` is built once, never mutated, and handed to the
output store (or returned over HTTP/RPC) as-is. The store treats
``content`` and ``filename`` as opaque.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FileMeta(BaseModel):
    """Shape and naming facts about a generated file."""

    model_config = ConfigDict(frozen=True)

    file_format: str
    sun: str = "DEFAULT"
    row_count: int
    column_count: int
    has_header: bool
    is_valid_batch: bool
    extension: str                # without the leading dot
    valid_rows: int = 0
    invalid_rows: int = 0

    @property
    def header_token(self) -> str:
        return "H" if self.has_header else "NH"

    @property
    def validity_token(self) -> str:
        return "V" if self.is_valid_batch else "I"


class GeneratedFile(BaseModel):
    """Serialized file content plus its derived name and metadata."""

    model_config = ConfigDict(frozen=True)

    content: str
    filename: str
    meta: FileMeta

    @property
    def lines(self) -> list[str]:
        return self.content.split("\n") if self.content else []


class GeneratedRow(BaseModel):
    """A single generated row, for row-level tools."""

    model_config = ConfigDict(frozen=True)

    fields: list[str]
    line: str
    valid: bool = True
    issues: list[str] = Field(default_factory=list)
