"""
Format adapter base — the contract between the generation pipeline and a
payment file format.

The pipeline only talks to formats through this interface, never to a
concrete format class. An adapter knows which logical fields its format
carries, how each is generated and checked, how records project onto
ordered string fields, and how rows become file content.

To add a format:
    1. Subclass FormatAdapter
    2. Implement file_format, extension, field_rules, profile,
       selected_fields, project and render_line
    3. Register it in the FormatRegistry
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from paygen.core.engine.assembler import AssembledRecord, RecordAssembler
from paygen.core.engine.calendar import DEFAULT_CALENDAR, WorkingDayCalendar
from paygen.core.engine.fields import FieldRule, LogicalRecord
from paygen.core.engine.injection import invalid_row_count, plan_row_validity
from paygen.core.engine.random_source import RandomSource
from paygen.core.engine.rules import CrossFieldProfile, DateRule
from paygen.core.models.generated import FileMeta, GeneratedRow
from paygen.core.models.request import FileFormat, GenerationRequest


class FormatAdapter(ABC):
    """Abstract base class for all payment file formats."""

    supports_headers: bool = False

    @property
    @abstractmethod
    def file_format(self) -> FileFormat:
        """The format identifier this adapter serves."""

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension without the leading dot."""

    @abstractmethod
    def field_rules(self, request: GenerationRequest) -> list[FieldRule]:
        """Every field rule for the format, in generation order."""

    @abstractmethod
    def profile(self, request: GenerationRequest) -> CrossFieldProfile:
        """Cross-field profile for the format."""

    @abstractmethod
    def selected_fields(self, request: GenerationRequest) -> list[str]:
        """Names of the fields the output carries, in column order."""

    @abstractmethod
    def project(self, record: LogicalRecord, request: GenerationRequest) -> list[str]:
        """Ordered string fields for one record."""

    @abstractmethod
    def render_line(self, fields: list[str], request: GenerationRequest) -> str:
        """Serialize one row of string fields."""

    # ── Shared behaviour ────────────────────────────────────────

    @property
    def name(self) -> str:
        return str(self.file_format)

    def prepare(self, request: GenerationRequest, rng: RandomSource) -> GenerationRequest:
        """Resolve per-file choices left open by the request."""
        return request

    def columns(self, request: GenerationRequest) -> list[str]:
        """Display names of the output columns, in order."""
        by_name = {r.name: r.header for r in self.field_rules(request)}
        return [by_name[name] for name in self.selected_fields(request)]

    def header(self, request: GenerationRequest) -> list[str] | None:
        if self.supports_headers and request.include_headers:
            return self.columns(request)
        return None

    def assembler(
        self,
        request: GenerationRequest,
        rng: RandomSource,
        today: date,
        calendar: WorkingDayCalendar = DEFAULT_CALENDAR,
    ) -> RecordAssembler:
        return RecordAssembler(
            rules=self.field_rules(request),
            profile=self.profile(request),
            selected=self.selected_fields(request),
            rng=rng,
            today=today,
            calendar=calendar,
            originating=request.originating_account,
        )

    def assemble(
        self,
        request: GenerationRequest,
        rng: RandomSource,
        today: date,
        calendar: WorkingDayCalendar = DEFAULT_CALENDAR,
    ) -> list[AssembledRecord]:
        """Assemble every record of the batch, following the validity plan."""
        plan = plan_row_validity(
            request.row_count,
            request.inject_invalid_rows,
            request.allow_inline_edit,
            rng,
        )
        assembler = self.assembler(request, rng, today, calendar)
        return [assembler.assemble(valid=flag) for flag in plan]

    def build_rows(
        self,
        request: GenerationRequest,
        rng: RandomSource,
        today: date,
        calendar: WorkingDayCalendar = DEFAULT_CALENDAR,
    ) -> list[list[str]]:
        return [self.project(r.record, request) for r in self.assemble(request, rng, today, calendar)]

    def build_row(
        self,
        request: GenerationRequest,
        rng: RandomSource,
        today: date,
        valid: bool = True,
        calendar: WorkingDayCalendar = DEFAULT_CALENDAR,
    ) -> GeneratedRow:
        """One standalone row, valid or invalid."""
        assembled = self.assembler(request, rng, today, calendar).assemble(valid=valid)
        fields = self.project(assembled.record, request)
        return GeneratedRow(
            fields=fields,
            line=self.render_line(fields, request),
            valid=assembled.valid,
            issues=assembled.issues,
        )

    def serialize(self, rows: list[list[str]], request: GenerationRequest) -> str:
        lines = [self.render_line(row, request) for row in rows]
        header = self.header(request)
        if header is not None:
            lines.insert(0, self.render_line(header, request))
        return "\n".join(lines)

    def compute_meta(
        self,
        rows: list[list[str]],
        request: GenerationRequest,
        invalid_rows: int = 0,
    ) -> FileMeta:
        return self.meta_for(request, row_count=len(rows), invalid_rows=invalid_rows)

    def meta_for(
        self,
        request: GenerationRequest,
        row_count: int | None = None,
        invalid_rows: int | None = None,
    ) -> FileMeta:
        """Metadata for a request, without generating anything.

        Counts default to what the request would produce.
        """
        if row_count is None:
            row_count = request.row_count
        if invalid_rows is None:
            invalid_rows = invalid_row_count(
                row_count, request.inject_invalid_rows, request.allow_inline_edit
            )
        return FileMeta(
            file_format=self.name,
            sun=request.sun,
            row_count=row_count,
            column_count=len(self.selected_fields(request)),
            has_header=self.header(request) is not None,
            is_valid_batch=not request.inject_invalid_rows,
            extension=self.extension,
            valid_rows=row_count - invalid_rows,
            invalid_rows=invalid_rows,
        )

    def date_rule(self, request: GenerationRequest) -> DateRule | None:
        """The settlement-date rule, when the format carries a date."""
        return self.profile(request).date

    def describe(self) -> dict[str, Any]:
        """Static facts about the format for listings."""
        return {
            "name": self.name,
            "extension": self.extension,
            "supportsHeaders": self.supports_headers,
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
