"""
RPC tool handlers.

``build_dispatcher`` wires every method onto a ``Dispatcher``. Handlers
take the raw params dict, validate it with a pydantic model (failures
become -32602), call into the core and return plain JSON-able dicts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from paygen import __version__
from paygen.core.engine.calendar import DEFAULT_CALENDAR, WorkingDayCalendar
from paygen.core.engine.fields import FieldContext, check_lead_time
from paygen.core.engine.generator import generate_row, get_registry
from paygen.core.engine.naming import Clock, build_filename, system_clock
from paygen.core.engine.random_source import RandomSource
from paygen.core.errors import PathTraversalError, UnsupportedFormatError
from paygen.core.models.params import FileParams, RowParams
from paygen.core.models.request import FileFormat, GenerationRequest, WidthVariant
from paygen.core.models.settings import Settings
from paygen.core.persistence.output_store import list_output_files, read_output_file
from paygen.core.use_cases.generate import ERROR_UNSUPPORTED, ERROR_VALIDATION, run_generate
from paygen.ui.rpc.dispatcher import SERVER_ERROR, Dispatcher, JsonRpcError, invalid_params
from paygen.ui.rpc.schemas import (
    CalendarParams,
    ListOutputParams,
    PreviewFileNameParams,
    ReadOutputParams,
    ValidateDateParams,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "paygen"
FILENAME_PATTERN = "{fileType}_{columns}_x_{rows}_{H|NH}_{V|I}_{YYYYMMDD_HHMMSS}.{ext}"

# Method prefix per format.
FORMAT_TOOLS: dict[str, FileFormat] = {
    "sddirect": FileFormat.SDDIRECT,
    "eazipay": FileFormat.EAZIPAY,
    "bacs18paymentlines": FileFormat.BACS18_PAYMENT_LINES,
}


@dataclass
class RpcContext:
    """Process-wide collaborators shared by every tool call."""

    settings: Settings = field(default_factory=Settings)
    output_root: Path = field(default_factory=Path.cwd)
    calendar: WorkingDayCalendar = DEFAULT_CALENDAR
    clock: Clock = system_clock
    rng_factory: Callable[[], RandomSource] = RandomSource


def _resolve_format(name: str) -> FileFormat:
    try:
        return FileFormat.resolve(name)
    except UnsupportedFormatError as e:
        raise invalid_params(str(e), {"supported": e.supported}) from e


# ── Format tools ────────────────────────────────────────────────


def _row_tool(ctx: RpcContext, file_format: FileFormat, valid: bool) -> Callable[[dict], dict]:
    def handler(params: dict[str, Any]) -> dict[str, Any]:
        request = RowParams.model_validate(params).to_request(file_format)
        row = generate_row(
            request,
            valid=valid,
            rng=ctx.rng_factory(),
            clock=ctx.clock,
            calendar=ctx.calendar,
        )
        return {
            "row": {"fields": row.fields, "asLine": row.line},
            "valid": row.valid,
            "issues": row.issues,
        }
    return handler


def _generate_tool(ctx: RpcContext, file_format: FileFormat) -> Callable[[dict], dict]:
    def handler(params: dict[str, Any]) -> dict[str, Any]:
        file_params = FileParams.model_validate(params)
        result = run_generate(
            file_params,
            file_format=str(file_format),
            output_root=ctx.output_root,
            max_rows=ctx.settings.max_rows,
            defaults=ctx.settings.defaults,
            rng=ctx.rng_factory(),
            clock=ctx.clock,
            calendar=ctx.calendar,
        )
        if not result.ok:
            if result.error_kind in (ERROR_VALIDATION, ERROR_UNSUPPORTED):
                raise invalid_params(result.error)
            raise JsonRpcError(SERVER_ERROR, result.error)
        return result.to_dict(include_content=False)
    return handler


# ── Common tools ────────────────────────────────────────────────


def list_supported_formats(params: dict[str, Any]) -> dict[str, Any]:
    formats = []
    for adapter in get_registry().adapters():
        info = adapter.describe()
        if adapter.file_format == FileFormat.BACS18_PAYMENT_LINES:
            counts = sorted(v["columns"] for v in info["variants"].values())
        elif adapter.file_format == FileFormat.SDDIRECT:
            required = len(info["requiredColumns"])
            counts = list(range(required, required + len(info["optionalColumns"]) + 1))
        else:
            counts = [info["columns"]]
        formats.append({
            "fileType": info["name"],
            "supportsHeaders": info["supportsHeaders"],
            "supportedDateFormats": info.get("dateFormats"),
            "columnCounts": counts,
            "fileNamePattern": FILENAME_PATTERN,
            "extensions": [info["extension"]],
        })
    return {"formats": formats}


def _preview_file_name(ctx: RpcContext) -> Callable[[dict], dict]:
    def handler(params: dict[str, Any]) -> dict[str, Any]:
        p = PreviewFileNameParams.model_validate(params)
        adapter = get_registry().get(_resolve_format(p.file_format))
        data = p.model_dump(exclude_none=True, exclude={"file_format"})
        data["file_format"] = adapter.file_format
        request = GenerationRequest.model_validate(data)
        meta = adapter.meta_for(request)
        return {
            "fileType": meta.file_format,
            "sun": meta.sun,
            "fileName": build_filename(meta, ctx.clock()),
            "columnCount": meta.column_count,
            "extension": meta.extension,
        }
    return handler


def _validate_processing_date(ctx: RpcContext) -> Callable[[dict], dict]:
    def handler(params: dict[str, Any]) -> dict[str, Any]:
        p = ValidateDateParams.model_validate(params)
        adapter = get_registry().get(_resolve_format(p.file_format))
        request = GenerationRequest(
            file_format=adapter.file_format,
            date_format=p.date_format,
            width_variant=WidthVariant.WIDE,
        )
        rule = adapter.date_rule(request)
        if rule is None:
            raise invalid_params(f"{adapter.name} has no processing date")

        day = rule.parse(p.value)
        if day is None:
            return {"valid": False, "errors": ["Date is not in the expected format"]}

        today = ctx.clock().date()
        field_ctx = FieldContext(rng=ctx.rng_factory(), today=today, calendar=ctx.calendar)
        errors = check_lead_time(day, field_ctx, rule.min_days, rule.max_days)
        if errors:
            return {"valid": False, "errors": errors}
        return {"valid": True, "normalized": day.isoformat(), "warnings": []}
    return handler


def _list_output_files(ctx: RpcContext) -> Callable[[dict], dict]:
    def handler(params: dict[str, Any]) -> dict[str, Any]:
        p = ListOutputParams.model_validate(params)
        file_format = _resolve_format(p.file_format)
        try:
            files = list_output_files(ctx.output_root, str(file_format), p.sun)
        except PathTraversalError as e:
            raise invalid_params("Invalid path", {"details": [str(e)]}) from e
        if p.limit is not None:
            files = files[: p.limit]
        return {
            "fileType": str(file_format),
            "sun": p.sun,
            "files": [f.to_dict() for f in files],
        }
    return handler


def _read_output_file(ctx: RpcContext) -> Callable[[dict], dict]:
    def handler(params: dict[str, Any]) -> dict[str, Any]:
        p = ReadOutputParams.model_validate(params)
        file_format = _resolve_format(p.file_format)
        try:
            chunk = read_output_file(
                ctx.output_root, str(file_format), p.sun, p.file_name,
                offset=p.offset, length=p.length, mode=p.mode,
            )
        except PathTraversalError as e:
            raise invalid_params("Invalid path", {"details": [str(e)]}) from e
        except FileNotFoundError as e:
            raise invalid_params("File not found", {"details": [p.file_name]}) from e
        return chunk.to_dict()
    return handler


# ── Calendar tools ──────────────────────────────────────────────


def _next_working_day(ctx: RpcContext) -> Callable[[dict], dict]:
    def handler(params: dict[str, Any]) -> dict[str, Any]:
        p = CalendarParams.model_validate(params)
        return {"date": ctx.calendar.next_working_day(p.day).isoformat()}
    return handler


def _is_working_day(ctx: RpcContext) -> Callable[[dict], dict]:
    def handler(params: dict[str, Any]) -> dict[str, Any]:
        p = CalendarParams.model_validate(params)
        return {
            "date": p.day.isoformat(),
            "workingDay": ctx.calendar.is_working_day(p.day),
            "weekend": ctx.calendar.is_weekend(p.day),
            "bankHoliday": ctx.calendar.is_bank_holiday(p.day),
        }
    return handler


# ── Wiring ──────────────────────────────────────────────────────


def build_dispatcher(ctx: RpcContext | None = None) -> Dispatcher:
    """A dispatcher with every paygen method registered."""
    ctx = ctx or RpcContext()
    dispatcher = Dispatcher()

    dispatcher.register("initialize", lambda params: {
        "server": {"name": SERVER_NAME, "version": __version__},
        "capabilities": {"tools": True, "resources": True, "prompts": False},
    })
    dispatcher.register("ping", lambda params: {"ok": True})

    def shutdown(params: dict[str, Any]) -> dict[str, Any]:
        dispatcher.shutdown_requested = True
        return {"ok": True}

    dispatcher.register("shutdown", shutdown)

    for prefix, file_format in FORMAT_TOOLS.items():
        dispatcher.register(f"tools/{prefix}.get_valid_row", _row_tool(ctx, file_format, True))
        dispatcher.register(f"tools/{prefix}.get_invalid_row", _row_tool(ctx, file_format, False))
        dispatcher.register(f"tools/{prefix}.generate_file", _generate_tool(ctx, file_format))

    dispatcher.register("tools/common.list_supported_formats", list_supported_formats)
    dispatcher.register("tools/common.preview_file_name", _preview_file_name(ctx))
    dispatcher.register("tools/common.validate_processing_date", _validate_processing_date(ctx))
    dispatcher.register("tools/common.list_output_files", _list_output_files(ctx))
    dispatcher.register("tools/common.read_output_file", _read_output_file(ctx))
    dispatcher.register("tools/calendar.next_working_day", _next_working_day(ctx))
    dispatcher.register("tools/calendar.is_working_day", _is_working_day(ctx))

    logger.debug("RPC dispatcher ready with %d methods", len(dispatcher.methods()))
    return dispatcher
