"""
Generate use case — build a payment file and optionally store it.

Shared by the CLI, the HTTP API and the RPC tools so that all three
report the same shape and the same failure categories.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from paygen.core.engine.calendar import WorkingDayCalendar
from paygen.core.engine.generator import generate_file
from paygen.core.engine.naming import Clock
from paygen.core.engine.random_source import RandomSource
from paygen.core.errors import (
    ConfigurationError,
    ConstraintViolationError,
    PathTraversalError,
    UnsupportedFormatError,
)
from paygen.core.models.generated import GeneratedFile
from paygen.core.models.params import FileParams, GenerateParams
from paygen.core.persistence.output_store import output_dir_for, save_generated_file

logger = logging.getLogger(__name__)

# Failure categories, mapped to status codes by each surface.
ERROR_VALIDATION = "validation"
ERROR_UNSUPPORTED = "unsupported"
ERROR_WRITE = "write"
ERROR_CONFIG = "configuration"


@dataclass
class GenerateResult:
    """Result of a generate or preview call."""

    file: GeneratedFile | None = None
    path: Path | None = None
    error: str | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self, include_content: bool = True) -> dict:
        if self.error:
            return {"error": self.error, "kind": self.error_kind}

        meta = self.file.meta
        result: dict = {
            "filename": self.file.filename,
            "meta": {
                "fileType": meta.file_format,
                "sun": meta.sun,
                "rows": meta.row_count,
                "columns": meta.column_count,
                "header": meta.header_token,
                "validity": meta.validity_token,
                "validRows": meta.valid_rows,
                "invalidRows": meta.invalid_rows,
                "extension": meta.extension,
            },
        }
        if self.path is not None:
            result["path"] = str(self.path)
        if include_content:
            result["content"] = self.file.content
        return result


def run_generate(
    params: FileParams,
    file_format: str | None = None,
    output_root: Path | None = None,
    write: bool = True,
    max_rows: int | None = None,
    defaults: FileParams | None = None,
    rng: RandomSource | None = None,
    clock: Clock | None = None,
    calendar: WorkingDayCalendar | None = None,
) -> GenerateResult:
    """Generate a file and, when ``write`` is set, save it under ``output_root``.

    Args:
        params: Validated transport parameters.
        file_format: Format identifier; taken from ``params`` when it is a
            ``GenerateParams``.
        output_root: Root holding the ``output/`` tree (default: cwd).
        write: Save to disk, or only return the content (preview).
        max_rows: Row ceiling from settings.
        defaults: Options from settings that fill whatever ``params`` leaves unset.

    Returns:
        GenerateResult. Failures are reported in ``error``/``error_kind``,
        never raised.
    """
    if file_format is None and isinstance(params, GenerateParams):
        file_format = params.file_format

    try:
        if defaults is not None:
            params = params.with_defaults(defaults)
        request = params.to_request(file_format, max_rows=max_rows)
        generated = generate_file(request, rng=rng, clock=clock, calendar=calendar)
    except UnsupportedFormatError as e:
        return GenerateResult(error=str(e), error_kind=ERROR_UNSUPPORTED)
    except (ConstraintViolationError, ValidationError, ValueError) as e:
        return GenerateResult(error=str(e), error_kind=ERROR_VALIDATION)
    except ConfigurationError as e:
        logger.error("Configuration error during generation: %s", e)
        return GenerateResult(error=str(e), error_kind=ERROR_CONFIG)

    if not write:
        return GenerateResult(file=generated)

    root = output_root or Path.cwd()
    try:
        directory = output_dir_for(root, generated.meta.file_format, generated.meta.sun)
        path = save_generated_file(generated, directory)
    except PathTraversalError as e:
        return GenerateResult(error=str(e), error_kind=ERROR_VALIDATION)
    except OSError as e:
        logger.error("Could not save %s: %s", generated.filename, e)
        return GenerateResult(error=f"Failed to write file: {e}", error_kind=ERROR_WRITE)

    return GenerateResult(file=generated, path=path)
