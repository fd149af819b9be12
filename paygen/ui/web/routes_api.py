"""
API routes — JSON endpoints for generation and output browsing.

All endpoints return JSON. Grouped under the /api/ prefix.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from paygen.core.errors import PathTraversalError, UnsupportedFormatError
from paygen.core.models.params import GenerateParams
from paygen.core.models.request import FileFormat
from paygen.core.use_cases.generate import (
    ERROR_UNSUPPORTED,
    ERROR_VALIDATION,
    GenerateResult,
    run_generate,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

_STATUS_BY_KIND = {
    ERROR_VALIDATION: 400,
    ERROR_UNSUPPORTED: 422,
}


def _output_root() -> Path:
    return Path(current_app.config["OUTPUT_ROOT"])


def _max_rows() -> int:
    return current_app.config["SETTINGS"].max_rows


def _validation_error(e: ValidationError):  # type: ignore[no-untyped-def]
    return jsonify({
        "error": "Invalid request",
        "details": json.loads(e.json(include_url=False)),
    }), 400


def _result_response(result: GenerateResult, include_content: bool = True):  # type: ignore[no-untyped-def]
    if result.ok:
        return jsonify({"success": True, **result.to_dict(include_content)})
    status = _STATUS_BY_KIND.get(result.error_kind, 500)
    return jsonify({"success": False, **result.to_dict()}), status


def _parse_body() -> GenerateParams:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    return GenerateParams.model_validate(data)


# ── Generation ───────────────────────────────────────────────────────


@api_bp.route("/generate", methods=["POST"])
def api_generate():  # type: ignore[no-untyped-def]
    """Generate a file and write it to the output store."""
    try:
        params = _parse_body()
    except ValidationError as e:
        return _validation_error(e)

    result = run_generate(
        params,
        output_root=_output_root(),
        write=True,
        max_rows=_max_rows(),
        defaults=current_app.config["SETTINGS"].defaults,
        calendar=current_app.extensions["paygen.calendar"],
    )
    return _result_response(result)


@api_bp.route("/preview", methods=["POST"])
def api_preview():  # type: ignore[no-untyped-def]
    """Generate a file and return it without writing."""
    try:
        params = _parse_body()
    except ValidationError as e:
        return _validation_error(e)

    result = run_generate(
        params,
        write=False,
        max_rows=_max_rows(),
        defaults=current_app.config["SETTINGS"].defaults,
        calendar=current_app.extensions["paygen.calendar"],
    )
    return _result_response(result)


# ── Discovery ────────────────────────────────────────────────────────


@api_bp.route("/info")
def api_info():  # type: ignore[no-untyped-def]
    """Service description and limits."""
    from paygen import __version__

    settings = current_app.config["SETTINGS"]
    return jsonify({
        "name": "paygen",
        "version": __version__,
        "formats": [str(f) for f in FileFormat],
        "limits": {
            "maxRows": settings.max_rows,
            "rateLimit": {
                "maxRequests": settings.rate_limit.max_requests,
                "windowSeconds": settings.rate_limit.window_seconds,
            },
        },
        "endpoints": [
            "POST /api/generate",
            "POST /api/preview",
            "GET /api/info",
            "GET /api/formats",
            "GET /api/files/<format>/<sun>",
            "GET /health",
        ],
    })


@api_bp.route("/formats")
def api_formats():  # type: ignore[no-untyped-def]
    """Registered formats with their column facts."""
    from paygen.core.engine.generator import get_registry

    return jsonify({"formats": get_registry().describe()})


# ── Output browsing ──────────────────────────────────────────────────


@api_bp.route("/files/<file_format>/<sun>")
def api_files(file_format: str, sun: str):  # type: ignore[no-untyped-def]
    """List stored files for one format and SUN."""
    from paygen.core.persistence.output_store import list_output_files

    try:
        resolved = FileFormat.resolve(file_format)
        files = list_output_files(_output_root(), str(resolved), sun)
    except UnsupportedFormatError as e:
        return jsonify({"error": str(e)}), 422
    except PathTraversalError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({
        "fileType": str(resolved),
        "sun": sun,
        "files": [f.to_dict() for f in files],
    })
