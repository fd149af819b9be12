"""
HTTP server — Flask app factory.

Creates the Flask application that exposes generation over a small JSON
API. Settings, the working-day calendar and the rate limiter are built
once here and stored on ``app.config`` / ``app.extensions``; route
handlers read them back through ``current_app``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from flask import Flask, jsonify, request

from paygen.core.config.loader import resolve_output_root
from paygen.core.engine.calendar import DEFAULT_CALENDAR
from paygen.core.models.settings import Settings
from paygen.core.reliability.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    config_path: Path | None = None,
    output_root: Path | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        settings: Loaded settings; defaults when omitted.
        config_path: The paygen.yml the settings came from, if any.
            Relative ``output_root`` settings resolve against its folder.
        output_root: Explicit output root, overriding settings.
    """
    settings = settings or Settings()
    app = Flask(__name__)

    app.config["SETTINGS"] = settings
    app.config["CONFIG_PATH"] = str(config_path) if config_path else None
    app.config["OUTPUT_ROOT"] = str(output_root or resolve_output_root(settings, config_path))
    app.config["MAX_CONTENT_LENGTH"] = 1024 * 1024

    app.extensions["paygen.calendar"] = DEFAULT_CALENDAR.with_extra_holidays(
        settings.extra_bank_holidays
    )
    limiter = RateLimiter(
        max_requests=settings.rate_limit.max_requests,
        window_seconds=settings.rate_limit.window_seconds,
    )
    app.extensions["paygen.rate_limiter"] = limiter

    from paygen.ui.web.routes_api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    @app.before_request
    def _rate_limit():  # type: ignore[no-untyped-def]
        if not request.path.startswith("/api/"):
            return None
        decision = limiter.check(request.remote_addr or "unknown")
        if decision.allowed:
            return None
        response = jsonify({
            "error": "Too many requests",
            "retryAfter": decision.retry_after,
        })
        response.status_code = 429
        response.headers["Retry-After"] = str(decision.retry_after)
        return response

    @app.route("/health")
    def health():  # type: ignore[no-untyped-def]
        from paygen import __version__

        return jsonify({"status": "ok", "version": __version__})

    @app.errorhandler(404)
    def _not_found(e):  # type: ignore[no-untyped-def]
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def _method_not_allowed(e):  # type: ignore[no-untyped-def]
        return jsonify({"error": "Method not allowed"}), 405

    logger.info("HTTP app created (output_root=%s)", app.config["OUTPUT_ROOT"])
    return app


def run_server(
    app: Flask,
    host: str = "127.0.0.1",
    port: int = 3001,
    debug: bool = False,
) -> None:
    """Run the Flask development server."""
    logger.info("Starting paygen HTTP API on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug, use_reloader=False)
