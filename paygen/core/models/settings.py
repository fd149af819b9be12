"""
Settings model — process configuration loaded from paygen.yml.

Every field has a default, so a missing config file is equivalent to
an empty one.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from paygen.core.models.params import FileParams


class RateLimitSettings(BaseModel):
    """Per-client request limit for the HTTP API."""

    max_requests: int = Field(default=100, ge=1)
    window_seconds: float = Field(default=60.0, gt=0)


class Settings(BaseModel):
    """Root settings for CLI, HTTP and RPC entry points."""

    output_root: str = "."              # files land in <root>/output/<format>/<sun>
    max_rows: int = Field(default=100_000, ge=1)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    defaults: FileParams = Field(default_factory=FileParams)  # fill options a caller leaves unset
    extra_bank_holidays: list[date] = Field(default_factory=list)
