"""
Configuration loader — reads paygen.yml into the Settings model.

A missing file is not an error: every setting has a default. A file
that exists but cannot be read, is not valid YAML, or does not match
the schema raises ``ConfigError``. Environment variables are applied
last and win over the file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from paygen.core.errors import ConfigurationError
from paygen.core.models.settings import Settings

logger = logging.getLogger(__name__)

CONFIG_FILE = "paygen.yml"

ENV_OUTPUT_ROOT = "PAYGEN_OUTPUT_ROOT"
ENV_MAX_ROWS = "PAYGEN_MAX_ROWS"


class ConfigError(ConfigurationError):
    """Raised when paygen.yml is unreadable or invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for paygen.yml from ``start_dir`` (default: cwd) upward."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        if current.parent == current:
            break
        current = current.parent

    return None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Accept both a flat file and one wrapped under a "paygen" key.
    return data.get("paygen", data)


def _apply_env(data: dict[str, Any]) -> dict[str, Any]:
    merged = dict(data)
    if os.environ.get(ENV_OUTPUT_ROOT):
        merged["output_root"] = os.environ[ENV_OUTPUT_ROOT]
    if os.environ.get(ENV_MAX_ROWS):
        merged["max_rows"] = os.environ[ENV_MAX_ROWS]
    return merged


def load_settings(path: Path | None = None, search: bool = True) -> Settings:
    """Load settings from YAML, then environment overrides.

    Args:
        path: Explicit config path. Must exist when given.
        search: Walk upward from cwd for paygen.yml when ``path`` is None.

    Raises:
        ConfigError: If an explicit path is missing, or any file found
            is unreadable or invalid.
    """
    if path is not None and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    if path is None and search:
        path = find_config_file()

    data: dict[str, Any] = {}
    if path is not None:
        logger.debug("Loading settings from %s", path)
        data = _read_yaml(path)

    try:
        settings = Settings.model_validate(_apply_env(data))
    except ValidationError as e:
        source = path or "environment"
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e

    logger.info(
        "Settings loaded (output_root=%s, max_rows=%d)",
        settings.output_root, settings.max_rows,
    )
    return settings


def config_root(config_path: Path | None) -> Path:
    """Directory relative paths in the config resolve against."""
    if config_path is None:
        return Path.cwd().resolve()
    return config_path.parent.resolve()


def resolve_output_root(settings: Settings, config_path: Path | None = None) -> Path:
    root = Path(settings.output_root)
    if root.is_absolute():
        return root
    return (config_root(config_path) / root).resolve()
