"""
Output store — where generated files land on disk.

Layout::

    <root>/output/<format>/<sun>/<filename>

Writes are atomic (temp file in the target directory, then rename) so a
reader never sees a half-written file. Every path built from caller
input goes through ``safe_join``, which refuses anything that resolves
outside its base directory.
"""

from __future__ import annotations

import base64
import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

from paygen.core.errors import PathTraversalError
from paygen.core.models.generated import GeneratedFile

logger = logging.getLogger(__name__)

OUTPUT_DIR = "output"
DEFAULT_READ_LENGTH = 64 * 1024

ReadMode = Literal["utf8", "base64"]


def safe_join(base: Path, *parts: str) -> Path:
    """Join ``parts`` under ``base`` and refuse to leave it.

    Raises:
        PathTraversalError: If the result resolves outside ``base``.
    """
    root = base.resolve()
    target = root.joinpath(*parts).resolve()
    if target != root and root not in target.parents:
        raise PathTraversalError(f"Path escapes output root: {'/'.join(parts)}")
    return target


def output_dir_for(root: Path, file_format: str, sun: str = "DEFAULT") -> Path:
    return safe_join(Path(root), OUTPUT_DIR, file_format, sun)


def save_generated_file(file: GeneratedFile, directory: Path) -> Path:
    """Write ``file`` into ``directory`` atomically and return its path.

    Raises:
        OSError: If the write fails; the temp file is removed first.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = safe_join(directory, file.filename)

    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".paygen_", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(file.content)
        tmp.replace(path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to write %s: %s", path, e)
        raise

    logger.info("Wrote %s (%d bytes)", path, len(file.content.encode("utf-8")))
    return path


# ── Listing and reading ─────────────────────────────────────────


@dataclass
class OutputFileInfo:
    """One entry in an output directory listing."""

    name: str
    size: int
    modified: datetime

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "size": self.size,
            "modified": self.modified.isoformat(),
        }


@dataclass
class FileChunk:
    """A slice of a stored file."""

    name: str
    offset: int
    length: int
    total_size: int
    mode: ReadMode
    data: str
    eof: bool = field(default=False)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "offset": self.offset,
            "length": self.length,
            "totalSize": self.total_size,
            "mode": self.mode,
            "data": self.data,
            "eof": self.eof,
        }


def list_output_files(root: Path, file_format: str, sun: str = "DEFAULT") -> list[OutputFileInfo]:
    """Files in one format/SUN directory, newest first. Missing directory ⇒ empty."""
    directory = output_dir_for(root, file_format, sun)
    if not directory.is_dir():
        return []

    entries = []
    for path in directory.iterdir():
        if not path.is_file() or path.name.startswith("."):
            continue
        stat = path.stat()
        entries.append(OutputFileInfo(
            name=path.name,
            size=stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
        ))
    entries.sort(key=lambda e: e.modified, reverse=True)
    return entries


def read_output_file(
    root: Path,
    file_format: str,
    sun: str,
    name: str,
    offset: int = 0,
    length: int = DEFAULT_READ_LENGTH,
    mode: ReadMode = "utf8",
) -> FileChunk:
    """Read up to ``length`` bytes from ``offset`` of a stored file.

    Raises:
        PathTraversalError: If ``name`` escapes the directory.
        FileNotFoundError: If the file does not exist.
        ValueError: On a negative offset/length or unknown mode.
    """
    if offset < 0 or length < 0:
        raise ValueError("offset and length must be non-negative")
    if mode not in ("utf8", "base64"):
        raise ValueError(f"Unknown read mode: {mode}")

    path = safe_join(output_dir_for(root, file_format, sun), name)
    if not path.is_file():
        raise FileNotFoundError(f"No such output file: {name}")

    total = path.stat().st_size
    with path.open("rb") as handle:
        handle.seek(offset)
        raw = handle.read(length)

    if mode == "base64":
        data = base64.b64encode(raw).decode("ascii")
    else:
        data = raw.decode("utf-8", errors="replace")

    return FileChunk(
        name=name,
        offset=offset,
        length=len(raw),
        total_size=total,
        mode=mode,
        data=data,
        eof=offset + len(raw) >= total,
    )
