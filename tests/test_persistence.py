"""
Tests for the output store — atomic writes, listing, chunked reads, traversal guard.
"""

import base64
import os
from pathlib import Path

import pytest

from paygen.core.errors import PathTraversalError
from paygen.core.models.generated import FileMeta, GeneratedFile
from paygen.core.persistence.output_store import (
    list_output_files,
    output_dir_for,
    read_output_file,
    safe_join,
    save_generated_file,
)


def _file(name: str = "SDDirect_06_x_2_H_V_20250220_103000.csv", content: str = "a,b\nc,d") -> GeneratedFile:
    meta = FileMeta(
        file_format="SDDirect", row_count=2, column_count=2,
        has_header=False, is_valid_batch=True, extension="csv",
    )
    return GeneratedFile(content=content, filename=name, meta=meta)


# ── Paths ────────────────────────────────────────────────────────────


class TestSafeJoin:
    def test_inside(self, tmp_path: Path):
        assert safe_join(tmp_path, "a", "b.txt") == (tmp_path / "a" / "b.txt").resolve()

    def test_base_itself(self, tmp_path: Path):
        assert safe_join(tmp_path) == tmp_path.resolve()

    @pytest.mark.parametrize("part", ["../escape.txt", "a/../../escape", "/etc/passwd"])
    def test_escape_rejected(self, tmp_path: Path, part: str):
        with pytest.raises(PathTraversalError):
            safe_join(tmp_path, part)

    def test_output_dir_layout(self, output_root: Path):
        assert output_dir_for(output_root, "EaziPay", "S1") == (output_root / "output" / "EaziPay" / "S1").resolve()

    def test_sun_traversal_rejected(self, output_root: Path):
        with pytest.raises(PathTraversalError):
            output_dir_for(output_root, "SDDirect", "../../..")


# ── Writing ──────────────────────────────────────────────────────────


class TestSave:
    def test_writes_content(self, output_root: Path):
        directory = output_dir_for(output_root, "SDDirect")
        path = save_generated_file(_file(), directory)
        assert path.read_text(encoding="utf-8") == "a,b\nc,d"

    def test_no_temp_files_left(self, output_root: Path):
        directory = output_dir_for(output_root, "SDDirect")
        save_generated_file(_file(), directory)
        assert [p.name for p in directory.iterdir()] == [_file().filename]

    def test_overwrites(self, output_root: Path):
        directory = output_dir_for(output_root, "SDDirect")
        save_generated_file(_file(content="old"), directory)
        path = save_generated_file(_file(content="new"), directory)
        assert path.read_text(encoding="utf-8") == "new"

    def test_bad_filename_rejected(self, output_root: Path):
        directory = output_dir_for(output_root, "SDDirect")
        with pytest.raises(PathTraversalError):
            save_generated_file(_file(name="../evil.csv"), directory)


# ── Listing and reading ──────────────────────────────────────────────


class TestList:
    def test_missing_directory(self, output_root: Path):
        assert list_output_files(output_root, "SDDirect") == []

    def test_newest_first_and_hidden_skipped(self, output_root: Path):
        directory = output_dir_for(output_root, "SDDirect")
        old = save_generated_file(_file(name="old.csv"), directory)
        save_generated_file(_file(name="new.csv"), directory)
        os.utime(old, (1_000_000, 1_000_000))
        (directory / ".hidden").write_text("x")

        names = [e.name for e in list_output_files(output_root, "SDDirect")]
        assert names == ["new.csv", "old.csv"]

    def test_to_dict(self, output_root: Path):
        save_generated_file(_file(), output_dir_for(output_root, "SDDirect"))
        entry = list_output_files(output_root, "SDDirect")[0].to_dict()
        assert entry["size"] == 7
        assert set(entry) == {"name", "size", "modified"}


class TestRead:
    @pytest.fixture
    def stored(self, output_root: Path) -> str:
        save_generated_file(_file(name="f.csv", content="0123456789"), output_dir_for(output_root, "SDDirect"))
        return "f.csv"

    def test_whole_file(self, output_root: Path, stored: str):
        chunk = read_output_file(output_root, "SDDirect", "DEFAULT", stored)
        assert chunk.data == "0123456789"
        assert chunk.eof
        assert chunk.total_size == 10

    def test_slice(self, output_root: Path, stored: str):
        chunk = read_output_file(output_root, "SDDirect", "DEFAULT", stored, offset=2, length=3)
        assert chunk.data == "234"
        assert chunk.length == 3
        assert not chunk.eof
        assert chunk.to_dict()["totalSize"] == 10

    def test_base64(self, output_root: Path, stored: str):
        chunk = read_output_file(output_root, "SDDirect", "DEFAULT", stored, mode="base64")
        assert base64.b64decode(chunk.data) == b"0123456789"

    def test_missing(self, output_root: Path):
        with pytest.raises(FileNotFoundError):
            read_output_file(output_root, "SDDirect", "DEFAULT", "nope.csv")

    def test_traversal(self, output_root: Path, stored: str):
        with pytest.raises(PathTraversalError):
            read_output_file(output_root, "SDDirect", "DEFAULT", "../../../../etc/passwd")

    def test_bad_arguments(self, output_root: Path, stored: str):
        with pytest.raises(ValueError):
            read_output_file(output_root, "SDDirect", "DEFAULT", stored, offset=-1)
        with pytest.raises(ValueError):
            read_output_file(output_root, "SDDirect", "DEFAULT", stored, mode="hex")
