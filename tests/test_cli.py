"""
Tests for CLI commands — generate, preview, formats, files, calendar, and global options.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from paygen.main import cli


@pytest.fixture()
def project(tmp_path: Path, monkeypatch) -> Path:
    """A working directory holding a paygen.yml with a relative output root."""
    (tmp_path / "paygen.yml").write_text(textwrap.dedent("""\
        output_root: out
        max_rows: 50
    """))
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PAYGEN_OUTPUT_ROOT", raising=False)
    monkeypatch.delenv("PAYGEN_MAX_ROWS", raising=False)
    return tmp_path


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "synthetic UK payment file generator" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_config(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(tmp_path / "nope.yml"), "preview", "--format", "SDDirect"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output


# ── Generation ───────────────────────────────────────────────────────


class TestGenerateCommand:
    def test_generate_uses_config_output_root(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", "--format", "EaziPay", "--rows", "3", "--seed", "1"])
        assert result.exit_code == 0, result.output
        files = list((project / "out" / "output" / "EaziPay" / "DEFAULT").iterdir())
        assert len(files) == 1
        assert files[0].name.startswith("EaziPay_14_x_3_NH_V_")
        assert files[0].name in result.output

    def test_generate_json(self, project: Path, tmp_path: Path):
        runner = CliRunner()
        target = tmp_path / "elsewhere"
        result = runner.invoke(cli, [
            "generate", "--format", "sddirect", "--rows", "4", "--invalid",
            "--sun", "ACME", "--output-root", str(target), "--json",
        ])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["meta"]["rows"] == 4
        assert data["meta"]["invalidRows"] == 2
        assert data["meta"]["validity"] == "I"
        assert Path(data["path"]).parent == (target / "output" / "SDDirect" / "ACME").resolve()
        assert "content" not in data

    def test_unknown_format(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", "--format", "MT940"])
        assert result.exit_code == 1
        assert "Unsupported file format" in result.output

    def test_row_ceiling_from_config(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", "--format", "SDDirect", "--rows", "51"])
        assert result.exit_code == 1
        assert "at most 50" in result.output

    def test_bad_rows(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", "--format", "SDDirect", "--rows", "0"])
        assert result.exit_code == 1
        assert "Invalid options" in result.output


class TestPreviewCommand:
    def test_preview_bacs_narrow(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "-q", "preview", "--format", "bacs18", "--variant", "narrow", "--rows", "3", "--seed", "2",
        ])
        assert result.exit_code == 0, result.output
        lines = [line for line in result.output.splitlines() if line]
        assert len(lines) == 3
        assert all(len(line) == 100 for line in lines)
        assert not (project / "out").exists()

    def test_preview_required_columns_only(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "-q", "preview", "--format", "SDDirect", "--rows", "2", "--no-optional", "--no-headers",
        ])
        assert result.exit_code == 0, result.output
        lines = [line for line in result.output.splitlines() if line]
        assert len(lines) == 2

    def test_preview_json_includes_content(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["preview", "--format", "EaziPay", "--rows", "2", "--json"])
        data = json.loads(result.output)
        assert len(data["content"].split("\n")) == 2


class TestFormatsCommand:
    def test_formats_json(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["formats", "--json"])
        assert result.exit_code == 0
        names = [f["name"] for f in json.loads(result.output)]
        assert names == ["SDDirect", "Bacs18PaymentLines", "EaziPay"]

    def test_formats_text(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["formats"])
        assert "Bacs18PaymentLines" in result.output


# ── Files ────────────────────────────────────────────────────────────


class TestFilesCommand:
    def test_list_and_read(self, project: Path):
        runner = CliRunner()
        runner.invoke(cli, ["generate", "--format", "SDDirect", "--rows", "2"])

        listed = runner.invoke(cli, ["files", "list", "SDDirect", "--json"])
        assert listed.exit_code == 0, listed.output
        entries = json.loads(listed.output)
        assert len(entries) == 1

        read = runner.invoke(cli, ["files", "read", "SDDirect", entries[0]["name"], "--json"])
        assert read.exit_code == 0
        chunk = json.loads(read.output)
        assert chunk["data"].startswith("Destination Account Name,")

    def test_list_empty(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["files", "list", "EaziPay"])
        assert result.exit_code == 0
        assert "No files" in result.output

    def test_read_traversal(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["files", "read", "SDDirect", "../../../paygen.yml"])
        assert result.exit_code == 1


# ── Calendar ─────────────────────────────────────────────────────────


class TestCalendarCommand:
    def test_next_working_day(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["calendar", "next-working-day", "2025-04-18"])
        assert result.exit_code == 0
        assert result.output.strip() == "2025-04-22"

    def test_add_working_days(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["calendar", "next-working-day", "2025-02-20", "--add", "3"])
        assert result.output.strip() == "2025-02-25"

    def test_is_working_day(self, project: Path):
        runner = CliRunner()
        assert runner.invoke(cli, ["calendar", "is-working-day", "2025-02-20"]).exit_code == 0
        result = runner.invoke(cli, ["calendar", "is-working-day", "2025-12-25", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.output)["bankHoliday"] is True

    def test_bad_date(self, project: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["calendar", "is-working-day", "25/12/2025"])
        assert result.exit_code == 2


# ── Config defaults ──────────────────────────────────────────────────


class TestConfigDefaults:
    @pytest.fixture()
    def configured(self, tmp_path: Path, monkeypatch) -> Path:
        (tmp_path / "paygen.yml").write_text(textwrap.dedent("""\
            defaults:
              numberOfRows: 3
              includeHeaders: false
        """))
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("PAYGEN_OUTPUT_ROOT", raising=False)
        monkeypatch.delenv("PAYGEN_MAX_ROWS", raising=False)
        return tmp_path

    def test_defaults_apply(self, configured: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["-q", "preview", "--format", "SDDirect"])
        assert result.exit_code == 0, result.output
        lines = [line for line in result.output.splitlines() if line]
        assert len(lines) == 3
        assert not lines[0].startswith("Destination Account Name")

    def test_flags_override_defaults(self, configured: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["preview", "--format", "SDDirect", "--rows", "2", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["meta"]["rows"] == 2
        assert data["meta"]["header"] == "NH"
