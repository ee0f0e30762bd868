"""Tests for the linewise CLI (layers, config show/init)."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from linewise.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("LINEWISE_CONFIG", raising=False)
    return tmp_path


# ── linewise layers ─────────────────────────────────────────────────


def test_layers_default_binmode():
    result = runner.invoke(app, ["layers", "encoding(UTF-8)"])
    assert result.exit_code == 0
    assert "UTF-8" in result.output
    assert "untranslated" in result.output


def test_layers_raw_crlf():
    result = runner.invoke(app, ["layers", ":raw:crlf"])
    assert result.exit_code == 0
    assert "latin-1" in result.output
    assert "yes" in result.output
    assert "\\r\\n" in result.output


def test_layers_invalid_binmode_exits_1():
    result = runner.invoke(app, ["layers", "gzip"])
    assert result.exit_code == 1
    assert "unknown I/O layer" in result.output


# ── linewise config ─────────────────────────────────────────────────


def test_config_init_creates_file(tmp_path: Path):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "linewise.yaml").exists()
    assert "Created" in result.output


def test_config_init_refuses_overwrite(tmp_path: Path):
    (tmp_path / "linewise.yaml").write_text("log_level: debug\n", encoding="utf-8")
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 1
    assert "already exists" in result.output
    assert (tmp_path / "linewise.yaml").read_text(encoding="utf-8") == "log_level: debug\n"


def test_config_init_force(tmp_path: Path):
    (tmp_path / "linewise.yaml").write_text("log_level: debug\n", encoding="utf-8")
    result = runner.invoke(app, ["config", "init", "--force"])
    assert result.exit_code == 0
    assert "writers:" in (tmp_path / "linewise.yaml").read_text(encoding="utf-8")


def test_config_show_defaults():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "write_handle" in result.output
    assert "encoding(UTF-8)" in result.output


def test_config_show_explicit_path(tmp_path: Path):
    path = tmp_path / "custom.yaml"
    path.write_text("writers:\n  binmode: raw\n  method: emit\n", encoding="utf-8")
    result = runner.invoke(app, ["--config", str(path), "config", "show"])
    assert result.exit_code == 0
    assert "emit" in result.output


def test_invalid_config_file_exits_1(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("writers:\n  binmode: gzip\n", encoding="utf-8")
    result = runner.invoke(app, ["-c", str(path), "config", "show"])
    assert result.exit_code == 1
    assert "Invalid config" in result.output


def test_config_init_with_writer_options(tmp_path: Path):
    result = runner.invoke(app, ["config", "init", "--binmode", "raw", "--method", "emit"])
    assert result.exit_code == 0
    show = runner.invoke(app, ["config", "show"])
    assert "source: linewise.yaml" in show.output
    assert "emit" in show.output
    assert "binmode: raw" in show.output


def test_config_init_rejects_bad_binmode(tmp_path: Path):
    result = runner.invoke(app, ["config", "init", "--binmode", "gzip"])
    assert result.exit_code == 1
    assert not (tmp_path / "linewise.yaml").exists()


def test_config_show_reports_defaults_source():
    result = runner.invoke(app, ["config", "show"])
    assert "built-in defaults" in result.output


def test_layers_shows_unencodable_policy():
    result = runner.invoke(app, ["layers", "encoding(iso-8859-1)"])
    assert result.exit_code == 0
    assert "backslashreplace" in result.output
