"""Tests for the command-line entry point."""

import json
from pathlib import Path

import pytest

from modelbridge.__main__ import main

EXAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "reconcile.yaml.example"


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Keep .env files and catalog env vars from leaking into CLI runs."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MODELBRIDGE_SOURCE_CATALOG", raising=False)
    monkeypatch.delenv("MODELBRIDGE_TARGET_CATALOG", raising=False)


class TestReconcileCommand:
    def test_flags_without_config(self, catalog_files, capsys):
        source, targets = catalog_files
        code = main(["--source", str(source), "--targets", str(targets), "--quiet"])
        assert code == 0
        assert "2/3 matched" in capsys.readouterr().out

    def test_example_config_writes_mapping(self, tmp_path, capsys):
        out = tmp_path / "mapping.json"
        code = main([str(EXAMPLE_CONFIG), "-o", str(out)])
        assert code == 0
        data = json.loads(out.read_text())
        assert data["name"] == "aa-to-openrouter"
        assert data["mapping"] == {
            "claude-3-5-sonnet": "anthropic/claude-3.5-sonnet",
            "deepseek-v3": "deepseek/deepseek-chat",
            "gemini-2-0-flash-001": "google/gemini-2.0-flash-001",
            "gpt-4o": "openai/gpt-4o",
        }
        assert "4/5 matched" in capsys.readouterr().out

    def test_bundled_ids_when_no_target_catalog(self, catalog_files, capsys):
        source, _ = catalog_files
        assert main(["--source", str(source), "-q", "--workers", "2"]) == 0
        assert "2/3 matched" in capsys.readouterr().out

    def test_source_from_environment(self, catalog_files, monkeypatch, capsys):
        source, targets = catalog_files
        monkeypatch.setenv("MODELBRIDGE_SOURCE_CATALOG", str(source))
        monkeypatch.setenv("MODELBRIDGE_TARGET_CATALOG", str(targets))
        assert main(["-q"]) == 0
        assert "2/3 matched" in capsys.readouterr().out


class TestErrors:
    def test_missing_config(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.yaml")]) == 1
        assert "config file not found" in capsys.readouterr().err

    def test_no_source_catalog(self, capsys):
        assert main([]) == 1
        assert "no source catalog" in capsys.readouterr().err

    def test_missing_source_file(self, tmp_path, capsys):
        assert main(["--source", str(tmp_path / "missing.json")]) == 1
        assert "source catalog not found" in capsys.readouterr().err

    def test_missing_target_file(self, catalog_files, tmp_path, capsys):
        source, _ = catalog_files
        assert main(["--source", str(source), "--targets", str(tmp_path / "x.txt")]) == 1
        assert "target catalog file not found" in capsys.readouterr().err


class TestCheckOverrides:
    def test_bundled_snapshot_has_no_stale_overrides(self, capsys):
        assert main(["--check-overrides"]) == 0
        assert "19 overrides, 0 stale" in capsys.readouterr().out

    def test_reports_stale_overrides(self, catalog_files, capsys):
        _, targets = catalog_files
        assert main(["--check-overrides", "--targets", str(targets)]) == 1
        assert "19 overrides, 16 stale" in capsys.readouterr().out
