#!/usr/bin/env python3
"""
Tests for version and packaging metadata.
"""

from pathlib import Path
import tomllib

REPO_ROOT = Path(__file__).resolve().parent.parent


def _pyproject() -> dict:
	return tomllib.loads((REPO_ROOT / "pyproject.toml").read_text(encoding="utf-8"))


def test_version_file_matches_pyproject():
	version_file = (REPO_ROOT / "VERSION").read_text(encoding="utf-8").strip()
	assert version_file == _pyproject()["project"]["version"]


def test_console_script_points_at_cli():
	scripts = _pyproject()["project"]["scripts"]
	assert scripts["glyph"] == "glyph_shortcuts.cli:main"
