"""
Pytest config to ensure local package imports work without installation.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest


def _add_repo_root_to_path() -> None:
	"""
	Insert the repo root into sys.path for local imports.
	"""
	repo_root = Path(__file__).resolve().parent.parent
	repo_root_str = str(repo_root)
	if repo_root_str not in sys.path:
		sys.path.insert(0, repo_root_str)


_add_repo_root_to_path()

from PIL import Image  # noqa: E402

from glyph_shortcuts.models import (  # noqa: E402
	ApplicationLaunch,
	ApplicationScope,
	MenuItem,
	ShellCommand,
	SystemIcon,
)
from glyph_shortcuts.store import ConfigurationStore  # noqa: E402

PAST = datetime(2025, 6, 7, 12, 0, 0, tzinfo=timezone.utc)


def make_shell_item(name: str = "Open in Terminal", command: str = "open -a Terminal %{selectedDirectory}", **fields) -> MenuItem:
	"""
	Shell shortcut with timestamps in the past.
	"""
	fields.setdefault("icon", SystemIcon("terminal", "Terminal"))
	fields.setdefault("created_at", PAST)
	fields.setdefault("modified_at", PAST)
	return MenuItem(name=name, execution=ShellCommand(command=command), **fields)


def make_app_item(name: str = "Open in TextEdit", params: str = "", **fields) -> MenuItem:
	fields.setdefault("icon", SystemIcon("doc", "Document"))
	fields.setdefault("created_at", PAST)
	fields.setdefault("modified_at", PAST)
	fields.setdefault("scope", ApplicationScope())
	execution = ApplicationLaunch(
		app_path="/Applications/TextEdit.app",
		app_name="TextEdit",
		custom_parameters=params,
		bundle_identifier="com.apple.TextEdit",
	)
	return MenuItem(name=name, execution=execution, **fields)


def write_png(path: Path, size: tuple[int, int] = (16, 16), color: str = "red") -> Path:
	image = Image.new("RGB", size, color)
	image.save(path, format="PNG")
	return path


@pytest.fixture
def container(tmp_path: Path) -> Path:
	path = tmp_path / "container"
	path.mkdir()
	return path


@pytest.fixture
def store(container: Path) -> ConfigurationStore:
	return ConfigurationStore(container)
