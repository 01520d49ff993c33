#!/usr/bin/env python3
"""
Tests for custom icon assets.
"""

from pathlib import Path

import pytest

from glyph_shortcuts.errors import StorageError
from glyph_shortcuts.icons import IconStore, image_size
from conftest import write_png


def test_import_copies_under_unique_name(tmp_path: Path):
	icons = IconStore(tmp_path / "custom_icons")
	source = write_png(tmp_path / "logo.png", size=(24, 12))
	first = icons.import_image(source)
	second = icons.import_image(source)
	assert first.stored_file_name != second.stored_file_name
	assert first.source_file_name == "logo.png"
	assert first.display_name == "logo"
	assert first.size_bytes == source.stat().st_size
	assert first.image_bytes == source.read_bytes()
	assert len(icons.stored_files()) == 2


def test_import_rejects_non_images(tmp_path: Path):
	icons = IconStore(tmp_path / "custom_icons")
	bogus = tmp_path / "notes.png"
	bogus.write_text("not an image", encoding="utf-8")
	with pytest.raises(StorageError) as info:
		icons.import_image(bogus)
	assert info.value.reason == StorageError.INVALID_IMAGE
	assert icons.stored_files() == []


def test_image_size(tmp_path: Path):
	source = write_png(tmp_path / "wide.png", size=(40, 10))
	assert image_size(source.read_bytes()) == (40, 10)


def test_delete_missing_file_is_not_an_error(tmp_path: Path):
	icons = IconStore(tmp_path / "custom_icons")
	assert icons.delete("gone.png") is False


def test_path_for_rejects_traversal(tmp_path: Path):
	icons = IconStore(tmp_path / "custom_icons")
	with pytest.raises(ValueError):
		icons.path_for("../menu_configuration.json")


def test_sweep_orphans_keeps_referenced(tmp_path: Path):
	icons = IconStore(tmp_path / "custom_icons")
	kept = icons.import_image(write_png(tmp_path / "kept.png"))
	dropped = icons.import_image(write_png(tmp_path / "dropped.png"))
	removed = icons.sweep_orphans({kept.stored_file_name})
	assert removed == [dropped.stored_file_name]
	assert icons.stored_files() == [kept.stored_file_name]
