#!/usr/bin/env python3
"""
Tests for the in-memory shortcut list and its rollback policy.
"""

from pathlib import Path

from glyph_shortcuts.errors import StorageError
from glyph_shortcuts.icons import IconStore
from glyph_shortcuts.library import ShortcutLibrary
from glyph_shortcuts.store import ConfigurationStore
from conftest import make_app_item, make_shell_item, write_png


def _failing_save(configuration):
	raise StorageError("disk full", StorageError.UNWRITABLE)


def test_add_and_reload(store: ConfigurationStore):
	library = ShortcutLibrary(store)
	assert library.reload()
	assert library.items == []
	item = make_shell_item()
	assert library.add(item)
	assert [entry.id for entry in library.items] == [item.id]
	fresh = ShortcutLibrary(store)
	fresh.reload()
	assert [entry.id for entry in fresh.items] == [item.id]


def test_failed_save_rolls_back(store: ConfigurationStore, monkeypatch):
	library = ShortcutLibrary(store)
	kept = make_shell_item("kept")
	library.add(kept)
	before = list(library.items)
	monkeypatch.setattr(store, "save", _failing_save)
	assert library.add(make_app_item("lost")) is False
	assert library.items == before
	assert "disk full" in library.error_message
	assert library.toggle(kept.id) is False
	assert library.items == before
	assert library.delete_all() is False
	assert library.items == before


def test_reload_degrades_to_empty_on_bad_file(store: ConfigurationStore):
	store.config_path.write_text("{oops", encoding="utf-8")
	library = ShortcutLibrary(store)
	assert library.reload() is False
	assert library.items == []
	assert library.error_message.startswith("Failed to load")


def test_reload_without_container():
	library = ShortcutLibrary(ConfigurationStore(None))
	assert library.reload() is False
	assert library.items == []


def test_toggle_delete_and_move(store: ConfigurationStore):
	library = ShortcutLibrary(store)
	a = make_shell_item("a", sort_order=0)
	b = make_shell_item("b", sort_order=1)
	c = make_app_item("c", sort_order=2)
	for item in (a, b, c):
		library.add(item)
	assert library.toggle(b.id)
	assert library.find(b.id).is_enabled is False
	assert library.move(c.id, 0)
	assert [item.name for item in library.items] == ["c", "a", "b"]
	assert library.delete(a.id)
	assert [item.name for item in library.items] == ["c", "b"]
	assert [item.name for item in store.load().sorted_items()] == ["c", "b"]


def test_unknown_id_reports_error(store: ConfigurationStore):
	library = ShortcutLibrary(store)
	library.add(make_shell_item())
	before = list(library.items)
	assert library.delete(make_shell_item().id) is False
	assert library.items == before
	assert library.error_message


def test_filtered_matches_name_description_and_command(store: ConfigurationStore):
	library = ShortcutLibrary(store)
	library.add(make_shell_item("Compress", "zip -r out.zip %{selectedPath}", sort_order=0))
	library.add(make_shell_item("Notes", "ls", description="Quick LOOK", sort_order=1))
	library.add(make_app_item("Edit", params="--fresh", sort_order=2))
	assert [item.name for item in library.filtered("ZIP")] == ["Compress"]
	assert [item.name for item in library.filtered("look")] == ["Notes"]
	assert [item.name for item in library.filtered("textedit")] == ["Edit"]
	assert len(library.filtered("  ")) == 3


def test_add_with_icon_source(store: ConfigurationStore, tmp_path: Path):
	library = ShortcutLibrary(store)
	item = make_shell_item()
	assert library.add(item, icon_source=write_png(tmp_path / "i.png"))
	assert library.find(item.id).icon.kind == "custom"


def test_delete_matches_disk_when_icon_cleanup_fails(store: ConfigurationStore, tmp_path: Path, monkeypatch):
	library = ShortcutLibrary(store)
	item = make_shell_item()
	assert library.add(item, icon_source=write_png(tmp_path / "a.png"))

	def _reject(self, stored_file_name):
		raise ValueError(f"Invalid stored icon name {stored_file_name!r}")

	monkeypatch.setattr(IconStore, "delete", _reject)
	assert library.delete(item.id) is True
	assert library.items == []
	assert store.load().menu_items == ()
