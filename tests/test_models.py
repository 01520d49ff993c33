#!/usr/bin/env python3
"""
Tests for menu item records and scope rules.
"""

from pathlib import Path

import pytest

from glyph_shortcuts.models import (
	ApplicationScope,
	FileTypeFilter,
	MenuConfiguration,
	find_system_icon,
	parse_extension_list,
)
from conftest import PAST, make_app_item, make_shell_item


def test_scope_extension_allow_list():
	scope = ApplicationScope(
		file_type_filter=FileTypeFilter.SPECIFIC_EXTENSIONS,
		allowed_extensions=("pdf", "jpg"),
	)
	assert scope.applies_to(Path("/tmp/report.pdf"), is_directory=False)
	assert scope.applies_to(Path("/tmp/photo.JPG"), is_directory=False)
	assert not scope.applies_to(Path("/tmp/notes.txt"), is_directory=False)


def test_scope_directory_uses_folder_flag_only():
	scope = ApplicationScope(
		show_on_folders=True,
		file_type_filter=FileTypeFilter.SPECIFIC_EXTENSIONS,
		allowed_extensions=("pdf",),
	)
	assert scope.applies_to(Path("/tmp/archive.zip"), is_directory=True)
	hidden = ApplicationScope(show_on_folders=False)
	assert not hidden.applies_to(Path("/tmp/docs.pdf"), is_directory=True)


def test_scope_files_disabled():
	scope = ApplicationScope(show_on_files=False)
	assert not scope.applies_to(Path("/tmp/a.txt"), is_directory=False)


def test_parse_extension_list():
	assert parse_extension_list(" pdf, .jpg,,png ") == ("pdf", "jpg", "png")


def test_updating_refreshes_modified_only():
	item = make_shell_item()
	toggled = item.updating(is_enabled=False)
	assert toggled.is_enabled is False
	assert toggled.id == item.id
	assert toggled.created_at == PAST
	assert toggled.modified_at > item.modified_at
	assert toggled.name == item.name
	assert toggled.execution == item.execution


def test_updating_rejects_identity_changes():
	item = make_shell_item()
	with pytest.raises(ValueError):
		item.updating(created_at=PAST)


def test_configuration_sorting_is_stable():
	first = make_shell_item("first", sort_order=1)
	second = make_shell_item("second", sort_order=0)
	third = make_shell_item("third", sort_order=1, is_enabled=False)
	configuration = MenuConfiguration().add_item(first).add_item(second).add_item(third)
	assert [item.name for item in configuration.sorted_items()] == ["second", "first", "third"]
	assert [item.name for item in configuration.enabled_items()] == ["second", "first"]


def test_configuration_rejects_duplicates_and_unknown_ids():
	item = make_shell_item()
	configuration = MenuConfiguration().add_item(item)
	with pytest.raises(ValueError):
		configuration.add_item(item)
	other = make_app_item()
	with pytest.raises(LookupError):
		configuration.update_item(other)
	with pytest.raises(LookupError):
		configuration.remove_item(other.id)


def test_command_text_for_both_kinds():
	assert make_shell_item(command="ls -la").command_text() == "ls -la"
	assert make_app_item(params="--new").command_text() == "TextEdit --new"


def test_system_icon_catalogue():
	icon = find_system_icon("terminal")
	assert icon is not None
	assert icon.category.display_name == "Development"
	assert find_system_icon("nope") is None
