#!/usr/bin/env python3
"""
Tests for editor-facing menu item validation.
"""

from glyph_shortcuts.models import ApplicationLaunch, ShellCommand
from glyph_shortcuts.validation import validate_menu_item
from conftest import make_app_item, make_shell_item


def test_valid_items_pass():
	assert validate_menu_item(make_shell_item()).is_valid
	assert validate_menu_item(make_app_item(params="--line %{selectedFileName}")).is_valid


def test_blank_name_fails():
	result = validate_menu_item(make_shell_item(name="   "))
	assert not result
	assert "Name" in result.message


def test_blank_command_fails():
	result = validate_menu_item(make_shell_item(command=" \t"))
	assert not result.is_valid
	assert "command" in result.message


def test_missing_application_fails():
	item = make_app_item().updating(execution=ApplicationLaunch(app_path="", app_name=""))
	result = validate_menu_item(item)
	assert not result.is_valid
	assert "application" in result.message


def test_unknown_placeholder_fails():
	result = validate_menu_item(make_shell_item(command="open %{selectedPath} %{bogusToken}"))
	assert not result.is_valid
	assert "%{bogusToken}" in result.message


def test_unknown_placeholder_in_working_directory_fails():
	item = make_shell_item().updating(
		execution=ShellCommand(command="ls", working_directory="%{selectedFolder}")
	)
	result = validate_menu_item(item)
	assert not result.is_valid
	assert result.message.startswith("Working directory")
