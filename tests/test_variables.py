#!/usr/bin/env python3
"""
Tests for placeholder substitution and validation.
"""

from pathlib import Path

import pytest

from glyph_shortcuts.variables import (
	MenuVariable,
	contains_variables,
	extract_variables,
	substitute,
	validate,
)

SAMPLE = Path("/Users/a/Documents/example.txt")


@pytest.mark.parametrize(
	"token, expected",
	[
		("%{selectedPath}", "/Users/a/Documents/example.txt"),
		("%{selectedFileName}", "example.txt"),
		("%{selectedDirectory}", "/Users/a/Documents"),
		("%{selectedFileExtension}", "txt"),
	],
)
def test_each_token_resolves(token, expected):
	assert substitute(token, SAMPLE) == expected


def test_text_without_tokens_is_unchanged():
	text = "echo 'hello world' | wc -c"
	assert substitute(text, SAMPLE) == text


def test_all_occurrences_replaced():
	result = substitute("cp %{selectedPath} %{selectedPath}.bak", SAMPLE)
	assert result == "cp /Users/a/Documents/example.txt /Users/a/Documents/example.txt.bak"


def test_unknown_tokens_left_untouched():
	result = substitute("open %{selectedPath} %{bogusToken}", SAMPLE)
	assert result == "open /Users/a/Documents/example.txt %{bogusToken}"


def test_extension_empty_without_suffix():
	assert substitute("[%{selectedFileExtension}]", Path("/Users/a/Makefile")) == "[]"


def test_folder_with_trailing_slash():
	folder = "/Users/a/Projects/"
	assert substitute("%{selectedFileName}", folder) == "Projects"
	assert substitute("%{selectedDirectory}", folder) == "/Users/a"


def test_substituted_values_are_not_rescanned():
	odd = Path("/tmp/%{selectedDirectory}")
	assert substitute("%{selectedFileName}", odd) == "%{selectedDirectory}"


def test_validate_flags_unknown_token():
	result = validate("open %{selectedPath} %{bogusToken}")
	assert result.is_valid is False
	assert result.unrecognized_tokens == ["%{bogusToken}"]
	assert "%{bogusToken}" in result.error_message


def test_validate_accepts_known_tokens():
	result = validate("cd %{selectedDirectory} && ls %{selectedFileName}")
	assert result.is_valid is True
	assert result.unrecognized_tokens == []
	assert result.error_message is None


def test_contains_and_extract():
	text = "open -a Preview %{selectedPath} # %{selectedFileExtension}"
	assert contains_variables(text)
	assert not contains_variables("plain")
	assert extract_variables(text) == [MenuVariable.SELECTED_PATH, MenuVariable.SELECTED_FILE_EXTENSION]


def test_example_values_match_resolution():
	example = Path(MenuVariable.SELECTED_PATH.example_value)
	for variable in MenuVariable:
		assert variable.resolve(example) == variable.example_value
