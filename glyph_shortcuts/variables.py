#!/usr/bin/env python3
"""
Placeholder substitution for shortcut commands and parameters.
"""

from __future__ import annotations

# Standard Library
import enum
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

#============================================

TOKEN_PATTERN = re.compile(r"%\{[^}]+\}")


class MenuVariable(enum.Enum):
	"""
	Recognized %{name} tokens.
	"""
	SELECTED_PATH = "%{selectedPath}"
	SELECTED_FILE_NAME = "%{selectedFileName}"
	SELECTED_DIRECTORY = "%{selectedDirectory}"
	SELECTED_FILE_EXTENSION = "%{selectedFileExtension}"

	@property
	def token(self) -> str:
		return self.value

	@property
	def description(self) -> str:
		return _DESCRIPTIONS[self]

	@property
	def example_value(self) -> str:
		return _EXAMPLES[self]

	#============================================
	def resolve(self, path: Path | str) -> str:
		"""
		Compute the value of this token for a selected path.

		Args:
			path: Selected file or folder.

		Returns:
			Substitution text.
		"""
		text = os.fspath(path)
		# drop a trailing slash so folders resolve like files
		if len(text) > 1:
			text = text.rstrip("/") or "/"
		selected = Path(text)
		if self is MenuVariable.SELECTED_PATH:
			return text
		if self is MenuVariable.SELECTED_FILE_NAME:
			return selected.name
		if self is MenuVariable.SELECTED_DIRECTORY:
			return str(selected.parent)
		return selected.suffix[1:] if selected.suffix else ""


_DESCRIPTIONS = {
	MenuVariable.SELECTED_PATH: "Selected file or folder's full path",
	MenuVariable.SELECTED_FILE_NAME: "Selected file or folder's name",
	MenuVariable.SELECTED_DIRECTORY: "Directory containing the selected item",
	MenuVariable.SELECTED_FILE_EXTENSION: "File extension of the selected item",
}

_EXAMPLES = {
	MenuVariable.SELECTED_PATH: "/Users/awesome/Documents/example.txt",
	MenuVariable.SELECTED_FILE_NAME: "example.txt",
	MenuVariable.SELECTED_DIRECTORY: "/Users/awesome/Documents",
	MenuVariable.SELECTED_FILE_EXTENSION: "txt",
}

SUPPORTED_TOKENS = frozenset(variable.token for variable in MenuVariable)
_KNOWN_TOKEN_PATTERN = re.compile("|".join(re.escape(variable.token) for variable in MenuVariable))


#============================================


@dataclass(slots=True)
class VariableValidationResult:
	"""
	Outcome of checking a template for unknown tokens.

	Attributes:
		is_valid: True when every token is recognized.
		unrecognized_tokens: Unknown tokens in order of appearance.
	"""
	is_valid: bool
	unrecognized_tokens: list[str] = field(default_factory=list)

	@property
	def error_message(self) -> str | None:
		if self.is_valid:
			return None
		return "Unsupported variables found: " + ", ".join(self.unrecognized_tokens)


#============================================


def substitute(template: str, path: Path | str) -> str:
	"""
	Replace every recognized token with its value for the selection.

	Unknown token-shaped text is left as is.

	Args:
		template: Command or parameter text.
		path: Selected file or folder.

	Returns:
		Text with tokens replaced.
	"""
	values = {variable.token: variable.resolve(path) for variable in MenuVariable}

	def _replace(match: re.Match) -> str:
		return values[match.group(0)]

	# single pass so substituted values are never re-scanned for tokens
	return _KNOWN_TOKEN_PATTERN.sub(_replace, template)


#============================================


def validate(template: str) -> VariableValidationResult:
	"""
	Find token-shaped substrings that are not recognized.

	Args:
		template: Command or parameter text.

	Returns:
		VariableValidationResult.
	"""
	unknown = [token for token in TOKEN_PATTERN.findall(template) if token not in SUPPORTED_TOKENS]
	return VariableValidationResult(is_valid=not unknown, unrecognized_tokens=unknown)


def contains_variables(text: str) -> bool:
	return any(token in text for token in SUPPORTED_TOKENS)


def extract_variables(text: str) -> list[MenuVariable]:
	"""
	Recognized variables present in text, in catalogue order.
	"""
	return [variable for variable in MenuVariable if variable.token in text]
