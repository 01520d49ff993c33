#!/usr/bin/env python3
"""
Checks a menu item must pass before the editor persists it.
"""

from __future__ import annotations

# Standard Library
from dataclasses import dataclass

# local repo modules
from .models import ApplicationLaunch, MenuItem, ShellCommand
from .variables import validate

#============================================


@dataclass(frozen=True, slots=True)
class ValidationResult:
	is_valid: bool
	message: str = ""

	def __bool__(self) -> bool:
		return self.is_valid


_OK = ValidationResult(is_valid=True)


#============================================


def _check_tokens(label: str, text: str | None) -> ValidationResult:
	if not text:
		return _OK
	result = validate(text)
	if result.is_valid:
		return _OK
	return ValidationResult(False, f"{label}: {result.error_message}")


#============================================


def validate_menu_item(item: MenuItem) -> ValidationResult:
	"""
	Decide whether a record is acceptable for saving.

	Args:
		item: Candidate record.

	Returns:
		ValidationResult with the first problem found.
	"""
	if not item.name.strip():
		return ValidationResult(False, "Name must not be empty.")
	match item.execution:
		case ShellCommand() as shell:
			if not shell.command.strip():
				return ValidationResult(False, "Shell command must not be empty.")
			checks = [
				_check_tokens("Command", shell.command),
				_check_tokens("Working directory", shell.working_directory),
			]
		case ApplicationLaunch() as launch:
			if not launch.app_path.strip() or not launch.app_name.strip():
				return ValidationResult(False, "An application must be selected.")
			checks = [_check_tokens("Parameters", launch.custom_parameters)]
		case _:
			return ValidationResult(False, f"Unknown execution type {item.execution!r}.")
	for check in checks:
		if not check.is_valid:
			return check
	return _OK
