#!/usr/bin/env python3
"""
Error types shared across the shortcut store and runner.
"""

from __future__ import annotations

# Standard Library
from pathlib import Path

#============================================


class StorageError(RuntimeError):
	"""
	Raised when the shared container or configuration file cannot be used.

	Attributes:
		reason: Short machine-readable cause.
		path: Offending path when known.
	"""

	CONTAINER_NOT_FOUND = "container_not_found"
	UNREADABLE = "unreadable"
	UNWRITABLE = "unwritable"
	DECODE_FAILED = "decode_failed"
	INVALID_IMAGE = "invalid_image"
	READ_ONLY = "read_only"

	def __init__(self, message: str, reason: str, path: Path | None = None) -> None:
		super().__init__(message)
		self.reason = reason
		self.path = path


class ExecutionError(RuntimeError):
	"""
	Raised when a shortcut invocation cannot be started or times out.
	"""

	def __init__(self, message: str, argv: list[str] | None = None) -> None:
		super().__init__(message)
		self.argv = list(argv or [])
