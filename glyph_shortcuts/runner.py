#!/usr/bin/env python3
"""
Turn a shortcut and a selected path into a process invocation.
"""

from __future__ import annotations

# Standard Library
import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

# local repo modules
from .errors import ExecutionError
from .models import ApplicationLaunch, MenuItem, ShellCommand
from .variables import substitute

logger = logging.getLogger(__name__)

SHELL = "/bin/sh"
OPEN_COMMAND = "open"

#============================================


@dataclass(slots=True)
class Invocation:
	"""
	Fully substituted process request.

	Attributes:
		argv: Program and arguments.
		cwd: Working directory or None.
		timeout: Seconds to wait, None for no limit.
		background: Start without waiting.
	"""
	argv: list[str]
	cwd: str | None = None
	timeout: float | None = None
	background: bool = False

	def display(self) -> str:
		return shlex.join(self.argv)


#============================================


def build_invocation(
	item: MenuItem,
	selected_path: Path | str,
	default_timeout: float | None = None,
) -> Invocation:
	"""
	Build the process request for a shortcut.

	Args:
		item: Shortcut to run.
		selected_path: Finder selection used for substitution.
		default_timeout: Used when the shortcut has no positive timeout.

	Returns:
		Invocation ready to run.
	"""
	match item.execution:
		case ShellCommand() as shell:
			cwd = None
			if shell.working_directory:
				cwd = substitute(shell.working_directory, selected_path)
			timeout = shell.timeout_seconds if shell.timeout_seconds > 0 else default_timeout
			return Invocation(
				argv=[SHELL, "-c", substitute(shell.command, selected_path)],
				cwd=cwd,
				timeout=timeout,
				background=shell.run_in_background,
			)
		case ApplicationLaunch() as launch:
			argv = [OPEN_COMMAND]
			if not launch.activate_app:
				argv.append("-g")
			argv.extend(["-a", launch.app_path])
			if launch.open_with_file:
				argv.append(str(selected_path))
			params = substitute(launch.custom_parameters, selected_path).strip()
			if params:
				try:
					extra = shlex.split(params)
				except ValueError as exc:
					raise ExecutionError(f"Cannot parse parameters {params!r}: {exc}", argv) from exc
				argv.append("--args")
				argv.extend(extra)
			return Invocation(argv=argv, timeout=default_timeout)
	raise TypeError(f"Unknown execution descriptor {item.execution!r}")


#============================================


def run_invocation(invocation: Invocation) -> subprocess.CompletedProcess | None:
	"""
	Execute an invocation.

	Args:
		invocation: Request from build_invocation.

	Returns:
		CompletedProcess, or None for background runs.

	Raises:
		ExecutionError: If the program cannot start or exceeds its timeout.
	"""
	logger.info("Running %s", invocation.display())
	if invocation.background:
		try:
			subprocess.Popen(
				invocation.argv,
				cwd=invocation.cwd,
				stdout=subprocess.DEVNULL,
				stderr=subprocess.DEVNULL,
				start_new_session=True,
			)
		except OSError as exc:
			raise ExecutionError(f"Cannot start {invocation.argv[0]}: {exc}", invocation.argv) from exc
		return None
	try:
		return subprocess.run(
			invocation.argv,
			cwd=invocation.cwd,
			capture_output=True,
			text=True,
			timeout=invocation.timeout,
			check=False,
		)
	except subprocess.TimeoutExpired as exc:
		raise ExecutionError(f"Timed out after {invocation.timeout}s", invocation.argv) from exc
	except OSError as exc:
		raise ExecutionError(f"Cannot start {invocation.argv[0]}: {exc}", invocation.argv) from exc
