#!/usr/bin/env python3
"""
Repo-root runner for glyph_shortcuts.

Examples:
	python run_glyph.py list
	python run_glyph.py add-shell "Open in Terminal" "open -a Terminal %{selectedDirectory}"
	python run_glyph.py run 1a2b3c4d ~/Documents/example.txt --apply
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
	"""
	Run the CLI entrypoint with repo-root import behavior.
	"""
	repo_root = Path(__file__).resolve().parent
	if str(repo_root) not in sys.path:
		sys.path.insert(0, str(repo_root))

	from glyph_shortcuts.cli import main as cli_main

	sys.exit(cli_main())


if __name__ == "__main__":
	main()
