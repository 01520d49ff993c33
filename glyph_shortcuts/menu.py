#!/usr/bin/env python3
"""
Choose the shortcuts Finder should show for a selection.
"""

from __future__ import annotations

# Standard Library
from pathlib import Path

# local repo modules
from .models import MenuConfiguration, MenuItem

#============================================


def build_menu(configuration: MenuConfiguration, selected_paths: list[Path]) -> list[MenuItem]:
	"""
	Resolve the context menu for the current Finder selection.

	Args:
		configuration: Freshly loaded document.
		selected_paths: Selected files and folders.

	Returns:
		Enabled items, in display order, whose scope covers every selected
		path, capped at settings.max_menu_items.
	"""
	if not selected_paths:
		return []
	kinds = [(path, path.is_dir()) for path in selected_paths]
	entries: list[MenuItem] = []
	for item in configuration.enabled_items():
		if all(item.scope.applies_to(path, is_dir) for path, is_dir in kinds):
			entries.append(item)
	limit = max(configuration.settings.max_menu_items, 0)
	return entries[:limit]
