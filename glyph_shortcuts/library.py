#!/usr/bin/env python3
"""
In-memory shortcut list kept in step with the configuration store.
"""

from __future__ import annotations

# Standard Library
import logging
import uuid
from pathlib import Path
from typing import Callable

# local repo modules
from .errors import StorageError
from .models import MenuConfiguration, MenuItem, sort_for_display
from .store import ConfigurationStore

logger = logging.getLogger(__name__)

#============================================


class ShortcutLibrary:
	"""
	Display list of shortcuts for an editor front end.

	Changes are applied to `items` optimistically. When the store rejects
	the change, `items` rolls back to its previous contents and
	`error_message` explains why, so the list always matches the last
	successful save.
	"""

	#============================================
	def __init__(self, store: ConfigurationStore) -> None:
		self.store = store
		self.items: list[MenuItem] = []
		self.error_message: str | None = None

	#============================================
	def reload(self) -> bool:
		"""
		Re-read the store; fall back to an empty list if it cannot be read.

		Returns:
			True on success.
		"""
		self.error_message = None
		try:
			configuration = self.store.load()
		except StorageError as exc:
			self.error_message = f"Failed to load menu items: {exc}"
			logger.warning(self.error_message)
			self.items = []
			return False
		self.items = configuration.sorted_items()
		return True

	#============================================
	def _apply(
		self,
		label: str,
		optimistic: list[MenuItem],
		action: Callable[[], MenuConfiguration],
	) -> bool:
		snapshot = list(self.items)
		self.items = sort_for_display(optimistic)
		self.error_message = None
		try:
			saved = action()
		except (StorageError, LookupError, ValueError) as exc:
			self.items = snapshot
			self.error_message = f"{label} failed: {exc}"
			logger.warning(self.error_message)
			return False
		self.items = saved.sorted_items()
		return True

	#============================================
	def find(self, item_id: uuid.UUID) -> MenuItem | None:
		return next((item for item in self.items if item.id == item_id), None)

	#============================================
	def add(self, item: MenuItem, icon_source: Path | None = None) -> bool:
		return self._apply(
			"Add menu item",
			self.items + [item],
			lambda: self.store.add_item(item, icon_source=icon_source),
		)

	#============================================
	def update(self, item: MenuItem, icon_source: Path | None = None) -> bool:
		optimistic = [item if existing.id == item.id else existing for existing in self.items]
		return self._apply(
			"Update menu item",
			optimistic,
			lambda: self.store.update_item(item, icon_source=icon_source),
		)

	#============================================
	def delete(self, item_id: uuid.UUID) -> bool:
		optimistic = [existing for existing in self.items if existing.id != item_id]
		return self._apply("Delete menu item", optimistic, lambda: self.store.remove_item(item_id))

	#============================================
	def toggle(self, item_id: uuid.UUID) -> bool:
		optimistic = [
			existing.updating(is_enabled=not existing.is_enabled) if existing.id == item_id else existing
			for existing in self.items
		]
		return self._apply("Toggle menu item", optimistic, lambda: self.store.toggle_item(item_id))

	#============================================
	def delete_all(self) -> bool:
		return self._apply("Delete all menu items", [], self.store.remove_all)

	#============================================
	def move(self, item_id: uuid.UUID, new_index: int) -> bool:
		"""
		Move an item to a display position.

		Args:
			item_id: Item to move.
			new_index: Target position, clamped to range.

		Returns:
			True on success.
		"""
		optimistic = list(self.items)
		index = next((i for i, item in enumerate(optimistic) if item.id == item_id), None)
		if index is not None:
			moving = optimistic.pop(index)
			new_index = max(0, min(new_index, len(optimistic)))
			optimistic.insert(new_index, moving)
			optimistic = [item.updating(sort_order=position) for position, item in enumerate(optimistic)]
		return self._apply("Reorder menu items", optimistic, lambda: self.store.move_item(item_id, new_index))

	#============================================
	def filtered(self, search_text: str) -> list[MenuItem]:
		"""
		Items matching a case-insensitive search on name, notes or action.
		"""
		needle = search_text.strip().casefold()
		if not needle:
			return list(self.items)
		matches: list[MenuItem] = []
		for item in self.items:
			haystacks = [item.name, item.description or "", item.command_text()]
			if any(needle in text.casefold() for text in haystacks):
				matches.append(item)
		return matches
