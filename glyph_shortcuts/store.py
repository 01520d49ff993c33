#!/usr/bin/env python3
"""
Shared configuration store read by the app and the Finder extension.

Single-writer convention: only the main application opens a writable store.
The extension opens it with read_only=True and calls load() on every menu
request, so it never caches a stale document for longer than one request.
"""

from __future__ import annotations

# Standard Library
import dataclasses
import logging
import os
import tempfile
import uuid
from pathlib import Path

# local repo modules
from .codec import DecodeError, dumps, loads
from .errors import StorageError
from .icons import IconStore, referenced_icon_files
from .models import CustomIcon, MenuConfiguration, MenuItem, utc_now

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "menu_configuration.json"
ICONS_DIR_NAME = "custom_icons"

#============================================


def _custom_file(item: MenuItem | None) -> str | None:
	if item is not None and isinstance(item.icon, CustomIcon) and item.icon.stored_file_name:
		return item.icon.stored_file_name
	return None


#============================================


class ConfigurationStore:
	"""
	Whole-document JSON store with custom icon lifecycle.

	Every mutator is one load, mutate, save round trip. Documents are
	immutable, so a failed save never alters a document the caller holds.
	"""

	#============================================
	def __init__(
		self,
		container_dir: Path | None,
		config_file_name: str = CONFIG_FILE_NAME,
		icons_dir_name: str = ICONS_DIR_NAME,
		read_only: bool = False,
	) -> None:
		self.container_dir = container_dir
		self.config_file_name = config_file_name
		self.icons_dir_name = icons_dir_name
		self.read_only = read_only

	#============================================
	def _container(self) -> Path:
		if self.container_dir is None:
			raise StorageError("Shared container not found", StorageError.CONTAINER_NOT_FOUND)
		return self.container_dir

	#============================================
	def _check_writable(self) -> None:
		if self.read_only:
			raise StorageError("Store is read-only", StorageError.READ_ONLY)

	#============================================
	@property
	def config_path(self) -> Path:
		return self._container() / self.config_file_name

	#============================================
	@property
	def icons(self) -> IconStore:
		return IconStore(self._container() / self.icons_dir_name)

	#============================================
	def load(self) -> MenuConfiguration:
		"""
		Read the persisted document.

		Returns:
			Loaded document, or a default one when no file exists yet.

		Raises:
			StorageError: If the container is missing or the file is unusable.
		"""
		path = self.config_path
		if not path.exists():
			logger.info("No configuration at %s; using defaults", path)
			return MenuConfiguration()
		try:
			text = path.read_text(encoding="utf-8")
		except UnicodeDecodeError as exc:
			raise StorageError(f"Configuration is not UTF-8: {path}", StorageError.DECODE_FAILED, path) from exc
		except OSError as exc:
			raise StorageError(f"Cannot read {path}: {exc}", StorageError.UNREADABLE, path) from exc
		try:
			return loads(text)
		except DecodeError as exc:
			raise StorageError(f"Cannot decode {path}: {exc}", StorageError.DECODE_FAILED, path) from exc

	#============================================
	def save(self, configuration: MenuConfiguration) -> MenuConfiguration:
		"""
		Atomically replace the persisted document.

		Args:
			configuration: Document to write.

		Returns:
			The document as written, with last_modified refreshed.
		"""
		self._check_writable()
		path = self.config_path
		saved = dataclasses.replace(configuration, last_modified=utc_now())
		text = dumps(saved)
		tmp_name = None
		try:
			path.parent.mkdir(parents=True, exist_ok=True)
			with tempfile.NamedTemporaryFile(
				"w",
				encoding="utf-8",
				dir=path.parent,
				prefix=f".{path.name}.",
				suffix=".tmp",
				delete=False,
			) as handle:
				tmp_name = handle.name
				handle.write(text)
				handle.flush()
				os.fsync(handle.fileno())
			os.replace(tmp_name, path)
			tmp_name = None
		except (OSError, UnicodeEncodeError) as exc:
			raise StorageError(f"Cannot write {path}: {exc}", StorageError.UNWRITABLE, path) from exc
		finally:
			if tmp_name is not None:
				Path(tmp_name).unlink(missing_ok=True)
		logger.info("Saved %d menu items to %s", len(saved.menu_items), path)
		return saved

	#============================================
	def _commit(
		self,
		configuration: MenuConfiguration,
		imported: CustomIcon | None = None,
		released: list[str] | None = None,
	) -> MenuConfiguration:
		"""
		Save, then settle icon ownership.

		A freshly imported icon is deleted if the save fails. Released icons
		are deleted only once the save has succeeded.
		"""
		try:
			saved = self.save(configuration)
		except StorageError:
			if imported is not None:
				self._discard(imported.stored_file_name)
			raise
		for name in released or []:
			self._discard(name)
		return saved

	#============================================
	def _discard(self, stored_file_name: str) -> None:
		try:
			self.icons.delete(stored_file_name)
		except (StorageError, ValueError) as exc:
			logger.warning("Leaving orphaned icon %s: %s", stored_file_name, exc)

	#============================================
	def add_item(self, item: MenuItem, icon_source: Path | None = None) -> MenuConfiguration:
		"""
		Append a record and save.

		Args:
			item: New record.
			icon_source: Optional image to import as the item's custom icon.

		Returns:
			Saved document.
		"""
		self._check_writable()
		configuration = self.load()
		imported = None
		if icon_source is not None:
			imported = self.icons.import_image(icon_source)
			item = dataclasses.replace(item, icon=imported)
		try:
			updated = configuration.add_item(item)
		except ValueError:
			if imported is not None:
				self._discard(imported.stored_file_name)
			raise
		return self._commit(updated, imported=imported)

	#============================================
	def update_item(self, item: MenuItem, icon_source: Path | None = None) -> MenuConfiguration:
		"""
		Replace the record with the same id and save.

		The stored custom icon of the previous version is deleted when the
		new version no longer uses it.
		"""
		self._check_writable()
		configuration = self.load()
		existing = configuration.find(item.id)
		if existing is None:
			raise LookupError(f"No menu item with id {item.id}")
		imported = None
		if icon_source is not None:
			imported = self.icons.import_image(icon_source)
			item = dataclasses.replace(item, icon=imported)
		item = dataclasses.replace(item, created_at=existing.created_at, modified_at=utc_now())
		released = []
		old_file = _custom_file(existing)
		if old_file is not None and old_file != _custom_file(item):
			released.append(old_file)
		return self._commit(configuration.update_item(item), imported=imported, released=released)

	#============================================
	def remove_item(self, item_id: uuid.UUID) -> MenuConfiguration:
		configuration = self.load()
		existing = configuration.find(item_id)
		updated = configuration.remove_item(item_id)
		old_file = _custom_file(existing)
		return self._commit(updated, released=[old_file] if old_file else [])

	#============================================
	def remove_all(self) -> MenuConfiguration:
		configuration = self.load()
		released = sorted(referenced_icon_files(configuration))
		return self._commit(configuration.with_items([]), released=released)

	#============================================
	def toggle_item(self, item_id: uuid.UUID) -> MenuConfiguration:
		configuration = self.load()
		existing = configuration.find(item_id)
		if existing is None:
			raise LookupError(f"No menu item with id {item_id}")
		toggled = existing.updating(is_enabled=not existing.is_enabled)
		return self._commit(configuration.update_item(toggled))

	#============================================
	def move_item(self, item_id: uuid.UUID, new_index: int) -> MenuConfiguration:
		"""
		Move a record to a display position and renumber sort orders.

		Args:
			item_id: Record to move.
			new_index: Target position in display order, clamped to range.

		Returns:
			Saved document.
		"""
		configuration = self.load()
		ordered = configuration.sorted_items()
		index = next((i for i, item in enumerate(ordered) if item.id == item_id), None)
		if index is None:
			raise LookupError(f"No menu item with id {item_id}")
		moving = ordered.pop(index)
		new_index = max(0, min(new_index, len(ordered)))
		ordered.insert(new_index, moving)
		renumbered = [
			item if item.sort_order == position else item.updating(sort_order=position)
			for position, item in enumerate(ordered)
		]
		return self._commit(configuration.with_items(renumbered))

	#============================================
	def sweep_icons(self) -> list[str]:
		"""
		Delete stored icon files no record references.
		"""
		self._check_writable()
		configuration = self.load()
		removed = self.icons.sweep_orphans(referenced_icon_files(configuration))
		if removed:
			logger.info("Swept %d orphaned icons", len(removed))
		return removed
