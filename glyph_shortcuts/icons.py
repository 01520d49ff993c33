#!/usr/bin/env python3
"""
Custom icon assets stored beside the shared configuration file.
"""

from __future__ import annotations

# Standard Library
import io
import logging
import uuid
from pathlib import Path

# PIP3 modules
from PIL import Image, UnidentifiedImageError

# local repo modules
from .errors import StorageError
from .models import CustomIcon, MenuConfiguration

try:
	import pillow_heif
	pillow_heif.register_heif_opener()
except Exception:
	pillow_heif = None

logger = logging.getLogger(__name__)

#============================================


def image_size(data: bytes) -> tuple[int, int]:
	"""
	Pixel dimensions of an encoded image.

	Args:
		data: Encoded image bytes.

	Returns:
		(width, height).

	Raises:
		StorageError: If the bytes are not a readable image.
	"""
	try:
		with Image.open(io.BytesIO(data)) as image:
			image.verify()
			return image.size
	except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
		raise StorageError(f"Not a supported image: {exc}", StorageError.INVALID_IMAGE) from exc


def referenced_icon_files(configuration: MenuConfiguration) -> set[str]:
	"""
	Stored file names owned by records in the document.
	"""
	names: set[str] = set()
	for item in configuration.menu_items:
		if isinstance(item.icon, CustomIcon) and item.icon.stored_file_name:
			names.add(item.icon.stored_file_name)
	return names


#============================================


class IconStore:
	"""
	Directory of imported custom icon images.

	Each stored file is owned by at most one menu item. Files are written at
	save time and removed by the configuration store when ownership ends.
	"""

	#============================================
	def __init__(self, icons_dir: Path) -> None:
		self.icons_dir = icons_dir

	#============================================
	def path_for(self, stored_file_name: str) -> Path:
		"""
		Resolve a stored name inside the icon directory.

		Raises:
			ValueError: If the name would escape the directory.
		"""
		if not stored_file_name or Path(stored_file_name).name != stored_file_name:
			raise ValueError(f"Invalid stored icon name {stored_file_name!r}")
		return self.icons_dir / stored_file_name

	#============================================
	def import_image(self, source: Path, display_name: str | None = None) -> CustomIcon:
		"""
		Copy a user-picked image into the icon directory under a unique name.

		Args:
			source: Image chosen by the user.
			display_name: Optional label, defaults to the file stem.

		Returns:
			CustomIcon owning the new stored file.
		"""
		try:
			data = source.read_bytes()
		except OSError as exc:
			raise StorageError(f"Cannot read image {source}: {exc}", StorageError.UNREADABLE, source) from exc
		width, height = image_size(data)
		stored_file_name = f"{uuid.uuid4()}_{source.name}"
		target = self.path_for(stored_file_name)
		try:
			self.icons_dir.mkdir(parents=True, exist_ok=True)
			target.write_bytes(data)
		except OSError as exc:
			raise StorageError(f"Cannot store icon {target}: {exc}", StorageError.UNWRITABLE, target) from exc
		logger.info("Stored custom icon %s (%dx%d, %d bytes)", stored_file_name, width, height, len(data))
		return CustomIcon(
			source_file_name=source.name,
			stored_file_name=stored_file_name,
			display_name=display_name or source.stem,
			image_bytes=data,
			size_bytes=len(data),
		)

	#============================================
	def read(self, stored_file_name: str) -> bytes:
		path = self.path_for(stored_file_name)
		try:
			return path.read_bytes()
		except OSError as exc:
			raise StorageError(f"Cannot read icon {path}: {exc}", StorageError.UNREADABLE, path) from exc

	#============================================
	def delete(self, stored_file_name: str) -> bool:
		"""
		Remove a stored icon file.

		Args:
			stored_file_name: Name inside the icon directory.

		Returns:
			True if a file was removed, False if it was already gone.
		"""
		path = self.path_for(stored_file_name)
		try:
			path.unlink()
		except FileNotFoundError:
			logger.warning("Custom icon already missing: %s", stored_file_name)
			return False
		except OSError as exc:
			raise StorageError(f"Cannot delete icon {path}: {exc}", StorageError.UNWRITABLE, path) from exc
		logger.info("Deleted custom icon %s", stored_file_name)
		return True

	#============================================
	def stored_files(self) -> list[str]:
		if not self.icons_dir.is_dir():
			return []
		return sorted(path.name for path in self.icons_dir.iterdir() if path.is_file())

	#============================================
	def sweep_orphans(self, referenced: set[str]) -> list[str]:
		"""
		Delete stored files that no record references.

		Args:
			referenced: Stored names still owned by records.

		Returns:
			Names that were deleted.
		"""
		removed: list[str] = []
		for name in self.stored_files():
			if name in referenced:
				continue
			if self.delete(name):
				removed.append(name)
		return removed
