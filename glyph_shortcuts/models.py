#!/usr/bin/env python3
"""
Data model for Finder shortcuts: records, execution and icon descriptors, scope rules.
"""

from __future__ import annotations

# Standard Library
import dataclasses
import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

#============================================

CONFIG_FORMAT_VERSION = "1.0"


def utc_now() -> datetime:
	"""
	Current UTC time truncated to whole seconds, the precision stored on disk.

	Returns:
		Timezone-aware datetime.
	"""
	return datetime.now(timezone.utc).replace(microsecond=0)


#============================================
# Execution descriptors
#============================================


@dataclass(frozen=True, slots=True)
class ShellCommand:
	"""
	Run a shell command against the selection.

	Attributes:
		command: Command text, may contain placeholder tokens.
		working_directory: Optional directory, may contain placeholder tokens.
		run_in_background: Do not wait for the command to finish.
		timeout_seconds: Time limit the runner enforces.
	"""
	command: str
	working_directory: str | None = None
	run_in_background: bool = False
	timeout_seconds: float = 30.0

	kind = "shellCommand"
	display_name = "Shell Command"
	symbol_name = "terminal"


@dataclass(frozen=True, slots=True)
class ApplicationLaunch:
	"""
	Open an application, optionally handing it the selection.

	Attributes:
		app_path: Path to the .app bundle.
		app_name: Display name of the application.
		custom_parameters: Extra arguments, may contain placeholder tokens.
		open_with_file: Pass the selected path to the application.
		activate_app: Bring the application to the foreground.
		bundle_identifier: Optional bundle id used for verification.
	"""
	app_path: str
	app_name: str
	custom_parameters: str = ""
	open_with_file: bool = True
	activate_app: bool = True
	bundle_identifier: str | None = None

	kind = "applicationLaunch"
	display_name = "Application Launch"
	symbol_name = "app.badge"


ExecutionDescriptor = ShellCommand | ApplicationLaunch


#============================================
# Icon descriptors
#============================================


class IconCategory(enum.Enum):
	FILE = "file"
	DEVELOPMENT = "development"
	UTILITY = "utility"
	MEDIA = "media"
	SYSTEM = "system"
	CUSTOM = "custom"

	@property
	def display_name(self) -> str:
		return self.value.capitalize()

	@property
	def symbol_name(self) -> str:
		return _CATEGORY_SYMBOLS[self]


_CATEGORY_SYMBOLS = {
	IconCategory.FILE: "doc",
	IconCategory.DEVELOPMENT: "hammer",
	IconCategory.UTILITY: "wrench.and.screwdriver",
	IconCategory.MEDIA: "play.rectangle",
	IconCategory.SYSTEM: "gear",
	IconCategory.CUSTOM: "star",
}


@dataclass(frozen=True, slots=True)
class SystemIcon:
	"""
	Symbolic icon drawn by the OS (an SF Symbol name).
	"""
	symbol_name: str
	display_name: str
	category: IconCategory = IconCategory.CUSTOM
	color_hex: str | None = None

	kind = "system"


@dataclass(frozen=True, slots=True)
class ApplicationIcon:
	"""
	Icon taken from an application bundle.

	Attributes:
		app_path: Bundle the icon was read from.
		app_name: Application display name.
		bundle_identifier: Bundle id of the application.
		image_bytes: Cached PNG payload, if extracted.
		app_modified_at: Bundle mtime when the cache was taken.
	"""
	app_path: str
	app_name: str
	bundle_identifier: str
	image_bytes: bytes | None = None
	app_modified_at: datetime | None = None

	kind = "application"

	@property
	def display_name(self) -> str:
		return self.app_name


@dataclass(frozen=True, slots=True)
class CustomIcon:
	"""
	User-provided image copied into the private icon directory.

	Attributes:
		id: Identifier of the icon asset.
		source_file_name: File name the user picked.
		stored_file_name: Generated name inside the icon directory.
		display_name: Label shown in the editor.
		image_bytes: Inline copy of the image.
		size_bytes: Size of the original file.
		added_at: When the image was imported.
	"""
	source_file_name: str
	stored_file_name: str
	display_name: str
	image_bytes: bytes
	size_bytes: int
	id: uuid.UUID = field(default_factory=uuid.uuid4)
	added_at: datetime = field(default_factory=utc_now)

	kind = "custom"


IconDescriptor = SystemIcon | ApplicationIcon | CustomIcon

DEFAULT_SYSTEM_ICONS: tuple[SystemIcon, ...] = (
	SystemIcon("folder", "Folder", IconCategory.FILE),
	SystemIcon("doc", "Document", IconCategory.FILE),
	SystemIcon("archivebox", "Archive", IconCategory.FILE),
	SystemIcon("terminal", "Terminal", IconCategory.DEVELOPMENT),
	SystemIcon("hammer", "Build", IconCategory.DEVELOPMENT),
	SystemIcon("gearshape.2", "Settings", IconCategory.DEVELOPMENT),
	SystemIcon("trash", "Trash", IconCategory.UTILITY),
	SystemIcon("scissors", "Cut", IconCategory.UTILITY),
	SystemIcon("doc.on.clipboard", "Copy", IconCategory.UTILITY),
	SystemIcon("play.rectangle", "Play", IconCategory.MEDIA),
	SystemIcon("photo", "Image", IconCategory.MEDIA),
	SystemIcon("music.note", "Music", IconCategory.MEDIA),
	SystemIcon("gear", "System", IconCategory.SYSTEM),
	SystemIcon("info.circle", "Info", IconCategory.SYSTEM),
	SystemIcon("lock", "Security", IconCategory.SYSTEM),
)


def find_system_icon(symbol_name: str) -> SystemIcon | None:
	"""
	Look up a catalogue icon by symbol name.
	"""
	for icon in DEFAULT_SYSTEM_ICONS:
		if icon.symbol_name == symbol_name:
			return icon
	return None


#============================================
# Scope rule
#============================================


class FileTypeFilter(enum.Enum):
	ALL_FILES = "all"
	SPECIFIC_EXTENSIONS = "extensions"

	@property
	def display_name(self) -> str:
		if self is FileTypeFilter.ALL_FILES:
			return "All Files"
		return "Specific Extensions Only"


@dataclass(frozen=True, slots=True)
class ApplicationScope:
	"""
	Decides whether a shortcut is offered for a file or folder.

	Attributes:
		show_on_folders: Offer the shortcut on folders.
		show_on_files: Offer the shortcut on files.
		file_type_filter: All files or an extension allow-list.
		allowed_extensions: Extensions without dots, compared case-insensitively.
	"""
	show_on_folders: bool = True
	show_on_files: bool = True
	file_type_filter: FileTypeFilter = FileTypeFilter.ALL_FILES
	allowed_extensions: tuple[str, ...] = ()

	#============================================
	def applies_to(self, path: Path | str, is_directory: bool) -> bool:
		"""
		Check whether this scope covers the given item.

		Args:
			path: File or folder path.
			is_directory: True when the item is a folder.

		Returns:
			True if the shortcut should be shown.
		"""
		if is_directory:
			return self.show_on_folders
		if not self.show_on_files:
			return False
		if self.file_type_filter is FileTypeFilter.ALL_FILES:
			return True
		ext = Path(path).suffix.lstrip(".").lower()
		return any(allowed.lower() == ext for allowed in self.allowed_extensions)


def parse_extension_list(text: str) -> tuple[str, ...]:
	"""
	Split a comma-separated extension list from the editor.

	Args:
		text: Raw text such as "pdf, .jpg,png".

	Returns:
		Tuple of extensions without dots, blanks removed.
	"""
	cleaned: list[str] = []
	for chunk in text.split(","):
		ext = chunk.strip().lstrip(".")
		if ext:
			cleaned.append(ext)
	return tuple(cleaned)


#============================================
# Menu item record
#============================================

_FROZEN_ITEM_FIELDS = {"id", "created_at", "modified_at"}


@dataclass(frozen=True, slots=True)
class MenuItem:
	"""
	One user-defined Finder shortcut.

	Attributes:
		name: Label shown in the context menu.
		icon: Icon descriptor.
		execution: What the shortcut does.
		is_enabled: Disabled items are kept but never shown.
		scope: Which files and folders show the item.
		sort_order: Ascending display order, ties keep insertion order.
		description: Optional notes.
		id: Immutable identifier.
		created_at: Creation time.
		modified_at: Refreshed on every change.
	"""
	name: str
	icon: IconDescriptor
	execution: ExecutionDescriptor
	is_enabled: bool = True
	scope: ApplicationScope = field(default_factory=ApplicationScope)
	sort_order: int = 0
	description: str | None = None
	id: uuid.UUID = field(default_factory=uuid.uuid4)
	created_at: datetime = field(default_factory=utc_now)
	modified_at: datetime = field(default_factory=utc_now)

	#============================================
	def updating(self, **changes) -> MenuItem:
		"""
		Copy the item with changes applied and modified_at refreshed.

		Args:
			**changes: Field values to replace.

		Returns:
			New MenuItem with the same id and created_at.
		"""
		frozen = _FROZEN_ITEM_FIELDS.intersection(changes)
		if frozen:
			raise ValueError(f"Cannot change {', '.join(sorted(frozen))} on a menu item")
		return dataclasses.replace(self, modified_at=utc_now(), **changes)

	#============================================
	def command_text(self) -> str:
		"""
		Searchable text for the action of this item.
		"""
		match self.execution:
			case ShellCommand(command=command):
				return command
			case ApplicationLaunch(app_name=app_name, custom_parameters=params):
				return f"{app_name} {params}"
		raise TypeError(f"Unknown execution descriptor {self.execution!r}")


def sort_for_display(items) -> list[MenuItem]:
	"""
	Stable sort by sort_order.
	"""
	return sorted(items, key=lambda item: item.sort_order)


#============================================
# Configuration document
#============================================


@dataclass(frozen=True, slots=True)
class GlobalSettings:
	show_icons: bool = True
	max_menu_items: int = 20
	show_keyboard_shortcuts: bool = False
	default_timeout_seconds: float = 30.0


@dataclass(frozen=True, slots=True)
class MenuConfiguration:
	"""
	Top-level persisted document.

	Attributes:
		version: Format version string.
		menu_items: Records in insertion order.
		settings: Global settings.
		last_modified: Time of the last save.
	"""
	version: str = CONFIG_FORMAT_VERSION
	menu_items: tuple[MenuItem, ...] = ()
	settings: GlobalSettings = field(default_factory=GlobalSettings)
	last_modified: datetime = field(default_factory=utc_now)

	#============================================
	def find(self, item_id: uuid.UUID) -> MenuItem | None:
		for item in self.menu_items:
			if item.id == item_id:
				return item
		return None

	#============================================
	def add_item(self, item: MenuItem) -> MenuConfiguration:
		"""
		Append a record.

		Raises:
			ValueError: If the id is already present.
		"""
		if self.find(item.id) is not None:
			raise ValueError(f"Menu item {item.id} already exists")
		return dataclasses.replace(self, menu_items=self.menu_items + (item,))

	#============================================
	def update_item(self, item: MenuItem) -> MenuConfiguration:
		"""
		Replace the record with the same id.

		Raises:
			LookupError: If no record has that id.
		"""
		if self.find(item.id) is None:
			raise LookupError(f"No menu item with id {item.id}")
		items = tuple(item if existing.id == item.id else existing for existing in self.menu_items)
		return dataclasses.replace(self, menu_items=items)

	#============================================
	def remove_item(self, item_id: uuid.UUID) -> MenuConfiguration:
		"""
		Drop the record with the given id.

		Raises:
			LookupError: If no record has that id.
		"""
		if self.find(item_id) is None:
			raise LookupError(f"No menu item with id {item_id}")
		items = tuple(existing for existing in self.menu_items if existing.id != item_id)
		return dataclasses.replace(self, menu_items=items)

	#============================================
	def with_items(self, items) -> MenuConfiguration:
		return dataclasses.replace(self, menu_items=tuple(items))

	#============================================
	def sorted_items(self) -> list[MenuItem]:
		return sort_for_display(self.menu_items)

	#============================================
	def enabled_items(self) -> list[MenuItem]:
		"""
		Enabled records in display order.
		"""
		return [item for item in self.sorted_items() if item.is_enabled]
