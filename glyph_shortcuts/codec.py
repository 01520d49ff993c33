#!/usr/bin/env python3
"""
JSON wire format for the shared configuration document.

Keys are camelCase and stable. Tagged unions are single-key objects, for
example {"shellCommand": {...}}. Dates are ISO-8601 UTC, binary payloads base64.
"""

from __future__ import annotations

# Standard Library
import base64
import json
import uuid
from datetime import datetime, timezone

# local repo modules
from .models import (
	ApplicationIcon,
	ApplicationLaunch,
	ApplicationScope,
	CustomIcon,
	FileTypeFilter,
	GlobalSettings,
	IconCategory,
	MenuConfiguration,
	MenuItem,
	ShellCommand,
	SystemIcon,
)

#============================================


class DecodeError(ValueError):
	"""
	Raised when a document does not match the expected schema.
	"""


#============================================
# Scalars
#============================================


def format_date(value: datetime) -> str:
	return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_date(text: str) -> datetime:
	if not isinstance(text, str):
		raise DecodeError(f"Expected ISO-8601 date string, got {text!r}")
	try:
		value = datetime.fromisoformat(text.replace("Z", "+00:00"))
	except ValueError as exc:
		raise DecodeError(f"Invalid date {text!r}") from exc
	if value.tzinfo is None:
		value = value.replace(tzinfo=timezone.utc)
	return value


def _encode_bytes(data: bytes | None) -> str | None:
	if data is None:
		return None
	return base64.b64encode(data).decode("ascii")


def _decode_bytes(text: str) -> bytes:
	try:
		return base64.b64decode(text, validate=True)
	except (ValueError, TypeError) as exc:
		raise DecodeError("Invalid base64 payload") from exc


def _require(data: dict, key: str, kind: type | tuple[type, ...]):
	if not isinstance(data, dict):
		raise DecodeError(f"Expected object while reading {key!r}")
	if key not in data:
		raise DecodeError(f"Missing key {key!r}")
	value = data[key]
	# bool is a subclass of int; reject it where a number is expected
	if isinstance(value, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
		raise DecodeError(f"Key {key!r} has wrong type")
	if not isinstance(value, kind):
		raise DecodeError(f"Key {key!r} has wrong type")
	return value


def _optional(data: dict, key: str, kind: type | tuple[type, ...], default=None):
	if data.get(key) is None:
		return default
	return _require(data, key, kind)


def _stored_name(data: dict, key: str) -> str:
	name = _require(data, key, str)
	# stored icons live directly in the icon directory
	if name in ("", ".", "..") or "/" in name or "\\" in name:
		raise DecodeError(f"Key {key!r} is not a plain file name: {name!r}")
	return name


def _seconds(data: dict, key: str, default: float) -> float:
	value = _optional(data, key, (int, float), default)
	try:
		return float(value)
	except OverflowError as exc:
		raise DecodeError(f"Key {key!r} is out of range") from exc


def _parse_uuid(text) -> uuid.UUID:
	try:
		return uuid.UUID(str(text))
	except ValueError as exc:
		raise DecodeError(f"Invalid id {text!r}") from exc


def _single_tag(data, what: str) -> tuple[str, dict]:
	if not isinstance(data, dict) or len(data) != 1:
		raise DecodeError(f"{what} must be an object with exactly one tag")
	tag, payload = next(iter(data.items()))
	if not isinstance(payload, dict):
		raise DecodeError(f"{what} payload for {tag!r} must be an object")
	return tag, payload


#============================================
# Execution descriptor
#============================================


def encode_execution(execution) -> dict:
	match execution:
		case ShellCommand():
			payload = {
				"command": execution.command,
				"workingDirectory": execution.working_directory,
				"runInBackground": execution.run_in_background,
				"timeoutSeconds": execution.timeout_seconds,
			}
		case ApplicationLaunch():
			payload = {
				"appPath": execution.app_path,
				"appName": execution.app_name,
				"customParameters": execution.custom_parameters,
				"openWithFile": execution.open_with_file,
				"activateApp": execution.activate_app,
				"bundleIdentifier": execution.bundle_identifier,
			}
		case _:
			raise TypeError(f"Unknown execution descriptor {execution!r}")
	return {execution.kind: payload}


def decode_execution(data) -> ShellCommand | ApplicationLaunch:
	tag, payload = _single_tag(data, "executionType")
	if tag == ShellCommand.kind:
		return ShellCommand(
			command=_require(payload, "command", str),
			working_directory=_optional(payload, "workingDirectory", str),
			run_in_background=_optional(payload, "runInBackground", bool, False),
			timeout_seconds=_seconds(payload, "timeoutSeconds", 30.0),
		)
	if tag == ApplicationLaunch.kind:
		return ApplicationLaunch(
			app_path=_require(payload, "appPath", str),
			app_name=_require(payload, "appName", str),
			custom_parameters=_optional(payload, "customParameters", str, ""),
			open_with_file=_optional(payload, "openWithFile", bool, True),
			activate_app=_optional(payload, "activateApp", bool, True),
			bundle_identifier=_optional(payload, "bundleIdentifier", str),
		)
	raise DecodeError(f"Unknown execution type {tag!r}")


#============================================
# Icon descriptor
#============================================


def encode_icon(icon) -> dict:
	match icon:
		case SystemIcon():
			payload = {
				"symbolName": icon.symbol_name,
				"displayName": icon.display_name,
				"category": icon.category.value,
				"colorHex": icon.color_hex,
			}
		case ApplicationIcon():
			payload = {
				"appPath": icon.app_path,
				"appName": icon.app_name,
				"bundleIdentifier": icon.bundle_identifier,
				"iconDataBase64": _encode_bytes(icon.image_bytes),
				"appModifiedDate": format_date(icon.app_modified_at) if icon.app_modified_at else None,
			}
		case CustomIcon():
			payload = {
				"id": str(icon.id),
				"fileName": icon.source_file_name,
				"storedFileName": icon.stored_file_name,
				"displayName": icon.display_name,
				"iconDataBase64": _encode_bytes(icon.image_bytes),
				"fileSizeBytes": icon.size_bytes,
				"dateAdded": format_date(icon.added_at),
			}
		case _:
			raise TypeError(f"Unknown icon descriptor {icon!r}")
	return {icon.kind: payload}


def decode_icon(data) -> SystemIcon | ApplicationIcon | CustomIcon:
	tag, payload = _single_tag(data, "icon")
	if tag == SystemIcon.kind:
		category_text = _optional(payload, "category", str, IconCategory.CUSTOM.value)
		try:
			category = IconCategory(category_text)
		except ValueError as exc:
			raise DecodeError(f"Unknown icon category {category_text!r}") from exc
		return SystemIcon(
			symbol_name=_require(payload, "symbolName", str),
			display_name=_require(payload, "displayName", str),
			category=category,
			color_hex=_optional(payload, "colorHex", str),
		)
	if tag == ApplicationIcon.kind:
		image_text = _optional(payload, "iconDataBase64", str)
		modified_text = _optional(payload, "appModifiedDate", str)
		return ApplicationIcon(
			app_path=_require(payload, "appPath", str),
			app_name=_require(payload, "appName", str),
			bundle_identifier=_optional(payload, "bundleIdentifier", str, ""),
			image_bytes=_decode_bytes(image_text) if image_text is not None else None,
			app_modified_at=parse_date(modified_text) if modified_text else None,
		)
	if tag == CustomIcon.kind:
		return CustomIcon(
			id=_parse_uuid(_require(payload, "id", str)),
			source_file_name=_require(payload, "fileName", str),
			stored_file_name=_stored_name(payload, "storedFileName"),
			display_name=_require(payload, "displayName", str),
			image_bytes=_decode_bytes(_optional(payload, "iconDataBase64", str, "")),
			size_bytes=_require(payload, "fileSizeBytes", int),
			added_at=parse_date(_require(payload, "dateAdded", str)),
		)
	raise DecodeError(f"Unknown icon type {tag!r}")


#============================================
# Scope, item, settings, document
#============================================


def encode_scope(scope: ApplicationScope) -> dict:
	return {
		"showOnFolders": scope.show_on_folders,
		"showOnFiles": scope.show_on_files,
		"fileTypeFilter": scope.file_type_filter.value,
		"allowedExtensions": list(scope.allowed_extensions),
	}


def decode_scope(data) -> ApplicationScope:
	if data is None:
		return ApplicationScope()
	filter_text = _optional(data, "fileTypeFilter", str, FileTypeFilter.ALL_FILES.value)
	try:
		file_type_filter = FileTypeFilter(filter_text)
	except ValueError as exc:
		raise DecodeError(f"Unknown file type filter {filter_text!r}") from exc
	extensions = _optional(data, "allowedExtensions", list, [])
	if not all(isinstance(ext, str) for ext in extensions):
		raise DecodeError("allowedExtensions must be a list of strings")
	return ApplicationScope(
		show_on_folders=_optional(data, "showOnFolders", bool, True),
		show_on_files=_optional(data, "showOnFiles", bool, True),
		file_type_filter=file_type_filter,
		allowed_extensions=tuple(extensions),
	)


def encode_item(item: MenuItem) -> dict:
	return {
		"id": str(item.id),
		"name": item.name,
		"icon": encode_icon(item.icon),
		"executionType": encode_execution(item.execution),
		"isEnabled": item.is_enabled,
		"applicationScope": encode_scope(item.scope),
		"sortOrder": item.sort_order,
		"createdAt": format_date(item.created_at),
		"modifiedAt": format_date(item.modified_at),
		"description": item.description,
	}


def decode_item(data) -> MenuItem:
	return MenuItem(
		id=_parse_uuid(_require(data, "id", str)),
		name=_require(data, "name", str),
		icon=decode_icon(_require(data, "icon", dict)),
		execution=decode_execution(_require(data, "executionType", dict)),
		is_enabled=_optional(data, "isEnabled", bool, True),
		scope=decode_scope(_optional(data, "applicationScope", dict)),
		sort_order=_optional(data, "sortOrder", int, 0),
		created_at=parse_date(_require(data, "createdAt", str)),
		modified_at=parse_date(_require(data, "modifiedAt", str)),
		description=_optional(data, "description", str),
	)


def encode_settings(settings: GlobalSettings) -> dict:
	return {
		"showIcons": settings.show_icons,
		"maxMenuItems": settings.max_menu_items,
		"showKeyboardShortcuts": settings.show_keyboard_shortcuts,
		"defaultTimeoutSeconds": settings.default_timeout_seconds,
	}


def decode_settings(data) -> GlobalSettings:
	if data is None:
		return GlobalSettings()
	return GlobalSettings(
		show_icons=_optional(data, "showIcons", bool, True),
		max_menu_items=_optional(data, "maxMenuItems", int, 20),
		show_keyboard_shortcuts=_optional(data, "showKeyboardShortcuts", bool, False),
		default_timeout_seconds=_seconds(data, "defaultTimeoutSeconds", 30.0),
	)


def encode_configuration(configuration: MenuConfiguration) -> dict:
	"""
	Convert a document to JSON-ready primitives.

	Args:
		configuration: Document to encode.

	Returns:
		Dictionary with version, menuItems, settings, lastModified.
	"""
	return {
		"version": configuration.version,
		"menuItems": [encode_item(item) for item in configuration.menu_items],
		"settings": encode_settings(configuration.settings),
		"lastModified": format_date(configuration.last_modified),
	}


def decode_configuration(data) -> MenuConfiguration:
	"""
	Build a document from decoded JSON.

	Args:
		data: Parsed JSON object.

	Returns:
		MenuConfiguration instance.

	Raises:
		DecodeError: If the data does not match the schema.
	"""
	if not isinstance(data, dict):
		raise DecodeError("Configuration root must be an object")
	items = [decode_item(entry) for entry in _require(data, "menuItems", list)]
	seen: set[uuid.UUID] = set()
	for item in items:
		if item.id in seen:
			raise DecodeError(f"Duplicate menu item id {item.id}")
		seen.add(item.id)
	return MenuConfiguration(
		version=_require(data, "version", str),
		menu_items=tuple(items),
		settings=decode_settings(_optional(data, "settings", dict)),
		last_modified=parse_date(_require(data, "lastModified", str)),
	)


def dumps(configuration: MenuConfiguration) -> str:
	return json.dumps(encode_configuration(configuration), indent=2, ensure_ascii=False)


def loads(text: str) -> MenuConfiguration:
	"""
	Parse document text.

	Raises:
		DecodeError: On malformed JSON or schema mismatch.
	"""
	try:
		data = json.loads(text)
	except json.JSONDecodeError as exc:
		raise DecodeError(f"Malformed JSON: {exc}") from exc
	return decode_configuration(data)
