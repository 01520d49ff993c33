#!/usr/bin/env python3
"""
Read display metadata from macOS .app bundles.
"""

from __future__ import annotations

# Standard Library
import io
import logging
import plistlib
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

# PIP3 modules
from PIL import Image, UnidentifiedImageError

# local repo modules
from .errors import StorageError
from .models import ApplicationIcon, ApplicationLaunch

logger = logging.getLogger(__name__)

ICON_PIXELS = 128

#============================================


@dataclass(slots=True)
class AppBundleInfo:
	"""
	Metadata of an application bundle.

	Attributes:
		app_path: Bundle path.
		app_name: Display name.
		bundle_identifier: CFBundleIdentifier, empty if missing.
		icon_png: Icon rendered as PNG, None if unavailable.
		modified_at: Bundle modification time.
	"""
	app_path: str
	app_name: str
	bundle_identifier: str
	icon_png: bytes | None
	modified_at: datetime

	#============================================
	def application_icon(self) -> ApplicationIcon:
		return ApplicationIcon(
			app_path=self.app_path,
			app_name=self.app_name,
			bundle_identifier=self.bundle_identifier,
			image_bytes=self.icon_png,
			app_modified_at=self.modified_at,
		)

	#============================================
	def application_launch(self, custom_parameters: str = "", **options) -> ApplicationLaunch:
		return ApplicationLaunch(
			app_path=self.app_path,
			app_name=self.app_name,
			custom_parameters=custom_parameters,
			bundle_identifier=self.bundle_identifier or None,
			**options,
		)


#============================================


def _read_info_plist(bundle: Path) -> dict:
	plist_path = bundle / "Contents" / "Info.plist"
	if not plist_path.exists():
		return {}
	try:
		with plist_path.open("rb") as handle:
			return plistlib.load(handle)
	except (OSError, plistlib.InvalidFileException, ValueError) as exc:
		logger.warning("Unreadable Info.plist in %s: %s", bundle, exc)
		return {}


def _render_icon(bundle: Path, icon_file: str | None) -> bytes | None:
	"""
	Convert the bundle's .icns file to PNG bytes.
	"""
	if not icon_file:
		return None
	name = icon_file if icon_file.endswith(".icns") else f"{icon_file}.icns"
	icns_path = bundle / "Contents" / "Resources" / name
	if not icns_path.exists():
		return None
	try:
		with Image.open(icns_path) as image:
			image.load()
			image.thumbnail((ICON_PIXELS, ICON_PIXELS))
			buffer = io.BytesIO()
			image.save(buffer, format="PNG")
			return buffer.getvalue()
	except (UnidentifiedImageError, OSError, ValueError) as exc:
		logger.warning("Cannot render icon %s: %s", icns_path, exc)
		return None


#============================================


def read_app_bundle(app_path: Path | str) -> AppBundleInfo:
	"""
	Collect name, bundle id and icon for an application.

	Args:
		app_path: Path to the .app bundle.

	Returns:
		AppBundleInfo.

	Raises:
		StorageError: If the bundle does not exist.
	"""
	bundle = Path(app_path).expanduser()
	if not bundle.exists():
		raise StorageError(f"Application not found: {bundle}", StorageError.UNREADABLE, bundle)
	info = _read_info_plist(bundle)
	app_name = str(info.get("CFBundleDisplayName") or info.get("CFBundleName") or bundle.stem)
	modified_at = datetime.fromtimestamp(bundle.stat().st_mtime, tz=timezone.utc).replace(microsecond=0)
	return AppBundleInfo(
		app_path=str(bundle),
		app_name=app_name,
		bundle_identifier=str(info.get("CFBundleIdentifier") or ""),
		icon_png=_render_icon(bundle, info.get("CFBundleIconFile")),
		modified_at=modified_at,
	)
