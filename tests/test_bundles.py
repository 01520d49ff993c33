#!/usr/bin/env python3
"""
Tests for reading application bundles.
"""

import plistlib
from pathlib import Path

import pytest

from glyph_shortcuts.bundles import read_app_bundle
from glyph_shortcuts.errors import StorageError
from glyph_shortcuts.icons import image_size
from conftest import write_png


def _make_bundle(root: Path, info: dict) -> Path:
	bundle = root / "Demo.app"
	(bundle / "Contents" / "Resources").mkdir(parents=True)
	with (bundle / "Contents" / "Info.plist").open("wb") as handle:
		plistlib.dump(info, handle)
	return bundle


def test_reads_name_id_and_icon(tmp_path: Path):
	bundle = _make_bundle(tmp_path, {
		"CFBundleDisplayName": "Demo Viewer",
		"CFBundleIdentifier": "com.example.demo",
		"CFBundleIconFile": "AppIcon",
	})
	write_png(bundle / "Contents" / "Resources" / "AppIcon.icns", size=(256, 256))
	info = read_app_bundle(bundle)
	assert info.app_name == "Demo Viewer"
	assert info.bundle_identifier == "com.example.demo"
	assert info.icon_png is not None
	assert image_size(info.icon_png) == (128, 128)
	icon = info.application_icon()
	assert icon.image_bytes == info.icon_png
	launch = info.application_launch("--x", open_with_file=False)
	assert launch.app_name == "Demo Viewer"
	assert launch.bundle_identifier == "com.example.demo"
	assert launch.open_with_file is False


def test_missing_plist_falls_back_to_stem(tmp_path: Path):
	bundle = tmp_path / "Plain.app"
	bundle.mkdir()
	info = read_app_bundle(bundle)
	assert info.app_name == "Plain"
	assert info.bundle_identifier == ""
	assert info.icon_png is None


def test_missing_bundle_raises(tmp_path: Path):
	with pytest.raises(StorageError):
		read_app_bundle(tmp_path / "Nope.app")
