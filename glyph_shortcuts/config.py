#!/usr/bin/env python3
from __future__ import annotations

# Standard Library
from dataclasses import dataclass
from pathlib import Path
import json
import os
import sys

# PIP3 modules
import yaml

# local repo modules
from .store import CONFIG_FILE_NAME, ICONS_DIR_NAME, ConfigurationStore

#============================================

DEFAULT_APP_GROUP_ID = "group.com.dokalab.Glyph"
CONTAINER_ENV_VAR = "GLYPH_CONTAINER_DIR"

#============================================


@dataclass(slots=True)
class AppConfig:
	"""
	Runtime configuration settings.

	Attributes:
		container_dir: Explicit shared container directory.
		app_group_id: App group used to locate the container on macOS.
		config_file_name: Name of the JSON document in the container.
		icons_dir_name: Name of the custom icon directory in the container.
		config_path: Optional user config path.
		verbose: Verbose logging.
	"""
	container_dir: Path | None = None
	app_group_id: str = DEFAULT_APP_GROUP_ID
	config_file_name: str = CONFIG_FILE_NAME
	icons_dir_name: str = ICONS_DIR_NAME
	config_path: Path | None = None
	verbose: bool = False

	#============================================
	def resolved_container(self) -> Path | None:
		"""
		Locate the shared container.

		Returns:
			Container path, or None when it cannot be resolved.
		"""
		if self.container_dir is not None:
			return self.container_dir.expanduser()
		env_value = os.environ.get(CONTAINER_ENV_VAR)
		if env_value:
			return Path(env_value).expanduser()
		return default_container_dir(self.app_group_id)

	#============================================
	def build_store(self, read_only: bool = False) -> ConfigurationStore:
		return ConfigurationStore(
			self.resolved_container(),
			config_file_name=self.config_file_name,
			icons_dir_name=self.icons_dir_name,
			read_only=read_only,
		)


#============================================


def default_container_dir(app_group_id: str) -> Path | None:
	"""
	App group container path on macOS.

	Args:
		app_group_id: Application group identifier.

	Returns:
		Path under ~/Library/Group Containers, or None off macOS.
	"""
	if sys.platform != "darwin":
		return None
	return Path.home() / "Library" / "Group Containers" / app_group_id


#============================================


def load_user_config(config_path: Path | None) -> dict:
	"""
	Load user configuration from yaml or json.

	Args:
		config_path: Path to config file.

	Returns:
		Dictionary of loaded values or empty dict.
	"""
	if not config_path:
		return {}
	if not config_path.exists():
		return {}
	if config_path.suffix.lower() in {".yml", ".yaml"}:
		with config_path.open("r", encoding="utf-8") as handle:
			loaded = yaml.safe_load(handle)
			return loaded or {}
	with config_path.open("r", encoding="utf-8") as handle:
		return json.load(handle)


#============================================


def apply_user_config(config: AppConfig, user_cfg: dict) -> AppConfig:
	"""
	Copy recognized keys from a user config onto the runtime config.

	Args:
		config: Runtime configuration to update.
		user_cfg: Loaded user config.

	Returns:
		The same AppConfig.
	"""
	if user_cfg.get("container_dir") and config.container_dir is None:
		config.container_dir = Path(str(user_cfg["container_dir"])).expanduser()
	if user_cfg.get("app_group_id"):
		config.app_group_id = str(user_cfg["app_group_id"])
	if user_cfg.get("config_file_name"):
		config.config_file_name = str(user_cfg["config_file_name"])
	if user_cfg.get("icons_dir_name"):
		config.icons_dir_name = str(user_cfg["icons_dir_name"])
	if "verbose" in user_cfg:
		config.verbose = config.verbose or bool(user_cfg.get("verbose"))
	return config
