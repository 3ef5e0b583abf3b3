"""
Configuration loader for versionmap.

This module provides functionality for loading the branch and tag
configuration from YAML files.

"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from xdg.BaseDirectory import xdg_config_home

from versionmap.config.config_schema import AppConfigSchema
from versionmap.config.defaults import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

LOCAL_CONFIG_NAME = ".versionmap.yml"


class ConfigError(Exception):
	"""Exception raised for configuration errors."""


class ConfigFileNotFoundError(ConfigError):
	"""Exception raised when configuration file is not found."""


class ConfigParsingError(ConfigError):
	"""Exception raised when configuration file cannot be parsed."""


class ConfigLoader:
	"""
	Loads versionmap configuration into a Pydantic schema.

	Values from the configuration file are merged over the built-in defaults,
	so a file only needs to list what it changes.

	"""

	def __init__(self, config_file: Path | None = None, repo_root: Path | None = None) -> None:
		"""
		Initialize the configuration loader.

		Args:
			config_file: Path to configuration file (optional)
			repo_root: Repository root path, searched for a local config file (optional)

		"""
		self.repo_root = repo_root
		self._config_file = config_file
		self._resolved_config_file = self._resolve_config_file(config_file)
		self._app_config = self._load_config()

	def _resolve_config_file(self, config_file: Path | None = None) -> Path | None:
		"""
		Resolve the configuration file path.

		If a config file is specified, use that. Otherwise, look in standard locations:
		1. .versionmap.yml in the repository root (or the current directory)
		2. $XDG_CONFIG_HOME/versionmap/config.yml
		3. ~/.versionmap/config.yml

		Args:
			config_file: Explicitly provided config file path (optional)

		Returns:
			Resolved config file path or None if no suitable file found

		"""
		if config_file:
			return config_file.expanduser().resolve()

		local_config = (self.repo_root or Path()) / LOCAL_CONFIG_NAME
		if local_config.exists():
			return local_config

		xdg_config_file = Path(xdg_config_home) / "versionmap" / "config.yml"
		if xdg_config_file.exists():
			return xdg_config_file

		legacy_config = Path.home() / ".versionmap" / "config.yml"
		if legacy_config.exists():
			return legacy_config

		return None

	@staticmethod
	def _parse_yaml_file(file_path: Path) -> dict[str, Any]:
		"""
		Parse a YAML file into a dictionary.

		Raises:
			yaml.YAMLError: If the file is not valid YAML or not a mapping
		"""
		with file_path.open(encoding="utf-8") as f:
			content = yaml.safe_load(f)
			if content is None:
				return {}
			if not isinstance(content, dict):
				msg = f"File {file_path} does not contain a valid YAML dictionary"
				raise yaml.YAMLError(msg)
			return content

	def _load_config(self) -> AppConfigSchema:
		"""
		Load configuration from file and parse it into AppConfigSchema.

		Raises:
			ConfigFileNotFoundError: If an explicitly specified configuration file doesn't exist
			ConfigParsingError: If the configuration file cannot be read, parsed or validated

		"""
		config_dict = copy.deepcopy(DEFAULT_CONFIG)

		if self._resolved_config_file is None:
			logger.info("No configuration file found. Using default configuration.")
		elif not self._resolved_config_file.exists():
			msg = f"Configuration file not found: {self._resolved_config_file}"
			logger.error(msg)
			raise ConfigFileNotFoundError(msg)
		else:
			try:
				file_config_dict = self._parse_yaml_file(self._resolved_config_file)
			except yaml.YAMLError as e:
				msg = f"Configuration file {self._resolved_config_file} does not contain a valid YAML dictionary."
				logger.exception(msg)
				raise ConfigParsingError(msg) from e
			except OSError as e:
				msg = f"Error accessing configuration file {self._resolved_config_file}: {e}"
				logger.exception(msg)
				raise ConfigParsingError(msg) from e
			self._merge_configs(config_dict, file_config_dict)
			logger.info("Loaded configuration from %s", self._resolved_config_file)

		try:
			return AppConfigSchema(**config_dict)
		except ValidationError as e:
			msg = f"Error parsing configuration into schema: {e}"
			logger.exception(msg)
			raise ConfigParsingError(msg) from e

	def _merge_configs(self, base: dict[str, Any], override: dict[str, Any]) -> None:
		"""
		Recursively merge two configuration dictionaries.

		Args:
			base: Base configuration dictionary to merge into
			override: Override configuration to apply

		"""
		for key, value in override.items():
			if isinstance(value, dict) and key in base and isinstance(base[key], dict):
				self._merge_configs(base[key], value)
			else:
				base[key] = value

	@property
	def config_file(self) -> Path | None:
		"""The configuration file that was loaded, if any."""
		return self._resolved_config_file

	@property
	def get(self) -> AppConfigSchema:
		"""The loaded application configuration."""
		return self._app_config
