"""Configuration for versionmap."""

from versionmap.config.config_loader import (
	ConfigError,
	ConfigFileNotFoundError,
	ConfigLoader,
	ConfigParsingError,
)
from versionmap.config.config_schema import AppConfigSchema, BranchConfigSchema
from versionmap.config.defaults import DEFAULT_CONFIG

__all__ = [
	"DEFAULT_CONFIG",
	"AppConfigSchema",
	"BranchConfigSchema",
	"ConfigError",
	"ConfigFileNotFoundError",
	"ConfigLoader",
	"ConfigParsingError",
]
