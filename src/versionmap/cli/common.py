"""Shared option types and helpers for versionmap commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from versionmap.config import ConfigError, ConfigLoader
from versionmap.metadata.provider import RepoMetadataProvider
from versionmap.utils.cli_utils import exit_with_error
from versionmap.utils.git_utils import GitError

if TYPE_CHECKING:
	from versionmap.git.models import Branch

logger = logging.getLogger(__name__)

PathOpt = Annotated[
	Path | None,
	typer.Option(
		"--path",
		"-p",
		help="Path inside the repository (defaults to current directory).",
		exists=True,
		file_okay=False,
		dir_okay=True,
		resolve_path=True,
	),
]

ConfigOpt = Annotated[
	Path | None,
	typer.Option(
		"--config",
		"-c",
		help="Path to config file",
	),
]

TagPrefixOpt = Annotated[
	str | None,
	typer.Option(
		"--tag-prefix",
		help="Regex for the tag prefix (overrides config)",
	),
]


def load_provider(path: Path | None, config_file: Path | None) -> RepoMetadataProvider:
	"""Load configuration and open a metadata provider, exiting on failure."""
	try:
		config = ConfigLoader(config_file, repo_root=path).get
		return RepoMetadataProvider.from_path(path, config)
	except ConfigError as e:
		exit_with_error("Invalid configuration", exception=e)
	except GitError as e:
		exit_with_error("Could not open the git repository", exception=e)


def find_branch(provider: RepoMetadataProvider, name: str) -> Branch:
	"""Look up a branch by friendly or canonical name, exiting if it does not exist."""
	for branch in provider.graph.branches():
		if name in (branch.name, branch.canonical_name):
			return branch
	exit_with_error(f"Branch not found: {name}")
