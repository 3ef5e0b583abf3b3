"""Utilities for locating and opening Git repositories."""

from __future__ import annotations

import logging
from pathlib import Path

from pygit2 import GitError as Pygit2GitError
from pygit2 import discover_repository
from pygit2.repository import Repository

logger = logging.getLogger(__name__)


class GitError(Exception):
	"""Custom exception for Git-related errors."""


def get_repo_root(path: Path | None = None) -> Path:
	"""
	Get the Git directory of the repository containing ``path``.

	Args:
		path: Optional path to start searching from (defaults to the current directory)

	Returns:
		Path to the discovered repository

	Raises:
		GitError: If ``path`` is not inside a Git repository
	"""
	git_dir = discover_repository(str(path or Path.cwd()))
	if git_dir is None:
		msg = f"Not a git repository: {path or Path.cwd()}"
		logger.error(msg)
		raise GitError(msg)
	return Path(git_dir)


def open_repository(path: Path | None = None) -> Repository:
	"""
	Open the repository containing ``path``.

	Args:
		path: Optional path inside the repository

	Returns:
		The pygit2 repository

	Raises:
		GitError: If the repository cannot be discovered or opened
	"""
	repo_root = get_repo_root(path)
	try:
		repo = Repository(str(repo_root))
	except Pygit2GitError as e:
		msg = f"Failed to open repository at {repo_root}: {e}"
		logger.exception(msg)
		raise GitError(msg) from e
	logger.debug("Opened repository at %s", repo.path)
	return repo
