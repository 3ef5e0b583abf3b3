"""Read-only commit graph interface consumed by the metadata provider."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from collections.abc import Iterable, Iterator

	from versionmap.git.models import Branch, Commit, Tag


class CommitGraph(abc.ABC):
	"""
	Abstract base class for commit graph backends.

	A backend is a read-only snapshot of one repository for the duration of an
	analysis run. It provides:
	- Branch and tag enumeration
	- Commit lookup and history walks with an exclusion boundary
	- A lowest common ancestor primitive

	"""

	@abc.abstractmethod
	def branches(self) -> Iterable[Branch]:
		"""
		Enumerate local and remote branches.

		Returns:
		    Branches in a deterministic order

		"""

	@abc.abstractmethod
	def tags(self) -> Iterable[Tag]:
		"""
		Enumerate tags peeled to the commits they point at.

		Returns:
		    Tags in a deterministic order

		"""

	@abc.abstractmethod
	def get_commit(self, commit_id: str) -> Commit:
		"""
		Look up a commit by sha.

		Args:
		    commit_id: Hex sha of the commit

		Returns:
		    The commit

		"""

	@abc.abstractmethod
	def walk(self, include_reachable_from: Commit, exclude_reachable_from: Commit | None = None) -> Iterator[Commit]:
		"""
		Lazily walk the history reachable from one commit.

		Commits are yielded newest first. When ``exclude_reachable_from`` is given,
		that commit and all of its ancestors are hidden from the walk.

		Args:
		    include_reachable_from: Commit to start from
		    exclude_reachable_from: Optional commit whose ancestry bounds the walk

		Returns:
		    Iterator over the reachable commits

		"""

	@abc.abstractmethod
	def merge_base(self, commit: Commit, other: Commit) -> Commit | None:
		"""
		Compute a lowest common ancestor of two commits.

		Args:
		    commit: First commit
		    other: Second commit

		Returns:
		    The common ancestor, or None for unrelated histories

		"""

	def first_parent(self, commit: Commit) -> Commit | None:
		"""Return the first parent of ``commit``, or None for a root commit."""
		if not commit.parent_ids:
			return None
		return self.get_commit(commit.parent_ids[0])
