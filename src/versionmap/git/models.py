"""Git graph models used by the metadata provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
	from datetime import datetime


@dataclass(frozen=True)
class Commit:
	"""
	Immutable commit node.

	Commits compare by identity only, so two ``Commit`` objects built from
	different lookups of the same sha are equal.

	"""

	id: str
	"""Hex sha of the commit."""

	parent_ids: tuple[str, ...] = field(default=(), compare=False)
	"""Ordered parent shas (empty for a root commit, two or more for a merge)."""

	committer_time: datetime | None = field(default=None, compare=False)
	"""Committer timestamp (timezone aware)."""

	author: str = field(default="", compare=False)
	"""Author identity as ``Name <email>``."""

	message: str = field(default="", compare=False, repr=False)

	@property
	def short_id(self) -> str:
		"""Abbreviated sha for display."""
		return self.id[:7]

	def has_parent(self, commit: Commit) -> bool:
		"""Check whether ``commit`` is one of the direct parents."""
		return commit.id in self.parent_ids

	def __str__(self) -> str:
		return self.id


@dataclass(frozen=True)
class Branch:
	"""A named pointer into the commit graph."""

	name: str
	"""Friendly name, e.g. ``main`` or ``origin/main``."""

	canonical_name: str
	"""Full reference name, e.g. ``refs/heads/main``."""

	is_remote: bool = field(default=False, compare=False)
	is_tracking: bool = field(default=False, compare=False)
	tip: Commit | None = field(default=None, compare=False)

	@property
	def name_without_remote(self) -> str:
		"""Friendly name with the remote prefix stripped for remote branches."""
		if self.is_remote and "/" in self.name:
			return self.name.split("/", 1)[1]
		return self.name

	def is_same_branch(self, other: Branch) -> bool:
		"""Check whether both branches name the same line of work, ignoring remotes."""
		return self.name_without_remote == other.name_without_remote

	def __str__(self) -> str:
		return self.name


@dataclass(frozen=True)
class Tag:
	"""A tag and the commit it peels to."""

	name: str
	target: Commit


@dataclass(frozen=True)
class BranchCommit:
	"""A candidate explanation of where a branch originated."""

	EMPTY: ClassVar[BranchCommit]

	commit: Commit | None = None
	branch: Branch | None = None

	@property
	def is_empty(self) -> bool:
		"""Whether this value carries no candidate."""
		return self.commit is None and self.branch is None


BranchCommit.EMPTY = BranchCommit()


def excluding_branches(branches: list[Branch], excluded: tuple[Branch, ...] | list[Branch]) -> list[Branch]:
	"""Filter out every branch that is the same branch as one of ``excluded``."""
	return [branch for branch in branches if not any(branch.is_same_branch(other) for other in excluded)]
