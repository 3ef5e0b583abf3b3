"""Commit graph backed by a pygit2 repository."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from pygit2 import Commit as Pygit2Commit
from pygit2 import GitError as Pygit2GitError
from pygit2 import InvalidSpecError, Oid
from pygit2.enums import BranchType, ReferenceType, SortMode

from versionmap.git.graph import CommitGraph
from versionmap.git.models import Branch, Commit, Tag
from versionmap.utils.git_utils import GitError, open_repository

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path

	from pygit2 import Signature
	from pygit2.repository import Repository

logger = logging.getLogger(__name__)

TAG_PREFIX = "refs/tags/"


def _signature_time(signature: Signature) -> datetime:
	"""Convert a pygit2 signature timestamp into an aware datetime."""
	tz = timezone(timedelta(minutes=signature.offset))
	return datetime.fromtimestamp(signature.time, tz=tz)


class PygitCommitGraph(CommitGraph):
	"""Read-only commit graph over a pygit2 repository."""

	def __init__(self, repo: Repository) -> None:
		"""
		Initialize the graph.

		Args:
			repo: The pygit2 repository to read from
		"""
		self.repo = repo
		self._commits: dict[str, Commit] = {}

	@classmethod
	def open(cls, path: Path | None = None) -> PygitCommitGraph:
		"""Open the repository containing ``path`` (defaults to the current directory)."""
		return cls(open_repository(path))

	def _to_commit(self, raw: Pygit2Commit) -> Commit:
		commit_id = str(raw.id)
		cached = self._commits.get(commit_id)
		if cached is not None:
			return cached
		commit = Commit(
			id=commit_id,
			parent_ids=tuple(str(parent_id) for parent_id in raw.parent_ids),
			committer_time=_signature_time(raw.committer),
			author=f"{raw.author.name} <{raw.author.email}>",
			message=raw.message,
		)
		self._commits[commit_id] = commit
		return commit

	def get_commit(self, commit_id: str) -> Commit:
		"""Look up a commit by sha."""
		cached = self._commits.get(commit_id)
		if cached is not None:
			return cached
		try:
			raw = self.repo[Oid(hex=commit_id)]
		except (KeyError, ValueError) as e:
			msg = f"Commit not found: {commit_id}"
			raise GitError(msg) from e
		if not isinstance(raw, Pygit2Commit):
			msg = f"Object {commit_id} is not a commit"
			raise GitError(msg)
		return self._to_commit(raw)

	def resolve_commit(self, spec: str) -> Commit:
		"""
		Resolve a revision (sha, branch, tag, ``HEAD~2``...) to a commit.

		Raises:
			GitError: If the revision does not name a commit
		"""
		try:
			raw = self.repo.revparse_single(spec).peel(Pygit2Commit)
		except (KeyError, ValueError, InvalidSpecError, Pygit2GitError) as e:
			msg = f"Could not resolve '{spec}' to a commit"
			logger.exception(msg)
			raise GitError(msg) from e
		return self._to_commit(raw)

	def branches(self) -> list[Branch]:
		"""Enumerate local branches followed by remote branches."""
		result: list[Branch] = []
		for branch_type, branch_set in (
			(BranchType.LOCAL, self.repo.branches.local),
			(BranchType.REMOTE, self.repo.branches.remote),
		):
			for name in branch_set:
				raw_branch = branch_set.get(name)
				if raw_branch is None or raw_branch.type == ReferenceType.SYMBOLIC:
					# Skips symbolic refs such as origin/HEAD
					continue
				is_remote = branch_type == BranchType.REMOTE
				result.append(
					Branch(
						name=raw_branch.shorthand,
						canonical_name=raw_branch.name,
						is_remote=is_remote,
						is_tracking=not is_remote and self._has_upstream(raw_branch),
						tip=self._branch_tip(raw_branch),
					)
				)
		return result

	@staticmethod
	def _has_upstream(raw_branch: object) -> bool:
		try:
			return raw_branch.upstream is not None  # type: ignore[attr-defined]
		except (Pygit2GitError, KeyError, ValueError):
			return False

	def _branch_tip(self, raw_branch: object) -> Commit | None:
		try:
			raw = raw_branch.peel(Pygit2Commit)  # type: ignore[attr-defined]
		except (Pygit2GitError, InvalidSpecError, KeyError, ValueError):
			logger.warning("Could not resolve the tip of branch '%s'", raw_branch.shorthand)  # type: ignore[attr-defined]
			return None
		return self._to_commit(raw)

	def tags(self) -> list[Tag]:
		"""Enumerate tags peeled to commits, skipping tags on trees or blobs."""
		result: list[Tag] = []
		for ref_name in self.repo.references:
			if not ref_name.startswith(TAG_PREFIX):
				continue
			target = self.repo.references[ref_name].peel()
			if not isinstance(target, Pygit2Commit):
				logger.debug("Skipping tag '%s' that does not point at a commit", ref_name)
				continue
			result.append(Tag(name=ref_name[len(TAG_PREFIX) :], target=self._to_commit(target)))
		return result

	def walk(self, include_reachable_from: Commit, exclude_reachable_from: Commit | None = None) -> Iterator[Commit]:
		"""Lazily walk history newest first, hiding the ancestry of ``exclude_reachable_from``."""
		try:
			walker = self.repo.walk(Oid(hex=include_reachable_from.id), SortMode.TOPOLOGICAL | SortMode.TIME)
			if exclude_reachable_from is not None:
				walker.hide(Oid(hex=exclude_reachable_from.id))
		except Pygit2GitError as e:
			msg = f"Failed to walk history from {include_reachable_from.short_id}: {e}"
			logger.exception(msg)
			raise GitError(msg) from e
		for raw in walker:
			yield self._to_commit(raw)

	def merge_base(self, commit: Commit, other: Commit) -> Commit | None:
		"""Compute the lowest common ancestor of two commits."""
		try:
			base_oid = self.repo.merge_base(Oid(hex=commit.id), Oid(hex=other.id))
		except Pygit2GitError as e:
			msg = f"Failed to compute merge base of {commit.short_id} and {other.short_id}: {e}"
			logger.exception(msg)
			raise GitError(msg) from e
		if base_oid is None:
			return None
		return self.get_commit(str(base_oid))
