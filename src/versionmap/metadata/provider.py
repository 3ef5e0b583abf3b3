"""
Repository metadata provider.

The provider answers the graph questions version calculation depends on:
which version tags sit on a branch, which branches contain a commit, where two
branches diverged and which branch a branch was created from. Results are
memoized for the lifetime of the provider, which assumes the repository does
not change during one analysis run.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from versionmap.git.models import BranchCommit, excluding_branches
from versionmap.metadata.merge_base import ForwardMergeResolver
from versionmap.metadata.tags import get_valid_version_tags

if TYPE_CHECKING:
	from collections.abc import Iterator, Sequence
	from datetime import datetime
	from pathlib import Path

	from versionmap.config.config_schema import AppConfigSchema
	from versionmap.git.graph import CommitGraph
	from versionmap.git.models import Branch, Commit, Tag
	from versionmap.semver import SemanticVersion

logger = logging.getLogger(__name__)

MISSING_TIP_FORMAT = "{} has no tip. The branch has no commits, so it has no history to analyse."

# Used when no branch configuration matches: every branch is a possible source
MATCH_ALL = ".*"


@dataclass(frozen=True)
class MergeBaseRecord:
	"""Cached merge base between an ordered pair of branches."""

	branch: Branch
	other_branch: Branch
	merge_base: Commit | None
	corrections: int = 0


class RepoMetadataProvider:
	"""Caching facade over commit graph queries."""

	def __init__(self, graph: CommitGraph, config: AppConfigSchema) -> None:
		"""
		Initialize the provider.

		Args:
			graph: Commit graph snapshot to query
			config: Branch and tag configuration
		"""
		self.graph = graph
		self.config = config
		self._resolver = ForwardMergeResolver(graph)
		self._version_tags_cache: dict[str, list[SemanticVersion]] = {}
		self._merge_base_cache: dict[tuple[str, str], MergeBaseRecord] = {}
		self._merge_commits_cache: dict[tuple[str, frozenset[str]], list[BranchCommit]] = {}

	@classmethod
	def from_path(cls, path: Path | None, config: AppConfigSchema) -> RepoMetadataProvider:
		"""Create a provider over the pygit2 repository containing ``path``."""
		from versionmap.git.repository import PygitCommitGraph

		return cls(PygitCommitGraph.open(path), config)

	def get_valid_version_tags(
		self, tag_prefix_regex: str | None = None, older_than: datetime | None = None
	) -> list[tuple[Tag, SemanticVersion]]:
		"""Get every repository tag that parses as a semantic version."""
		prefix = self.config.tag_prefix if tag_prefix_regex is None else tag_prefix_regex
		return get_valid_version_tags(self.graph, prefix, older_than)

	def get_version_tags_on_branch(self, branch: Branch, tag_prefix_regex: str | None = None) -> list[SemanticVersion]:
		"""
		Get the versions of tags on commits in the history of ``branch``.

		Versions are ordered by the branch history walk, newest commit first.

		Args:
			branch: Branch whose history is searched
			tag_prefix_regex: Tag prefix regex (defaults to the configured prefix)

		Returns:
			Versions tagged on the branch
		"""
		key = branch.canonical_name
		if key in self._version_tags_cache:
			logger.debug("Cache hit for version tags on branch '%s'", branch.canonical_name)
			return self._version_tags_cache[key]

		logger.info("Getting version tags from branch '%s'.", branch.canonical_name)
		versions: list[SemanticVersion] = []
		if branch.tip is None:
			logger.warning(MISSING_TIP_FORMAT.format(branch.name))
		else:
			tags_by_commit: dict[str, list[SemanticVersion]] = {}
			for tag, version in self.get_valid_version_tags(tag_prefix_regex):
				tags_by_commit.setdefault(tag.target.id, []).append(version)
			for commit in self.graph.walk(branch.tip):
				versions.extend(tags_by_commit.get(commit.id, []))

		self._version_tags_cache[key] = versions
		return versions

	def get_branches_containing_commit(
		self, commit: Commit | None, branches: Sequence[Branch], only_tracked_branches: bool = False
	) -> Iterator[Branch]:
		"""
		Lazily yield the branches that contain ``commit``.

		Branches whose tip is ``commit`` are yielded first; only if there are
		none is the full history of every branch searched.

		Args:
			commit: Commit to look for
			branches: Candidate branches
			only_tracked_branches: Skip branches that do not track a remote

		Returns:
			Iterator over the matching branches

		Raises:
			ValueError: If ``commit`` is None
		"""
		if commit is None:
			msg = "commit must not be None"
			raise ValueError(msg)
		return self._iter_branches_containing_commit(commit, branches, only_tracked_branches)

	def _iter_branches_containing_commit(
		self, commit: Commit, branches: Sequence[Branch], only_tracked_branches: bool
	) -> Iterator[Branch]:
		logger.info("Getting branches containing the commit '%s'.", commit.id)
		eligible = [branch for branch in branches if branch.is_tracking or not only_tracked_branches]

		direct_branch_found = False
		logger.info("Trying to find direct branches.")
		for branch in eligible:
			if branch.tip is None or branch.tip != commit:
				continue
			direct_branch_found = True
			logger.info("Direct branch found: '%s'.", branch.name)
			yield branch

		if direct_branch_found:
			return

		logger.info(
			"No direct branches found, searching through %s branches.", "tracked" if only_tracked_branches else "all"
		)
		for branch in eligible:
			if branch.tip is None:
				continue
			logger.info("Searching for commits reachable from '%s'.", branch.name)
			if any(reachable == commit for reachable in self.graph.walk(branch.tip)):
				logger.info("The branch '%s' has a matching commit.", branch.name)
				yield branch
			else:
				logger.info("The branch '%s' has no matching commits.", branch.name)

	def find_merge_base(self, branch: Branch, other_branch: Branch) -> Commit | None:
		"""
		Find the merge base of two branches, ignoring forward merges into ``other_branch``.

		The result depends on argument order and is cached per ordered pair.

		Args:
			branch: Branch being analysed
			other_branch: Branch it is compared against

		Returns:
			The merge base, or None if the branches share no history
		"""
		return self.get_merge_base_record(branch, other_branch).merge_base

	def get_merge_base_record(self, branch: Branch, other_branch: Branch) -> MergeBaseRecord:
		"""Find the merge base of two branches and return the full cache record."""
		key = (branch.canonical_name, other_branch.canonical_name)
		if key in self._merge_base_cache:
			logger.debug("Cache hit for merge base between '%s' and '%s'.", branch.name, other_branch.name)
			return self._merge_base_cache[key]

		logger.info("Finding merge base between '%s' and '%s'.", branch.name, other_branch.name)
		if branch.tip is None or other_branch.tip is None:
			logger.warning(MISSING_TIP_FORMAT.format(branch.name if branch.tip is None else other_branch.name))
			record = MergeBaseRecord(branch, other_branch, None)
		else:
			resolution = self._resolver.resolve(branch.tip, other_branch.tip)
			record = MergeBaseRecord(branch, other_branch, resolution.merge_base, resolution.corrections)

		self._merge_base_cache[key] = record
		logger.info("Merge base of '%s' and '%s' is %s", branch.name, other_branch.name, record.merge_base)
		return record

	def find_commit_branch_was_branched_from(self, branch: Branch | None, *excluded_branches: Branch) -> BranchCommit:
		"""
		Find the branch and commit that ``branch`` was created from.

		When several source branches are possible the one with the most recent
		merge base wins. This is a heuristic; the alternatives are logged.

		Args:
			branch: Branch to find the source of
			*excluded_branches: Branches that must not be reported as the source

		Returns:
			The source branch and merge base commit, or ``BranchCommit.EMPTY``

		Raises:
			ValueError: If ``branch`` is None
		"""
		if branch is None:
			msg = "branch must not be None"
			raise ValueError(msg)

		logger.info("Finding branch source of '%s'", branch.name)
		if branch.tip is None:
			logger.warning(MISSING_TIP_FORMAT.format(branch.name))
			return BranchCommit.EMPTY

		possible_branches = [
			candidate
			for candidate in self.get_merge_commits_for_branch(branch, excluded_branches)
			if not branch.is_same_branch(candidate.branch)
		]

		if len(possible_branches) > 1:
			first = possible_branches[0]
			logger.info(
				"Multiple source branches have been found, picking the first one (%s).\n"
				"This may result in incorrect commit counting.\nOptions were:\n %s",
				first.branch.name,
				", ".join(candidate.branch.name for candidate in possible_branches),
			)
			return first
		if possible_branches:
			return possible_branches[0]
		return BranchCommit.EMPTY

	def get_merge_commits_for_branch(
		self, branch: Branch, excluded_branches: Sequence[Branch] = ()
	) -> list[BranchCommit]:
		"""
		Get the merge base of ``branch`` with every branch it may have been created from.

		Candidate branches are those whose names match a source branch regex of
		the configuration for ``branch``; with no matching configuration every
		branch is a candidate.

		Args:
			branch: Branch to find candidates for
			excluded_branches: Branches to leave out

		Returns:
			Candidates ordered by merge base commit time, most recent first
		"""
		key = (branch.canonical_name, frozenset(excluded.name_without_remote for excluded in excluded_branches))
		if key in self._merge_commits_cache:
			logger.debug("Cache hit for getting merge commits for branch %s.", branch.canonical_name)
			return self._merge_commits_cache[key]

		branch_config = self.config.get_config_for_branch(branch.name_without_remote)
		regexes_to_check = [MATCH_ALL] if branch_config is None else self.config.source_branch_regexes(branch_config)

		candidates: list[BranchCommit] = []
		for other_branch in excluding_branches(list(self.graph.branches()), excluded_branches):
			if other_branch == branch:
				continue
			if not any(re.search(regex, other_branch.name_without_remote) for regex in regexes_to_check):
				continue
			if other_branch.tip is None:
				logger.warning(MISSING_TIP_FORMAT.format(other_branch.name))
				continue
			merge_base = self.find_merge_base(branch, other_branch)
			if merge_base is not None:
				candidates.append(BranchCommit(merge_base, other_branch))

		# Most recent first; merge bases without a committer time go last
		candidates.sort(
			key=lambda candidate: (
				candidate.commit.committer_time is not None,
				candidate.commit.committer_time.timestamp() if candidate.commit.committer_time else 0.0,
			),
			reverse=True,
		)
		self._merge_commits_cache[key] = candidates
		return candidates
