"""Tests for the pygit2-backed commit graph."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from tests.base import BASE_TIMESTAMP, PygitRepoBuilder, build_forward_merge_repo
from versionmap.config import AppConfigSchema
from versionmap.git.models import BranchCommit
from versionmap.git.repository import PygitCommitGraph
from versionmap.metadata.provider import RepoMetadataProvider
from versionmap.semver import SemanticVersion
from versionmap.utils.git_utils import GitError, get_repo_root

if TYPE_CHECKING:
	from pathlib import Path


@pytest.mark.git
@pytest.mark.fs
class TestPygitCommitGraph:
	"""Test cases for PygitCommitGraph against real repositories."""

	@pytest.fixture(autouse=True)
	def setup_repo(self, tmp_path: Path) -> None:
		"""Build the forward merge repository for each test."""
		self.builder = build_forward_merge_repo(tmp_path)
		self.ids = self.builder.ids
		self.graph = PygitCommitGraph.open(tmp_path)

	def test_branches(self) -> None:
		"""Local branches are listed with their tips."""
		branches = {branch.name: branch for branch in self.graph.branches()}

		assert set(branches) == {"main", "feature/login"}
		assert branches["main"].canonical_name == "refs/heads/main"
		assert branches["main"].tip.id == self.ids["A2"]
		assert not branches["main"].is_remote
		assert not branches["main"].is_tracking

	def test_remote_and_tracking_branches(self) -> None:
		"""Remote branches are flagged and upstream configuration marks tracking branches."""
		repo = self.builder.repo
		repo.remotes.create("origin", "https://example.com/repo.git")
		self.builder.remote_branch("origin/main", "A2")
		repo.branches.local["main"].upstream = repo.branches.remote["origin/main"]

		branches = {branch.name: branch for branch in self.graph.branches()}

		assert branches["origin/main"].is_remote
		assert branches["origin/main"].name_without_remote == "main"
		assert branches["main"].is_tracking
		assert not branches["feature/login"].is_tracking

	def test_commit_details(self) -> None:
		"""Commits carry parents in order and the committer time."""
		merge = self.graph.get_commit(self.ids["M"])

		assert merge.parent_ids == (self.ids["B1"], self.ids["A2"])
		assert merge.committer_time == datetime.fromtimestamp(BASE_TIMESTAMP + 5 * 60, tz=UTC)
		assert merge.author == "Test <test@example.com>"

	def test_unknown_commit(self) -> None:
		"""Looking up a missing sha raises GitError."""
		with pytest.raises(GitError):
			self.graph.get_commit("0" * 40)

	def test_tags_are_peeled(self) -> None:
		"""Lightweight and annotated tags resolve to commits; tags on trees are skipped."""
		self.builder.tree_tag("tree-only")

		tags = {tag.name: tag.target.id for tag in self.graph.tags()}

		assert tags == {
			"release-notes": self.ids["A1"],
			"v1.0.0": self.ids["R"],
			"v1.1.0": self.ids["A2"],
		}

	def test_walk_with_exclusion(self) -> None:
		"""Walks are newest first and stop at the excluded commit's ancestry."""
		tip = self.graph.get_commit(self.ids["B2"])
		boundary = self.graph.get_commit(self.ids["A2"])

		walked = [commit.message for commit in self.graph.walk(tip, exclude_reachable_from=boundary)]

		assert walked == ["B2", "M", "B1"]

	def test_merge_base(self) -> None:
		"""The raw merge base is the plain lowest common ancestor."""
		main_tip = self.graph.get_commit(self.ids["A2"])
		feature_tip = self.graph.get_commit(self.ids["B2"])

		assert self.graph.merge_base(main_tip, feature_tip).id == self.ids["A2"]

	def test_resolve_commit(self) -> None:
		"""Revisions resolve through tags and branches."""
		assert self.graph.resolve_commit("v1.1.0").id == self.ids["A2"]
		assert self.graph.resolve_commit("feature/login").id == self.ids["B2"]
		with pytest.raises(GitError):
			self.graph.resolve_commit("does-not-exist")

	def test_provider_end_to_end(self) -> None:
		"""The provider corrects for the forward merge on a real repository."""
		provider = RepoMetadataProvider(self.graph, AppConfigSchema())
		branches = {branch.name: branch for branch in self.graph.branches()}

		merge_base = provider.find_merge_base(branches["main"], branches["feature/login"])
		source = provider.find_commit_branch_was_branched_from(branches["feature/login"])
		versions = provider.get_version_tags_on_branch(branches["feature/login"])

		assert merge_base.id == self.ids["A1"]
		# Seen from the feature branch, main was last merged in at A2
		assert source == BranchCommit(self.graph.get_commit(self.ids["A2"]), branches["main"])
		assert versions == [SemanticVersion(1, 1, 0), SemanticVersion(1, 0, 0)]


@pytest.mark.git
@pytest.mark.fs
class TestRepoDiscovery:
	"""Test cases for repository discovery helpers."""

	def test_get_repo_root(self, tmp_path: Path) -> None:
		"""A path inside a repository resolves to its git directory."""
		PygitRepoBuilder(tmp_path)
		nested = tmp_path / "src"
		nested.mkdir()

		assert get_repo_root(nested).resolve() == (tmp_path / ".git").resolve()

	def test_not_a_repository(self, tmp_path: Path) -> None:
		"""Paths outside repositories are rejected."""
		with pytest.raises(GitError, match="Not a git repository"):
			get_repo_root(tmp_path)
		with pytest.raises(GitError, match="Not a git repository"):
			PygitCommitGraph.open(tmp_path)
