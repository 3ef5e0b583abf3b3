"""Tests for filtering repository tags down to semantic versions."""

from __future__ import annotations

from datetime import timedelta

import pytest

from tests.base import GitTestBase
from tests.fakes import BASE_TIME
from versionmap.metadata.tags import get_valid_version_tags
from versionmap.semver import SemanticVersion


@pytest.mark.unit
@pytest.mark.git
class TestValidVersionTags(GitTestBase):
	"""Test cases for get_valid_version_tags."""

	def build(self) -> None:
		g = self.graph
		self.old = g.commit("OLD", minute=10)
		self.new = g.commit("NEW", self.old, minute=20)
		self.v123 = g.tag("v1.2.3", self.old)
		g.tag("release-notes", self.old)
		self.v200 = g.tag("v2.0.0", self.new)

	def test_non_versions_are_skipped(self) -> None:
		"""Tags that do not parse are left out; the rest keep enumeration order."""
		self.build()

		result = get_valid_version_tags(self.graph, "[vV]")

		assert result == [(self.v123, SemanticVersion(1, 2, 3)), (self.v200, SemanticVersion(2, 0, 0))]

	def test_older_than_excludes_newer_tags(self) -> None:
		"""Tags on commits newer than the bound are excluded even if valid."""
		self.build()

		result = get_valid_version_tags(self.graph, "[vV]", older_than=BASE_TIME + timedelta(minutes=15))

		assert [tag.name for tag, _ in result] == ["v1.2.3"]

	def test_older_than_is_inclusive(self) -> None:
		"""A tag committed exactly at the bound is kept."""
		self.build()

		result = get_valid_version_tags(self.graph, "[vV]", older_than=BASE_TIME + timedelta(minutes=20))

		assert [tag.name for tag, _ in result] == ["v1.2.3", "v2.0.0"]
