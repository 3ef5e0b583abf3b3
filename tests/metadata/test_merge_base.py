"""Tests for merge-base resolution with forward-merge correction."""

from __future__ import annotations

import pytest

from tests.base import GitTestBase
from versionmap.metadata.merge_base import ForwardMergeResolver, ResolutionState


@pytest.mark.unit
@pytest.mark.git
class TestForwardMergeResolver(GitTestBase):
	"""Test cases for ForwardMergeResolver and RepoMetadataProvider.find_merge_base."""

	def build_single_forward_merge(self) -> None:
		"""
		main:     R - A1 ------ A2
		                 \\        \\
		feature:          B1 ----- M - B2
		"""
		g = self.graph
		self.r = g.commit("R")
		self.a1 = g.commit("A1", self.r)
		self.b1 = g.commit("B1", self.a1)
		self.a2 = g.commit("A2", self.a1)
		self.m = g.commit("M", self.b1, self.a2)
		self.b2 = g.commit("B2", self.m)
		self.main = g.branch("main", self.a2)
		self.feature = g.branch("feature/login", self.b2)

	def test_forward_merge_is_skipped(self) -> None:
		"""The merge base ignores main's tip merged into the feature branch."""
		self.build_single_forward_merge()
		provider = self.make_provider()

		naive = self.graph.merge_base(self.a2, self.b2)
		result = provider.find_merge_base(self.main, self.feature)

		assert naive == self.a2
		assert result == self.a1
		assert provider.get_merge_base_record(self.main, self.feature).corrections == 1

	def test_ordered_pairs_differ_and_are_cached_separately(self) -> None:
		"""(A, B) and (B, A) resolve differently for an asymmetric forward merge."""
		self.build_single_forward_merge()
		provider = self.make_provider()

		forward = provider.find_merge_base(self.main, self.feature)
		backward = provider.find_merge_base(self.feature, self.main)

		assert forward == self.a1
		assert backward == self.a2

		self.graph.reset_counters()
		assert provider.find_merge_base(self.main, self.feature) == self.a1
		assert provider.find_merge_base(self.feature, self.main) == self.a2
		assert self.graph.merge_base_calls == []
		assert self.graph.walk_calls == []

	def test_tip_is_forward_merge(self) -> None:
		"""When the other tip merged this branch's tip, its first parent is used instead."""
		g = self.graph
		r = g.commit("R")
		a1 = g.commit("A1", r)
		b1 = g.commit("B1", a1)
		a2 = g.commit("A2", a1)
		m = g.commit("M", b1, a2)
		main = g.branch("main", a2)
		feature = g.branch("feature/login", m)
		provider = self.make_provider()

		record = provider.get_merge_base_record(main, feature)

		assert record.merge_base == a1
		assert record.corrections == 0
		assert self.graph.merge_base_calls[0] == ("A2", "B1")

	def test_two_forward_merge_layers(self) -> None:
		"""Each forward merge layer moves the merge base back exactly once."""
		g = self.graph
		r = g.commit("R")
		a1 = g.commit("A1", r)
		b1 = g.commit("B1", a1)
		a2 = g.commit("A2", a1)
		m1 = g.commit("M1", b1, a2)
		b2 = g.commit("B2", m1)
		a3 = g.commit("A3", a2)
		m2 = g.commit("M2", b2, a3)
		b3 = g.commit("B3", m2)

		resolution = ForwardMergeResolver(g).resolve(a3, b3)

		assert resolution.merge_base == a1
		assert resolution.corrections == 2
		assert resolution.state is ResolutionState.STABLE

	def test_plain_divergence_needs_no_correction(self) -> None:
		"""Without forward merges the lowest common ancestor is returned as is."""
		g = self.graph
		r = g.commit("R")
		a1 = g.commit("A1", r)
		a2 = g.commit("A2", a1)
		b1 = g.commit("B1", a1)

		resolution = ForwardMergeResolver(g).resolve(a2, b1)

		assert resolution.merge_base == a1
		assert resolution.corrections == 0

	def test_unrelated_histories_have_no_merge_base(self) -> None:
		"""Disjoint root histories yield None without raising."""
		g = self.graph
		x1 = g.commit("X1")
		x2 = g.commit("X2", x1)
		y1 = g.commit("Y1")
		y2 = g.commit("Y2", y1)
		main = g.branch("main", x2)
		orphan = g.branch("gh-pages", y2)
		provider = self.make_provider()

		assert provider.find_merge_base(main, orphan) is None

		self.graph.reset_counters()
		assert provider.find_merge_base(main, orphan) is None
		assert self.graph.merge_base_calls == []

	def test_branch_without_tip_has_no_merge_base(self) -> None:
		"""A tipless branch short-circuits without touching the graph."""
		g = self.graph
		main = g.branch("main", g.commit("R"))
		empty = g.branch("develop", None)
		provider = self.make_provider()

		assert provider.find_merge_base(empty, main) is None
		assert self.graph.merge_base_calls == []
		assert self.graph.walk_calls == []
