"""
Merge-base resolution with forward-merge correction.

A plain lowest common ancestor is misleading when a branch keeps merging its
target back into itself: every such forward merge moves the common ancestor
up to the merged commit. The resolver walks back past each forward-merge layer
until the ancestor stops moving.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from versionmap.git.graph import CommitGraph
	from versionmap.git.models import Commit

logger = logging.getLogger(__name__)


class ResolutionState(Enum):
	"""States of the forward-merge correction loop."""

	SEARCHING = "searching"
	CORRECTING = "correcting"
	STABLE = "stable"


@dataclass(frozen=True)
class MergeBaseResolution:
	"""Outcome of resolving a merge base."""

	merge_base: Commit | None
	"""The effective merge base, or None for unrelated histories."""

	corrections: int = 0
	"""Number of forward-merge layers that moved the merge base back."""

	state: ResolutionState = ResolutionState.STABLE
	"""State the correction loop ended in."""


class ForwardMergeResolver:
	"""Computes merge bases that ignore forward merges."""

	def __init__(self, graph: CommitGraph) -> None:
		"""
		Initialize the resolver.

		Args:
			graph: Commit graph to query
		"""
		self.graph = graph

	def resolve(self, commit: Commit, other_tip: Commit) -> MergeBaseResolution:
		"""
		Resolve the merge base of ``commit`` against the history of ``other_tip``.

		The result is not symmetric: forward merges are only looked for in the
		history of ``other_tip``.

		Args:
			commit: Tip of the branch being analysed
			other_tip: Tip of the branch it is compared against

		Returns:
			The resolved merge base and the number of corrections applied
		"""
		candidate = other_tip
		if other_tip.has_parent(commit):
			# other_tip merged commit in; its first parent is where the other branch really was
			candidate = self.graph.first_parent(other_tip) or other_tip
			logger.debug("Tip %s is a forward merge, using %s instead", other_tip.short_id, candidate.short_id)

		base = self.graph.merge_base(commit, candidate)
		if base is None:
			logger.info("No common ancestor between %s and %s", commit.short_id, candidate.short_id)
			return MergeBaseResolution(merge_base=None)
		logger.info("Found merge base of %s", base.id)

		state = ResolutionState.SEARCHING
		forward_merge: Commit | None = None
		corrections = 0
		while state is not ResolutionState.STABLE:
			if state is ResolutionState.SEARCHING:
				forward_merge = self._find_forward_merge(candidate, base)
				state = ResolutionState.STABLE if forward_merge is None else ResolutionState.CORRECTING
				continue

			next_candidate = self.graph.first_parent(forward_merge)
			new_base = self.graph.merge_base(commit, next_candidate) if next_candidate is not None else None
			if new_base is None:
				logger.warning("Could not find a merge base for %s past %s", commit.short_id, forward_merge.short_id)
				state = ResolutionState.STABLE
			elif new_base == base:
				logger.debug("Merge base %s did not move, accepting it", base.short_id)
				state = ResolutionState.STABLE
			else:
				base = new_base
				candidate = next_candidate
				corrections += 1
				logger.info("Merge base was due to a forward merge, next merge base is %s", base.id)
				state = ResolutionState.SEARCHING

		return MergeBaseResolution(merge_base=base, corrections=corrections, state=state)

	def _find_forward_merge(self, candidate: Commit, base: Commit) -> Commit | None:
		"""Find the newest commit after ``base`` in the history of ``candidate`` that has ``base`` as a parent."""
		for commit in self.graph.walk(candidate, exclude_reachable_from=base):
			if commit.has_parent(base):
				return commit
		return None
