"""Filtering repository tags down to semantic versions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from versionmap.semver import SemanticVersion

if TYPE_CHECKING:
	from datetime import datetime

	from versionmap.git.graph import CommitGraph
	from versionmap.git.models import Tag

logger = logging.getLogger(__name__)


def get_valid_version_tags(
	graph: CommitGraph, tag_prefix_regex: str, older_than: datetime | None = None
) -> list[tuple[Tag, SemanticVersion]]:
	"""
	Get every tag whose name parses as a semantic version.

	Args:
		graph: Commit graph to read tags from
		tag_prefix_regex: Regex for the prefix in front of the version
		older_than: Optional bound; tags on commits committed after it are skipped

	Returns:
		(tag, version) pairs in the order the graph enumerates tags
	"""
	tags: list[tuple[Tag, SemanticVersion]] = []
	for tag in graph.tags():
		committed_at = tag.target.committer_time
		if older_than is not None and committed_at is not None and committed_at > older_than:
			logger.debug("Skipping tag '%s' committed after %s", tag.name, older_than)
			continue

		version = SemanticVersion.try_parse(tag.name, tag_prefix_regex)
		if version is not None:
			tags.append((tag, version))
	return tags
