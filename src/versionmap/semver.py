"""Semantic version parsing for tag names."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from semantic_version import Version

logger = logging.getLogger(__name__)

# major or major.minor, completed with zeros
_PARTIAL_VERSION = re.compile(r"^\d+(\.\d+)?$")


@dataclass(frozen=True)
class SemanticVersion:
	"""
	A parsed semantic version.

	Ordering follows semver precedence: build metadata is ignored and a
	pre-release sorts before the matching release. Equality still compares
	build metadata, so two versions differing only in build are neither
	equal nor ordered before one another.

	"""

	major: int
	minor: int = 0
	patch: int = 0
	prerelease: tuple[str, ...] = ()
	build: tuple[str, ...] = ()

	@classmethod
	def from_version(cls, version: Version) -> SemanticVersion:
		"""Build from a ``semantic_version.Version``."""
		return cls(
			major=version.major,
			minor=version.minor or 0,
			patch=version.patch or 0,
			prerelease=tuple(version.prerelease or ()),
			build=tuple(version.build or ()),
		)

	@classmethod
	def try_parse(cls, name: str, tag_prefix_regex: str) -> SemanticVersion | None:
		"""
		Parse a tag name into a semantic version.

		The prefix regex is optional and anchored at the start of the name; the
		rest of the name must be a full semantic version or a partial
		``major[.minor]`` version.

		Args:
			name: Tag name, e.g. ``v1.2.3``
			tag_prefix_regex: Regex matching the tag prefix, e.g. ``[vV]``

		Returns:
			The parsed version, or None if ``name`` is not a version
		"""
		match = re.match(rf"^(?:{tag_prefix_regex})?(?P<version>.*)$", name)
		if match is None:
			return None
		remainder = match.group("version")
		try:
			return cls.from_version(Version(remainder))
		except ValueError:
			if not _PARTIAL_VERSION.match(remainder):
				logger.debug("Tag '%s' is not a semantic version", name)
				return None
		return cls.from_version(Version.coerce(remainder))

	def to_version(self) -> Version:
		"""Convert to a ``semantic_version.Version``."""
		return Version(
			major=self.major,
			minor=self.minor,
			patch=self.patch,
			prerelease=self.prerelease,
			build=self.build,
		)

	def __lt__(self, other: object) -> bool:
		if not isinstance(other, SemanticVersion):
			return NotImplemented
		return self.to_version() < other.to_version()

	def __le__(self, other: object) -> bool:
		if not isinstance(other, SemanticVersion):
			return NotImplemented
		return self.to_version() <= other.to_version()

	def __gt__(self, other: object) -> bool:
		if not isinstance(other, SemanticVersion):
			return NotImplemented
		return self.to_version() > other.to_version()

	def __ge__(self, other: object) -> bool:
		if not isinstance(other, SemanticVersion):
			return NotImplemented
		return self.to_version() >= other.to_version()

	def __str__(self) -> str:
		return str(self.to_version())
