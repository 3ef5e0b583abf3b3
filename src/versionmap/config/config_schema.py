"""Pydantic schemas for versionmap configuration."""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, Field, field_validator, model_validator

from versionmap.config.defaults import DEFAULT_CONFIG

logger = logging.getLogger(__name__)


class BranchConfigSchema(BaseModel):
	"""Configuration for one branch type."""

	regex: str
	"""Regex matched against the start of a branch name (case-insensitive)."""

	source_branches: list[str] = Field(default_factory=list)
	"""Branch types this branch type may be created from."""

	@field_validator("regex")
	@classmethod
	def _check_regex(cls, value: str) -> str:
		try:
			re.compile(value)
		except re.error as e:
			msg = f"Invalid branch regex '{value}': {e}"
			raise ValueError(msg) from e
		return value


def _default_branches() -> dict[str, BranchConfigSchema]:
	return {name: BranchConfigSchema(**values) for name, values in DEFAULT_CONFIG["branches"].items()}


class AppConfigSchema(BaseModel):
	"""Top-level application configuration."""

	tag_prefix: str = "[vV]"
	"""Regex for the prefix that precedes the version in tag names."""

	branches: dict[str, BranchConfigSchema] = Field(default_factory=_default_branches)

	@model_validator(mode="after")
	def _check_source_branches(self) -> AppConfigSchema:
		for name, branch_config in self.branches.items():
			unknown = [source for source in branch_config.source_branches if source not in self.branches]
			if unknown:
				msg = f"Branch configuration '{name}' lists unknown source branches: {', '.join(unknown)}"
				raise ValueError(msg)
		return self

	def get_config_for_branch(self, branch_name: str) -> BranchConfigSchema | None:
		"""
		Find the branch configuration whose regex matches ``branch_name``.

		Args:
			branch_name: Branch name without any remote prefix

		Returns:
			The first matching configuration, or None if nothing matches
		"""
		matches = [
			(name, branch_config)
			for name, branch_config in self.branches.items()
			if re.match(branch_config.regex, branch_name, re.IGNORECASE)
		]
		if not matches:
			return None
		if len(matches) > 1:
			logger.warning(
				"Multiple branch configurations match '%s' (%s), using '%s'",
				branch_name,
				", ".join(name for name, _ in matches),
				matches[0][0],
			)
		return matches[0][1]

	def source_branch_regexes(self, branch_config: BranchConfigSchema) -> list[str]:
		"""Collect the regexes of every source branch type of ``branch_config``."""
		return [self.branches[source].regex for source in branch_config.source_branches]
