"""CLI commands listing semantic version tags."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import typer
from rich.table import Table

from versionmap.cli.common import ConfigOpt, PathOpt, TagPrefixOpt, find_branch, load_provider
from versionmap.utils.cli_utils import console

if TYPE_CHECKING:
	from pathlib import Path

logger = logging.getLogger(__name__)

OlderThanOpt = Annotated[
	datetime | None,
	typer.Option(
		"--older-than",
		help="Only include tags on commits committed at or before this time (local time if no offset).",
	),
]

BranchArg = Annotated[str, typer.Argument(help="Branch to search, e.g. 'main' or 'origin/develop'.")]


def register_command(app: typer.Typer) -> None:
	"""Register the tag commands with the CLI app."""

	@app.command(name="tags")
	def tags_command(
		path: PathOpt = None,
		config: ConfigOpt = None,
		tag_prefix: TagPrefixOpt = None,
		older_than: OlderThanOpt = None,
	) -> None:
		"""List every tag in the repository that is a semantic version."""
		_tags_command_impl(path=path, config=config, tag_prefix=tag_prefix, older_than=older_than)

	@app.command(name="branch-tags")
	def branch_tags_command(
		branch: BranchArg,
		path: PathOpt = None,
		config: ConfigOpt = None,
		tag_prefix: TagPrefixOpt = None,
	) -> None:
		"""List the versions tagged in the history of a branch, newest first."""
		_branch_tags_command_impl(branch_name=branch, path=path, config=config, tag_prefix=tag_prefix)


def _tags_command_impl(
	path: Path | None, config: Path | None, tag_prefix: str | None, older_than: datetime | None
) -> None:
	provider = load_provider(path, config)
	if older_than is not None and older_than.tzinfo is None:
		older_than = older_than.astimezone()

	table = Table(title="Version tags")
	table.add_column("Tag")
	table.add_column("Version")
	table.add_column("Commit")
	table.add_column("Committed")
	for tag, version in provider.get_valid_version_tags(tag_prefix, older_than):
		committed = tag.target.committer_time.isoformat() if tag.target.committer_time else ""
		table.add_row(tag.name, str(version), tag.target.short_id, committed)
	console.print(table)


def _branch_tags_command_impl(branch_name: str, path: Path | None, config: Path | None, tag_prefix: str | None) -> None:
	provider = load_provider(path, config)
	branch = find_branch(provider, branch_name)
	versions = provider.get_version_tags_on_branch(branch, tag_prefix)
	if not versions:
		console.print(f"No version tags on '{branch.name}'.")
		return
	for version in versions:
		console.print(str(version))
