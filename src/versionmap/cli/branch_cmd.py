"""CLI commands for branch relationships: merge base, source branch and reachability."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

import typer
from rich.table import Table

from versionmap.cli.common import ConfigOpt, PathOpt, find_branch, load_provider
from versionmap.utils.cli_utils import console, exit_with_error, show_warning
from versionmap.utils.git_utils import GitError

if TYPE_CHECKING:
	from pathlib import Path

logger = logging.getLogger(__name__)

BranchArg = Annotated[str, typer.Argument(help="Branch being analysed.")]
OtherBranchArg = Annotated[str, typer.Argument(help="Branch to compare against.")]
CommitArg = Annotated[str, typer.Argument(help="Commit to look for (sha, tag or any revision).")]

ExcludeOpt = Annotated[
	list[str] | None,
	typer.Option(
		"--exclude",
		"-x",
		help="Branch that must not be reported as the source (repeatable).",
	),
]

TrackedOnlyFlag = Annotated[
	bool,
	typer.Option(
		"--tracked-only",
		help="Only consider branches that track a remote branch.",
	),
]


def register_command(app: typer.Typer) -> None:
	"""Register the branch commands with the CLI app."""

	@app.command(name="merge-base")
	def merge_base_command(
		branch: BranchArg,
		other_branch: OtherBranchArg,
		path: PathOpt = None,
		config: ConfigOpt = None,
	) -> None:
		"""Show where two branches diverged, ignoring forward merges into the other branch."""
		provider = load_provider(path, config)
		record = provider.get_merge_base_record(find_branch(provider, branch), find_branch(provider, other_branch))
		if record.merge_base is None:
			console.print(f"'{branch}' and '{other_branch}' have no common history.")
			return
		console.print(record.merge_base.id)
		if record.corrections:
			logger.info("Skipped %d forward merge(s)", record.corrections)

	@app.command(name="source")
	def source_command(
		branch: BranchArg,
		path: PathOpt = None,
		config: ConfigOpt = None,
		exclude: ExcludeOpt = None,
	) -> None:
		"""Find the branch and commit a branch was created from."""
		_source_command_impl(branch_name=branch, path=path, config=config, exclude=exclude or [])

	@app.command(name="containing")
	def containing_command(
		commit: CommitArg,
		path: PathOpt = None,
		config: ConfigOpt = None,
		tracked_only: TrackedOnlyFlag = False,
	) -> None:
		"""List the branches that contain a commit."""
		_containing_command_impl(commit_spec=commit, path=path, config=config, tracked_only=tracked_only)


def _source_command_impl(branch_name: str, path: Path | None, config: Path | None, exclude: list[str]) -> None:
	provider = load_provider(path, config)
	branch = find_branch(provider, branch_name)
	excluded = [find_branch(provider, name) for name in exclude]

	source = provider.find_commit_branch_was_branched_from(branch, *excluded)
	if source.is_empty:
		console.print(f"No source branch found for '{branch.name}'.")
		return

	candidates = [
		candidate
		for candidate in provider.get_merge_commits_for_branch(branch, excluded)
		if not branch.is_same_branch(candidate.branch)
	]
	table = Table(title=f"Source of '{branch.name}'")
	table.add_column("Branch")
	table.add_column("Merge base")
	table.add_column("Committed")
	for candidate in candidates:
		marker = " (chosen)" if candidate == source else ""
		committed = candidate.commit.committer_time.isoformat() if candidate.commit.committer_time else ""
		table.add_row(f"{candidate.branch.name}{marker}", candidate.commit.short_id, committed)
	console.print(table)

	if len(candidates) > 1:
		show_warning(
			f"Multiple source branches were found for '{branch.name}'. "
			f"'{source.branch.name}' has the most recent merge base and was chosen."
		)


def _containing_command_impl(commit_spec: str, path: Path | None, config: Path | None, tracked_only: bool) -> None:
	provider = load_provider(path, config)
	try:
		commit = provider.graph.resolve_commit(commit_spec)
	except GitError as e:
		exit_with_error(f"Unknown commit: {commit_spec}", exception=e)

	found = False
	for branch in provider.get_branches_containing_commit(commit, list(provider.graph.branches()), tracked_only):
		found = True
		console.print(branch.name)
	if not found:
		console.print(f"No branch contains {commit.short_id}.")
