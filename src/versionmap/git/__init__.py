"""Git graph access for versionmap."""

from versionmap.git.graph import CommitGraph
from versionmap.git.models import Branch, BranchCommit, Commit, Tag

__all__ = [
	"Branch",
	"BranchCommit",
	"Commit",
	"CommitGraph",
	"Tag",
]
