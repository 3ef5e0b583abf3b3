"""Repository metadata queries for version calculation."""

from versionmap.metadata.merge_base import ForwardMergeResolver, MergeBaseResolution, ResolutionState
from versionmap.metadata.provider import MergeBaseRecord, RepoMetadataProvider
from versionmap.metadata.tags import get_valid_version_tags

__all__ = [
	"ForwardMergeResolver",
	"MergeBaseRecord",
	"MergeBaseResolution",
	"RepoMetadataProvider",
	"ResolutionState",
	"get_valid_version_tags",
]
