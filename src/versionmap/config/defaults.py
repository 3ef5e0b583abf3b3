"""Default configuration settings for versionmap."""

DEFAULT_CONFIG = {
	# Regex for the prefix in front of the version in tag names
	"tag_prefix": "[vV]",
	# Branch types, keyed by name. Each regex is matched against the start of
	# the branch name; source_branches lists the branch types it may fork from.
	"branches": {
		"main": {
			"regex": r"^(master|main)$",
			"source_branches": ["develop", "release"],
		},
		"develop": {
			"regex": r"^dev(elop)?(ment)?$",
			"source_branches": [],
		},
		"release": {
			"regex": r"^releases?[/-]",
			"source_branches": ["develop", "main", "support", "release"],
		},
		"feature": {
			"regex": r"^features?[/-]",
			"source_branches": ["develop", "main", "release", "feature", "support", "hotfix"],
		},
		"pull-request": {
			"regex": r"^(pull|pull\-requests|pr)[/-]",
			"source_branches": ["develop", "main", "release", "feature", "support", "hotfix"],
		},
		"hotfix": {
			"regex": r"^hotfix(es)?[/-]",
			"source_branches": ["develop", "main", "support"],
		},
		"support": {
			"regex": r"^support[/-]",
			"source_branches": ["main"],
		},
	},
}
