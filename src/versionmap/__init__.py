"""versionmap: semantic-version facts from a git commit graph."""

__version__ = "0.1.0"
