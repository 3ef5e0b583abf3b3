"""Utility modules for versionmap."""
