"""Astound error hierarchy.

All astound-specific errors inherit from AstoundError for easy catching.
"""


class AstoundError(Exception):
    """Base error for all astound operations."""


class ConfigError(AstoundError):
    """Invalid or missing configuration."""


class PluginResolutionError(AstoundError):
    """A plugin reference could not be resolved to a plugin object."""


class CacheConsistencyError(AstoundError):
    """A lifecycle operation targeted a route absent from the page cache."""


class BuildError(AstoundError):
    """Error while building a route (bad plugin output, unreadable route)."""
