"""Version information for spaces_navigator."""

__version__ = "0.1.0"
