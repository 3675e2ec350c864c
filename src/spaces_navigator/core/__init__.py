"""Core configuration for spaces_navigator."""
