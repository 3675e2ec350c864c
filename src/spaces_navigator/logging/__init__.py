"""Logging configuration."""

from spaces_navigator.logging.config import configure_logging

__all__ = ["configure_logging"]
