"""Configuration management with Pydantic validation."""

from spaces_navigator.core.config.models import NavigatorConfig, load_config

__all__ = ["NavigatorConfig", "load_config"]
