"""Navigator configuration with Pydantic validation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

# Environment variable -> field name
ENV_OVERRIDES = {
    "SPACES_KUBECONFIG": "kubeconfig",
    "UP_PROFILE": "profile",
    "SPACES_UP_CONFIG": "up_config",
    "SPACES_API_URL": "api_url",
    "SPACES_CONTROLLER_URL": "controller_url",
    "SPACES_PROBE_TIMEOUT": "probe_timeout",
    "SPACES_INGRESS_TIMEOUT": "ingress_timeout",
    "SPACES_POOL_SIZE": "pool_size",
    "SPACES_REQUEST_TIMEOUT": "request_timeout",
}


class NavigatorConfig(BaseModel):
    """Settings for browsing Spaces and switching kubeconfig contexts."""

    model_config = ConfigDict(extra="forbid")

    kubeconfig: str = "~/.kube/config"
    profile: str | None = None
    up_config: str = "~/.up/config.json"
    api_url: str = "https://api.upbound.io"
    controller_url: str = "https://spaces.upbound.io"
    credential_command: str = "up"

    # Disconnected probes read one ConfigMap per local context
    probe_timeout: float = 2.0
    # Cloud ingress resolution opens one TLS connection per Space
    ingress_timeout: float = 10.0
    pool_size: int = 20
    request_timeout: float = 30.0

    @field_validator("kubeconfig", "up_config")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ in file paths."""
        return str(Path(v).expanduser())

    @field_validator("probe_timeout", "ingress_timeout", "request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeouts are positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("pool_size")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        """Validate the worker pool has at least one worker."""
        if v < 1:
            raise ValueError("pool_size must be at least 1")
        return v

    @field_validator("api_url", "controller_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs."""
        return v.rstrip("/")

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> NavigatorConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            SPACES_KUBECONFIG: Kubeconfig file to read and switch
            UP_PROFILE: up CLI profile name
            SPACES_UP_CONFIG: up CLI config file
            SPACES_API_URL: Upbound API base URL
            SPACES_CONTROLLER_URL: Upbound cloud controller API URL
            SPACES_PROBE_TIMEOUT: Disconnected Space probe timeout (seconds)
            SPACES_INGRESS_TIMEOUT: Cloud Space ingress resolution timeout (seconds)
            SPACES_POOL_SIZE: Maximum concurrent ingress resolutions
            SPACES_REQUEST_TIMEOUT: Upbound API request timeout (seconds)
        """
        config_dict = base_config.copy() if base_config else {}

        for env_name, field_name in ENV_OVERRIDES.items():
            if value := os.environ.get(env_name):
                config_dict[field_name] = value

        return cls.model_validate(config_dict)


def load_config(**overrides: Any) -> NavigatorConfig:
    """Load configuration from the environment, then apply explicit overrides.

    Overrides set to None are ignored, so unset CLI options fall through to
    the environment and the defaults.
    """
    config = NavigatorConfig.from_env()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return config
    return NavigatorConfig.model_validate({**config.model_dump(), **updates})
