"""Upbound profile configuration.

Profiles are written by ``up login`` to ``~/.up/config.json``::

    {
      "upbound": {
        "default": "default",
        "profiles": {
          "default": {"id": "me", "type": "user", "session": "...", "account": "my-org"}
        }
      }
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from spaces_navigator.integrations.upbound.exceptions import UpboundProfileError

DEFAULT_UP_CONFIG = Path.home() / ".up" / "config.json"


class UpboundProfile(BaseModel):
    """A single ``up`` CLI profile."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="default", description="Profile name")
    id: str = Field(default="", description="User or robot identifier")
    type: Literal["user", "token"] = "user"
    session: SecretStr | None = Field(default=None, description="Session token")
    account: str = Field(default="", description="Default organization")
    domain: str | None = None

    @property
    def is_logged_in(self) -> bool:
        """Whether the profile carries a session."""
        return self.session is not None and bool(self.session.get_secret_value())


def load_profile(path: str | Path = DEFAULT_UP_CONFIG, name: str | None = None) -> UpboundProfile:
    """Load an ``up`` profile.

    Args:
        path: Path of the up CLI config file.
        name: Profile name; defaults to the file's default profile.

    Returns:
        The selected profile.

    Raises:
        UpboundProfileError: If the file, the profile or its fields are invalid.
    """
    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise UpboundProfileError(
            f"No up configuration found at {config_path}",
            details="Run 'up login' first",
        )

    try:
        data: dict[str, Any] = json.loads(config_path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise UpboundProfileError(f"Cannot read {config_path}: {e}") from e

    upbound = data.get("upbound") or {}
    profiles: dict[str, Any] = upbound.get("profiles") or {}
    profile_name = name or upbound.get("default")
    if not profile_name:
        raise UpboundProfileError("No default profile is set", details="Run 'up login' first")
    if profile_name not in profiles:
        raise UpboundProfileError(f"Profile '{profile_name}' does not exist")

    try:
        return UpboundProfile.model_validate({**profiles[profile_name], "name": profile_name})
    except ValidationError as e:
        raise UpboundProfileError(f"Profile '{profile_name}' is invalid: {e}") from e
