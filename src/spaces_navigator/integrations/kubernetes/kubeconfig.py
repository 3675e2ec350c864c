"""Local kubeconfig store.

Reads and writes the kubeconfig file the navigator switches, and provides
helpers for the named-list layout (``clusters``, ``users``, ``contexts``)
of kubeconfig documents.
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from spaces_navigator.integrations.kubernetes.exceptions import KubeconfigError
from spaces_navigator.integrations.kubernetes.models.spaces import (
    SPACE_EXTENSION_KEY,
    SpaceExtension,
)

logger = structlog.get_logger()

# Sections of a kubeconfig that hold named entries, with the key of the payload
NAMED_SECTIONS = {
    "clusters": "cluster",
    "users": "user",
    "contexts": "context",
}


def empty_kubeconfig() -> dict[str, Any]:
    """Return an empty kubeconfig document."""
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [],
        "users": [],
        "contexts": [],
        "current-context": "",
        "preferences": {},
    }


def get_named(config: dict[str, Any], section: str, name: str) -> dict[str, Any] | None:
    """Return the payload of a named entry (e.g. a context), or None."""
    payload_key = NAMED_SECTIONS[section]
    for entry in config.get(section) or []:
        if entry.get("name") == name:
            payload: dict[str, Any] = entry.get(payload_key) or {}
            return payload
    return None


def set_named(config: dict[str, Any], section: str, name: str, payload: dict[str, Any]) -> None:
    """Insert or replace a named entry in place."""
    payload_key = NAMED_SECTIONS[section]
    entries = config.setdefault(section, [])
    if entries is None:
        entries = config[section] = []
    for entry in entries:
        if entry.get("name") == name:
            entry[payload_key] = payload
            return
    entries.append({"name": name, payload_key: payload})


def context_names(config: dict[str, Any]) -> list[str]:
    """Names of every context in the document."""
    return [entry["name"] for entry in config.get("contexts") or [] if entry.get("name")]


def get_space_extension(context: dict[str, Any]) -> SpaceExtension | None:
    """Return the Space extension stored on a context, if any.

    Args:
        context: Context payload (the value under ``context:``).

    Returns:
        The parsed extension, or None when the context has none.

    Raises:
        KubeconfigError: If the extension is present but malformed.
    """
    for entry in context.get("extensions") or []:
        if entry.get("name") != SPACE_EXTENSION_KEY:
            continue
        try:
            return SpaceExtension.model_validate(entry.get("extension") or {})
        except ValidationError as e:
            raise KubeconfigError(message=f"Invalid {SPACE_EXTENSION_KEY} extension: {e}") from e
    return None


def set_space_extension(context: dict[str, Any], extension: SpaceExtension) -> None:
    """Attach (or replace) the Space extension on a context payload."""
    extensions = [
        entry
        for entry in context.get("extensions") or []
        if entry.get("name") != SPACE_EXTENSION_KEY
    ]
    extensions.append({"name": SPACE_EXTENSION_KEY, "extension": extension.to_dict()})
    context["extensions"] = extensions


class KubeconfigStore:
    """Kubeconfig file on disk.

    Example:
        >>> store = KubeconfigStore("~/.kube/config")
        >>> raw = store.load()
        >>> sorted(context_names(raw))
        ['kind-hub', 'prod']
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize the store.

        Args:
            path: Kubeconfig file path; ``~`` is expanded.
        """
        self._path = Path(path).expanduser()
        self._log = logger.bind(kubeconfig=str(self._path))

    @property
    def path(self) -> Path:
        """Path of the kubeconfig file."""
        return self._path

    def load(self) -> dict[str, Any]:
        """Read the kubeconfig document.

        A missing file yields an empty document.

        Raises:
            KubeconfigError: If the file is unreadable or not a mapping.
        """
        if not self._path.exists():
            self._log.debug("kubeconfig_missing")
            return empty_kubeconfig()

        try:
            data = yaml.safe_load(self._path.read_text())
        except (OSError, yaml.YAMLError) as e:
            raise KubeconfigError(message=f"Cannot read kubeconfig {self._path}: {e}") from e

        if data is None:
            return empty_kubeconfig()
        if not isinstance(data, dict):
            raise KubeconfigError(message=f"Kubeconfig {self._path} is not a mapping")
        return data

    def save(self, config: dict[str, Any]) -> None:
        """Write the kubeconfig document, readable by the owner only."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_name(self._path.name + ".tmp")
            with tmp_path.open("w") as f:
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
            tmp_path.chmod(0o600)
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise KubeconfigError(message=f"Cannot write kubeconfig {self._path}: {e}") from e
        self._log.debug("kubeconfig_saved")

    def activate(self, fragment: dict[str, Any]) -> str:
        """Merge a synthesized kubeconfig and make its context current.

        Clusters, users and contexts of ``fragment`` replace entries of the
        same name in the stored document.

        Args:
            fragment: Kubeconfig document with a ``current-context``.

        Returns:
            Name of the context that is now current.
        """
        config = self.load()
        for section, payload_key in NAMED_SECTIONS.items():
            for entry in fragment.get(section) or []:
                set_named(config, section, entry["name"], copy.deepcopy(entry[payload_key]))

        context = fragment["current-context"]
        config["current-context"] = context
        self.save(config)
        self._log.info("kubeconfig_context_switched", context=context)
        return str(context)
