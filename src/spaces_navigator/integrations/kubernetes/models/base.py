"""Base models for Kubernetes resources consumed by the navigator."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class K8sEntityBase(BaseModel):
    """Base class for all Kubernetes resource models."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(description="Resource name")
    namespace: str | None = Field(default=None, description="Resource namespace")
    labels: dict[str, str] | None = Field(default=None, description="Resource labels")

    _entity_name: ClassVar[str] = "entity"

    def label(self, key: str) -> str | None:
        """Return the value of a label, or None if unset."""
        if not self.labels:
            return None
        return self.labels.get(key)


def _safe_get(obj: Any, *attrs: str, default: Any = None) -> Any:
    """Safely traverse nested attributes on kubernetes SDK objects."""
    current = obj
    for attr in attrs:
        if current is None:
            return default
        current = getattr(current, attr, None)
    return current if current is not None else default


def _dict_get(obj: dict[str, Any] | None, *keys: str, default: Any = None) -> Any:
    """Safely traverse nested keys on custom-object dicts."""
    current: Any = obj
    for key in keys:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
    return current if current is not None else default


def _get_labels(obj: Any) -> dict[str, str] | None:
    """Extract labels dict from an SDK object, returning None if empty."""
    labels = _safe_get(obj, "metadata", "labels")
    return dict(labels) if labels else None
