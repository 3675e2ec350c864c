"""Upbound Spaces resource models.

Spaces and ControlPlanes are read through ``CustomObjectsApi``, which returns
raw ``dict`` objects, so their ``from_k8s_object`` classmethods use
``dict.get()``. Groups are plain namespaces returned as SDK objects.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spaces_navigator.integrations.kubernetes.models.base import (
    K8sEntityBase,
    _dict_get,
    _get_labels,
    _safe_get,
)

# Cloud Space labels and status values
SPACE_MODE_LABEL = "spaces.upbound.io/mode"
SPACE_MODE_LEGACY = "legacy"
CONNECTION_STATUS_UNREACHABLE = "Unreachable"

# Namespaces carrying this label set to "true" are control plane groups
GROUP_LABEL = "spaces.upbound.io/group"

# Kubeconfig context extension written for every synthesized context
SPACE_EXTENSION_KEY = "spaces.upbound.io/space"
SPACE_EXTENSION_API_VERSION = "spaces.upbound.io/v1alpha1"
SPACE_EXTENSION_KIND = "SpaceExtension"


class SpaceIngress(BaseModel):
    """Externally reachable endpoint of a Space's API."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="", description="Ingress host name, without scheme")
    ca_data: bytes = Field(default=b"", description="PEM encoded CA bundle")


class SpaceSummary(K8sEntityBase):
    """Cloud Space as listed in an organization namespace."""

    _entity_name: ClassVar[str] = "space"

    mode: str | None = Field(default=None, description="Space mode label")
    connection_status: str | None = Field(default=None, description="Connection status")
    fqdn: str | None = Field(default=None, description="Public FQDN of the Space ingress")

    @property
    def is_legacy(self) -> bool:
        """Whether the Space runs in legacy mode and cannot be navigated."""
        return self.mode == SPACE_MODE_LEGACY

    @property
    def is_unreachable(self) -> bool:
        """Whether the cloud reports the Space as disconnected."""
        return self.connection_status == CONNECTION_STATUS_UNREACHABLE

    @classmethod
    def from_k8s_object(cls, obj: dict[str, Any]) -> SpaceSummary:
        """Create from an ``upbound.io/v1alpha1`` Space dict."""
        metadata: dict[str, Any] = obj.get("metadata", {})
        labels = metadata.get("labels") or None
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace"),
            labels=labels,
            mode=labels.get(SPACE_MODE_LABEL) if labels else None,
            connection_status=_dict_get(obj, "status", "connectionDetails", "status"),
            fqdn=_dict_get(obj, "status", "fqdn"),
        )


class GroupSummary(K8sEntityBase):
    """Control plane group (a labelled namespace)."""

    _entity_name: ClassVar[str] = "group"

    @classmethod
    def from_k8s_object(cls, obj: Any) -> GroupSummary:
        """Create from a kubernetes V1Namespace object."""
        return cls(
            name=_safe_get(obj, "metadata", "name", default=""),
            labels=_get_labels(obj),
        )


class ControlPlaneSummary(K8sEntityBase):
    """Control plane inside a group."""

    _entity_name: ClassVar[str] = "controlplane"

    @classmethod
    def from_k8s_object(cls, obj: dict[str, Any]) -> ControlPlaneSummary:
        """Create from a ``spaces.upbound.io/v1beta1`` ControlPlane dict."""
        metadata: dict[str, Any] = obj.get("metadata", {})
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace"),
            labels=metadata.get("labels") or None,
        )


# =============================================================================
# Context extension
# =============================================================================


class CloudSpaceExtension(BaseModel):
    """Marks a context as pointing at a cloud Space."""

    model_config = ConfigDict(populate_by_name=True)

    organization: str
    space_name: str = Field(alias="spaceName")


class DisconnectedSpaceExtension(BaseModel):
    """Marks a context as pointing at a disconnected Space via a hub context."""

    model_config = ConfigDict(populate_by_name=True)

    hub_context: str = Field(alias="hubContext")


class SpaceExtensionSpec(BaseModel):
    """Exactly one of ``cloud`` or ``disconnected`` is set."""

    cloud: CloudSpaceExtension | None = None
    disconnected: DisconnectedSpaceExtension | None = None


class SpaceExtension(BaseModel):
    """Kubeconfig context extension stored under ``spaces.upbound.io/space``."""

    model_config = ConfigDict(populate_by_name=True)

    api_version: str = Field(default=SPACE_EXTENSION_API_VERSION, alias="apiVersion")
    kind: str = SPACE_EXTENSION_KIND
    spec: SpaceExtensionSpec = Field(default_factory=SpaceExtensionSpec)

    @field_validator("api_version")
    @classmethod
    def validate_api_version(cls, v: str) -> str:
        """Only the v1alpha1 extension is understood."""
        if v != SPACE_EXTENSION_API_VERSION:
            raise ValueError(f"unsupported space extension apiVersion: {v}")
        return v

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        """Validate the extension kind."""
        if v != SPACE_EXTENSION_KIND:
            raise ValueError(f"unsupported space extension kind: {v}")
        return v

    @classmethod
    def for_cloud(cls, organization: str, space_name: str) -> SpaceExtension:
        """Extension for a context scoped to an organization's Space."""
        return cls(
            spec=SpaceExtensionSpec(
                cloud=CloudSpaceExtension(organization=organization, space_name=space_name)
            )
        )

    @classmethod
    def for_disconnected(cls, hub_context: str) -> SpaceExtension:
        """Extension for a context derived from a local hub context."""
        return cls(
            spec=SpaceExtensionSpec(
                disconnected=DisconnectedSpaceExtension(hub_context=hub_context)
            )
        )

    @property
    def is_cloud(self) -> bool:
        """Whether the extension points at a cloud Space."""
        return self.spec.cloud is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize in kubeconfig form."""
        return self.model_dump(by_alias=True, exclude_none=True)
