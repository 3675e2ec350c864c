"""Kubernetes resource models used by the navigator."""

from spaces_navigator.integrations.kubernetes.models.base import K8sEntityBase
from spaces_navigator.integrations.kubernetes.models.spaces import (
    CloudSpaceExtension,
    ControlPlaneSummary,
    DisconnectedSpaceExtension,
    GroupSummary,
    SpaceExtension,
    SpaceExtensionSpec,
    SpaceIngress,
    SpaceSummary,
)

__all__ = [
    "CloudSpaceExtension",
    "ControlPlaneSummary",
    "DisconnectedSpaceExtension",
    "GroupSummary",
    "K8sEntityBase",
    "SpaceExtension",
    "SpaceExtensionSpec",
    "SpaceIngress",
    "SpaceSummary",
]
