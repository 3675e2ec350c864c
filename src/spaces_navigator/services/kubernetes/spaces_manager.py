"""Upbound Spaces resource manager.

Lists cloud Spaces, control plane groups and control planes, and reads the
public ingress a Space advertises about itself.
"""

from __future__ import annotations

from spaces_navigator.integrations.kubernetes.models.spaces import (
    GROUP_LABEL,
    ControlPlaneSummary,
    GroupSummary,
    SpaceIngress,
    SpaceSummary,
)
from spaces_navigator.services.kubernetes.base import K8sBaseManager

# Cloud controller: Spaces live in the organization's namespace
CLOUD_SPACE_GROUP = "upbound.io"
CLOUD_SPACE_VERSION = "v1alpha1"
CLOUD_SPACE_PLURAL = "spaces"

# Space API: control planes live in their group's namespace
CONTROL_PLANE_GROUP = "spaces.upbound.io"
CONTROL_PLANE_VERSION = "v1beta1"
CONTROL_PLANE_PLURAL = "controlplanes"

# Every Space publishes its ingress in this ConfigMap
INGRESS_NAMESPACE = "upbound-system"
INGRESS_CONFIGMAP = "ingress-public"
INGRESS_HOST_KEY = "ingress-host"
INGRESS_CA_KEY = "ingress-ca"


class SpacesManager(K8sBaseManager):
    """Manager for Spaces resources.

    The same manager serves the cloud controller (``list_spaces``) and an
    individual Space API (groups, control planes, ingress), depending on the
    client it is given.
    """

    _entity_name = "spaces"

    # =========================================================================
    # Cloud Operations
    # =========================================================================

    def list_spaces(self, organization: str) -> list[SpaceSummary]:
        """List the cloud Spaces of an organization.

        Args:
            organization: Organization name (its namespace on the controller).

        Returns:
            List of Space summaries.
        """
        self._log.debug("listing_spaces", organization=organization)
        try:
            result = self._client.custom_objects.list_namespaced_custom_object(
                CLOUD_SPACE_GROUP,
                CLOUD_SPACE_VERSION,
                organization,
                CLOUD_SPACE_PLURAL,
                **self._request_options(),
            )
            items = [SpaceSummary.from_k8s_object(obj) for obj in result.get("items", [])]
            self._log.debug("listed_spaces", organization=organization, count=len(items))
            return items
        except Exception as e:
            self._handle_api_error(e, "Space", None, organization)

    # =========================================================================
    # Space Operations
    # =========================================================================

    def list_groups(self) -> list[GroupSummary]:
        """List control plane groups (namespaces labelled as groups).

        Returns:
            List of group summaries.
        """
        self._log.debug("listing_groups")
        try:
            result = self._client.core_v1.list_namespace(
                label_selector=f"{GROUP_LABEL}=true",
                **self._request_options(),
            )
            items = [GroupSummary.from_k8s_object(ns) for ns in result.items]
            self._log.debug("listed_groups", count=len(items))
            return items
        except Exception as e:
            self._handle_api_error(e, "Namespace", None, None)

    def list_control_planes(self, group: str) -> list[ControlPlaneSummary]:
        """List the control planes of a group.

        Args:
            group: Group (namespace) name.

        Returns:
            List of control plane summaries.
        """
        self._log.debug("listing_control_planes", group=group)
        try:
            result = self._client.custom_objects.list_namespaced_custom_object(
                CONTROL_PLANE_GROUP,
                CONTROL_PLANE_VERSION,
                group,
                CONTROL_PLANE_PLURAL,
                **self._request_options(),
            )
            items = [ControlPlaneSummary.from_k8s_object(obj) for obj in result.get("items", [])]
            self._log.debug("listed_control_planes", group=group, count=len(items))
            return items
        except Exception as e:
            self._handle_api_error(e, "ControlPlane", None, group)

    def get_ingress(self) -> SpaceIngress:
        """Read the public ingress of the Space the client points at.

        Returns:
            Ingress host (scheme stripped) and CA bundle. Missing keys yield
            empty values.
        """
        self._log.debug("reading_space_ingress")
        try:
            result = self._client.core_v1.read_namespaced_config_map(
                name=INGRESS_CONFIGMAP,
                namespace=INGRESS_NAMESPACE,
                **self._request_options(),
            )
        except Exception as e:
            self._handle_api_error(e, "ConfigMap", INGRESS_CONFIGMAP, INGRESS_NAMESPACE)

        data = result.data or {}
        return SpaceIngress(
            host=data.get(INGRESS_HOST_KEY, "").removeprefix("https://"),
            ca_data=data.get(INGRESS_CA_KEY, "").encode(),
        )
