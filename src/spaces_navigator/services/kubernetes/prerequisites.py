"""Prerequisite operators for self-hosted Spaces.

Installs the CloudNativePG operator with Helm and waits for it to become
ready.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tenacity import RetryError, Retrying, retry_if_result, stop_after_delay, wait_fixed

from spaces_navigator.integrations.kubernetes.exceptions import (
    KubernetesConflictError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
)
from spaces_navigator.services.kubernetes.base import K8sBaseManager

if TYPE_CHECKING:
    from spaces_navigator.integrations.kubernetes.client import KubernetesClient
    from spaces_navigator.integrations.kubernetes.helm_client import HelmClient

CNPG_CHART_NAME = "cloudnative-pg"
CNPG_NAMESPACE = "cnpg-system"
CNPG_REPO_URL = "https://cloudnative-pg.github.io/charts"
CNPG_CHART_VERSION = "0.21.5"
CNPG_CRD_NAME = "clusters.postgresql.cnpg.io"
CNPG_POD_SELECTOR = "app.kubernetes.io/name=cloudnative-pg"

POLL_INTERVAL_SECONDS = 2
READY_TIMEOUT_SECONDS = 600


class CloudNativePGOperator(K8sBaseManager):
    """Installs the CloudNativePG operator into a cluster."""

    _entity_name = "cloudnative_pg"

    def __init__(
        self,
        client: KubernetesClient,
        helm: HelmClient,
        *,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        ready_timeout: float = READY_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the installer.

        Args:
            client: Client for the target cluster.
            helm: Helm client bound to the same cluster.
            poll_interval: Seconds between readiness checks.
            ready_timeout: Seconds to wait for the operator pod.
        """
        super().__init__(client)
        self._helm = helm
        self._poll_interval = poll_interval
        self._ready_timeout = ready_timeout

    def get_name(self) -> str:
        return CNPG_CHART_NAME

    def is_installed(self) -> bool:
        """Whether the operator's ``Cluster`` CRD exists."""
        try:
            self._client.apiextensions_v1.read_custom_resource_definition(
                name=CNPG_CRD_NAME,
                **self._request_options(),
            )
        except Exception as e:
            error = self._client.translate_api_exception(
                e, "CustomResourceDefinition", CNPG_CRD_NAME
            )
            if isinstance(error, KubernetesNotFoundError):
                return False
            raise error from e
        return True

    def install(self) -> None:
        """Install the operator unless it is already present.

        Raises:
            KubernetesError: If the namespace, the chart install or the
                readiness wait fails.
            HelmError: If helm fails.
        """
        if self.is_installed():
            self._log.info("operator_already_installed", chart=CNPG_CHART_NAME)
            return

        self._create_namespace()
        self._helm.install(
            CNPG_CHART_NAME,
            CNPG_CHART_NAME,
            repo=CNPG_REPO_URL,
            namespace=CNPG_NAMESPACE,
            version=CNPG_CHART_VERSION,
        )
        self._wait_until_ready()
        self._log.info("operator_installed", chart=CNPG_CHART_NAME, version=CNPG_CHART_VERSION)

    def _create_namespace(self) -> None:
        from kubernetes.client import V1Namespace, V1ObjectMeta

        try:
            self._client.core_v1.create_namespace(
                body=V1Namespace(metadata=V1ObjectMeta(name=CNPG_NAMESPACE)),
                **self._request_options(),
            )
            self._log.info("created_namespace", name=CNPG_NAMESPACE)
        except Exception as e:
            error = self._client.translate_api_exception(e, "Namespace", CNPG_NAMESPACE)
            if not isinstance(error, KubernetesConflictError):
                raise error from e
            self._log.debug("namespace_exists", name=CNPG_NAMESPACE)

    def _pod_ready(self) -> bool:
        """True when exactly one operator pod exists and it is Ready."""
        try:
            result = self._client.core_v1.list_namespaced_pod(
                namespace=CNPG_NAMESPACE,
                label_selector=CNPG_POD_SELECTOR,
                **self._request_options(),
            )
        except Exception as e:
            self._handle_api_error(e, "Pod", None, CNPG_NAMESPACE)

        if len(result.items) != 1:
            return False
        conditions = (result.items[0].status and result.items[0].status.conditions) or []
        return any(c.type == "Ready" and c.status == "True" for c in conditions)

    def _wait_until_ready(self) -> None:
        retrying = Retrying(
            retry=retry_if_result(lambda ready: not ready),
            wait=wait_fixed(self._poll_interval),
            stop=stop_after_delay(self._ready_timeout),
        )
        self._log.info("waiting_for_operator", selector=CNPG_POD_SELECTOR)
        try:
            retrying(self._pod_ready)
        except RetryError as e:
            raise KubernetesTimeoutError(
                f"failed to wait for {CNPG_CHART_NAME} pod to be ready",
                timeout_seconds=int(self._ready_timeout),
            ) from e
        except KubernetesError as e:
            raise KubernetesError(
                message=f"failed to wait for {CNPG_CHART_NAME} pod to be ready: {e}",
                status_code=e.status_code,
            ) from e
