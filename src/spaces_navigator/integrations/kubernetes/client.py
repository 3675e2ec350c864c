"""Kubernetes API client wrapper.

Wraps the official kubernetes Python client around an in-memory kubeconfig
document so that several clusters can be addressed side by side (one client
per Space, per local context, or for the cloud controller), with lazy API
group initialization and consistent error translation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from spaces_navigator.integrations.kubernetes.exceptions import (
    KubeconfigError,
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
)

if TYPE_CHECKING:
    from kubernetes.client import (
        ApiClient,
        ApiextensionsV1Api,
        CoreV1Api,
        CustomObjectsApi,
    )

logger = structlog.get_logger()


class KubernetesClient:
    """Kubernetes API client bound to one kubeconfig context.

    Unlike ``kubernetes.config.load_kube_config`` this never touches the
    process-wide default configuration, so clients for different clusters
    can be used concurrently from worker threads.

    Example:
        ```python
        from spaces_navigator.integrations.kubernetes import KubernetesClient

        with KubernetesClient.from_kubeconfig(raw_config, context="kind-hub") as client:
            namespaces = client.core_v1.list_namespace(**client.request_options())
        ```
    """

    def __init__(
        self,
        api_client: ApiClient,
        context: str | None = None,
        request_timeout: float | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_client: Configured kubernetes ApiClient.
            context: Name of the kubeconfig context the client points at.
            request_timeout: Per-request timeout in seconds, or None to use
                the library default.
        """
        self._api_client = api_client
        self._context = context
        self._request_timeout = request_timeout

        # Lazy-loaded API group instances
        self._core_v1: CoreV1Api | None = None
        self._custom_objects: CustomObjectsApi | None = None
        self._apiextensions_v1: ApiextensionsV1Api | None = None

    @classmethod
    def from_kubeconfig(
        cls,
        config: dict[str, Any],
        context: str | None = None,
        *,
        request_timeout: float | None = None,
    ) -> KubernetesClient:
        """Build a client from a kubeconfig document.

        Args:
            config: Kubeconfig document as a dict.
            context: Context to use; defaults to the document's current-context.
            request_timeout: Per-request timeout in seconds.

        Returns:
            A client pointed at the selected context.

        Raises:
            KubeconfigError: If the document cannot be turned into a client.
        """
        from kubernetes import config as k8s_config
        from kubernetes.config import ConfigException

        context_name = context or config.get("current-context")
        try:
            api_client = k8s_config.new_client_from_config_dict(
                config_dict=config,
                context=context,
                persist_config=False,
            )
        except (ConfigException, ValueError) as e:
            raise KubeconfigError(
                message=f"Cannot load kubeconfig context '{context_name}': {e}",
            ) from e

        logger.debug("kubernetes_client_created", context=context_name)
        return cls(api_client, context=context_name, request_timeout=request_timeout)

    # =========================================================================
    # Lazy API Group Accessors
    # =========================================================================

    @property
    def core_v1(self) -> CoreV1Api:
        """Get CoreV1Api instance (namespaces, configmaps, pods)."""
        if self._core_v1 is None:
            from kubernetes.client import CoreV1Api

            self._core_v1 = CoreV1Api(self._api_client)
        return self._core_v1

    @property
    def custom_objects(self) -> CustomObjectsApi:
        """Get CustomObjectsApi instance (Spaces, ControlPlanes)."""
        if self._custom_objects is None:
            from kubernetes.client import CustomObjectsApi

            self._custom_objects = CustomObjectsApi(self._api_client)
        return self._custom_objects

    @property
    def apiextensions_v1(self) -> ApiextensionsV1Api:
        """Get ApiextensionsV1Api instance (CustomResourceDefinitions)."""
        if self._apiextensions_v1 is None:
            from kubernetes.client import ApiextensionsV1Api

            self._apiextensions_v1 = ApiextensionsV1Api(self._api_client)
        return self._apiextensions_v1

    # =========================================================================
    # Request Options
    # =========================================================================

    def request_options(self) -> dict[str, Any]:
        """Keyword arguments to pass to every API call.

        Returns:
            ``{"_request_timeout": seconds}`` when a timeout is configured,
            otherwise an empty dict.
        """
        if self._request_timeout is None:
            return {}
        return {"_request_timeout": self._request_timeout}

    @property
    def context(self) -> str | None:
        """Name of the kubeconfig context this client points at."""
        return self._context

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    def translate_api_exception(
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> KubernetesError:
        """Translate a kubernetes client exception to a custom exception.

        Args:
            e: The original exception.
            resource_type: Type of resource being operated on.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.

        Returns:
            An appropriate KubernetesError subclass.
        """
        from kubernetes.client import ApiException

        if isinstance(e, KubernetesError):
            return e

        if not isinstance(e, ApiException):
            # Transport-level failures (DNS, TLS, refused, timeouts)
            return KubernetesConnectionError(
                message=f"Failed to reach Kubernetes API: {e}",
                original_error=e,
            )

        status = e.status

        if status in (401, 403):
            return KubernetesAuthError(
                message=e.reason or "Authentication/authorization failed",
                status_code=status,
                reason=e.reason,
            )

        if status == 404:
            return KubernetesNotFoundError(
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        if status == 409:
            return KubernetesConflictError(
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        if status in (400, 422):
            return KubernetesValidationError(
                message=e.reason or "Validation failed",
                status_code=status,
            )

        return KubernetesError(
            message=e.reason or f"Kubernetes API error: {status}",
            status_code=status,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the client and release pooled connections."""
        self._core_v1 = None
        self._custom_objects = None
        self._apiextensions_v1 = None
        self._api_client.close()
        logger.debug("kubernetes_client_closed", context=self._context)

    def __enter__(self) -> KubernetesClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
