"""Kubernetes integration - API client, kubeconfig store and Helm wrapper."""

from spaces_navigator.integrations.kubernetes.client import KubernetesClient
from spaces_navigator.integrations.kubernetes.exceptions import (
    KubeconfigError,
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
    SpaceConnectionError,
)
from spaces_navigator.integrations.kubernetes.kubeconfig import KubeconfigStore

__all__ = [
    "KubeconfigError",
    "KubeconfigStore",
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConflictError",
    "KubernetesConnectionError",
    "KubernetesError",
    "KubernetesNotFoundError",
    "KubernetesTimeoutError",
    "KubernetesValidationError",
    "SpaceConnectionError",
]
