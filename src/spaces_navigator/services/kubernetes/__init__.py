"""Kubernetes service managers for Spaces."""

from spaces_navigator.services.kubernetes.base import K8sBaseManager
from spaces_navigator.services.kubernetes.prerequisites import CloudNativePGOperator
from spaces_navigator.services.kubernetes.spaces_manager import SpacesManager

__all__ = ["CloudNativePGOperator", "K8sBaseManager", "SpacesManager"]
