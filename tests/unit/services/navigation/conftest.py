"""Shared fixtures for navigation tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from spaces_navigator.core.config import NavigatorConfig
from spaces_navigator.integrations.kubernetes.client import KubernetesClient
from spaces_navigator.integrations.kubernetes.kubeconfig import KubeconfigStore
from spaces_navigator.integrations.kubernetes.models.spaces import SpaceIngress
from spaces_navigator.integrations.upbound.config import UpboundProfile
from spaces_navigator.services.navigation.nodes import Organization, Space


def make_client() -> MagicMock:
    """A mock KubernetesClient usable as a context manager."""
    client = MagicMock()
    client.__enter__.return_value = client
    client.request_options.return_value = {}
    client.translate_api_exception.side_effect = KubernetesClient.translate_api_exception
    return client


@pytest.fixture
def client_factory() -> Callable[[], MagicMock]:
    """Factory for mock clients."""
    return make_client


@pytest.fixture
def ingress() -> SpaceIngress:
    """A resolved Space ingress."""
    return SpaceIngress(host="eu-west.spaces.example.com", ca_data=b"-----BEGIN CERTIFICATE-----")


@pytest.fixture
def nav(kubeconfig_file: Path) -> MagicMock:
    """Navigation collaborators backed by a temporary kubeconfig."""
    store = KubeconfigStore(kubeconfig_file)
    nav = MagicMock()
    nav.config = NavigatorConfig(kubeconfig=str(kubeconfig_file))
    nav.kubeconfig = store
    nav.raw_kubeconfig.side_effect = store.load
    nav.profile.return_value = UpboundProfile(name="default", session=SecretStr("s3cr3t"))
    return nav


@pytest.fixture
def cloud_space(ingress: SpaceIngress) -> Space:
    """A Space of the acme organization."""
    auth_info: dict[str, Any] = {"exec": {"command": "up", "args": ["organization", "token"]}}
    return Space(
        name="eu-west",
        ingress=ingress,
        org=Organization(name="acme"),
        auth_info=auth_info,
    )


@pytest.fixture
def disconnected_space(ingress: SpaceIngress) -> Space:
    """A Space reached through the local kind-hub context."""
    return Space(name="kind-hub", ingress=ingress, hub_context="kind-hub")
