"""Shared fixtures for Kubernetes service tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from spaces_navigator.integrations.kubernetes.client import KubernetesClient


@pytest.fixture
def mock_k8s_client() -> MagicMock:
    """Create a mock Kubernetes client with API sub-mocks.

    Error translation and request options behave like the real client.
    """
    mock_client = MagicMock()
    mock_client.context = "kind-hub"
    mock_client.request_options.return_value = {"_request_timeout": 2.0}
    mock_client.translate_api_exception.side_effect = KubernetesClient.translate_api_exception
    return mock_client
