"""Shared pytest fixtures for spaces_navigator tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import typer
import yaml
from typer.testing import CliRunner

from spaces_navigator.cli.main import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def kubeconfig_dict() -> dict[str, object]:
    """A kubeconfig with a hub context and an unrelated context."""
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [
            {"name": "kind-hub", "cluster": {"server": "https://127.0.0.1:6443"}},
            {"name": "prod", "cluster": {"server": "https://prod.example.com"}},
        ],
        "users": [
            {"name": "kind-hub", "user": {"token": "hub-token"}},
            {"name": "prod-admin", "user": {"token": "prod-token"}},
        ],
        "contexts": [
            {"name": "kind-hub", "context": {"cluster": "kind-hub", "user": "kind-hub"}},
            {"name": "prod", "context": {"cluster": "prod", "user": "prod-admin"}},
        ],
        "current-context": "kind-hub",
        "preferences": {},
    }


@pytest.fixture
def kubeconfig_file(tmp_path: Path, kubeconfig_dict: dict[str, object]) -> Path:
    """Write kubeconfig_dict to a temporary file."""
    path = tmp_path / "kubeconfig"
    path.write_text(yaml.safe_dump(kubeconfig_dict))
    return path


@pytest.fixture
def up_config_file(tmp_path: Path) -> Path:
    """An up CLI config with a logged-in default profile."""
    path = tmp_path / "up.json"
    path.write_text(
        """
{
  "upbound": {
    "default": "default",
    "profiles": {
      "default": {"id": "jane", "type": "user", "session": "s3cr3t", "account": "acme"},
      "robot": {"id": "bot", "type": "token", "account": "acme"}
    }
  }
}
"""
    )
    return path


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("SPACES_") or key == "UP_PROFILE":
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def capture_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Fixture to capture log output."""
    import logging

    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app
