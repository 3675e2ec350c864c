"""Helm CLI wrapper for installing prerequisite charts.

Wraps the helm binary via subprocess. Chart templating is left to helm
itself; this module only drives ``helm install`` against a chosen cluster.
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

import structlog

from spaces_navigator.integrations.kubernetes.exceptions import KubernetesError

logger = structlog.get_logger()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HELM_TIMEOUT_SECONDS = 300


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class HelmError(KubernetesError):
    """Base exception for Helm operations."""

    def __init__(
        self,
        message: str,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message=message)
        self.stderr = stderr


class HelmBinaryNotFoundError(HelmError):
    """Raised when helm binary is not found in PATH."""

    def __init__(self) -> None:
        super().__init__(
            message=(
                "helm binary not found in PATH. Install from: https://helm.sh/docs/intro/install/"
            ),
        )


class HelmCommandError(HelmError):
    """Raised when a helm command fails."""


@dataclass
class HelmCommandResult:
    """Result from a Helm command."""

    success: bool
    stdout: str
    stderr: str = ""


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class HelmClient:
    """Client for the Helm CLI, bound to one kubeconfig context."""

    def __init__(
        self,
        binary_path: str | None = None,
        *,
        kubeconfig: str | None = None,
        kube_context: str | None = None,
    ) -> None:
        """Initialize Helm client.

        Args:
            binary_path: Optional explicit path to helm binary.
                If None, searches PATH.
            kubeconfig: Kubeconfig file helm should use.
            kube_context: Context within the kubeconfig.

        Raises:
            HelmBinaryNotFoundError: If binary not found.
        """
        self._binary = self._find_binary(binary_path)
        self._kubeconfig = kubeconfig
        self._kube_context = kube_context
        self._log = logger.bind(binary=self._binary, kube_context=kube_context)
        self._log.debug("helm_client_initialized")

    @staticmethod
    def _find_binary(binary_path: str | None) -> str:
        """Locate helm binary.

        Raises:
            HelmBinaryNotFoundError: If not found.
        """
        if binary_path:
            path = Path(binary_path)
            if not path.exists():
                raise HelmBinaryNotFoundError()
            return str(path.resolve())

        found = shutil.which("helm")
        if not found:
            raise HelmBinaryNotFoundError()

        return found

    def _global_args(self) -> list[str]:
        args: list[str] = []
        if self._kubeconfig:
            args.extend(["--kubeconfig", self._kubeconfig])
        if self._kube_context:
            args.extend(["--kube-context", self._kube_context])
        return args

    def _run(
        self,
        args: list[str],
        *,
        timeout: int = HELM_TIMEOUT_SECONDS,
    ) -> subprocess.CompletedProcess[str]:
        """Run a helm command.

        Args:
            args: Command arguments (without the ``helm`` prefix).
            timeout: Timeout in seconds.

        Raises:
            HelmCommandError: On non-zero exit.
            HelmError: On timeout.
        """
        cmd = [self._binary, *args, *self._global_args()]
        self._log.debug("running_helm_command", args=args)

        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=timeout,
            )
        except subprocess.CalledProcessError as e:
            raise HelmCommandError(
                message=f"Helm command failed: {e.stderr.strip() if e.stderr else f'exit code {e.returncode}'}",
                stderr=e.stderr,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise HelmError(
                message=f"Helm command timed out after {timeout}s",
            ) from e

    def install(
        self,
        release_name: str,
        chart: str,
        *,
        repo: str | None = None,
        namespace: str | None = None,
        version: str | None = None,
    ) -> HelmCommandResult:
        """Install a Helm chart.

        Args:
            release_name: Name for the release.
            chart: Chart name, or reference when ``repo`` is not given.
            repo: Chart repository URL.
            namespace: Target Kubernetes namespace.
            version: Chart version to pin.

        Returns:
            Command result.
        """
        args = ["install", release_name, chart]
        if repo:
            args.extend(["--repo", repo])
        if namespace:
            args.extend(["--namespace", namespace])
        if version:
            args.extend(["--version", version])

        result = self._run(args)
        self._log.info("helm_install_success", release=release_name, chart=chart, version=version)
        return HelmCommandResult(success=True, stdout=result.stdout, stderr=result.stderr)
