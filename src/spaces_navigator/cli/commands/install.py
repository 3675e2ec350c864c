"""Commands installing prerequisites of self-hosted Spaces."""

from __future__ import annotations

import structlog
import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape

from spaces_navigator.core.config import load_config
from spaces_navigator.integrations.kubernetes.client import KubernetesClient
from spaces_navigator.integrations.kubernetes.exceptions import KubernetesError
from spaces_navigator.integrations.kubernetes.helm_client import HelmClient
from spaces_navigator.integrations.kubernetes.kubeconfig import KubeconfigStore
from spaces_navigator.services.kubernetes.prerequisites import CloudNativePGOperator
from spaces_navigator.tui.theme import Styles

app = typer.Typer(help="Install prerequisites into a cluster.")
console = Console()
logger = structlog.get_logger()


@app.command("cnpg")
def install_cnpg(
    kubeconfig: str | None = typer.Option(
        None,
        "--kubeconfig",
        help="Kubeconfig file (default: ~/.kube/config).",
    ),
    context: str | None = typer.Option(
        None,
        "--context",
        help="Kubeconfig context (default: current context).",
    ),
) -> None:
    """Install the CloudNativePG operator and wait until it is ready."""
    try:
        config = load_config(kubeconfig=kubeconfig)
    except PydanticValidationError as e:
        console.print(Styles.error(f"Invalid configuration: {escape(str(e))}"))
        raise typer.Exit(code=1) from e

    store = KubeconfigStore(config.kubeconfig)
    try:
        client = KubernetesClient.from_kubeconfig(
            store.load(), context, request_timeout=config.request_timeout
        )
        helm = HelmClient(kubeconfig=str(store.path), kube_context=context)
        with client:
            operator = CloudNativePGOperator(client, helm)
            if operator.is_installed():
                console.print(f"{operator.get_name()} is already installed.")
                return
            console.print(f"Installing {operator.get_name()}...")
            operator.install()
    except KubernetesError as e:
        logger.error("install_failed", chart="cloudnative-pg", error=str(e))
        console.print(Styles.error(f"Error: {escape(str(e))}"))
        raise typer.Exit(code=1) from e

    console.print(Styles.success(f"{operator.get_name()} installed."))
