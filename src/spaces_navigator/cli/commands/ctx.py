"""Interactive context switching command."""

from __future__ import annotations

import structlog
import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape

from spaces_navigator.core.config import load_config
from spaces_navigator.services.navigation.context import NavContext
from spaces_navigator.tui.apps.navigator import NavigatorApp
from spaces_navigator.tui.theme import Styles

console = Console()
logger = structlog.get_logger()


def ctx(
    kubeconfig: str | None = typer.Option(
        None,
        "--kubeconfig",
        help="Kubeconfig file to switch (default: ~/.kube/config).",
    ),
    profile: str | None = typer.Option(
        None,
        "--profile",
        "-p",
        help="up CLI profile to use.",
    ),
) -> None:
    """Browse organizations, Spaces, groups and control planes and switch to one."""
    try:
        config = load_config(kubeconfig=kubeconfig, profile=profile)
    except PydanticValidationError as e:
        console.print(Styles.error(f"Invalid configuration: {escape(str(e))}"))
        raise typer.Exit(code=1) from e

    logger.info("starting_navigator", kubeconfig=config.kubeconfig, profile=config.profile)
    message = NavigatorApp(NavContext.from_config(config)).run()

    if message:
        console.print(Styles.success(escape(message)))
    else:
        console.print(Styles.muted("Kubeconfig unchanged."))
