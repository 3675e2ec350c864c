"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer
from rich.console import Console

from spaces_navigator import __version__
from spaces_navigator.cli.commands import ctx, install
from spaces_navigator.logging.config import configure_logging

app = typer.Typer(
    name="spaces",
    help="Browse Upbound Spaces and point your kubeconfig at them.",
    add_completion=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"spaces version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
) -> None:
    """Spaces navigator - switch kubeconfig contexts across Upbound Spaces."""
    # The TUI owns the terminal, so only the file log is written
    configure_logging(verbose=verbose, debug=debug, console=False)


# Register subcommands
app.command()(ctx.ctx)
app.add_typer(install.app, name="install")


if __name__ == "__main__":
    app()
