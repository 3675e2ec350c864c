"""Main Textual application for navigating Upbound Spaces."""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from spaces_navigator.tui.apps.navigator.screens import NavigatorScreen

if TYPE_CHECKING:
    from spaces_navigator.services.navigation.context import NavContext
    from spaces_navigator.services.navigation.session import NavigationSession


class NavigatorApp(App[str | None]):
    """TUI application for switching the kubeconfig to a Space.

    The app exits with the message of the accepted context switch, or None
    when the user quits.

    Args:
        nav: Navigation collaborators.
        session: Starting session; defaults to the root.
    """

    TITLE = "Upbound Spaces"

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("ctrl+c", "quit", "Quit", show=False),
    ]

    def __init__(self, nav: NavContext, session: NavigationSession | None = None) -> None:
        super().__init__()
        self._nav = nav
        self._session = session

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        """Push the navigation screen on mount."""
        self.push_screen(NavigatorScreen(self._nav, self._session))

    async def action_quit(self) -> None:
        """Quit without switching context."""
        self.exit(None)
