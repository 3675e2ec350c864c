"""Base classes for TUI screens.

Usage:
    from spaces_navigator.tui import BaseScreen

    class MyScreen(BaseScreen[None]):
        def compose(self) -> ComposeResult:
            yield Label("My Screen")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from textual.app import ComposeResult
from textual.screen import Screen

if TYPE_CHECKING:
    from textual.notifications import SeverityLevel

T = TypeVar("T")


class BaseScreen(Screen[T]):
    """Base class for TUI screens.

    Subclasses should define:
    - BINDINGS: Keyboard bindings
    - compose(): Screen layout

    Type Parameters:
        T: The type returned when the screen is dismissed.
    """

    def notify_user(
        self,
        message: str,
        severity: SeverityLevel = "information",
    ) -> None:
        """Show a notification to the user.

        Args:
            message: Notification text.
            severity: One of "information", "warning", "error".
        """
        self.app.notify(message, severity=severity)

    def compose(self) -> ComposeResult:
        """Compose the screen layout. Must be implemented by subclasses."""
        raise NotImplementedError("Subclasses must implement compose()")
