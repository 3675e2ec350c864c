"""Theme constants and style utilities for TUI and CLI output.

Usage:
    from spaces_navigator.tui.theme import Colors, Styles

    DEFAULT_CSS = f'''
    #breadcrumbs {{ color: {Colors.TEXT}; }}
    '''

    styled_text = Styles.success("Switched context")
"""

from __future__ import annotations

from spaces_navigator.services.navigation.breadcrumbs import NEUTRAL_COLOR


class Colors:
    """Color constants for TUI theming.

    Textual CSS variables where possible, hex values for use in markup.
    """

    # Textual CSS variables
    TEXT = "$text"
    SURFACE = "$surface"

    # Hex for Rich markup compatibility
    NEUTRAL = NEUTRAL_COLOR


class Styles:
    """Style helper functions for Rich markup."""

    @staticmethod
    def success(text: str) -> str:
        """Style text as success (green)."""
        return f"[green]{text}[/green]"

    @staticmethod
    def error(text: str) -> str:
        """Style text as error (red)."""
        return f"[red]{text}[/red]"

    @staticmethod
    def muted(text: str) -> str:
        """Style text as muted (dim)."""
        return f"[dim]{text}[/dim]"

    @staticmethod
    def neutral(text: str) -> str:
        """Style text in the neutral breadcrumb color."""
        return f"[{Colors.NEUTRAL}]{text}[/]"
