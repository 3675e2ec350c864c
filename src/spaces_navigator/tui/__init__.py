"""Terminal User Interface components for the Spaces navigator.

Usage:
    from spaces_navigator.tui import BaseScreen, Colors, Styles
    from spaces_navigator.tui.apps.navigator import NavigatorApp
"""

from spaces_navigator.tui.base import BaseScreen
from spaces_navigator.tui.theme import Colors, Styles

__all__ = [
    "BaseScreen",
    "Colors",
    "Styles",
]
