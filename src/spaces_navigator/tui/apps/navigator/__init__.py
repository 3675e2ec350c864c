"""Spaces navigator TUI application.

Usage:
    from spaces_navigator.tui.apps.navigator import NavigatorApp

    app = NavigatorApp(nav=NavContext.from_config(config))
    message = app.run()
"""

from spaces_navigator.tui.apps.navigator.app import NavigatorApp
from spaces_navigator.tui.apps.navigator.screens import NavigatorScreen

__all__ = ["NavigatorApp", "NavigatorScreen"]
