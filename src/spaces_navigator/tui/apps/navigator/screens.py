"""Navigation screen for browsing Spaces.

Shows the breadcrumb of the current node above its items. Selecting an
item descends into it or, for accept items, switches the kubeconfig
context and exits the app with the resulting message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from rich.markup import escape
from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Input, Label, OptionList
from textual.widgets.option_list import Option

from spaces_navigator.integrations.kubernetes.exceptions import KubernetesError
from spaces_navigator.integrations.upbound.exceptions import UpboundError
from spaces_navigator.services.navigation.session import NavigationSession, go_back, select
from spaces_navigator.tui.base import BaseScreen
from spaces_navigator.tui.theme import Colors, Styles

if TYPE_CHECKING:
    from spaces_navigator.services.navigation.context import NavContext
    from spaces_navigator.services.navigation.items import Item

logger = structlog.get_logger()


def item_prompt(item: Item) -> str:
    """Markup shown for an item in the option list."""
    text = escape(item.text)
    if not item.kind:
        return text
    return f"{text}  {Styles.neutral(escape(item.kind))}"


class NavigatorScreen(BaseScreen[None]):
    """Lists the items of the current navigation node."""

    DEFAULT_CSS = f"""
    NavigatorScreen #breadcrumbs {{
        height: 1;
        padding: 0 1;
        color: {Colors.TEXT};
    }}

    NavigatorScreen #filter {{
        border: none;
        height: 1;
        padding: 0 1;
        background: {Colors.SURFACE};
    }}

    NavigatorScreen #items {{
        height: 1fr;
        border: none;
    }}
    """

    BINDINGS = [
        Binding("escape", "back", "Back", show=True),
        Binding("slash", "filter", "Filter", show=True),
    ]

    def __init__(self, nav: NavContext, session: NavigationSession | None = None) -> None:
        """Initialize the screen.

        Args:
            nav: Navigation collaborators.
            session: Starting session; defaults to the root.
        """
        super().__init__()
        self._nav = nav
        self._session = session or NavigationSession()
        self._items: list[Item] = []
        self._visible: list[Item] = []

    @property
    def session(self) -> NavigationSession:
        return self._session

    @property
    def items(self) -> list[Item]:
        return self._items

    def compose(self) -> ComposeResult:
        """Compose the screen layout."""
        with Vertical():
            yield Label("", id="breadcrumbs")
            yield Input(placeholder="Filter", id="filter")
            yield OptionList(id="items")

    def on_mount(self) -> None:
        """Load the starting node."""
        if not self._enter(self._session):
            self._render_items()
        self.query_one("#items", OptionList).focus()

    def _enter(self, session: NavigationSession) -> bool:
        """Make ``session`` current if its node can be listed."""
        try:
            items = session.state.items(self._nav)
        except (KubernetesError, UpboundError) as e:
            logger.error("listing_failed", node=type(session.state).__name__, error=str(e))
            self.notify_user(f"Failed to list: {e}", severity="error")
            return False

        self._session = session
        self._items = items
        self.query_one("#breadcrumbs", Label).update(session.state.breadcrumbs())
        self.query_one("#filter", Input).value = ""
        self._render_items()
        return True

    def _render_items(self, query: str = "") -> None:
        option_list = self.query_one("#items", OptionList)
        option_list.clear_options()
        self._visible = [item for item in self._items if item.matches(query)]

        content: list[Option | None] = []
        for index, item in enumerate(self._visible):
            if not query:
                content.extend([None] * item.padding_top)
            content.append(
                Option(item_prompt(item), id=str(index), disabled=not item.selectable)
            )
        option_list.add_options(content)

        for index, item in enumerate(self._visible):
            if item.selectable:
                option_list.highlighted = index
                break

    @on(OptionList.OptionSelected, "#items")
    def handle_option_selected(self, event: OptionList.OptionSelected) -> None:
        """Descend into or accept the selected item."""
        if event.option.id is None:
            return
        self.choose(self._visible[int(event.option.id)])

    def choose(self, item: Item) -> None:
        """Apply the selection of ``item``."""
        try:
            session = select(self._session, item, self._nav)
        except KubernetesError as e:
            logger.error("accept_failed", error=str(e))
            self.notify_user(f"Failed to switch context: {e}", severity="error")
            return

        if session.terminated:
            self.app.exit(session.termination)
        elif session is not self._session:
            self._enter(session)

    @on(Input.Changed, "#filter")
    def handle_filter_changed(self, event: Input.Changed) -> None:
        """Narrow the items to those matching the filter."""
        self._render_items(event.value)

    @on(Input.Submitted, "#filter")
    def handle_filter_submitted(self, event: Input.Submitted) -> None:
        """Return focus to the list."""
        self.query_one("#items", OptionList).focus()

    def action_filter(self) -> None:
        """Focus the filter input."""
        self.query_one("#filter", Input).focus()

    def action_back(self) -> None:
        """Go back to the parent node."""
        session = go_back(self._session)
        if session is not self._session:
            self._enter(session)
