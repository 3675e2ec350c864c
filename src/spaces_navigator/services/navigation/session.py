"""Navigation session and transitions.

A session is an immutable value: every transition returns a new session
either positioned on another node or terminated with a message.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

import structlog

from spaces_navigator.services.navigation.items import (
    Accept,
    Descend,
    Item,
    Terminate,
    Transition,
)
from spaces_navigator.services.navigation.nodes import BackNavigable, NavigationNode, Root

if TYPE_CHECKING:
    from spaces_navigator.services.navigation.context import NavContext

logger = structlog.get_logger()


@dataclass(frozen=True)
class NavigationSession:
    """Current node of a navigation, or the message it ended with."""

    state: NavigationNode = field(default_factory=Root)
    termination: str | None = None

    @property
    def terminated(self) -> bool:
        return self.termination is not None

    def with_state(self, node: NavigationNode) -> NavigationSession:
        return replace(self, state=node)

    def terminate(self, message: str) -> NavigationSession:
        return replace(self, termination=message)


def resolve_selection(item: Item, nav: NavContext) -> Transition | None:
    """Turn a selected item's action into a transition.

    Accepting runs immediately, so errors from writing the kubeconfig
    propagate here and the session stays where it is.

    Returns:
        The transition, or None for items that cannot be selected.

    Raises:
        KubeconfigError: If accepting the node fails.
    """
    action = item.action
    if action is None:
        return None
    if isinstance(action, Accept):
        return Terminate(action.node.accept(nav))
    return action


def transition(session: NavigationSession, action: Transition) -> NavigationSession:
    """Apply a transition to a session."""
    if isinstance(action, Terminate):
        logger.debug("navigation_terminated", message=action.message)
        return session.terminate(action.message)
    if isinstance(action, Descend):
        return session.with_state(action.node)
    raise TypeError(f"Unsupported transition: {action!r}")


def select(session: NavigationSession, item: Item, nav: NavContext) -> NavigationSession:
    """Apply the selection of ``item`` to ``session``."""
    action = resolve_selection(item, nav)
    if action is None:
        return session
    return transition(session, action)


def go_back(session: NavigationSession) -> NavigationSession:
    """Return to the parent of the current node; Root stays put."""
    if isinstance(session.state, BackNavigable):
        return session.state.back(session)
    return session
