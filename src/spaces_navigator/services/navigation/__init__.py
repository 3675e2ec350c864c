"""Navigation engine for Upbound Spaces.

Nodes list their children as items, render breadcrumbs, go back to their
parent and, where applicable, switch the local kubeconfig to themselves.
"""

from spaces_navigator.services.navigation.breadcrumbs import BreadcrumbStyle
from spaces_navigator.services.navigation.context import NavContext
from spaces_navigator.services.navigation.items import (
    Accept,
    Descend,
    Item,
    Terminate,
)
from spaces_navigator.services.navigation.kubeconfig_builder import SpaceAccess, build_kubeconfig
from spaces_navigator.services.navigation.nodes import (
    Accepting,
    BackNavigable,
    ControlPlane,
    Disconnected,
    Group,
    NavigationNode,
    Organization,
    Root,
    Space,
)
from spaces_navigator.services.navigation.pool import BoundedFetchPool, FetchResults
from spaces_navigator.services.navigation.session import (
    NavigationSession,
    go_back,
    resolve_selection,
    select,
    transition,
)

__all__ = [
    "Accept",
    "Accepting",
    "BackNavigable",
    "BoundedFetchPool",
    "BreadcrumbStyle",
    "ControlPlane",
    "Descend",
    "Disconnected",
    "FetchResults",
    "Group",
    "Item",
    "NavContext",
    "NavigationNode",
    "NavigationSession",
    "Organization",
    "Root",
    "Space",
    "SpaceAccess",
    "Terminate",
    "build_kubeconfig",
    "go_back",
    "resolve_selection",
    "select",
    "transition",
]
