"""Navigation nodes.

The hierarchy is::

    Root
    ├── Organization -> Space -> Group -> ControlPlane
    └── Disconnected -> Space -> Group -> ControlPlane

Every node lists its children as ``Item``s. All nodes except ``Root`` can go
back to their parent, and ``Space``, ``Group`` and ``ControlPlane`` can be
accepted, which points the local kubeconfig at them and ends the session.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from spaces_navigator.integrations.kubernetes.client import KubernetesClient
from spaces_navigator.integrations.kubernetes.exceptions import SpaceConnectionError
from spaces_navigator.integrations.kubernetes.kubeconfig import (
    context_names,
    get_named,
    get_space_extension,
)
from spaces_navigator.integrations.kubernetes.models.spaces import SpaceIngress, SpaceSummary
from spaces_navigator.integrations.upbound.exceptions import UpboundError
from spaces_navigator.services.kubernetes.spaces_manager import SpacesManager
from spaces_navigator.services.navigation.breadcrumbs import (
    DEFAULT_BREADCRUMB_STYLE,
    BreadcrumbStyle,
    plain,
)
from spaces_navigator.services.navigation.items import (
    BACK_TEXT,
    Accept,
    Descend,
    Item,
    sort_items,
)
from spaces_navigator.services.navigation.kubeconfig_builder import (
    SpaceAccess,
    build_kubeconfig,
    org_scoped_auth_info,
)
from spaces_navigator.services.navigation.pool import BoundedFetchPool, FetchResults

if TYPE_CHECKING:
    from spaces_navigator.services.navigation.context import NavContext
    from spaces_navigator.services.navigation.session import NavigationSession

logger = structlog.get_logger()

ORGANIZATIONS_UNAVAILABLE = "Could not list Upbound organizations; are you logged in?"
DISCONNECTED_TEXT = "Disconnected Spaces"
SWITCHED_MESSAGE = "Switched kubeconfig context to: {path}"

KIND_ORGANIZATION = "organization"
KIND_SPACE = "space"
KIND_GROUP = "group"
KIND_CONTROLPLANE = "controlplane"


# =============================================================================
# Capabilities
# =============================================================================


class NavigationNode(ABC):
    """A level of the navigation hierarchy."""

    @abstractmethod
    def items(self, nav: NavContext) -> list[Item]:
        """List this node's children.

        Raises:
            KubernetesError: If the children cannot be enumerated.
            UpboundError: If the children cannot be enumerated.
        """

    @abstractmethod
    def breadcrumbs(self, style: BreadcrumbStyle = DEFAULT_BREADCRUMB_STYLE) -> str:
        """Path from the root to this node as Rich markup."""


class BackNavigable(NavigationNode):
    """A node with a parent to return to."""

    @abstractmethod
    def back_target(self) -> NavigationNode: ...

    @abstractmethod
    def back_label(self) -> str: ...

    def back(self, session: NavigationSession) -> NavigationSession:
        return session.with_state(self.back_target())

    def back_item(self) -> Item:
        return Item(
            text=BACK_TEXT,
            kind=self.back_label(),
            action=Descend(self.back_target()),
            back=True,
        )


class Accepting(NavigationNode):
    """A node the kubeconfig can be switched to."""

    @abstractmethod
    def accept(self, nav: NavContext) -> str:
        """Switch the kubeconfig context to this node.

        Returns:
            Message describing the switch.

        Raises:
            KubeconfigError: If the context cannot be synthesized or written.
        """


def _switch_context(
    nav: NavContext,
    node: NavigationNode,
    space: Space,
    namespace: str = "",
    name: str = "",
) -> str:
    fragment = build_kubeconfig(space.access(), nav.raw_kubeconfig(), namespace, name)
    nav.kubeconfig.activate(fragment)
    path = plain(node.breadcrumbs())
    logger.info("context_switched", path=path, kubeconfig=str(nav.kubeconfig.path))
    return SWITCHED_MESSAGE.format(path=path)


# =============================================================================
# Nodes
# =============================================================================


@dataclass(frozen=True)
class Root(NavigationNode):
    """Entry point: organizations plus the disconnected Spaces."""

    def items(self, nav: NavContext) -> list[Item]:
        items: list[Item] = []
        try:
            organizations = nav.list_organizations()
        except UpboundError as e:
            logger.debug("list_organizations_failed", error=str(e))
            organizations = []
            items.append(Item.placeholder(ORGANIZATIONS_UNAVAILABLE))

        items.extend(
            Item(
                text=org.label,
                kind=KIND_ORGANIZATION,
                matching_terms=(org.name,),
                action=Descend(Organization(name=org.name)),
            )
            for org in organizations
        )
        items = sort_items(items)
        items.append(
            Item(
                text=DISCONNECTED_TEXT,
                matching_terms=("disconnected",),
                action=Descend(Disconnected()),
                padding_top=1,
            )
        )
        return items

    def breadcrumbs(self, style: BreadcrumbStyle = DEFAULT_BREADCRUMB_STYLE) -> str:
        return ""


@dataclass(frozen=True)
class Disconnected(BackNavigable):
    """Spaces reachable through contexts of the local kubeconfig."""

    def items(self, nav: NavContext) -> list[Item]:
        raw = nav.raw_kubeconfig()

        def probe(context: str, results: FetchResults[Item]) -> None:
            space = self._probe(nav, raw, context)
            if space is not None:
                results.add(
                    Item(
                        text=context,
                        kind=KIND_SPACE,
                        matching_terms=(context,),
                        action=Descend(space),
                    )
                )

        results = BoundedFetchPool(max_workers=None).run(context_names(raw), probe)
        return [self.back_item(), *sort_items(results.selectable)]

    @staticmethod
    def _probe(nav: NavContext, raw: dict[str, Any], context: str) -> Space | None:
        """Return the Space behind ``context``, or None if it is not one."""
        log = logger.bind(context=context)
        try:
            payload = get_named(raw, "contexts", context) or {}
            if get_space_extension(payload) is not None:
                log.debug("skipping_managed_context")
                return None
            with nav.client_for(
                raw, context, request_timeout=nav.config.probe_timeout
            ) as client:
                ingress = SpacesManager(client).get_ingress()
        except Exception as e:
            log.debug("disconnected_probe_failed", error=str(e))
            return None
        return Space(name=context, ingress=ingress, hub_context=context)

    def breadcrumbs(self, style: BreadcrumbStyle = DEFAULT_BREADCRUMB_STYLE) -> str:
        return style.current("disconnected/")

    def back_target(self) -> NavigationNode:
        return Root()

    def back_label(self) -> str:
        return "home"


@dataclass(frozen=True)
class Organization(BackNavigable):
    """Cloud Spaces of one organization."""

    name: str

    def items(self, nav: NavContext) -> list[Item]:
        with nav.cloud_client() as cloud:
            spaces = SpacesManager(cloud).list_spaces(self.name)

        auth_info = org_scoped_auth_info(
            self.name, nav.profile().name, nav.config.credential_command
        )

        def resolve(summary: SpaceSummary, results: FetchResults[Item]) -> None:
            if summary.is_legacy:
                return
            if summary.is_unreachable:
                results.add_unselectable(Item.placeholder(f"{summary.name} (unreachable)", KIND_SPACE))
                return
            try:
                ingress = nav.ingress_reader.get(summary)
            except SpaceConnectionError:
                results.add_unselectable(Item.placeholder(f"{summary.name} (unreachable)", KIND_SPACE))
                return
            except Exception as e:
                logger.debug("space_ingress_failed", space=summary.name, error=str(e))
                results.add_unselectable(Item.placeholder(f"{summary.name} (error: {e})", KIND_SPACE))
                return

            space = Space(name=summary.name, ingress=ingress, org=self, auth_info=auth_info)
            results.add(
                Item(
                    text=summary.name,
                    kind=KIND_SPACE,
                    matching_terms=(summary.name,),
                    action=Descend(space),
                )
            )

        results = BoundedFetchPool(max_workers=nav.config.pool_size).run(spaces, resolve)
        return [
            self.back_item(),
            *sort_items(results.selectable),
            *sort_items(results.unselectable),
        ]

    def breadcrumbs(self, style: BreadcrumbStyle = DEFAULT_BREADCRUMB_STYLE) -> str:
        return style.current(f"{self.name}/")

    def back_target(self) -> NavigationNode:
        return Root()

    def back_label(self) -> str:
        return "home"


@dataclass(frozen=True)
class Space(BackNavigable, Accepting):
    """A Space, either in an organization or behind a local hub context."""

    name: str
    ingress: SpaceIngress
    org: Organization | None = None
    auth_info: dict[str, Any] | None = field(default=None, hash=False)
    hub_context: str = ""

    @property
    def is_cloud(self) -> bool:
        return self.org is not None and bool(self.org.name)

    def access(self) -> SpaceAccess:
        return SpaceAccess(
            ingress=self.ingress,
            auth_info=self.auth_info,
            hub_context=self.hub_context,
            organization=self.org.name if self.is_cloud and self.org else "",
            space_name=self.name,
        )

    def client(self, nav: NavContext) -> KubernetesClient:
        """Client for this Space's API."""
        config = build_kubeconfig(self.access(), nav.raw_kubeconfig())
        return nav.client_for(config, config["current-context"])

    def items(self, nav: NavContext) -> list[Item]:
        with self.client(nav) as client:
            groups = SpacesManager(client).list_groups()

        items = [self.back_item()]
        group_items = [
            Item(
                text=group.name,
                kind=KIND_GROUP,
                matching_terms=(group.name,),
                action=Descend(Group(space=self, name=group.name)),
            )
            for group in groups
        ]
        items.extend(sort_items(group_items) or [Item.placeholder("No groups found")])
        items.append(Item(text=f'Switch context to "{self.name}"', action=Accept(self)))
        return items

    def breadcrumbs(self, style: BreadcrumbStyle = DEFAULT_BREADCRUMB_STYLE) -> str:
        return self.back_target().breadcrumbs(style.dimmed()) + style.current(f"{self.name}/")

    def back_target(self) -> NavigationNode:
        if self.is_cloud and self.org is not None:
            return self.org
        return Disconnected()

    def back_label(self) -> str:
        return "spaces"

    def accept(self, nav: NavContext) -> str:
        return _switch_context(nav, self, self)


@dataclass(frozen=True)
class Group(BackNavigable, Accepting):
    """A control plane group inside a Space."""

    space: Space
    name: str

    def items(self, nav: NavContext) -> list[Item]:
        with self.space.client(nav) as client:
            control_planes = SpacesManager(client).list_control_planes(self.name)

        items = [self.back_item()]
        ctp_items = [
            Item(
                text=ctp.name,
                kind=KIND_CONTROLPLANE,
                matching_terms=(ctp.name,),
                action=Descend(ControlPlane(group=self, name=ctp.name)),
            )
            for ctp in control_planes
        ]
        items.extend(
            sort_items(ctp_items)
            or [Item.placeholder(f'No control planes found in group "{self.name}"')]
        )
        items.append(
            Item(text=f'Switch context to "{self.space.name}/{self.name}"', action=Accept(self))
        )
        return items

    def breadcrumbs(self, style: BreadcrumbStyle = DEFAULT_BREADCRUMB_STYLE) -> str:
        return self.space.breadcrumbs(style.dimmed()) + style.current(f"{self.name}/")

    def back_target(self) -> NavigationNode:
        return self.space

    def back_label(self) -> str:
        return "groups"

    def accept(self, nav: NavContext) -> str:
        return _switch_context(nav, self, self.space, namespace=self.name)


@dataclass(frozen=True)
class ControlPlane(BackNavigable, Accepting):
    """A control plane; the leaf of the hierarchy."""

    group: Group
    name: str

    def items(self, nav: NavContext) -> list[Item]:
        return [
            self.back_item(),
            Item(text=f'Connect to "{self.name}" and quit', action=Accept(self)),
        ]

    def breadcrumbs(self, style: BreadcrumbStyle = DEFAULT_BREADCRUMB_STYLE) -> str:
        return self.group.breadcrumbs(style.dimmed()) + style.current(self.name)

    def back_target(self) -> NavigationNode:
        return self.group

    def back_label(self) -> str:
        return "controlplanes"

    def accept(self, nav: NavContext) -> str:
        return _switch_context(
            nav, self, self.group.space, namespace=self.group.name, name=self.name
        )
