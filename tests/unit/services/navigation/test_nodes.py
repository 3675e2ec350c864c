"""Unit tests for navigation nodes."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import yaml
from kubernetes.client import (
    ApiException,
    V1ConfigMap,
    V1Namespace,
    V1NamespaceList,
    V1ObjectMeta,
)

from spaces_navigator.integrations.kubernetes.exceptions import (
    KubeconfigError,
    KubernetesAuthError,
    KubernetesError,
    SpaceConnectionError,
)
from spaces_navigator.integrations.kubernetes.kubeconfig import (
    get_named,
    get_space_extension,
    set_named,
    set_space_extension,
)
from spaces_navigator.integrations.kubernetes.models.spaces import (
    SpaceExtension,
    SpaceIngress,
    SpaceSummary,
)
from spaces_navigator.integrations.upbound.exceptions import UpboundAuthError
from spaces_navigator.integrations.upbound.models import Organization as UpboundOrganization
from spaces_navigator.services.navigation.breadcrumbs import BreadcrumbStyle, plain
from spaces_navigator.services.navigation.ingress import SpaceIngressReader
from spaces_navigator.services.navigation.items import Accept, Descend, Item
from spaces_navigator.services.navigation.nodes import (
    DISCONNECTED_TEXT,
    ORGANIZATIONS_UNAVAILABLE,
    ControlPlane,
    Disconnected,
    Group,
    Organization,
    Root,
    Space,
)

INGRESS_CA = "-----BEGIN CERTIFICATE-----"


def _config_map(host: str) -> V1ConfigMap:
    return V1ConfigMap(data={"ingress-host": f"https://{host}", "ingress-ca": INGRESS_CA})


def _namespaces(*names: str) -> V1NamespaceList:
    return V1NamespaceList(items=[V1Namespace(metadata=V1ObjectMeta(name=n)) for n in names])


def _texts(items: list[Item]) -> list[str]:
    return [item.text for item in items]


@pytest.mark.unit
class TestRoot:
    """Tests for the Root node."""

    def test_organizations_sorted_then_disconnected(self, nav: MagicMock) -> None:
        """Organizations sort by label and Disconnected Spaces comes last."""
        nav.list_organizations.return_value = [
            UpboundOrganization(id=1, name="zeta"),
            UpboundOrganization(id=2, name="acme", displayName="Acme Corp"),
        ]

        items = Root().items(nav)

        assert _texts(items) == ["Acme Corp", "zeta", DISCONNECTED_TEXT]
        assert items[0].matching_terms == ("acme",)
        assert items[0].action == Descend(Organization(name="acme"))
        assert items[-1].action == Descend(Disconnected())
        assert items[-1].padding_top == 1

    def test_membership_failure(self, nav: MagicMock) -> None:
        """Without organizations only a notice and Disconnected Spaces remain."""
        nav.list_organizations.side_effect = UpboundAuthError("Upbound session rejected")

        items = Root().items(nav)

        assert len(items) == 2
        assert items[0].text == ORGANIZATIONS_UNAVAILABLE
        assert not items[0].selectable
        assert items[1].text == DISCONNECTED_TEXT

    def test_breadcrumbs_empty(self) -> None:
        """Root has no breadcrumb."""
        assert Root().breadcrumbs() == ""


@pytest.mark.unit
@pytest.mark.kubernetes
class TestDisconnected:
    """Tests for the Disconnected node."""

    def _route_clients(
        self,
        nav: MagicMock,
        client_factory: Callable[[], MagicMock],
        responses: dict[str, Any],
    ) -> dict[str, MagicMock]:
        clients: dict[str, MagicMock] = {}
        for context, response in responses.items():
            client = client_factory()
            read = client.core_v1.read_namespaced_config_map
            if isinstance(response, Exception):
                read.side_effect = response
            else:
                read.return_value = response
            clients[context] = client
        nav.client_for.side_effect = lambda raw, context, request_timeout=None: clients[context]
        return clients

    def test_spaces_found(self, nav: MagicMock, client_factory: Callable[[], MagicMock]) -> None:
        """Contexts answering with an ingress become Spaces."""
        self._route_clients(
            nav,
            client_factory,
            {
                "kind-hub": _config_map("hub.example.com"),
                "prod": ApiException(status=404, reason="Not Found"),
            },
        )

        items = Disconnected().items(nav)

        assert _texts(items) == ["..", "kind-hub"]
        assert items[0].back
        action = items[1].action
        assert isinstance(action, Descend)
        space = action.node
        assert isinstance(space, Space)
        assert space.hub_context == "kind-hub"
        assert space.ingress == SpaceIngress(host="hub.example.com", ca_data=INGRESS_CA.encode())
        assert not space.is_cloud

    def test_probe_uses_probe_timeout(
        self, nav: MagicMock, client_factory: Callable[[], MagicMock]
    ) -> None:
        """Probes are bounded by the probe timeout."""
        self._route_clients(
            nav,
            client_factory,
            {"kind-hub": _config_map("hub.example.com"), "prod": _config_map("p.example.com")},
        )

        Disconnected().items(nav)

        for call in nav.client_for.call_args_list:
            assert call.kwargs["request_timeout"] == nav.config.probe_timeout

    def test_timeouts_omitted(self, nav: MagicMock, client_factory: Callable[[], MagicMock]) -> None:
        """Unreachable contexts are left out."""
        self._route_clients(
            nav,
            client_factory,
            {
                "kind-hub": TimeoutError("read timed out"),
                "prod": TimeoutError("read timed out"),
            },
        )

        assert _texts(Disconnected().items(nav)) == [".."]

    def test_managed_contexts_skipped(
        self,
        nav: MagicMock,
        client_factory: Callable[[], MagicMock],
        disconnected_space: Space,
    ) -> None:
        """Contexts written by the navigator are not probed."""
        disconnected_space.accept(nav)
        self._route_clients(
            nav,
            client_factory,
            {"kind-hub": _config_map("hub.example.com"), "prod": _config_map("p.example.com")},
        )

        items = Disconnected().items(nav)

        assert _texts(items) == ["..", "kind-hub", "prod"]
        probed = {call.args[1] for call in nav.client_for.call_args_list}
        assert probed == {"kind-hub", "prod"}

    def test_cloud_contexts_skipped(
        self, nav: MagicMock, client_factory: Callable[[], MagicMock]
    ) -> None:
        """Contexts pointing at cloud Spaces are skipped even when reachable."""
        raw = nav.kubeconfig.load()
        context = {"cluster": "prod", "user": "prod-admin"}
        set_space_extension(context, SpaceExtension.for_cloud("acme", "eu-west"))
        set_named(raw, "contexts", "acme-eu-west", context)
        nav.kubeconfig.save(raw)
        self._route_clients(
            nav,
            client_factory,
            {
                "kind-hub": _config_map("hub.example.com"),
                "prod": _config_map("p.example.com"),
                "acme-eu-west": _config_map("eu-west.example.com"),
            },
        )

        items = Disconnected().items(nav)

        assert _texts(items) == ["..", "kind-hub", "prod"]
        contacted = {call.args[1] for call in nav.client_for.call_args_list}
        assert "acme-eu-west" not in contacted

    def test_malformed_context_omitted(
        self, nav: MagicMock, client_factory: Callable[[], MagicMock]
    ) -> None:
        """A context entry that cannot be read is left out of the listing."""
        raw = nav.kubeconfig.load()
        set_named(raw, "contexts", "broken", {"cluster": "prod", "extensions": ["bogus"]})
        nav.kubeconfig.save(raw)
        self._route_clients(
            nav,
            client_factory,
            {"kind-hub": _config_map("hub.example.com"), "prod": _config_map("p.example.com")},
        )

        items = Disconnected().items(nav)

        assert _texts(items) == ["..", "kind-hub", "prod"]

    def test_navigation(self) -> None:
        """Disconnected returns home."""
        node = Disconnected()
        assert node.back_target() == Root()
        assert node.back_item().kind == "home"
        assert node.breadcrumbs() == "disconnected/"


@pytest.mark.unit
class TestOrganization:
    """Tests for the Organization node."""

    @pytest.fixture
    def spaces_manager(self) -> Any:
        with patch("spaces_navigator.services.navigation.nodes.SpacesManager") as manager_class:
            yield manager_class.return_value

    def _ingress_by_name(self, nav: MagicMock, outcomes: dict[str, Any]) -> None:
        def get(summary: SpaceSummary) -> SpaceIngress:
            outcome = outcomes[summary.name]
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        nav.ingress_reader.get.side_effect = get

    def test_spaces_listed(
        self, nav: MagicMock, spaces_manager: MagicMock, ingress: SpaceIngress
    ) -> None:
        """Reachable Spaces sort first, then the unreachable and failed ones."""
        spaces_manager.list_spaces.return_value = [
            SpaceSummary(name="us-east", fqdn="us-east.example.com"),
            SpaceSummary(name="old", labels={"spaces.upbound.io/mode": "legacy"}, mode="legacy"),
            SpaceSummary(name="offline", connection_status="Unreachable"),
            SpaceSummary(name="eu-west", fqdn="eu-west.example.com"),
            SpaceSummary(name="broken"),
            SpaceSummary(name="down", fqdn="down.example.com"),
        ]
        self._ingress_by_name(
            nav,
            {
                "us-east": ingress,
                "eu-west": ingress,
                "broken": KubernetesError(message="Space has no public host"),
                "down": SpaceConnectionError("down", TimeoutError()),
            },
        )

        with patch(
            "spaces_navigator.services.navigation.nodes.org_scoped_auth_info",
            return_value={"token": "t"},
        ):
            items = Organization(name="acme").items(nav)

        assert _texts(items) == [
            "..",
            "eu-west",
            "us-east",
            "broken (error: Space has no public host)",
            "down (unreachable)",
            "offline (unreachable)",
        ]
        assert [item.selectable for item in items] == [True, True, True, False, False, False]
        spaces_manager.list_spaces.assert_called_once_with("acme")

        action = items[1].action
        assert isinstance(action, Descend)
        space = action.node
        assert isinstance(space, Space)
        assert space.org == Organization(name="acme")
        assert space.auth_info == {"token": "t"}
        assert space.is_cloud

    def test_unexpected_ingress_error(
        self, nav: MagicMock, spaces_manager: MagicMock, ingress: SpaceIngress
    ) -> None:
        """Any failure resolving one Space becomes an error item."""
        spaces_manager.list_spaces.return_value = [
            SpaceSummary(name="good", fqdn="good.example.com"),
            SpaceSummary(name="bad", fqdn="bad.example.com"),
        ]
        self._ingress_by_name(
            nav, {"good": ingress, "bad": RuntimeError("resolver exploded")}
        )

        items = Organization(name="acme").items(nav)

        assert _texts(items) == ["..", "good", "bad (error: resolver exploded)"]
        assert not items[2].selectable

    def test_invalid_host_name(self, nav: MagicMock, spaces_manager: MagicMock) -> None:
        """A host name the resolver rejects does not abort the listing."""
        spaces_manager.list_spaces.return_value = [
            SpaceSummary(name="long", fqdn="a" * 70 + ".example.com"),
        ]
        nav.ingress_reader = SpaceIngressReader()

        with patch(
            "spaces_navigator.services.navigation.ingress.socket.create_connection",
            side_effect=UnicodeError("label too long"),
        ):
            items = Organization(name="acme").items(nav)

        assert _texts(items) == ["..", "long (error: label too long)"]

    def test_listing_failure_propagates(self, nav: MagicMock, spaces_manager: MagicMock) -> None:
        """A failure to list Spaces is reported to the caller."""
        spaces_manager.list_spaces.side_effect = KubernetesAuthError(message="Forbidden")

        with pytest.raises(KubernetesAuthError):
            Organization(name="acme").items(nav)

    def test_navigation(self) -> None:
        """Organizations return home."""
        node = Organization(name="acme")
        assert node.back_target() == Root()
        assert node.breadcrumbs() == "acme/"


@pytest.mark.unit
class TestSpace:
    """Tests for the Space node."""

    def test_groups(self, nav: MagicMock, cloud_space: Space) -> None:
        """Groups are listed with the Space's own client."""
        client = MagicMock()
        client.__enter__.return_value = client
        client.request_options.return_value = {}
        client.core_v1.list_namespace.return_value = _namespaces("team-b", "team-a")
        nav.client_for.return_value = client

        items = cloud_space.items(nav)

        assert _texts(items) == ["..", "team-a", "team-b", 'Switch context to "eu-west"']
        assert items[0].kind == "spaces"
        assert items[1].action == Descend(Group(space=cloud_space, name="team-a"))
        assert items[-1].action == Accept(cloud_space)

        config, context = nav.client_for.call_args.args
        assert context == "upbound"
        cluster = get_named(config, "clusters", "upbound")
        assert cluster is not None
        assert cluster["server"] == "https://eu-west.spaces.example.com"

    def test_no_groups(
        self, nav: MagicMock, cloud_space: Space, client_factory: Callable[[], MagicMock]
    ) -> None:
        """An empty Space shows a placeholder."""
        client = client_factory()
        client.core_v1.list_namespace.return_value = _namespaces()
        nav.client_for.return_value = client

        items = cloud_space.items(nav)

        assert items[1].text == "No groups found"
        assert not items[1].selectable

    def test_back_targets(self, cloud_space: Space, disconnected_space: Space) -> None:
        """Cloud Spaces return to their organization, others to Disconnected."""
        assert cloud_space.back_target() == Organization(name="acme")
        assert disconnected_space.back_target() == Disconnected()

    def test_breadcrumbs(self, cloud_space: Space, disconnected_space: Space) -> None:
        """Breadcrumbs dim the ancestors."""
        assert cloud_space.breadcrumbs() == "[#9a9ca7]acme/[/]eu-west/"
        assert plain(disconnected_space.breadcrumbs()) == "disconnected/kind-hub/"

    def test_accept_cloud(self, nav: MagicMock, cloud_space: Space) -> None:
        """Accepting writes the Space context and makes it current."""
        message = cloud_space.accept(nav)

        assert message == "Switched kubeconfig context to: acme/eu-west/"
        written = yaml.safe_load(nav.kubeconfig.path.read_text())
        assert written["current-context"] == "upbound"
        assert get_named(written, "users", "upbound") == cloud_space.auth_info
        assert get_named(written, "contexts", "prod") is not None

    def test_accept_disconnected(self, nav: MagicMock, disconnected_space: Space) -> None:
        """A disconnected Space reuses the hub context's user."""
        disconnected_space.accept(nav)

        written = yaml.safe_load(nav.kubeconfig.path.read_text())
        context = get_named(written, "contexts", "upbound")
        assert context is not None
        assert context["user"] == "kind-hub"
        extension = get_space_extension(context)
        assert extension is not None
        assert not extension.is_cloud

    def test_accept_failure_leaves_kubeconfig(self, nav: MagicMock) -> None:
        """A Space that cannot be synthesized does not touch the kubeconfig."""
        before = nav.kubeconfig.path.read_text()
        space = Space(name="ghost", ingress=SpaceIngress(host="h", ca_data=b"c"), hub_context="ghost")

        with pytest.raises(KubeconfigError):
            space.accept(nav)

        assert nav.kubeconfig.path.read_text() == before


@pytest.mark.unit
class TestGroupAndControlPlane:
    """Tests for the Group and ControlPlane nodes."""

    def _client(self, nav: MagicMock, control_planes: list[str]) -> MagicMock:
        client = MagicMock()
        client.__enter__.return_value = client
        client.request_options.return_value = {}
        client.custom_objects.list_namespaced_custom_object.return_value = {
            "items": [{"metadata": {"name": n, "namespace": "team-a"}} for n in control_planes]
        }
        nav.client_for.return_value = client
        return client

    def test_group_items(self, nav: MagicMock, cloud_space: Space) -> None:
        """Control planes are listed in the group's namespace."""
        self._client(nav, ["ctp2", "ctp1"])
        group = Group(space=cloud_space, name="team-a")

        items = group.items(nav)

        assert _texts(items) == ["..", "ctp1", "ctp2", 'Switch context to "eu-west/team-a"']
        assert items[0].kind == "groups"
        assert items[1].action == Descend(ControlPlane(group=group, name="ctp1"))
        assert items[-1].action == Accept(group)

    def test_empty_group(self, nav: MagicMock, cloud_space: Space) -> None:
        """An empty group shows a placeholder."""
        self._client(nav, [])
        items = Group(space=cloud_space, name="team-a").items(nav)
        assert items[1].text == 'No control planes found in group "team-a"'

    def test_control_plane_items(self, nav: MagicMock, cloud_space: Space) -> None:
        """A control plane offers going back or connecting."""
        ctp = ControlPlane(group=Group(space=cloud_space, name="team-a"), name="ctp1")

        items = ctp.items(nav)

        assert _texts(items) == ["..", 'Connect to "ctp1" and quit']
        assert items[0].kind == "controlplanes"
        assert items[1].action == Accept(ctp)

    def test_breadcrumbs(self, cloud_space: Space) -> None:
        """Only the last segment keeps the current-level style."""
        style = BreadcrumbStyle(previous_level="dim", current_level="bold")
        ctp = ControlPlane(group=Group(space=cloud_space, name="team-a"), name="ctp1")

        assert ctp.breadcrumbs(style) == (
            "[dim]acme/[/][dim]eu-west/[/][dim]team-a/[/][bold]ctp1[/]"
        )
        assert plain(ctp.breadcrumbs()) == "acme/eu-west/team-a/ctp1"

    def test_accept_group(self, nav: MagicMock, cloud_space: Space) -> None:
        """A group context is scoped to the group namespace."""
        message = Group(space=cloud_space, name="team-a").accept(nav)

        assert message == "Switched kubeconfig context to: acme/eu-west/team-a/"
        written = yaml.safe_load(nav.kubeconfig.path.read_text())
        context = get_named(written, "contexts", "upbound")
        assert context is not None
        assert context["namespace"] == "team-a"

    def test_accept_control_plane(self, nav: MagicMock, cloud_space: Space) -> None:
        """A control plane context targets the control plane API."""
        ctp = ControlPlane(group=Group(space=cloud_space, name="team-a"), name="ctp1")

        message = ctp.accept(nav)

        assert message == "Switched kubeconfig context to: acme/eu-west/team-a/ctp1"
        written = yaml.safe_load(nav.kubeconfig.path.read_text())
        context = get_named(written, "contexts", "upbound")
        cluster = get_named(written, "clusters", "upbound")
        assert context is not None
        assert cluster is not None
        assert context["namespace"] == "default"
        assert cluster["server"].endswith("/namespaces/team-a/controlplanes/ctp1/k8s")
