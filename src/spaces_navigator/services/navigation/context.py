"""Collaborators shared by every navigation node."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from spaces_navigator.core.config import NavigatorConfig
from spaces_navigator.integrations.kubernetes.client import KubernetesClient
from spaces_navigator.integrations.kubernetes.kubeconfig import (
    KubeconfigStore,
    empty_kubeconfig,
    set_named,
)
from spaces_navigator.integrations.upbound.client import OrganizationsClient
from spaces_navigator.integrations.upbound.config import UpboundProfile, load_profile
from spaces_navigator.integrations.upbound.exceptions import UpboundAuthError
from spaces_navigator.integrations.upbound.models import Organization
from spaces_navigator.services.navigation.ingress import SpaceIngressReader

logger = structlog.get_logger()

CLOUD_CONTEXT = "upbound-cloud"

ClientFactory = Callable[..., KubernetesClient]


@dataclass
class NavContext:
    """Configuration and service handles the nodes list and accept through.

    Example:
        >>> nav = NavContext.from_config(NavigatorConfig.from_env())
        >>> Root().items(nav)
    """

    config: NavigatorConfig
    kubeconfig: KubeconfigStore
    ingress_reader: SpaceIngressReader
    client_factory: ClientFactory = KubernetesClient.from_kubeconfig
    profile_loader: Callable[[], UpboundProfile] | None = None
    _profile: UpboundProfile | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_config(cls, config: NavigatorConfig) -> NavContext:
        return cls(
            config=config,
            kubeconfig=KubeconfigStore(config.kubeconfig),
            ingress_reader=SpaceIngressReader(timeout=config.ingress_timeout),
        )

    # =========================================================================
    # Upbound
    # =========================================================================

    def profile(self) -> UpboundProfile:
        """The active ``up`` profile, loaded once.

        Raises:
            UpboundProfileError: If the profile cannot be loaded.
        """
        if self._profile is None:
            if self.profile_loader is not None:
                self._profile = self.profile_loader()
            else:
                self._profile = load_profile(self.config.up_config, self.config.profile)
        return self._profile

    def list_organizations(self) -> list[Organization]:
        """Organizations the logged-in user belongs to.

        Raises:
            UpboundError: On profile, authentication or API failures.
        """
        with OrganizationsClient(
            self.config.api_url,
            self.profile(),
            timeout=self.config.request_timeout,
        ) as client:
            return client.list()

    def cloud_client(self) -> KubernetesClient:
        """Client for the Upbound cloud controller API.

        Raises:
            UpboundError: If no logged-in profile is available.
        """
        profile = self.profile()
        if profile.session is None or not profile.is_logged_in:
            raise UpboundAuthError(
                f"Profile '{profile.name}' has no session",
                details="Run 'up login' first",
            )

        config = empty_kubeconfig()
        set_named(config, "clusters", CLOUD_CONTEXT, {"server": self.config.controller_url})
        set_named(config, "users", CLOUD_CONTEXT, {"token": profile.session.get_secret_value()})
        set_named(config, "contexts", CLOUD_CONTEXT, {"cluster": CLOUD_CONTEXT, "user": CLOUD_CONTEXT})
        config["current-context"] = CLOUD_CONTEXT
        return self.client_factory(
            config, CLOUD_CONTEXT, request_timeout=self.config.request_timeout
        )

    # =========================================================================
    # Kubeconfig
    # =========================================================================

    def raw_kubeconfig(self) -> dict[str, Any]:
        """The user's kubeconfig document."""
        return self.kubeconfig.load()

    def client_for(
        self,
        config: dict[str, Any],
        context: str | None = None,
        *,
        request_timeout: float | None = None,
    ) -> KubernetesClient:
        """Client for a context of an in-memory kubeconfig document."""
        return self.client_factory(
            config,
            context,
            request_timeout=request_timeout or self.config.request_timeout,
        )
