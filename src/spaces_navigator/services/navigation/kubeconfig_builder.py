"""Synthesis of kubeconfig documents targeting a Space.

Every synthesized document holds one cluster and one context, both named
``upbound``, and carries a ``spaces.upbound.io/space`` extension on the
context recording where it came from.
"""

from __future__ import annotations

import base64
import copy
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from spaces_navigator.integrations.kubernetes.exceptions import KubeconfigError
from spaces_navigator.integrations.kubernetes.kubeconfig import (
    empty_kubeconfig,
    get_named,
    set_named,
    set_space_extension,
)
from spaces_navigator.integrations.kubernetes.models.spaces import SpaceExtension, SpaceIngress

REFERENCE_NAME = "upbound"
DEFAULT_NAMESPACE = "default"
EXEC_API_VERSION = "client.authentication.k8s.io/v1"
CONTROL_PLANE_API_PATH = "apis/spaces.upbound.io/v1beta1/namespaces/{namespace}/controlplanes/{name}/k8s"


@dataclass(frozen=True)
class SpaceAccess:
    """How to reach and authenticate against a Space.

    Cloud Spaces carry an explicit ``auth_info`` plus the organization and
    Space name; disconnected Spaces borrow the user of ``hub_context``.
    """

    ingress: SpaceIngress
    auth_info: dict[str, Any] | None = None
    hub_context: str = ""
    organization: str = ""
    space_name: str = ""

    @property
    def is_cloud(self) -> bool:
        return bool(self.organization)

    def extension(self) -> SpaceExtension:
        if self.is_cloud:
            return SpaceExtension.for_cloud(self.organization, self.space_name)
        return SpaceExtension.for_disconnected(self.hub_context)


def to_spaces_k8s_url(host: str, namespace: str = "", name: str = "") -> str:
    """Server URL for a Space, or for one control plane when ``name`` is set."""
    host = host.removeprefix("https://")
    if not name:
        return f"https://{host}"
    path = CONTROL_PLANE_API_PATH.format(namespace=namespace, name=name)
    return f"https://{host}/{path}"


def resolve_credential_command(command: str) -> str:
    """Executable to reference from an exec credential.

    The bare command name is used when it resolves on PATH to the running
    executable or when it cannot be found at all; otherwise its absolute
    path is pinned.
    """
    found = shutil.which(command)
    if not found:
        return command
    running = Path(sys.argv[0]).resolve()
    if Path(found).resolve() == running:
        return command
    return str(Path(found).resolve())


def org_scoped_auth_info(
    organization: str,
    profile_name: str,
    command: str = "up",
) -> dict[str, Any]:
    """Exec credential that mints an organization-scoped token.

    Args:
        organization: Organization the token is scoped to.
        profile_name: ``up`` profile to authenticate with.
        command: Credential command name.

    Returns:
        A kubeconfig ``user`` payload.
    """
    return {
        "exec": {
            "apiVersion": EXEC_API_VERSION,
            "command": resolve_credential_command(command),
            "args": ["organization", "token"],
            "env": [
                {"name": "ORGANIZATION", "value": organization},
                {"name": "UP_PROFILE", "value": profile_name},
            ],
            "interactiveMode": "IfAvailable",
        }
    }


def build_kubeconfig(
    access: SpaceAccess,
    base_config: dict[str, Any],
    namespace: str = "",
    name: str = "",
) -> dict[str, Any]:
    """Build a kubeconfig whose current context targets a Space.

    Args:
        access: Ingress and credentials of the Space.
        base_config: The user's kubeconfig, consulted for the hub context's
            user when ``access`` carries no explicit auth info.
        namespace: Group to scope the context to.
        name: Control plane within ``namespace``; scopes the server URL to
            that control plane and the context namespace to ``default``.

    Returns:
        Kubeconfig document with one cluster and one context.

    Raises:
        KubeconfigError: If the ingress is incomplete or no user can be found.
    """
    if not access.ingress.host:
        raise KubeconfigError(message="Space ingress has no host")
    if not access.ingress.ca_data:
        raise KubeconfigError(message=f"Space ingress {access.ingress.host} has no CA data")

    config = empty_kubeconfig()
    context: dict[str, Any] = {"cluster": REFERENCE_NAME}

    if access.auth_info is not None:
        set_named(config, "users", REFERENCE_NAME, copy.deepcopy(access.auth_info))
        context["user"] = REFERENCE_NAME
    elif access.hub_context:
        user_name, user = _hub_user(base_config, access.hub_context)
        set_named(config, "users", user_name, user)
        context["user"] = user_name
    else:
        raise KubeconfigError(message="No credentials available for the Space")

    context_namespace = DEFAULT_NAMESPACE if name else namespace
    if context_namespace:
        context["namespace"] = context_namespace
    set_space_extension(context, access.extension())

    set_named(
        config,
        "clusters",
        REFERENCE_NAME,
        {
            "server": to_spaces_k8s_url(access.ingress.host, namespace, name),
            "certificate-authority-data": base64.b64encode(access.ingress.ca_data).decode(),
        },
    )
    set_named(config, "contexts", REFERENCE_NAME, context)
    config["current-context"] = REFERENCE_NAME
    return config


def _hub_user(base_config: dict[str, Any], hub_context: str) -> tuple[str, dict[str, Any]]:
    hub = get_named(base_config, "contexts", hub_context)
    if hub is None:
        raise KubeconfigError(message=f"Context '{hub_context}' not found in kubeconfig")

    user_name = hub.get("user")
    user = get_named(base_config, "users", user_name) if user_name else None
    if user is None:
        raise KubeconfigError(message=f"Context '{hub_context}' has no usable user")
    return user_name, copy.deepcopy(user)
