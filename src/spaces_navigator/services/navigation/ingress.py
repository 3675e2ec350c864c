"""Ingress resolution for cloud Spaces."""

from __future__ import annotations

import socket
import ssl

import structlog

from spaces_navigator.integrations.kubernetes.exceptions import (
    KubernetesError,
    SpaceConnectionError,
)
from spaces_navigator.integrations.kubernetes.models.spaces import SpaceIngress, SpaceSummary

logger = structlog.get_logger()

INGRESS_PORT = 443


class SpaceIngressReader:
    """Resolves the public endpoint and CA of a cloud Space.

    The host comes from the Space's ``status.fqdn``. The CA is the trust
    anchor of the certificate chain the endpoint presents: the root from
    the local trust store when the chain verifies, otherwise the last
    certificate the server sent (its private CA, or the certificate
    itself when self-signed).
    """

    def __init__(self, timeout: float = 10.0, port: int = INGRESS_PORT) -> None:
        self._timeout = timeout
        self._port = port

    def get(self, space: SpaceSummary) -> SpaceIngress:
        """Resolve a Space's ingress.

        Raises:
            SpaceConnectionError: If the endpoint cannot be reached.
            KubernetesError: If the Space does not advertise a host.
        """
        if not space.fqdn:
            raise KubernetesError(
                message="Space has no public host",
                resource_type="Space",
                resource_name=space.name,
                namespace=space.namespace,
            )

        host = space.fqdn.removeprefix("https://")
        try:
            try:
                chain = self._peer_chain(host, verify=True)
            except ssl.SSLCertVerificationError as e:
                logger.debug("space_ingress_private_ca", space=space.name, reason=e.verify_message)
                chain = self._peer_chain(host, verify=False)
        except OSError as e:
            logger.debug("space_ingress_unreachable", space=space.name, host=host, error=str(e))
            raise SpaceConnectionError(space.name, e) from e

        if not chain:
            raise SpaceConnectionError(space.name)
        return SpaceIngress(host=host, ca_data=ssl.DER_cert_to_PEM_cert(chain[-1]).encode())

    def _peer_chain(self, host: str, *, verify: bool) -> list[bytes]:
        """DER certificates of the chain presented by ``host``, leaf first.

        A verified chain ends with the trust anchor from the local store.
        """
        context = ssl.create_default_context()
        if not verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        with (
            socket.create_connection((host, self._port), timeout=self._timeout) as sock,
            context.wrap_socket(sock, server_hostname=host) as tls,
        ):
            if verify:
                return tls.get_verified_chain()
            return tls.get_unverified_chain()
