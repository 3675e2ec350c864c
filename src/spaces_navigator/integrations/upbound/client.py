"""Upbound organization membership API client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog
from pydantic import ValidationError

from spaces_navigator.integrations.upbound.exceptions import (
    UpboundAPIError,
    UpboundAuthError,
    UpboundConnectionError,
)
from spaces_navigator.integrations.upbound.models import Organization

if TYPE_CHECKING:
    from spaces_navigator.integrations.upbound.config import UpboundProfile

logger = structlog.get_logger()

SESSION_COOKIE = "SID"


class OrganizationsClient:
    """HTTP client for the organizations the logged-in user belongs to.

    Example:
        ```python
        profile = load_profile()
        with OrganizationsClient("https://api.upbound.io", profile) as client:
            for org in client.list():
                print(org.name)
        ```
    """

    def __init__(
        self,
        api_url: str,
        profile: UpboundProfile,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            api_url: Base URL of the Upbound API.
            profile: Profile providing the session.
            timeout: Request timeout in seconds.

        Raises:
            UpboundAuthError: If the profile is not logged in.
        """
        if profile.session is None or not profile.is_logged_in:
            raise UpboundAuthError(
                f"Profile '{profile.name}' has no session",
                details="Run 'up login' first",
            )

        self._api_url = api_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self._api_url,
            timeout=httpx.Timeout(timeout),
            cookies={SESSION_COOKIE: profile.session.get_secret_value()},
            headers={"Accept": "application/json"},
        )
        logger.debug("organizations_client_initialized", api_url=self._api_url, profile=profile.name)

    def __enter__(self) -> OrganizationsClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def _get(self, endpoint: str) -> Any:
        """Make a GET request and return the decoded JSON body.

        Raises:
            UpboundConnectionError: On connection failure or timeout.
            UpboundAuthError: On 401/403.
            UpboundAPIError: On other API errors.
        """
        try:
            response = self._client.get(endpoint)
        except httpx.TimeoutException as e:
            logger.warning("upbound_request_timeout", endpoint=endpoint, error=str(e))
            raise UpboundConnectionError("Request to Upbound API timed out", details=str(e)) from e
        except httpx.TransportError as e:
            logger.warning("upbound_connection_error", endpoint=endpoint, error=str(e))
            raise UpboundConnectionError(
                f"Failed to connect to Upbound API: {e}", details=str(e)
            ) from e

        if response.status_code in (401, 403):
            raise UpboundAuthError(
                "Upbound session rejected",
                details="Your session may have expired; run 'up login' again",
            )
        if response.status_code >= 400:
            raise UpboundAPIError(
                f"Upbound API error: {response.text}",
                status_code=response.status_code,
                details=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpboundAPIError(
                "Upbound API returned invalid JSON",
                status_code=response.status_code,
                details=response.text,
            ) from e

    def list(self) -> list[Organization]:
        """List organizations the caller is a member of.

        Returns:
            Organizations in API order.
        """
        data = self._get("/v1/organizations")
        if not isinstance(data, list):
            raise UpboundAPIError("Unexpected organizations response", details=str(data))
        try:
            orgs = [Organization.model_validate(item) for item in data]
        except ValidationError as e:
            raise UpboundAPIError("Unexpected organizations response", details=str(e)) from e
        logger.debug("listed_organizations", count=len(orgs))
        return orgs
