"""Upbound integration - profiles and organization membership client."""

from spaces_navigator.integrations.upbound.client import OrganizationsClient
from spaces_navigator.integrations.upbound.config import UpboundProfile, load_profile
from spaces_navigator.integrations.upbound.exceptions import (
    UpboundAPIError,
    UpboundAuthError,
    UpboundConnectionError,
    UpboundError,
    UpboundProfileError,
)
from spaces_navigator.integrations.upbound.models import Organization

__all__ = [
    "Organization",
    "OrganizationsClient",
    "UpboundAPIError",
    "UpboundAuthError",
    "UpboundConnectionError",
    "UpboundError",
    "UpboundProfile",
    "UpboundProfileError",
    "load_profile",
]
