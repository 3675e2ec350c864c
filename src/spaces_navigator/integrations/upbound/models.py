"""Upbound API models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Organization(BaseModel):
    """Organization the caller is a member of."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int | None = None
    name: str
    display_name: str = Field(default="", alias="displayName")
    role: str | None = None

    @property
    def label(self) -> str:
        """Text shown for the organization, falling back to its name."""
        return self.display_name or self.name
