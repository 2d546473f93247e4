"""Travel package model."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from travelportal.models._base import PortalRecord, PortalUpdate


class TravelPackage(PortalRecord):
    """A bookable package owned by one agent."""

    IDENTITY_FIELD: ClassVar[str] = "package_id"

    package_id: int = Field(alias="PackageID")
    agent_id: int = Field(alias="AgentID")
    """Owning agent's ``UserID``."""
    title: str
    description: str = ""
    price: float = Field(ge=0)
    """Base price, before insurance."""
    duration: str = ""
    """Free-form duration label (e.g. ``"7 days"``)."""
    included_services: str = ""
    """Comma-separated list of services."""
    image: str = ""
    """Image URL."""

    @property
    def services(self) -> list[str]:
        return [item.strip() for item in self.included_services.split(",") if item.strip()]


class TravelPackageUpdate(PortalUpdate):
    agent_id: int | None = Field(default=None, alias="AgentID")
    title: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    duration: str | None = None
    included_services: str | None = None
    image: str | None = None
