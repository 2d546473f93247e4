"""Admin dashboard statistics."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PortalStatistics(BaseModel):
    """System overview counters shown to admins."""

    model_config = ConfigDict(frozen=True)

    total_customers: int = 0
    total_agents: int = 0
    total_packages: int = 0
    total_bookings: int = 0
    total_revenue: float = 0.0
    """Sum of all payment amounts."""
    pending_bookings: int = 0
    confirmed_bookings: int = 0
    pending_assistance: int = 0
