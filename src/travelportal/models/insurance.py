"""Insurance catalog entries."""

from __future__ import annotations

from typing import ClassVar

from pydantic import ConfigDict, Field

from travelportal.models._base import PortalRecord


class Insurance(PortalRecord):
    """Optional cover that can be added to a booking payment.

    Reference data: keys are lowercase in fixtures and the catalog is
    never modified at runtime.
    """

    IDENTITY_FIELD: ClassVar[str] = "id"

    model_config = ConfigDict(alias_generator=None)

    id: int
    name: str
    description: str = ""
    price: float = Field(ge=0)
