"""User accounts and profile edits."""

from __future__ import annotations

import enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from travelportal.models._base import PortalRecord, PortalTimestamp, PortalUpdate, utcnow


class Role(enum.StrEnum):
    ADMIN = "admin"
    AGENT = "agent"
    CUSTOMER = "customer"


class Approval(enum.StrEnum):
    """Account approval state managed by admins."""

    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class User(PortalRecord):
    """A portal account.

    The password is stored and compared in plaintext; it is excluded from
    ``repr`` and redacted from debug logs.
    """

    IDENTITY_FIELD: ClassVar[str] = "user_id"

    user_id: int = Field(alias="UserID")
    name: str = ""
    email: str
    password: str = Field(repr=False)
    role: Role
    contact_number: str = ""
    approval: Approval = Approval.APPROVED
    registration_date: PortalTimestamp = Field(default_factory=utcnow)

    @property
    def is_approved(self) -> bool:
        return self.approval == Approval.APPROVED


class UserUpdate(PortalUpdate):
    name: str | None = None
    email: str | None = None
    password: str | None = Field(default=None, repr=False)
    role: Role | None = None
    contact_number: str | None = None
    approval: Approval | None = None
    registration_date: PortalTimestamp | None = None


class ProfileUpdate(BaseModel):
    """Self-service profile edit.

    An empty ``password`` keeps the current one; a non-empty one must be
    repeated in ``confirm_password``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    email: str
    contact_number: str = ""
    password: str = Field(default="", repr=False)
    confirm_password: str = Field(default="", repr=False)

    @property
    def passwords_match(self) -> bool:
        return self.password == self.confirm_password

    def to_user_update(self) -> UserUpdate:
        fields = {"name": self.name, "email": self.email, "contact_number": self.contact_number}
        if self.password:
            fields["password"] = self.password
        return UserUpdate(**fields)
