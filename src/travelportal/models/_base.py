"""Base models for portal records and typed partial updates.

Every stored entity inherits from :class:`PortalRecord` which provides:

* ``alias_generator=to_pascal`` so the PascalCase keys used by fixtures
  and durable storage (``ContactNumber``, ``IncludedServices``) map to
  snake_case fields. Identity and reference fields spell ``ID`` in
  capitals (``UserID``) and declare their alias explicitly.
* ``frozen=True`` so a published snapshot can never be mutated in place.
* An ``identity`` property resolving the record's integer key.

Partial updates inherit from :class:`PortalUpdate`, which forbids unknown
fields: a misspelled field is a validation error instead of a silent
no-op merge.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar, Self

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_pascal

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce fixture timestamps to timezone-aware UTC datetimes.

    Accepts datetimes, ISO-8601 strings (a trailing ``Z`` included) and
    epoch numbers in seconds **or** milliseconds. Naive values are taken
    to be UTC. Returns ``None`` for ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        parsed = datetime.fromtimestamp(ts, tz=UTC)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        return value  # let pydantic report the type error
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


PortalTimestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces ISO strings or epoch numbers to UTC datetimes."""

OptionalTimestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]


def utcnow() -> datetime:
    return datetime.now(UTC)


class PortalRecord(BaseModel):
    """Base for all records held by the domain store."""

    IDENTITY_FIELD: ClassVar[str] = ""
    """Name of the integer identity field (e.g. ``"user_id"``)."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_pascal,
    )

    @property
    def identity(self) -> int:
        return int(getattr(self, self.IDENTITY_FIELD))

    def to_storage(self) -> dict[str, Any]:
        """Dump in the PascalCase, JSON-safe shape used by fixtures and storage."""
        return self.model_dump(mode="json", by_alias=True)


class PortalUpdate(BaseModel):
    """Base for typed partial updates.

    Only explicitly supplied fields are applied; see :meth:`changes`.
    Every field defaults to ``None`` meaning "not supplied"; an explicit
    ``None`` is only accepted for fields listed in ``NULLABLE_FIELDS``.
    """

    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset()
    """Fields that may be cleared to ``None`` on the record."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_pascal,
    )

    @model_validator(mode="after")
    def _reject_null_for_required(self) -> Self:
        cleared = sorted(
            name
            for name in self.model_fields_set
            if getattr(self, name) is None and name not in self.NULLABLE_FIELDS
        )
        if cleared:
            raise ValueError(f"fields cannot be set to null: {', '.join(cleared)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Explicitly supplied fields, keyed by field name.

        An explicit ``None`` is kept so nullable references can be cleared.
        """
        return self.model_dump(exclude_unset=True)
