"""Copy-on-write record collections.

A collection holds an immutable tuple of records. Mutations build a new
tuple, swap it in, and publish a :class:`ChangeEvent` carrying it, so a
snapshot handed to a reader is never modified afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, Generic, TypeVar

from travelportal._redact import redact_for_log
from travelportal.models._base import PortalRecord, PortalUpdate
from travelportal.state.events import ChangeAction, ChangeEvent, CollectionName
from travelportal.state.policy import merge_record, next_identity

_logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=PortalRecord)

Publisher = Callable[[ChangeEvent], None]
DefaultsFactory = Callable[[], Mapping[str, Any]]


class Catalog(Generic[RecordT]):
    """Read-only, insertion-ordered collection of records.

    Lookups are linear scans; collections are fixture-sized.
    """

    def __init__(
        self,
        name: CollectionName,
        record_type: type[RecordT],
        records: Iterable[RecordT | Mapping[str, Any]] = (),
    ) -> None:
        self._name = name
        self._record_type = record_type
        self._records: tuple[RecordT, ...] = tuple(self._coerce(item) for item in records)

    def _coerce(self, item: RecordT | Mapping[str, Any]) -> RecordT:
        if isinstance(item, self._record_type):
            return item
        return self._record_type.model_validate(item)

    @property
    def name(self) -> CollectionName:
        return self._name

    @property
    def record_type(self) -> type[RecordT]:
        return self._record_type

    @property
    def snapshot(self) -> tuple[RecordT, ...]:
        """The current immutable snapshot."""
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name.value} ({len(self._records)} records)>"

    def get(self, identity: int) -> RecordT | None:
        """Return the record with *identity*, or ``None`` if absent."""
        for record in self._records:
            if record.identity == identity:
                return record
        return None

    def where(self, **criteria: Any) -> list[RecordT]:
        """Records whose fields equal every keyword in *criteria*.

        Keys are field names (``user_id=3``); an unknown key raises
        ``ValueError``.
        """
        unknown = sorted(set(criteria) - set(self._record_type.model_fields))
        if unknown:
            raise ValueError(f"unknown {self._name} field(s): {', '.join(unknown)}")
        return [
            record
            for record in self._records
            if all(getattr(record, key) == value for key, value in criteria.items())
        ]

    def filter(self, predicate: Callable[[RecordT], bool]) -> list[RecordT]:
        return [record for record in self._records if predicate(record)]

    def identities(self) -> list[int]:
        return [record.identity for record in self._records]

    def to_storage(self) -> list[dict[str, Any]]:
        return [record.to_storage() for record in self._records]

    def _index_of(self, identity: int) -> int | None:
        for index, record in enumerate(self._records):
            if record.identity == identity:
                return index
        return None


class Collection(Catalog[RecordT]):
    """A mutable collection: add, update and wholesale replace."""

    def __init__(
        self,
        name: CollectionName,
        record_type: type[RecordT],
        update_type: type[PortalUpdate],
        records: Iterable[RecordT | Mapping[str, Any]] = (),
        *,
        defaults: DefaultsFactory | None = None,
        publish: Publisher | None = None,
    ) -> None:
        super().__init__(name, record_type, records)
        self._update_type = update_type
        self._defaults = defaults
        self._publish_cb = publish

    def _publish(self, action: ChangeAction, record_id: int | None) -> None:
        if self._publish_cb is None:
            return
        self._publish_cb(
            ChangeEvent(
                collection=self._name,
                action=action,
                record_id=record_id,
                snapshot=self._records,
            )
        )

    def add(self, data: RecordT | Mapping[str, Any]) -> RecordT:
        """Create a record with the next identity and publish.

        *data* may use field names or PascalCase keys. Caller fields are
        merged over generated defaults (timestamps, initial status).
        """
        if isinstance(data, self._record_type):
            data = data.model_dump()
        identity_field = self._record_type.IDENTITY_FIELD
        defaults = dict(self._defaults()) if self._defaults is not None else {}
        fields = merge_record(
            self._record_type,
            defaults=defaults,
            data=data,
            identity_field=identity_field,
            identity=next_identity(self.identities()),
        )
        record = self._record_type.model_validate(fields)
        self._records = (*self._records, record)
        _logger.debug("Added %s record: %s", self._name, redact_for_log(record))
        self._publish(ChangeAction.ADDED, record.identity)
        return record

    def update(self, identity: int, changes: PortalUpdate | Mapping[str, Any]) -> RecordT | None:
        """Shallow-merge *changes* into the record with *identity*.

        *changes* is validated through the collection's update model, so
        unknown or misspelled fields raise ``pydantic.ValidationError``.
        Returns the updated record, or ``None`` (collection untouched,
        nothing published) when *identity* does not exist.
        """
        if not isinstance(changes, PortalUpdate):
            changes = self._update_type.model_validate(changes)
        elif not isinstance(changes, self._update_type):
            raise TypeError(f"{self._name} expects {self._update_type.__name__}, got {type(changes).__name__}")

        index = self._index_of(identity)
        if index is None:
            _logger.debug("Update ignored: no %s record with id %s", self._name, identity)
            return None

        current = self._records[index]
        merged = current.model_dump()
        merged.update(changes.changes())
        record = self._record_type.model_validate(merged)

        records = list(self._records)
        records[index] = record
        self._records = tuple(records)
        _logger.debug("Updated %s record %s: %s", self._name, identity, redact_for_log(changes.changes()))
        self._publish(ChangeAction.UPDATED, identity)
        return record

    def replace(self, records: Iterable[RecordT | Mapping[str, Any]]) -> None:
        """Replace the whole collection and publish."""
        self._records = tuple(self._coerce(item) for item in records)
        _logger.debug("Replaced %s collection (%d records)", self._name, len(self._records))
        self._publish(ChangeAction.REPLACED, None)


class DeletableCollection(Collection[RecordT]):
    """A collection whose records support hard delete."""

    def delete(self, identity: int) -> bool:
        """Remove the record with *identity* and publish.

        Returns ``False`` (collection untouched, nothing published) when
        *identity* does not exist.
        """
        index = self._index_of(identity)
        if index is None:
            _logger.debug("Delete ignored: no %s record with id %s", self._name, identity)
            return False
        self._records = self._records[:index] + self._records[index + 1 :]
        _logger.debug("Deleted %s record %s", self._name, identity)
        self._publish(ChangeAction.DELETED, identity)
        return True
