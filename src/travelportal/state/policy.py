"""Identity assignment and record merge policy.

This module contains *no* validation. The pydantic models are responsible
for rejecting malformed records and unknown update fields.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel


def next_identity(identities: Iterable[int]) -> int:
    """Max existing identity + 1, or 1 for an empty collection.

    Not safe against interleaved writers; callers are single-threaded.
    """
    return max(identities, default=0) + 1


def field_names_by_alias(model: type[BaseModel]) -> dict[str, str]:
    """Map every accepted input key (alias or field name) to its field name."""
    mapping: dict[str, str] = {}
    for name, info in model.model_fields.items():
        mapping[name] = name
        if info.alias:
            mapping[info.alias] = name
    return mapping


def normalize_keys(model: type[BaseModel], data: Mapping[str, Any]) -> dict[str, Any]:
    """Rewrite alias keys (``"UserID"``) to field names (``"user_id"``).

    Unknown keys are passed through untouched so validation can reject them.
    """
    names = field_names_by_alias(model)
    return {names.get(key, key): value for key, value in data.items()}


def merge_record(
    model: type[BaseModel],
    *,
    defaults: Mapping[str, Any],
    data: Mapping[str, Any],
    identity_field: str,
    identity: int,
) -> dict[str, Any]:
    """Build the field dict for a new record.

    Caller data overwrites generated defaults. The identity is always the
    generated one; a caller-supplied identity is discarded.
    """
    merged = dict(defaults)
    merged.update(normalize_keys(model, data))
    merged[identity_field] = identity
    return merged
