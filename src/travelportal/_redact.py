"""Helpers for safe debug logging.

User records carry plaintext passwords and the payment flow handles card
details. This module redacts those fields before emitting DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

_SENTINEL = "<redacted>"

_SENTINEL_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "confirm_password",
        "confirmpassword",
        "card_number",
        "cardnumber",
        "cvv",
        "expiry",
        "expirydate",
    }
)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Pydantic models are dumped by alias first so records log in the same
    shape they are stored in.
    """
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, BaseModel):
        return redact_for_log(
            value.model_dump(mode="json", by_alias=True),
            max_string=max_string,
            _depth=_depth + 1,
        )

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENTINEL_KEYS:
                redacted[key] = _SENTINEL
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)
