"""Portal configuration for travelportal."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from travelportal._constants import DEFAULT_CANCELLATION_NOTICE_DAYS, SESSION_STORAGE_KEY
from travelportal.exceptions import PortalConfigError


def _env_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise PortalConfigError(f"{name} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class PortalConfig:
    """Portal configuration.

    Parameters
    ----------
    storage_path : str or None
        Path of the JSON file used as durable key-value storage for the
        session principal. ``None`` keeps the session in memory only.
    session_key : str
        Storage key under which the current principal is persisted.
    fixtures_path : str or None
        Optional JSON document with seed collections. ``None`` uses the
        built-in fixtures.
    cancellation_notice_days : int
        A booking can be cancelled only while its start date is more than
        this many days away.
    """

    storage_path: str | None = None
    session_key: str = SESSION_STORAGE_KEY
    fixtures_path: str | None = None
    cancellation_notice_days: int = DEFAULT_CANCELLATION_NOTICE_DAYS

    def __post_init__(self) -> None:
        if not self.session_key:
            raise PortalConfigError("session_key must be non-empty")
        if self.cancellation_notice_days < 0:
            raise PortalConfigError("cancellation_notice_days must be >= 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> PortalConfig:
        """Create configuration from environment variables.

        Reads ``TRAVELPORTAL_STORAGE_PATH``, ``TRAVELPORTAL_SESSION_KEY``,
        ``TRAVELPORTAL_FIXTURES_PATH`` and
        ``TRAVELPORTAL_CANCELLATION_NOTICE_DAYS``. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        PortalConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "TRAVELPORTAL_STORAGE_PATH": "storage_path",
            "TRAVELPORTAL_SESSION_KEY": "session_key",
            "TRAVELPORTAL_FIXTURES_PATH": "fixtures_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        # cancellation_notice_days is numeric, handle separately
        notice_env = env.get("TRAVELPORTAL_CANCELLATION_NOTICE_DAYS")
        if notice_env is not None and "cancellation_notice_days" not in overrides:
            config_kwargs["cancellation_notice_days"] = _env_int(
                "TRAVELPORTAL_CANCELLATION_NOTICE_DAYS",
                notice_env,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
