"""Session state: the authenticated principal and its persistence."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, ValidationError

from travelportal._constants import INVALID_CREDENTIALS_MESSAGE, SESSION_STORAGE_KEY
from travelportal._redact import redact_for_log
from travelportal.models.user import User
from travelportal.storage import KeyValueStorage

_logger = logging.getLogger(__name__)


def _credential(record: Mapping[str, Any], key: str) -> Any:
    """Read *key* from a raw user record by alias or field name."""
    if key in record:
        return record[key]
    return record.get(key.lower())


class UserDirectory(Protocol):
    """Source of truth for user records (the domain store)."""

    def get_user_by_id(self, user_id: int) -> User | None: ...


class LoginResult(BaseModel):
    """Outcome of a login attempt.

    Parameters
    ----------
    success : bool
        Whether a matching account was found.
    user : User or None
        The matched record on success.
    message : str
        Generic failure message; never says which credential was wrong.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    user: User | None = None
    message: str = ""


class SessionStore:
    """Holds the current principal and mirrors it into durable storage.

    Two states: anonymous and authenticated. On construction a persisted
    principal is restored without re-checking credentials, so a user
    deleted since the last run stays logged in.

    When a *directory* is attached, :attr:`current_user` re-resolves the
    principal from it by identity; the persisted snapshot is only what
    survives a restart.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = SESSION_STORAGE_KEY,
        directory: UserDirectory | None = None,
        on_change: Callable[[User | None], None] | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._directory = directory
        self._on_change = on_change
        self._principal: User | None = self._restore()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _restore(self) -> User | None:
        raw = self._storage.get_item(self._key)
        if raw is None:
            return None
        try:
            user = User.model_validate(json.loads(raw))
        except ValueError:
            # Covers both JSONDecodeError and pydantic.ValidationError.
            _logger.warning("Ignoring malformed persisted session under %r", self._key)
            return None
        _logger.debug("Restored session for user %s", user.user_id)
        return user

    def attach_directory(self, directory: UserDirectory | None) -> None:
        self._directory = directory

    def close(self) -> None:
        """Detach collaborators. The persisted principal is kept."""
        self._directory = None
        self._on_change = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def principal(self) -> User | None:
        """The persisted principal snapshot."""
        return self._principal

    @property
    def principal_id(self) -> int | None:
        return self._principal.user_id if self._principal is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self._principal is not None

    @property
    def current_user(self) -> User | None:
        """The principal as currently known to the directory.

        ``None`` when anonymous, or when the directory no longer has the
        record (dangling session). Without a directory this is the
        persisted snapshot.
        """
        if self._principal is None:
            return None
        if self._directory is None:
            return self._principal
        return self._directory.get_user_by_id(self._principal.user_id)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def login(self, email: str, password: str, candidates: Iterable[User | Mapping[str, Any]]) -> LoginResult:
        """Authenticate against *candidates* by exact email and password.

        Credentials are compared on the raw candidate; only a matching
        mapping is validated into a :class:`User`. A match that does not
        validate is logged and skipped. On failure the previous session
        state is left untouched.
        """
        for candidate in candidates:
            if isinstance(candidate, User):
                if candidate.email == email and candidate.password == password:
                    return self._accept(candidate)
                continue
            if _credential(candidate, "Email") != email or _credential(candidate, "Password") != password:
                continue
            try:
                user = User.model_validate(candidate)
            except ValidationError:
                _logger.warning("Skipping malformed user record for %s", redact_for_log(email), exc_info=True)
                continue
            return self._accept(user)

        _logger.info("Login failed for %s", redact_for_log(email))
        return LoginResult(success=False, message=INVALID_CREDENTIALS_MESSAGE)

    def _accept(self, user: User) -> LoginResult:
        self._set_principal(user)
        _logger.info("User %s logged in", user.user_id)
        return LoginResult(success=True, user=user)

    def logout(self) -> None:
        user_id = self.principal_id
        self._principal = None
        self._storage.remove_item(self._key)
        if user_id is not None:
            _logger.info("User %s logged out", user_id)
        self._emit()

    def update_user(self, updated: User) -> None:
        """Replace the principal snapshot in memory and storage.

        The caller guarantees *updated* is the same identity.
        """
        if self._principal is None:
            _logger.warning("update_user called without an authenticated session; ignored")
            return
        self._set_principal(updated)

    def _set_principal(self, user: User) -> None:
        self._principal = user
        self._storage.set_item(self._key, json.dumps(user.to_storage()))
        _logger.debug("Persisted session principal: %s", redact_for_log(user))
        self._emit()

    def _emit(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self._principal)
        except Exception:
            _logger.debug("on_change callback failed", exc_info=True)
