from __future__ import annotations

import json

from travelportal._constants import INVALID_CREDENTIALS_MESSAGE, SESSION_STORAGE_KEY
from travelportal.fixtures import default_seed
from travelportal.models.user import Role, User
from travelportal.session import SessionStore
from travelportal.state.store import DomainStore
from travelportal.storage import MemoryStorage


def _user(user_id: int = 1, email: str = "a@x.com", password: str = "pw") -> User:
    return User(user_id=user_id, name=f"User {user_id}", email=email, password=password, role=Role.CUSTOMER)


def test_login_scenario_with_plain_mapping_pool() -> None:
    pool = [{"UserID": 1, "Email": "a@x.com", "Password": "pw", "Role": "customer"}]
    session = SessionStore(MemoryStorage())

    ok = session.login("a@x.com", "pw", pool)
    assert ok.success is True
    assert ok.user is not None
    assert ok.user.user_id == 1
    assert session.is_authenticated

    session.logout()
    bad = session.login("a@x.com", "wrong", pool)
    assert bad.success is False
    assert bad.user is None
    assert not session.is_authenticated


def test_login_skips_records_that_do_not_match_without_validating() -> None:
    pool = [
        {"UserID": 9, "Email": "legacy@x.com", "Password": "pw"},
        {"UserID": 1, "Email": "a@x.com", "Password": "pw", "Role": "customer"},
    ]
    session = SessionStore(MemoryStorage())

    result = session.login("a@x.com", "pw", pool)

    assert result.success is True
    assert result.user is not None
    assert result.user.user_id == 1


def test_login_matches_field_name_keys() -> None:
    pool = [{"user_id": 3, "email": "c@x.com", "password": "pw", "role": "agent"}]
    session = SessionStore(MemoryStorage())

    result = session.login("c@x.com", "pw", pool)

    assert result.success is True
    assert session.principal_id == 3


def test_login_skips_malformed_match_and_continues() -> None:
    storage = MemoryStorage()
    pool = [
        {"UserID": 9, "Email": "a@x.com", "Password": "pw", "Role": "pilot"},
        {"UserID": 1, "Email": "a@x.com", "Password": "pw", "Role": "customer"},
    ]
    session = SessionStore(storage)

    result = session.login("a@x.com", "pw", pool)

    assert result.success is True
    assert session.principal_id == 1


def test_login_with_only_malformed_match_fails_cleanly() -> None:
    storage = MemoryStorage()
    session = SessionStore(storage)

    result = session.login("a@x.com", "pw", [{"UserID": 9, "Email": "a@x.com", "Password": "pw"}])

    assert result.success is False
    assert result.message == INVALID_CREDENTIALS_MESSAGE
    assert not session.is_authenticated
    assert storage.get_item(SESSION_STORAGE_KEY) is None


def test_login_returns_the_matched_record_and_persists_it() -> None:
    storage = MemoryStorage()
    session = SessionStore(storage)
    alice = _user(1, "alice@example.com")
    bob = _user(2, "bob@example.com", "secret")

    result = session.login("bob@example.com", "secret", [alice, bob])

    assert result.user is bob
    assert session.principal is bob
    stored = json.loads(storage.get_item(SESSION_STORAGE_KEY) or "{}")
    assert stored["UserID"] == 2
    assert stored["Email"] == "bob@example.com"


def test_failed_login_leaves_previous_session_untouched() -> None:
    storage = MemoryStorage()
    session = SessionStore(storage)
    alice = _user(1, "alice@example.com")
    session.login("alice@example.com", "pw", [alice])
    persisted = storage.get_item(SESSION_STORAGE_KEY)

    result = session.login("alice@example.com", "nope", [alice])

    assert result.success is False
    assert session.principal is alice
    assert storage.get_item(SESSION_STORAGE_KEY) == persisted


def test_login_failure_message_is_generic() -> None:
    session = SessionStore(MemoryStorage())
    pool = [_user(1, "alice@example.com")]

    unknown_email = session.login("nobody@example.com", "pw", pool)
    wrong_password = session.login("alice@example.com", "bad", pool)

    assert unknown_email.message == wrong_password.message == INVALID_CREDENTIALS_MESSAGE


def test_login_compare_is_case_sensitive() -> None:
    session = SessionStore(MemoryStorage())

    result = session.login("A@X.COM", "pw", [_user()])

    assert result.success is False


def test_logout_clears_principal_and_storage() -> None:
    storage = MemoryStorage()
    session = SessionStore(storage)
    session.login("a@x.com", "pw", [_user()])

    session.logout()

    assert session.principal is None
    assert not session.is_authenticated
    assert storage.get_item(SESSION_STORAGE_KEY) is None


def test_session_restored_from_storage() -> None:
    storage = MemoryStorage()
    first = SessionStore(storage)
    first.login("a@x.com", "pw", [_user()])

    second = SessionStore(storage)

    assert second.is_authenticated
    assert second.principal == first.principal


def test_persisted_principal_round_trips_field_for_field() -> None:
    user = User.model_validate(default_seed().users[3])
    storage = MemoryStorage({SESSION_STORAGE_KEY: json.dumps(user.to_storage())})

    restored = SessionStore(storage).principal

    assert restored == user
    assert restored is not None
    assert restored.model_dump() == user.model_dump()


def test_malformed_session_is_treated_as_absent() -> None:
    for raw in ("{not json", "[1, 2, 3]", json.dumps({"UserID": "abc"})):
        storage = MemoryStorage({SESSION_STORAGE_KEY: raw})

        session = SessionStore(storage)

        assert session.principal is None
        assert not session.is_authenticated


def test_custom_storage_key() -> None:
    storage = MemoryStorage()
    session = SessionStore(storage, key="portal.session")

    session.login("a@x.com", "pw", [_user()])

    assert storage.get_item("portal.session") is not None
    assert storage.get_item(SESSION_STORAGE_KEY) is None


def test_update_user_replaces_snapshot_in_memory_and_storage() -> None:
    storage = MemoryStorage()
    session = SessionStore(storage)
    user = _user()
    session.login("a@x.com", "pw", [user])

    renamed = user.model_copy(update={"name": "Renamed"})
    session.update_user(renamed)

    assert session.principal == renamed
    assert SessionStore(storage).principal == renamed


def test_update_user_while_anonymous_is_ignored() -> None:
    storage = MemoryStorage()
    session = SessionStore(storage)

    session.update_user(_user())

    assert session.principal is None
    assert storage.get_item(SESSION_STORAGE_KEY) is None


def test_current_user_resolves_from_directory() -> None:
    store = DomainStore(default_seed())
    session = SessionStore(MemoryStorage(), directory=store)
    session.login("john@example.com", "customer123", store.users.snapshot)

    store.users.update(4, {"Name": "John Q. Smith"})
    assert session.current_user is not None
    assert session.current_user.name == "John Q. Smith"
    assert session.principal is not None
    assert session.principal.name == "John Smith"

    # Deleted users keep a dangling session.
    store.users.delete(4)
    assert session.current_user is None
    assert session.is_authenticated


def test_restore_does_not_consult_directory() -> None:
    store = DomainStore(default_seed())
    storage = MemoryStorage()
    SessionStore(storage, directory=store).login("john@example.com", "customer123", store.users.snapshot)
    store.users.delete(4)

    restored = SessionStore(storage, directory=store)

    assert restored.is_authenticated
    assert restored.principal_id == 4
    assert restored.current_user is None


def test_on_change_callback_tracks_transitions() -> None:
    seen: list[User | None] = []
    session = SessionStore(MemoryStorage(), on_change=seen.append)
    user = _user()

    session.login("a@x.com", "pw", [user])
    session.login("a@x.com", "bad", [user])
    session.logout()

    assert seen == [user, None]


def test_failing_on_change_callback_does_not_break_login() -> None:
    def _boom(user: User | None) -> None:
        raise RuntimeError("callback failure")

    session = SessionStore(MemoryStorage(), on_change=_boom)

    assert session.login("a@x.com", "pw", [_user()]).success
    assert session.is_authenticated
