import pytest

from nexsched.auth import CredentialCheck, DemoAcceptAny
from nexsched.backend import NOT_CONFIGURED_SIGN_UP, UnconfiguredBackend
from nexsched.db import make_engine
from nexsched.errors import BackendError, BackendNotConfiguredError
from nexsched.models import ClientUser, UserRole
from nexsched.session import (
    CLIENT_SESSION_KEY,
    PROFILE_CREATION_FAILED,
    USER_SESSION_KEY,
    SessionManager,
    SessionStorage,
)


class RecordingBackend:
    configured = True

    def __init__(self, user_id="remote-1", fail_insert=False):
        self.user_id = user_id
        self.fail_insert = fail_insert
        self.inserted = []

    def sign_in_with_password(self, email, password):
        return {"id": self.user_id, "email": email}

    def sign_up(self, email, password):
        return {"id": self.user_id, "email": email} if self.user_id else {}

    def insert(self, table, rows):
        if self.fail_insert:
            raise BackendError("duplicate key value", code="409")
        self.inserted.append((table, rows))


@pytest.fixture
def storage(tmp_path):
    return SessionStorage(make_engine(f"sqlite:///{tmp_path / 'sessions.db'}"))


def _manager(store, storage, backend=None, strategy=None):
    backend = backend or UnconfiguredBackend()
    return SessionManager(store, storage, strategy or DemoAcceptAny(), backend)


def test_storage_set_get_remove(storage):
    assert storage.get_item("k") is None

    storage.set_item("k", "one")
    storage.set_item("k", "two")
    assert storage.get_item("k") == "two"

    storage.remove_item("k")
    storage.remove_item("k")
    assert storage.get_item("k") is None


def test_restore_with_empty_storage(store, storage):
    sessions = _manager(store, storage)

    sessions.restore()

    assert sessions.current_user is None
    assert sessions.current_client is None


def test_staff_login_is_persisted_and_restored(store, storage):
    _manager(store, storage).login("sarah@techhealth.com", UserRole.company_admin)

    restored = _manager(store, storage)
    restored.restore()

    assert restored.current_user.id == "u2"
    assert restored.current_client is None


def test_client_login_is_persisted_and_restored(store, storage):
    _manager(store, storage).login("alice@email.com", UserRole.client)

    restored = _manager(store, storage)
    restored.restore()

    assert restored.current_client.id == "cli1"
    assert restored.current_user is None


def test_staff_record_wins_when_both_are_stored(store, storage):
    first = _manager(store, storage)
    first.login("alice@email.com", UserRole.client)
    first.login("joao@techhealth.com", UserRole.provider)

    restored = _manager(store, storage)
    restored.restore()

    assert restored.current_user.id == "u3"
    assert restored.current_client is None


def test_corrupt_record_is_discarded(store, storage):
    storage.set_item(USER_SESSION_KEY, "{not json")
    sessions = _manager(store, storage)

    sessions.restore()

    assert sessions.current_user is None
    assert storage.get_item(USER_SESSION_KEY) is None


def test_logout_clears_staff_record_only(store, storage):
    sessions = _manager(store, storage)
    sessions.login("alice@email.com", UserRole.client)
    sessions.login("sarah@techhealth.com", UserRole.company_admin)

    sessions.logout()

    assert sessions.current_user is None
    assert sessions.current_client is None
    assert storage.get_item(USER_SESSION_KEY) is None
    assert storage.get_item(CLIENT_SESSION_KEY) is not None


def test_client_logout_clears_both_records(store, storage):
    sessions = _manager(store, storage)
    sessions.login("alice@email.com", UserRole.client)
    sessions.login("sarah@techhealth.com", UserRole.company_admin)

    sessions.client_logout()

    assert storage.get_item(USER_SESSION_KEY) is None
    assert storage.get_item(CLIENT_SESSION_KEY) is None
    assert sessions.snapshot()["user"] is None


def test_demo_login_fabricates_client_once(store, storage):
    sessions = _manager(store, storage)
    before = len(store.client_users)

    first = sessions.login("nova@cliente.com", UserRole.client)
    second = sessions.login("nova@cliente.com", UserRole.client)

    assert first.id == second.id
    assert first.identity.name == "nova"
    assert len(store.client_users) == before + 1


def test_profile_update_is_persisted(store, storage):
    sessions = _manager(store, storage)
    actor = sessions.login("alice@email.com", UserRole.client)

    sessions.update_client_profile(actor.identity.model_copy(update={"name": "Alice F."}))

    stored = ClientUser.model_validate_json(storage.get_item(CLIENT_SESSION_KEY))
    assert stored.name == "Alice F."
    assert store.get_client("cli1").name == "Alice F."


def test_register_without_backend_reports_not_configured(store, storage):
    sessions = _manager(store, storage)

    with pytest.raises(BackendNotConfiguredError) as exc:
        sessions.register("x@y.com", "secret1", "X", UserRole.client)

    assert exc.value.message == NOT_CONFIGURED_SIGN_UP


def test_register_company_admin_gets_generated_company(store, storage):
    backend = RecordingBackend()
    sessions = _manager(store, storage, backend, CredentialCheck(backend))

    profile = sessions.register("dona@studio.com", "secret1", "Dona", UserRole.company_admin)

    assert profile["id"] == "remote-1"
    assert profile["role"] == "COMPANY_ADMIN"
    assert profile["company_id"].startswith("comp_")
    assert backend.inserted == [("profiles", [profile])]


def test_register_client_has_no_company(store, storage):
    backend = RecordingBackend()
    sessions = _manager(store, storage, backend)

    profile = sessions.register("c@x.com", "secret1", "C", UserRole.client)

    assert profile["company_id"] is None


def test_register_profile_failure(store, storage):
    backend = RecordingBackend(fail_insert=True)
    sessions = _manager(store, storage, backend)

    with pytest.raises(BackendError) as exc:
        sessions.register("c@x.com", "secret1", "C", UserRole.client)

    assert exc.value.message == PROFILE_CREATION_FAILED


def test_register_without_remote_user(store, storage):
    sessions = _manager(store, storage, RecordingBackend(user_id=None))

    with pytest.raises(BackendError):
        sessions.register("c@x.com", "secret1", "C", UserRole.client)


def test_snapshot_reports_demo_mode(store, storage):
    assert _manager(store, storage).snapshot()["demo_mode"] is True
    assert _manager(store, storage, strategy=CredentialCheck(UnconfiguredBackend())).snapshot()["demo_mode"] is False
