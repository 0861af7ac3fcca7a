import pytest
from jose import jwt

from nexsched.auth import (
    Actor,
    CredentialCheck,
    DemoAcceptAny,
    build_auth_strategy,
    create_access_token,
    hash_password,
    issue_token,
    verify_password,
)
from nexsched.backend import NOT_CONFIGURED_SIGN_IN, UnconfiguredBackend
from nexsched.config import Settings
from nexsched.data import DEMO_CLIENT_PASSWORD
from nexsched.errors import AuthenticationError, BackendError
from nexsched.models import UserRole


class StubBackend:
    configured = True

    def __init__(self, user=None, error=None):
        self.user = user or {}
        self.error = error
        self.calls = []

    def sign_in_with_password(self, email, password):
        self.calls.append(email)
        if self.error is not None:
            raise self.error
        return self.user

    def sign_up(self, email, password):
        return {}

    def insert(self, table, rows):
        return None


def test_password_hash_round_trip():
    hashed = hash_password("segredo")

    assert verify_password("segredo", hashed)
    assert not verify_password("outro", hashed)
    assert not verify_password("segredo", "")
    assert not verify_password("segredo", "not-a-hash")


def test_demo_accepts_known_staff_email(store):
    actor = DemoAcceptAny().authenticate(store, "joao@techhealth.com", UserRole.provider)

    assert actor.id == "u3"
    assert actor.company_id == "c1"
    assert actor.subject == "staff:u3"


def test_demo_fabricates_staff_in_demo_company(store):
    actor = DemoAcceptAny().authenticate(store, "nova@clinica.com", UserRole.provider)

    assert actor.id.startswith("usr_")
    assert actor.identity.name == "nova"
    assert actor.company_id == "c1"
    assert store.get_user(actor.id) is actor.identity


def test_demo_fabricated_master_has_no_company(store):
    actor = DemoAcceptAny().authenticate(store, "root@x.com", UserRole.master_admin)

    assert actor.role == UserRole.master_admin
    assert actor.company_id is None


def test_demo_client_identity(store):
    actor = DemoAcceptAny().authenticate(store, "alice@email.com", UserRole.client)

    assert actor.is_client
    assert actor.role == UserRole.client
    assert actor.subject == "client:cli1"
    assert actor.company_id is None


def test_credentials_accept_local_client_password(store):
    backend = StubBackend()

    actor = CredentialCheck(backend).authenticate(store, "alice@email.com", UserRole.client, DEMO_CLIENT_PASSWORD)

    assert actor.id == "cli1"
    assert backend.calls == []


def test_credentials_require_password(store):
    with pytest.raises(AuthenticationError):
        CredentialCheck(StubBackend()).authenticate(store, "alice@email.com", UserRole.client)


def test_credentials_surface_backend_message(store):
    strategy = CredentialCheck(UnconfiguredBackend())

    with pytest.raises(AuthenticationError) as exc:
        strategy.authenticate(store, "sarah@techhealth.com", UserRole.company_admin, "x")

    assert str(exc.value) == NOT_CONFIGURED_SIGN_IN


def test_credentials_wrong_client_password_goes_to_backend(store):
    backend = StubBackend(error=BackendError("Invalid login credentials", code="400"))

    with pytest.raises(AuthenticationError, match="Invalid login credentials"):
        CredentialCheck(backend).authenticate(store, "alice@email.com", UserRole.client, "errada")

    assert backend.calls == ["alice@email.com"]


def test_credentials_staff_must_match_role(store):
    strategy = CredentialCheck(StubBackend(user={"id": "remote-2"}))

    assert strategy.authenticate(store, "sarah@techhealth.com", UserRole.company_admin, "x").id == "u2"
    with pytest.raises(AuthenticationError):
        strategy.authenticate(store, "sarah@techhealth.com", UserRole.provider, "x")


def test_credentials_create_unknown_client_from_backend(store):
    strategy = CredentialCheck(StubBackend(user={"id": "remote-3"}))

    actor = strategy.authenticate(store, "novo@cliente.com", UserRole.client, "x")

    assert actor.id == "remote-3"
    assert store.find_client_by_email("novo@cliente.com") is actor.identity


def test_build_strategy_by_mode():
    backend = UnconfiguredBackend()

    assert build_auth_strategy(Settings(auth_mode="demo"), backend).demo is True
    assert build_auth_strategy(Settings(auth_mode="credentials"), backend).demo is False
    with pytest.raises(ValueError):
        build_auth_strategy(Settings(auth_mode="ldap"), backend)


def test_demo_mode_refused_in_production():
    with pytest.raises(RuntimeError):
        build_auth_strategy(Settings(env="production", auth_mode="demo"), UnconfiguredBackend())


def test_issued_token_carries_subject_and_role(store):
    settings = Settings(jwt_secret_key="k")
    actor = Actor(store.get_user("u2"))

    payload = jwt.decode(issue_token(actor, settings), "k", algorithms=["HS256"])

    assert payload["sub"] == "staff:u2"
    assert payload["role"] == "COMPANY_ADMIN"
    assert "exp" in payload


def test_expired_token_is_rejected():
    settings = Settings(jwt_secret_key="k")
    token = create_access_token({"sub": "staff:u2"}, settings, expires_minutes=-1)

    with pytest.raises(jwt.ExpiredSignatureError):
        jwt.decode(token, "k", algorithms=["HS256"])
