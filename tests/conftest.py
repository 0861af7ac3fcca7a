from datetime import date

import pytest
from fastapi.testclient import TestClient

from nexsched.backend import UnconfiguredBackend
from nexsched.config import Settings
from nexsched.main import create_app
from nexsched.store import InMemoryStore

SEED_DAY = date(2024, 1, 10)  # a Wednesday


class FakeTextProvider:
    name = "fake"

    def __init__(self, reply: str = "Olá! Seu horário está confirmado."):
        self.reply = reply
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'session.db'}",
        jwt_secret_key="test-secret",
        public_base_url="https://agenda.example.com",
    )


@pytest.fixture
def store():
    return InMemoryStore.seeded(today=SEED_DAY)


@pytest.fixture
def text_provider():
    return FakeTextProvider()


@pytest.fixture
def app(settings, store, text_provider):
    return create_app(
        settings,
        store=store,
        backend=UnconfiguredBackend(),
        text_provider=text_provider,
        setup_logging=False,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(client):
    def _login(email: str, role: str) -> dict[str, str]:
        response = client.post("/auth/login", json={"email": email, "role": role})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
