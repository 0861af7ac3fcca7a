# nexsched/session.py

import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlmodel import Session

from .auth import Actor, AuthStrategy
from .backend import PROFILES_TABLE, AuthBackend
from .errors import BackendError
from .models import ClientUser, SessionRecord, User, UserRole
from .store import InMemoryStore

logger = logging.getLogger(__name__)

USER_SESSION_KEY = "nexsched_user"
CLIENT_SESSION_KEY = "nexsched_client"

PROFILE_CREATION_FAILED = "Erro ao criar perfil de usuário."


class SessionStorage:
    """Durable key-value storage for the login-session snapshot."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def get_item(self, key: str) -> Optional[str]:
        with Session(self.engine) as session:
            record = session.get(SessionRecord, key)
            return record.value if record is not None else None

    def set_item(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            record = session.get(SessionRecord, key)
            now = datetime.now(timezone.utc)
            if record is None:
                record = SessionRecord(key=key, value=value, updated_at=now)
            else:
                record.value = value
                record.updated_at = now
            session.add(record)
            session.commit()

    def remove_item(self, key: str) -> None:
        with Session(self.engine) as session:
            record = session.get(SessionRecord, key)
            if record is not None:
                session.delete(record)
                session.commit()


class SessionManager:
    """Tracks the active staff user / client and keeps the snapshot persisted."""

    def __init__(
        self,
        store: InMemoryStore,
        storage: SessionStorage,
        strategy: AuthStrategy,
        backend: AuthBackend,
    ):
        self.store = store
        self.storage = storage
        self.strategy = strategy
        self.backend = backend
        self.current_user: Optional[User] = None
        self.current_client: Optional[ClientUser] = None

    def restore(self) -> None:
        stored_user = self.storage.get_item(USER_SESSION_KEY)
        stored_client = self.storage.get_item(CLIENT_SESSION_KEY)

        if stored_user:
            self.current_user = self._load(USER_SESSION_KEY, stored_user, User)
        elif stored_client:
            self.current_client = self._load(CLIENT_SESSION_KEY, stored_client, ClientUser)

        if self.current_user is not None:
            logger.info("Restored staff session for %s", self.current_user.id)
        elif self.current_client is not None:
            logger.info("Restored client session for %s", self.current_client.id)

    def _load(self, key: str, raw: str, model):
        try:
            return model.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable session record %s", key)
            self.storage.remove_item(key)
            return None

    def login(self, email: str, role: UserRole, password: Optional[str] = None) -> Actor:
        actor = self.strategy.authenticate(self.store, email, role, password)
        if actor.is_client:
            self.current_client = actor.identity
            self.storage.set_item(CLIENT_SESSION_KEY, actor.identity.model_dump_json())
        else:
            self.current_user = actor.identity
            self.storage.set_item(USER_SESSION_KEY, actor.identity.model_dump_json())
        logger.info("Login %s as %s", actor.id, actor.role.value, extra={"actor_id": actor.id})
        return actor

    def logout(self) -> None:
        self.storage.remove_item(USER_SESSION_KEY)
        self.current_user = None
        self.current_client = None

    def client_logout(self) -> None:
        self.storage.remove_item(CLIENT_SESSION_KEY)
        self.current_client = None
        self.logout()

    def update_client_profile(self, client: ClientUser) -> ClientUser:
        self.store.update_client_profile(client)
        self.current_client = client
        self.storage.set_item(CLIENT_SESSION_KEY, client.model_dump_json())
        return client

    def register(self, email: str, password: str, name: str, role: UserRole) -> dict[str, Any]:
        """Sign up with the backend and create the matching profile row."""
        remote_user = self.backend.sign_up(email, password)
        if not remote_user.get("id"):
            raise BackendError("Cadastro não retornou um usuário.")

        profile = {
            "id": remote_user["id"],
            "email": email,
            "name": name,
            "role": role.value,
            "company_id": f"comp_{int(time.time() * 1000)}" if role == UserRole.company_admin else None,
        }
        try:
            self.backend.insert(PROFILES_TABLE, [profile])
        except BackendError as exc:
            logger.error("Profile creation failed: %s", exc.message)
            raise BackendError(PROFILE_CREATION_FAILED, code=exc.code) from exc
        return profile

    def snapshot(self) -> dict[str, Any]:
        return {
            "user": self.current_user,
            "client": self.current_client,
            "demo_mode": self.strategy.demo,
        }
