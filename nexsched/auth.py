# nexsched/auth.py

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional, Protocol, Union

from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext

from .config import Settings
from .errors import AuthenticationError, BackendError
from .models import ClientUser, User, UserRole, new_id

if TYPE_CHECKING:
    from .backend import AuthBackend
    from .store import InMemoryStore

logger = logging.getLogger(__name__)

DEMO_COMPANY_ID = "c1"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # unknown or malformed hash
        return False


def create_access_token(data: dict, settings: Settings, expires_minutes: Optional[int] = None) -> str:
    to_encode = data.copy()
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    to_encode["exp"] = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


@dataclass
class Actor:
    """The authenticated party behind a request: a staff user or a client."""

    identity: Union[User, ClientUser]

    @property
    def is_client(self) -> bool:
        return isinstance(self.identity, ClientUser)

    @property
    def role(self) -> UserRole:
        if isinstance(self.identity, ClientUser):
            return UserRole.client
        return self.identity.role

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def company_id(self) -> Optional[str]:
        if isinstance(self.identity, User):
            return self.identity.company_id
        return None

    @property
    def subject(self) -> str:
        kind = "client" if self.is_client else "staff"
        return f"{kind}:{self.identity.id}"


def issue_token(actor: Actor, settings: Settings) -> str:
    return create_access_token({"sub": actor.subject, "role": actor.role.value}, settings)


# --- login strategies -------------------------------------------------------


class AuthStrategy(Protocol):
    demo: bool

    def authenticate(
        self,
        store: "InMemoryStore",
        email: str,
        role: UserRole,
        password: Optional[str] = None,
    ) -> Actor:
        ...


def _local_part(email: str) -> str:
    return email.split("@")[0]


class DemoAcceptAny:
    """Accepts any email/role pair; unknown emails get a fabricated identity."""

    demo = True

    def authenticate(
        self,
        store: "InMemoryStore",
        email: str,
        role: UserRole,
        password: Optional[str] = None,
    ) -> Actor:
        if role == UserRole.client:
            client = store.find_client_by_email(email)
            if client is None:
                client = ClientUser(
                    id=new_id("cli"),
                    name=_local_part(email),
                    email=email,
                    phone="",
                    password_hash="",
                    created_at=datetime.now(timezone.utc),
                )
                store.add_client(client)
                logger.info("Demo client %s created", client.id)
            return Actor(client)

        user = store.find_user_by_email(email)
        if user is None:
            user = User(
                id=new_id("usr"),
                name=_local_part(email),
                email=email,
                phone="",
                role=role,
                company_id=None if role == UserRole.master_admin else DEMO_COMPANY_ID,
            )
            store.add_user(user)
            logger.info("Demo staff user %s created with role %s", user.id, role.value)
        return Actor(user)


class CredentialCheck:
    """Verifies passwords locally for known clients, otherwise against the backend."""

    demo = False

    def __init__(self, backend: "AuthBackend"):
        self.backend = backend

    def authenticate(
        self,
        store: "InMemoryStore",
        email: str,
        role: UserRole,
        password: Optional[str] = None,
    ) -> Actor:
        if not password:
            raise AuthenticationError("Invalid credentials")

        if role == UserRole.client:
            client = store.find_client_by_email(email)
            if client is not None and verify_password(password, client.password_hash):
                return Actor(client)

        try:
            remote_user = self.backend.sign_in_with_password(email, password)
        except BackendError as exc:
            raise AuthenticationError(exc.message) from exc

        if role == UserRole.client:
            client = store.find_client_by_email(email)
            if client is None:
                client = ClientUser(
                    id=str(remote_user.get("id") or new_id("cli")),
                    name=_local_part(email),
                    email=email,
                    created_at=datetime.now(timezone.utc),
                )
                store.add_client(client)
            return Actor(client)

        user = store.find_user_by_email(email)
        if user is None or user.role != role:
            raise AuthenticationError("Perfil não encontrado para este e-mail.")
        return Actor(user)


def build_auth_strategy(settings: Settings, backend: "AuthBackend") -> AuthStrategy:
    if settings.auth_mode == "credentials":
        return CredentialCheck(backend)
    if settings.auth_mode == "demo":
        if settings.is_prod:
            raise RuntimeError("Demo login cannot be enabled when ENV is production")
        logger.warning("Demo login enabled: any email/role pair is accepted")
        return DemoAcceptAny()
    raise ValueError(f"Unknown AUTH_MODE: {settings.auth_mode}")


# --- request dependencies -----------------------------------------------------


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_actor(request: Request, token: str = Depends(oauth2_scheme)) -> Actor:
    settings: Settings = request.app.state.settings
    store = request.app.state.store
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise _unauthorized("Invalid token")

    subject = payload.get("sub") or ""
    kind, _, actor_id = subject.partition(":")
    if not actor_id:
        raise _unauthorized("Invalid token")

    if kind == "client":
        client = store.get_client(actor_id)
        if client is None:
            raise _unauthorized("User not found")
        return Actor(client)
    if kind == "staff":
        user = store.get_user(actor_id)
        if user is None:
            raise _unauthorized("User not found")
        return Actor(user)
    raise _unauthorized("Invalid token")
