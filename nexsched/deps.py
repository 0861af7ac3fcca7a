# nexsched/deps.py

from fastapi import Depends, HTTPException, Request

from .auth import Actor, get_current_actor
from .config import Settings
from .models import UserRole
from .session import SessionManager
from .store import InMemoryStore


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_text_provider(request: Request):
    return request.app.state.text_provider


def require_role(actor: Actor, *roles: UserRole):
    if actor.role not in roles:
        raise HTTPException(status_code=403, detail="Forbidden")


def company_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    require_role(actor, UserRole.company_admin)
    if not actor.company_id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return actor


def master_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    require_role(actor, UserRole.master_admin)
    return actor


def client_only(actor: Actor = Depends(get_current_actor)) -> Actor:
    require_role(actor, UserRole.client)
    return actor
