# nexsched/routers/client_routes.py

from typing import List

from fastapi import APIRouter, Depends

from nexsched.auth import Actor
from nexsched.deps import client_only, get_session_manager, get_store
from nexsched.finance import client_dashboard
from nexsched.models import Appointment
from nexsched.schemas import ClientDashboard, ClientProfileUpdate, ClientPublic
from nexsched.session import SessionManager
from nexsched.store import InMemoryStore

router = APIRouter(
    prefix="/client",
    tags=["client"],
)


@router.get("/dashboard", response_model=ClientDashboard)
def dashboard(
    actor: Actor = Depends(client_only),
    store: InMemoryStore = Depends(get_store),
):
    return client_dashboard(store, actor.id)


@router.get("/appointments", response_model=List[Appointment])
def my_appointments(
    actor: Actor = Depends(client_only),
    store: InMemoryStore = Depends(get_store),
):
    # newest first
    return sorted(store.appointments_for_client(actor.id), key=lambda a: a.start, reverse=True)


@router.put("/profile", response_model=ClientPublic)
def update_profile(
    payload: ClientProfileUpdate,
    actor: Actor = Depends(client_only),
    sessions: SessionManager = Depends(get_session_manager),
):
    # email is not editable
    updated = actor.identity.model_copy(update={"name": payload.name, "phone": payload.phone})
    sessions.update_client_profile(updated)
    return ClientPublic.model_validate(updated.model_dump())
