# nexsched/routers/auth_routes.py

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from nexsched.auth import Actor, get_current_actor, issue_token
from nexsched.deps import get_session_manager
from nexsched.errors import AuthenticationError, BackendError, BackendNotConfiguredError
from nexsched.schemas import (
    ClientPublic,
    LoginRequest,
    LoginResponse,
    MeResponse,
    ProfilePublic,
    RegisterRequest,
    SessionState,
)
from nexsched.session import SessionManager

router = APIRouter(
    tags=["auth"],
)


def _describe(actor: Actor) -> dict:
    if actor.is_client:
        return {"client": ClientPublic.model_validate(actor.identity.model_dump())}
    return {"user": actor.identity}


@router.post("/auth/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
):
    try:
        actor = sessions.login(credentials.email, credentials.role, credentials.password)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=401,
            detail=str(exc) or "Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = issue_token(actor, request.app.state.settings)
    return {"access_token": token, "token_type": "bearer", "role": actor.role, **_describe(actor)}


@router.post("/auth/register", response_model=ProfilePublic, status_code=201)
def register(
    payload: RegisterRequest,
    sessions: SessionManager = Depends(get_session_manager),
):
    try:
        profile = sessions.register(payload.email, payload.password, payload.name, payload.role)
    except BackendNotConfiguredError as exc:
        raise HTTPException(status_code=503, detail=exc.message)
    except BackendError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return profile


@router.post("/auth/logout", status_code=204)
def logout(sessions: SessionManager = Depends(get_session_manager)):
    sessions.logout()
    return Response(status_code=204)


@router.post("/auth/client/logout", status_code=204)
def client_logout(sessions: SessionManager = Depends(get_session_manager)):
    sessions.client_logout()
    return Response(status_code=204)


@router.get("/auth/session", response_model=SessionState)
def current_session(sessions: SessionManager = Depends(get_session_manager)):
    snapshot = sessions.snapshot()
    client = snapshot["client"]
    return {
        "user": snapshot["user"],
        "client": ClientPublic.model_validate(client.model_dump()) if client else None,
        "demo_mode": snapshot["demo_mode"],
    }


@router.get("/me", response_model=MeResponse)
def me(actor: Actor = Depends(get_current_actor)):
    return {"role": actor.role, **_describe(actor)}
