# nexsched/main.py
#
# Run with: uvicorn nexsched.main:create_app --factory

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .ai.base import TextGenerationProvider
from .ai.service import get_provider
from .auth import build_auth_strategy
from .backend import AuthBackend, build_backend
from .config import Settings, load_settings
from .db import make_engine
from .logging_setup import configure_logging
from .routers import admin_routes, auth_routes, client_routes, master_routes, public_routes
from .session import SessionManager, SessionStorage
from .store import InMemoryStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[InMemoryStore] = None,
    backend: Optional[AuthBackend] = None,
    text_provider: Optional[TextGenerationProvider] = None,
    setup_logging: bool = True,
) -> FastAPI:
    settings = settings or load_settings()
    if setup_logging:
        configure_logging(settings.log_level)

    store = store if store is not None else InMemoryStore.seeded()
    backend = backend or build_backend(settings)
    strategy = build_auth_strategy(settings, backend)
    storage = SessionStorage(make_engine(settings.database_url))

    sessions = SessionManager(store, storage, strategy, backend)
    sessions.restore()

    app = FastAPI(title="NexSched")
    app.state.settings = settings
    app.state.store = store
    app.state.session_manager = sessions
    app.state.text_provider = text_provider or get_provider(settings)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(auth_routes.router)
    app.include_router(public_routes.router)
    app.include_router(admin_routes.router)
    app.include_router(client_routes.router)
    app.include_router(master_routes.router)

    logger.info("NexSched started (env=%s, auth=%s)", settings.env, settings.auth_mode)
    return app
