# nexsched/db.py

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from .models import SessionRecord  # noqa: F401  registers the table


def make_engine(database_url: str) -> Engine:
    """Engine for the local session store (SQLite file by default)."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # required for SQLite + FastAPI
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    SQLModel.metadata.create_all(engine)
    return engine
