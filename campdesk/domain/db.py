"""Local snapshot store: engine and sessions for the SQLite copy of fetched data."""

from __future__ import annotations

from typing import Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

DEFAULT_DB_URL = "sqlite:///campdesk.db"

_engines: Dict[str, Engine] = {}


def snapshot_engine(db_url: str = DEFAULT_DB_URL) -> Engine:
    """Engine for ``db_url`` with every snapshot table created; one per URL."""
    engine = _engines.get(db_url)
    if engine is None:
        engine = create_engine(db_url)
        Base.metadata.create_all(engine)
        _engines[db_url] = engine
    return engine


def init_database(db_url: str = DEFAULT_DB_URL) -> None:
    snapshot_engine(db_url)
    print(f"[INFO] Snapshot tables ready: {', '.join(sorted(Base.metadata.tables))}")


def get_session(db_url: str = DEFAULT_DB_URL) -> Session:
    """Open a session on the snapshot; callers close it."""
    return sessionmaker(bind=snapshot_engine(db_url))()
