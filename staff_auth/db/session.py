# staff-auth/staff_auth/db/session.py
# Explicit store handle: opened on startup, closed on shutdown, injected per request.
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from staff_auth.core.logging import redact_url
from staff_auth.db.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and the session factory for one store URL."""

    def __init__(self, url: str):
        self.url = url
        self._engine: Optional[Engine] = None
        self._factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    def connect(self) -> None:
        """Create the engine, check connectivity and create missing tables."""
        if self._engine is not None:
            return
        logger.info("Connecting to database %s", redact_url(self.url))
        connect_args = {}
        if self.url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        engine = create_engine(self.url, pool_pre_ping=True, connect_args=connect_args)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
        except Exception:
            engine.dispose()
            raise
        self._engine = engine
        self._factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        logger.info("Database connection established")

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._factory = None
        logger.info("Database connection closed")

    @contextmanager
    def session(self) -> Iterator[Session]:
        if self._factory is None:
            raise RuntimeError("Database is not connected")
        db = self._factory()
        try:
            yield db
        finally:
            db.close()


def get_db(request: Request) -> Iterator[Session]:
    """Dependency: one ORM session per request from the app's store handle."""
    database: Database = request.app.state.database
    with database.session() as db:
        yield db
