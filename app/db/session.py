"""Database handle: engine, session factory and health check."""

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the SQLAlchemy engine and session factory.

    Created once at import time; the application lifespan calls
    dispose() on shutdown.
    """

    def __init__(self, url: str):
        backend = make_url(url).get_backend_name()
        engine_kwargs: dict = {"pool_pre_ping": True}
        connect_args: dict = {}
        if backend.startswith("postgresql"):
            connect_args["options"] = "-c timezone=utc"
        elif backend == "sqlite":
            # In-memory databases must share one connection across threads
            connect_args["check_same_thread"] = False
            engine_kwargs["poolclass"] = StaticPool
        self.engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def ping(self) -> bool:
        """Run SELECT 1; True when the database answers."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        logger.info("Disposing database engine")
        self.engine.dispose()


database = Database(settings.DATABASE_URL)
engine = database.engine
SessionLocal = database.SessionLocal
