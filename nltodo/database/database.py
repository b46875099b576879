"""Database connection and session management for nltodo.

The engine is the task store handle: it is built once from `DATABASE_URL`, the schema is
created by the web application's startup hook (`init_db`), and its pool is released by
the shutdown hook (`dispose_engine`). Request handlers get short-lived sessions through
the `get_db` dependency.

Supported backends:
- Local SQLite (default)
- Any SQLAlchemy URL (e.g. PostgreSQL) via `DATABASE_URL`
"""

import logging
import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Database URL - SQLite by default
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./nltodo.db")


def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def get_engine_kwargs(database_url: str) -> dict:
    """Return deterministic create_engine kwargs for a DB URL.

    This is separated to allow deterministic unit testing without connecting.
    """
    engine_kwargs: dict = {
        "echo": os.getenv("DEBUG", "False").lower() == "true",
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        # Request handlers run in a threadpool; one SQLite connection may be shared.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        return engine_kwargs

    engine_kwargs["pool_size"] = int(os.getenv("DB_POOL_SIZE", "5"))
    engine_kwargs["max_overflow"] = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    engine_kwargs["pool_timeout"] = int(os.getenv("DB_POOL_TIMEOUT_SEC", "30"))
    return engine_kwargs


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, **get_engine_kwargs(database_url))


# Create engine (process-wide store handle)
engine = build_engine(DATABASE_URL)


@event.listens_for(Engine, "connect")
def set_sqlite_pragmas(dbapi_conn, connection_record):
    """Enable WAL on SQLite so list reads don't block behind a command's write."""
    if _is_sqlite_url(DATABASE_URL):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for declarative models
Base = declarative_base()


def get_db() -> Session:
    """Get database session (dependency for FastAPI)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database schema.

    - SQLite (default): `create_all()`.
    - Other databases: `create_all()`, or Alembic migrations when `RUN_MIGRATIONS=true`.
    """
    # Register TaskDB on Base.metadata before create_all()
    from nltodo.database import models  # noqa: F401

    run_migrations = os.getenv("RUN_MIGRATIONS", "False").lower() == "true"
    if run_migrations and not _is_sqlite_url(DATABASE_URL):
        from alembic import command
        from alembic.config import Config

        alembic_cfg = Config(os.getenv("ALEMBIC_INI", "alembic.ini"))
        # Ensure Alembic uses the same runtime DB URL.
        alembic_cfg.set_main_option("sqlalchemy.url", DATABASE_URL)
        logger.info("Running Alembic migrations to head")
        command.upgrade(alembic_cfg, "head")
        return

    Base.metadata.create_all(bind=engine)
    logger.debug("Database schema ensured")


def dispose_engine():
    """Release pooled connections (application shutdown hook)."""
    engine.dispose()
    logger.debug("Database engine disposed")
