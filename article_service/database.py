"""
Database engine and session management.
The engine and session factory are built once per application by
create_app() and kept on app.state; nothing here is a module-level handle.
"""
from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from article_service.config import Settings

# Base class for models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str, settings: Optional[Settings] = None, **kwargs) -> Engine:
    """
    Create the SQLAlchemy engine for a connection string.

    SQLite engines allow cross-thread use and enforce foreign keys.
    Server databases get a bounded connection pool.

    Args:
        database_url: SQLAlchemy connection string
        settings: Pool tuning; defaults are used when omitted
        **kwargs: Passed through to create_engine (e.g. poolclass in tests)
    """
    settings = settings or Settings(database_url=database_url)

    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(database_url, connect_args=connect_args, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
        **kwargs
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """
    Dependency function to get database session.
    Ensures proper cleanup after request.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
