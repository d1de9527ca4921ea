"""
Database configuration and base model.

Uses SQLAlchemy 2.0 declarative style with SQLite. The default engine
points at the per-user history file; other databases (a custom file,
or in-memory for tests) are built with create_db_engine().
"""

from pathlib import Path
from contextlib import contextmanager
from typing import Generator, Optional, Union

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from config import PATHS


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def database_url(path: Union[str, Path, None] = None) -> str:
    """SQLite URL for a database file; no path means an in-memory database."""
    if path is None:
        return "sqlite://"
    return f"sqlite:///{path}"


def create_db_engine(path: Union[str, Path, None] = None) -> Engine:
    """Create an engine for a SQLite file. The file is only opened on first use."""
    return create_engine(database_url(path), echo=False)


def create_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False)


engine = create_db_engine(PATHS.database)
SessionLocal = create_session_factory(engine)


@contextmanager
def get_session(factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """Context manager for database sessions."""
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """Create the history tables on an engine (the per-user file by default)."""
    if bind is None:
        bind = engine
    database = bind.url.database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)

    # Register the models on Base.metadata
    import models.match_record  # noqa: F401
    Base.metadata.create_all(bind=bind)
