"""
SQLAlchemy engine and session helpers for the sql history store.

Nothing here runs at import time: engines are built on demand from an
explicit URL, so deployments that use the local or memory store never need
a database.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Build an engine for database_url.

    In-memory SQLite URLs get a StaticPool so every session shares the one
    connection that holds the data.
    """
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+psycopg2://", 1)

    kwargs: dict = {"future": True, "echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool

    return create_engine(database_url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        future=True,
    )


def init_db(engine: Engine) -> None:
    """Import models and create tables if they don't exist."""
    from viibe import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
