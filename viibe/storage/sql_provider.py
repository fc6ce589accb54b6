# viibe/storage/sql_provider.py
"""
SQL storage provider implementation using SQLAlchemy.

Supports any SQLAlchemy URL: PostgreSQL in production, SQLite for
development and tests. The kv_entries table is created on first use.
"""

import logging
import os
from typing import Optional

from viibe import models
from viibe.database import create_db_engine, create_session_factory, init_db
from viibe.logging_config import log_operation
from viibe.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class SqlKeyValueStore(KeyValueStore):
    """
    Database-backed key-value store.

    Configuration via environment:
    - DATABASE_URL: SQLAlchemy connection URL (required)
    """

    def __init__(self, database_url: Optional[str] = None):
        """
        Initialize the SQL provider.

        Args:
            database_url: SQLAlchemy URL (or DATABASE_URL env var)
        """
        url = database_url or os.getenv("DATABASE_URL")
        if not url:
            raise ValueError("DATABASE_URL is required for the sql history store")

        self._engine = create_db_engine(url)
        self._session_factory = create_session_factory(self._engine)
        init_db(self._engine)

        logger.info(f"SQL storage initialized: {self._engine.url.render_as_string(hide_password=True)}")

    @property
    def name(self) -> str:
        return "sql"

    def get(self, key: str) -> Optional[str]:
        with log_operation("get", key, provider=self.name) as metrics:
            with self._session_factory() as db:
                entry = db.get(models.KeyValueEntry, key)
                if entry is None:
                    return None
                metrics["size_bytes"] = len(entry.value.encode("utf-8"))
                return entry.value

    def set(self, key: str, value: str) -> None:
        with log_operation("set", key, provider=self.name) as metrics:
            with self._session_factory() as db:
                entry = db.get(models.KeyValueEntry, key)
                if entry is None:
                    db.add(models.KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value
                db.commit()
            metrics["size_bytes"] = len(value.encode("utf-8"))

    def remove(self, key: str) -> bool:
        with log_operation("remove", key, provider=self.name):
            with self._session_factory() as db:
                entry = db.get(models.KeyValueEntry, key)
                if entry is None:
                    return False
                db.delete(entry)
                db.commit()
                return True

    def dispose(self) -> None:
        """Close pooled connections."""
        self._engine.dispose()
