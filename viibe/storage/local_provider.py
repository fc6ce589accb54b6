# viibe/storage/local_provider.py
"""
Local filesystem storage provider for development and single-host deployments.

Each key is stored as one UTF-8 file under the base directory.
"""

import logging
import os
import shutil
from pathlib import Path

from viibe.logging_config import log_operation
from viibe.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class LocalKeyValueStore(KeyValueStore):
    """
    Local filesystem key-value store.

    Configuration:
    - LOCAL_STORAGE_PATH: Base directory (default: ./storage)
    """

    def __init__(self, base_path: str | None = None):
        """
        Initialize local storage.

        Args:
            base_path: Base directory for storage (or LOCAL_STORAGE_PATH env)
        """
        self._base_path = Path(base_path or os.getenv("LOCAL_STORAGE_PATH", "./storage"))
        self._base_path.mkdir(parents=True, exist_ok=True)
        self._suffix = ".json"

        logger.info(f"Local storage initialized: {self._base_path}")

    @property
    def name(self) -> str:
        return "local"

    def _get_path(self, key: str) -> Path:
        """Get filesystem path for key, with path traversal protection."""
        resolved = (self._base_path / f"{key}{self._suffix}").resolve()
        if not resolved.is_relative_to(self._base_path.resolve()):
            raise ValueError("Path traversal detected")
        return resolved

    def get(self, key: str) -> str | None:
        file_path = self._get_path(key)
        if not file_path.exists():
            return None

        with log_operation("get", key, provider=self.name) as metrics:
            value = file_path.read_text(encoding="utf-8")
            metrics["size_bytes"] = len(value.encode("utf-8"))
        return value

    def set(self, key: str, value: str) -> None:
        file_path = self._get_path(key)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with log_operation("set", key, provider=self.name) as metrics:
            # Atomic replace: readers see the old value or the new one
            tmp_path = file_path.with_name(file_path.name + ".tmp")
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(file_path)
            metrics["size_bytes"] = len(value.encode("utf-8"))

    def remove(self, key: str) -> bool:
        file_path = self._get_path(key)
        if not file_path.exists():
            return False

        with log_operation("remove", key, provider=self.name):
            file_path.unlink()
        return True

    def list_keys(self) -> list[str]:
        """List all stored keys."""
        return sorted(
            str(p.relative_to(self._base_path))[: -len(self._suffix)]
            for p in self._base_path.rglob(f"*{self._suffix}")
        )

    def cleanup(self) -> None:
        """Remove all stored content (for testing)."""
        if self._base_path.exists():
            shutil.rmtree(self._base_path)
            self._base_path.mkdir(parents=True, exist_ok=True)
