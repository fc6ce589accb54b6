# viibe/storage/base.py
"""
Key-value storage interface for persisted pipeline state.

Design principles:
- String keys, string values (callers own serialization)
- Missing keys read as None, never as an error
- Providers are swappable: in-memory for tests, files for local dev,
  a database table for shared deployments
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for a string key-value store.

    Implementations must handle:
    - get() returning None for absent keys
    - set() overwriting any existing value
    - remove() reporting whether something was deleted
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'local', 'memory', 'sql')."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under key.

        Returns:
            The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> bool:
        """
        Delete the value stored under key.

        Returns:
            True if deleted, False if not found
        """
        pass

    def exists(self, key: str) -> bool:
        """Check if a value is stored under key."""
        return self.get(key) is not None
