"""
Abstract Storage Interface

The whole financial state lives in ONE string slot under a fixed key,
the same way a browser keeps it in local storage. Backends only need
to read, write and delete strings by key; serialization and the
fallback-to-default policy live in StateRepository.

Backends RAISE StorageError subclasses. It is the repository's job to
turn those into logged, silent degradation.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """
    Abstract string key-value slot.

    Any storage implementation (files, memory, a database row...)
    must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the value stored under key.

        Returns:
            The stored string, or None if nothing is stored

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Store value under key, replacing any previous value.

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove the value under key.

        Returns:
            True if something was removed, False if the key was empty
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored value could not be read."""
    pass


class StorageWriteError(StorageError):
    """Value could not be written (disk full, permissions, quota...)."""
    pass


class InvalidStorageKeyError(StorageError, ValueError):
    """Key cannot be mapped to a storage slot (empty, or contains a path separator)."""
    pass
