"""
Storage Services Package

Abstract key-value interface, concrete backends (JSON files, memory) and
the StateRepository that persists the whole FinancialState.
"""

from finhealth.services.storage.interface import (
    InvalidStorageKeyError,
    KeyValueStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from finhealth.services.storage.json_file import JsonFileStorage
from finhealth.services.storage.memory import InMemoryStorage
from finhealth.services.storage.repository import (
    STORAGE_KEY,
    StateRepository,
    default_state,
)

__all__ = [
    # Interfaces
    "KeyValueStorage",
    # Exceptions
    "StorageError",
    "InvalidStorageKeyError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
    # Repository
    "STORAGE_KEY",
    "StateRepository",
    "default_state",
]
