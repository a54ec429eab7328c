"""Services package."""

from finhealth.services.storage import (
    STORAGE_KEY,
    InMemoryStorage,
    InvalidStorageKeyError,
    JsonFileStorage,
    KeyValueStorage,
    StateRepository,
    StorageError,
    StorageReadError,
    StorageWriteError,
    default_state,
)

__all__ = [
    "STORAGE_KEY",
    "InMemoryStorage",
    "InvalidStorageKeyError",
    "JsonFileStorage",
    "KeyValueStorage",
    "StateRepository",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "default_state",
]
