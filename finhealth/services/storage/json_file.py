"""
JSON File Storage Implementation

One file per key: <data_dir>/<key>.json.

Writes go to a temporary file first and are then moved into place with
os.replace, so a crash mid-write leaves either the old or the new file,
never half of each. Transient OS errors on write are retried a few
times before giving up.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finhealth.services.storage.interface import (
    InvalidStorageKeyError,
    KeyValueStorage,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileStorage(KeyValueStorage):
    """Key-value slots backed by files in a directory."""

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """File holding the value for key."""
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise InvalidStorageKeyError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read {path}: {e}") from e

    def write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self._write_atomic(path, value)
        except OSError as e:
            raise StorageWriteError(f"Could not write {path}: {e}") from e

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageWriteError(f"Could not delete {path}: {e}") from e
        return True

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except OSError:
            logger.warning("state_write_attempt_failed", path=str(path))
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
