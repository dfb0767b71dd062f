"""
Session Storage Backends

InMemorySessionStorage keeps the blob for the process lifetime.
JsonFileSessionStorage keeps it in one JSON object on disk so a
session survives a restart.

The file backend is the only place in the package that retries:
a write hitting a transient OSError (locked file, full buffer on a
network mount) is attempted again before giving up.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from finance_tracker.session.interface import SessionError, SessionStorageBackend

logger = structlog.get_logger(__name__)


class InMemorySessionStorage(SessionStorageBackend):
    """Dict-backed storage; nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)


class JsonFileSessionStorage(SessionStorageBackend):
    """
    Stores every key in a single JSON object file.

    Writes go to a temporary sibling file that then replaces the
    target, so a reader never sees a partially written file.
    """

    def __init__(self, path: Union[str, Path], retry_attempts: int = 3):
        self._path = Path(path)
        self._retry_attempts = retry_attempts

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            # An unreadable session is treated as no session
            logger.warning("session_file_unreadable", path=str(self._path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("session_file_malformed", path=str(self._path))
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self._retry_attempts),
                wait=wait_exponential(multiplier=0.1, max=1),
                retry=retry_if_exception_type(OSError),
                reraise=True,
            ):
                with attempt:
                    self._write_once(data)
        except OSError as e:
            logger.error("session_write_failed", path=str(self._path), error=str(e))
            raise SessionError(f"Could not persist session to {self._path}: {e}") from e

    def _write_once(self, data: dict[str, str]) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)
