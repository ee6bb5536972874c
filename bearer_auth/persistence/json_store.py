"""
JSON Store - Locked, atomic JSON file handling

Module: persistence.json_store
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Atomic writes (temp file + rename)
  - transaction() context manager for read-modify-write
  - Exclusive file lock shared across threads and processes
  - Automatic directory creation, 0600 permissions

ARCHITECTURE:
JSONStore provides:
  - JSON serialization/deserialization of a single document
  - An in-process RLock plus fcntl.flock on a sidecar ".lock" file
  - transaction(): load, let the caller mutate, save on clean exit

SECURITY NOTES:
- Files are written with mode 0600
- A failed transaction leaves the previous document untouched
"""

import fcntl
import json
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional


class JSONStoreError(Exception):
    """Base JSON store error"""
    pass


class JSONStoreIOError(JSONStoreError):
    """File I/O error"""
    pass


class JSONStoreFormatError(JSONStoreError):
    """JSON format error"""
    pass


class JSONStore:
    """
    JSON document persisted in a single file.

    Reads see either the previous or the next document, never a partial
    write. Read-modify-write sequences must go through transaction() to be
    atomic with respect to other writers.
    """

    def __init__(self, file_path: str, default_data: Optional[Dict[str, Any]] = None):
        """
        Initialize JSON store

        Args:
            file_path: Path to JSON file
            default_data: Default data structure if file doesn't exist
        """
        self.logger = logging.getLogger(f"persistence.{self.__class__.__name__}")
        self.file_path = Path(file_path)
        self.lock_path = self.file_path.with_suffix(".lock")
        self.default_data = default_data or {}
        self._lock = threading.RLock()

        self.file_path.parent.mkdir(parents=True, exist_ok=True)

        with self._locked():
            if not self.file_path.exists():
                self._write_atomic(self.default_data)
                self.logger.info(f"Created new store: {self.file_path}")

    def load(self) -> Dict[str, Any]:
        """
        Load data from JSON file

        Returns:
            Parsed JSON data

        Raises:
            JSONStoreIOError: If file cannot be read
            JSONStoreFormatError: If JSON is invalid
        """
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            self.logger.warning("File not found, returning default data")
            return json.loads(json.dumps(self.default_data))
        except json.JSONDecodeError as e:
            raise JSONStoreFormatError(f"Invalid JSON in {self.file_path}: {e}") from e
        except OSError as e:
            raise JSONStoreIOError(f"Failed to read {self.file_path}: {e}") from e

    def save(self, data: Dict[str, Any]) -> None:
        """
        Save data to JSON file (atomic write)

        Raises:
            JSONStoreIOError: If write fails
        """
        with self._locked():
            self._write_atomic(data)

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, Any]]:
        """
        Exclusive read-modify-write

        Yields the current document. The (possibly mutated) document is
        saved when the block exits normally; an exception inside the block
        discards the changes.

        Usage:
            with store.transaction() as data:
                data["items"].append(item)
        """
        with self._locked():
            data = self.load()
            yield data
            self._write_atomic(data)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold the thread lock and the inter-process file lock"""
        with self._lock:
            try:
                lock_file = open(self.lock_path, "a")
            except OSError as e:
                raise JSONStoreIOError(f"Failed to open lock {self.lock_path}: {e}") from e
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
                lock_file.close()

    def _write_atomic(self, data: Dict[str, Any]) -> None:
        """
        Atomic write: write to temp file, then rename

        Raises:
            JSONStoreIOError: If write fails
        """
        temp_path = self.file_path.with_suffix(".tmp")
        try:
            # rw-------
            fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                # A leftover temp file keeps its old mode through O_CREAT
                os.fchmod(f.fileno(), 0o600)
                json.dump(data, f, indent=2, default=str)

            temp_path.replace(self.file_path)
        except (OSError, TypeError, ValueError) as e:
            temp_path.unlink(missing_ok=True)
            raise JSONStoreIOError(f"Failed to write {self.file_path}: {e}") from e
