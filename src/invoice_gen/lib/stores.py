"""
Durable key/value backends for the local record store.

The invoice service keeps four keyed values (invoice collection, company
info, sink URL, last issued number). Each value is a JSON string written
in a single backend call, so a mutation either lands completely or not at
all.

Backends:
    DiskStore: Persists under a directory using the diskcache library.
               Thread-safe and process-safe.
    MemoryStore: Dictionary-backed, for demos and tests.
"""

from abc import ABC, abstractmethod
from pathlib import Path

import diskcache


class KeyValueStore(ABC):
    """Contract for a process-durable string store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""

    def close(self) -> None:
        """Release any resources held by the backend."""


class DiskStore(KeyValueStore):
    """
    Disk-based store backed by diskcache.

    Attributes:
        directory: Path to the store directory.
    """

    def __init__(self, directory: str | Path) -> None:
        """
        Initialize the disk store.

        Args:
            directory: Directory path for storing data files.
                       Created if it doesn't exist.
        """
        self.directory = Path(directory)
        self._cache = diskcache.Cache(str(self.directory))

    def get(self, key: str) -> str | None:
        return self._cache.get(key, default=None)

    def set(self, key: str, value: str) -> None:
        # diskcache reports a failed write by returning False
        if not self._cache.set(key, value):
            raise OSError(f"diskcache refused write for key {key!r}")

    def delete(self, key: str) -> None:
        self._cache.delete(key)

    def close(self) -> None:
        """Close the cache and release resources."""
        self._cache.close()


class MemoryStore(KeyValueStore):
    """In-memory store. Contents are lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
