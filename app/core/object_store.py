"""
Object store interface and in-memory backend.

The document service addresses objects purely by key and never depends on a
concrete backend. Backends:
- InMemoryObjectStore: process-local dict, used for tests and local development
- GCSObjectStore (app.core.gcs_client): Google Cloud Storage
"""

import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict, List, Tuple

from app.core.config import settings
from app.core.exceptions import ObjectNotFoundError
from app.core.logging import get_store_logger


class ObjectStore(ABC):
    """Key/value/blob store holding document content with flat string metadata."""

    @abstractmethod
    def put(self, key: str, content: bytes, metadata: Dict[str, str]) -> None:
        """
        Store content and metadata under key, replacing any existing object.

        Raises:
            StoreWriteError: If the backend rejects the write
        """

    @abstractmethod
    def get(self, key: str) -> bytes:
        """
        Get the raw content stored under key.

        Raises:
            ObjectNotFoundError: If key does not exist
            StoreReadError: On backend faults
        """

    @abstractmethod
    def get_metadata(self, key: str) -> Dict[str, str]:
        """
        Get the metadata stored under key without downloading the content.

        Raises:
            ObjectNotFoundError: If key does not exist
            StoreReadError: On backend faults
        """

    @abstractmethod
    def list(self, prefix: str) -> List[str]:
        """
        List object names directly under prefix.

        Names are relative to ``prefix + "/"`` and returned in backend order.
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete key. Returns False if nothing was deleted."""

    def health_check(self) -> bool:
        """Check if the backend is reachable."""
        return True


class InMemoryObjectStore(ObjectStore):
    """Thread-safe in-process object store."""

    def __init__(self):
        self.logger = get_store_logger("memory")
        self._objects: Dict[str, Tuple[bytes, Dict[str, str]]] = {}
        self._lock = threading.Lock()

    def put(self, key: str, content: bytes, metadata: Dict[str, str]) -> None:
        entry = (bytes(content), dict(metadata))
        with self._lock:
            # Re-insert so listing order follows the latest write
            self._objects.pop(key, None)
            self._objects[key] = entry
        self.logger.debug("Stored object", key=key, size=len(entry[0]))

    def get(self, key: str) -> bytes:
        with self._lock:
            entry = self._objects.get(key)
        if entry is None:
            raise ObjectNotFoundError(key)
        return entry[0]

    def get_metadata(self, key: str) -> Dict[str, str]:
        with self._lock:
            entry = self._objects.get(key)
        if entry is None:
            raise ObjectNotFoundError(key)
        return dict(entry[1])

    def list(self, prefix: str) -> List[str]:
        folder = prefix.rstrip("/") + "/"
        with self._lock:
            keys = list(self._objects)

        names = []
        for key in keys:
            if not key.startswith(folder):
                continue
            name = key[len(folder):]
            # Direct children only
            if name and "/" not in name:
                names.append(name)
        return names

    def delete(self, key: str) -> bool:
        with self._lock:
            removed = self._objects.pop(key, None)
        if removed is None:
            self.logger.warning("Object not found for deletion", key=key)
            return False
        self.logger.debug("Deleted object", key=key)
        return True

    def clear(self) -> None:
        """Remove every object."""
        with self._lock:
            self._objects.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)


@lru_cache()
def get_object_store() -> ObjectStore:
    """Get singleton object store for the configured backend."""
    if settings.OBJECT_STORE_BACKEND == "gcs":
        from app.core.gcs_client import GCSObjectStore

        return GCSObjectStore()
    return InMemoryObjectStore()
