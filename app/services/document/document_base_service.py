"""
Document Base Service - Common utilities and shared functionality.

This service provides the foundation for all document services with:
- Shared configuration and logging
- Object store access
- Object key construction
"""

from typing import Optional

from app.core.config import settings
from app.core.logging import get_service_logger
from app.core.object_store import ObjectStore, get_object_store
from app.models.document import object_key


class DocumentBaseService:
    """Base service with common functionality shared across all document services."""

    def __init__(self, store: Optional[ObjectStore] = None):
        """Initialize base service with common configuration."""
        self.logger = get_service_logger("document")
        self._store = store

        # File constraints
        self.max_file_size = settings.MAX_FILE_SIZE

    @property
    def store(self) -> ObjectStore:
        """Get the object store, falling back to the configured backend."""
        if self._store is None:
            self._store = get_object_store()
        return self._store

    @staticmethod
    def _object_key(transaction_id: str, document_id: str) -> str:
        """Build the object key for a document."""
        return object_key(transaction_id, document_id)
