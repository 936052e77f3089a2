"""
Pytest configuration and fixtures for the test suite.

This module provides shared fixtures for unit and integration tests.
"""

import io
import os
import uuid
from typing import Any, Dict
from unittest.mock import Mock

import pytest
from faker import Faker

# Set test environment before importing app modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("OBJECT_STORE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

fake = Faker()


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (workflows)")
    config.addinivalue_line("markers", "store: Object store backend tests")


# =============================================================================
# Test Data Generators
# =============================================================================

@pytest.fixture
def transaction_id() -> str:
    """Generate a random transaction ID."""
    return f"txn-{uuid.uuid4().hex[:12]}"


@pytest.fixture
def upload_data(transaction_id: str) -> Dict[str, Any]:
    """Generate keyword arguments for a document upload."""
    content = fake.binary(length=256)
    return {
        "transaction_id": transaction_id,
        "content": content,
        "content_length": len(content),
        "original_filename": fake.file_name(extension="pdf"),
        "doc_cat_code": "POA",
        "doc_typ_code": "RES",
        "lang_code": "eng",
    }


@pytest.fixture
def stored_metadata() -> Dict[str, str]:
    """Metadata map as written to the object store."""
    return {
        "doccatcode": "POI",
        "doctypcode": "DOC001",
        "langcode": "eng",
        "docname": "passport.pdf",
        "docid": str(uuid.uuid4()),
    }


# =============================================================================
# Object Store Fixtures
# =============================================================================

@pytest.fixture
def memory_store():
    """Create an empty in-memory object store."""
    from app.core.object_store import InMemoryObjectStore

    return InMemoryObjectStore()


@pytest.fixture
def mock_store():
    """Create a mock object store."""
    store = Mock()
    store.put = Mock()
    store.get = Mock(return_value=b"")
    store.get_metadata = Mock(return_value={})
    store.list = Mock(return_value=[])
    store.delete = Mock(return_value=True)
    return store


@pytest.fixture
def mock_gcs_bucket():
    """Create a mock GCS bucket with a shared blob mock."""
    bucket = Mock()
    blob = Mock()
    blob.metadata = None
    bucket.blob = Mock(return_value=blob)
    bucket.get_blob = Mock(return_value=blob)
    bucket.list_blobs = Mock(return_value=[])
    return bucket


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def document_service(memory_store):
    """Create a fail-fast DocumentService over the in-memory store."""
    from app.services.document.document_service import DocumentService

    return DocumentService(store=memory_store, skip_corrupt_metadata=False)


@pytest.fixture
def lenient_document_service(memory_store):
    """Create a DocumentService that skips corrupt metadata records."""
    from app.services.document.document_service import DocumentService

    return DocumentService(store=memory_store, skip_corrupt_metadata=True)


# =============================================================================
# Helper Functions
# =============================================================================

def make_blob(name: str, metadata: Dict[str, str] = None) -> Mock:
    """Create a mock GCS blob."""
    blob = Mock()
    blob.name = name
    blob.metadata = metadata
    return blob


class FailingStream(io.RawIOBase):
    """Binary stream whose reads raise an I/O error."""

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        raise OSError("Connection reset while reading upload")


@pytest.fixture
def blob_factory():
    """Provide the mock GCS blob factory."""
    return make_blob


@pytest.fixture
def failing_stream() -> FailingStream:
    """Create a binary stream that fails on read."""
    return FailingStream()


# =============================================================================
# File Content Fixtures
# =============================================================================

@pytest.fixture
def sample_pdf_content() -> bytes:
    """Generate minimal valid PDF content for testing."""
    pdf_content = b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
trailer
<< /Size 3 /Root 1 0 R >>
%%EOF"""
    return pdf_content


@pytest.fixture
def binary_content() -> bytes:
    """Generate content that is not valid UTF-8."""
    return bytes(range(256)) + b"\xff\xfe\x00\x80"


__all__ = [
    "fake",
    "make_blob",
    "FailingStream",
]
