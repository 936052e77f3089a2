"""Pydantic schemas for service requests and responses.

Import from this module: `from app.models.schemas import DocumentResponse`
"""

# Re-export enums from domain models
from app.models.document import DeletionStatus

# Document schemas
from app.models.schemas.document import (
    DocumentUploadRequest,
    DocumentResponse,
    DocumentWithContent,
    DocumentDeleteResponse,
    collapse_documents,
)

__all__ = [
    "DeletionStatus",
    "DocumentUploadRequest",
    "DocumentResponse",
    "DocumentWithContent",
    "DocumentDeleteResponse",
    "collapse_documents",
]
