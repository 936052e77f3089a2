"""
Document services package.

Services:
- document_base_service: Common utilities and shared functionality
- document_validation_service: Upload input validation
- document_service: Upload, listing, fetch and delete orchestration (main interface)
"""

from .document_service import DocumentService, document_service

__all__ = [
    "DocumentService",
    "document_service",
]
