from typing import Any, Dict, Optional


class ResidentDocumentError(Exception):
    """Base exception for the resident document store."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


def _with_cause(
    details: Optional[Dict[str, Any]], cause: Optional[BaseException]
) -> Dict[str, Any]:
    details = dict(details or {})
    if cause is not None:
        details["cause"] = f"{type(cause).__name__}: {cause}"
    return details


# Object store exceptions
class ObjectStoreError(ResidentDocumentError):
    """Base class for object store backend errors."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        cause: Optional[BaseException] = None,
        error_code: str = "OBJECT_STORE_ERROR",
    ):
        details = {"key": key} if key is not None else {}
        super().__init__(message, error_code, _with_cause(details, cause))
        self.key = key


class ObjectNotFoundError(ObjectStoreError):
    """Object key does not exist in the store."""

    def __init__(self, key: str):
        super().__init__(f"Object not found: {key}", key, error_code="OBJECT_NOT_FOUND")


class StoreReadError(ObjectStoreError):
    """Backend fault while reading an object or its metadata."""

    def __init__(self, message: str, key: Optional[str] = None, cause=None):
        super().__init__(message, key, cause, error_code="STORE_READ_ERROR")


class StoreWriteError(ObjectStoreError):
    """Backend fault while writing an object."""

    def __init__(self, message: str, key: Optional[str] = None, cause=None):
        super().__init__(message, key, cause, error_code="STORE_WRITE_ERROR")


# Document exceptions
class DocumentValidationError(ResidentDocumentError):
    """Document input validation error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class UploadFailedError(ResidentDocumentError):
    """Document content could not be read or written to the store."""

    def __init__(
        self,
        message: str = "Failed to upload document",
        transaction_id: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        details = {"transaction_id": transaction_id} if transaction_id else None
        super().__init__(message, "FAILED_TO_UPLOAD_DOC", _with_cause(details, cause))


class DocumentNotFoundError(ResidentDocumentError):
    """Document not found error."""

    def __init__(
        self,
        message: str = "Document not found",
        transaction_id: Optional[str] = None,
        document_id: Optional[str] = None,
    ):
        details = {}
        if transaction_id:
            details["transaction_id"] = transaction_id
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, "DOCUMENT_NOT_FOUND", details)


class MetadataCorruptError(ResidentDocumentError):
    """Stored metadata is missing a required field or is malformed."""

    def __init__(
        self,
        message: str,
        object_key: Optional[str] = None,
        field: Optional[str] = None,
    ):
        details = {}
        if object_key:
            details["object_key"] = object_key
        if field:
            details["field"] = field
        super().__init__(message, "METADATA_CORRUPT", details)


class StoreUnavailableError(ResidentDocumentError):
    """Object store could not be reached or failed to respond."""

    def __init__(
        self,
        message: str = "Object store unavailable",
        object_key: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        details = {"object_key": object_key} if object_key else None
        super().__init__(message, "STORE_UNAVAILABLE", _with_cause(details, cause))
