"""
Document Validation Service - Upload input validation.

This service handles the checks performed before a document is stored:
- Transaction ID presence
- Document codes, checked through DocumentUploadRequest
- Filename format derivation
- Content length limits
"""

from typing import Optional

from pydantic import ValidationError

from app.core.exceptions import DocumentValidationError
from app.models.document import extract_file_format
from app.models.schemas import DocumentUploadRequest
from .document_base_service import DocumentBaseService

_FIELDS_BY_ALIAS = {
    field.alias: name for name, field in DocumentUploadRequest.model_fields.items()
}


class DocumentValidationService(DocumentBaseService):
    """Service for document upload validation."""

    def validate_transaction_id(self, transaction_id: str) -> str:
        """
        Validate a transaction ID used as the storage prefix.

        Raises:
            DocumentValidationError: If the transaction ID is empty
        """
        if not transaction_id or not transaction_id.strip():
            raise DocumentValidationError("Transaction ID cannot be empty")
        return transaction_id

    def validate_codes(
        self, doc_cat_code: str, doc_typ_code: str, lang_code: str
    ) -> DocumentUploadRequest:
        """
        Validate the document codes of an upload.

        Raises:
            DocumentValidationError: If a code is missing or invalid
        """
        try:
            return DocumentUploadRequest(
                doc_cat_code=doc_cat_code,
                doc_typ_code=doc_typ_code,
                lang_code=lang_code,
            )
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else None
            field = _FIELDS_BY_ALIAS.get(field, field)
            raise DocumentValidationError(
                f"Invalid document code: {error['msg']}",
                details={"field": field},
            ) from e

    def validate_content_size(self, content_length: int) -> int:
        """
        Validate a content length against MAX_FILE_SIZE.

        Raises:
            DocumentValidationError: If the length is negative or too large
        """
        if content_length < 0:
            raise DocumentValidationError(
                f"Content length cannot be negative: {content_length}"
            )
        if content_length > self.max_file_size:
            max_mb = self.max_file_size // (1024 * 1024)
            raise DocumentValidationError(
                f"File size exceeds maximum limit of {max_mb}MB",
                details={"content_length": content_length},
            )
        return content_length

    def validate_upload(
        self,
        transaction_id: str,
        original_filename: Optional[str],
        doc_cat_code: str,
        doc_typ_code: str,
        lang_code: str,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Validate upload inputs.

        Args:
            transaction_id: Transaction the document belongs to
            original_filename: Filename as uploaded
            doc_cat_code: Document category code
            doc_typ_code: Document type code
            lang_code: Document language code
            content_length: Declared content length in bytes (optional)

        Returns:
            File format derived from the filename

        Raises:
            DocumentValidationError: If validation fails
        """
        self.validate_transaction_id(transaction_id)
        self.validate_codes(doc_cat_code, doc_typ_code, lang_code)

        if not original_filename:
            raise DocumentValidationError("Filename is required")

        file_format = extract_file_format(original_filename)
        if file_format is None:
            raise DocumentValidationError(
                "Filename must include a file format extension",
                details={"filename": original_filename},
            )

        if content_length is not None:
            self.validate_content_size(content_length)

        return file_format
