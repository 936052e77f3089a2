"""
Document Service - Deterministic document addressing over an object store.

Documents are stored under ``{transaction_id}/{document_id}`` where the
document ID is derived from the transaction ID and category code, so every
operation can rebuild the key without an index. Content and metadata are
written in a single put; listing pairs each object's metadata with its
content through two separate store reads.

The service holds no state between calls and can be shared across threads.
"""

import asyncio
from typing import BinaryIO, List, Optional, Union

from app.core.config import settings
from app.core.exceptions import (
    DocumentNotFoundError,
    DocumentValidationError,
    MetadataCorruptError,
    ObjectNotFoundError,
    ObjectStoreError,
    StoreUnavailableError,
    UploadFailedError,
)
from app.core.logging import configure_logging
from app.core.object_store import ObjectStore
from app.models.document import DeletionStatus, DocumentMetadata, derive_document_id
from app.models.schemas import (
    DocumentDeleteResponse,
    DocumentResponse,
    DocumentWithContent,
)
from .document_base_service import DocumentBaseService
from .document_validation_service import DocumentValidationService

DOCUMENT_DELETION_SUCCESS_MESSAGE = "Document deleted successfully"
DOCUMENT_DELETION_FAILURE_MESSAGE = "Document deletion failed"

DocumentContent = Union[bytes, bytearray, memoryview, BinaryIO]


class DocumentService(DocumentBaseService):
    """Uploads, lists, fetches and deletes transaction documents."""

    def __init__(
        self,
        store: Optional[ObjectStore] = None,
        skip_corrupt_metadata: Optional[bool] = None,
    ):
        """
        Initialize the document service.

        Args:
            store: Object store backend (defaults to the configured backend)
            skip_corrupt_metadata: Skip listed objects whose metadata is corrupt,
                or that disappear before their content is read, instead of
                failing the whole listing (defaults to
                DOCUMENT_LISTING_SKIP_CORRUPT)
        """
        super().__init__(store)
        self.validation_service = DocumentValidationService(store)
        if skip_corrupt_metadata is None:
            skip_corrupt_metadata = settings.DOCUMENT_LISTING_SKIP_CORRUPT
        self.skip_corrupt_metadata = skip_corrupt_metadata

    # ========================================
    # UPLOAD
    # ========================================

    def upload_document(
        self,
        transaction_id: str,
        content: DocumentContent,
        content_length: Optional[int],
        original_filename: str,
        doc_cat_code: str,
        doc_typ_code: str,
        lang_code: str,
    ) -> DocumentResponse:
        """
        Store a document under its derived identifier.

        Uploading again with the same transaction ID and category code
        replaces the previously stored document.

        Args:
            transaction_id: Transaction the document belongs to
            content: Document bytes or a binary stream
            content_length: Declared content length in bytes (optional)
            original_filename: Filename as uploaded
            doc_cat_code: Document category code
            doc_typ_code: Document type code
            lang_code: Document language code

        Returns:
            Response built from the upload inputs

        Raises:
            DocumentValidationError: If the inputs are invalid
            UploadFailedError: If the content cannot be read or stored
        """
        file_format = self.validation_service.validate_upload(
            transaction_id,
            original_filename,
            doc_cat_code,
            doc_typ_code,
            lang_code,
            content_length,
        )

        document_id = derive_document_id(transaction_id, doc_cat_code)
        key = self._object_key(transaction_id, document_id)
        metadata = DocumentMetadata(
            doccatcode=doc_cat_code,
            doctypcode=doc_typ_code,
            langcode=lang_code,
            docname=original_filename,
            docid=document_id,
        )

        data = self._read_content(content, transaction_id)
        self.validation_service.validate_content_size(len(data))

        try:
            self.store.put(key, data, metadata.to_store_metadata())
        except ObjectStoreError as e:
            self.logger.error(
                "Failed to upload document",
                transaction_id=transaction_id,
                document_id=document_id,
                object_key=key,
                error=str(e),
            )
            raise UploadFailedError(transaction_id=transaction_id, cause=e) from e

        self.logger.info(
            "Uploaded document",
            transaction_id=transaction_id,
            document_id=document_id,
            doc_cat_code=doc_cat_code,
            object_key=key,
            size=len(data),
        )

        return DocumentResponse(
            transaction_id=transaction_id,
            doc_id=document_id,
            doc_name=original_filename,
            doc_cat_code=doc_cat_code,
            doc_typ_code=doc_typ_code,
            doc_file_format=file_format,
        )

    def _read_content(self, content: DocumentContent, transaction_id: str) -> bytes:
        """
        Read upload content before anything is written.

        Streams are read at most one byte past MAX_FILE_SIZE so an oversized
        upload is rejected without buffering all of it.
        """
        if isinstance(content, (bytes, bytearray, memoryview)):
            return bytes(content)

        try:
            data = content.read(self.max_file_size + 1)
        except (OSError, ValueError) as e:
            self.logger.error(
                "Failed to read document content",
                transaction_id=transaction_id,
                error=str(e),
            )
            raise UploadFailedError(transaction_id=transaction_id, cause=e) from e

        if not isinstance(data, (bytes, bytearray)):
            raise DocumentValidationError("Document content must be a binary stream")
        return bytes(data)

    # ========================================
    # FETCH
    # ========================================

    def fetch_all_documents_metadata(self, transaction_id: str) -> List[DocumentResponse]:
        """
        List metadata for every document stored under a transaction.

        Order follows the object store's listing order.

        Raises:
            MetadataCorruptError: If a listed object's metadata is corrupt and
                corrupt records are not skipped
            StoreUnavailableError: If the store cannot be read
        """
        documents = []
        for object_name in self._list_object_names(transaction_id):
            document = self._fetch_listed_metadata(transaction_id, object_name)
            if document is not None:
                documents.append(document)

        self.logger.debug(
            "Fetched document metadata",
            transaction_id=transaction_id,
            count=len(documents),
        )
        return documents

    def fetch_document_by_doc_id(self, transaction_id: str, document_id: str) -> bytes:
        """
        Fetch a document's raw content exactly as stored.

        Raises:
            DocumentNotFoundError: If no document is stored under the key
            StoreUnavailableError: If the store cannot be read
        """
        key = self._object_key(transaction_id, document_id)
        try:
            content = self.store.get(key)
        except ObjectNotFoundError as e:
            raise DocumentNotFoundError(
                f"Document with ID {document_id} not found",
                transaction_id=transaction_id,
                document_id=document_id,
            ) from e
        except ObjectStoreError as e:
            self.logger.error(
                "Failed to fetch document", object_key=key, error=str(e)
            )
            raise StoreUnavailableError(object_key=key, cause=e) from e

        self.logger.debug("Fetched document", object_key=key, size=len(content))
        return content

    def get_documents_with_metadata(
        self, transaction_id: str
    ) -> List[DocumentWithContent]:
        """
        Fetch every document under a transaction with its metadata.

        Returns one pair per stored object, in listing order. Use
        ``collapse_documents`` for a mapping keyed by document.

        Raises:
            MetadataCorruptError: If a listed object's metadata is corrupt and
                corrupt records are not skipped
            DocumentNotFoundError: If an object disappears between reads and
                corrupt records are not skipped
            StoreUnavailableError: If the store cannot be read
        """
        documents = []
        for object_name in self._list_object_names(transaction_id):
            pair = self._fetch_listed_document(transaction_id, object_name)
            if pair is not None:
                documents.append(pair)
        return documents

    def _list_object_names(self, transaction_id: str) -> List[str]:
        try:
            return self.store.list(transaction_id)
        except ObjectStoreError as e:
            self.logger.error(
                "Failed to list documents",
                transaction_id=transaction_id,
                error=str(e),
            )
            raise StoreUnavailableError(object_key=transaction_id, cause=e) from e

    def _fetch_document_metadata(
        self, transaction_id: str, object_name: str
    ) -> DocumentResponse:
        """Read one object's metadata and project it into a response."""
        key = self._object_key(transaction_id, object_name)
        try:
            raw_metadata = self.store.get_metadata(key)
        except ObjectNotFoundError as e:
            raise MetadataCorruptError(
                "Metadata not found for listed object", object_key=key
            ) from e
        except ObjectStoreError as e:
            self.logger.error(
                "Failed to fetch document metadata", object_key=key, error=str(e)
            )
            raise StoreUnavailableError(object_key=key, cause=e) from e

        metadata = DocumentMetadata.from_store_metadata(raw_metadata, key)
        file_format = metadata.file_format
        if file_format is None:
            raise MetadataCorruptError(
                f"Document name '{metadata.docname}' has no file format",
                object_key=key,
                field="docname",
            )
        return DocumentResponse.from_metadata(transaction_id, metadata, file_format)

    def _fetch_listed_metadata(
        self, transaction_id: str, object_name: str
    ) -> Optional[DocumentResponse]:
        """Fetch metadata for a listed object, applying the corrupt-record policy."""
        try:
            return self._fetch_document_metadata(transaction_id, object_name)
        except MetadataCorruptError as e:
            if not self.skip_corrupt_metadata:
                self.logger.error(
                    "Corrupt document metadata",
                    transaction_id=transaction_id,
                    object_name=object_name,
                    error=e.message,
                    details=e.details,
                )
                raise
            self.logger.warning(
                "Skipping document with corrupt metadata",
                transaction_id=transaction_id,
                object_name=object_name,
                error=e.message,
            )
            return None

    def _fetch_listed_document(
        self, transaction_id: str, object_name: str
    ) -> Optional[DocumentWithContent]:
        document = self._fetch_listed_metadata(transaction_id, object_name)
        if document is None:
            return None
        try:
            content = self.fetch_document_by_doc_id(transaction_id, object_name)
        except DocumentNotFoundError:
            if not self.skip_corrupt_metadata:
                raise
            self.logger.warning(
                "Skipping document removed during listing",
                transaction_id=transaction_id,
                object_name=object_name,
            )
            return None
        return DocumentWithContent(document, content)

    # ========================================
    # DELETE
    # ========================================

    def delete_document(
        self, transaction_id: str, document_id: str
    ) -> DocumentDeleteResponse:
        """
        Delete a document.

        A document that does not exist is reported as a failed deletion, not
        as an error.

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        key = self._object_key(transaction_id, document_id)
        try:
            deleted = self.store.delete(key)
        except ObjectStoreError as e:
            self.logger.error("Failed to delete document", object_key=key, error=str(e))
            raise StoreUnavailableError(object_key=key, cause=e) from e

        if deleted:
            self.logger.info(
                "Deleted document",
                transaction_id=transaction_id,
                document_id=document_id,
            )
            return DocumentDeleteResponse(
                status=DeletionStatus.SUCCESS,
                message=DOCUMENT_DELETION_SUCCESS_MESSAGE,
            )

        self.logger.warning(
            "Document deletion did not occur",
            transaction_id=transaction_id,
            document_id=document_id,
        )
        return DocumentDeleteResponse(
            status=DeletionStatus.FAILURE,
            message=DOCUMENT_DELETION_FAILURE_MESSAGE,
        )

    # ========================================
    # ASYNC VARIANTS
    # ========================================

    async def upload_document_async(
        self,
        transaction_id: str,
        content: DocumentContent,
        content_length: Optional[int],
        original_filename: str,
        doc_cat_code: str,
        doc_typ_code: str,
        lang_code: str,
    ) -> DocumentResponse:
        """Async version of upload_document using thread pool."""
        return await asyncio.to_thread(
            self.upload_document,
            transaction_id,
            content,
            content_length,
            original_filename,
            doc_cat_code,
            doc_typ_code,
            lang_code,
        )

    async def fetch_all_documents_metadata_async(
        self, transaction_id: str
    ) -> List[DocumentResponse]:
        """Async version of fetch_all_documents_metadata with concurrent metadata reads."""
        object_names = await asyncio.to_thread(self._list_object_names, transaction_id)
        documents = await asyncio.gather(
            *(
                asyncio.to_thread(self._fetch_listed_metadata, transaction_id, name)
                for name in object_names
            )
        )
        return [document for document in documents if document is not None]

    async def fetch_document_by_doc_id_async(
        self, transaction_id: str, document_id: str
    ) -> bytes:
        """Async version of fetch_document_by_doc_id using thread pool."""
        return await asyncio.to_thread(
            self.fetch_document_by_doc_id, transaction_id, document_id
        )

    async def get_documents_with_metadata_async(
        self, transaction_id: str
    ) -> List[DocumentWithContent]:
        """Async version of get_documents_with_metadata with concurrent object reads."""
        object_names = await asyncio.to_thread(self._list_object_names, transaction_id)
        documents = await asyncio.gather(
            *(
                asyncio.to_thread(self._fetch_listed_document, transaction_id, name)
                for name in object_names
            )
        )
        return [pair for pair in documents if pair is not None]

    async def delete_document_async(
        self, transaction_id: str, document_id: str
    ) -> DocumentDeleteResponse:
        """Async version of delete_document using thread pool."""
        return await asyncio.to_thread(
            self.delete_document, transaction_id, document_id
        )


# Logging is configured once when the service is first imported
configure_logging()

# Global service instance
document_service = DocumentService()
