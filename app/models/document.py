import re
import uuid
from enum import Enum
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.core.config import settings
from app.core.exceptions import MetadataCorruptError


# Filename tokenizer delimiters: dot and backslash
_FILE_FORMAT_DELIMITERS = re.compile(r"[.\\]")


class DeletionStatus(str, Enum):
    """Outcome of a document deletion."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


def derive_document_id(
    transaction_id: str, doc_cat_code: str, namespace: Optional[uuid.UUID] = None
) -> str:
    """
    Derive the stable document identifier for a transaction and category.

    The identifier is a name-based (version 5) UUID over the concatenation of
    the transaction ID and category code, so it can always be recomputed and
    never needs an index.

    Args:
        transaction_id: Transaction the document belongs to
        doc_cat_code: Document category code
        namespace: UUID namespace (defaults to the configured namespace)

    Returns:
        Document identifier as canonical lowercase UUID text
    """
    if namespace is None:
        namespace = settings.document_id_namespace
    return str(uuid.uuid5(namespace, transaction_id + doc_cat_code))


def object_key(transaction_id: str, document_id: str) -> str:
    """Storage key for a document: ``{transaction_id}/{document_id}``."""
    return f"{transaction_id}/{document_id}"


def extract_file_format(filename: str) -> Optional[str]:
    """
    Extract the document file format from a filename.

    The filename is split on dots and backslashes, empty tokens are dropped,
    and the second token is the format. Multi-dot names therefore resolve on
    the first dot: ``scan.final.png`` gives ``final``.

    Returns:
        File format, or None if the filename has no format token
    """
    if not filename:
        return None
    tokens = [token for token in _FILE_FORMAT_DELIMITERS.split(filename) if token]
    if len(tokens) < 2:
        return None
    return tokens[1]


class DocumentMetadata(BaseModel):
    """Metadata stored alongside document content in the object store."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    doccatcode: str = Field(..., description="Document category code")
    doctypcode: str = Field(..., description="Document type code")
    langcode: str = Field(..., description="Document language code")
    docname: str = Field(..., description="Original filename")
    docid: str = Field(..., description="Derived document identifier")

    @field_validator("doccatcode", "docname", "docid")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Required identity fields cannot be blank."""
        if not v or not v.strip():
            raise ValueError("Field cannot be blank")
        return v

    def to_store_metadata(self) -> Dict[str, str]:
        """Flatten to the string map written to the object store."""
        return self.model_dump()

    @classmethod
    def from_store_metadata(
        cls, metadata: Mapping[str, object], object_key: Optional[str] = None
    ) -> "DocumentMetadata":
        """
        Parse metadata read back from the object store.

        Keys are matched case-insensitively and unknown keys are ignored, since
        some backends normalize or add metadata keys.

        Raises:
            MetadataCorruptError: If a required key is missing or malformed
        """
        normalized = {str(key).lower(): value for key, value in metadata.items()}
        for field in cls.model_fields:
            if field not in normalized:
                raise MetadataCorruptError(
                    f"Metadata field '{field}' is missing",
                    object_key=object_key,
                    field=field,
                )
        try:
            return cls.model_validate(normalized)
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error.get("loc") else None
            raise MetadataCorruptError(
                f"Metadata field '{field}' is malformed: {error['msg']}",
                object_key=object_key,
                field=field,
            ) from e

    @property
    def file_format(self) -> Optional[str]:
        """File format derived from the original filename."""
        return extract_file_format(self.docname)
