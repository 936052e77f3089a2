"""Document schemas returned to and accepted from callers."""

from typing import Dict, Iterable, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.document import DeletionStatus, DocumentMetadata
from app.models.schemas.validators import validate_code


class DocumentUploadRequest(BaseModel):
    """Codes describing an uploaded document."""

    model_config = ConfigDict(populate_by_name=True)

    doc_cat_code: str = Field(
        ...,
        alias="docCatCode",
        description="Document category code",
        examples=["POA"],
    )
    doc_typ_code: str = Field(
        ...,
        alias="docTypCode",
        description="Document type code",
        examples=["RES"],
    )
    lang_code: str = Field(
        ...,
        alias="langCode",
        description="Document language code",
        examples=["eng"],
    )

    @field_validator("doc_cat_code", mode="before")
    @classmethod
    def validate_doc_cat_code(cls, v: str) -> str:
        """Category code is part of the document identity."""
        return validate_code(v, "Document category code")


class DocumentResponse(BaseModel):
    """
    Metadata view of a stored document.

    Frozen so it can be hashed; two responses with the same field values are
    equal regardless of which stored object produced them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    transaction_id: str = Field(
        ..., alias="transactionId", description="Owning transaction ID"
    )
    doc_id: str = Field(..., alias="docId", description="Derived document identifier")
    doc_name: str = Field(..., alias="docName", description="Original filename")
    doc_cat_code: str = Field(
        ..., alias="docCatCode", description="Document category code"
    )
    doc_typ_code: str = Field(..., alias="docTypCode", description="Document type code")
    doc_file_format: str = Field(
        ...,
        alias="docFileFormat",
        description="File format derived from the filename",
        examples=["pdf"],
    )

    @classmethod
    def from_metadata(
        cls, transaction_id: str, metadata: DocumentMetadata, doc_file_format: str
    ) -> "DocumentResponse":
        """Build a response from stored document metadata."""
        return cls(
            transaction_id=transaction_id,
            doc_id=metadata.docid,
            doc_name=metadata.docname,
            doc_cat_code=metadata.doccatcode,
            doc_typ_code=metadata.doctypcode,
            doc_file_format=doc_file_format,
        )


class DocumentWithContent(NamedTuple):
    """A stored document's metadata paired with its raw content."""

    document: DocumentResponse
    content: bytes


class DocumentDeleteResponse(BaseModel):
    """Outcome of a document deletion."""

    model_config = ConfigDict(use_enum_values=True)

    status: DeletionStatus = Field(..., description="SUCCESS or FAILURE")
    message: str = Field(..., description="Human-readable outcome")


def collapse_documents(
    documents: Iterable[DocumentWithContent],
) -> Dict[DocumentResponse, bytes]:
    """
    Convert document/content pairs to a mapping keyed by document.

    Documents with identical field values collapse into one entry and the
    last pair wins.
    """
    return {document: content for document, content in documents}
