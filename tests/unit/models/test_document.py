"""
Unit tests for the document domain model.

Tests identifier derivation, key composition, file format extraction,
and metadata parsing.
"""

import uuid

import pytest


class TestDeriveDocumentId:
    """Tests for deterministic document identifier derivation."""

    @pytest.mark.unit
    def test_same_inputs_yield_same_identifier(self):
        """Test derivation is deterministic."""
        from app.models.document import derive_document_id

        first = derive_document_id("txn-123", "POA")
        second = derive_document_id("txn-123", "POA")

        assert first == second

    @pytest.mark.unit
    def test_identifier_is_uuid5_over_concatenation(self):
        """Test identifier is a version 5 UUID in the OID namespace."""
        from app.models.document import derive_document_id

        document_id = derive_document_id("txn-123", "POA")

        assert document_id == str(uuid.uuid5(uuid.NAMESPACE_OID, "txn-123POA"))
        assert uuid.UUID(document_id).version == 5

    @pytest.mark.unit
    def test_distinct_categories_yield_distinct_identifiers(self):
        """Test a fixed table of inputs produces no collisions."""
        from app.models.document import derive_document_id

        inputs = [
            ("txn-123", "POA"),
            ("txn-123", "POI"),
            ("txn-123", "POR"),
            ("txn-123", "POB"),
            ("txn-456", "POA"),
            ("txn-456", "POI"),
            ("10001100770000320200720092256", "POA"),
            ("10001100770000320200720092256", "POE"),
        ]

        identifiers = {derive_document_id(t, c) for t, c in inputs}

        assert len(identifiers) == len(inputs)

    @pytest.mark.unit
    def test_custom_namespace(self):
        """Test a different namespace changes the identifier."""
        from app.models.document import derive_document_id

        default_id = derive_document_id("txn-123", "POA")
        custom_id = derive_document_id("txn-123", "POA", namespace=uuid.NAMESPACE_URL)

        assert custom_id != default_id
        assert custom_id == str(uuid.uuid5(uuid.NAMESPACE_URL, "txn-123POA"))


class TestObjectKey:
    """Tests for object key composition."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "transaction_id,document_id",
        [
            ("txn-123", "0b3a2f1e-0000-5000-8000-000000000000"),
            ("a", "b"),
            ("txn with space", "doc"),
        ],
    )
    def test_key_is_transaction_slash_document(self, transaction_id, document_id):
        """Test key is exactly transaction ID, slash, document ID."""
        from app.models.document import object_key

        assert object_key(transaction_id, document_id) == transaction_id + "/" + document_id


class TestExtractFileFormat:
    """Tests for file format extraction from filenames."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("passport.pdf", "pdf"),
            ("photo.JPG", "JPG"),
            # First-dot rule
            ("scan.final.png", "final"),
            # Empty tokens are dropped
            (".hidden.pdf", "pdf"),
            ("report..pdf", "pdf"),
            ("dir\\scan.png", "scan"),
        ],
    )
    def test_file_format(self, filename, expected):
        """Test the second filename token is the format."""
        from app.models.document import extract_file_format

        assert extract_file_format(filename) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("filename", ["passport", "", "passport.", ".pdf", "..."])
    def test_no_file_format(self, filename):
        """Test filenames without a format token return None."""
        from app.models.document import extract_file_format

        assert extract_file_format(filename) is None


class TestDocumentMetadata:
    """Tests for metadata conversion to and from the object store."""

    @pytest.mark.unit
    def test_to_store_metadata_has_exact_keys(self):
        """Test the stored map has exactly the five metadata keys."""
        from app.models.document import DocumentMetadata

        metadata = DocumentMetadata(
            doccatcode="POA",
            doctypcode="RES",
            langcode="eng",
            docname="passport.pdf",
            docid="doc-1",
        )

        stored = metadata.to_store_metadata()

        assert stored == {
            "doccatcode": "POA",
            "doctypcode": "RES",
            "langcode": "eng",
            "docname": "passport.pdf",
            "docid": "doc-1",
        }

    @pytest.mark.unit
    def test_from_store_metadata(self, stored_metadata):
        """Test parsing a complete stored map."""
        from app.models.document import DocumentMetadata

        metadata = DocumentMetadata.from_store_metadata(stored_metadata)

        assert metadata.docid == stored_metadata["docid"]
        assert metadata.docname == "passport.pdf"
        assert metadata.file_format == "pdf"

    @pytest.mark.unit
    def test_from_store_metadata_ignores_case_and_extra_keys(self, stored_metadata):
        """Test backend-normalized keys are accepted."""
        from app.models.document import DocumentMetadata

        raw = {key.upper(): value for key, value in stored_metadata.items()}
        raw["x-goog-extra"] = "1"

        metadata = DocumentMetadata.from_store_metadata(raw)

        assert metadata.doccatcode == "POI"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "missing", ["doccatcode", "doctypcode", "langcode", "docname", "docid"]
    )
    def test_missing_field_is_corrupt(self, stored_metadata, missing):
        """Test a missing required key raises MetadataCorruptError."""
        from app.core.exceptions import MetadataCorruptError
        from app.models.document import DocumentMetadata

        del stored_metadata[missing]

        with pytest.raises(MetadataCorruptError) as exc_info:
            DocumentMetadata.from_store_metadata(stored_metadata, "txn/doc")

        assert exc_info.value.details["field"] == missing
        assert exc_info.value.details["object_key"] == "txn/doc"
        assert exc_info.value.error_code == "METADATA_CORRUPT"

    @pytest.mark.unit
    def test_non_string_value_is_corrupt(self, stored_metadata):
        """Test a non-string value raises MetadataCorruptError."""
        from app.core.exceptions import MetadataCorruptError
        from app.models.document import DocumentMetadata

        stored_metadata["docid"] = 12345

        with pytest.raises(MetadataCorruptError) as exc_info:
            DocumentMetadata.from_store_metadata(stored_metadata)

        assert exc_info.value.details["field"] == "docid"

    @pytest.mark.unit
    def test_blank_docname_is_corrupt(self, stored_metadata):
        """Test a blank identity field raises MetadataCorruptError."""
        from app.core.exceptions import MetadataCorruptError
        from app.models.document import DocumentMetadata

        stored_metadata["docname"] = "  "

        with pytest.raises(MetadataCorruptError):
            DocumentMetadata.from_store_metadata(stored_metadata)
