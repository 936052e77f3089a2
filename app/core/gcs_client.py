import os
from typing import Optional, List, Dict

from google.cloud import storage
from google.cloud.storage import Bucket
from google.auth.exceptions import DefaultCredentialsError
from google.api_core.exceptions import GoogleAPIError, NotFound

from app.core.config import settings
from app.core.exceptions import (
    ObjectStoreError,
    ObjectNotFoundError,
    StoreReadError,
    StoreWriteError,
)
from app.core.logging import get_store_logger
from app.core.object_store import ObjectStore

logger = get_store_logger("gcs")


class GCSObjectStore(ObjectStore):
    """Google Cloud Storage backed object store for resident documents."""

    def __init__(self, bucket: Optional[Bucket] = None, base_path: Optional[str] = None):
        self.logger = logger
        self._client: Optional[storage.Client] = None
        self._bucket: Optional[Bucket] = bucket
        self._bucket_name = settings.GCS_BUCKET_NAME
        self._base_path = (
            settings.DOCUMENT_STORE_BASE_PATH if base_path is None else base_path
        ).strip("/")
        self._initialized = bucket is not None
        self._initialization_error: Optional[str] = None

        # Only initialize if required settings are provided
        if not self._initialized and self._should_initialize():
            try:
                self._initialize_client()
            except ObjectStoreError as e:
                self.logger.warning(
                    "GCS client initialization failed, will operate in disabled mode",
                    error=str(e),
                )
                self._initialization_error = str(e)

    def _should_initialize(self) -> bool:
        """Check if GCS client should be initialized based on available settings."""
        has_credentials = (
            settings.GOOGLE_APPLICATION_CREDENTIALS
            or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
            or self._check_application_default_credentials()
        )

        return bool(has_credentials and settings.GCP_PROJECT_ID)

    def _check_application_default_credentials(self) -> bool:
        """Check if Application Default Credentials are available."""
        try:
            import google.auth

            credentials, project = google.auth.default()
            return credentials is not None
        except DefaultCredentialsError:
            return False

    def _initialize_client(self) -> None:
        """Initialize GCS client and bucket."""
        try:
            if settings.GOOGLE_APPLICATION_CREDENTIALS:
                os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = (
                    settings.GOOGLE_APPLICATION_CREDENTIALS
                )

            self._client = storage.Client(project=settings.GCP_PROJECT_ID)
            self._bucket = self._client.bucket(self._bucket_name)
            # Test bucket access
            self._bucket.reload()
            self._initialized = True
            self.logger.info("Connected to GCS bucket", bucket=self._bucket_name)

        except NotFound as e:
            self.logger.error("GCS bucket not found", bucket=self._bucket_name)
            raise ObjectStoreError(
                f"Bucket '{self._bucket_name}' not found", cause=e
            ) from e
        except DefaultCredentialsError as e:
            self.logger.error("GCS authentication failed", error=str(e))
            raise ObjectStoreError("GCS authentication failed", cause=e) from e
        except GoogleAPIError as e:
            self.logger.error("Failed to initialize GCS client", error=str(e))
            raise ObjectStoreError("Failed to initialize GCS client", cause=e) from e

    @property
    def is_initialized(self) -> bool:
        """Check if GCS client is properly initialized."""
        return self._initialized

    @property
    def initialization_error(self) -> Optional[str]:
        """Get initialization error if any."""
        return self._initialization_error

    @property
    def bucket(self) -> Bucket:
        """Get the GCS bucket instance."""
        self._ensure_initialized()
        return self._bucket

    def _ensure_initialized(self) -> None:
        """Ensure GCS client is initialized, raise error if not."""
        if not self._initialized:
            error_msg = "GCS client is not initialized"
            if self._initialization_error:
                error_msg += f": {self._initialization_error}"
            else:
                error_msg += ". Please configure GCP_PROJECT_ID, GCS_BUCKET_NAME, and authentication credentials."
            raise ObjectStoreError(error_msg)

    def _blob_name(self, key: str) -> str:
        """Map an object key to its blob name under the base path."""
        if self._base_path:
            return f"{self._base_path}/{key}"
        return key

    def put(self, key: str, content: bytes, metadata: Dict[str, str]) -> None:
        """
        Upload content and metadata in a single request.

        The object and its metadata become visible together or not at all.
        """
        blob_name = self._blob_name(key)
        try:
            blob = self.bucket.blob(blob_name)
            blob.metadata = dict(metadata)
            blob.upload_from_string(content, content_type="application/octet-stream")

            self.logger.info(
                "Uploaded object to GCS",
                gcs_path=blob_name,
                size=len(content),
            )

        except GoogleAPIError as e:
            self.logger.error(
                "Failed to upload object to GCS", gcs_path=blob_name, error=str(e)
            )
            raise StoreWriteError(f"Failed to upload object: {e}", key, e) from e

    def get(self, key: str) -> bytes:
        blob_name = self._blob_name(key)
        try:
            content = self.bucket.blob(blob_name).download_as_bytes()
        except NotFound:
            raise ObjectNotFoundError(key)
        except GoogleAPIError as e:
            self.logger.error(
                "Failed to download object from GCS", gcs_path=blob_name, error=str(e)
            )
            raise StoreReadError(f"Failed to download object: {e}", key, e) from e

        self.logger.debug(
            "Downloaded object from GCS", gcs_path=blob_name, size=len(content)
        )
        return content

    def get_metadata(self, key: str) -> Dict[str, str]:
        blob_name = self._blob_name(key)
        try:
            # get_blob fetches the object resource only, not its media
            blob = self.bucket.get_blob(blob_name)
        except GoogleAPIError as e:
            self.logger.error(
                "Failed to get object metadata from GCS",
                gcs_path=blob_name,
                error=str(e),
            )
            raise StoreReadError(f"Failed to get object metadata: {e}", key, e) from e

        if blob is None:
            raise ObjectNotFoundError(key)
        return dict(blob.metadata or {})

    def list(self, prefix: str) -> List[str]:
        folder = self._blob_name(prefix.rstrip("/")) + "/"
        try:
            names = []
            # delimiter restricts the listing to direct children
            for blob in self.bucket.list_blobs(prefix=folder, delimiter="/"):
                name = blob.name[len(folder):]
                if name:
                    names.append(name)

        except GoogleAPIError as e:
            self.logger.error(
                "Failed to list objects in GCS", prefix=folder, error=str(e)
            )
            raise StoreReadError(f"Failed to list objects: {e}", prefix, e) from e

        self.logger.debug("Listed objects in GCS", prefix=folder, count=len(names))
        return names

    def delete(self, key: str) -> bool:
        blob_name = self._blob_name(key)
        try:
            self.bucket.blob(blob_name).delete()
        except NotFound:
            self.logger.warning("Object not found for deletion", gcs_path=blob_name)
            return False
        except GoogleAPIError as e:
            self.logger.error(
                "Failed to delete object from GCS", gcs_path=blob_name, error=str(e)
            )
            raise StoreWriteError(f"Failed to delete object: {e}", key, e) from e

        self.logger.info("Deleted object from GCS", gcs_path=blob_name)
        return True

    def health_check(self) -> bool:
        """
        Check if GCS client and bucket are accessible.

        Returns:
            True if healthy, False otherwise
        """
        if not self._initialized:
            return False

        try:
            self.bucket.reload()
            return True
        except GoogleAPIError as e:
            self.logger.error("GCS health check failed", error=str(e))
            return False
