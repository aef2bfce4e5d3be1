"""Abstract interface for upload grant issuance."""

from abc import ABC, abstractmethod

from domain.models import UploadGrant


class UploadGrantIssuer(ABC):
    """Abstract base class for object storage backends that presign uploads."""

    @abstractmethod
    def create_upload_grant(self, bucket_name: str, object_name: str) -> UploadGrant:
        """
        Creates a time-bounded authorization to upload one object.

        Args:
            bucket_name: The storage bucket (namespace) to write into.
            object_name: The destination path/name in storage.

        Returns:
            UploadGrant with the destination URL, credential and path.

        Raises:
            StorageGrantError: If the grant cannot be created.
        """
        pass

    @abstractmethod
    def ensure_bucket_exists(self, bucket_name: str) -> None:
        """
        Ensures a bucket exists, creating it if necessary.

        Args:
            bucket_name: The bucket name to ensure exists.
        """
        pass
