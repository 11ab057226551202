"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod


class ImageStorageRepository(ABC):
    """Contract for storing and retrieving image files.

    Objects are keyed by identifier plus extension. Implementations could be
    S3, GCS, local disk, etc. Services depend on this interface, not the
    implementation.
    """

    @abstractmethod
    def exists(self, *, image_id: str, extension: str) -> bool:
        """Return True if the object is present.

        Raises:
            ObjectStoreError: If the check fails
        """

    @abstractmethod
    def write(
        self,
        *,
        image_id: str,
        extension: str,
        file_data: bytes,
        content_type: str,
    ) -> str:
        """Store image bytes and return the storage key.

        Raises:
            ObjectStoreWriteFailedError: If the write fails
        """

    @abstractmethod
    def read(self, *, image_id: str, extension: str) -> tuple[bytes, str]:
        """Return (content_bytes, content_type).

        Raises:
            NotFoundError: If the object doesn't exist
            ObjectStoreError: If the read fails
        """

    @abstractmethod
    def remove(self, *, image_id: str, extension: str) -> None:
        """Delete an object.

        Raises:
            NotFoundError: If the backend can tell the object was already missing
            ObjectStoreError: If deletion fails
        """
