"""Business logic for image upload operations.

Each file reserves an identifier first and writes its bytes second. If the
write fails the reservation is released, so the registry never keeps a
record for an upload that did not complete. A batch is all or nothing:
every file is checked before any identifier is claimed, and files hosted
earlier in a failed batch are removed again.
"""

import base64
from pathlib import Path

from aws_lambda_powertools import Logger

from core.infrastructure.storage_factory import build_image_storage
from core.models.errors import (
    ImageServiceError,
    MIMETypeError,
    NotFoundError,
    ObjectStoreError,
    ObjectStoreWriteFailedError,
    RegistryUnavailableError,
    ValidationError,
)
from core.models.image import ImageRecord
from core.repositories.storage_repository import ImageStorageRepository
from core.services.allocation import AllocationCoordinator
from core.utils.constants import mime_type_for_extension
from core.utils.identifiers import normalize_extension
from core.utils.mime import detect_mime_type

logger = Logger(UTC=True)


class UploadService:
    """Application service responsible for image uploads.

    This service orchestrates:
    - Extension and content validation
    - Identifier allocation
    - Writing image content to storage
    - Releasing the identifier when the write fails
    - Rolling back the rest of a batch when one file fails
    """

    def __init__(
        self,
        allocator: AllocationCoordinator | None = None,
        storage: ImageStorageRepository | None = None,
    ) -> None:
        self.allocator = allocator or AllocationCoordinator()
        self.storage = storage or build_image_storage()

    @staticmethod
    def decode_file(encoded: str) -> bytes:
        """Decode base64-encoded image data.

        Raises:
            ValidationError: If decoding fails
        """
        try:
            return base64.b64decode(encoded)
        except ValueError as exc:
            logger.exception("Failed to decode base64 image data")
            raise ValidationError(
                message="Invalid image data",
                details={"encoding": "base64"},
            ) from exc

    @staticmethod
    def inspect_file(filename: str, file_data: bytes) -> tuple[str, str]:
        """Check a file before anything is claimed for it.

        Returns:
            (extension, content_type)

        Raises:
            InvalidExtensionError: If the file extension is not allowed
            MIMETypeError: If the content is not a supported image, or is
                a different image type than the extension names
        """
        extension = normalize_extension(Path(filename).suffix)

        try:
            mime_type = detect_mime_type(file_data)
        except ValueError as exc:
            logger.warning("Unsupported image content", extra={"image_name": filename})
            raise MIMETypeError(
                message="Unsupported image type",
                details={"filename": filename},
            ) from exc

        expected = mime_type_for_extension(extension)
        if mime_type != expected:
            logger.warning(
                "Image content does not match extension",
                extra={"image_name": filename, "detected": mime_type, "expected": expected},
            )
            raise MIMETypeError(
                message=f"Image content is {mime_type} but the file name says {expected}",
                details={"filename": filename, "detected": mime_type, "expected": expected},
            )

        return extension, mime_type

    def _host(self, *, extension: str, content_type: str, file_data: bytes) -> ImageRecord:
        record = self.allocator.allocate(extension)

        try:
            self.storage.write(
                image_id=record.image_id,
                extension=record.extension,
                file_data=file_data,
                content_type=content_type,
            )
        except Exception as exc:
            logger.exception(
                "Image write failed, releasing identifier",
                extra={"image_id": record.image_id},
            )
            try:
                self.allocator.release(record)
            except Exception:
                logger.exception(
                    "Failed to release identifier after write failure",
                    extra={"image_id": record.image_id},
                )

            raise ObjectStoreWriteFailedError(
                message="Unable to store image",
                details={"image_id": record.image_id},
            ) from exc

        logger.info(
            "Image uploaded successfully",
            extra={"image_id": record.image_id, "size": len(file_data)},
        )
        return record

    def _discard(self, record: ImageRecord) -> bool:
        """Remove a hosted image object first, then its record. Returns success."""
        try:
            self.storage.remove(image_id=record.image_id, extension=record.extension)
        except NotFoundError:
            logger.debug("Image already absent during rollback", extra={"image_id": record.image_id})
        except ObjectStoreError:
            logger.exception("Failed to remove image during rollback", extra={"image_id": record.image_id})
            return False

        try:
            self.allocator.release(record)
        except RegistryUnavailableError:
            logger.exception("Failed to release identifier during rollback", extra={"image_id": record.image_id})
            return False

        return True

    def upload_image(self, *, filename: str, file_data: bytes) -> ImageRecord:
        """Host one image under a freshly allocated identifier.

        Raises:
            InvalidExtensionError: If the file extension is not allowed
            MIMETypeError: If the content is not a supported image or
                does not match the extension
            AllocationExhaustedError: If no free identifier was found
            RegistryUnavailableError: If the registry fails
            ObjectStoreWriteFailedError: If the bytes could not be stored
        """
        extension, content_type = self.inspect_file(filename, file_data)
        return self._host(extension=extension, content_type=content_type, file_data=file_data)

    def upload_images(self, files: list[tuple[str, bytes]]) -> list[ImageRecord]:
        """Upload (filename, bytes) pairs in order, all or nothing.

        Every file is inspected before the first identifier is claimed. If
        a later allocation or write fails, the files already hosted by this
        call are removed again; any that could not be removed are listed
        under `still_hosted` in the raised error's details.
        """
        inspected = [
            (self.inspect_file(filename, file_data), file_data)
            for filename, file_data in files
        ]

        hosted: list[ImageRecord] = []
        try:
            for (extension, content_type), file_data in inspected:
                hosted.append(
                    self._host(extension=extension, content_type=content_type, file_data=file_data)
                )
        except ImageServiceError as exc:
            logger.warning("Batch upload failed, rolling back", extra={"hosted": len(hosted)})
            still_hosted = [record.filename for record in hosted if not self._discard(record)]
            if still_hosted:
                exc.details["still_hosted"] = still_hosted
            raise

        return hosted
