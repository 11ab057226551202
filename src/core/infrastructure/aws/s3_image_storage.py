"""S3-backed implementation of ImageStorageRepository."""

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import (
    NotFoundError,
    ObjectStoreError,
    ObjectStoreWriteFailedError,
)
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    DEFAULT_BINARY_CONTENT_TYPE,
    ERROR_CODE_OBJECT_DELETE_FAILED,
    ERROR_CODE_OBJECT_READ_FAILED,
    IMAGE_KEY_PREFIX,
)

logger = Logger(UTC=True)

_MISSING_CODES = frozenset({"NoSuchKey", "NotFound", "404"})


def _is_missing(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in _MISSING_CODES


class S3ImageStorage(ImageStorageRepository):
    """Image storage implementation backed by Amazon S3."""

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()

    @staticmethod
    def key_for(image_id: str, extension: str) -> str:
        """Object key for an identifier, `images/<id><ext>`."""
        return f"{IMAGE_KEY_PREFIX}/{image_id}{extension}"

    def exists(self, *, image_id: str, extension: str) -> bool:
        key = self.key_for(image_id, extension)

        try:
            self._s3.head_object(key=key)
            return True
        except ClientError as exc:
            if _is_missing(exc):
                return False
            logger.error("S3 head_object failed", extra={"key": key})
            raise ObjectStoreError(
                message="Unable to check image at this time",
                error_code=ERROR_CODE_OBJECT_READ_FAILED,
                details={"key": key},
            ) from exc
        except BotoCoreError as exc:
            logger.exception("Unexpected error checking image")
            raise ObjectStoreError(
                message="Unable to check image at this time",
                error_code=ERROR_CODE_OBJECT_READ_FAILED,
                details={"key": key},
            ) from exc

    def write(
        self,
        *,
        image_id: str,
        extension: str,
        file_data: bytes,
        content_type: str,
    ) -> str:
        """Upload image bytes to S3 and return the object key."""
        key = self.key_for(image_id, extension)

        logger.debug(
            "Uploading image",
            extra={"image_id": image_id, "key": key, "size": len(file_data)},
        )

        try:
            self._s3.put_object(
                key=key,
                body=file_data,
                content_type=content_type,
            )
        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise ObjectStoreWriteFailedError(
                message="Unable to upload image at this time",
                details={"image_id": image_id},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise ObjectStoreWriteFailedError(
                message="Unable to upload image at this time",
                details={"image_id": image_id},
            ) from exc

        logger.info("Image uploaded successfully", extra={"key": key})
        return key

    def read(self, *, image_id: str, extension: str) -> tuple[bytes, str]:
        """Download image bytes directly from S3."""
        key = self.key_for(image_id, extension)
        logger.debug("Downloading image", extra={"key": key})

        try:
            response = self._s3.get_object(key=key)
            body = response["Body"].read()
            content_type = response.get("ContentType", DEFAULT_BINARY_CONTENT_TYPE)

        except ClientError as exc:
            if _is_missing(exc):
                logger.warning("Image object missing", extra={"key": key})
                raise NotFoundError(
                    message="Image not found",
                    details={"image_id": image_id},
                ) from exc

            logger.error("S3 download failed", extra={"key": key})
            raise ObjectStoreError(
                message="Unable to download image at this time",
                error_code=ERROR_CODE_OBJECT_READ_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error downloading image")
            raise ObjectStoreError(
                message="Unable to download image at this time",
                error_code=ERROR_CODE_OBJECT_READ_FAILED,
                details={"key": key},
            ) from exc

        logger.info("Image downloaded successfully", extra={"key": key, "size": len(body)})
        return body, content_type

    def remove(self, *, image_id: str, extension: str) -> None:
        """Delete an image object from S3. Deleting a missing key succeeds."""
        key = self.key_for(image_id, extension)
        logger.debug("Deleting image", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
        except ClientError as exc:
            logger.error("S3 deletion failed", extra={"key": key})
            raise ObjectStoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_OBJECT_DELETE_FAILED,
                details={"key": key},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise ObjectStoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_OBJECT_DELETE_FAILED,
                details={"key": key},
            ) from exc

        logger.info("Image deleted successfully", extra={"key": key})
