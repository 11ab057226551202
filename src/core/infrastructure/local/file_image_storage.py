"""Local-disk implementation of ImageStorageRepository."""

import os
from pathlib import Path

from aws_lambda_powertools import Logger

from core.models.errors import (
    InvalidIdentifierError,
    NotFoundError,
    ObjectStoreError,
    ObjectStoreWriteFailedError,
)
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ERROR_CODE_OBJECT_DELETE_FAILED,
    ERROR_CODE_OBJECT_READ_FAILED,
    mime_type_for_extension,
)

logger = Logger(UTC=True)


class LocalImageStorage(ImageStorageRepository):
    """Store each image as `<root>/<image_id><extension>`."""

    def __init__(self, root: str | Path) -> None:
        """Initialize with a root directory, creating it if needed."""
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, image_id: str, extension: str) -> Path:
        """Resolve the object path and ensure it stays under the store root.

        Raises:
            InvalidIdentifierError: If the name escapes the root directory
        """
        root = self._root.resolve()
        candidate = (self._root / f"{image_id}{extension}").resolve()

        if candidate.parent != root:
            raise InvalidIdentifierError(
                message="Image identifier resolves outside the image store",
                details={"identifier": f"{image_id}{extension}"},
            )

        return candidate

    def exists(self, *, image_id: str, extension: str) -> bool:
        return self.path_for(image_id, extension).is_file()

    def write(
        self,
        *,
        image_id: str,
        extension: str,
        file_data: bytes,
        content_type: str,
    ) -> str:
        path = self.path_for(image_id, extension)
        tmp_path = path.with_name(f".{path.name}.tmp")

        logger.debug("Writing image", extra={"path": str(path), "size": len(file_data)})

        try:
            tmp_path.write_bytes(file_data)
            os.replace(tmp_path, path)
        except OSError as exc:
            logger.exception("Local image write failed", extra={"path": str(path)})
            tmp_path.unlink(missing_ok=True)
            raise ObjectStoreWriteFailedError(
                message="Unable to store image at this time",
                details={"image_id": image_id},
            ) from exc

        logger.info("Image stored successfully", extra={"path": str(path)})
        return str(path)

    def read(self, *, image_id: str, extension: str) -> tuple[bytes, str]:
        path = self.path_for(image_id, extension)

        try:
            return path.read_bytes(), mime_type_for_extension(extension)
        except FileNotFoundError as exc:
            raise NotFoundError(
                message="Image not found",
                details={"image_id": image_id},
            ) from exc
        except OSError as exc:
            logger.exception("Local image read failed", extra={"path": str(path)})
            raise ObjectStoreError(
                message="Unable to read image at this time",
                error_code=ERROR_CODE_OBJECT_READ_FAILED,
                details={"image_id": image_id},
            ) from exc

    def remove(self, *, image_id: str, extension: str) -> None:
        path = self.path_for(image_id, extension)

        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError(
                message="Image file already missing",
                details={"image_id": image_id},
            ) from exc
        except OSError as exc:
            logger.exception("Local image delete failed", extra={"path": str(path)})
            raise ObjectStoreError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_OBJECT_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        logger.info("Image deleted successfully", extra={"path": str(path)})
