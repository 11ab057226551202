"""Attribution reads and writes, lookups, and deletion of hosted images.

Deletion removes the stored object before the registry record. A crash in
between leaves a record pointing at a missing file, which is visible to
lookups and can be deleted again; the reverse order could leave a file that
nothing references.
"""

from collections.abc import Sequence

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_registry import DynamoDBRegistry
from core.infrastructure.storage_factory import build_image_storage
from core.models.errors import (
    InvalidIdentifierError,
    NotFoundError,
    ObjectStoreError,
)
from core.models.image import ImageRecord, SourceResolution
from core.repositories.registry_repository import ImageRegistryRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.identifiers import split_filename

logger = Logger(UTC=True)


def _matches(record: ImageRecord, extension: str | None) -> bool:
    return extension is None or record.extension == extension


class MetadataService:
    """Operations over already-claimed identifiers.

    Identifiers may be passed bare (`abc123`) or as public file names
    (`abc123.png`). A file name whose extension differs from the one
    recorded at claim time refers to nothing.
    """

    def __init__(
        self,
        registry: ImageRegistryRepository | None = None,
        storage: ImageStorageRepository | None = None,
    ) -> None:
        self.registry = registry or DynamoDBRegistry()
        self.storage = storage or build_image_storage()

    def _lookup(self, value: str) -> ImageRecord | None:
        image_id, extension = split_filename(value)
        record = self.registry.fetch(image_id=image_id)

        if record is None or not _matches(record, extension):
            return None
        return record

    def set_source(self, value: str, source: str | None) -> str | None:
        """Replace the attribution of an existing image.

        Returns:
            The previous attribution, or None if there was none

        Raises:
            InvalidIdentifierError: If the identifier is malformed
            NotFoundError: If the identifier is not registered
            RegistryUnavailableError: If the registry fails
        """
        image_id, extension = split_filename(value)

        if extension is not None and self._lookup(value) is None:
            raise NotFoundError(message="Image not found", details={"image_id": image_id})

        previous = self.registry.update_source(image_id=image_id, source=source or None)
        logger.info("Image source updated", extra={"image_id": image_id})
        return previous

    def get_sources(self, values: Sequence[str]) -> list[str | None]:
        """Order-preserving batch lookup; misses and malformed ids map to None.

        Raises:
            RegistryUnavailableError: If the registry fails
        """
        parsed: list[tuple[str, str | None] | None] = []
        for value in values:
            try:
                parsed.append(split_filename(value))
            except InvalidIdentifierError:
                logger.warning("Skipping malformed identifier", extra={"identifier": value})
                parsed.append(None)

        records = self.registry.fetch_many(
            image_ids=[entry[0] for entry in parsed if entry is not None]
        )

        sources: list[str | None] = []
        for entry in parsed:
            record = records.get(entry[0]) if entry is not None else None
            if entry is None or record is None or not _matches(record, entry[1]):
                sources.append(None)
            else:
                sources.append(record.source)

        return sources

    def delete(self, value: str) -> ImageRecord:
        """Delete an image's object, then its registry record.

        A failing or already-missing object does not stop the record from
        being removed.

        Returns:
            The record that was removed

        Raises:
            InvalidIdentifierError: If the identifier is malformed
            NotFoundError: If the identifier is not registered
            RegistryUnavailableError: If the registry fails
        """
        record = self._lookup(value)
        if record is None:
            logger.warning("Image record not found", extra={"identifier": value})
            raise NotFoundError(message="Image not found", details={"identifier": value})

        image_id = record.image_id

        try:
            self.storage.remove(image_id=image_id, extension=record.extension)
        except NotFoundError:
            logger.warning(
                "Image object already missing, removing record",
                extra={"image_id": image_id},
            )
        except ObjectStoreError:
            logger.exception(
                "Failed to delete image object, removing record",
                extra={"image_id": image_id},
            )

        self.registry.remove(image_id=image_id)
        logger.info("Image deleted", extra={"image_id": image_id})
        return record

    def delete_many(self, values: Sequence[str]) -> tuple[list[str], list[str]]:
        """Delete several images.

        Every identifier is validated before anything is deleted.

        Returns:
            (deleted, not_found) lists of the identifiers as supplied

        Raises:
            InvalidIdentifierError: If any identifier is malformed
            RegistryUnavailableError: If the registry fails
        """
        for value in values:
            split_filename(value)

        deleted: list[str] = []
        not_found: list[str] = []

        for value in dict.fromkeys(values):
            try:
                self.delete(value)
            except NotFoundError:
                not_found.append(value)
            else:
                deleted.append(value)

        return deleted, not_found

    def resolve_source(self, value: str) -> SourceResolution:
        """Decide between redirecting to the attribution and serving locally.

        Raises:
            InvalidIdentifierError: If the identifier is malformed
            RegistryUnavailableError: If the registry fails
        """
        record = self._lookup(value)

        if record is None:
            return SourceResolution.not_found()
        if record.source:
            return SourceResolution.redirect(record)
        return SourceResolution.serve_local(record)

    def open_image(self, value: str) -> tuple[bytes, str, ImageRecord]:
        """Read the stored bytes of an image.

        Returns:
            (content_bytes, content_type, record)

        Raises:
            InvalidIdentifierError: If the identifier is malformed
            NotFoundError: If there is no record or no stored object
            ObjectStoreError: If the object store fails
            RegistryUnavailableError: If the registry fails
        """
        record = self._lookup(value)
        if record is None:
            raise NotFoundError(message="Image not found", details={"identifier": value})

        content, content_type = self.storage.read(
            image_id=record.image_id,
            extension=record.extension,
        )
        return content, content_type, record
