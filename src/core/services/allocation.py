"""Identifier allocation.

An upload reserves its public identifier before any bytes are written: a
random candidate is claimed in the registry with an atomic insert-if-absent,
and collisions are retried a bounded number of times. The claimed record is
a reservation that the caller must either fulfil with an object write or
hand back through `release`.
"""

from collections.abc import Callable

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_registry import DynamoDBRegistry
from core.models.errors import AllocationExhaustedError, DuplicateCandidateError
from core.models.image import ImageRecord
from core.repositories.registry_repository import ImageRegistryRepository
from core.utils.constants import MAX_ALLOCATION_TRIES
from core.utils.identifiers import (
    configured_identifier_length,
    generate_identifier,
    normalize_extension,
)
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class AllocationCoordinator:
    """Produce claimed, collision-free identifiers for incoming uploads."""

    def __init__(
        self,
        registry: ImageRegistryRepository | None = None,
        *,
        identifier_length: int | None = None,
        max_tries: int = MAX_ALLOCATION_TRIES,
        generator: Callable[[int], str] = generate_identifier,
    ) -> None:
        if max_tries < 1:
            raise ValueError("max_tries must be at least 1")

        self.registry = registry or DynamoDBRegistry()
        self.identifier_length = identifier_length or configured_identifier_length()
        self.max_tries = max_tries
        self._generate = generator

    def allocate(self, extension: str) -> ImageRecord:
        """Claim a fresh identifier for a file with `extension`.

        Args:
            extension: File extension, with or without the leading dot

        Returns:
            The claimed record, with no attribution set

        Raises:
            InvalidExtensionError: If the extension is not allowed (nothing is claimed)
            RegistryUnavailableError: If the registry fails; not retried
            AllocationExhaustedError: If every attempt collided
        """
        ext = normalize_extension(extension)

        for attempt in range(1, self.max_tries + 1):
            candidate = self._generate(self.identifier_length)
            record = ImageRecord(
                image_id=candidate,
                extension=ext,
                created_at=utc_now_iso(),
            )

            try:
                self.registry.claim(record=record)
            except DuplicateCandidateError:
                logger.warning(
                    "Identifier collision, retrying",
                    extra={"image_id": candidate, "attempt": attempt},
                )
                continue

            logger.info(
                "Identifier allocated",
                extra={"image_id": candidate, "extension": ext, "attempt": attempt},
            )
            return record

        logger.error(
            "Identifier allocation exhausted",
            extra={"max_tries": self.max_tries, "identifier_length": self.identifier_length},
        )
        raise AllocationExhaustedError(
            message="Unable to allocate an image identifier",
            details={"max_tries": self.max_tries},
        )

    def release(self, record: ImageRecord) -> None:
        """Give back a reservation whose object was never written.

        Raises:
            RegistryUnavailableError: If the record could not be removed
        """
        logger.info("Releasing identifier", extra={"image_id": record.image_id})
        self.registry.remove(image_id=record.image_id)
