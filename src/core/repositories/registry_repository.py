"""Abstract contract for the identifier registry."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator

from core.models.image import ImageRecord


class ImageRegistryRepository(ABC):
    """Contract for the persistent identifier -> attribution mapping.

    Implementations could be DynamoDB, PostgreSQL, etc. Uniqueness of
    `image_id` must be enforced by the backing store itself, so that
    `claim` is atomic across independent callers.
    """

    @abstractmethod
    def claim(self, *, record: ImageRecord) -> None:
        """Insert `record` only if its `image_id` is absent.

        Raises:
            DuplicateCandidateError: If the identifier is already registered
            RegistryUnavailableError: On any other registry failure
        """

    @abstractmethod
    def fetch(self, *, image_id: str) -> ImageRecord | None:
        """Fetch one record, or None if the identifier is not registered.

        Raises:
            RegistryUnavailableError: If the lookup fails
        """

    @abstractmethod
    def fetch_many(self, *, image_ids: Iterable[str]) -> dict[str, ImageRecord]:
        """Fetch the registered subset of `image_ids`, keyed by identifier.

        Raises:
            RegistryUnavailableError: If the lookup fails
        """

    @abstractmethod
    def update_source(self, *, image_id: str, source: str | None) -> str | None:
        """Replace the attribution of an existing record.

        An empty or None `source` clears the attribution.

        Returns:
            The attribution held before the update, if any

        Raises:
            NotFoundError: If the identifier is not registered
            RegistryUnavailableError: If the update fails
        """

    @abstractmethod
    def remove(self, *, image_id: str) -> None:
        """Remove a record. Removing an absent identifier is a no-op.

        Raises:
            RegistryUnavailableError: If deletion fails
        """

    @abstractmethod
    def scan(self) -> Iterator[ImageRecord]:
        """Iterate over every registered record.

        Raises:
            RegistryUnavailableError: If the scan fails
        """
