"""DynamoDB-backed implementation of ImageRegistryRepository."""

from collections.abc import Iterable, Iterator
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import (
    DuplicateCandidateError,
    NotFoundError,
    RegistryUnavailableError,
)
from core.models.image import ImageRecord
from core.repositories.registry_repository import ImageRegistryRepository
from core.utils.constants import (
    ERROR_CODE_REGISTRY_CLAIM_FAILED,
    ERROR_CODE_REGISTRY_DELETE_FAILED,
    ERROR_CODE_REGISTRY_FETCH_FAILED,
    ERROR_CODE_REGISTRY_INVALID_FORMAT,
    ERROR_CODE_REGISTRY_SCAN_FAILED,
    ERROR_CODE_REGISTRY_UPDATE_FAILED,
    MAX_BATCH_SIZE,
    REGISTRY_BATCH_GET_MAX_ROUNDS,
)

Item = dict[str, Any]

logger = Logger(UTC=True)

_CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"
_SOURCE_NAMES = {"#source": "source"}


def _error_code(exc: ClientError) -> str | None:
    return exc.response.get("Error", {}).get("Code")


class DynamoDBRegistry(ImageRegistryRepository):
    """DynamoDB-backed identifier registry.

    The table is keyed by `image_id` alone, so `claim` relies on a
    conditional put to make insert-if-absent atomic. Conflicts are
    translated to `DuplicateCandidateError` (or `NotFoundError` for
    updates); every other boto failure becomes `RegistryUnavailableError`.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter()

    @staticmethod
    def _to_item(record: ImageRecord) -> Item:
        return record.model_dump(exclude_none=True)

    @staticmethod
    def _to_record(item: Any, *, image_id: str) -> ImageRecord:
        if not isinstance(item, dict):
            raise RegistryUnavailableError(
                message="Invalid image record format",
                error_code=ERROR_CODE_REGISTRY_INVALID_FORMAT,
                details={"image_id": image_id},
            )

        try:
            return ImageRecord.model_validate(item)
        except PydanticValidationError as exc:
            logger.error("Malformed registry item", extra={"image_id": image_id})
            raise RegistryUnavailableError(
                message="Invalid image record format",
                error_code=ERROR_CODE_REGISTRY_INVALID_FORMAT,
                details={"image_id": image_id},
            ) from exc

    def claim(self, *, record: ImageRecord) -> None:
        """Insert `record` if its identifier is not yet registered.

        Raises:
            DuplicateCandidateError: If the identifier is already registered
            RegistryUnavailableError: If the put fails for any other reason
        """
        image_id = record.image_id
        logger.debug("Claiming identifier", extra={"image_id": image_id})

        try:
            self._db.put_item(
                item=self._to_item(record),
                condition_expression="attribute_not_exists(image_id)",
            )

        except ClientError as exc:
            if _error_code(exc) == _CONDITIONAL_CHECK_FAILED:
                logger.info("Identifier already claimed", extra={"image_id": image_id})
                raise DuplicateCandidateError(
                    message="Identifier already registered",
                    details={"image_id": image_id},
                ) from exc

            logger.error(
                "DynamoDB put_item failed",
                extra={"image_id": image_id, "code": _error_code(exc)},
            )
            raise RegistryUnavailableError(
                message="Unable to register image at this time",
                error_code=ERROR_CODE_REGISTRY_CLAIM_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error claiming identifier")
            raise RegistryUnavailableError(
                message="Unable to register image at this time",
                error_code=ERROR_CODE_REGISTRY_CLAIM_FAILED,
                details={"image_id": image_id},
            ) from exc

        logger.info("Identifier claimed", extra={"image_id": image_id})

    def fetch(self, *, image_id: str) -> ImageRecord | None:
        """Fetch a single record.

        Raises:
            RegistryUnavailableError: If the fetch fails
        """
        logger.debug("Fetching record", extra={"image_id": image_id})

        try:
            response = self._db.get_item(key={"image_id": image_id})
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB get_item failed", extra={"image_id": image_id})
            raise RegistryUnavailableError(
                message="Unable to retrieve image record",
                error_code=ERROR_CODE_REGISTRY_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error fetching record")
            raise RegistryUnavailableError(
                message="Unable to retrieve image record",
                error_code=ERROR_CODE_REGISTRY_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc

        item = response.get("Item")
        if item is None:
            return None

        return self._to_record(item, image_id=image_id)

    def fetch_many(self, *, image_ids: Iterable[str]) -> dict[str, ImageRecord]:
        """Batch fetch; absent identifiers are simply left out of the result.

        Raises:
            RegistryUnavailableError: If the batch cannot be completed
        """
        unique_ids = list(dict.fromkeys(image_ids))
        records: dict[str, ImageRecord] = {}

        logger.debug("Fetching records", extra={"count": len(unique_ids)})

        for start in range(0, len(unique_ids), MAX_BATCH_SIZE):
            chunk = unique_ids[start : start + MAX_BATCH_SIZE]
            for item in self._batch_get(chunk):
                image_id = item.get("image_id", "")
                records[image_id] = self._to_record(item, image_id=image_id)

        return records

    def _batch_get(self, image_ids: list[str]) -> list[Item]:
        keys: list[Item] = [{"image_id": image_id} for image_id in image_ids]
        items: list[Item] = []

        try:
            for _ in range(REGISTRY_BATCH_GET_MAX_ROUNDS):
                response = self._db.batch_get_item(keys=keys)
                table_items = response.get("Responses", {})
                for page in table_items.values():
                    items.extend(page)

                unprocessed = response.get("UnprocessedKeys") or {}
                keys = [key for request in unprocessed.values() for key in request.get("Keys", [])]
                if not keys:
                    return items

        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB batch_get_item failed", extra={"count": len(image_ids)})
            raise RegistryUnavailableError(
                message="Unable to retrieve image records",
                error_code=ERROR_CODE_REGISTRY_FETCH_FAILED,
                details={"count": len(image_ids)},
            ) from exc

        logger.error(
            "DynamoDB batch_get_item left unprocessed keys",
            extra={"unprocessed": len(keys)},
        )
        raise RegistryUnavailableError(
            message="Unable to retrieve image records",
            error_code=ERROR_CODE_REGISTRY_FETCH_FAILED,
            details={"unprocessed": len(keys)},
        )

    def update_source(self, *, image_id: str, source: str | None) -> str | None:
        """Conditionally update the attribution of an existing record.

        Raises:
            NotFoundError: If the identifier is not registered
            RegistryUnavailableError: If the update fails
        """
        logger.debug("Updating source", extra={"image_id": image_id})

        kwargs: dict[str, Any] = {
            "Key": {"image_id": image_id},
            "ConditionExpression": "attribute_exists(image_id)",
            "ExpressionAttributeNames": _SOURCE_NAMES,
            "ReturnValues": "UPDATED_OLD",
        }
        if source:
            kwargs["UpdateExpression"] = "SET #source = :source"
            kwargs["ExpressionAttributeValues"] = {":source": source}
        else:
            kwargs["UpdateExpression"] = "REMOVE #source"

        try:
            response = self._db.update_item(**kwargs)

        except ClientError as exc:
            if _error_code(exc) == _CONDITIONAL_CHECK_FAILED:
                raise NotFoundError(
                    message="Image not found",
                    details={"image_id": image_id},
                ) from exc

            logger.error("DynamoDB update_item failed", extra={"image_id": image_id})
            raise RegistryUnavailableError(
                message="Unable to update image source",
                error_code=ERROR_CODE_REGISTRY_UPDATE_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error updating source")
            raise RegistryUnavailableError(
                message="Unable to update image source",
                error_code=ERROR_CODE_REGISTRY_UPDATE_FAILED,
                details={"image_id": image_id},
            ) from exc

        previous = (response.get("Attributes") or {}).get("source")
        logger.info("Source updated", extra={"image_id": image_id})
        return previous

    def remove(self, *, image_id: str) -> None:
        """Remove a record.

        Raises:
            RegistryUnavailableError: If deletion fails
        """
        logger.debug("Removing record", extra={"image_id": image_id})

        try:
            self._db.delete_item(key={"image_id": image_id})
            logger.info("Record removed", extra={"image_id": image_id})

        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB delete_item failed", extra={"image_id": image_id})
            raise RegistryUnavailableError(
                message="Unable to delete image record",
                error_code=ERROR_CODE_REGISTRY_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error removing record")
            raise RegistryUnavailableError(
                message="Unable to delete image record",
                error_code=ERROR_CODE_REGISTRY_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

    def scan(self) -> Iterator[ImageRecord]:
        """Iterate over every record, one DynamoDB page at a time.

        Raises:
            RegistryUnavailableError: If a page cannot be read
        """
        scan_kwargs: dict[str, Any] = {}

        while True:
            try:
                response = self._db.scan(**scan_kwargs)
            except (ClientError, BotoCoreError) as exc:
                logger.error("DynamoDB scan failed")
                raise RegistryUnavailableError(
                    message="Unable to scan image records",
                    error_code=ERROR_CODE_REGISTRY_SCAN_FAILED,
                ) from exc

            for item in response.get("Items", []):
                yield self._to_record(item, image_id=item.get("image_id", ""))

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                return
            scan_kwargs["ExclusiveStartKey"] = last_evaluated_key
