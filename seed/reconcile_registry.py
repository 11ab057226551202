#!/usr/bin/env python3
"""
Remove registry records whose stored object is missing.

Deletion removes the object before the record, so an interrupted delete
can leave a record behind. This script finds and removes such records.
Records claimed less than `--min-age-seconds` ago are left alone: they may
be reservations whose upload has not written its bytes yet.

Run:
    python seed/reconcile_registry.py [--dry-run] [--min-age-seconds N]
"""

import argparse
import sys
from datetime import datetime, timedelta, timezone

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_registry import DynamoDBRegistry
from core.infrastructure.storage_factory import build_image_storage
from core.models.image import ImageRecord
from core.repositories.registry_repository import ImageRegistryRepository
from core.repositories.storage_repository import ImageStorageRepository

logger = Logger(service="reconcile")

# Well above the 900 s Lambda timeout, so no in-flight upload is this old.
DEFAULT_MIN_AGE_SECONDS = 3600


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remove records without a stored image")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report orphaned records",
    )
    parser.add_argument(
        "--min-age-seconds",
        type=int,
        default=DEFAULT_MIN_AGE_SECONDS,
        help=f"Skip records claimed more recently than this (default: {DEFAULT_MIN_AGE_SECONDS})",
    )
    return parser.parse_args()


def _claimed_before(record: ImageRecord, cutoff: datetime) -> bool:
    """Records without a claim timestamp predate it and count as old."""
    if record.created_at is None:
        return True

    try:
        claimed_at = datetime.fromisoformat(record.created_at)
    except ValueError:
        logger.warning(
            "Unreadable claim timestamp, skipping",
            extra={"image_id": record.image_id, "created_at": record.created_at},
        )
        return False

    if claimed_at.tzinfo is None:
        claimed_at = claimed_at.replace(tzinfo=timezone.utc)
    return claimed_at < cutoff


def reconcile(
    registry: ImageRegistryRepository,
    storage: ImageStorageRepository,
    *,
    dry_run: bool = False,
    min_age_seconds: int = DEFAULT_MIN_AGE_SECONDS,
    now: datetime | None = None,
) -> list[str]:
    """Return the identifiers of orphaned records, removing them unless `dry_run`."""
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(seconds=min_age_seconds)
    orphans: list[str] = []

    for record in registry.scan():
        if not _claimed_before(record, cutoff):
            continue
        if storage.exists(image_id=record.image_id, extension=record.extension):
            continue

        orphans.append(record.image_id)
        logger.warning("Orphaned record", extra={"image_id": record.image_id})

        if not dry_run:
            registry.remove(image_id=record.image_id)

    return orphans


def main() -> None:
    try:
        args = parse_args()
        orphans = reconcile(
            DynamoDBRegistry(),
            build_image_storage(),
            dry_run=args.dry_run,
            min_age_seconds=args.min_age_seconds,
        )
        logger.info(
            "Reconciliation completed",
            extra={"orphans": len(orphans), "dry_run": args.dry_run},
        )
    except Exception as exc:
        logger.exception("Reconciliation failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
