"""Select the object store backend from configuration."""

import os

from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.infrastructure.local.file_image_storage import LocalImageStorage
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    DEFAULT_STORAGE_ROOT,
    ENV_IMAGE_STORAGE_BACKEND,
    ENV_IMAGE_STORAGE_ROOT,
    STORAGE_BACKEND_LOCAL,
    STORAGE_BACKEND_S3,
)


def build_image_storage() -> ImageStorageRepository:
    backend = os.getenv(ENV_IMAGE_STORAGE_BACKEND, STORAGE_BACKEND_S3).strip().lower()

    if backend == STORAGE_BACKEND_S3:
        return S3ImageStorage()

    if backend == STORAGE_BACKEND_LOCAL:
        return LocalImageStorage(os.getenv(ENV_IMAGE_STORAGE_ROOT, DEFAULT_STORAGE_ROOT))

    raise RuntimeError(
        f"{ENV_IMAGE_STORAGE_BACKEND} must be '{STORAGE_BACKEND_S3}' or '{STORAGE_BACKEND_LOCAL}'"
    )
