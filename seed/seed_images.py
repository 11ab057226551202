#!/usr/bin/env python3
"""
Re-upload every image of a local directory through the upload endpoint.

Each file gets a new identifier; do not point this at production unless
duplicating the whole set is intended.

Run:
    python seed/seed_images.py \
      --api-url <BASE-URL> \
      --secret <SHARED-SECRET> \
      --images-dir images
"""

import argparse
import base64
from pathlib import Path
import sys
from typing import Any, cast

from aws_lambda_powertools import Logger
import requests

logger = Logger(service="seed")

UPLOAD_PATH = "/api/upload"
DEFAULT_BATCH_SIZE = 20


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Re-upload a directory of images")

    parser.add_argument(
        "--api-url",
        default="http://localhost:5000",
        help="Base URL of the image host",
    )
    parser.add_argument(
        "--secret",
        required=True,
        help="Shared secret sent in the Authorization header",
    )
    parser.add_argument(
        "--images-dir",
        type=Path,
        default=Path("images"),
        help="Directory whose files are uploaded",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help="Files per upload request",
    )

    return parser.parse_args()


def _batches(paths: list[Path], size: int) -> list[list[Path]]:
    return [paths[i : i + size] for i in range(0, len(paths), size)]


def seed_images() -> None:
    try:
        args = parse_args()

        paths = sorted(p for p in args.images_dir.iterdir() if p.is_file())
        upload_url = f"{args.api_url.rstrip('/')}{UPLOAD_PATH}"
        headers = {"Authorization": args.secret}

        logger.info(
            "Starting upload",
            extra={"upload_url": upload_url, "files": len(paths)},
        )

        for batch in _batches(paths, args.batch_size):
            payload: dict[str, Any] = {
                "images": [
                    {
                        "file": base64.b64encode(path.read_bytes()).decode("utf-8"),
                        "filename": path.name,
                    }
                    for path in batch
                ]
            }

            response = requests.post(
                upload_url,
                headers=headers,
                json=payload,
                timeout=30,
            )

            if response.status_code == 201:
                files = cast(dict[str, Any], response.json()).get("files", [])
                for path, filename in zip(batch, files):
                    logger.info("Uploaded image", extra={"path": path.name, "file": filename})
            else:
                logger.error(
                    "Failed to upload batch",
                    extra={
                        "files": [path.name for path in batch],
                        "status": response.status_code,
                        "response": response.text,
                    },
                )

        logger.info("Upload completed")

    except Exception as exc:
        logger.exception("Upload failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    seed_images()
